"""
Error taxonomy for the Liquid SDK
"""


class SDKError(Exception):
    """Base class for every error raised by the SDK.

    ``detail`` keeps the message without the kind prefix. Errors re-raised by
    the facade start with the failing operation instead of the kind prefix.
    """

    prefix = None

    def __init__(self, message: str):
        self.detail = message
        super().__init__(f"{self.prefix}: {message}" if self.prefix else message)

    def with_context(self, context: str) -> "SDKError":
        """Return an error of the same kind whose message is ``"<context>: <self>"``"""
        error = self.__class__.__new__(self.__class__)
        error.detail = f"{context}: {self}"
        Exception.__init__(error, error.detail)
        return error


class PassKeyError(SDKError):
    prefix = "PassKey error"


class VerificationError(PassKeyError):
    """The backend rejected an attestation or an assertion"""


class UserOperationError(SDKError):
    prefix = "User operation error"


class AerodromeError(SDKError):
    prefix = "Aerodrome error"


class EncodingError(SDKError):
    prefix = "Encoding error"


class SignatureDecodingError(PassKeyError):
    prefix = "Signature decoding error"


class BackendError(SDKError):
    prefix = "Backend error"


class UnsupportedEnvironmentError(SDKError):
    def __init__(self, feature: str):
        super().__init__(f"{feature} is not supported in this environment")


def rewrap(error: Exception, context: str, default=SDKError) -> SDKError:
    """Re-raise helper: keep SDK error kinds, wrap anything else in ``default``"""
    if isinstance(error, SDKError):
        return error.with_context(context)
    return default(str(error)).with_context(context)
