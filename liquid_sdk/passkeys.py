"""
Passkey (WebAuthn) signature handling for Liquid smart accounts.

Browser and platform-native passkey providers return the same information
in two shapes: the browser nests everything under ``response`` and uses
base64url, native modules put the fields at the top level and often use
plain base64. Results are parsed into one of two explicit variants at the
boundary and immediately normalized into a single ``PasskeySignature``.
"""

import base64
import binascii
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature
from cryptography.hazmat.primitives.serialization import load_der_public_key
from eth_abi import encode
from hexbytes import HexBytes

from .errors import PassKeyError, SignatureDecodingError

logger = logging.getLogger(__name__)

WEBAUTHN_GET_TYPE = '"type":"webauthn.get"'
CHALLENGE_KEY = '"challenge":"'

# Order of the P-256 curve; the wallet only accepts signatures with s <= n/2
P256_N = 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551

_NON_BASE64_CHARS = re.compile(r"[^A-Za-z0-9+/=_-]")

WEBAUTHN_AUTH_TYPE = "(bytes,string,uint256,uint256,uint256,uint256)"
SIGNATURE_WRAPPER_TYPE = "(uint256,bytes)"


def to_canonical_base64(value: Union[str, bytes]) -> str:
    """Canonical padded base64 for base64 or base64url input.

    Characters outside both alphabets (whitespace, line breaks) are dropped.
    Applying it twice gives the same result as applying it once.
    """
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("ascii", errors="replace")
    if not isinstance(value, str):
        raise SignatureDecodingError(f"Expected base64 text, got {type(value).__name__}")

    cleaned = _NON_BASE64_CHARS.sub("", value).rstrip("=")
    cleaned = cleaned.replace("-", "+").replace("_", "/")
    if not cleaned or "=" in cleaned or len(cleaned) % 4 == 1:
        raise SignatureDecodingError(f"Invalid base64 content: {value[:32]!r}")
    return cleaned + "=" * (-len(cleaned) % 4)


def decode_base64(value: Union[str, bytes]) -> bytes:
    canonical = to_canonical_base64(value)
    try:
        return base64.b64decode(canonical, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SignatureDecodingError(f"Invalid base64 content: {e}") from e


def base64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _field(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not value:
        raise SignatureDecodingError(f"Passkey result is missing '{key}'")
    return value


@dataclass(frozen=True)
class WebAuthenticationResult:
    """Assertion returned by the browser ``navigator.credentials.get``"""

    id: str
    raw_id: str
    authenticator_data: str
    client_data_json: str
    signature: str
    user_handle: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WebAuthenticationResult":
        response = data.get("response")
        if not isinstance(response, dict):
            raise SignatureDecodingError("Web passkey result has no 'response' object")
        return cls(
            id=data.get("id", ""),
            raw_id=data.get("rawId", ""),
            authenticator_data=_field(response, "authenticatorData"),
            client_data_json=_field(response, "clientDataJSON"),
            signature=_field(response, "signature"),
            user_handle=response.get("userHandle"),
        )


@dataclass(frozen=True)
class NativeAuthenticationResult:
    """Assertion returned by a platform-native passkey module"""

    credential_id: str
    authenticator_data: str
    client_data_json: str
    signature: str
    user_handle: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NativeAuthenticationResult":
        return cls(
            credential_id=data.get("credentialId", ""),
            authenticator_data=_field(data, "authenticatorData"),
            client_data_json=_field(data, "clientDataJSON"),
            signature=_field(data, "signature"),
            user_handle=data.get("userHandle"),
        )


AuthenticationResult = Union[WebAuthenticationResult, NativeAuthenticationResult]


@dataclass(frozen=True)
class WebRegistrationResult:
    id: str
    raw_id: str
    attestation_object: str
    client_data_json: str


@dataclass(frozen=True)
class NativeRegistrationResult:
    credential_id: str
    attestation_object: str
    client_data_json: str


RegistrationResult = Union[WebRegistrationResult, NativeRegistrationResult]


def parse_authentication_result(raw: Union[Dict[str, Any], AuthenticationResult]) -> AuthenticationResult:
    if isinstance(raw, (WebAuthenticationResult, NativeAuthenticationResult)):
        return raw
    if not isinstance(raw, dict):
        raise SignatureDecodingError(f"Unsupported passkey result: {type(raw).__name__}")
    if "response" in raw:
        return WebAuthenticationResult.from_dict(raw)
    return NativeAuthenticationResult.from_dict(raw)


def parse_registration_result(raw: Dict[str, Any]) -> RegistrationResult:
    if not isinstance(raw, dict):
        raise PassKeyError(f"Unsupported registration result: {type(raw).__name__}")
    try:
        if "response" in raw:
            response = raw["response"]
            return WebRegistrationResult(
                id=raw["id"],
                raw_id=raw.get("rawId", raw["id"]),
                attestation_object=response["attestationObject"],
                client_data_json=response["clientDataJSON"],
            )
        return NativeRegistrationResult(
            credential_id=raw["credentialId"],
            attestation_object=raw["attestationObject"],
            client_data_json=raw["clientDataJSON"],
        )
    except (KeyError, TypeError) as e:
        raise PassKeyError(f"Registration result is missing {e}") from e


@dataclass(frozen=True)
class WebAuthnAuth:
    authenticator_data: str  # 0x-prefixed hex
    client_data_json: str
    challenge_index: int
    type_index: int
    user_verification_required: bool = False


@dataclass(frozen=True)
class PasskeySignature:
    signature_hex: str  # 0x-prefixed DER signature
    webauthn: WebAuthnAuth

    def to_dict(self) -> Dict[str, Any]:
        return {
            "signatureHex": self.signature_hex,
            "webauthn": {
                "authenticatorData": self.webauthn.authenticator_data,
                "clientDataJSON": self.webauthn.client_data_json,
                "challengeIndex": self.webauthn.challenge_index,
                "typeIndex": self.webauthn.type_index,
                "userVerificationRequired": self.webauthn.user_verification_required,
            },
        }


def _challenge_bytes(challenge: Union[str, bytes]) -> bytes:
    if isinstance(challenge, (bytes, bytearray)):
        return bytes(challenge)
    try:
        return bytes(HexBytes(challenge))
    except (TypeError, ValueError) as e:
        raise SignatureDecodingError(f"Challenge is not valid hex: {challenge!r}") from e


def find_challenge_index(client_data_json: bytes, challenge: Union[str, bytes]) -> int:
    """Byte offset of the challenge inside clientDataJSON.

    The authenticator embeds the challenge base64url-encoded, so
    ``client_data_json[index:index + len(base64url(challenge))]`` decodes
    back to exactly the challenge bytes.
    """
    needle = base64url_encode(_challenge_bytes(challenge)).encode("ascii")
    index = client_data_json.find(needle)
    if index < 0:
        raise SignatureDecodingError("Challenge not found in clientDataJSON")
    return index


class PasskeySignerAdapter:
    """Normalizes passkey assertions into the smart account signature format"""

    def normalize(self, raw, challenge: Optional[Union[str, bytes]] = None) -> PasskeySignature:
        if isinstance(raw, PasskeySignature):
            return raw
        if challenge is None:
            raise SignatureDecodingError("A challenge is required to normalize a passkey assertion")

        result = parse_authentication_result(raw)
        signature = decode_base64(result.signature)
        authenticator_data = decode_base64(result.authenticator_data)
        client_data = decode_base64(result.client_data_json)
        try:
            client_data_json = client_data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SignatureDecodingError(f"clientDataJSON is not UTF-8: {e}") from e

        challenge_index = find_challenge_index(client_data, challenge)
        type_index = client_data.find(WEBAUTHN_GET_TYPE.encode("ascii"))
        if type_index < 0:
            raise SignatureDecodingError(f"clientDataJSON has no {WEBAUTHN_GET_TYPE}")

        logger.info(f"Normalized {type(result).__name__} ({len(signature)} byte signature)")
        return PasskeySignature(
            signature_hex="0x" + signature.hex(),
            webauthn=WebAuthnAuth(
                authenticator_data="0x" + authenticator_data.hex(),
                client_data_json=client_data_json,
                challenge_index=challenge_index,
                type_index=type_index,
                user_verification_required=False,
            ),
        )

    def encode_signature(self, signature: PasskeySignature, owner_index: int = 0) -> bytes:
        """ABI-encode SignatureWrapper(ownerIndex, abi.encode(WebAuthnAuth)).

        The on-chain verifier expects challengeIndex to point at the
        ``"challenge":"`` key, so the value offset is moved back to it.
        """
        try:
            r, s = decode_dss_signature(bytes(HexBytes(signature.signature_hex)))
        except ValueError as e:
            raise SignatureDecodingError(f"Signature is not a DER-encoded ECDSA signature: {e}") from e
        if s > P256_N // 2:
            s = P256_N - s

        auth = signature.webauthn
        challenge_key_index = auth.challenge_index - len(CHALLENGE_KEY)
        client_data = auth.client_data_json.encode("utf-8")
        if challenge_key_index < 0 or not client_data.startswith(CHALLENGE_KEY.encode("ascii"), challenge_key_index):
            raise SignatureDecodingError(f"clientDataJSON has no {CHALLENGE_KEY} before the challenge")

        signature_data = encode(
            [WEBAUTHN_AUTH_TYPE],
            [(
                bytes(HexBytes(auth.authenticator_data)),
                auth.client_data_json,
                challenge_key_index,
                auth.type_index,
                r,
                s,
            )],
        )
        return encode([SIGNATURE_WRAPPER_TYPE], [(owner_index, signature_data)])


def public_key_to_owner(public_key: str) -> bytes:
    """64-byte x || y smart account owner for a base64 P-256 public key.

    Accepts raw (64 bytes), uncompressed SEC1 (65 bytes) or DER
    SubjectPublicKeyInfo encodings.
    """
    try:
        raw = decode_base64(public_key)
    except SignatureDecodingError as e:
        raise PassKeyError(f"Invalid public key: {e.detail}") from e

    if len(raw) == 64:
        return raw
    if len(raw) == 65 and raw[0] == 0x04:
        return raw[1:]

    try:
        key = load_der_public_key(raw)
    except ValueError as e:
        raise PassKeyError(f"Unsupported public key encoding ({len(raw)} bytes)") from e
    if not isinstance(key, ec.EllipticCurvePublicKey):
        raise PassKeyError("Passkey public key is not an elliptic curve key")

    numbers = key.public_numbers()
    return numbers.x.to_bytes(32, "big") + numbers.y.to_bytes(32, "big")


class PassKeyImplementation(ABC):
    """Platform passkey provider (browser bridge, mobile module, test double)"""

    @abstractmethod
    async def create_credential(self, options: Dict[str, Any]) -> Dict[str, Any]:
        """Create a credential for registration options, return the raw result"""

    @abstractmethod
    async def get_assertion(self, options: Dict[str, Any]) -> Dict[str, Any]:
        """Sign the challenge in authentication options, return the raw result"""
