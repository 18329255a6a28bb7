"""Tests for error kinds and operation context."""

from liquid_sdk.errors import AerodromeError, SDKError, UserOperationError, VerificationError, rewrap


def test_kind_prefix_on_direct_errors():
    error = UserOperationError("Failed to estimate user operation gas: AA23 reverted")

    assert str(error) == "User operation error: Failed to estimate user operation gas: AA23 reverted"
    assert error.detail == "Failed to estimate user operation gas: AA23 reverted"


def test_context_comes_first_and_kind_is_kept():
    error = rewrap(VerificationError("Authentication failed"), "Failed to execute strategy")

    assert isinstance(error, VerificationError)
    assert str(error) == "Failed to execute strategy: PassKey error: Authentication failed"


def test_foreign_errors_take_the_default_kind():
    error = rewrap(ConnectionError("node unreachable"), "Failed to get user pools", AerodromeError)

    assert isinstance(error, AerodromeError)
    assert str(error).startswith("Failed to get user pools: ")


def test_nested_context():
    error = rewrap(rewrap(RuntimeError("boom"), "Failed to deploy smart account"), "Failed to create smart account")

    assert type(error) is SDKError
    assert str(error) == "Failed to create smart account: Failed to deploy smart account: boom"
