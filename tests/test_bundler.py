"""Tests for the bundler JSON-RPC client."""

import pytest
import requests

from liquid_sdk.bundler import DUMMY_SIGNATURE, BundlerClient, convert_user_operation_to_bundler_format
from liquid_sdk.config import ENTRY_POINT_V06
from liquid_sdk.errors import UserOperationError
from liquid_sdk.user_operations import UserOperation

from fakes import ACCOUNT, USER_OP_HASH, FakeResponse

USER_OP = UserOperation(sender=ACCOUNT, nonce=1, call_data=b"\x01", signature=b"\x99")


@pytest.fixture
def posted(monkeypatch):
    """Captures bundler requests and answers with the queued responses"""
    state = {"requests": [], "responses": []}

    def fake_post(url, json=None, headers=None, timeout=None):
        state["requests"].append((url, json))
        return state["responses"].pop(0)

    monkeypatch.setattr(requests, "post", fake_post)
    return state


def test_bundler_format_keeps_signature():
    unsigned = UserOperation(sender=ACCOUNT, nonce=1)

    assert convert_user_operation_to_bundler_format(unsigned)["signature"] == "0x"
    assert convert_user_operation_to_bundler_format(USER_OP)["signature"] == "0x99"


@pytest.mark.asyncio
async def test_estimate_simulates_unsigned_operation_with_dummy_signature(bundler_config, posted):
    posted["responses"].append(FakeResponse(payload={"jsonrpc": "2.0", "id": 1, "result": {}}))

    await BundlerClient(bundler_config).estimate_user_operation_gas(UserOperation(sender=ACCOUNT, nonce=1))

    _, payload = posted["requests"][0]
    assert payload["params"][0]["signature"] == DUMMY_SIGNATURE


@pytest.mark.asyncio
async def test_send_unsigned_operation_keeps_empty_signature(bundler_config, posted):
    posted["responses"].append(FakeResponse(payload={"jsonrpc": "2.0", "id": 1, "result": USER_OP_HASH}))

    await BundlerClient(bundler_config).send_user_operation(UserOperation(sender=ACCOUNT, nonce=0, init_code=b"\x01"))

    _, payload = posted["requests"][0]
    assert payload["params"][0]["signature"] == "0x"
    assert payload["params"][0]["initCode"] == "0x01"


@pytest.mark.asyncio
async def test_send_user_operation_returns_hash(bundler_config, posted):
    posted["responses"].append(FakeResponse(payload={"jsonrpc": "2.0", "id": 1, "result": USER_OP_HASH}))

    result = await BundlerClient(bundler_config).send_user_operation(USER_OP)

    assert result == USER_OP_HASH
    url, payload = posted["requests"][0]
    assert url == bundler_config.bundler_url
    assert payload["method"] == "eth_sendUserOperation"
    assert payload["params"][0]["sender"].lower() == ACCOUNT
    assert payload["params"][1] == ENTRY_POINT_V06


@pytest.mark.asyncio
async def test_bundler_error_is_surfaced_verbatim(bundler_config, posted):
    posted["responses"].append(
        FakeResponse(payload={"jsonrpc": "2.0", "id": 1, "error": {"code": -32500, "message": "AA25 invalid account nonce"}})
    )

    with pytest.raises(UserOperationError, match="AA25 invalid account nonce"):
        await BundlerClient(bundler_config).send_user_operation(USER_OP)


@pytest.mark.asyncio
async def test_http_failure_raises(bundler_config, posted):
    posted["responses"].append(FakeResponse(status_code=502))

    with pytest.raises(UserOperationError, match="HTTP 502"):
        await BundlerClient(bundler_config).estimate_user_operation_gas(USER_OP)


@pytest.mark.asyncio
async def test_pending_receipt_is_none(bundler_config, posted):
    posted["responses"].append(FakeResponse(payload={"jsonrpc": "2.0", "id": 1, "result": None}))

    assert await BundlerClient(bundler_config).get_user_operation_receipt(USER_OP_HASH) is None


def test_bundler_client_requires_url(direct_config):
    with pytest.raises(ValueError):
        BundlerClient(direct_config)
