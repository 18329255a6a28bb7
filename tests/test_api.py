"""Tests for the Liquid backend client."""

import pytest
import requests

from liquid_sdk.api import LiquidAPI
from liquid_sdk.errors import BackendError

from fakes import FakeResponse


@pytest.fixture
def backend(monkeypatch):
    state = {"requests": [], "response": FakeResponse(payload={"success": True})}

    def fake_request(method, url, **kwargs):
        state["requests"].append((method, url, kwargs))
        response = state["response"]
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(requests, "request", fake_request)
    return state


@pytest.fixture
def client():
    return LiquidAPI("https://api.liquid.test/", "secret-key")


@pytest.mark.asyncio
async def test_registration_options_query(client, backend):
    backend["response"] = FakeResponse(payload={"challenge": "abc"})

    assert await client.get_registration_options("alice") == {"challenge": "abc"}

    method, url, kwargs = backend["requests"][0]
    assert method == "GET"
    assert url == "https://api.liquid.test/registration/options"
    assert kwargs["params"] == {"user": "alice"}


@pytest.mark.asyncio
async def test_verify_authentication_body(client, backend):
    await client.verify_authentication("alice", {"id": "cred-1"})

    method, url, kwargs = backend["requests"][0]
    assert method == "POST"
    assert url.endswith("/authentication/verify")
    assert kwargs["json"] == {"userName": "alice", "authenticationResponse": {"id": "cred-1"}}


@pytest.mark.asyncio
async def test_update_user_address_sends_api_key(client, backend):
    await client.update_user_address("alice", "0x1212121212121212121212121212121212121212")

    method, _, kwargs = backend["requests"][0]
    assert method == "PUT"
    assert kwargs["headers"]["X-API-Key"] == "secret-key"
    assert kwargs["json"]["userAddress"] == "0x1212121212121212121212121212121212121212"


@pytest.mark.asyncio
async def test_other_requests_do_not_send_api_key(client, backend):
    await client.get_authentication_options("alice")

    assert "X-API-Key" not in backend["requests"][0][2]["headers"]


@pytest.mark.asyncio
async def test_error_body_message_is_used(client, backend):
    backend["response"] = FakeResponse(status_code=400, payload={"error": "User not found"})

    with pytest.raises(BackendError, match="User not found"):
        await client.get_authentication_options("bob")


@pytest.mark.asyncio
async def test_non_json_error_falls_back_to_status(client, backend):
    backend["response"] = FakeResponse(status_code=503, text="Service Unavailable")

    with pytest.raises(BackendError, match="HTTP error! status: 503"):
        await client.get_registration_options("alice")


@pytest.mark.asyncio
async def test_connection_error(client, backend):
    backend["response"] = requests.ConnectionError("connection refused")

    with pytest.raises(BackendError, match="connection refused"):
        await client.verify_registration("alice", {})
