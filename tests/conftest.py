"""Pytest configuration and fixtures."""

import pytest

from liquid_sdk.config import SDKConfig
from liquid_sdk.types import TokenInfo

from fakes import RELAYER_KEY, FakeAPI, FakeBundler, FakeChain, FakePasskeys, default_chain_responses


@pytest.fixture
def token_a():
    return TokenInfo(address="0x000000000000000000000000000000000000aaaa", symbol="AAA", decimals=18)


@pytest.fixture
def token_b():
    return TokenInfo(address="0x000000000000000000000000000000000000bbbb", symbol="BBB", decimals=18)


@pytest.fixture
def chain():
    return FakeChain(default_chain_responses())


@pytest.fixture
def bundler():
    return FakeBundler()


@pytest.fixture
def passkeys():
    return FakePasskeys()


@pytest.fixture
def api(passkeys):
    return FakeAPI(public_key_b64=passkeys.public_key_b64)


@pytest.fixture
def direct_config():
    return SDKConfig(
        rpc_url="http://127.0.0.1:8545",
        api_base_url="https://api.liquid.test",
        api_key="test-key",
        bundler_url=None,
        relayer_private_key=RELAYER_KEY,
    )


@pytest.fixture
def bundler_config():
    return SDKConfig(
        rpc_url="http://127.0.0.1:8545",
        api_base_url="https://api.liquid.test",
        api_key="test-key",
        bundler_url="https://bundler.liquid.test/rpc",
        relayer_private_key=None,
        receipt_poll_interval=0,
    )
