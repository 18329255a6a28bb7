"""Tests for amount and deadline helpers."""

import pytest

from liquid_sdk.utils import calculate_deadline, calculate_min_amount, format_units, get_token_list, parse_units


@pytest.mark.parametrize("amount", [1, 7, 999, 1000, 10**6 + 3, 123456789 * 10**18])
def test_min_amount_is_floor_of_slippage_fraction(amount):
    assert calculate_min_amount(amount) == amount * 9980 // 10000


def test_min_amount_custom_slippage():
    assert calculate_min_amount(10000, slippage_bps=2) == 9998
    assert calculate_min_amount(1000, slippage_bps=0) == 1000


def test_deadline_offset():
    assert calculate_deadline(1200, now=1_700_000_000.9) == 1_700_001_200


def test_parse_units():
    assert parse_units("1.5", 18) == 15 * 10**17
    assert parse_units("100", 6) == 100_000_000


def test_parse_units_rejects_excess_precision():
    with pytest.raises(ValueError):
        parse_units("0.0000001", 6)


def test_parse_units_rejects_garbage():
    with pytest.raises(ValueError):
        parse_units("abc", 18)


def test_format_units():
    assert format_units(15 * 10**17, 18) == "1.5"
    assert format_units(100_000_000, 6) == "100"


def test_default_token_list():
    symbols = {token.symbol: token.decimals for token in get_token_list()}
    assert symbols == {"WETH": 18, "USDC": 6}
