"""
Amount, deadline and token helpers
"""

import time
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional

from .abis import ERC20_ABI
from .config import DEFAULT_DEADLINE_SECONDS, DEFAULT_SLIPPAGE_BPS, DEFAULT_TOKENS
from .types import TokenInfo

BPS_DENOMINATOR = 10000


def calculate_min_amount(amount: int, slippage_bps: int = DEFAULT_SLIPPAGE_BPS) -> int:
    """Minimum acceptable amount after slippage, rounded down"""
    return amount * (BPS_DENOMINATOR - slippage_bps) // BPS_DENOMINATOR


def calculate_deadline(seconds: int = DEFAULT_DEADLINE_SECONDS, now: Optional[float] = None) -> int:
    """Unix timestamp ``seconds`` from now"""
    if now is None:
        now = time.time()
    return int(now) + seconds


def parse_units(amount: str, decimals: int) -> int:
    """Convert a decimal string in token units to its raw integer amount"""
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}") from None
    if not value.is_finite() or value < 0:
        raise ValueError(f"Invalid amount: {amount!r}")
    raw = value.scaleb(decimals)
    if raw != raw.to_integral_value():
        raise ValueError(f"Amount {amount} has more than {decimals} decimals")
    return int(raw)


def format_units(raw: int, decimals: int) -> str:
    """Inverse of parse_units, without trailing zeros"""
    value = Decimal(raw).scaleb(-decimals)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


async def get_token_balance(chain, token_address: str, user_address: str) -> str:
    balance = await chain.read_contract(token_address, ERC20_ABI, "balanceOf", [user_address])
    return str(balance)


def get_token_list(tokens: Iterable[dict] = DEFAULT_TOKENS) -> List[TokenInfo]:
    return [TokenInfo.from_dict(token) for token in tokens]
