"""Data structures shared across the SDK: tokens, pools and user actions."""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Union

from .errors import EncodingError


@dataclass(frozen=True)
class TokenInfo:
    address: str
    symbol: str
    decimals: int

    @classmethod
    def from_dict(cls, data: dict) -> "TokenInfo":
        try:
            return cls(
                address=data["address"],
                symbol=data.get("symbol", ""),
                decimals=int(data["decimals"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise EncodingError(f"Invalid token info {data!r}: {e}") from e


@dataclass(frozen=True)
class PoolDetails:
    """Snapshot of one Aerodrome pool the user holds LP tokens in.

    Amounts are decimal strings of raw on-chain integers.
    """

    pool_address: str
    token0: str
    token1: str
    is_stable: bool
    user_lp_balance: str
    reserve_token0: str
    reserve_token1: str
    total_supply: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class EncodedCall:
    """One (target, value, data) entry of a smart account batch"""

    target: str
    value: int
    data: bytes

    def to_tuple(self) -> tuple:
        return (self.target, self.value, self.data)


class ActionType(str, Enum):
    SWAP = "SWAP"
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    APPROVE = "APPROVE"
    WRAP = "WRAP"


@dataclass(frozen=True)
class Swap:
    token_in: TokenInfo
    token_out: TokenInfo
    amount_in: int
    is_stable: bool
    recipient: Optional[str] = None

    type = ActionType.SWAP


@dataclass(frozen=True)
class Deposit:
    token_a: TokenInfo
    token_b: TokenInfo
    amount_a: int
    amount_b: int
    is_stable: bool
    recipient: Optional[str] = None

    type = ActionType.DEPOSIT


@dataclass(frozen=True)
class Withdraw:
    token_a: TokenInfo
    token_b: TokenInfo
    liquidity: int
    amount_a_min: int
    amount_b_min: int
    is_stable: bool
    recipient: Optional[str] = None

    type = ActionType.WITHDRAW


@dataclass(frozen=True)
class Approve:
    token: Optional[str] = None
    spender: Optional[str] = None
    amount: Optional[int] = None

    type = ActionType.APPROVE


@dataclass(frozen=True)
class Wrap:
    amount: int

    type = ActionType.WRAP


Action = Union[Swap, Deposit, Withdraw, Approve, Wrap]


def _token(data: dict, key: str) -> TokenInfo:
    value = data.get(key)
    if isinstance(value, TokenInfo):
        return value
    if not isinstance(value, dict):
        raise EncodingError(f"Missing token field '{key}'")
    return TokenInfo.from_dict(value)


def _required(data: dict, key: str):
    if data.get(key) is None:
        raise EncodingError(f"Missing field '{key}'")
    return data[key]


def _flag(data: dict, key: str) -> bool:
    value = _required(data, key)
    if not isinstance(value, bool):
        raise EncodingError(f"Field '{key}' must be a boolean, got {value!r}")
    return value


def parse_action(data: dict) -> Action:
    """Build an action from its tagged JSON form, e.g. ``{"type": "SWAP", ...}``

    Accepts both camelCase (``tokenIn``) and snake_case (``token_in``) keys and
    ``to`` as an alias for ``recipient``.
    """
    if not isinstance(data, dict):
        raise EncodingError(f"Action must be a mapping, got {type(data).__name__}")

    fields = {_snake(key): value for key, value in data.items()}
    recipient = fields.get("recipient") or fields.get("to")

    try:
        action_type = ActionType(str(fields.get("type", "")).upper())
    except ValueError:
        raise EncodingError(f"Unknown action type: {data.get('type')!r}") from None

    if action_type is ActionType.SWAP:
        return Swap(
            token_in=_token(fields, "token_in"),
            token_out=_token(fields, "token_out"),
            amount_in=_required(fields, "amount_in"),
            is_stable=_flag(fields, "is_stable"),
            recipient=recipient,
        )
    if action_type is ActionType.DEPOSIT:
        return Deposit(
            token_a=_token(fields, "token_a"),
            token_b=_token(fields, "token_b"),
            amount_a=_required(fields, "amount_a"),
            amount_b=_required(fields, "amount_b"),
            is_stable=_flag(fields, "is_stable"),
            recipient=recipient,
        )
    if action_type is ActionType.WITHDRAW:
        return Withdraw(
            token_a=_token(fields, "token_a"),
            token_b=_token(fields, "token_b"),
            liquidity=_required(fields, "liquidity"),
            amount_a_min=_required(fields, "amount_a_min"),
            amount_b_min=_required(fields, "amount_b_min"),
            is_stable=_flag(fields, "is_stable"),
            recipient=recipient,
        )
    if action_type is ActionType.APPROVE:
        return Approve(
            token=fields.get("token"),
            spender=fields.get("spender"),
            amount=fields.get("amount"),
        )
    return Wrap(amount=_required(fields, "amount"))


def _snake(name: str) -> str:
    out = []
    for i, char in enumerate(name):
        if char.isupper():
            # amountAMin -> amount_a_min
            if i:
                out.append("_")
            out.append(char.lower())
        else:
            out.append(char)
    return "".join(out)
