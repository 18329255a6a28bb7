"""
Encoding of user actions into smart account calls
"""

import logging
from typing import Optional

from eth_abi import encode
from web3 import Web3

from .abis import (
    ADD_LIQUIDITY_SIGNATURE,
    APPROVE_SIGNATURE,
    CONNECTOR_EXECUTE_SIGNATURE,
    REMOVE_LIQUIDITY_SIGNATURE,
    SWAP_SIGNATURE,
    WETH_DEPOSIT_SIGNATURE,
)
from .config import ContractAddresses, DEFAULT_DEADLINE_SECONDS, DEFAULT_SLIPPAGE_BPS
from .errors import EncodingError
from .types import Action, Approve, Deposit, EncodedCall, Swap, TokenInfo, Withdraw, Wrap
from .utils import calculate_deadline, calculate_min_amount

logger = logging.getLogger(__name__)


def function_selector(signature: str) -> bytes:
    return Web3.keccak(text=signature)[:4]


def encode_function_call(signature: str, arg_types: list, args: list) -> bytes:
    """selector(signature) + abi-encoded args"""
    return function_selector(signature) + encode(arg_types, args)


def _checksum(value, name: str) -> str:
    if not isinstance(value, str) or not Web3.is_address(value):
        raise EncodingError(f"Invalid address for '{name}': {value!r}")
    return Web3.to_checksum_address(value)


def _amount(value, name: str) -> int:
    # bool is an int subclass, floats lose precision
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"Amount '{name}' must be an integer, got {value!r}")
    if value < 0 or value >= 2**256:
        raise EncodingError(f"Amount '{name}' out of range: {value}")
    return value


def _stable(value) -> bool:
    if not isinstance(value, bool):
        raise EncodingError(f"'is_stable' must be a boolean, got {value!r}")
    return value


def _token_address(token: TokenInfo, name: str) -> str:
    if not isinstance(token, TokenInfo):
        raise EncodingError(f"Missing token '{name}'")
    return _checksum(token.address, name)


class ActionEncoder:
    """Turns one action into one ``EncodedCall``.

    Swap and liquidity actions are routed through the connector plugin, which
    forwards the inner call to the Aerodrome connector. Approve and wrap hit
    the token contract directly.
    """

    def __init__(
        self,
        addresses: ContractAddresses = ContractAddresses(),
        slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
        deadline_seconds: int = DEFAULT_DEADLINE_SECONDS,
    ):
        self.addresses = addresses
        self.slippage_bps = slippage_bps
        self.deadline_seconds = deadline_seconds

    def encode(self, action: Action, recipient: Optional[str] = None) -> EncodedCall:
        if isinstance(action, Wrap):
            return EncodedCall(
                target=Web3.to_checksum_address(self.addresses.weth),
                value=_amount(action.amount, "amount"),
                data=function_selector(WETH_DEPOSIT_SIGNATURE),
            )

        if isinstance(action, Approve):
            if action.token is None or action.spender is None or action.amount is None:
                raise EncodingError("Approve action requires token, spender and amount")
            data = encode_function_call(
                APPROVE_SIGNATURE,
                ["address", "uint256"],
                [_checksum(action.spender, "spender"), _amount(action.amount, "amount")],
            )
            return EncodedCall(target=_checksum(action.token, "token"), value=0, data=data)

        if isinstance(action, Swap):
            inner = self._encode_swap(action, recipient)
        elif isinstance(action, Deposit):
            inner = self._encode_deposit(action, recipient)
        elif isinstance(action, Withdraw):
            inner = self._encode_withdraw(action, recipient)
        else:
            raise EncodingError(f"Unknown action type: {type(action).__name__}")

        return EncodedCall(
            target=Web3.to_checksum_address(self.addresses.connector_plugin),
            value=0,
            data=encode_function_call(
                CONNECTOR_EXECUTE_SIGNATURE,
                ["address", "bytes"],
                [Web3.to_checksum_address(self.addresses.aerodrome_connector), inner],
            ),
        )

    def _recipient(self, action, recipient: Optional[str]) -> str:
        to = action.recipient or recipient
        if to is None:
            raise EncodingError(f"{action.type.value} action has no recipient")
        return _checksum(to, "recipient")

    def _deadline(self) -> int:
        return calculate_deadline(self.deadline_seconds)

    def _encode_swap(self, action: Swap, recipient: Optional[str]) -> bytes:
        amount_in = _amount(action.amount_in, "amount_in")
        min_return = calculate_min_amount(amount_in, self.slippage_bps)
        route = (
            _token_address(action.token_in, "token_in"),
            _token_address(action.token_out, "token_out"),
            _stable(action.is_stable),
        )
        logger.debug(f"Swap {amount_in} {action.token_in.symbol} -> {action.token_out.symbol}, min {min_return}")
        return encode_function_call(
            SWAP_SIGNATURE,
            ["uint256", "uint256", "(address,address,bool)[]", "address", "uint256"],
            [amount_in, min_return, [route], self._recipient(action, recipient), self._deadline()],
        )

    def _encode_deposit(self, action: Deposit, recipient: Optional[str]) -> bytes:
        amount_a = _amount(action.amount_a, "amount_a")
        amount_b = _amount(action.amount_b, "amount_b")
        return encode_function_call(
            ADD_LIQUIDITY_SIGNATURE,
            ["address", "address", "bool", "uint256", "uint256", "uint256", "uint256", "address", "uint256"],
            [
                _token_address(action.token_a, "token_a"),
                _token_address(action.token_b, "token_b"),
                _stable(action.is_stable),
                amount_a,
                amount_b,
                calculate_min_amount(amount_a, self.slippage_bps),
                calculate_min_amount(amount_b, self.slippage_bps),
                self._recipient(action, recipient),
                self._deadline(),
            ],
        )

    def _encode_withdraw(self, action: Withdraw, recipient: Optional[str]) -> bytes:
        return encode_function_call(
            REMOVE_LIQUIDITY_SIGNATURE,
            ["address", "address", "bool", "uint256", "uint256", "uint256", "address", "uint256"],
            [
                _token_address(action.token_a, "token_a"),
                _token_address(action.token_b, "token_b"),
                _stable(action.is_stable),
                _amount(action.liquidity, "liquidity"),
                calculate_min_amount(_amount(action.amount_a_min, "amount_a_min"), self.slippage_bps),
                calculate_min_amount(_amount(action.amount_b_min, "amount_b_min"), self.slippage_bps),
                self._recipient(action, recipient),
                self._deadline(),
            ],
        )
