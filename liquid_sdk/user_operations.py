"""
UserOperation creation utilities for Liquid smart accounts
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence

from eth_abi import encode
from web3 import Web3

from .abis import ACCOUNT_FACTORY_ABI, CREATE_ACCOUNT_SIGNATURE, ENTRY_POINT_ABI, EXECUTE_BATCH_SIGNATURE
from .config import ContractAddresses, ZERO_ADDRESS
from .errors import UserOperationError
from .types import EncodedCall

logger = logging.getLogger(__name__)

# Function selector for executeBatch((address,uint256,bytes)[])
EXECUTE_BATCH_SELECTOR = Web3.keccak(text=EXECUTE_BATCH_SIGNATURE)[:4]
CREATE_ACCOUNT_SELECTOR = Web3.keccak(text=CREATE_ACCOUNT_SIGNATURE)[:4]

PLACEHOLDER_SENDERS = ("", "0x", ZERO_ADDRESS)


def _hex(value: bytes) -> str:
    return "0x" + bytes(value).hex()


@dataclass(frozen=True)
class UserOperation:
    """ERC-4337 (EntryPoint v0.6) UserOperation"""

    sender: str
    nonce: int
    init_code: bytes = b""
    call_data: bytes = b""
    call_gas_limit: int = 0
    verification_gas_limit: int = 0
    pre_verification_gas: int = 0
    max_fee_per_gas: int = 0
    max_priority_fee_per_gas: int = 0
    paymaster_and_data: bytes = b""
    signature: bytes = b""

    @property
    def is_deployment(self) -> bool:
        return len(self.init_code) > 0

    def with_signature(self, signature: bytes) -> "UserOperation":
        return replace(self, signature=bytes(signature))

    def to_tuple(self) -> tuple:
        """Positional form matching the on-chain UserOperation struct"""
        return (
            Web3.to_checksum_address(self.sender),
            self.nonce,
            self.init_code,
            self.call_data,
            self.call_gas_limit,
            self.verification_gas_limit,
            self.pre_verification_gas,
            self.max_fee_per_gas,
            self.max_priority_fee_per_gas,
            self.paymaster_and_data,
            self.signature,
        )

    def to_rpc_dict(self) -> Dict[str, str]:
        return {
            "sender": Web3.to_checksum_address(self.sender),
            "nonce": hex(self.nonce),
            "initCode": _hex(self.init_code),
            "callData": _hex(self.call_data),
            "callGasLimit": hex(self.call_gas_limit),
            "verificationGasLimit": hex(self.verification_gas_limit),
            "preVerificationGas": hex(self.pre_verification_gas),
            "maxFeePerGas": hex(self.max_fee_per_gas),
            "maxPriorityFeePerGas": hex(self.max_priority_fee_per_gas),
            "paymasterAndData": _hex(self.paymaster_and_data),
            "signature": _hex(self.signature),
        }


def compose_batch(calls: Sequence[EncodedCall]) -> bytes:
    """Encode executeBatch((address,uint256,bytes)[]) with calls in the given order"""
    encoded_params = encode(
        ["(address,uint256,bytes)[]"],
        [[(Web3.to_checksum_address(call.target), call.value, bytes(call.data)) for call in calls]],
    )
    logger.info(f"Composed batch of {len(calls)} calls")
    return EXECUTE_BATCH_SELECTOR + encoded_params


def encode_create_account(owners: Sequence[bytes], salt: int) -> bytes:
    return CREATE_ACCOUNT_SELECTOR + encode(["bytes[]", "uint256"], [list(owners), salt])


def is_placeholder_sender(sender: Optional[str]) -> bool:
    return sender is None or sender.lower() in PLACEHOLDER_SENDERS


class UserOperationBuilder:
    """Creates unsigned, unpriced UserOperations for existing or new accounts"""

    def __init__(self, chain, addresses: ContractAddresses = ContractAddresses()):
        self.chain = chain
        self.addresses = addresses

    async def build(
        self,
        sender: Optional[str],
        call_data: bytes,
        signature: bytes = b"",
        owners: Optional[List[bytes]] = None,
        salt: Optional[int] = None,
    ) -> UserOperation:
        try:
            if not is_placeholder_sender(sender):
                account = Web3.to_checksum_address(sender)
                nonce = await self._get_nonce(account)
                init_code = b""
            elif owners and salt is not None:
                account = await self._get_counterfactual_address(owners, salt)
                nonce = 0
                # initCode = factory address ++ factory calldata
                init_code = bytes.fromhex(self.addresses.account_factory[2:]) + encode_create_account(owners, salt)
                logger.info(f"New account {account} will be deployed with salt {salt}")
            else:
                raise UserOperationError("Invalid parameters for user operation creation")
        except UserOperationError:
            raise
        except Exception as e:
            raise UserOperationError(f"Failed to create user operation: {e}") from e

        return UserOperation(
            sender=account,
            nonce=nonce,
            init_code=init_code,
            call_data=bytes(call_data),
            signature=bytes(signature),
        )

    async def _get_nonce(self, account: str) -> int:
        """Get current nonce for smart account from EntryPoint"""
        nonce = await self.chain.read_contract(
            self.addresses.entry_point,
            ENTRY_POINT_ABI,
            "getNonce",
            [account, 0],  # Default key
        )
        logger.info(f"Current nonce for {account}: {nonce}")
        return int(nonce)

    async def _get_counterfactual_address(self, owners: List[bytes], salt: int) -> str:
        address = await self.chain.read_contract(
            self.addresses.account_factory,
            ACCOUNT_FACTORY_ABI,
            "getAddress",
            [list(owners), salt],
        )
        return Web3.to_checksum_address(address)
