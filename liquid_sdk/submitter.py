"""
Submission of signed UserOperations, either straight to the entry point
or through a bundler
"""

import asyncio
import logging
import time

from eth_abi import encode
from eth_account import Account
from web3 import Web3

from .abis import HANDLE_OPS_SIGNATURE, USER_OPERATION_TYPE
from .config import ContractAddresses
from .errors import UserOperationError
from .user_operations import UserOperation

logger = logging.getLogger(__name__)

HANDLE_OPS_SELECTOR = Web3.keccak(text=HANDLE_OPS_SIGNATURE)[:4]

# Entry point bookkeeping on top of the UserOperation's own limits
HANDLE_OPS_GAS_OVERHEAD = 100000


def encode_handle_ops(user_ops, beneficiary: str) -> bytes:
    return HANDLE_OPS_SELECTOR + encode(
        [f"{USER_OPERATION_TYPE}[]", "address"],
        [[op.to_tuple() for op in user_ops], Web3.to_checksum_address(beneficiary)],
    )


class EntryPointSubmitter:
    """Sends handleOps([userOp], beneficiary) as a relayer-signed transaction"""

    def __init__(
        self,
        chain,
        relayer_private_key: str,
        chain_id: int,
        addresses: ContractAddresses = ContractAddresses(),
        receipt_timeout: float = 120,
    ):
        if not relayer_private_key:
            raise ValueError("relayer_private_key is required for direct entry point submission")
        self.chain = chain
        self.relayer = Account.from_key(relayer_private_key)
        self.chain_id = chain_id
        self.addresses = addresses
        self.receipt_timeout = receipt_timeout

    async def submit(self, user_op: UserOperation) -> str:
        """Submit and return the transaction hash"""
        try:
            call_data = encode_handle_ops([user_op], self.relayer.address)
            gas_price = user_op.max_fee_per_gas or await self.chain.get_gas_price()
            tx = {
                "to": Web3.to_checksum_address(self.addresses.entry_point),
                "data": Web3.to_hex(call_data),
                "value": 0,
                "gas": (
                    user_op.call_gas_limit
                    + user_op.verification_gas_limit
                    + user_op.pre_verification_gas
                    + HANDLE_OPS_GAS_OVERHEAD
                ),
                "gasPrice": gas_price,
                "nonce": await self.chain.get_transaction_count(self.relayer.address),
                "chainId": self.chain_id,
            }
            signed_tx = self.relayer.sign_transaction(tx)
            tx_hash = await self.chain.send_raw_transaction(signed_tx.raw_transaction)
        except Exception as e:
            logger.error(f"handleOps submission failed for {user_op.sender}: {e}")
            raise UserOperationError(f"Failed to send user operation: {e}") from e

        logger.info(f"handleOps submitted for {user_op.sender}: {tx_hash}")
        return tx_hash

    async def await_receipt(self, tx_hash: str) -> str:
        try:
            receipt = await self.chain.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        except Exception as e:
            raise UserOperationError(f"Failed to get receipt for {tx_hash}: {e}") from e

        if receipt.get("status") != 1:
            raise UserOperationError(f"Transaction {tx_hash} reverted")
        return tx_hash


class BundlerSubmitter:
    """Sends UserOperations through a bundler and polls for their receipt"""

    def __init__(self, bundler_client, receipt_timeout: float = 120, poll_interval: float = 2.0):
        self.bundler_client = bundler_client
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval

    async def submit(self, user_op: UserOperation) -> str:
        """Submit and return the UserOperation hash"""
        user_op_hash = await self.bundler_client.send_user_operation(user_op)
        if not user_op_hash:
            raise UserOperationError("Failed to send user operation: bundler returned no hash")
        return user_op_hash

    async def await_receipt(self, user_op_hash: str) -> str:
        """Poll until the operation is mined and return its transaction hash"""
        deadline = time.monotonic() + self.receipt_timeout
        while True:
            receipt = await self.bundler_client.get_user_operation_receipt(user_op_hash)
            if receipt:
                break
            if time.monotonic() >= deadline:
                raise UserOperationError(
                    f"Timed out after {self.receipt_timeout}s waiting for user operation {user_op_hash}"
                )
            await asyncio.sleep(self.poll_interval)

        tx_hash = (receipt.get("receipt") or {}).get("transactionHash")
        if receipt.get("success") is False:
            reason = receipt.get("reason") or "execution reverted"
            raise UserOperationError(f"User operation {user_op_hash} failed in {tx_hash}: {reason}")
        if not tx_hash:
            raise UserOperationError(f"Receipt for {user_op_hash} has no transaction hash")

        logger.info(f"User operation {user_op_hash} mined in {tx_hash}")
        return tx_hash
