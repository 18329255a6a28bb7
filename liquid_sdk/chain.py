"""
Blockchain read/write client used by every pipeline step
"""

import logging
from typing import Any, List, Optional, Sequence

from hexbytes import HexBytes
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

logger = logging.getLogger(__name__)


class ChainClient:
    """Thin async wrapper around web3 exposing only what the SDK needs.

    The client holds no per-call state, so one instance is shared by all
    concurrent pipelines of an SDK instance.
    """

    def __init__(self, rpc_url: str, web3: Optional[AsyncWeb3] = None):
        self.rpc_url = rpc_url
        self.web3 = web3 or AsyncWeb3(AsyncHTTPProvider(rpc_url))

    async def read_contract(self, address: str, abi: List[dict], function_name: str, args: Sequence[Any] = ()) -> Any:
        """Call a view function and return its decoded result"""
        contract = self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        function = getattr(contract.functions, function_name)
        return await function(*args).call()

    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        tx_hash = await self.web3.eth.send_raw_transaction(HexBytes(raw_transaction))
        return Web3.to_hex(tx_hash)

    async def wait_for_transaction_receipt(self, tx_hash: str, timeout: float = 120) -> dict:
        logger.info(f"Waiting for transaction {tx_hash}")
        receipt = await self.web3.eth.wait_for_transaction_receipt(HexBytes(tx_hash), timeout=timeout)
        return dict(receipt)

    async def get_gas_price(self) -> int:
        return await self.web3.eth.gas_price

    async def get_transaction_count(self, address: str) -> int:
        return await self.web3.eth.get_transaction_count(Web3.to_checksum_address(address), "pending")
