"""
ERC-4337 bundler integration (Pimlico-compatible JSON-RPC)
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests

from .config import SDKConfig
from .errors import UserOperationError
from .user_operations import UserOperation

logger = logging.getLogger(__name__)

# Placeholder signature so the bundler can simulate validation before signing
DUMMY_SIGNATURE = "0x" + "0" * 130


def convert_user_operation_to_bundler_format(user_op: UserOperation) -> Dict[str, str]:
    """Convert a UserOperation to the bundler's JSON-RPC format (EntryPoint v0.6)"""
    return user_op.to_rpc_dict()


class BundlerClient:
    """Client for interacting with ERC-4337 bundlers"""

    def __init__(self, config: SDKConfig):
        if not config.bundler_url:
            raise ValueError("bundler_url is required for bundler mode")
        self.config = config
        self.entry_point = config.addresses.entry_point
        self._request_id = 0

    async def estimate_user_operation_gas(self, user_operation: UserOperation) -> Dict[str, Any]:
        """Estimate gas for UserOperation"""
        user_op_dict = convert_user_operation_to_bundler_format(user_operation)
        if not user_operation.signature:
            user_op_dict["signature"] = DUMMY_SIGNATURE
        return await self._make_bundler_request("eth_estimateUserOperationGas", [user_op_dict, self.entry_point])

    async def get_user_operation_gas_price(self) -> Dict[str, Any]:
        """Get current gas prices from the bundler"""
        return await self._make_bundler_request("pimlico_getUserOperationGasPrice", [])

    async def send_user_operation(self, user_operation: UserOperation) -> str:
        """Send a UserOperation to the bundler as is and return its hash"""
        logger.info("Sending UserOperation to bundler...")

        user_op_dict = convert_user_operation_to_bundler_format(user_operation)
        logger.debug(f"Full UserOp to bundler: {user_op_dict}")
        result = await self._make_bundler_request("eth_sendUserOperation", [user_op_dict, self.entry_point])

        logger.info(f"UserOperation sent successfully: {result}")
        return result

    async def get_user_operation_receipt(self, user_op_hash: str) -> Optional[Dict[str, Any]]:
        """Receipt of a UserOperation, ``None`` while it is still pending"""
        return await self._make_bundler_request("eth_getUserOperationReceipt", [user_op_hash])

    async def _make_bundler_request(self, method: str, params: List) -> Any:
        """Make JSON-RPC request to bundler"""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": self._request_id,
        }

        try:
            response = await asyncio.to_thread(
                requests.post,
                self.config.bundler_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Bundler request failed: {e}")
            raise UserOperationError(f"Bundler request {method} failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"HTTP error: {response.status_code}")
            raise UserOperationError(f"Bundler request {method} failed with HTTP {response.status_code}")

        result = response.json()
        if result.get("error"):
            error = result["error"]
            message = error.get("message", "Unknown error") if isinstance(error, dict) else str(error)
            logger.error(f"Bundler error: {message}")
            raise UserOperationError(f"Bundler rejected {method}: {message}")
        return result.get("result")
