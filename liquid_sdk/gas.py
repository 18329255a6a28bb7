"""
Gas estimation and fee pricing for UserOperations
"""

import logging
from dataclasses import replace
from typing import Any, Optional

from .abis import ENTRY_POINT_ABI
from .config import ContractAddresses, MIN_DEPLOYMENT_VERIFICATION_GAS, ZERO_ADDRESS
from .errors import UserOperationError
from .user_operations import UserOperation

logger = logging.getLogger(__name__)


def _to_int(value: Any) -> int:
    if isinstance(value, str):
        return int(value, 16) if value.startswith("0x") else int(value)
    return int(value)


def apply_gas_estimate(
    user_op: UserOperation,
    pre_verification_gas: int,
    verification_gas: int,
    call_gas_limit: int,
    enforce_floor: Optional[bool] = None,
) -> UserOperation:
    """Copy gas limits into a new UserOperation, other fields unchanged"""
    if enforce_floor is None:
        enforce_floor = user_op.is_deployment
    if enforce_floor and verification_gas < MIN_DEPLOYMENT_VERIFICATION_GAS:
        logger.info(f"Raising verification gas {verification_gas} to floor {MIN_DEPLOYMENT_VERIFICATION_GAS}")
        verification_gas = MIN_DEPLOYMENT_VERIFICATION_GAS

    return replace(
        user_op,
        pre_verification_gas=pre_verification_gas,
        verification_gas_limit=verification_gas,
        call_gas_limit=call_gas_limit,
    )


class EntryPointGasEstimator:
    """Estimates gas by reading the entry point contract directly"""

    def __init__(self, chain, addresses: ContractAddresses = ContractAddresses()):
        self.chain = chain
        self.addresses = addresses

    async def estimate(self, user_op: UserOperation, enforce_floor: Optional[bool] = None) -> UserOperation:
        try:
            estimation = await self.chain.read_contract(
                self.addresses.entry_point,
                ENTRY_POINT_ABI,
                "estimateUserOperationGas",
                [user_op.to_tuple(), ZERO_ADDRESS, 0],
            )
            if isinstance(estimation, dict):
                pre_verification_gas = estimation["preVerificationGas"]
                verification_gas = estimation["verificationGas"]
                call_gas_limit = estimation["callGasLimit"]
            else:
                pre_verification_gas, verification_gas, call_gas_limit = estimation
        except Exception as e:
            logger.error(f"Gas estimation failed for {user_op.sender}: {e}")
            raise UserOperationError(f"Failed to estimate user operation gas: {e}") from e

        logger.info(
            f"Gas estimate: preVerification={pre_verification_gas}, "
            f"verification={verification_gas}, call={call_gas_limit}"
        )
        return apply_gas_estimate(
            user_op,
            _to_int(pre_verification_gas),
            _to_int(verification_gas),
            _to_int(call_gas_limit),
            enforce_floor,
        )

    async def price(self, user_op: UserOperation) -> UserOperation:
        """Fill fee fields from the node's current gas price"""
        try:
            gas_price = int(await self.chain.get_gas_price())
        except Exception as e:
            raise UserOperationError(f"Failed to get gas price: {e}") from e
        return replace(user_op, max_fee_per_gas=gas_price, max_priority_fee_per_gas=gas_price)


class BundlerGasEstimator:
    """Estimates gas and fees through the bundler"""

    def __init__(self, bundler_client):
        self.bundler_client = bundler_client

    async def estimate(self, user_op: UserOperation, enforce_floor: Optional[bool] = None) -> UserOperation:
        gas_estimates = await self.bundler_client.estimate_user_operation_gas(user_op)
        if not gas_estimates:
            raise UserOperationError("Failed to estimate user operation gas: empty bundler response")

        try:
            verification_gas = gas_estimates.get("verificationGasLimit", gas_estimates.get("verificationGas"))
            return apply_gas_estimate(
                user_op,
                _to_int(gas_estimates["preVerificationGas"]),
                _to_int(verification_gas),
                _to_int(gas_estimates["callGasLimit"]),
                enforce_floor,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UserOperationError(f"Failed to estimate user operation gas: malformed estimate {gas_estimates}") from e

    async def price(self, user_op: UserOperation) -> UserOperation:
        gas_prices = await self.bundler_client.get_user_operation_gas_price()
        fast_prices = (gas_prices or {}).get("fast")
        if not fast_prices:
            raise UserOperationError(f"Failed to get gas price: unexpected bundler response {gas_prices}")
        return replace(
            user_op,
            max_fee_per_gas=_to_int(fast_prices["maxFeePerGas"]),
            max_priority_fee_per_gas=_to_int(fast_prices["maxPriorityFeePerGas"]),
        )
