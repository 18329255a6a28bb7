"""
Read-only Aerodrome pool and quote lookups
"""

import asyncio
import logging
from typing import Dict, List

from web3 import Web3

from .abis import AERODROME_FACTORY_ABI, AERODROME_POOL_ABI, AERODROME_ROUTER_ABI
from .config import ContractAddresses
from .errors import AerodromeError
from .types import PoolDetails, TokenInfo
from .utils import parse_units

logger = logging.getLogger(__name__)

LP_TOKEN_DECIMALS = 18
MAX_UINT256 = 2**256 - 1


class AerodromeResolver:
    def __init__(self, chain, addresses: ContractAddresses = ContractAddresses()):
        self.chain = chain
        self.addresses = addresses

    async def get_user_pools(self, user_address: str) -> List[PoolDetails]:
        """Pools in which ``user_address`` holds a non-zero LP balance"""
        try:
            factory = self.addresses.aerodrome_factory
            pool_count = await self.chain.read_contract(factory, AERODROME_FACTORY_ABI, "allPoolsLength")
            logger.info(f"Scanning {pool_count} Aerodrome pools for {user_address}")

            pools = []
            for index in range(int(pool_count)):
                pool_address = await self.chain.read_contract(factory, AERODROME_FACTORY_ABI, "allPools", [index])
                details = await self._get_pool_details(Web3.to_checksum_address(pool_address), user_address)
                if details is not None:
                    pools.append(details)
            return pools
        except AerodromeError:
            raise
        except Exception as e:
            raise AerodromeError(f"Pool scan failed: {e}") from e

    async def _get_pool_details(self, pool_address: str, user_address: str):
        read = self.chain.read_contract
        user_lp_balance, token0, token1, is_stable, reserves, total_supply = await asyncio.gather(
            read(pool_address, AERODROME_POOL_ABI, "balanceOf", [user_address]),
            read(pool_address, AERODROME_POOL_ABI, "token0"),
            read(pool_address, AERODROME_POOL_ABI, "token1"),
            read(pool_address, AERODROME_POOL_ABI, "stable"),
            read(pool_address, AERODROME_POOL_ABI, "getReserves"),
            read(pool_address, AERODROME_POOL_ABI, "totalSupply"),
        )
        if int(user_lp_balance) == 0:
            return None

        return PoolDetails(
            pool_address=pool_address,
            token0=Web3.to_checksum_address(token0),
            token1=Web3.to_checksum_address(token1),
            is_stable=bool(is_stable),
            user_lp_balance=str(user_lp_balance),
            reserve_token0=str(reserves[0]),
            reserve_token1=str(reserves[1]),
            total_supply=str(total_supply),
        )

    async def get_add_liquidity_quote(
        self, token_a: TokenInfo, token_b: TokenInfo, amount: str, is_stable: bool
    ) -> Dict[str, str]:
        """Quote depositing ``amount`` of token A; the router picks the matching token B amount"""
        try:
            amount_a_desired = parse_units(amount, token_a.decimals)
            amount_a, amount_b, liquidity = await self.chain.read_contract(
                self.addresses.aerodrome_router,
                AERODROME_ROUTER_ABI,
                "quoteAddLiquidity",
                [
                    Web3.to_checksum_address(token_a.address),
                    Web3.to_checksum_address(token_b.address),
                    is_stable,
                    Web3.to_checksum_address(self.addresses.aerodrome_factory),
                    amount_a_desired,
                    MAX_UINT256,
                ],
            )
        except Exception as e:
            raise AerodromeError(f"Failed to get add liquidity quote: {e}") from e
        return {"amountA": str(amount_a), "amountB": str(amount_b), "liquidity": str(liquidity)}

    async def get_remove_liquidity_quote(
        self, token_a: TokenInfo, token_b: TokenInfo, amount: str, is_stable: bool
    ) -> Dict[str, str]:
        """Quote burning ``amount`` LP tokens"""
        try:
            liquidity = parse_units(amount, LP_TOKEN_DECIMALS)
            amount_a, amount_b = await self.chain.read_contract(
                self.addresses.aerodrome_router,
                AERODROME_ROUTER_ABI,
                "quoteRemoveLiquidity",
                [
                    Web3.to_checksum_address(token_a.address),
                    Web3.to_checksum_address(token_b.address),
                    is_stable,
                    Web3.to_checksum_address(self.addresses.aerodrome_factory),
                    liquidity,
                ],
            )
        except Exception as e:
            raise AerodromeError(f"Failed to get remove liquidity quote: {e}") from e
        return {"amountA": str(amount_a), "amountB": str(amount_b)}
