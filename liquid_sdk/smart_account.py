"""
Main Liquid SDK service orchestration
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from .actions import ActionEncoder
from .aerodrome import AerodromeResolver
from .api import LiquidAPI
from .bundler import BundlerClient
from .chain import ChainClient
from .config import SDKConfig
from .errors import (
    AerodromeError,
    EncodingError,
    PassKeyError,
    UnsupportedEnvironmentError,
    UserOperationError,
    VerificationError,
    rewrap,
)
from .gas import BundlerGasEstimator, EntryPointGasEstimator
from .passkeys import PasskeySignerAdapter, decode_base64, parse_registration_result, public_key_to_owner
from .submitter import BundlerSubmitter, EntryPointSubmitter
from .types import Action, PoolDetails, TokenInfo, parse_action
from .user_operations import UserOperation, UserOperationBuilder, compose_batch
from .utils import get_token_balance, get_token_list

logger = logging.getLogger(__name__)


class AccountCreationState(str, Enum):
    IDLE = "idle"
    OPTIONS_REQUESTED = "options_requested"
    CREDENTIAL_CREATED = "credential_created"
    ATTESTATION_VERIFIED = "attestation_verified"
    ADDRESS_DEPLOYED = "address_deployed"
    DONE = "done"


def _has_passkey_capabilities(passkeys) -> bool:
    return passkeys is not None and all(
        callable(getattr(passkeys, name, None)) for name in ("create_credential", "get_assertion")
    )


class LiquidSDK:
    """Passkey-secured smart account operations on Aerodrome.

    One instance owns one chain client, one backend client and one passkey
    provider. Every public call runs as an independent sequential pipeline;
    concurrent strategies on the same account race for the nonce and must be
    serialized by the caller.
    """

    def __init__(
        self,
        config: SDKConfig,
        passkeys,
        chain: Optional[ChainClient] = None,
        api: Optional[LiquidAPI] = None,
        bundler_client: Optional[BundlerClient] = None,
    ):
        if not _has_passkey_capabilities(passkeys):
            raise UnsupportedEnvironmentError("LiquidSDK")

        self.config = config
        self.passkeys = passkeys
        self.chain = chain or ChainClient(config.rpc_url)
        self.api = api or LiquidAPI(config.api_base_url, config.api_key, config.request_timeout)
        self.signer_adapter = PasskeySignerAdapter()
        self.encoder = ActionEncoder(config.addresses, config.slippage_bps, config.deadline_seconds)
        self.builder = UserOperationBuilder(self.chain, config.addresses)
        self.aerodrome = AerodromeResolver(self.chain, config.addresses)

        if config.mode == "bundler":
            bundler_client = bundler_client or BundlerClient(config)
            self.gas_estimator = BundlerGasEstimator(bundler_client)
            self.submitter = BundlerSubmitter(bundler_client, config.receipt_timeout, config.receipt_poll_interval)
        else:
            self.gas_estimator = EntryPointGasEstimator(self.chain, config.addresses)
            self.submitter = None
            if config.relayer_private_key:
                self.submitter = EntryPointSubmitter(
                    self.chain,
                    config.relayer_private_key,
                    config.chain_id,
                    config.addresses,
                    config.receipt_timeout,
                )

        logger.info(f"Liquid SDK initialized in {config.mode} mode on chain {config.chain_id}")

    async def create_smart_account(self, username: str) -> Dict[str, str]:
        """Register a passkey for ``username`` and deploy its smart account"""
        state = AccountCreationState.IDLE
        try:
            options = await self.api.get_registration_options(username)
            state = self._advance(username, AccountCreationState.OPTIONS_REQUESTED)

            try:
                registration = await self.passkeys.create_credential(options)
            except Exception as e:
                raise PassKeyError(f"Failed to create PassKey: {e}") from e
            parse_registration_result(registration)
            state = self._advance(username, AccountCreationState.CREDENTIAL_CREATED)

            verification = await self.api.verify_registration(username, registration)
            if not verification.get("verified"):
                raise VerificationError("Attestation verification failed")
            state = self._advance(username, AccountCreationState.ATTESTATION_VERIFIED)

            if not verification.get("publicKey"):
                raise PassKeyError("Registration verification returned no public key")
            owner = public_key_to_owner(verification["publicKey"])
            address = await self._deploy_smart_account(owner)
            state = self._advance(username, AccountCreationState.ADDRESS_DEPLOYED)

            await self.api.update_user_address(username, address)
            self._advance(username, AccountCreationState.DONE)
            return {"address": address}
        except Exception as e:
            logger.error(f"Smart account creation for {username} failed after {state.value}: {e}")
            raise rewrap(e, "Failed to create smart account") from e

    async def execute_strategy(
        self,
        account: str,
        actions: Sequence[Union[Action, Dict[str, Any]]],
        username: str,
    ) -> str:
        """Run ``actions`` atomically from ``account`` and return the transaction hash"""
        try:
            if not actions:
                raise EncodingError("No actions to execute")

            parsed = [parse_action(action) if isinstance(action, dict) else action for action in actions]
            calls = [self.encoder.encode(action, recipient=account) for action in parsed]
            batch_call_data = compose_batch(calls)

            signature = await self._authenticate(username)

            user_operation = await self.builder.build(account, batch_call_data, signature)
            user_operation = await self.gas_estimator.estimate(user_operation)
            user_operation = await self.gas_estimator.price(user_operation)

            tx_hash = await self._submit(user_operation, wait=False)
            logger.info(f"Strategy of {len(calls)} actions submitted for {account}: {tx_hash}")
            return tx_hash
        except Exception as e:
            logger.error(f"Strategy execution for {account} failed: {e}")
            raise rewrap(e, "Failed to execute strategy") from e

    async def get_user_pools(self, user_address: str) -> List[PoolDetails]:
        try:
            return await self.aerodrome.get_user_pools(user_address)
        except Exception as e:
            raise rewrap(e, "Failed to get user pools", AerodromeError) from e

    async def get_token_balance(self, token_address: str, user_address: str) -> str:
        try:
            return await get_token_balance(self.chain, token_address, user_address)
        except Exception as e:
            raise rewrap(e, "Failed to get token balance") from e

    async def get_token_list(self) -> List[TokenInfo]:
        try:
            return get_token_list(self.config.token_list)
        except Exception as e:
            raise rewrap(e, "Failed to get token list") from e

    async def get_quote(
        self,
        token_a: Union[TokenInfo, Dict[str, Any]],
        token_b: Union[TokenInfo, Dict[str, Any]],
        is_deposit: bool,
        amount: str,
        is_stable: bool,
    ) -> Dict[str, str]:
        """Quote a deposit of ``amount`` token A, or a withdrawal of ``amount`` LP tokens"""
        try:
            token_a = token_a if isinstance(token_a, TokenInfo) else TokenInfo.from_dict(token_a)
            token_b = token_b if isinstance(token_b, TokenInfo) else TokenInfo.from_dict(token_b)
            if is_deposit:
                return await self.aerodrome.get_add_liquidity_quote(token_a, token_b, amount, is_stable)
            return await self.aerodrome.get_remove_liquidity_quote(token_a, token_b, amount, is_stable)
        except AerodromeError as e:
            raise e.with_context("Failed to get quote") from e
        except Exception as e:
            raise AerodromeError(str(e)).with_context("Failed to get quote") from e

    def _advance(self, username: str, state: AccountCreationState) -> AccountCreationState:
        logger.info(f"Smart account creation for {username}: {state.value}")
        return state

    async def _authenticate(self, username: str) -> bytes:
        """Passkey assertion verified by the backend, encoded as the account signature"""
        options = await self.api.get_authentication_options(username)
        if not options.get("challenge"):
            raise PassKeyError("Authentication options contain no challenge")

        try:
            assertion = await self.passkeys.get_assertion(options)
        except Exception as e:
            raise PassKeyError(f"Failed to sign with PassKey: {e}") from e

        verification = await self.api.verify_authentication(username, assertion)
        if not verification.get("success"):
            raise VerificationError("Authentication failed")

        challenge = decode_base64(options["challenge"])
        passkey_signature = self.signer_adapter.normalize(assertion, challenge)
        return self.signer_adapter.encode_signature(passkey_signature)

    async def _deploy_smart_account(self, owner: bytes) -> str:
        try:
            user_operation = await self.builder.build(
                None,
                b"",  # no call data, the operation only deploys
                b"",
                owners=[owner],
                salt=self.config.account_salt,
            )
            user_operation = await self.gas_estimator.estimate(user_operation)
            user_operation = await self.gas_estimator.price(user_operation)
            await self._submit(user_operation, wait=True)
        except Exception as e:
            raise rewrap(e, "Failed to deploy smart account", UserOperationError) from e

        logger.info(f"Smart account deployed at {user_operation.sender}")
        return user_operation.sender

    async def _submit(self, user_operation: UserOperation, wait: bool) -> str:
        if self.submitter is None:
            raise UserOperationError("No submitter configured: set a bundler URL or a relayer key")

        submission = await self.submitter.submit(user_operation)
        if wait or isinstance(self.submitter, BundlerSubmitter):
            return await self.submitter.await_receipt(submission)
        return submission


def create_liquid_sdk(passkeys) -> LiquidSDK:
    """Create a Liquid SDK with configuration from the environment"""
    return LiquidSDK(SDKConfig(), passkeys)
