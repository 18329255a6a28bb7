"""
Liquid SDK

Passkey-secured ERC-4337 smart accounts executing batched Aerodrome
strategies (swap, deposit, withdraw, approve, wrap) through an entry point
or a bundler.
"""

# Main service
from .smart_account import AccountCreationState, LiquidSDK, create_liquid_sdk

# Configuration
from .config import ContractAddresses, SDKConfig

# Errors
from .errors import (
    AerodromeError,
    BackendError,
    EncodingError,
    PassKeyError,
    SDKError,
    SignatureDecodingError,
    UnsupportedEnvironmentError,
    UserOperationError,
    VerificationError,
)

# Data model
from .types import Approve, Deposit, EncodedCall, PoolDetails, Swap, TokenInfo, Withdraw, Wrap, parse_action

# Individual components for advanced usage
from .actions import ActionEncoder
from .bundler import BundlerClient, convert_user_operation_to_bundler_format
from .chain import ChainClient
from .gas import BundlerGasEstimator, EntryPointGasEstimator
from .passkeys import PassKeyImplementation, PasskeySignature, PasskeySignerAdapter
from .submitter import BundlerSubmitter, EntryPointSubmitter
from .user_operations import UserOperation, UserOperationBuilder, compose_batch

__version__ = "1.0.0"

__all__ = [
    "LiquidSDK",
    "create_liquid_sdk",
    "AccountCreationState",
    "SDKConfig",
    "ContractAddresses",
    "SDKError",
    "PassKeyError",
    "VerificationError",
    "UserOperationError",
    "AerodromeError",
    "EncodingError",
    "SignatureDecodingError",
    "BackendError",
    "UnsupportedEnvironmentError",
    "TokenInfo",
    "PoolDetails",
    "EncodedCall",
    "Swap",
    "Deposit",
    "Withdraw",
    "Approve",
    "Wrap",
    "parse_action",
    "ActionEncoder",
    "compose_batch",
    "UserOperation",
    "UserOperationBuilder",
    "EntryPointGasEstimator",
    "BundlerGasEstimator",
    "BundlerClient",
    "convert_user_operation_to_bundler_format",
    "EntryPointSubmitter",
    "BundlerSubmitter",
    "ChainClient",
    "PassKeyImplementation",
    "PasskeySignature",
    "PasskeySignerAdapter",
]
