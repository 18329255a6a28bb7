"""
Minimal ABI fragments for the contracts the SDK reads from, plus the
function signatures used to build calldata with eth_abi.
"""

USER_OPERATION_TYPE = "(address,uint256,bytes,bytes,uint256,uint256,uint256,uint256,uint256,bytes,bytes)"

USER_OPERATION_COMPONENTS = [
    {"name": "sender", "type": "address"},
    {"name": "nonce", "type": "uint256"},
    {"name": "initCode", "type": "bytes"},
    {"name": "callData", "type": "bytes"},
    {"name": "callGasLimit", "type": "uint256"},
    {"name": "verificationGasLimit", "type": "uint256"},
    {"name": "preVerificationGas", "type": "uint256"},
    {"name": "maxFeePerGas", "type": "uint256"},
    {"name": "maxPriorityFeePerGas", "type": "uint256"},
    {"name": "paymasterAndData", "type": "bytes"},
    {"name": "signature", "type": "bytes"},
]

# Signatures for calldata built with eth_abi
EXECUTE_BATCH_SIGNATURE = "executeBatch((address,uint256,bytes)[])"
CONNECTOR_EXECUTE_SIGNATURE = "execute(address,bytes)"
SWAP_SIGNATURE = "swapExactTokensForTokens(uint256,uint256,(address,address,bool)[],address,uint256)"
ADD_LIQUIDITY_SIGNATURE = "addLiquidity(address,address,bool,uint256,uint256,uint256,uint256,address,uint256)"
REMOVE_LIQUIDITY_SIGNATURE = "removeLiquidity(address,address,bool,uint256,uint256,uint256,address,uint256)"
APPROVE_SIGNATURE = "approve(address,uint256)"
WETH_DEPOSIT_SIGNATURE = "deposit()"
CREATE_ACCOUNT_SIGNATURE = "createAccount(bytes[],uint256)"
HANDLE_OPS_SIGNATURE = f"handleOps({USER_OPERATION_TYPE}[],address)"

ENTRY_POINT_ABI = [
    {
        "inputs": [{"name": "sender", "type": "address"}, {"name": "key", "type": "uint192"}],
        "name": "getNonce",
        "outputs": [{"name": "nonce", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "userOp", "type": "tuple", "components": USER_OPERATION_COMPONENTS},
            {"name": "paymaster", "type": "address"},
            {"name": "value", "type": "uint256"},
        ],
        "name": "estimateUserOperationGas",
        "outputs": [
            {"name": "preVerificationGas", "type": "uint256"},
            {"name": "verificationGas", "type": "uint256"},
            {"name": "callGasLimit", "type": "uint256"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
]

ACCOUNT_FACTORY_ABI = [
    {
        "inputs": [{"name": "owners", "type": "bytes[]"}, {"name": "nonce", "type": "uint256"}],
        "name": "getAddress",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ERC20_ABI = [
    {
        "inputs": [{"name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

AERODROME_FACTORY_ABI = [
    {
        "inputs": [],
        "name": "allPoolsLength",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "", "type": "uint256"}],
        "name": "allPools",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
]

AERODROME_POOL_ABI = ERC20_ABI + [
    {
        "inputs": [],
        "name": "token0",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "token1",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "stable",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "getReserves",
        "outputs": [
            {"name": "_reserve0", "type": "uint256"},
            {"name": "_reserve1", "type": "uint256"},
            {"name": "_blockTimestampLast", "type": "uint256"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "totalSupply",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

AERODROME_ROUTER_ABI = [
    {
        "inputs": [
            {"name": "tokenA", "type": "address"},
            {"name": "tokenB", "type": "address"},
            {"name": "stable", "type": "bool"},
            {"name": "_factory", "type": "address"},
            {"name": "amountADesired", "type": "uint256"},
            {"name": "amountBDesired", "type": "uint256"},
        ],
        "name": "quoteAddLiquidity",
        "outputs": [
            {"name": "amountA", "type": "uint256"},
            {"name": "amountB", "type": "uint256"},
            {"name": "liquidity", "type": "uint256"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "tokenA", "type": "address"},
            {"name": "tokenB", "type": "address"},
            {"name": "stable", "type": "bool"},
            {"name": "_factory", "type": "address"},
            {"name": "liquidity", "type": "uint256"},
        ],
        "name": "quoteRemoveLiquidity",
        "outputs": [
            {"name": "amountA", "type": "uint256"},
            {"name": "amountB", "type": "uint256"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
]
