"""Minimal ABIs for the faucet and token contracts."""

FAUCET_ABI = [
    {
        "type": "function",
        "name": "claimInfo",
        "stateMutability": "view",
        "inputs": [{"name": "user", "type": "address"}],
        "outputs": [
            {"name": "totalClaimed", "type": "uint256"},
            {"name": "remainingAllowance", "type": "uint256"},
            {"name": "nextClaimTime", "type": "uint256"},
        ],
    },
    {
        "type": "function",
        "name": "claim",
        "stateMutability": "nonpayable",
        "inputs": [],
        "outputs": [],
    },
]

ERC20_ABI = [
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]
