# Minimal ABIs: only the functions this service calls.

ERC721_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

HOLDERS_LOGGER_ABI = [
    {
        "inputs": [
            {"name": "qualified", "type": "bool"},
            {"name": "holder", "type": "address"},
        ],
        "name": "updateQualifierTwoX",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "qualified", "type": "bool"},
            {"name": "holder", "type": "address"},
        ],
        "name": "updateQualifierThreeX",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "oldHolder", "type": "address"},
            {"name": "newHolder", "type": "address"},
        ],
        "name": "swapQualifierTwoX",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "oldHolder", "type": "address"},
            {"name": "newHolder", "type": "address"},
        ],
        "name": "swapQualifierThreeX",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

DOOP_ABI = [
    {
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "name": "mint",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]
