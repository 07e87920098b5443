"""
CUSD factory program constants

Program IDs per cluster, seed components and Anchor discriminators.
"""

import hashlib


def name_hash(name: str) -> bytes:
    """First 8 bytes of sha256(name), the program's fixed-width name seed"""
    return hashlib.sha256(name.encode("utf-8")).digest()[:8]


def anchor_discriminator(namespace: str, name: str) -> bytes:
    """Anchor discriminator: sha256("<namespace>:<name>")[:8]"""
    return name_hash(f"{namespace}:{name}")


# Clusters
CLUSTER_LOCALHOST = "localhost"
CLUSTER_DEVNET = "devnet"
CLUSTER_MAINNET = "mainnet"
CLUSTERS = (CLUSTER_LOCALHOST, CLUSTER_DEVNET, CLUSTER_MAINNET)

CUSD_FACTORY_PROGRAM_IDS = {
    CLUSTER_LOCALHOST: "CFvHYH4afBtK97rAwKkZtpnEQGqx8AmS6SWmYZd6JdmE",
    CLUSTER_DEVNET: "CF1Xn3Sx1M6KMvtD8zcQBmtDXSFaW7nttRLkYck5f6bR",
    CLUSTER_MAINNET: "CDMBw8drd8Ypct1YDTyJiUHN3KqP9tqtJJxjym5p3muQ",
}

CHAINLINK_PROGRAM_IDS = {
    CLUSTER_LOCALHOST: "DFeedTiF3G7eojEqc7KuqJFbBD3idV9y7i6Q7LxKtF7e",
    CLUSTER_DEVNET: "HEvSKofvBgfaexv23kMabbYqxasxU3mQ4ibBMEmJWHny",
    CLUSTER_MAINNET: "HEvSKofvBgfaexv23kMabbYqxasxU3mQ4ibBMEmJWHny",
}

CUSD_TOKEN_MINTS = {
    CLUSTER_LOCALHOST: "CXDihKKJfusBgYx9EqfLLYRZJGDRBUVjFmQTGutn9WAZ",
    CLUSTER_DEVNET: "CXDihKKJfusBgYx9EqfLLYRZJGDRBUVjFmQTGutn9WAZ",
    CLUSTER_MAINNET: "CUSDvqAQLbt7fRofcmV2EXfPA2t36kzj7FjzdmqDiNQL",
}

# Native programs
SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
ASSOCIATED_TOKEN_PROGRAM_ID = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"

# A price feed equal to the system program means "no price feed"
NO_PRICE_FEED = SYSTEM_PROGRAM_ID

CUSD_DECIMALS = 6
CUSD_PRECISION = 10 ** CUSD_DECIMALS

# A Minter account is sized for this many input currencies
MAX_INPUT_TOKENS = 8

# Fixed-width name seeds
MINTER_SEED = name_hash("Minter")
BURNER_SEED = name_hash("Burner")
PROGRAM_SEED = name_hash("Program")
APP_DATA_SEED = name_hash("AppData")
SIGNER_SEED = name_hash("Signer")
ROOT_SEED = name_hash("Root")

DERIVATION_PATH_LEN = 8

# Instruction names as the program declares them
IX_CREATE_MINTER = "create_minter"
IX_SET_MINTER = "set_minter"
IX_CREATE_BURNER = "create_burner"
IX_SET_BURNER = "set_burner"
IX_MINT = "mint"
IX_BURN = "burn"
IX_WITHDRAW_TOKEN = "withdraw_token"
IX_UNLOCK_TOKEN_MINT = "unlock_token_mint"
IX_CREATE_APP_DATA = "create_app_data"
IX_SET_APP_DATA = "set_app_data"

ACCOUNT_APP_DATA = "AppData"
ACCOUNT_MINTER = "Minter"
ACCOUNT_BURNER = "Burner"