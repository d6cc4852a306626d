from pathlib import Path

import dmng_deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(dmng_deployment.__file__).parent
PROJECT_ROOT = DEPLOYMENT_DIR.parent
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"
ENV_FILEPATH = PROJECT_ROOT / ".env"

#
# Compiler
#

SOLIDITY_VERSION = "0.8.20"

#
# Networks
#

MAINNET = "mainnet"
BSC_TESTNET = "bscTestnet"
LOCAL = "local"

SUPPORTED_NETWORKS = [MAINNET, BSC_TESTNET, LOCAL]
LOCAL_BLOCKCHAIN_ENVIRONMENTS = ["local"]

# network name -> (ape ecosystem, ape network)
APE_NETWORKS = {
    MAINNET: ("ethereum", "mainnet"),
    BSC_TESTNET: ("bsc", "testnet"),
    LOCAL: ("ethereum", "local"),
}

# network name -> (RPC url template, env var holding the provider id)
RPC_ENDPOINTS = {
    MAINNET: ("https://eth-mainnet.g.alchemy.com/v2/{}", "ALCHEMY_ID"),
    BSC_TESTNET: (
        "https://neat-wandering-tent.bsc-testnet.discover.quiknode.pro/{}/",
        "TESTNET_ID",
    ),
}

LOCAL_PROVIDER = "test"

#
# Credentials
#

PRIVATE_KEY_ENVVAR = "PRIVATE_KEY"
DEPLOYER_PASSPHRASE_ENVVAR = "DEPLOYER_PASSPHRASE"
DEPLOYER_ACCOUNT_ALIAS = "DMNG_DEPLOYER"
VERIFICATION_API_KEY_ENVVAR = "API_KEY"
SOURCIFY_ENABLED = True

#
# Contracts
#

DMNG_TOKEN = "DMNGToken"
NCI_CONTRACT = "NCIContract"

# ecosystem -> explorer API key env var read by ape-etherscan
EXPLORER_API_KEY_ENVVARS = {
    "ethereum": "ETHERSCAN_API_KEY",
    "bsc": "BSCSCAN_API_KEY",
}
DEFAULT_EXPLORER_API_KEY_ENVVAR = "ETHERSCAN_API_KEY"

FUTURE_ID_DELIMITER = "#"
