from types import SimpleNamespace

import pytest
from ethpm_types.abi import ABIType

# well known test addresses
USDT = "0xdAC17F958D2ee523a2206206994597C13D831ec7"
OWNER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
ADMIN = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
NTZC = "0x5FbDB2315678afecb367f032d93F642f64180aa3"

CAMPAIGN_END_TIME = 1_900_000_000


@pytest.fixture
def dmng_environ():
    return {
        "INITIAL_SUPPLY": "1000000",
        "SOFT_CAP": "100",
        "HARD_CAP": "500",
        "INITIAL_OWNER": OWNER,
        "USDT_CONTRACT": USDT,
        "CUSTOM_DECIMALS": "6",
        "CAMPAIGN_END_TIME": str(CAMPAIGN_END_TIME),
        "ADMIN": ADMIN,
    }


@pytest.fixture
def nci_environ():
    return {
        "TOKEN_NAME": "NCI Token",
        "TOKEN_SYMBOL": "NCI",
        "NTZC_CONTRACT": NTZC,
        "INITIAL_OWNER": OWNER,
        "ADMIN": ADMIN,
    }


@pytest.fixture
def network_environ():
    return {
        "ALCHEMY_ID": "alchemy-project-id",
        "TESTNET_ID": "quicknode-id",
        "PRIVATE_KEY": "0x" + "11" * 32,
        "API_KEY": "EXPLORERAPIKEY",
    }


def _abi_inputs(*inputs):
    return [ABIType(name=name, type=abi_type) for name, abi_type in inputs]


@pytest.fixture
def dmng_constructor_inputs():
    return _abi_inputs(
        ("_initialSupply", "uint256"),
        ("_softCap", "uint256"),
        ("_hardCap", "uint256"),
        ("_campaignEndTime", "uint256"),
        ("_customDecimals", "uint8"),
        ("_usdtContract", "address"),
        ("initialOwner", "address"),
        ("_admin", "address"),
    )


@pytest.fixture
def nci_constructor_inputs():
    return _abi_inputs(
        ("tokenName", "string"),
        ("tokenSymbol", "string"),
        ("ntzcContract", "address"),
        ("initialOwner", "address"),
        ("admin", "address"),
    )


@pytest.fixture
def contract_containers(monkeypatch, dmng_constructor_inputs, nci_constructor_inputs):
    """Stands in compiled contract containers exposing their contract type and constructor ABI."""
    containers = {
        "DMNGToken": dmng_constructor_inputs,
        "NCIContract": nci_constructor_inputs,
    }

    def get_contract_container(contract_name):
        try:
            inputs = containers[contract_name]
        except KeyError:
            raise ValueError(f"No contract found with name '{contract_name}'.")
        return SimpleNamespace(
            contract_type=SimpleNamespace(name=contract_name, abi=[]),
            constructor=SimpleNamespace(abi=SimpleNamespace(inputs=inputs)),
        )

    monkeypatch.setattr("dmng_deployment.deployer.get_contract_container", get_contract_container)
    return containers


class DeployerAccount:
    """Records deployments instead of sending transactions."""

    address = OWNER

    def __init__(self, chain_id):
        self.chain_id = chain_id
        self.deployments = list()

    def deploy(self, container, *args):
        self.deployments.append((container.contract_type.name, args))
        receipt = SimpleNamespace(
            chain_id=self.chain_id,
            txn_hash="0x" + "cd" * 32,
            block_number=len(self.deployments),
            transaction=SimpleNamespace(sender=self.address),
        )
        return SimpleNamespace(address=NTZC, receipt=receipt, contract_type=container.contract_type)


def _connect(monkeypatch, chain_id, network_name, local):
    network = SimpleNamespace(name=network_name, ecosystem=SimpleNamespace(name="bsc"))
    provider = SimpleNamespace(chain_id=chain_id, gas_price=10**9, network=network)
    monkeypatch.setattr("dmng_deployment.deployer.networks", SimpleNamespace(provider=provider))
    monkeypatch.setattr("dmng_deployment.deployer.is_local_network", lambda: local)
    return provider


@pytest.fixture
def bsc_testnet(monkeypatch):
    return _connect(monkeypatch, chain_id=97, network_name="testnet", local=False)


@pytest.fixture
def local_network(monkeypatch):
    return _connect(monkeypatch, chain_id=1337, network_name="local", local=True)
