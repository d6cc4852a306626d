import json
import os
from pathlib import Path
from typing import Dict, MutableMapping, Optional

import yaml
from ape import networks, project
from ape.contracts import ContractContainer, ContractInstance

from dmng_deployment.constants import DEFAULT_EXPLORER_API_KEY_ENVVAR, EXPLORER_API_KEY_ENVVARS
from dmng_deployment.networks import is_local_network


def load_parameters_file(filepath: Path) -> Dict:
    """Loads a module parameters file; YAML is used for .yml/.yaml files, JSON otherwise."""
    filepath = Path(filepath)
    with open(filepath, "r") as file:
        if filepath.suffix in (".yml", ".yaml"):
            config = yaml.safe_load(file)
        else:
            config = json.load(file)

    if config is None:
        return dict()
    if not isinstance(config, dict):
        raise ValueError(f"Malformed parameters file {filepath}; expected a mapping of modules.")
    return config


def check_etherscan_plugin(
    api_key: Optional[str] = None, environ: Optional[MutableMapping[str, str]] = None
) -> None:
    """
    Checks that the ape-etherscan plugin is installed and that the explorer API key
    of the connected ecosystem is set. When it is not, the project-wide API_KEY is
    exported under the explorer's name (ETHERSCAN_API_KEY, BSCSCAN_API_KEY).
    """
    if is_local_network():
        # unnecessary for local deployment
        return
    try:
        import ape_etherscan  # noqa: F401
    except ImportError:
        raise ImportError("Please install the ape-etherscan plugin to use this script.")

    environ = os.environ if environ is None else environ
    ecosystem_name = networks.provider.network.ecosystem.name
    explorer_envvar = EXPLORER_API_KEY_ENVVARS.get(ecosystem_name, DEFAULT_EXPLORER_API_KEY_ENVVAR)
    if not environ.get(explorer_envvar) and api_key:
        environ[explorer_envvar] = api_key
    if not environ.get(explorer_envvar):
        raise ValueError(f"{explorer_envvar} is not set and no API_KEY to fall back to.")


def check_plugins(verify: bool, api_key: Optional[str] = None) -> None:
    print("Checking plugins...")
    if verify:
        check_etherscan_plugin(api_key=api_key)


def verify_contracts(contracts: Dict[str, ContractInstance]) -> None:
    """Publishes the sources of deployed contracts, keyed by future id, to the block explorer."""
    explorer = networks.provider.network.explorer
    for future_id, instance in contracts.items():
        print(f"(i) Verifying {future_id} at {instance.address}...")
        explorer.publish_contract(instance.address)


def get_contract_container(contract_name: str) -> ContractContainer:
    """Returns the compiled contract container of the ape project."""
    try:
        return getattr(project, contract_name)
    except AttributeError:
        raise ValueError(f"No contract found with name '{contract_name}'.")
