from pathlib import Path

import click
from ape import networks

from dmng_deployment.modules import MODULES
from dmng_deployment.networks import ProjectConfig, load_environment
from dmng_deployment.options import network_name_option
from dmng_deployment.registry import (
    contracts_from_registry,
    find_future_id,
    get_registry_filepath,
)
from dmng_deployment.utils import check_etherscan_plugin, verify_contracts


@click.command()
@network_name_option
@click.option(
    "--contract-name",
    "-c",
    "contract_names",
    help="Future id (DMNGModule#DMNGToken) or contract name to verify",
    type=click.STRING,
    required=True,
    multiple=True,
)
@click.option(
    "--module",
    "-m",
    "module_id",
    help="Deployment module; used for obtaining the contract registry",
    type=click.Choice(list(MODULES)),
    required=False,
)
@click.option(
    "--registry-filepath",
    "-f",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    help="Registry filepath if the contract is not part of a module registry",
    required=False,
)
def cli(network_name, contract_names, module_id, registry_filepath):
    """Verify deployed contracts."""
    if not (bool(registry_filepath) ^ bool(module_id)):
        raise click.BadOptionUsage(
            option_name="--module",
            message=(
                f"Provide either 'module' or 'registry_filepath'; "
                f"got {module_id}, {registry_filepath}"
            ),
        )

    project_config = ProjectConfig.from_env(load_environment())
    network_config = project_config.get_network(network_name)
    registry_filepath = get_registry_filepath(
        module_id=module_id, registry_filepath=registry_filepath
    )
    if not registry_filepath.exists():
        raise click.BadParameter(f"No registry found at {registry_filepath}")

    with networks.parse_network_choice(network_config.choice):
        check_etherscan_plugin(api_key=project_config.etherscan.api_key)
        chain_id = networks.provider.chain_id
        contracts = contracts_from_registry(registry_filepath, chain_id=chain_id)

        to_verify = dict()
        for name in contract_names:
            try:
                future_id = find_future_id(contracts, name)
            except ValueError as e:
                raise click.BadParameter(
                    f"{e} Registry '{registry_filepath}', chain {chain_id}.",
                    param_hint="--contract-name",
                )
            to_verify[future_id] = contracts[future_id]

        verify_contracts(to_verify)


if __name__ == "__main__":
    cli()
