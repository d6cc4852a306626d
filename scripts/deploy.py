import click
from ape import networks

from dmng_deployment.accounts import get_deployer_account
from dmng_deployment.deployer import Deployer
from dmng_deployment.modules import get_module
from dmng_deployment.networks import ProjectConfig, load_environment
from dmng_deployment.options import (
    account_option,
    autosign_option,
    module_option,
    network_name_option,
    parameters_option,
    registry_filepath_option,
    verify_option,
)
from dmng_deployment.params import load_module_parameters


@click.command()
@network_name_option
@module_option
@parameters_option
@registry_filepath_option
@account_option
@autosign_option
@verify_option
def cli(
    network_name,
    module_id,
    parameters_filepath,
    registry_filepath,
    account_alias,
    autosign,
    verify,
):
    """
    Deploy the contracts of a deployment module.

    ape run deploy --network-name bscTestnet --module DMNGModule --verify
    """
    environ = load_environment()
    network_config = ProjectConfig.from_env(environ).get_network(network_name)
    module = get_module(module_id)
    parameters = load_module_parameters(parameters_filepath, module_id=module_id)

    with networks.parse_network_choice(network_config.choice):
        account = get_deployer_account(
            network_config=network_config, environ=environ, account_alias=account_alias
        )
        deployer = Deployer(
            module=module,
            parameters=parameters,
            verify=verify,
            environ=environ,
            registry_filepath=registry_filepath,
            account=account,
            autosign=autosign,
        )
        results = deployer.run()

    for name, instance in results.items():
        print(f"(i) {name} deployed to {instance.address}")


if __name__ == "__main__":
    cli()
