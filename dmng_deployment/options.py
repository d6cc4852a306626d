from pathlib import Path

import click

from dmng_deployment.constants import SUPPORTED_NETWORKS
from dmng_deployment.modules import MODULES

network_name_option = click.option(
    "--network-name",
    "-n",
    help="Configured network to deploy to",
    type=click.Choice(SUPPORTED_NETWORKS),
    required=True,
)

module_option = click.option(
    "--module",
    "-m",
    "module_id",
    help="Deployment module",
    type=click.Choice(list(MODULES)),
    required=True,
)

parameters_option = click.option(
    "--parameters",
    "-p",
    "parameters_filepath",
    help="JSON or YAML file of parameter overrides, keyed by module",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=False,
)

registry_filepath_option = click.option(
    "--registry-filepath",
    "-f",
    help="Registry filepath; defaults to the module's registry in the artifacts directory",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
)

account_option = click.option(
    "--account",
    "-a",
    "account_alias",
    help="Alias of the ape account to deploy with",
    type=click.STRING,
    required=False,
)

autosign_option = click.option(
    "--autosign",
    help="Sign transactions without confirmation prompts",
    is_flag=True,
    default=False,
)

verify_option = click.option(
    "--verify/--no-verify",
    help="Verify the deployed contracts on the block explorer",
    default=False,
)
