from typing import Mapping, Optional

import click
from ape import accounts
from ape.api import AccountAPI
from ape.cli.choices import select_account
from ape_accounts import import_account_from_private_key
from eth_account import Account

from dmng_deployment.constants import DEPLOYER_ACCOUNT_ALIAS, DEPLOYER_PASSPHRASE_ENVVAR
from dmng_deployment.networks import NetworkConfig


def _get_passphrase(environ: Mapping[str, str]) -> str:
    passphrase = environ.get(DEPLOYER_PASSPHRASE_ENVVAR)
    if not passphrase:
        passphrase = click.prompt(
            f"Passphrase for the '{DEPLOYER_ACCOUNT_ALIAS}' account", hide_input=True
        )
    return passphrase


def account_from_private_key(private_key: str, environ: Mapping[str, str]) -> AccountAPI:
    """
    Returns an unlocked ape keyfile account for the given private key,
    importing it under the deployer alias on first use.
    """
    passphrase = _get_passphrase(environ)
    if DEPLOYER_ACCOUNT_ALIAS in accounts.aliases:
        account = accounts.load(DEPLOYER_ACCOUNT_ALIAS)
        expected_address = Account.from_key(private_key).address
        if account.address != expected_address:
            raise ValueError(
                f"Account alias '{DEPLOYER_ACCOUNT_ALIAS}' is already used by {account.address}, "
                f"not by the {expected_address} private key."
            )
    else:
        account = import_account_from_private_key(DEPLOYER_ACCOUNT_ALIAS, passphrase, private_key)
        print(f"Account imported: {account.address}")

    account.unlock(passphrase=passphrase)
    return account


def get_deployer_account(
    network_config: NetworkConfig,
    environ: Mapping[str, str],
    account_alias: Optional[str] = None,
) -> AccountAPI:
    """Picks the account deploying to the given network."""
    if network_config.is_local:
        return accounts.test_accounts[0]
    if account_alias:
        return accounts.load(account_alias)

    private_key = next(iter(network_config.accounts), None)
    if private_key:
        return account_from_private_key(private_key, environ)

    return select_account()
