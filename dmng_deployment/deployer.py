import typing
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ape import networks
from ape.api import AccountAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractInstance
from ape_accounts import KeyfileAccount
from web3.auto import w3

from dmng_deployment.confirm import _confirm_future, _continue
from dmng_deployment.networks import ProjectConfig, is_local_network, load_environment
from dmng_deployment.params import ContractFuture, Module, ModuleParameter, is_unset
from dmng_deployment.registry import (
    get_registry_filepath,
    registry_from_deployments,
    validate_registry,
)
from dmng_deployment.utils import check_plugins, get_contract_container, verify_contracts


def _validate_resolved_values(future: ContractFuture) -> None:
    """
    Rejects constructor arguments that come from unset environment variables and
    warns about the ones read from blank environment variables (a blank number is 0).
    """
    named_args = future.named_args().items()
    for position, ((name, value), arg) in enumerate(zip(named_args, future.args)):
        if is_unset(value):
            raise Deployer.Invalid(
                f"{future.contract_name} constructor parameter '{name}' at position {position} "
                f"is unset ({value}); set it in the environment or in a parameters file."
            )
        if isinstance(arg, ModuleParameter) and arg.blank_source:
            print(
                f"WARNING: {arg.source} is blank; {future.contract_name} constructor parameter "
                f"'{name}' at position {position} is {value!r}."
            )


def _validate_constructor_abi_inputs(
    contract_name: str,
    abi_inputs: List[Any],
    resolved_parameters: OrderedDict,
) -> None:
    """Validates the constructor parameters against the constructor ABI."""
    if len(resolved_parameters) != len(abi_inputs):
        raise Deployer.Invalid(
            f"Constructor parameters length mismatch - "
            f"{contract_name} ABI requires {len(abi_inputs)}, Got {len(resolved_parameters)}."
        )
    if not abi_inputs:
        return  # no constructor parameters

    codex = enumerate(zip(abi_inputs, resolved_parameters.items()), start=0)
    for position, (abi_input, resolved_input) in codex:
        name, value = resolved_input
        if abi_input.name and abi_input.name.strip("_") != name:
            print(
                f"WARNING: {contract_name} constructor parameter '{name}' at position {position} "
                f"is named '{abi_input.name}' in the ABI."
            )

        # validate value type
        if not w3.is_encodable(abi_input.type, value):
            raise Deployer.Invalid(
                f"Constructor param name '{name}' at position {position} has a value '{value}' "
                f"whose type does not match expected ABI type '{abi_input.type}'"
            )


def validate_futures(futures: List[ContractFuture]) -> None:
    """Validates the constructor arguments of every contract future of a module."""
    for future in futures:
        _validate_resolved_values(future)
        contract_container = get_contract_container(future.contract_name)
        _validate_constructor_abi_inputs(
            contract_name=future.contract_name,
            abi_inputs=contract_container.constructor.abi.inputs,
            resolved_parameters=future.named_args(),
        )


class Deployer:
    """
    Represents an ape account plus a built deployment module,
    plus validated/annotated execution of its contract futures.
    """

    class Invalid(Exception):
        """Raised when the constructor arguments of a module are invalid"""

    def __init__(
        self,
        module: Module,
        parameters: Optional[Mapping[str, Any]] = None,
        verify: bool = False,
        environ: Optional[Mapping[str, str]] = None,
        registry_filepath: Optional[Path] = None,
        account: typing.Optional[AccountAPI] = None,
        autosign: bool = False,
    ):
        if account is None:
            self._account = select_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        if isinstance(self._account, KeyfileAccount):
            self._account.set_autosign(autosign)

        environ = load_environment(environ)
        self.config = ProjectConfig.from_env(environ)
        self.verify = verify
        check_plugins(verify=verify, api_key=self.config.etherscan.api_key)

        self.module = module
        self.builder = module.build_with(parameters=parameters, environ=environ)
        validate_futures(self.builder.futures)

        self.registry_filepath = get_registry_filepath(
            module_id=module.module_id, registry_filepath=registry_filepath
        )
        if not is_local_network():
            validate_registry(
                self.registry_filepath,
                chain_id=networks.provider.chain_id,
                future_ids=[future.future_id for future in self.builder.futures],
            )

        self._print_deployment_info()

        if not self._autosign:
            # Confirms the start of the deployment.
            _continue()

    def get_account(self) -> AccountAPI:
        """Returns the deployer account."""
        return self._account

    def deploy(self, future: ContractFuture) -> ContractInstance:
        container = get_contract_container(future.contract_name)
        if not self._autosign:
            _confirm_future(future)

        print(f"\nDeploying {future.future_id}...")
        return self._account.deploy(container, *future.resolve_args())

    def run(self) -> Dict[str, Any]:
        """Deploys the module's contracts in declaration order and returns the module results."""
        deployments = list()
        for future in self.builder.futures:
            deployments.append((future, self.deploy(future)))

        self.finalize(deployments=deployments)

        instances = {future.future_id: instance for future, instance in deployments}
        results = dict()
        for name, value in self.builder.results.items():
            if isinstance(value, ContractFuture):
                value = instances[value.future_id]
            results[name] = value
        return results

    def finalize(self, deployments: List[Tuple[ContractFuture, ContractInstance]]) -> None:
        """
        Publishes the deployments to the registry and optionally to block explorers.
        Local deployments are throwaway and are neither recorded nor verified.
        """
        if is_local_network():
            print("(i) Local network; the registry is not written.")
            return

        registry_from_deployments(
            deployments=deployments,
            output_filepath=self.registry_filepath,
        )
        if self.verify:
            verify_contracts(
                contracts={future.future_id: instance for future, instance in deployments}
            )

    def _print_deployment_info(self):
        print(
            f"Account: {self.get_account().address}",
            f"Module: {self.module.module_id}",
            f"Registry: {self.registry_filepath}",
            f"Verify: {self.verify}",
            f"Sourcify: {self.config.etherscan.sourcify}",
            f"Solidity: {self.config.solidity}",
            f"Ecosystem: {networks.provider.network.ecosystem.name}",
            f"Network: {networks.provider.network.name}",
            f"Chain ID: {networks.provider.chain_id}",
            f"Gas Price: {networks.provider.gas_price}",
            sep="\n",
        )
