import os
import typing
from typing import Dict, List, Mapping, Optional

from ape import networks
from dotenv import load_dotenv

from dmng_deployment.constants import (
    APE_NETWORKS,
    ENV_FILEPATH,
    LOCAL,
    LOCAL_BLOCKCHAIN_ENVIRONMENTS,
    LOCAL_PROVIDER,
    PRIVATE_KEY_ENVVAR,
    RPC_ENDPOINTS,
    SOLIDITY_VERSION,
    SOURCIFY_ENABLED,
    VERIFICATION_API_KEY_ENVVAR,
)


def load_environment(environ: Optional[Mapping[str, str]] = None) -> Mapping[str, str]:
    """Returns the given environment, or the process environment with the project .env loaded."""
    if environ is not None:
        return environ
    load_dotenv(ENV_FILEPATH)
    return os.environ


class NetworkConfig(typing.NamedTuple):
    name: str
    ecosystem: str
    network: str
    url: Optional[str]
    accounts: List[Optional[str]]
    # env var the url depends on
    url_source: Optional[str] = None

    @property
    def is_local(self) -> bool:
        return self.network in LOCAL_BLOCKCHAIN_ENVIRONMENTS

    @property
    def choice(self) -> str:
        """Returns the ape network choice (ecosystem:network:provider) for this network."""
        if self.is_local:
            return f"{self.ecosystem}:{self.network}:{LOCAL_PROVIDER}"
        if not self.url:
            raise ValueError(f"{self.url_source} is not set; no RPC url for network '{self.name}'.")
        return f"{self.ecosystem}:{self.network}:{self.url}"


class VerificationConfig(typing.NamedTuple):
    api_key: Optional[str]
    sourcify: bool = SOURCIFY_ENABLED


class ProjectConfig(typing.NamedTuple):
    solidity: str
    networks: Dict[str, NetworkConfig]
    etherscan: VerificationConfig

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ProjectConfig":
        environ = load_environment(environ)
        private_key = environ.get(PRIVATE_KEY_ENVVAR)

        network_configs = dict()
        for name, (ecosystem, network) in APE_NETWORKS.items():
            if name == LOCAL:
                network_configs[name] = NetworkConfig(
                    name=name, ecosystem=ecosystem, network=network, url=None, accounts=[]
                )
                continue

            url_template, url_source = RPC_ENDPOINTS[name]
            provider_id = environ.get(url_source)
            url = url_template.format(provider_id) if provider_id else None
            network_configs[name] = NetworkConfig(
                name=name,
                ecosystem=ecosystem,
                network=network,
                url=url,
                accounts=[private_key],
                url_source=url_source,
            )

        etherscan = VerificationConfig(api_key=environ.get(VERIFICATION_API_KEY_ENVVAR))
        return cls(solidity=SOLIDITY_VERSION, networks=network_configs, etherscan=etherscan)

    def get_network(self, name: str) -> NetworkConfig:
        try:
            return self.networks[name]
        except KeyError:
            raise ValueError(f"Unknown network '{name}'; expected one of {list(self.networks)}.")


def is_local_network() -> bool:
    return networks.provider.network.name in LOCAL_BLOCKCHAIN_ENVIRONMENTS
