import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

from ape.contracts import ContractInstance
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from eth_typing import ABI

from dmng_deployment.constants import ARTIFACTS_DIR, FUTURE_ID_DELIMITER
from dmng_deployment.params import ContractFuture
from dmng_deployment.utils import get_contract_container

ChainId = int
FutureId = str

STANDARD_REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


class RegistryEntry(NamedTuple):
    """A contract deployed by a module future on a single chain."""

    chain_id: ChainId
    future_id: FutureId
    contract_name: str
    address: ChecksumAddress
    abi: ABI
    constructor_args: Dict[str, Any]
    tx_hash: str
    block_number: int
    deployer: str

    @property
    def module_id(self) -> str:
        return self.future_id.split(FUTURE_ID_DELIMITER, 1)[0]


def get_registry_filepath(module_id: str, registry_filepath: Optional[Path] = None) -> Path:
    """Returns the registry filepath of a module; artifacts/<module id>.json unless given."""
    if registry_filepath:
        return Path(registry_filepath)
    return ARTIFACTS_DIR / f"{module_id}.json"


def _read_registry_data(filepath: Path) -> Dict[str, Dict[str, Any]]:
    if not filepath.exists():
        return dict()
    with open(filepath, "r") as file:
        return json.load(file)


def read_registry(filepath: Path) -> List[RegistryEntry]:
    entries = list()
    for chain_id, futures in _read_registry_data(filepath).items():
        for future_id, record in futures.items():
            entry = RegistryEntry(
                chain_id=int(chain_id),
                future_id=future_id,
                contract_name=record["contract"],
                address=record["address"],
                abi=record["abi"],
                constructor_args=record.get("constructor_args", dict()),
                tx_hash=record["tx_hash"],
                block_number=record["block_number"],
                deployer=record["deployer"],
            )
            entries.append(entry)
    return entries


def validate_registry(filepath: Path, chain_id: ChainId, future_ids: Iterable[FutureId]) -> Path:
    """
    Checks that none of the given futures is already published
    for the chain_id of the current network.
    """
    published = _read_registry_data(filepath).get(str(chain_id), dict())
    already_published = sorted(set(future_ids) & set(published))
    if already_published:
        raise ValueError(
            f"{', '.join(already_published)} already published for chain_id {chain_id} "
            f"in {filepath}."
        )
    return filepath


def write_registry(entries: List[RegistryEntry], filepath: Path) -> Path:
    """
    Writes registry entries to a file, merging them into an existing registry.
    A future is recorded once per chain; recording it again is an error.
    """
    if not entries:
        print("No entries provided.")
        return filepath

    data = _read_registry_data(filepath)
    if data:
        print(f"Updating existing registry at {filepath}.")
    else:
        print(f"Creating new registry at {filepath}.")

    for entry in entries:
        chain_entries = data.setdefault(str(entry.chain_id), dict())
        if entry.future_id in chain_entries:
            raise ValueError(
                f"{entry.future_id} is already recorded for chain_id {entry.chain_id} "
                f"in {filepath}."
            )
        # common order for diffs
        entry_abi = sorted(entry.abi, key=lambda d: (d["type"], d.get("name", "")))
        chain_entries[entry.future_id] = {
            "contract": entry.contract_name,
            "address": entry.address,
            "constructor_args": dict(entry.constructor_args),
            "tx_hash": entry.tx_hash,
            "block_number": int(entry.block_number),
            "deployer": entry.deployer,
            "abi": entry_abi,
        }

    ordered = {chain_id: dict(sorted(data[chain_id].items())) for chain_id in sorted(data, key=int)}
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as file:
        json.dump(ordered, file, **STANDARD_REGISTRY_JSON_FORMAT)

    return filepath


def _get_abi(contract_instance: ContractInstance) -> ABI:
    contract_abi = list()
    for entry in contract_instance.contract_type.abi:
        contract_abi.append(entry.model_dump(mode="json", by_alias=True))
    return contract_abi


def _get_entry(future: ContractFuture, contract_instance: ContractInstance) -> RegistryEntry:
    receipt = contract_instance.receipt
    return RegistryEntry(
        chain_id=receipt.chain_id,
        future_id=future.future_id,
        contract_name=future.contract_name,
        address=to_checksum_address(contract_instance.address),
        abi=_get_abi(contract_instance),
        constructor_args=future.named_args(),
        tx_hash=receipt.txn_hash,
        block_number=receipt.block_number,
        deployer=receipt.transaction.sender,
    )


def registry_from_deployments(
    deployments: List[Tuple[ContractFuture, ContractInstance]], output_filepath: Path
) -> Path:
    """Records the deployed futures of a module run in its registry."""
    entries = [_get_entry(future, instance) for future, instance in deployments]
    output_filepath = write_registry(entries=entries, filepath=output_filepath)
    print(f"(i) Registry written to {output_filepath}!")
    return output_filepath


def contracts_from_registry(filepath: Path, chain_id: ChainId) -> Dict[FutureId, ContractInstance]:
    """Returns the contract instances recorded for a chain, keyed by future id."""
    deployments = dict()
    for entry in read_registry(filepath=filepath):
        if entry.chain_id != chain_id:
            continue
        contract_container = get_contract_container(entry.contract_name)
        deployments[entry.future_id] = contract_container.at(entry.address)
    return deployments


def find_future_id(entries: Iterable[FutureId], name: str) -> FutureId:
    """
    Returns the future id matching a future id or a contract name,
    e.g. 'DMNGModule#DMNGToken' or 'DMNGToken'.
    """
    entries = list(entries)
    if name in entries:
        return name
    matches = [f for f in entries if f.split(FUTURE_ID_DELIMITER, 1)[-1] == name]
    if len(matches) != 1:
        raise ValueError(
            f"'{name}' matches {len(matches)} registry entries; expected one of {entries}."
        )
    return matches[0]
