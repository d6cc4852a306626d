from ape.utils import ZERO_ADDRESS

from dmng_deployment.params import ContractFuture, ModuleParameter


def _abort() -> None:
    print("Aborting deployment!")
    exit(-1)


def _ask(question: str) -> None:
    answer = input(f"{question} Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _continue() -> None:
    """Asks the user to continue."""
    _ask("Continue")


def _describe_source(arg) -> str:
    """Where a constructor argument comes from: an override, the environment or the module."""
    if not isinstance(arg, ModuleParameter):
        return "literal"
    if arg.overridden:
        if arg.source:
            return f"override; {arg.source} gives {arg.default!r}"
        return f"override; default {arg.default!r}"
    if arg.source:
        return f"from {arg.source}"
    return "module default"


def _confirm_future(future: ContractFuture) -> None:
    """Asks the user to confirm the resolved constructor arguments of a contract future."""
    if not future.args:
        print(f"\n(i) No constructor parameters for {future.future_id}")
        _ask(f"Deploy {future.future_id}")
        return

    print(f"\nConstructor parameters for {future.future_id}")
    contains_zero_address = False
    for (name, value), arg in zip(future.named_args().items(), future.args):
        print(f"\t{name}={value!r} ({_describe_source(arg)})")
        contains_zero_address = contains_zero_address or value == ZERO_ADDRESS
    _ask(f"Deploy {future.future_id}")
    if contains_zero_address:
        _ask("Zero Address detected for deployment parameter; Continue?")
