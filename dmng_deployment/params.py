import math
import re
from abc import ABC, abstractmethod
from collections import OrderedDict
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from dmng_deployment.constants import FUTURE_ID_DELIMITER
from dmng_deployment.networks import load_environment
from dmng_deployment.utils import load_parameters_file

NAN = float("nan")

Number = Union[int, float]

_INTEGER = re.compile(r"^[+-]?[0-9]+$")
_DECIMAL = re.compile(r"^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?$")
_PREFIXED = re.compile(r"^0([xXoObB])([0-9a-zA-Z]+)$")
_INFINITY = re.compile(r"^([+-]?)Infinity$")
_BASES = {"x": 16, "o": 8, "b": 2}

# decimal digits of 2**256; longer integral values can never be a uint256
MAX_INTEGER_DIGITS = 78


def to_number(value: Any) -> Number:
    """
    Numeric coercion of an environment value with JavaScript unary plus rules:
    an unset value is NaN, a blank string is 0, anything unparsable is NaN.

    Integral values are returned as (arbitrary precision) ints so that large
    token amounts survive the coercion exactly.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if value is None:
        return NAN

    text = str(value).strip()
    if not text:
        return 0
    if _INTEGER.match(text):
        if len(text.lstrip("+-").lstrip("0")) > MAX_INTEGER_DIGITS:
            return float(text)
        return int(text)

    prefixed = _PREFIXED.match(text)
    if prefixed:
        base = _BASES[prefixed.group(1).lower()]
        try:
            return int(prefixed.group(2), base)
        except ValueError:
            return NAN

    infinity = _INFINITY.match(text)
    if infinity:
        return float(f"{infinity.group(1)}inf")

    if not _DECIMAL.match(text):
        return NAN
    try:
        number = Decimal(text)
    except InvalidOperation:
        return NAN
    if number.is_zero():
        return 0
    if number.adjusted() >= MAX_INTEGER_DIGITS:
        # inf, or a float far beyond any uint256
        return float(text)
    if number == number.to_integral_value():
        return int(number)
    return float(number)


def is_unset(value: Any) -> bool:
    """Returns True for values coming from an unset environment variable."""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


# Variables


class Variable(ABC):
    @abstractmethod
    def resolve(self) -> Any:
        raise NotImplementedError


class ModuleParameter(Variable):
    """A named, overridable module input."""

    def __init__(
        self,
        name: str,
        value: Any,
        default: Any = None,
        overridden: bool = False,
        source: Optional[str] = None,
        raw: Optional[str] = None,
    ):
        self.name = name
        self.value = value
        self.default = default
        self.overridden = overridden
        # environment variable the default was read from, and its text
        self.source = source
        self.raw = raw

    @property
    def blank_source(self) -> bool:
        """True when the value is the coercion of an empty environment variable."""
        if self.overridden or self.source is None or self.raw is None:
            return False
        return not self.raw.strip()

    def resolve(self) -> Any:
        return self.value

    def __repr__(self) -> str:
        return f"ModuleParameter({self.name}={self.value!r})"


def _resolve_param(value: Any) -> Any:
    """Resolves a single parameter value or a list of parameter values."""
    if isinstance(value, list):
        return [_resolve_param(v) for v in value]

    if isinstance(value, Variable):
        return value.resolve()

    return value  # literally a value


class ContractFuture:
    """A request to instantiate a contract with an ordered list of constructor arguments."""

    def __init__(self, module_id: str, contract_name: str, args: List[Any]):
        self.module_id = module_id
        self.contract_name = contract_name
        self.args = args

    @property
    def future_id(self) -> str:
        return f"{self.module_id}{FUTURE_ID_DELIMITER}{self.contract_name}"

    def resolve_args(self) -> List[Any]:
        return [_resolve_param(arg) for arg in self.args]

    def named_args(self) -> OrderedDict:
        named = OrderedDict()
        for position, arg in enumerate(self.args):
            name = arg.name if isinstance(arg, ModuleParameter) else f"arg{position}"
            named[name] = _resolve_param(arg)
        return named

    def __repr__(self) -> str:
        return f"ContractFuture({self.future_id}, args={self.args})"


class ModuleBuilder:
    """Collects the parameters and contract directives of a single deployment module."""

    class Invalid(Exception):
        """Raised when a module declaration or its parameter overrides are invalid"""

    def __init__(
        self,
        module_id: str,
        parameters: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.module_id = module_id
        self.overrides = dict(parameters or {})
        self.environ = environ if environ is not None else dict()
        self.parameters: Dict[str, ModuleParameter] = OrderedDict()
        self.futures: List[ContractFuture] = list()
        self.results: Dict[str, Any] = dict()

    def get_parameter(self, name: str, default: Any = None) -> ModuleParameter:
        if name in self.parameters:
            raise self.Invalid(f"Parameter '{name}' is declared twice in {self.module_id}.")

        overridden = name in self.overrides
        value = self.overrides[name] if overridden else default
        parameter = ModuleParameter(name=name, value=value, default=default, overridden=overridden)
        self.parameters[name] = parameter
        return parameter

    def env_parameter(self, name: str, envvar: str, numeric: bool = False) -> ModuleParameter:
        """Declares a parameter whose default is read from an environment variable."""
        raw = self.environ.get(envvar)
        default = to_number(raw) if numeric else raw
        parameter = self.get_parameter(name, default)
        parameter.source = envvar
        parameter.raw = raw
        return parameter

    def contract(self, contract_name: str, args: Optional[List[Any]] = None) -> ContractFuture:
        future = ContractFuture(
            module_id=self.module_id, contract_name=contract_name, args=list(args or [])
        )
        self.futures.append(future)
        return future

    def check_overrides(self) -> None:
        unknown = [name for name in self.overrides if name not in self.parameters]
        if unknown:
            raise self.Invalid(
                f"Unknown parameter(s) for {self.module_id}: {', '.join(sorted(unknown))}."
            )


BuildFunction = Callable[[ModuleBuilder], Optional[Dict[str, Any]]]


class Module:
    """A named deployment module: a build function run against a ModuleBuilder."""

    def __init__(self, module_id: str, build: BuildFunction):
        self.module_id = module_id
        self._build = build

    def build_with(
        self,
        parameters: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> ModuleBuilder:
        builder = ModuleBuilder(
            module_id=self.module_id, parameters=parameters, environ=load_environment(environ)
        )
        builder.results = self._build(builder) or dict()
        builder.check_overrides()
        return builder

    def __repr__(self) -> str:
        return f"Module({self.module_id})"


def build_module(module_id: str) -> Callable[[BuildFunction], Module]:
    """Decorates a build function into a named deployment module."""

    def decorator(build: BuildFunction) -> Module:
        return Module(module_id=module_id, build=build)

    return decorator


def load_module_parameters(filepath: Optional[Path], module_id: str) -> Dict[str, Any]:
    """Returns the parameter overrides for a module from a JSON or YAML parameters file."""
    if filepath is None:
        return dict()

    config = load_parameters_file(filepath)
    module_parameters = config.get(module_id) or dict()
    if not isinstance(module_parameters, dict):
        raise ValueError(f"Malformed parameters for {module_id} in {filepath}.")
    return module_parameters
