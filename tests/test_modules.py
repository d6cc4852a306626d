import math

import pytest
from conftest import ADMIN, CAMPAIGN_END_TIME, NTZC, OWNER, USDT

from dmng_deployment.modules import MODULES, dmng_module, get_module, nci_module

DMNG_CONSTRUCTOR_ORDER = [
    "initialSupply",
    "softCap",
    "hardCap",
    "campaignEndTime",
    "customDecimals",
    "usdtContract",
    "initialOwner",
    "admin",
]

NCI_CONSTRUCTOR_ORDER = ["tokenName", "tokenSymbol", "ntzcContract", "initialOwner", "admin"]


def test_modules_registered():
    assert set(MODULES) == {"DMNGModule", "NCIModule"}
    assert get_module("DMNGModule") is dmng_module
    assert get_module("NCIModule") is nci_module
    with pytest.raises(ValueError, match="Unknown deployment module"):
        get_module("TokenModule")


def test_dmng_module(dmng_environ):
    built = dmng_module.build_with(environ=dmng_environ)

    assert len(built.futures) == 1
    future = built.futures[0]
    assert future.contract_name == "DMNGToken"
    assert future.future_id == "DMNGModule#DMNGToken"
    assert list(future.named_args()) == DMNG_CONSTRUCTOR_ORDER
    assert future.resolve_args() == [
        1000000,
        100,
        500,
        CAMPAIGN_END_TIME,
        6,
        USDT,
        OWNER,
        ADMIN,
    ]
    assert built.results == {"dmng": future}


def test_dmng_module_caps_scenario():
    environ = {"INITIAL_SUPPLY": "1000000", "SOFT_CAP": "100", "HARD_CAP": "500"}
    future = dmng_module.build_with(environ=environ).futures[0]
    assert future.resolve_args()[:3] == [1000000, 100, 500]


def test_dmng_module_numeric_coercion(dmng_environ):
    dmng_environ["INITIAL_SUPPLY"] = "1e24"
    dmng_environ["CUSTOM_DECIMALS"] = " 18 "
    dmng_environ["HARD_CAP"] = "lots"

    named_args = dmng_module.build_with(environ=dmng_environ).futures[0].named_args()

    assert named_args["initialSupply"] == 10**24
    assert named_args["customDecimals"] == 18
    assert math.isnan(named_args["hardCap"])
    # string parameters are never coerced
    assert named_args["usdtContract"] == USDT


def test_dmng_module_unset_environment():
    named_args = dmng_module.build_with(environ={}).futures[0].named_args()

    for name in ("initialSupply", "softCap", "hardCap", "campaignEndTime", "customDecimals"):
        assert math.isnan(named_args[name])
    for name in ("usdtContract", "initialOwner", "admin"):
        assert named_args[name] is None


def test_dmng_module_overrides(dmng_environ):
    parameters = {"softCap": 250, "admin": OWNER}
    built = dmng_module.build_with(parameters=parameters, environ=dmng_environ)

    named_args = built.futures[0].named_args()
    assert named_args["softCap"] == 250
    assert named_args["admin"] == OWNER
    assert named_args["hardCap"] == 500
    assert built.parameters["softCap"].default == 100
    assert list(named_args) == DMNG_CONSTRUCTOR_ORDER


def test_nci_module(nci_environ):
    built = nci_module.build_with(environ=nci_environ)

    assert len(built.futures) == 1
    future = built.futures[0]
    assert future.contract_name == "NCIContract"
    assert list(future.named_args()) == NCI_CONSTRUCTOR_ORDER
    assert future.resolve_args() == ["NCI Token", "NCI", NTZC, OWNER, ADMIN]
    assert built.results == {"nci": future}


def test_nci_module_unset_environment():
    args = nci_module.build_with(environ={}).futures[0].resolve_args()
    assert args == [None] * len(NCI_CONSTRUCTOR_ORDER)


def test_modules_ignore_unrelated_environment(dmng_environ, nci_environ):
    environ = {**dmng_environ, **nci_environ}
    assert len(dmng_module.build_with(environ=environ).parameters) == 8
    assert len(nci_module.build_with(environ=environ).parameters) == 5
