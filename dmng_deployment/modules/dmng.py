from dmng_deployment.constants import DMNG_TOKEN
from dmng_deployment.params import ModuleBuilder, build_module


@build_module("DMNGModule")
def dmng_module(m: ModuleBuilder):
    initial_supply = m.env_parameter("initialSupply", "INITIAL_SUPPLY", numeric=True)
    soft_cap = m.env_parameter("softCap", "SOFT_CAP", numeric=True)
    hard_cap = m.env_parameter("hardCap", "HARD_CAP", numeric=True)

    initial_owner = m.env_parameter("initialOwner", "INITIAL_OWNER")
    usdt_contract = m.env_parameter("usdtContract", "USDT_CONTRACT")

    custom_decimals = m.env_parameter("customDecimals", "CUSTOM_DECIMALS", numeric=True)
    campaign_end_time = m.env_parameter("campaignEndTime", "CAMPAIGN_END_TIME", numeric=True)

    admin = m.env_parameter("admin", "ADMIN")

    # must follow the DMNGToken constructor
    dmng = m.contract(
        DMNG_TOKEN,
        [
            initial_supply,
            soft_cap,
            hard_cap,
            campaign_end_time,
            custom_decimals,
            usdt_contract,
            initial_owner,
            admin,
        ],
    )

    return {"dmng": dmng}
