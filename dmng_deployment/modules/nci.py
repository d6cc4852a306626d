from dmng_deployment.constants import NCI_CONTRACT
from dmng_deployment.params import ModuleBuilder, build_module


@build_module("NCIModule")
def nci_module(m: ModuleBuilder):
    token_name = m.env_parameter("tokenName", "TOKEN_NAME")
    token_symbol = m.env_parameter("tokenSymbol", "TOKEN_SYMBOL")
    ntzc_contract = m.env_parameter("ntzcContract", "NTZC_CONTRACT")
    initial_owner = m.env_parameter("initialOwner", "INITIAL_OWNER")
    admin = m.env_parameter("admin", "ADMIN")

    # must follow the NCIContract constructor
    nci = m.contract(
        NCI_CONTRACT,
        [token_name, token_symbol, ntzc_contract, initial_owner, admin],
    )

    return {"nci": nci}
