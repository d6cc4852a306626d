from dmng_deployment.modules.dmng import dmng_module
from dmng_deployment.modules.nci import nci_module

MODULES = {module.module_id: module for module in (dmng_module, nci_module)}


def get_module(module_id: str):
    try:
        return MODULES[module_id]
    except KeyError:
        raise ValueError(
            f"Unknown deployment module '{module_id}'; expected one of {list(MODULES)}."
        )
