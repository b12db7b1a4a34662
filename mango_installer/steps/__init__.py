from .step_10_install_dependencies import InstallDependenciesStep
from .step_20_install_mangowc import InstallMangoWCStep
from .step_30_install_config import InstallConfigStep
from .step_40_setup_noctalia import SetupNoctaliaStep
from .step_50_post_install_checks import PostInstallChecksStep

__all__ = [
    "InstallDependenciesStep",
    "InstallMangoWCStep",
    "InstallConfigStep",
    "SetupNoctaliaStep",
    "PostInstallChecksStep",
]
