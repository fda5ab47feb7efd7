"""Service layer for cf-deploy"""

from .config_service import load_config, read_app_version, read_command_count
from .deploy_service import DeployService

__all__ = [
    "load_config",
    "read_app_version",
    "read_command_count",
    "DeployService",
]
