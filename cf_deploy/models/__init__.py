"""Data models for cf-deploy"""

from .config import DeployConfig
from .manifest import GitInfo, Release, Preview, VersionsJson
from .result import (
    UploadResult,
    PromoteResult,
    SmokeTarget,
    HealthReport,
    SmokeResult,
    DeployResult,
    ManifestReadResult,
    InitResult,
)
from .version import VersionRecord

__all__ = [
    # Config
    "DeployConfig",

    # Manifest models
    "GitInfo",
    "Release",
    "Preview",
    "VersionsJson",

    # Platform records
    "VersionRecord",

    # Result models
    "UploadResult",
    "PromoteResult",
    "SmokeTarget",
    "HealthReport",
    "SmokeResult",
    "DeployResult",
    "ManifestReadResult",
    "InitResult",
]
