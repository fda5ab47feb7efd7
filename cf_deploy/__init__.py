"""cf-deploy - Cloudflare Workers deploy toolkit

Wraps wrangler to upload versioned builds, keep a versions.json manifest,
promote and roll back traffic, and smoke-test deployed URLs.
"""

from .__version__ import __version__, get_version
from .api.exceptions import CfDeployError
from .models import DeployConfig, VersionsJson, Release, Preview, VersionRecord
from .services import DeployService, load_config

__all__ = [
    "__version__",
    "get_version",
    "CfDeployError",
    "DeployConfig",
    "VersionsJson",
    "Release",
    "Preview",
    "VersionRecord",
    "DeployService",
    "load_config",
]
