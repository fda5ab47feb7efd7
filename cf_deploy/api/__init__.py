"""Public exceptions for cf-deploy"""

from .exceptions import (
    CfDeployError,
    ConfigError,
    ManifestNotFoundError,
    ManifestInvalidError,
    VersionNotFoundError,
    MissingVersionIdError,
    NotEnoughReleasesError,
    NoTargetUrlError,
    HealthCheckError,
    SmokeCheckError,
    WranglerError,
    ProjectExistsError,
    E2ETestError,
)

__all__ = [
    "CfDeployError",
    "ConfigError",
    "ManifestNotFoundError",
    "ManifestInvalidError",
    "VersionNotFoundError",
    "MissingVersionIdError",
    "NotEnoughReleasesError",
    "NoTargetUrlError",
    "HealthCheckError",
    "SmokeCheckError",
    "WranglerError",
    "ProjectExistsError",
    "E2ETestError",
]
