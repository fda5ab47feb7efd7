"""Exception definitions for cf-deploy"""

from typing import List, Optional

from ..constants import ErrorCode, MSG_RUN_VERSIONS_JSON


class CfDeployError(Exception):
    """Base exception for cf-deploy"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigError(CfDeployError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class ManifestNotFoundError(CfDeployError):
    """versions.json does not exist"""

    def __init__(self, path: str):
        message = f"Cannot read {path} (file not found). {MSG_RUN_VERSIONS_JSON}."
        super().__init__(message, ErrorCode.MANIFEST_NOT_FOUND)
        self.path = path


class ManifestInvalidError(CfDeployError):
    """versions.json exists but cannot be parsed"""

    def __init__(self, path: str, reason: str):
        message = f"Cannot read {path} ({reason}). {MSG_RUN_VERSIONS_JSON}."
        super().__init__(message, ErrorCode.MANIFEST_INVALID)
        self.path = path
        self.reason = reason


class VersionNotFoundError(CfDeployError):
    """Requested version or tag is not in the manifest"""

    def __init__(self, target: str, available: List[str]):
        message = f'Version "{target}" not found in versions.json'
        if available:
            message += f"\nAvailable: {', '.join(available)}"
        else:
            message += "\nAvailable: (none)"
        super().__init__(message, ErrorCode.VERSION_NOT_FOUND)
        self.target = target
        self.available = available


class MissingVersionIdError(CfDeployError):
    """Release exists in the manifest but was never uploaded"""

    def __init__(self, tag: Optional[str] = None):
        label = f" for {tag}" if tag else ""
        super().__init__(f"No versionId found{label}. Upload first.", ErrorCode.MISSING_VERSION_ID)
        self.tag = tag


class NotEnoughReleasesError(CfDeployError):
    """Rollback needs a current and a previous uploaded release"""

    def __init__(self, count: int):
        super().__init__(
            f"Only {count} uploaded version(s) in versions.json. Nothing to roll back to.",
            ErrorCode.NOT_ENOUGH_RELEASES
        )
        self.count = count


class NoTargetUrlError(CfDeployError):
    """No URL could be resolved for a smoke or e2e run"""

    def __init__(self):
        super().__init__(
            "No URL to test. Pass a URL or set urls.production in cf-deploy.yml",
            ErrorCode.NO_TARGET_URL
        )


class HealthCheckError(CfDeployError):
    """Health or index endpoint unreachable during a smoke test"""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url} unreachable ({reason})", ErrorCode.HEALTH_CHECK_FAILED)
        self.url = url
        self.reason = reason


class SmokeCheckError(CfDeployError):
    """Project-specific smoke command failed"""

    def __init__(self, command: str, exit_code: int):
        super().__init__(
            f"Extra smoke checks failed (exit {exit_code}): {command}",
            ErrorCode.SMOKE_CHECK_FAILED
        )
        self.command = command
        self.exit_code = exit_code


class WranglerError(CfDeployError):
    """Vendor CLI exited with a non-zero status"""

    def __init__(self, args: List[str], exit_code: int, stderr: str = ""):
        message = f"Command failed (exit {exit_code}): {' '.join(args)}"
        if stderr.strip():
            message += f"\n{stderr.strip()}"
        super().__init__(message, ErrorCode.WRANGLER_FAILED)
        self.args_list = args
        self.exit_code = exit_code
        self.stderr = stderr


class ProjectExistsError(CfDeployError):
    """Project already initialized"""

    def __init__(self, path: str):
        super().__init__(f"{path} already exists in this directory", ErrorCode.PROJECT_EXISTS)
        self.path = path


class E2ETestError(CfDeployError):
    """End-to-end test command exited with a non-zero status"""

    def __init__(self, command: str, exit_code: int):
        super().__init__(f"Tests failed (exit {exit_code}): {command}", ErrorCode.E2E_TESTS_FAILED)
        self.command = command
        self.exit_code = exit_code
