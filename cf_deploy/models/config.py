"""Configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Any, Tuple

from ..constants import (
    DEFAULT_DOMAIN,
    DEFAULT_HEALTH_PATH,
    DEFAULT_HEALTH_TIMEOUT,
    DEFAULT_SMOKE_TIMEOUT,
    DEFAULT_TEST_COMMAND,
    DEFAULT_WORKER_NAME,
)


@dataclass(frozen=True)
class DeployConfig:
    """Resolved configuration for one invocation

    Built once by ``config_service.load_config`` and passed to every
    component. Paths are absolute.
    """

    worker_name: str = DEFAULT_WORKER_NAME
    domain: str = DEFAULT_DOMAIN
    worker_dir: Path = field(default_factory=Path.cwd)
    root_dir: Path = field(default_factory=Path.cwd)
    assets_dir: Path = field(default_factory=lambda: Path.cwd() / "public")
    versions_json: Path = field(default_factory=lambda: Path.cwd() / "public" / "versions.json")
    version_source: Path = field(default_factory=lambda: Path.cwd() / "package.json")

    # Empty means "derive from worker name and domain"
    production_url: str = ""
    github_repo: str = ""

    smoke_extra: Optional[str] = None
    smoke_timeout: float = DEFAULT_SMOKE_TIMEOUT
    health_path: str = DEFAULT_HEALTH_PATH
    health_timeout: float = DEFAULT_HEALTH_TIMEOUT
    check_health: bool = False

    test_command: str = DEFAULT_TEST_COMMAND
    wrangler_command: Tuple[str, ...] = ("bun", "x", "wrangler")

    # APP_VERSION override captured at load time
    app_version: Optional[str] = None

    config_file: Optional[Path] = None

    @property
    def production(self) -> str:
        """Production URL, explicit or derived"""
        if self.production_url:
            return self.production_url
        return f"https://{self.worker_name}.{self.domain}"

    @property
    def github_url(self) -> str:
        """Repository URL or empty string"""
        if not self.github_repo:
            return ""
        if self.github_repo.startswith(("http://", "https://")):
            return self.github_repo.rstrip("/")
        return f"https://github.com/{self.github_repo}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "worker": {
                "name": self.worker_name,
                "domain": self.domain,
                "dir": str(self.worker_dir),
            },
            "urls": {"production": self.production},
            "github": {"repo": self.github_repo},
            "version": {"source": str(self.version_source)},
            "output": {"versions_json": str(self.versions_json)},
            "assets": {"dir": str(self.assets_dir)},
            "smoke": {"extra": self.smoke_extra, "timeout": self.smoke_timeout},
            "health": {
                "path": self.health_path,
                "timeout": self.health_timeout,
                "check": self.check_health,
            },
            "test": {"command": self.test_command},
            "wrangler": {"command": " ".join(self.wrangler_command)},
            "root_dir": str(self.root_dir),
            "config_file": str(self.config_file) if self.config_file else None,
        }
