"""Operation result models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Any

from .manifest import VersionsJson


@dataclass
class UploadResult:
    """Result of an upload"""
    version: str
    tag: Optional[str] = None
    preview_url: str = ""
    args: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "version": self.version,
            "tag": self.tag,
            "preview_url": self.preview_url,
        }


@dataclass
class PromoteResult:
    """Result of a promote or rollback"""
    version_id: Optional[str] = None
    tag: Optional[str] = None
    version: Optional[str] = None
    previous_tag: Optional[str] = None
    used_fallback: bool = False  # Rollback delegated to the platform's own command

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "version_id": self.version_id,
            "tag": self.tag,
            "version": self.version,
            "previous_tag": self.previous_tag,
            "used_fallback": self.used_fallback,
        }


@dataclass
class SmokeTarget:
    """URL to check plus the version the manifest expects there"""
    url: str
    expected_version: Optional[str] = None


@dataclass
class HealthReport:
    """Parsed health endpoint response"""
    status_code: int
    version: str
    status: Optional[str] = None
    timestamp: Optional[str] = None


@dataclass
class SmokeResult:
    """Result of a smoke test"""
    url: str
    health_version: str
    index_bytes: int
    index_status: int = 200
    expected_version: Optional[str] = None
    extra_command: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def version_match(self) -> Optional[bool]:
        """None when nothing was expected"""
        if self.expected_version is None:
            return None
        return self.health_version == self.expected_version

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "url": self.url,
            "health_version": self.health_version,
            "expected_version": self.expected_version,
            "index_bytes": self.index_bytes,
            "index_status": self.index_status,
            "extra_command": self.extra_command,
            "version_match": self.version_match,
            "warnings": self.warnings,
        }


@dataclass
class DeployResult:
    """Result of upload followed by an optional smoke test"""
    upload: UploadResult
    smoke: Optional[SmokeResult] = None
    production_url: str = ""


@dataclass
class ManifestReadResult:
    """Best-effort read of a previous manifest

    ``manifest`` is None when the file is absent or unreadable. ``error``
    is set only when the file exists but could not be parsed, so callers
    can tell "no prior data" from "corrupt prior data".
    """
    manifest: Optional[VersionsJson] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.manifest is not None

    @property
    def is_corrupt(self) -> bool:
        return self.error is not None


@dataclass
class InitResult:
    """Files written or left untouched by project scaffolding"""
    directory: Path
    created: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "directory": str(self.directory),
            "created": [str(p) for p in self.created],
            "skipped": [str(p) for p in self.skipped],
        }
