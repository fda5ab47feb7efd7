"""Core functionality for cf-deploy"""

from .executor import ProcessExecutor, ProcessResult, CommandRunner, WranglerClient
from .version_parser import parse_versions_output
from .urls import worker_url, version_alias_url, version_preview_url
from .health import HealthChecker
from .manifest_store import ManifestStore, load_versions_json, try_read_manifest
from .scaffold import scaffold_project

__all__ = [
    "ProcessExecutor",
    "ProcessResult",
    "CommandRunner",
    "WranglerClient",
    "parse_versions_output",
    "worker_url",
    "version_alias_url",
    "version_preview_url",
    "HealthChecker",
    "ManifestStore",
    "load_versions_json",
    "try_read_manifest",
    "scaffold_project",
]
