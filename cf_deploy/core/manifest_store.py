"""Manifest store: reconciles platform versions into versions.json"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..api.exceptions import ManifestInvalidError, ManifestNotFoundError
from ..constants import MSG_MANIFEST_WRITTEN
from ..models.config import DeployConfig
from ..models.manifest import GitInfo, Preview, Release, VersionsJson
from ..models.result import ManifestReadResult
from ..models.version import VersionRecord
from ..utils.async_utils import run_async
from ..utils.file_utils import read_json, write_json
from ..utils.version_utils import is_zero_version, release_tag, sort_by_version
from .executor import WranglerClient
from .health import HealthChecker
from .urls import version_alias_url, version_preview_url, worker_url

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """Current time as ISO-8601 with milliseconds and a Z suffix"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def load_versions_json(path: Path) -> VersionsJson:
    """
    Load versions.json

    Args:
        path: Manifest path

    Returns:
        Parsed manifest

    Raises:
        ManifestNotFoundError: If the file does not exist
        ManifestInvalidError: If the file cannot be parsed
    """
    try:
        data = read_json(path)
    except FileNotFoundError as e:
        raise ManifestNotFoundError(str(path)) from e
    except (OSError, ValueError) as e:
        raise ManifestInvalidError(str(path), str(e)) from e

    if not isinstance(data, dict):
        raise ManifestInvalidError(str(path), "top-level value is not an object")

    try:
        return VersionsJson.from_dict(data)
    except (KeyError, TypeError, AttributeError) as e:
        raise ManifestInvalidError(str(path), f"malformed entry: {e}") from e


def try_read_manifest(path: Path) -> ManifestReadResult:
    """
    Best-effort read of a previous manifest

    A missing file yields an empty result. A corrupt file is logged and
    reported through ``error`` instead of raising.

    Args:
        path: Manifest path

    Returns:
        Read result
    """
    try:
        return ManifestReadResult(manifest=load_versions_json(path))
    except ManifestNotFoundError:
        logger.debug(f"No previous manifest at {path}")
        return ManifestReadResult()
    except ManifestInvalidError as e:
        logger.warning(f"Ignoring unreadable previous manifest {path}: {e.reason}")
        return ManifestReadResult(error=e.reason)


class ManifestStore:
    """Builds, health-checks and writes versions.json"""

    def __init__(self,
                 config: DeployConfig,
                 wrangler: Optional[WranglerClient] = None,
                 health_checker: Optional[HealthChecker] = None,
                 clock: Callable[[], str] = utc_timestamp):
        """Initialize manifest store

        Args:
            config: Resolved configuration
            wrangler: Platform client (needed by generate only)
            health_checker: Health checker used when health checks are on
            clock: Timestamp source
        """
        self.config = config
        self.wrangler = wrangler
        self.health_checker = health_checker or HealthChecker(
            health_path=config.health_path,
            timeout=config.health_timeout
        )
        self.clock = clock

    @property
    def path(self) -> Path:
        return self.config.versions_json

    def load(self) -> VersionsJson:
        """Load the configured manifest (raises when missing or invalid)"""
        return load_versions_json(self.path)

    def try_load(self) -> ManifestReadResult:
        """Best-effort load of the configured manifest"""
        return try_read_manifest(self.path)

    def build(self,
              records: List[VersionRecord],
              app_version: str,
              git_info: Optional[GitInfo] = None,
              command_count: Optional[int] = None,
              previous: Optional[VersionsJson] = None) -> VersionsJson:
        """
        Reconcile platform records with local metadata

        Args:
            records: Platform records, most recent first
            app_version: Currently configured app version
            git_info: Git metadata for the current version
            command_count: Command count for the current version
            previous: Previous manifest, if one could be read

        Returns:
            New manifest (not yet health-checked or written)
        """
        name, domain = self.config.worker_name, self.config.domain

        releases: List[Release] = []
        previews: List[Preview] = []
        seen = set()

        for record in records:
            if record.is_preview:
                previews.append(Preview(
                    label=f"PR #{record.pr_number}",
                    tag=record.tag,
                    date=record.created,
                    version_id=record.version_id,
                    url=worker_url(name, domain, record.tag)
                ))
            elif record.is_release:
                version = record.release_version
                # First occurrence is the most recent upload of that version
                if version in seen:
                    logger.debug(f"Skipping older upload {record.version_id} of {version}")
                    continue
                seen.add(version)
                releases.append(Release(
                    version=version,
                    tag=record.tag,
                    date=record.created,
                    version_id=record.version_id,
                    url=version_alias_url(name, domain, version),
                    preview_url=version_preview_url(name, domain, record.version_id)
                ))

        previous_by_version: Dict[str, Release] = {}
        if previous:
            for release in previous.versions:
                previous_by_version.setdefault(release.version, release)

        for release in releases:
            prior = previous_by_version.get(release.version)
            if release.version == app_version:
                release.git = git_info or (prior.git if prior else None)
                release.command_count = command_count if command_count is not None else (
                    prior.command_count if prior else None
                )
            elif prior:
                release.git = prior.git
                release.command_count = prior.command_count

        releases = sort_by_version(releases, key=lambda r: r.version)

        if not is_zero_version(app_version) and app_version not in seen:
            releases.insert(0, self._placeholder(app_version, git_info, command_count,
                                                 previous_by_version.get(app_version)))

        return VersionsJson(
            production=self.config.production,
            github=self.config.github_url,
            generated=self.clock(),
            versions=releases,
            previews=previews
        )

    def _placeholder(self,
                     app_version: str,
                     git_info: Optional[GitInfo],
                     command_count: Optional[int],
                     prior: Optional[Release]) -> Release:
        """Entry for the current version before it has been uploaded"""
        # Reuse the earlier placeholder date so unchanged runs write identical output
        if prior is not None and not prior.is_uploaded and prior.date:
            date = prior.date
        else:
            date = self.clock()

        return Release(
            version=app_version,
            tag=release_tag(app_version),
            date=date,
            version_id="",
            url=version_alias_url(self.config.worker_name, self.config.domain, app_version),
            preview_url="",
            git=git_info or (prior.git if prior else None),
            command_count=command_count if command_count is not None else (
                prior.command_count if prior else None
            )
        )

    def annotate_health(self, manifest: VersionsJson) -> VersionsJson:
        """
        Probe every release preview URL and every PR preview concurrently

        Unreachable URLs are recorded as ``healthy: false``; releases without
        a preview URL are left unset.

        Args:
            manifest: Manifest to annotate in place

        Returns:
            The same manifest
        """
        urls = [r.preview_url for r in manifest.versions if r.preview_url]
        urls += [p.url for p in manifest.previews if p.url]
        if not urls:
            return manifest

        logger.info(f"Checking health of {len(urls)} URL(s)")
        results = run_async(self.health_checker.probe_many(urls))

        for release in manifest.versions:
            if release.preview_url:
                release.healthy = results.get(release.preview_url, False)
        for preview in manifest.previews:
            if preview.url:
                preview.healthy = results.get(preview.url, False)

        return manifest

    def write(self, manifest: VersionsJson, path: Optional[Path] = None) -> Path:
        """
        Write manifest as pretty-printed JSON with a trailing newline

        Args:
            manifest: Manifest to write
            path: Output path (defaults to the configured one)

        Returns:
            Path written
        """
        target = path or self.path
        write_json(target, manifest.to_dict())
        logger.info(f"Wrote {target}")
        return target

    def generate(self,
                 app_version: str,
                 git_info: Optional[GitInfo] = None,
                 command_count: Optional[int] = None,
                 check_health: Optional[bool] = None,
                 output: Optional[Path] = None) -> VersionsJson:
        """
        Query the platform, rebuild the manifest and write it

        Args:
            app_version: Currently configured app version
            git_info: Git metadata for the current version
            command_count: Command count for the current version
            check_health: Probe URLs (defaults to the configured setting)
            output: Output path (defaults to the configured one)

        Returns:
            Written manifest
        """
        if self.wrangler is None:
            raise ValueError("ManifestStore.generate requires a WranglerClient")

        target = output or self.path
        records = self.wrangler.list_versions()
        previous = try_read_manifest(target)

        manifest = self.build(
            records,
            app_version,
            git_info=git_info,
            command_count=command_count,
            previous=previous.manifest
        )

        if check_health is None:
            check_health = self.config.check_health
        if check_health:
            self.annotate_health(manifest)

        self.write(manifest, target)
        logger.info(MSG_MANIFEST_WRITTEN.format(
            versions=len(manifest.versions),
            previews=len(manifest.previews)
        ))
        return manifest


__all__ = [
    'ManifestStore',
    'load_versions_json',
    'try_read_manifest',
    'utc_timestamp',
]

