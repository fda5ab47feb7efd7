"""Deploy service: upload, promote, rollback and smoke-test worker versions"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

import httpx
from rich.console import Console

from ..api.exceptions import (
    E2ETestError,
    ManifestInvalidError,
    MissingVersionIdError,
    NoTargetUrlError,
    NotEnoughReleasesError,
    SmokeCheckError,
    VersionNotFoundError,
)
from ..constants import (
    EMOJI_SUCCESS,
    EMOJI_WARNING,
    ENV_APP_VERSION,
    ENV_SMOKE_URL,
    ENV_TARGET_URL,
    MSG_PREVIEW_URL,
    MSG_PROMOTING,
    MSG_ROLLING_BACK,
    MSG_UPLOADING,
)
from ..core.executor import CommandRunner, ProcessExecutor, ProcessResult, WranglerClient
from ..core.health import HealthChecker
from ..core.manifest_store import ManifestStore, utc_timestamp
from ..core.urls import version_alias_url, worker_url
from ..models.config import DeployConfig
from ..models.manifest import Release, VersionsJson
from ..models.result import DeployResult, PromoteResult, SmokeResult, SmokeTarget, UploadResult
from ..models.version import VersionRecord
from ..utils.async_utils import run_async
from ..utils.file_utils import format_size
from ..utils.git_utils import get_git_info
from ..utils.version_utils import (
    is_valid_version,
    is_zero_version,
    preview_tag,
    release_alias,
    release_tag,
    strip_version_prefix,
)
from .config_service import read_app_version, read_command_count

logger = logging.getLogger(__name__)


class DeployService:
    """Sequences wrangler calls, manifest lookups and health checks

    Each public method is one CLI command. Failures raise CfDeployError
    subclasses; nothing is retried.
    """

    def __init__(self,
                 config: DeployConfig,
                 runner: Optional[CommandRunner] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 console: Optional[Console] = None,
                 clock: Callable[[], str] = utc_timestamp):
        """Initialize deploy service

        Args:
            config: Resolved configuration
            runner: Command runner (defaults to real subprocesses)
            transport: httpx transport for health requests
            console: Console for progress output
            clock: Timestamp source for the manifest
        """
        self.config = config
        self.runner = runner or ProcessExecutor()
        self.console = console or Console()
        self.wrangler = WranglerClient(config, self.runner)

        # Smoke tests use the longer timeout
        self.smoke_checker = HealthChecker(
            health_path=config.health_path,
            timeout=config.smoke_timeout,
            transport=transport
        )
        self.store = ManifestStore(
            config,
            wrangler=self.wrangler,
            health_checker=HealthChecker(
                health_path=config.health_path,
                timeout=config.health_timeout,
                transport=transport
            ),
            clock=clock
        )

    # Upload

    def upload(self,
               version: Optional[str] = None,
               tag: Optional[str] = None,
               pr: Optional[Union[str, int]] = None) -> UploadResult:
        """
        Upload a new version without routing traffic to it

        Tag resolution: explicit tag, then ``pr-<n>``, then ``v<version>``
        unless the version is 0.0.0.

        Args:
            version: Version to upload (defaults to the app version)
            tag: Custom tag
            pr: Pull request number

        Returns:
            Upload result with the preview URL
        """
        version = version or read_app_version(self.config)
        zero = is_zero_version(version)
        if not zero and not is_valid_version(version):
            logger.warning(f"'{version}' is not a valid version; uploading it as-is")

        name, domain = self.config.worker_name, self.config.domain
        message = alias = None
        preview_url = ""
        label = ""

        if tag:
            message = alias = tag
            preview_url = worker_url(name, domain, tag)
            label = f" {tag}"
        elif pr is not None and str(pr).strip():
            number = str(pr).strip().lstrip("#")
            tag = alias = preview_tag(number)
            message = f"PR #{number}"
            preview_url = worker_url(name, domain, tag)
            label = f" PR preview ({tag})"
        elif not zero:
            tag = message = release_tag(version)
            alias = release_alias(version)
            preview_url = version_alias_url(name, domain, version)
            label = f" {tag}"

        variables = {} if zero else {ENV_APP_VERSION: version}

        self.console.print(MSG_UPLOADING.format(label=label))
        result = self.wrangler.upload_version(tag=tag, message=message, alias=alias, variables=variables)

        if preview_url:
            self.console.print(MSG_PREVIEW_URL.format(url=preview_url))

        return UploadResult(version=version, tag=tag, preview_url=preview_url, args=result.args)

    def preview(self, pr: Union[str, int]) -> UploadResult:
        """Upload a PR preview (`pr-<n>`)"""
        return self.upload(pr=pr)

    def deploy(self,
               version: Optional[str] = None,
               tag: Optional[str] = None,
               skip_smoke: bool = False) -> DeployResult:
        """
        Upload, then smoke-test the preview URL. Never promotes.

        Args:
            version: Version to upload
            tag: Custom tag
            skip_smoke: Skip the smoke test

        Returns:
            Deploy result
        """
        upload = self.upload(version=version, tag=tag)

        smoke = None
        if skip_smoke:
            logger.info("Smoke test skipped")
        elif not upload.preview_url:
            logger.warning("No preview URL for an untagged upload; smoke test skipped")
        else:
            self.console.print()
            smoke = self.smoke(upload.preview_url)

        return DeployResult(upload=upload, smoke=smoke, production_url=self.config.production)

    # Promote / rollback

    def resolve_release(self, manifest: VersionsJson, target: Optional[str] = None) -> Release:
        """
        Pick the release to promote

        Args:
            manifest: Loaded manifest
            target: Version or tag, with or without a leading "v";
                the first (highest) release when omitted

        Returns:
            Matching release

        Raises:
            VersionNotFoundError: If target is not in the manifest
            MissingVersionIdError: If the manifest has no releases at all
        """
        if not target:
            if not manifest.versions:
                raise MissingVersionIdError()
            return manifest.versions[0]

        bare = strip_version_prefix(target)
        for release in manifest.versions:
            if release.version in (bare, target) or release.tag == target:
                return release

        raise VersionNotFoundError(target, manifest.get_tags())

    def promote(self, target: Optional[str] = None) -> PromoteResult:
        """
        Route 100% of traffic to a release from versions.json

        Args:
            target: Version or tag (defaults to the latest release)

        Returns:
            Promote result

        Raises:
            ManifestNotFoundError: If versions.json is missing
            ManifestInvalidError: If versions.json is unreadable
            VersionNotFoundError: If target is not in the manifest
            MissingVersionIdError: If the release was never uploaded
        """
        manifest = self.store.load()
        release = self.resolve_release(manifest, target)

        if not release.version_id:
            raise MissingVersionIdError(release.tag)

        sha = release.git.commit_sha if release.git and release.git.commit_sha else "?"
        self.console.print(MSG_PROMOTING.format(version_id=release.version_id, tag=release.tag, sha=sha))
        self.wrangler.deploy_version(release.version_id)

        return PromoteResult(version_id=release.version_id, tag=release.tag, version=release.version)

    def rollback(self) -> PromoteResult:
        """
        Route 100% of traffic to the previous uploaded release

        Without a versions.json the platform's own interactive rollback runs
        instead.

        Returns:
            Promote result (``used_fallback`` set for the interactive path)

        Raises:
            ManifestInvalidError: If versions.json exists but is unreadable
            NotEnoughReleasesError: If fewer than two releases were uploaded
        """
        read = self.store.try_load()

        if read.is_corrupt:
            raise ManifestInvalidError(str(self.store.path), read.error)

        if not read.found:
            logger.warning(f"{self.store.path} not found; using interactive wrangler rollback")
            self.wrangler.rollback()
            return PromoteResult(used_fallback=True)

        uploaded = read.manifest.uploaded_releases()
        if len(uploaded) < 2:
            raise NotEnoughReleasesError(len(uploaded))

        current, previous = uploaded[0], uploaded[1]
        self.console.print(MSG_ROLLING_BACK.format(current=current.tag, previous=previous.tag))
        self.wrangler.deploy_version(previous.version_id)

        return PromoteResult(
            version_id=previous.version_id,
            tag=previous.tag,
            version=previous.version,
            previous_tag=current.tag
        )

    # Verification

    def resolve_target_url(self, url: Optional[str] = None) -> SmokeTarget:
        """
        Decide which URL to check

        Order: explicit URL, the latest release in versions.json (with its
        version as the expectation), the configured production URL.

        Args:
            url: Explicit URL

        Returns:
            Target URL and expected version

        Raises:
            NoTargetUrlError: If nothing resolves
        """
        if url:
            return SmokeTarget(url=url)

        read = self.store.try_load()
        if read.found and read.manifest.latest and read.manifest.latest.url:
            latest = read.manifest.latest
            return SmokeTarget(url=latest.url, expected_version=latest.version)

        if self.config.production_url:
            return SmokeTarget(url=self.config.production_url)

        raise NoTargetUrlError()

    def smoke(self, url: Optional[str] = None) -> SmokeResult:
        """
        Health, index and optional project-specific checks against a URL

        A version mismatch is reported as a warning, not a failure.

        Args:
            url: URL to check (resolved when omitted)

        Returns:
            Smoke result

        Raises:
            NoTargetUrlError: If no URL resolves
            HealthCheckError: If health or index is unreachable
            SmokeCheckError: If the extra command fails
        """
        target = self.resolve_target_url(url)
        self.console.print(f"Smoke testing: {target.url}\n")

        report = run_async(self.smoke_checker.fetch_health(target.url))
        self.console.print(f"  health:    {EMOJI_SUCCESS} OK (v{report.version})")

        index_bytes = run_async(self.smoke_checker.fetch_index(target.url))
        self.console.print(f"  index:     {EMOJI_SUCCESS} OK ({format_size(index_bytes)})")

        extra = self.config.smoke_extra
        if extra:
            outcome = self.runner.run_shell(extra, cwd=self.config.worker_dir, env={ENV_SMOKE_URL: target.url})
            if not outcome.ok:
                raise SmokeCheckError(extra, outcome.exit_code)
            self.console.print(f"  extra:     {EMOJI_SUCCESS} OK")

        result = SmokeResult(
            url=target.url,
            health_version=report.version,
            index_bytes=index_bytes,
            expected_version=target.expected_version,
            extra_command=extra
        )

        if result.version_match is False:
            warning = f"Version mismatch: expected v{target.expected_version}, got v{report.version}"
            result.warnings.append(warning)
            logger.warning(warning)
            self.console.print(f"[yellow]{EMOJI_WARNING} {warning}[/yellow]")

        return result

    def run_tests(self, url: Optional[str] = None) -> SmokeTarget:
        """
        Run the end-to-end test command against a deployed URL

        Args:
            url: URL to test (resolved when omitted)

        Returns:
            Target that was tested

        Raises:
            NoTargetUrlError: If no URL resolves
            E2ETestError: If the test command fails
        """
        target = self.resolve_target_url(url)
        command = self.config.test_command
        self.console.print(f"Running tests against: {target.url}\n")

        outcome = self.runner.run_shell(command, cwd=self.config.worker_dir, env={ENV_TARGET_URL: target.url})
        if not outcome.ok:
            raise E2ETestError(command, outcome.exit_code)
        return target

    # Manifest

    def versions_json(self,
                      output: Optional[Path] = None,
                      check_health: Optional[bool] = None) -> VersionsJson:
        """
        Regenerate versions.json from the platform's version list

        Args:
            output: Output path (defaults to the configured one)
            check_health: Probe every URL (defaults to CHECK_HEALTH)

        Returns:
            Written manifest
        """
        app_version = read_app_version(self.config)
        git_info = None
        if not is_zero_version(app_version):
            git_info = get_git_info(self.config.root_dir, self.config.github_url)

        return self.store.generate(
            app_version,
            git_info=git_info,
            command_count=read_command_count(self.config),
            check_health=check_health,
            output=output
        )

    def list_versions(self) -> Tuple[List[VersionRecord], List[VersionRecord]]:
        """
        Releases and previews on the platform, newest first by creation date

        Returns:
            (releases, previews)
        """
        records = sorted(self.wrangler.list_versions(), key=lambda r: r.created, reverse=True)
        releases = [r for r in records if r.is_release]
        previews = [r for r in records if r.is_preview]
        return releases, previews

    # Passthroughs

    def status(self) -> ProcessResult:
        return self.wrangler.passthrough(["deployments", "list"])

    def tail(self, *args: str) -> ProcessResult:
        return self.wrangler.passthrough(["tail", *args])

    def secrets(self) -> ProcessResult:
        return self.wrangler.passthrough(["secret", "list"])

    def whoami(self) -> ProcessResult:
        return self.wrangler.passthrough(["whoami"], scoped=False)

    def versions(self) -> ProcessResult:
        return self.wrangler.passthrough(["versions", "list"])

    def canary(self) -> ProcessResult:
        """Interactive gradual rollout (`wrangler versions deploy`)"""
        return self.wrangler.passthrough(["versions", "deploy"])

    def delete(self) -> ProcessResult:
        """Delete the worker (wrangler asks for confirmation)"""
        self.console.print(f"Deleting worker: {self.config.worker_name}")
        return self.wrangler.passthrough(["delete"])
