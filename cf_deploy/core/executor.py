"""Subprocess execution and the wrangler command wrapper"""

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence

from ..api.exceptions import WranglerError
from ..constants import FULL_TRAFFIC_PERCENT
from ..models.config import DeployConfig
from ..models.version import VersionRecord
from .version_parser import parse_versions_output

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Outcome of one subprocess call"""
    args: List[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class CommandRunner(Protocol):
    """Capability to run external commands"""

    def run(self,
            args: Sequence[str],
            cwd: Optional[Path] = None,
            capture: bool = True,
            env: Optional[Dict[str, str]] = None) -> ProcessResult:
        ...

    def run_shell(self,
                  command: str,
                  cwd: Optional[Path] = None,
                  env: Optional[Dict[str, str]] = None) -> ProcessResult:
        ...


class ProcessExecutor:
    """Runs commands with subprocess

    With ``capture=True`` stdout/stderr are collected; otherwise the child
    inherits the terminal and only the exit code is reported.
    """

    def run(self,
            args: Sequence[str],
            cwd: Optional[Path] = None,
            capture: bool = True,
            env: Optional[Dict[str, str]] = None) -> ProcessResult:
        """Run an argument list"""
        args = list(args)
        logger.debug(f"$ {shlex.join(args)} (cwd={cwd or Path.cwd()})")

        try:
            completed = subprocess.run(
                args,
                cwd=cwd,
                capture_output=capture,
                text=True,
                env=self._merge_env(env)
            )
        except FileNotFoundError as e:
            # Executable missing; report like a shell would
            return ProcessResult(args=args, exit_code=127, stderr=str(e))

        return ProcessResult(
            args=args,
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or ""
        )

    def run_shell(self,
                  command: str,
                  cwd: Optional[Path] = None,
                  env: Optional[Dict[str, str]] = None) -> ProcessResult:
        """Run a shell command string attached to the terminal"""
        logger.debug(f"$ {command} (shell, cwd={cwd or Path.cwd()})")
        completed = subprocess.run(command, shell=True, cwd=cwd, env=self._merge_env(env))
        return ProcessResult(args=[command], exit_code=completed.returncode)

    @staticmethod
    def _merge_env(extra: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
        if not extra:
            return None
        merged = dict(os.environ)
        merged.update(extra)
        return merged


@dataclass
class WranglerClient:
    """The three platform operations the toolkit relies on, plus passthroughs

    Worker-scoped commands get ``--name <worker>`` appended and run in the
    worker directory.
    """
    config: DeployConfig
    runner: CommandRunner = field(default_factory=ProcessExecutor)

    def command(self, args: Sequence[str], scoped: bool = True) -> List[str]:
        """Build the full argument list for a wrangler call"""
        full = [*self.config.wrangler_command, *args]
        if scoped:
            full += ["--name", self.config.worker_name]
        return full

    def run(self,
            args: Sequence[str],
            capture: bool = False,
            scoped: bool = True,
            check: bool = True) -> ProcessResult:
        """Run wrangler, raising WranglerError on failure when check is set"""
        full = self.command(args, scoped=scoped)
        result = self.runner.run(full, cwd=self.config.worker_dir, capture=capture)
        if check and not result.ok:
            raise WranglerError(full, result.exit_code, result.stderr)
        return result

    def list_versions(self) -> List[VersionRecord]:
        """Tagged versions, most recent first

        wrangler prints oldest first; the parser keeps input order, so the
        list is reversed here.
        """
        result = self.run(["versions", "list"], capture=True)
        records = parse_versions_output(result.stdout)
        records.reverse()
        logger.debug(f"wrangler reported {len(records)} tagged version(s)")
        return records

    def upload_version(self,
                       tag: Optional[str] = None,
                       message: Optional[str] = None,
                       alias: Optional[str] = None,
                       variables: Optional[Dict[str, str]] = None) -> ProcessResult:
        """Upload a new version without routing traffic to it"""
        args = ["versions", "upload"]
        for key, value in (variables or {}).items():
            args += ["--var", f"{key}:{value}"]
        if tag:
            args += ["--tag", tag]
        if message:
            args += ["--message", message]
        if alias:
            args += ["--preview-alias", alias]
        return self.run(args)

    def deploy_version(self, version_id: str, percent: int = FULL_TRAFFIC_PERCENT) -> ProcessResult:
        """Route `percent` of traffic to a version, non-interactively"""
        return self.run(["versions", "deploy", f"{version_id}@{percent}%", "--yes"])

    def rollback(self) -> ProcessResult:
        """Platform-native interactive rollback"""
        return self.run(["rollback"])

    def passthrough(self, args: Sequence[str], scoped: bool = True) -> ProcessResult:
        """Run any wrangler command attached to the terminal"""
        return self.run(args, scoped=scoped)
