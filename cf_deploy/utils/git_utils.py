"""Git operation utilities"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from ..models.manifest import GitInfo

logger = logging.getLogger(__name__)


def _git(path: Path, *args: str) -> Optional[str]:
    """
    Run a git command and return stripped stdout

    Args:
        path: Working directory
        *args: git arguments

    Returns:
        Output or None if git failed or is not installed
    """
    try:
        result = subprocess.run(
            ['git', *args],
            cwd=path,
            capture_output=True,
            text=True,
            check=True
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError, NotADirectoryError):
        return None


def find_repo_root(path: Path) -> Optional[Path]:
    """
    Get top-level directory of the repository containing path

    Args:
        path: Directory inside the repository

    Returns:
        Repository root or None
    """
    top = _git(path, 'rev-parse', '--show-toplevel')
    return Path(top) if top else None


def get_current_branch(path: Path) -> Optional[str]:
    """
    Get current Git branch

    Args:
        path: Repository path

    Returns:
        Branch name or None
    """
    return _git(path, 'rev-parse', '--abbrev-ref', 'HEAD')


def get_git_info(path: Path, github_url: str = "") -> Optional[GitInfo]:
    """
    Describe the HEAD commit for the manifest

    Args:
        path: Repository path
        github_url: Repository web URL used to build commitUrl

    Returns:
        GitInfo or None when path is not a repository with commits
    """
    log = _git(path, 'log', '-1', '--format=%H%n%h%n%s')
    if not log:
        logger.debug(f"No git metadata available in {path}")
        return None

    lines = log.split('\n', 2)
    if len(lines) < 2:
        return None

    commit_full = lines[0]
    commit_sha = lines[1]
    commit_message = lines[2] if len(lines) > 2 else ""

    # Detached HEAD has no branch name
    branch = get_current_branch(path) or ""
    if branch == 'HEAD':
        branch = ""

    commit_url = f"{github_url}/commit/{commit_full}" if github_url else ""

    return GitInfo(
        commit_sha=commit_sha,
        commit_full=commit_full,
        commit_message=commit_message,
        branch=branch,
        commit_url=commit_url
    )
