"""
Pytest configuration and fixtures for cf-deploy tests.
"""

import io
import json
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import httpx
import pytest
from rich.console import Console

from cf_deploy.core.executor import ProcessResult
from cf_deploy.models.config import DeployConfig
from cf_deploy.services.deploy_service import DeployService

FIXED_TIME = "2025-01-15T12:00:00.000Z"

# `wrangler versions list` prints oldest first
VERSIONS_LIST_OUTPUT = """
 ⛅️ wrangler 3.99.0
-------------------

Version ID:  aaaa1111-0000-4000-8000-000000000001
Created:     2025-01-01T10:00:00.000Z
Author:      dev@example.com
Source:      Upload
Tag:         v1.0.0
Message:     v1.0.0

Version ID:  bbbb2222-0000-4000-8000-000000000002
Created:     2025-01-02T10:00:00.000Z
Author:      dev@example.com
Source:      Upload
Tag:         -
Message:     -

Version ID:  cccc3333-0000-4000-8000-000000000003
Created:     2025-01-03T10:00:00.000Z
Author:      dev@example.com
Source:      Upload
Tag:         pr-7
Message:     PR #7

Version ID:  dddd4444-0000-4000-8000-000000000004
Created:     2025-01-04T10:00:00.000Z
Author:      dev@example.com
Source:      Upload
Tag:         v9.0.0
Message:     v9.0.0

Version ID:  eeee5555-0000-4000-8000-000000000005
Created:     2025-01-05T10:00:00.000Z
Author:      dev@example.com
Source:      Upload
Tag:         v9.0.0
Message:     v9.0.0

Version ID:  ffff6666-0000-4000-8000-000000000006
Created:     2025-01-06T10:00:00.000Z
Author:      dev@example.com
Source:      Upload
Tag:         v10.0.0
Message:     v10.0.0
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's environment out of configuration loading."""
    for key in list(os.environ):
        if key.startswith("CF_DEPLOY_") or key in ("APP_VERSION", "CHECK_HEALTH"):
            monkeypatch.delenv(key, raising=False)


class FakeRunner:
    """Command runner that records calls and replays canned wrangler output."""

    def __init__(self):
        self.calls: List[Dict] = []
        self.shell_calls: List[Dict] = []
        self.responses: List[Tuple[Tuple[str, ...], ProcessResult]] = []
        self.shell_exit_code = 0

    def respond(self, subcommand: Sequence[str], stdout: str = "", exit_code: int = 0, stderr: str = ""):
        self.responses.append((tuple(subcommand), ProcessResult(
            args=list(subcommand), exit_code=exit_code, stdout=stdout, stderr=stderr
        )))

    @staticmethod
    def wrangler_args(args: Sequence[str]) -> List[str]:
        args = list(args)
        return args[args.index("wrangler") + 1:] if "wrangler" in args else args

    def run(self, args, cwd=None, capture=True, env=None) -> ProcessResult:
        args = list(args)
        self.calls.append({"args": args, "cwd": cwd, "capture": capture, "env": env})
        sub = self.wrangler_args(args)
        for prefix, result in self.responses:
            if tuple(sub[:len(prefix)]) == prefix:
                return ProcessResult(args=args, exit_code=result.exit_code,
                                     stdout=result.stdout, stderr=result.stderr)
        return ProcessResult(args=args, exit_code=0)

    def run_shell(self, command, cwd=None, env=None) -> ProcessResult:
        self.shell_calls.append({"command": command, "cwd": cwd, "env": env})
        return ProcessResult(args=[command], exit_code=self.shell_exit_code)

    def wrangler_calls(self, *prefix: str) -> List[List[str]]:
        """Wrangler argument lists starting with prefix"""
        found = []
        for call in self.calls:
            sub = self.wrangler_args(call["args"])
            if tuple(sub[:len(prefix)]) == prefix:
                found.append(sub)
        return found


class FakeWorkers:
    """httpx handler serving health and index responses per host."""

    def __init__(self):
        self.health: Dict[str, httpx.Response] = {}
        self.index: Dict[str, httpx.Response] = {}
        self.unreachable = set()
        self.requests: List[str] = []

    def healthy(self, url: str, version: str, index_body: str = "<html>ok</html>"):
        host = httpx.URL(url).host
        self.health[host] = httpx.Response(200, json={
            "status": "ok", "version": version, "timestamp": FIXED_TIME
        })
        self.index[host] = httpx.Response(200, text=index_body)

    def down(self, url: str):
        self.unreachable.add(httpx.URL(url).host)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(str(request.url))
        host = request.url.host
        if host in self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        table = self.health if request.url.path != "/" else self.index
        response = table.get(host)
        if response is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(response.status_code, content=response.content, headers=response.headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def runner():
    """Fake command runner."""
    fake = FakeRunner()
    fake.respond(["versions", "list"], stdout=VERSIONS_LIST_OUTPUT)
    return fake


@pytest.fixture
def workers():
    """Fake deployed workers."""
    return FakeWorkers()


@pytest.fixture
def project_dir(tmp_path):
    """Worker project with a package.json."""
    (tmp_path / "public").mkdir()
    (tmp_path / "package.json").write_text(json.dumps({
        "name": "my-worker",
        "version": "10.0.0",
        "commands": {"build": "x", "deploy": "y", "test": "z"},
    }))
    return tmp_path


@pytest.fixture
def config(project_dir):
    """Resolved configuration pointing at the temporary project."""
    return DeployConfig(
        worker_name="my-worker",
        domain="example.workers.dev",
        worker_dir=project_dir,
        root_dir=project_dir,
        assets_dir=project_dir / "public",
        versions_json=project_dir / "public" / "versions.json",
        version_source=project_dir / "package.json",
        production_url="https://my-worker.example.workers.dev",
        github_repo="acme/my-worker",
    )


@pytest.fixture
def make_service(runner, workers) -> Callable[..., DeployService]:
    """Build a DeployService wired to the fakes."""
    def factory(config: DeployConfig, clock: Optional[Callable[[], str]] = None) -> DeployService:
        return DeployService(
            config,
            runner=runner,
            transport=workers.transport,
            console=Console(file=io.StringIO(), soft_wrap=True),
            clock=clock or (lambda: FIXED_TIME),
        )
    return factory


@pytest.fixture
def service(config, make_service):
    """DeployService for the default configuration."""
    return make_service(config)


def write_manifest(path: Path, versions: List[Dict], previews: Optional[List[Dict]] = None) -> Path:
    """Write a versions.json for tests."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({
        "production": "https://my-worker.example.workers.dev",
        "github": "",
        "generated": FIXED_TIME,
        "versions": versions,
        "previews": previews or [],
    }, indent=2) + "\n")
    return path


def release_entry(version: str, version_id: str = "", **extra) -> Dict:
    """Minimal manifest release dictionary."""
    entry = {
        "version": version,
        "tag": f"v{version}",
        "date": FIXED_TIME,
        "versionId": version_id,
        "url": f"https://v{version.replace('.', '-')}-my-worker.example.workers.dev",
        "previewUrl": "",
    }
    entry.update(extra)
    return entry
