"""Configuration loading service"""

import json
import logging
import os
import shlex
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ..api.exceptions import ConfigError
from ..constants import (
    CONFIG_FILE_NAMES,
    DEFAULT_ASSETS_DIR,
    DEFAULT_DOMAIN,
    DEFAULT_HEALTH_PATH,
    DEFAULT_HEALTH_TIMEOUT,
    DEFAULT_SMOKE_TIMEOUT,
    DEFAULT_TEST_COMMAND,
    DEFAULT_VERSION_SOURCE,
    DEFAULT_WORKER_NAME,
    DEFAULT_WRANGLER_COMMAND,
    ENV_APP_VERSION,
    ENV_CHECK_HEALTH,
    ENV_CONFIG_PATH,
    ENV_GITHUB_REPO,
    ENV_OUTPUT_FILE,
    ENV_PRODUCTION_URL,
    ENV_SMOKE_EXTRA,
    ENV_TEST_COMMAND,
    ENV_VERSION_SOURCE,
    ENV_WORKER_DIR,
    ENV_WORKER_DOMAIN,
    ENV_WORKER_NAME,
    ENV_WRANGLER_COMMAND,
    VERSIONS_JSON_NAME,
    WRANGLER_CONFIG_FILE,
    ZERO_VERSION,
)
from ..models.config import DeployConfig
from ..utils.git_utils import find_repo_root

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def _lookup(data: Mapping[str, Any], dotted: str) -> Any:
    """Fetch a nested value by dotted key ("worker.name")"""
    current: Any = data
    for part in dotted.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return None
        current = current[part]
    return current


def _first(*values: Any) -> Any:
    """First value that is neither None nor an empty string"""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _resolve(base: Path, value: Any) -> Path:
    path = Path(os.path.expanduser(str(value)))
    return path if path.is_absolute() else (base / path).resolve()


def _as_float(value: Any, key: str, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a number, got {value!r}") from e
    if result <= 0:
        raise ConfigError(f"{key} must be positive, got {value!r}")
    return result


def _as_command(value: Any, key: str) -> List[str]:
    if isinstance(value, (list, tuple)):
        command = [str(part) for part in value]
    else:
        command = shlex.split(str(value))
    if not command:
        raise ConfigError(f"{key} must not be empty")
    return command


def find_config_file(search_dirs: List[Path]) -> Optional[Path]:
    """
    Find the first cf-deploy.yml / cf-deploy.yaml in the given directories

    Args:
        search_dirs: Directories in priority order

    Returns:
        Config file path or None
    """
    seen = set()
    for directory in search_dirs:
        if directory is None or directory in seen:
            continue
        seen.add(directory)
        for name in CONFIG_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Read a cf-deploy.yml file

    Environment variables in the file are expanded before parsing.

    Args:
        path: Config file path

    Returns:
        Parsed mapping (empty for an empty file)

    Raises:
        ConfigError: If the file cannot be read or is not a mapping
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    # Simple environment variable expansion
    content = os.path.expandvars(content)

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


def read_wrangler_config(worker_dir: Path) -> Dict[str, Any]:
    """
    Read wrangler.toml from the worker directory

    Only ``name`` and ``[assets].directory`` are used. A missing file gives
    an empty mapping; an unparseable one is reported and ignored.

    Args:
        worker_dir: Worker directory

    Returns:
        Parsed TOML mapping
    """
    path = worker_dir / WRANGLER_CONFIG_FILE
    if not path.is_file():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Ignoring unparseable {path}: {e}")
        return {}


def load_config(overrides: Optional[Dict[str, Any]] = None,
                env: Optional[Mapping[str, str]] = None,
                cwd: Optional[Path] = None) -> DeployConfig:
    """
    Build the configuration for one invocation

    Precedence: CLI flag > environment variable > cf-deploy.yml >
    wrangler.toml > default.

    Args:
        overrides: Values from CLI flags (config_file, worker_dir,
            worker_name, domain, versions_json, check_health, app_version)
        env: Environment (defaults to os.environ)
        cwd: Working directory (defaults to the process cwd)

    Returns:
        Immutable configuration

    Raises:
        ConfigError: If an explicit config file is missing or any file is invalid
    """
    flags = {k: v for k, v in (overrides or {}).items() if v is not None and v != ""}
    env = os.environ if env is None else env
    cwd = (cwd or Path.cwd()).resolve()

    flag_dir = _resolve(cwd, flags["worker_dir"]) if "worker_dir" in flags else None
    env_dir = _resolve(cwd, env[ENV_WORKER_DIR]) if env.get(ENV_WORKER_DIR) else None

    # Locate the config file
    explicit = _first(flags.get("config_file"), env.get(ENV_CONFIG_PATH))
    if explicit:
        config_file = _resolve(cwd, explicit)
        if not config_file.is_file():
            raise ConfigError(f"Configuration file not found: {config_file}")
    else:
        config_file = find_config_file([
            flag_dir or env_dir,
            cwd,
            find_repo_root(cwd),
        ])

    data = read_config_file(config_file) if config_file else {}
    config_dir = config_file.parent if config_file else cwd
    if config_file:
        logger.debug(f"Using configuration file {config_file}")

    # Worker directory: flag is relative to cwd, env and file to the config dir
    if flag_dir:
        worker_dir = flag_dir
    elif env.get(ENV_WORKER_DIR):
        worker_dir = _resolve(config_dir, env[ENV_WORKER_DIR])
    else:
        worker_dir = _resolve(config_dir, _first(_lookup(data, "worker.dir"), "."))

    if not worker_dir.is_dir():
        raise ConfigError(f"Worker directory does not exist: {worker_dir}")

    wrangler = read_wrangler_config(worker_dir)

    worker_name = _first(
        flags.get("worker_name"),
        env.get(ENV_WORKER_NAME),
        _lookup(data, "worker.name"),
        wrangler.get("name"),
        DEFAULT_WORKER_NAME
    )
    domain = _first(
        flags.get("domain"),
        env.get(ENV_WORKER_DOMAIN),
        _lookup(data, "worker.domain"),
        DEFAULT_DOMAIN
    )

    assets_dir = _resolve(worker_dir, _first(
        _lookup(data, "assets.dir"),
        _lookup(wrangler, "assets.directory"),
        DEFAULT_ASSETS_DIR
    ))

    if "versions_json" in flags:
        versions_json = _resolve(cwd, flags["versions_json"])
    elif _first(env.get(ENV_OUTPUT_FILE), _lookup(data, "output.versions_json")):
        versions_json = _resolve(config_dir, _first(env.get(ENV_OUTPUT_FILE),
                                                    _lookup(data, "output.versions_json")))
    else:
        versions_json = assets_dir / VERSIONS_JSON_NAME

    source = _first(env.get(ENV_VERSION_SOURCE), _lookup(data, "version.source"))
    version_source = _resolve(config_dir, source) if source else worker_dir / DEFAULT_VERSION_SOURCE

    wrangler_command = _as_command(
        _first(env.get(ENV_WRANGLER_COMMAND), _lookup(data, "wrangler.command"), DEFAULT_WRANGLER_COMMAND),
        "wrangler.command"
    )

    check_health = bool(flags.get("check_health")) or (
        str(env.get(ENV_CHECK_HEALTH, "")).strip().lower() in _TRUTHY
    )

    config = DeployConfig(
        worker_name=str(worker_name),
        domain=str(domain),
        worker_dir=worker_dir,
        root_dir=find_repo_root(worker_dir) or cwd,
        assets_dir=assets_dir,
        versions_json=versions_json,
        version_source=version_source,
        production_url=str(_first(env.get(ENV_PRODUCTION_URL), _lookup(data, "urls.production")) or ""),
        github_repo=str(_first(env.get(ENV_GITHUB_REPO), _lookup(data, "github.repo")) or ""),
        smoke_extra=_first(env.get(ENV_SMOKE_EXTRA), _lookup(data, "smoke.extra")),
        smoke_timeout=_as_float(_lookup(data, "smoke.timeout"), "smoke.timeout", DEFAULT_SMOKE_TIMEOUT),
        health_path=str(_first(_lookup(data, "health.path"), DEFAULT_HEALTH_PATH)),
        health_timeout=_as_float(_lookup(data, "health.timeout"), "health.timeout", DEFAULT_HEALTH_TIMEOUT),
        check_health=check_health,
        test_command=str(_first(env.get(ENV_TEST_COMMAND), _lookup(data, "test.command"), DEFAULT_TEST_COMMAND)),
        wrangler_command=tuple(wrangler_command),
        app_version=_first(flags.get("app_version"), env.get(ENV_APP_VERSION)),
        config_file=config_file
    )

    logger.debug(f"Configuration: {config.to_dict()}")
    return config


def read_app_version(config: DeployConfig) -> str:
    """
    Current app version

    Order: APP_VERSION captured in the config, then the ``version`` field of
    the version source (JSON, or ``[project].version`` for TOML), then 0.0.0.

    Args:
        config: Resolved configuration

    Returns:
        Version string
    """
    if config.app_version:
        return str(config.app_version)

    data = _read_version_source(config.version_source)
    if data is None:
        return ZERO_VERSION

    version = data.get("version")
    if not version and isinstance(data.get("project"), dict):
        version = data["project"].get("version")

    return str(version) if version else ZERO_VERSION


def read_command_count(config: DeployConfig) -> Optional[int]:
    """
    Number of entries under ``commands`` in the version source

    Args:
        config: Resolved configuration

    Returns:
        Count, or None when the source has no ``commands`` mapping
    """
    data = _read_version_source(config.version_source)
    if not data:
        return None

    commands = data.get("commands")
    if isinstance(commands, (dict, list)):
        return len(commands)
    return None


def _read_version_source(path: Path) -> Optional[Dict[str, Any]]:
    """Parse the version source file, or None when missing or unreadable"""
    if not path.is_file():
        logger.debug(f"Version source {path} not found")
        return None

    try:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                data = tomllib.load(f)
        else:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
    except (OSError, ValueError) as e:
        # TOMLDecodeError and JSONDecodeError are both ValueErrors
        logger.warning(f"Cannot read version from {path}: {e}")
        return None

    return data if isinstance(data, dict) else None
