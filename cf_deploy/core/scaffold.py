"""Project scaffolding for `cf-deploy init`"""

import logging
from pathlib import Path
from typing import Dict, List, Tuple

from ..api.exceptions import ProjectExistsError
from ..constants import CONFIG_FILE_NAMES, DEFAULT_ASSETS_DIR, DEFAULT_DOMAIN, WRANGLER_CONFIG_FILE
from ..models.result import InitResult
from ..templates import (
    INDEX_HTML_TEMPLATE,
    PROJECT_CONFIG_TEMPLATE,
    WORKER_ENTRY_TEMPLATE,
    WRANGLER_TEMPLATE,
    load_template,
)
from ..utils.file_utils import atomic_write, dump_json
from ..utils.template_utils import render_template

logger = logging.getLogger(__name__)

INITIAL_APP_VERSION = "1.0.0"

# (relative path, template name); written only when absent
_OPTIONAL_FILES: List[Tuple[str, str]] = [
    (WRANGLER_CONFIG_FILE, WRANGLER_TEMPLATE),
    ("src/index.ts", WORKER_ENTRY_TEMPLATE),
    (f"{DEFAULT_ASSETS_DIR}/index.html", INDEX_HTML_TEMPLATE),
]


def _package_json(name: str) -> str:
    return dump_json({
        "name": name,
        "version": INITIAL_APP_VERSION,
        "private": True,
        "devDependencies": {"wrangler": "^4", "hono": "^4"},
    })


def scaffold_project(directory: Path, name: str, domain: str = DEFAULT_DOMAIN) -> InitResult:
    """
    Create a new cf-deploy project

    cf-deploy.yml is always written; wrangler.toml, src/index.ts,
    public/index.html and package.json are only written when absent.

    Args:
        directory: Project directory
        name: Worker name
        domain: Workers domain

    Returns:
        Created and skipped files

    Raises:
        ProjectExistsError: If a cf-deploy config already exists
    """
    directory = Path(directory).resolve()
    config_path = directory / PROJECT_CONFIG_TEMPLATE

    for config_name in CONFIG_FILE_NAMES:
        if (directory / config_name).exists():
            raise ProjectExistsError(config_name)

    variables: Dict[str, str] = {"name": name, "domain": domain}
    result = InitResult(directory=directory)

    atomic_write(config_path, render_template(load_template("project", PROJECT_CONFIG_TEMPLATE), variables))
    result.created.append(config_path)

    for relative, template in _OPTIONAL_FILES:
        target = directory / relative
        if target.exists():
            result.skipped.append(target)
            continue
        atomic_write(target, render_template(load_template("project", template), variables))
        result.created.append(target)

    package_json = directory / "package.json"
    if package_json.exists():
        result.skipped.append(package_json)
    else:
        atomic_write(package_json, _package_json(name))
        result.created.append(package_json)

    logger.info(f"Scaffolded {name} in {directory}: "
                f"{len(result.created)} created, {len(result.skipped)} kept")
    return result
