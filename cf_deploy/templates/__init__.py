"""Built-in templates for cf-deploy"""

from pathlib import Path
from typing import Dict, List, Optional

from ..utils.template_utils import load_template as _read_template

# Template directory path
TEMPLATES_DIR = Path(__file__).parent


def get_template_path(category: str, name: str) -> Optional[Path]:
    """
    Get path to a template file

    Args:
        category: Template category (project)
        name: Template name

    Returns:
        Path to template file or None if not found
    """
    template_path = TEMPLATES_DIR / category / name

    if template_path.exists():
        return template_path

    return None


def load_template(category: str, name: str) -> str:
    """
    Load template content

    Args:
        category: Template category
        name: Template name

    Returns:
        Template content

    Raises:
        FileNotFoundError: If the template does not exist
    """
    return _read_template(TEMPLATES_DIR / category / name)


def list_templates() -> Dict[str, List[str]]:
    """
    List all available templates

    Returns:
        Dictionary mapping categories to template names
    """
    templates = {}

    for category_dir in sorted(TEMPLATES_DIR.iterdir()):
        if category_dir.is_dir() and not category_dir.name.startswith('_'):
            templates[category_dir.name] = sorted(
                f.name for f in category_dir.iterdir()
                if f.is_file() and not f.name.startswith('_')
            )

    return templates


# Scaffolded project files
PROJECT_CONFIG_TEMPLATE = "cf-deploy.yml"
WRANGLER_TEMPLATE = "wrangler.toml"
WORKER_ENTRY_TEMPLATE = "index.ts"
INDEX_HTML_TEMPLATE = "index.html"

__all__ = [
    'TEMPLATES_DIR',
    'get_template_path',
    'load_template',
    'list_templates',
    'PROJECT_CONFIG_TEMPLATE',
    'WRANGLER_TEMPLATE',
    'WORKER_ENTRY_TEMPLATE',
    'INDEX_HTML_TEMPLATE',
]
