"""Template processing utilities"""

import string
from pathlib import Path
from typing import Mapping


def render_template(template: str, variables: Mapping[str, str]) -> str:
    """
    Substitute ${name} placeholders in a project template

    Unknown placeholders are left as-is, so JavaScript template literals
    in worker sources survive rendering.

    Args:
        template: Template text
        variables: Placeholder values (worker name, domain)

    Returns:
        Rendered text
    """
    return string.Template(template).safe_substitute(variables)


def load_template(template_path: Path) -> str:
    """
    Read a template file

    Raises:
        FileNotFoundError: If the template does not exist
    """
    if not template_path.is_file():
        raise FileNotFoundError(f"Template not found: {template_path}")
    return template_path.read_text(encoding='utf-8')
