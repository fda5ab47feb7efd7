"""Utility functions for cf-deploy"""

from .file_utils import (
    ensure_parent_dir,
    atomic_write,
    dump_json,
    write_json,
    read_json,
    format_size,
)
from .version_utils import (
    parse_version,
    is_valid_version,
    natural_key,
    sort_by_version,
    strip_version_prefix,
    slugify_version,
    release_tag,
    release_alias,
    preview_tag,
    is_release_tag,
    is_preview_tag,
    is_zero_version,
)
from .git_utils import (
    find_repo_root,
    get_current_branch,
    get_git_info,
)
from .async_utils import run_async, gather_all
from .template_utils import render_template, load_template

__all__ = [
    # File utilities
    "ensure_parent_dir",
    "atomic_write",
    "dump_json",
    "write_json",
    "read_json",
    "format_size",

    # Version utilities
    "parse_version",
    "is_valid_version",
    "natural_key",
    "sort_by_version",
    "strip_version_prefix",
    "slugify_version",
    "release_tag",
    "release_alias",
    "preview_tag",
    "is_release_tag",
    "is_preview_tag",
    "is_zero_version",

    # Git utilities
    "find_repo_root",
    "get_current_branch",
    "get_git_info",

    # Async utilities
    "run_async",
    "gather_all",

    # Template utilities
    "render_template",
    "load_template",
]
