"""CLI utilities"""

from .output import (
    console,
    err_console,
    print_error,
    print_success,
    format_smoke_result,
    format_deploy_result,
    format_manifest,
    format_version_list,
)

__all__ = [
    "console",
    "err_console",
    "print_error",
    "print_success",
    "format_smoke_result",
    "format_deploy_result",
    "format_manifest",
    "format_version_list",
]
