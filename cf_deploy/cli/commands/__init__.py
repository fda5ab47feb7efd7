# cf_deploy/cli/commands/__init__.py
"""CLI commands"""

from . import init
from . import upload
from . import release
from . import verify
from . import manifest
from . import passthrough

__all__ = [
    "init",
    "upload",
    "release",
    "verify",
    "manifest",
    "passthrough",
]
