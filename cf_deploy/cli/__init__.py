"""Command-line interface for cf-deploy"""

from .main import cli, main

__all__ = ["cli", "main"]
