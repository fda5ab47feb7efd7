# cf_deploy/cli/main.py
"""Main CLI entry point for cf-deploy"""

import logging
import sys
from typing import Any, Callable, Dict, Optional

import click
from rich.logging import RichHandler

from ..__version__ import __version__
from ..constants import APP_NAME, LOG_FORMAT
from ..models.config import DeployConfig
from ..services.config_service import load_config
from ..services.deploy_service import DeployService
from .utils.output import console, err_console

# Import all commands
from .commands import (
    init,
    upload,
    release,
    verify,
    manifest,
    passthrough
)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=err_console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ],
        force=True
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy configuration loading

    Configuration is only read when a command asks for it, so `init` and
    `--help` work outside a project.
    """

    def __init__(self, service_factory: Optional[Callable[[DeployConfig], DeployService]] = None):
        """Initialize CLI context

        Args:
            service_factory: Builds the DeployService from the loaded config
        """
        self.overrides: Dict[str, Any] = {}
        self.verbose: bool = False
        self.debug: bool = False
        self._config: Optional[DeployConfig] = None
        self._service: Optional[DeployService] = None
        self._service_factory = service_factory or (lambda config: DeployService(config, console=console))

    @property
    def config(self) -> DeployConfig:
        """Get configuration (lazy loading)"""
        if self._config is None:
            self._config = load_config(self.overrides)
            if self.debug:
                console.print(f"[dim]Worker: {self._config.worker_name} ({self._config.worker_dir})[/dim]")
        return self._config

    @property
    def service(self) -> DeployService:
        """Get deploy service (lazy loading)"""
        if self._service is None:
            self._service = self._service_factory(self.config)
        return self._service


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('--config', 'config_file', type=click.Path(dir_okay=False), help='Path to cf-deploy.yml')
@click.option('--dir', 'worker_dir', type=click.Path(file_okay=False), help='Worker directory')
@click.option('--name', 'worker_name', help='Override worker name')
@click.option('--domain', help='Override workers domain')
@click.version_option(__version__, prog_name=APP_NAME)
@click.pass_context
def cli(ctx, verbose, debug, quiet, config_file, worker_dir, worker_name, domain):
    """cf-deploy - Cloudflare Workers deploy toolkit

    Uploads versioned builds with wrangler, keeps a versions.json manifest
    of what is deployed, promotes and rolls back traffic, and smoke-tests
    deployed URLs.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    # Create context with lazy initialization
    ctx.ensure_object(Context)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug
    ctx.obj.overrides.update({
        'config_file': config_file,
        'worker_dir': worker_dir,
        'worker_name': worker_name,
        'domain': domain,
    })


# Register commands
cli.add_command(init.init)
cli.add_command(upload.upload)
cli.add_command(upload.preview)
cli.add_command(upload.deploy)
cli.add_command(release.promote)
cli.add_command(release.rollback)
cli.add_command(verify.smoke)
cli.add_command(verify.test)
cli.add_command(manifest.versions_json)
cli.add_command(manifest.list_versions)
for command in passthrough.COMMANDS:
    cli.add_command(command)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        err_console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            err_console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
