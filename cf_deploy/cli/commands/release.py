"""Promote and rollback commands"""

import click

from ..decorators import with_service
from ..utils.output import print_success


@click.command()
@click.argument('target', required=False)
@click.option('--version', 'version', help='Version or tag to promote (default: latest in versions.json)')
@with_service
def promote(service, target, version):
    """Route 100% of traffic to a version from versions.json

    Examples:
        cf-deploy promote
        cf-deploy promote 1.2.0
        cf-deploy promote --version v1.2.0
    """
    result = service.promote(version or target)
    print_success(f"{result.tag} is live")


@click.command()
@with_service
def rollback(service):
    """Revert production to the previous uploaded version

    Uses versions.json when present, otherwise wrangler's interactive
    rollback.
    """
    result = service.rollback()
    if not result.used_fallback:
        print_success(f"Rolled back to {result.tag}")
