"""versions.json generation and version listing commands"""

from pathlib import Path

import click

from ..decorators import with_service
from ..utils.output import console, format_manifest, format_version_list, print_success
from ...constants import MSG_MANIFEST_WRITTEN


@click.command(name='versions-json')
@click.option('--out', 'out', type=click.Path(dir_okay=False), help='Output path')
@click.option('--check-health', is_flag=True, help='Probe every preview URL (also CHECK_HEALTH=1)')
@with_service
def versions_json(service, out, check_health):
    """Generate versions.json from the uploaded versions

    Run before upload so the manifest ships with the deploy.
    """
    output = Path(out).resolve() if out else None
    manifest = service.versions_json(output=output, check_health=check_health or None)

    format_manifest(manifest)
    print_success(MSG_MANIFEST_WRITTEN.format(
        versions=len(manifest.versions),
        previews=len(manifest.previews)
    ))
    console.print(f"[dim]{output or service.config.versions_json}[/dim]")


@click.command(name='list')
@with_service
def list_versions(service):
    """List release versions and PR previews with their URLs"""
    releases, previews = service.list_versions()
    format_version_list(service.config, releases, previews)
