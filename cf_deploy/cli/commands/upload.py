"""Upload, preview and deploy commands"""

import click

from ..decorators import with_service
from ..utils.output import console, format_deploy_result, format_smoke_result


@click.command()
@click.option('--version', 'version', help='Version to upload (defaults to the app version)')
@click.option('--tag', help='Custom tag, also used as message and preview alias')
@click.option('--pr', type=int, help='Upload as the preview of pull request N')
@with_service
def upload(service, version, tag, pr):
    """Upload a new version (does NOT route traffic to it)

    Examples:
        cf-deploy upload
        cf-deploy upload --version 1.2.0
        cf-deploy upload --pr 42
    """
    result = service.upload(version=version, tag=tag, pr=pr)
    if result.tag and result.tag.startswith('v') and not tag:
        console.print("To promote to production: cf-deploy promote")


@click.command()
@click.argument('pr', type=int)
@with_service
def preview(service, pr):
    """Upload a PR preview tagged pr-<PR>"""
    service.preview(pr)


@click.command()
@click.option('--version', 'version', help='Version to upload (defaults to the app version)')
@click.option('--tag', help='Custom tag, also used as message and preview alias')
@click.option('--skip-smoke', is_flag=True, help='Do not smoke test the preview URL')
@with_service
def deploy(service, version, tag, skip_smoke):
    """Upload, then smoke test the preview URL

    Does NOT promote to production; run 'cf-deploy promote' for that.
    """
    result = service.deploy(version=version, tag=tag, skip_smoke=skip_smoke)
    if result.smoke:
        format_smoke_result(result.smoke)
    console.print()
    format_deploy_result(result)
