"""Smoke and end-to-end test commands"""

import click

from ..decorators import with_service
from ..utils.output import format_smoke_result, print_success


@click.command()
@click.argument('url', required=False)
@with_service
def smoke(service, url):
    """Health + index check of a deployed URL

    URL defaults to the latest release in versions.json, then to
    urls.production.
    """
    result = service.smoke(url)
    format_smoke_result(result)


@click.command()
@click.argument('url', required=False)
@with_service
def test(service, url):
    """Run the end-to-end test command against a deployed URL

    The URL is exported as TARGET_URL.
    """
    target = service.run_tests(url)
    print_success(f"Tests passed against {target.url}")
