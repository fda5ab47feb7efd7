"""Commands passed straight through to wrangler"""

import click

from ..decorators import with_service


@click.command()
@with_service
def status(service):
    """Show deployments (wrangler deployments list)"""
    service.status()


@click.command(context_settings={'ignore_unknown_options': True})
@click.argument('args', nargs=-1, type=click.UNPROCESSED)
@with_service
def tail(service, args):
    """Stream live logs (wrangler tail)"""
    service.tail(*args)


@click.command()
@with_service
def secrets(service):
    """List secrets (wrangler secret list)"""
    service.secrets()


@click.command()
@with_service
def whoami(service):
    """Show the authenticated account (wrangler whoami)"""
    service.whoami()


@click.command()
@with_service
def versions(service):
    """Raw version list (wrangler versions list)"""
    service.versions()


@click.command()
@with_service
def canary(service):
    """Interactive gradual rollout (wrangler versions deploy)"""
    service.canary()


@click.command()
@click.confirmation_option(prompt='Delete the worker and all its versions?')
@with_service
def delete(service):
    """Delete the worker (wrangler delete)"""
    service.delete()


COMMANDS = [status, tail, secrets, whoami, versions, canary, delete]
