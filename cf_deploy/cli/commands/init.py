"""Initialize command for creating new cf-deploy projects"""

from pathlib import Path

import click

from ..decorators import handle_errors
from ..utils.output import console, print_success
from ...constants import DEFAULT_DOMAIN, EMOJI_ROCKET
from ...core.scaffold import scaffold_project


@click.command()
@click.argument('path', required=False, default='.')
@click.option(
    '--name', '-n',
    help='Worker name (defaults to the directory name)'
)
@click.option(
    '--domain',
    help=f'Workers domain (default: {DEFAULT_DOMAIN})'
)
@click.pass_context
@handle_errors
def init(ctx, path, name, domain):
    """Scaffold a new cf-deploy project

    Writes cf-deploy.yml, plus wrangler.toml, src/index.ts,
    public/index.html and package.json when they do not exist yet.

    Examples:
        cf-deploy init --name my-worker
        cf-deploy init ./site --name site --domain example.workers.dev
    """
    project_path = Path(path).resolve()
    project_path.mkdir(parents=True, exist_ok=True)

    overrides = ctx.obj.overrides if ctx.obj else {}
    name = name or overrides.get('worker_name') or project_path.name
    domain = domain or overrides.get('domain') or DEFAULT_DOMAIN

    console.print(f"{EMOJI_ROCKET} Initializing cf-deploy project...")
    result = scaffold_project(project_path, name, domain)

    for created in result.created:
        console.print(f"  [green]+[/green] {created.relative_to(project_path)}")
    for skipped in result.skipped:
        console.print(f"  [dim]= {skipped.relative_to(project_path)} (kept)[/dim]")

    print_success(f"Initialized cf-deploy project: {name}")
    console.print("\n[bold]Next steps:[/bold]")
    console.print("  bun install")
    console.print("  bun x wrangler dev              # local dev at http://localhost:8788")
    console.print("  cf-deploy upload --version 1.0.0")
    console.print("  cf-deploy versions-json")
    console.print("  cf-deploy smoke")
    console.print("  cf-deploy promote")
