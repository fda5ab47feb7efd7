"""Output formatting utilities"""

from typing import List

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ...constants import EMOJI_ERROR, EMOJI_SUCCESS
from ...core.urls import version_alias_url, worker_url
from ...models import DeployConfig, DeployResult, SmokeResult, VersionRecord, VersionsJson

# URLs must stay on one line so they can be copied
console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


def print_error(message: str) -> None:
    err_console.print(f"[red]{EMOJI_ERROR} {escape(str(message))}[/red]")


def print_success(message: str) -> None:
    console.print(f"[green]{EMOJI_SUCCESS}[/green] {escape(str(message))}")


def format_smoke_result(result: SmokeResult) -> None:
    """Print the smoke verdict"""
    console.print()
    if result.version_match is False:
        console.print(
            f"[yellow]WARN:[/yellow] Version mismatch, expected "
            f"v{escape(result.expected_version)}, got v{escape(result.health_version)}"
        )
    else:
        version = result.expected_version or result.health_version
        console.print(f"[green]PASS:[/green] All checks passed (v{escape(version)})")


def format_deploy_result(result: DeployResult) -> None:
    """Format and display deploy summary"""
    lines = [
        f"[green]{EMOJI_SUCCESS}[/green] Upload complete",
        "",
    ]
    if result.upload.preview_url:
        lines.append(f"[bold]Preview:[/bold]    {result.upload.preview_url}")
    if result.production_url:
        lines.append(f"[bold]Production:[/bold] {result.production_url}")
    if result.smoke:
        status = "[yellow]Passed with warnings[/yellow]" if result.smoke.warnings else "[green]Passed[/green]"
        lines.append(f"[bold]Smoke:[/bold]      {status}")
    lines.append("")
    lines.append("To go live: cf-deploy promote")

    console.print(Panel("\n".join(lines), title="Deploy Result", border_style="green"))


def format_manifest(manifest: VersionsJson) -> None:
    """Show the releases of a freshly written manifest"""
    if not manifest.versions:
        console.print("[dim]No releases yet[/dim]")
        return

    table = Table(title="Releases", box=box.ROUNDED)
    table.add_column("Version", style="cyan")
    table.add_column("Version ID")
    table.add_column("Date", style="dim")
    table.add_column("Commit")
    table.add_column("Health")

    for release in manifest.versions:
        if release.healthy is None:
            health = "-"
        else:
            health = "[green]up[/green]" if release.healthy else "[red]down[/red]"
        table.add_row(
            release.version,
            release.version_id or "[dim](not uploaded)[/dim]",
            release.date,
            release.git.commit_sha if release.git else "-",
            health
        )

    console.print(table)


def format_version_list(config: DeployConfig,
                        releases: List[VersionRecord],
                        previews: List[VersionRecord]) -> None:
    """Print release and PR preview versions with their URLs"""
    if releases:
        table = Table(title="Release Versions", box=box.SIMPLE)
        table.add_column("Tag", style="cyan")
        table.add_column("Created", style="dim")
        table.add_column("URL", overflow="fold")
        for record in releases:
            table.add_row(
                record.tag,
                record.created,
                version_alias_url(config.worker_name, config.domain, record.release_version)
            )
        console.print(table)

    if previews:
        table = Table(title="PR Previews", box=box.SIMPLE)
        table.add_column("Tag", style="cyan")
        table.add_column("Created", style="dim")
        table.add_column("URL", overflow="fold")
        for record in previews:
            table.add_row(record.tag, record.created, worker_url(config.worker_name, config.domain, record.tag))
        console.print(table)

    if not releases and not previews:
        console.print("[dim]No tagged versions found[/dim]")

    console.print(f"Production:  {config.production}")