"""
Command-line interface for SCM Collector.
"""
import json
import sys
from collections import Counter

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import print as rprint

from scm_collector import __version__
from scm_collector.config import get_settings
from scm_collector.adapters import AdapterFactory, select_platform
from scm_collector.core import AggregationResult, CollectorError, resolve_repository_url
from scm_collector.core.aggregator import AssetsAggregator
from scm_collector.core.checks import category_of
from scm_collector.utils import (
    get_logger,
    log_exception,
    ConsoleProgressReporter,
    NullProgressReporter,
)

console = Console()
logger = get_logger(__name__)


def _resolve_token(access_token, repository_url, scm_platform):
    """Fall back to the configured token of the platform serving the URL."""
    if access_token:
        return access_token
    try:
        host = resolve_repository_url(repository_url).host
    except CollectorError:
        return None
    platform = select_platform(host, scm_platform)
    return get_settings().token_for((platform or "").lower())


@click.group()
@click.version_option(version=__version__)
@click.option('--debug', is_flag=True, help='Enable debug mode')
def main(debug):
    """SCM Collector CLI."""
    if debug:
        import logging
        logging.getLogger("scm_collector").setLevel(logging.DEBUG)


@main.command()
@click.option('--repository-url', '-r', required=True, help='Repository URL to inspect')
@click.option('--access-token', '-t', envvar='SCM_ACCESS_TOKEN', help='SCM access token')
@click.option('--scm-platform', '-p', default=None,
              help='Platform for self-hosted instances (github, gitlab)')
@click.option('--branch', '-b', default='', help='Branch to inspect (default branch if empty)')
@click.option('--output', '-o', type=click.Choice(['text', 'json']), default='text')
@click.option('--no-progress', is_flag=True, help='Hide fetch progress')
def collect(repository_url, access_token, scm_platform, branch, output, no_progress):
    """Collect repository, branch, pipeline and organization settings."""
    settings = get_settings()
    if scm_platform is None:
        scm_platform = settings.collector.default_platform

    show_progress = settings.collector.show_progress and not no_progress and output == 'text'
    progress = ConsoleProgressReporter() if show_progress else NullProgressReporter()

    token = _resolve_token(access_token, repository_url, scm_platform)
    aggregator = AssetsAggregator(progress=progress)

    try:
        result = aggregator.aggregate(
            token, repository_url, scm_platform=scm_platform, branch=branch
        )
    except CollectorError as e:
        log_exception(logger, f"Collection failed: {e.message}")
        rprint(f"[red]Error: {e.message}[/red]", file=sys.stderr)
        sys.exit(1)

    if output == 'json':
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _display_text_result(result)

    if result.error is not None:
        rprint(f"[yellow]Warning: {result.error}[/yellow]", file=sys.stderr)


@main.command()
@click.option(
    "--config",
    "-c",
    help="Path to configuration file",
    type=click.Path(exists=True)
)
@click.option(
    "--validate",
    "-v",
    is_flag=True,
    help="Validate configuration"
)
def config(config: str, validate: bool):
    """Show and validate configuration."""
    settings = get_settings(config, reload=config is not None)

    if validate:
        errors = settings.validate()
        if errors:
            rprint("[red]Configuration validation failed:[/red]")
            for error in errors:
                rprint(f"  • {error}")
            sys.exit(1)
        rprint("[green]Configuration is valid![/green]")
        return

    rprint(Panel.fit(
        "[bold blue]SCM Collector Configuration[/bold blue]",
        border_style="blue"
    ))

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan", width=40)
    table.add_column("Value", style="green")

    for section_name, section_data in settings.to_dict().items():
        for key, value in section_data.items():
            table.add_row(f"{section_name}.{key}", str(value))

    console.print(table)


@main.command()
def platforms():
    """List the platforms with a registered adapter."""
    for name in AdapterFactory.list_available_platforms():
        rprint(f"  • {name}")


def _category(check_id: str) -> str:
    try:
        return category_of(check_id)
    except KeyError:
        return "other"


def _display_text_result(result: AggregationResult):
    """Display a collected snapshot as tables."""
    assets = result.assets

    table = Table(title="Collected Assets", show_header=True, header_style="bold magenta")
    table.add_column("Asset", style="cyan")
    table.add_column("Status")
    table.add_column("Details")

    def add_row(name, value, details=""):
        status = "[green]collected[/green]" if value else "[yellow]unknown[/yellow]"
        table.add_row(name, status, details)

    user = assets.authorized_user
    add_row("Authorized user", user, user.username if user else "")

    repo = assets.repository
    add_row(
        "Repository",
        repo,
        f"{repo.full_name} (owner: {repo.owner.kind.value})" if repo else ""
    )

    protection = assets.branch_protections
    add_row("Branch protection", protection, protection.branch if protection else "")

    add_row(
        "Pipelines",
        assets.pipelines,
        ", ".join(p.name for p in assets.pipelines)
    )

    org = assets.organization
    add_row(
        "Organization",
        org,
        f"{org.login} ({len(org.members)} members)" if org else ""
    )

    registry = assets.registry
    add_row("Package registry", registry, f"{len(registry.packages)} packages" if registry else "")

    console.print(table)
    rprint(f"\n[bold]Supported checks:[/bold] {len(result.checks_ids)}")

    per_category = Counter(_category(check_id) for check_id in result.checks_ids)
    for category, count in per_category.items():
        rprint(f"  • {category}: {count}")


if __name__ == "__main__":
    main()
