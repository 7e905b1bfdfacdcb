"""
Command-line interface for brewdeck.

This module provides CLI commands for:
- status: Check for Homebrew and its version
- list / refresh: Show or rebuild the installed inventory
- install / uninstall / upgrade: Change installed packages
- search: Filter the remote catalogs
- serve: Run the HTTP API
"""

import asyncio
import json
import logging
from typing import Awaitable, Optional, TypeVar

import click

from brewdeck.dependencies import (
    get_catalog_state,
    get_synchronizer,
    reset_dependencies,
)
from brewdeck.config import get_settings
from brewdeck.exceptions import BrewDeckException, CommandFailedException
from brewdeck.inventory.models import InstalledPackage, PackageKind
from brewdeck.services.search import IncrementalFilter

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_async(coro: Awaitable[T]) -> T:
    """Run a coroutine, turning brewdeck failures into a clean exit."""
    async def wrapped():
        try:
            return await coro
        finally:
            reset_dependencies()

    try:
        return asyncio.run(wrapped())
    except CommandFailedException as e:
        click.echo(click.style(f"brew failed (exit {e.return_code}):", fg='red'), err=True)
        click.echo(e.output, err=True)
        raise SystemExit(1)
    except BrewDeckException as e:
        click.echo(click.style(f"Error: {e.message}", fg='red'), err=True)
        raise SystemExit(1)


def print_packages(packages: list[InstalledPackage]) -> None:
    if not packages:
        click.echo("No packages installed.")
        return
    width = max(len(p.name) for p in packages)
    for package in packages:
        click.echo(f"{package.name:<{width}}  {package.version:<16} {package.kind.value}")


def kind_option(f):
    return click.option(
        '--cask',
        'cask',
        is_flag=True,
        help='Treat NAME as a cask instead of a formula'
    )(f)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def cli(verbose: bool):
    """
    brewdeck CLI.

    Manage Homebrew packages and the locally recorded inventory.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")


@cli.command('status')
def status_command():
    """Check whether Homebrew is installed and show its version."""
    status = run_async(get_synchronizer().status())
    if status.found:
        click.echo(click.style(f"Homebrew {status.version}", fg='green') + f" ({status.path})")
    else:
        click.echo(click.style("Homebrew not installed", fg='red'))
        raise SystemExit(1)


@cli.command('list')
@click.option(
    '--kind', '-k',
    type=click.Choice([k.value for k in PackageKind]),
    default=None,
    help='Only list formulae or casks'
)
@click.option('--json', 'as_json', is_flag=True, help='Output as JSON')
def list_command(kind: Optional[str], as_json: bool):
    """Show the recorded inventory (run `refresh` to update it)."""
    selected = PackageKind(kind) if kind else None
    packages = run_async(get_synchronizer().installed(selected))
    if as_json:
        click.echo(json.dumps([p.to_dict() for p in packages], indent=2))
    else:
        print_packages(packages)


@cli.command('refresh')
def refresh_command():
    """Rebuild the inventory from `brew list --versions`."""
    packages = run_async(get_synchronizer().refresh())
    print_packages(packages)


@cli.command('install')
@click.argument('name')
@kind_option
@click.option('--progress', '-p', is_flag=True, help='Show a progress bar while installing')
def install_command(name: str, cask: bool, progress: bool):
    """Install NAME and refresh the inventory."""
    kind = PackageKind.CASK if cask else PackageKind.FORMULA
    synchronizer = get_synchronizer()

    if not progress:
        output = run_async(synchronizer.install(name, kind))
        click.echo(output, nl=False)
        return

    async def install_with_bar():
        with click.progressbar(length=100, label=f'Installing {name}') as bar:
            shown = 0

            def on_progress(fraction: float):
                nonlocal shown
                target = int(fraction * 100)
                # Fractions are hints; never move the bar backwards
                if target > shown:
                    bar.update(target - shown)
                    shown = target

            await synchronizer.install_with_progress(name, kind, on_progress)
        return await synchronizer.refresh()

    run_async(install_with_bar())
    click.echo(click.style(f"Installed {name}", fg='green'))


@cli.command('uninstall')
@click.argument('name')
@kind_option
def uninstall_command(name: str, cask: bool):
    """Uninstall NAME and refresh the inventory."""
    kind = PackageKind.CASK if cask else PackageKind.FORMULA
    output = run_async(get_synchronizer().uninstall(name, kind))
    click.echo(output, nl=False)


@cli.command('upgrade')
@click.argument('name')
@kind_option
def upgrade_command(name: str, cask: bool):
    """Upgrade NAME and refresh the inventory."""
    kind = PackageKind.CASK if cask else PackageKind.FORMULA
    output = run_async(get_synchronizer().upgrade(name, kind))
    click.echo(output, nl=False)


@cli.command('search')
@click.argument('query', default='')
@click.option(
    '--limit', '-n',
    default=20,
    type=click.IntRange(1, 1000),
    help='Maximum entries shown per catalog (default: 20)'
)
def search_command(query: str, limit: int):
    """Search the remote formula and cask catalogs by name."""
    async def search():
        state = get_catalog_state()
        await state.reload()
        search_filter = IncrementalFilter(
            lambda: state.snapshot,
            batch_size=get_settings().filter_batch_size,
        )
        search_filter.set_query(query)
        return await search_filter.wait()

    result = run_async(search())

    click.echo(click.style(f"Formulae ({len(result.formulae)})", bold=True))
    for formula in result.formulae[:limit]:
        click.echo(f"  {formula.name}" + (f" - {formula.desc}" if formula.desc else ""))
    click.echo(click.style(f"Casks ({len(result.casks)})", bold=True))
    for cask in result.casks[:limit]:
        click.echo(f"  {cask.token}" + (f" - {cask.desc}" if cask.desc else ""))


@cli.command('serve')
@click.option('--host', default=None, help='Bind address (default: from config)')
@click.option('--port', default=None, type=int, help='Port (default: from config)')
def serve_command(host: Optional[str], port: Optional[int]):
    """Run the HTTP API."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "brewdeck.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=settings.debug,
    )


if __name__ == '__main__':
    cli()
