"""dynstore: Route CLI Commands
---------------------------------------------------------
Implements the ``dynstore routes`` command group for inspecting the routes
declared in a configuration file: ``list`` prints them in priority order,
``match`` reports which route would serve a name without constructing
anything, and ``resolve`` builds the backend and prints its representation.

Public API
----------
``list`` : List configured routes in match priority order
``match`` : Show the route a name resolves through
``resolve`` : Construct and print the backend for a name
"""

import sys
from pathlib import Path

import typer

from dynstore.core.config_loader import build_resolver, load_config
from dynstore.core.errors import DynStoreError, configure_logging, get_logger
from dynstore.core.resolver import Resolver

app = typer.Typer()


def _load_resolver(config_path: Path | None) -> Resolver:
    """Load configuration and build a resolver without a default resolver."""
    if config_path is not None:
        # make constructor modules next to the config file importable
        for cand in (config_path.parent, config_path.parent.parent):
            pstr = str(cand.resolve())
            if cand.exists() and pstr not in sys.path:
                sys.path.insert(0, pstr)
    config = load_config(config_path, force_reload=True)
    return build_resolver(config)


@app.command("list")
def list_routes(
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Configuration file (overrides the search chain)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """List configured routes in match priority order."""
    configure_logging(verbose=verbose)
    log = get_logger()
    try:
        resolver = _load_resolver(config_path)
    except DynStoreError as e:
        log.error(str(e))
        raise typer.Exit(code=1) from e

    rows = resolver.registry.list()
    if not rows:
        typer.echo("No routes configured.")
        return

    typer.echo("Configured routes:")
    for row in rows:
        tags = f" [{', '.join(row['tags'])}]" if row.get("tags") else ""
        typer.echo(f"  {row['position']}. {row['pattern']} -> {row['module_path']}{tags}")
    typer.echo(f"\nTotal: {len(rows)} route(s)")


@app.command()
def match(
    name: str = typer.Argument(..., help="Storage name to test"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Configuration file (overrides the search chain)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Show which route would serve NAME, without constructing a backend."""
    configure_logging(verbose=verbose)
    log = get_logger()
    try:
        resolver = _load_resolver(config_path)
        found = resolver.find(name)
    except DynStoreError as e:
        log.error(str(e))
        raise typer.Exit(code=1) from e

    if found is None:
        typer.echo(f"{name}: no route matches (default resolver would be used)")
        raise typer.Exit(code=1)

    entry, m = found
    typer.echo(f"{name}: {entry.pattern_text} -> {entry.target}")
    if m.groups():
        typer.echo(f"  groups: {list(m.groups())}")
    if m.groupdict():
        typer.echo(f"  named groups: {m.groupdict()}")


@app.command()
def resolve(
    name: str = typer.Argument(..., help="Storage name to resolve"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Configuration file (overrides the search chain)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Construct the backend for NAME and print its representation."""
    configure_logging(verbose=verbose)
    log = get_logger()
    try:
        resolver = _load_resolver(config_path)
        backend = resolver.resolve(name)
    except DynStoreError as e:
        log.error(str(e))
        raise typer.Exit(code=1) from e
    except Exception as e:
        log.error(f"Constructor for '{name}' failed: {e}")
        raise typer.Exit(code=1) from e

    typer.echo(f"{name}: {backend!r}")
