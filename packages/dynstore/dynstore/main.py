"""dynstore: CLI Entry Point
---------------------------------------------------------
Main Typer application aggregating the route and configuration command
groups. Serves as the execution root for the ``dynstore`` console script.

Public API
----------
``app`` : The main Typer application instance.
"""

from __future__ import annotations

import typer

from . import __version__
from .commands import config as config_cmd
from .commands import routes as routes_cmd

app = typer.Typer(help="dynstore CLI")


def _version_callback(value: bool):
    if value:
        typer.echo(f"dynstore {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Pattern-based backend registry command line interface."""
    pass


app.add_typer(routes_cmd.app, name="routes", help="Inspect and resolve configured routes")
app.add_typer(config_cmd.app, name="config", help="Show effective configuration")
