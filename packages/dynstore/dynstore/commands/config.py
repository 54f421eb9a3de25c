"""dynstore: Configuration CLI Commands
---------------------------------------------------------
Implements ``dynstore config show``, printing the effective configuration
after the override chain has been applied.
"""

from pathlib import Path

import typer
import yaml

from dynstore.core.config_loader import load_config
from dynstore.core.errors import DynStoreError, configure_logging, get_logger

app = typer.Typer()


@app.command()
def show(
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Configuration file (overrides the search chain)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Print the effective configuration as YAML."""
    configure_logging(verbose=verbose)
    try:
        config = load_config(config_path, force_reload=True)
    except DynStoreError as e:
        get_logger().error(str(e))
        raise typer.Exit(code=1) from e

    typer.echo(yaml.safe_dump(config.model_dump(), sort_keys=False).rstrip())
