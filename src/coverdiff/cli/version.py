"""Version command."""

import typer

from .. import __version__
from . import app


@app.command()
def version() -> None:
    """Show the installed coverdiff version."""
    typer.echo(f"coverdiff {__version__}")
