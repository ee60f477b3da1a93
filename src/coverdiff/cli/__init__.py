"""CLI entry point — registers all subcommands."""

import typer

app = typer.Typer(
    name="coverdiff",
    help="coverdiff - Coverage diff comments for pull requests",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# Import subcommands to register them
from .report import report as _report  # noqa: F401, E402
from .version import version as _version  # noqa: F401, E402
