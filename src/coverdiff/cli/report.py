"""Report command — diff two coverage summaries and comment on the pull request."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..config import ChangesetContext, load_config
from ..diff import PR_IDENTIFIER
from ..exceptions import CoverdiffError, InvalidConfigError
from ..formatters import get_formatter
from ..github import DEFAULT_API_URL, GithubClient
from ..logging_config import setup_logging
from ..runner import RunResult, generate_report
from . import app
from ._common import console, print_error, repo_web_url, split_repo


@app.command()
def report(
    coverage: Optional[Path] = typer.Option(
        None, "--coverage",
        help="Current coverage summary (json-summary format)",
        dir_okay=False,
    ),
    base_coverage: Optional[Path] = typer.Option(
        None, "--base-coverage",
        help="Coverage summary of the base branch; missing means every file is new",
        dir_okay=False,
    ),
    title: Optional[str] = typer.Option(None, "--title", help="Comment heading"),
    custom_message: Optional[str] = typer.Option(
        None, "--custom-message", help="Extra text shown under the heading",
    ),
    fail_file_reduced: Optional[float] = typer.Option(
        None, "--fail-file-reduced",
        help="Fail when a file loses this many points of line coverage (0 = never)",
        min=0.0,
    ),
    strip_path_prefix: Optional[str] = typer.Option(
        None, "--strip-path-prefix",
        help="Prefix to remove from coverage paths instead of inferring it",
    ),
    repo: Optional[str] = typer.Option(
        None, "--repo", help="Repository as owner/name (default: $GITHUB_REPOSITORY)",
    ),
    pr: Optional[int] = typer.Option(None, "--pr", help="Pull request number", min=1),
    sha: Optional[str] = typer.Option(None, "--sha", help="Head commit SHA"),
    token: Optional[str] = typer.Option(
        None, "--token", envvar="GITHUB_TOKEN", help="GitHub token", show_default=False,
    ),
    api_url: str = typer.Option(
        DEFAULT_API_URL, "--api-url", envvar="GITHUB_API_URL", help="GitHub API base URL",
    ),
    post: bool = typer.Option(
        False, "--post/--no-post", help="Create or update the comment on the pull request",
    ),
    output_format: str = typer.Option(
        "markdown", "--format", "-f", help="Output format for stdout: markdown or json (the posted comment is always markdown)",
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Configuration file path (TOML format)",
        exists=True, file_okay=True, dir_okay=False, readable=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress all but ERROR logging"),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Also append log records to this file", dir_okay=False,
    ),
) -> None:
    """Diff coverage against the base branch for the files of a pull request.

    [bold cyan]Examples:[/bold cyan]

      coverdiff report --coverage coverage/coverage-summary.json

      coverdiff report --repo octo/app --pr 42 --post --fail-file-reduced 1
    """
    if verbose and quiet:
        print_error("--verbose and --quiet are mutually exclusive")
        raise typer.Exit(1)

    logger = setup_logging(
        verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None
    )

    try:
        settings = load_config(
            config_file=config,
            coverage_path=str(coverage) if coverage else None,
            base_coverage_path=str(base_coverage) if base_coverage else None,
            title=title,
            custom_message=custom_message,
            fail_file_reduced=fail_file_reduced,
            strip_path_prefix=strip_path_prefix,
        )
        formatter = get_formatter(output_format)

        owner, name = split_repo(repo)
        context = ChangesetContext.from_github_env().merged(
            owner=owner, repo=name, pr_number=pr, commit_sha=sha,
        )
        if repo:
            context = context.merged(repo_url=repo_web_url(repo))
        if not context.owner or not context.repo:
            raise InvalidConfigError("repo", repo, "pass --repo owner/name or set GITHUB_REPOSITORY")
        if post and not context.pr_number:
            raise InvalidConfigError("pr", pr, "posting needs a pull request number")

        async def run() -> RunResult:
            async with GithubClient(token, context.owner, context.repo, api_url=api_url) as client:
                result = await generate_report(settings, context, client)
                if post:
                    await client.upsert_comment(context.pr_number, result.body, PR_IDENTIFIER)
                return result

        result = asyncio.run(run())
    except ValueError as e:
        print_error(e)
        raise typer.Exit(2)
    except CoverdiffError as e:
        logger.debug("Report failed", exc_info=True)
        print_error(e)
        raise typer.Exit(1)

    typer.echo(formatter.format(result.view).rstrip("\n"))

    if result.failed:
        console.print(f"[red]✗[/red] {escape(result.view.failure_message or '')}")
        raise typer.Exit(1)
