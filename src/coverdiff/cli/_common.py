"""Shared CLI helpers."""

import os
from typing import Optional, Tuple, Union

from rich.console import Console
from rich.markup import escape

from ..exceptions import InvalidConfigError

console = Console(stderr=True)


def print_error(error: Union[str, Exception]) -> None:
    console.print(f"[red]Error:[/red] {escape(str(error))}")


def split_repo(full_name: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Split ``owner/name`` into its parts; (None, None) when not given."""
    if not full_name:
        return None, None
    owner, sep, repo = full_name.partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise InvalidConfigError("repo", full_name, "expected owner/name")
    return owner, repo


def repo_web_url(full_name: str) -> str:
    """Web URL of ``owner/name`` on the runner's GitHub server."""
    server = os.environ.get("GITHUB_SERVER_URL", "https://github.com").rstrip("/")
    return f"{server}/{full_name}"
