"""GitHub integration — pull request file listing and the coverage comment."""

from .client import DEFAULT_API_URL, GithubClient

__all__ = ["DEFAULT_API_URL", "GithubClient"]
