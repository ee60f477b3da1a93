"""Exception hierarchy for coverdiff."""

from .base import CoverdiffError
from .config import ConfigurationError, InvalidConfigError
from .coverage import CoverageError, CoverageFileError, CoverageFormatError
from .github import ChangesetFetchError, CommentError, GithubError

__all__ = [
    "CoverdiffError",
    "ConfigurationError",
    "InvalidConfigError",
    "CoverageError",
    "CoverageFileError",
    "CoverageFormatError",
    "GithubError",
    "ChangesetFetchError",
    "CommentError",
]
