"""GitHub API exceptions: changeset listing and PR comments."""

from typing import Dict, Optional

from .base import CoverdiffError


class GithubError(CoverdiffError):
    """Base class for GitHub API errors."""

    pass


class ChangesetFetchError(GithubError):
    """Raised when the pull request file list cannot be fetched.

    Fatal for report generation: without the changeset there is no way to
    tell which coverage entries belong to the pull request.
    """

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        details: Dict[str, str] = {"url": url, "reason": reason}
        if status_code is not None:
            details["status"] = str(status_code)
        super().__init__("Failed to fetch pull request files", details=details)
        self.url = url
        self.reason = reason
        self.status_code = status_code


class CommentError(GithubError):
    """Raised when the coverage comment cannot be created or updated."""

    def __init__(self, reason: str, status_code: Optional[int] = None):
        details: Dict[str, str] = {"reason": reason}
        if status_code is not None:
            details["status"] = str(status_code)
        super().__init__("Failed to post coverage comment", details=details)
        self.reason = reason
        self.status_code = status_code
