"""Matching coverage report paths to the files of a pull request.

Coverage tools write paths rooted wherever the tests ran
(``/home/runner/work/app/app/src/index.js``) while the pull request lists
paths from the repository root (``src/index.js``). PathMatcher infers the
leading part that separates the two and strips it from every lookup.

Inference is a heuristic: both lists are walked shallowest path first and
the first report path that *ends with* a changeset path decides the prefix.
It is kept behind ``resolve_root`` so a stricter strategy can replace it
without touching the diff engine.
"""

import hashlib
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .config import ChangesetContext
from .logging_config import get_logger
from .models import TOTAL_KEY, CoverageSummary

logger = get_logger(__name__)


class ChangesetLister(ABC):
    """Source of the files touched by a pull request."""

    @abstractmethod
    async def list_pull_files(self, pr_number: Optional[int]) -> List[Dict[str, Any]]:
        """Return every file record of the pull request.

        Each record has at least a ``filename`` key. Errors propagate.
        """


def path_sort_key(path: str) -> Tuple[int, str]:
    """Shallowest first, then alphabetical."""
    return (path.count("/"), path)


def resolve_root(changeset_paths: Iterable[str], report_paths: Iterable[str]) -> str:
    """Infer the prefix that turns a changeset path into a report path.

    Returns an empty string when no report path ends with any changeset path.
    """
    ordered_reports = sorted(report_paths, key=path_sort_key)
    for changeset_path in sorted(changeset_paths, key=path_sort_key):
        for report_path in ordered_reports:
            if report_path.endswith(changeset_path):
                return report_path[: len(report_path) - len(changeset_path)]
    return ""


class PathMatcher:
    """The pull request's file list, queried through the inferred path prefix.

    Usage::

        matcher = PathMatcher(lister, context)
        await matcher.infer_prefix(current_summary)
        matcher.is_in_changeset("/build/app/src/index.js")
    """

    def __init__(
        self,
        lister: ChangesetLister,
        context: Optional[ChangesetContext] = None,
        strip_path_prefix: str = "",
    ) -> None:
        self.lister = lister
        self.context = context or ChangesetContext()
        self.strip_path_prefix = strip_path_prefix
        self.files: List[str] = []
        self.file_map: Dict[str, Dict[str, Any]] = {}
        self.path_prefix = ""
        self._loaded = False
        self._file_set: frozenset = frozenset()

    async def load_changeset_files(self) -> List[str]:
        """Fetch the pull request's files once; later calls return the cache."""
        if self._loaded:
            return self.files

        records = await self.lister.list_pull_files(self.context.pr_number)
        self.file_map = {record["filename"]: record for record in records}
        self.files = sorted(self.file_map, key=path_sort_key)
        self._file_set = frozenset(self.files)
        self._loaded = True

        logger.debug("Pull request touches %d file(s)", len(self.files))
        return self.files

    async def infer_prefix(self, summary: CoverageSummary) -> str:
        """Set ``path_prefix`` from the report's paths and return it.

        A configured ``strip_path_prefix`` wins over inference.
        """
        await self.load_changeset_files()

        if self.strip_path_prefix:
            self.path_prefix = self.strip_path_prefix
            logger.debug("Using configured path prefix %r", self.path_prefix)
            return self.path_prefix

        report_paths = [path for path in summary if path != TOTAL_KEY]
        self.path_prefix = resolve_root(self.files, report_paths)

        if self.path_prefix:
            logger.debug("Inferred path prefix %r", self.path_prefix)
        elif self.files and report_paths and not any(
            path in self._file_set for path in report_paths
        ):
            logger.warning(
                "No coverage path matches a pull request file; "
                "set strip_path_prefix if the report uses a different root"
            )
        return self.path_prefix

    def relative_path(self, path: str) -> str:
        """Strip the prefix when the path starts with it."""
        if self.path_prefix and path.startswith(self.path_prefix):
            return path[len(self.path_prefix):]
        return path

    def is_in_changeset(self, path: str) -> bool:
        return self.relative_path(path) in self._file_set

    def file_url(self, path: str) -> Optional[str]:
        """Link to the file's diff in the pull request, if the PR is known.

        GitHub anchors each file of the "Files changed" tab with the SHA-256
        of its repository path.
        """
        pull_url = self.context.pull_url
        if pull_url is None:
            return None

        digest = hashlib.sha256(self.relative_path(path).encode("utf-8")).hexdigest()
        return f"{pull_url}/files#diff-{digest}"
