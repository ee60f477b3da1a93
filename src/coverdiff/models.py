"""Data models for coverage summaries, per-file diffs, and the comment view."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

METRICS = ("lines", "statements", "functions", "branches")

TOTAL_KEY = "total"


@dataclass(frozen=True)
class MetricTotals:
    """Covered/total counts for one metric kind."""

    total: int = 0
    covered: int = 0

    @property
    def percent(self) -> float:
        """Coverage percentage in [0, 100]; 0 when nothing is measurable."""
        if self.total <= 0:
            return 0.0
        return self.covered / self.total * 100


@dataclass(frozen=True)
class FileCoverage:
    """The four metric totals for one file or for the whole report."""

    lines: MetricTotals = field(default_factory=MetricTotals)
    statements: MetricTotals = field(default_factory=MetricTotals)
    functions: MetricTotals = field(default_factory=MetricTotals)
    branches: MetricTotals = field(default_factory=MetricTotals)

    def metric(self, name: str) -> MetricTotals:
        return getattr(self, name)


# Report path (or TOTAL_KEY) -> coverage. Read-only once loaded.
CoverageSummary = Dict[str, FileCoverage]


@dataclass(frozen=True)
class MetricDiff:
    """Current coverage of one metric and its change from the base report."""

    total: int
    percent: float
    diff: float  # current - base percent


@dataclass(frozen=True)
class FileDiff:
    """Per-metric coverage changes for one file or for the total."""

    lines: MetricDiff
    statements: MetricDiff
    functions: MetricDiff
    branches: MetricDiff
    is_new_file: bool = False

    def metric(self, name: str) -> MetricDiff:
        return getattr(self, name)


@dataclass
class DiffReport:
    """Coverage diff of every reported file in the changeset.

    ``biggest_diff`` is the largest absolute line-coverage change over all
    file sections; the total section never contributes to it.
    """

    sections: Dict[str, FileDiff] = field(default_factory=dict)
    biggest_diff: float = 0.0


@dataclass(frozen=True)
class MetricView:
    """Display strings for one metric."""

    percent: str
    diff: str


@dataclass
class FileView:
    """One row of the comment tables."""

    name: str
    lines: MetricView
    statements: MetricView
    functions: MetricView
    branches: MetricView
    is_new_file: Optional[bool] = None
    url: Optional[str] = None

    def metric(self, name: str) -> MetricView:
        return getattr(self, name)


@dataclass
class ViewModel:
    """Everything a renderer needs to produce the PR comment."""

    changed: List[FileView]
    unchanged: List[FileView]
    all: List[FileView]
    total: FileView
    failed: bool
    failure_message: Optional[str]
    has_diffs: bool
    title: str
    custom_message: str
    commit_sha: Optional[str]
    commit_sha_short: Optional[str]
    commit_url: Optional[str]
    pr_identifier: str
