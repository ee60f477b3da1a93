"""Diff engine — per-file coverage deltas between a base and a current report.

Only files that belong to the pull request are diffed, plus the ``total``
section. A file missing from the base report is new: its diff is its whole
current percentage, measured against nothing.

Classification is a separate, pure step so renderers and gates can apply
it to any FileDiff without recomputing the report.
"""

from typing import Optional

from ..logging_config import get_logger
from ..models import (
    METRICS,
    TOTAL_KEY,
    CoverageSummary,
    DiffReport,
    FileCoverage,
    FileDiff,
    MetricDiff,
)
from ..paths import PathMatcher

logger = get_logger(__name__)

# Line diffs below this are float noise from rounding (0.01), anything
# from 0.05 up is a real change.
CHANGE_THRESHOLD = 0.05

CHANGED = "changed"
UNCHANGED = "unchanged"


def diff_file(current: FileCoverage, base: Optional[FileCoverage]) -> FileDiff:
    """Compare one file's coverage with its base counterpart."""
    metrics = {}
    for name in METRICS:
        now = current.metric(name)
        before = base.metric(name).percent if base is not None else 0.0
        metrics[name] = MetricDiff(
            total=now.total,
            percent=now.percent,
            diff=now.percent - before,
        )
    return FileDiff(is_new_file=base is None, **metrics)


def compute_report(
    base: Optional[CoverageSummary],
    current: CoverageSummary,
    matcher: PathMatcher,
) -> DiffReport:
    """Diff every changeset file of ``current`` against ``base``.

    Args:
        base: Coverage of the base branch, or None when there is none.
        current: Coverage of the pull request head.
        matcher: PathMatcher whose prefix has already been inferred.

    Returns:
        A DiffReport with one section per reported changeset file plus
        ``total``, and the biggest absolute line diff among the files.
    """
    base = base or {}
    report = DiffReport()

    for filepath, coverage in current.items():
        if filepath != TOTAL_KEY and not matcher.is_in_changeset(filepath):
            continue

        file_diff = diff_file(coverage, base.get(filepath))
        report.sections[filepath] = file_diff

        if filepath != TOTAL_KEY:
            report.biggest_diff = max(report.biggest_diff, abs(file_diff.lines.diff))

    logger.debug(
        "Diffed %d changeset file(s), biggest line diff %.2f",
        len(report.sections) - (TOTAL_KEY in report.sections),
        report.biggest_diff,
    )
    return report


def classify(file_diff: FileDiff, threshold: float = CHANGE_THRESHOLD) -> str:
    """Return 'changed' for new files and line diffs of at least ``threshold``."""
    if file_diff.is_new_file or abs(file_diff.lines.diff) >= threshold:
        return CHANGED
    return UNCHANGED
