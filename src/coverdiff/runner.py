"""Report pipeline — load, match, diff, gate, render.

This is the only place that ties the collaborators together. The diff
engine itself stays pure; all I/O happens here or in the lister.
"""

from dataclasses import dataclass
from typing import Optional

from .config import ChangesetContext, ReporterConfig
from .coverage import load_coverage_summary, load_optional_summary
from .diff import assemble_view, compute_report, format_decimal
from .formatters import BaseFormatter, MarkdownFormatter
from .logging_config import get_logger
from .models import TOTAL_KEY, DiffReport, ViewModel
from .paths import ChangesetLister, PathMatcher

logger = get_logger(__name__)


@dataclass
class RunResult:
    """Outputs of one report run."""

    report: DiffReport
    view: ViewModel
    body: str

    @property
    def failed(self) -> bool:
        return self.view.failed


def check_failure(report: DiffReport, fail_file_reduced: float) -> Optional[str]:
    """Failure message when a file lost too much line coverage, else None.

    A threshold of 0 disables the check. Coverage increases never fail.
    """
    if fail_file_reduced <= 0 or report.biggest_diff < fail_file_reduced:
        return None

    for name in sorted(report.sections):
        if name == TOTAL_KEY:
            continue
        drop = -report.sections[name].lines.diff
        if drop >= fail_file_reduced:
            return (
                f"Coverage for {name} dropped by {format_decimal(drop)}%, "
                f"at least the allowed {format_decimal(fail_file_reduced)}%"
            )
    return None


async def generate_report(
    config: ReporterConfig,
    context: ChangesetContext,
    lister: ChangesetLister,
    formatter: Optional[BaseFormatter] = None,
) -> RunResult:
    """Run the whole pipeline for one pull request.

    Raises:
        CoverageError: If the current report is missing or malformed.
        ChangesetFetchError: If the pull request files cannot be listed.
    """
    current = load_coverage_summary(config.coverage_path)
    base = load_optional_summary(config.base_coverage_path)

    matcher = PathMatcher(lister, context, strip_path_prefix=config.strip_path_prefix)
    await matcher.infer_prefix(current)

    report = compute_report(base, current, matcher)
    failure_message = check_failure(report, config.fail_file_reduced)
    if failure_message:
        logger.warning(failure_message)

    if context.pull_url is None:
        logger.warning("Pull request context unknown, comment will have no links")

    view = assemble_view(report, failure_message, config, context, matcher)
    body = (formatter or MarkdownFormatter()).format(view)
    return RunResult(report=report, view=view, body=body)
