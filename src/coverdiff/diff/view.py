"""View assembly — turns a DiffReport into display-ready rows.

Numbers are only rounded here. DiffReport keeps full precision so that
gates and classification compare the real values.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..config import ChangesetContext, ReporterConfig
from ..models import METRICS, TOTAL_KEY, DiffReport, FileDiff, FileView, MetricView, ViewModel
from ..paths import PathMatcher
from .engine import CHANGED, classify

# Hidden marker that identifies our comment so later runs update it.
PR_IDENTIFIER = "<!-- coverdiff-output -->"

_ONE_PLACE = Decimal("0.1")


def format_decimal(value: float) -> str:
    """Round to one decimal place, half away from zero.

    Rounding works on the shortest decimal form of the float, so -1.15
    becomes "-1.2" even though its binary value is slightly above -1.15.
    Whole numbers lose the fractional part: 1.0 -> "1".
    """
    rounded = Decimal(str(value)).quantize(_ONE_PLACE, rounding=ROUND_HALF_UP)
    if rounded == rounded.to_integral_value():
        return str(int(rounded))
    return str(rounded)


format_percent = format_decimal
format_diff = format_decimal


def file_view(
    name: str,
    file_diff: FileDiff,
    is_new_file: Optional[bool] = None,
    url: Optional[str] = None,
) -> FileView:
    metrics = {
        metric: MetricView(
            percent=format_percent(file_diff.metric(metric).percent),
            diff=format_diff(file_diff.metric(metric).diff),
        )
        for metric in METRICS
    }
    return FileView(name=name, is_new_file=is_new_file, url=url, **metrics)


def assemble_view(
    report: DiffReport,
    failure_message: Optional[str],
    config: ReporterConfig,
    context: Optional[ChangesetContext] = None,
    matcher: Optional[PathMatcher] = None,
) -> ViewModel:
    """Group the report's files for rendering.

    Every file lands in ``all`` and in exactly one of ``changed`` or
    ``unchanged``. URLs are None when the pull request context is unknown.
    """
    context = context or ChangesetContext()

    changed, unchanged, everything = [], [], []
    for name in sorted(report.sections):
        if name == TOTAL_KEY:
            continue
        file_diff = report.sections[name]
        display_name, url = name, None
        if matcher is not None:
            display_name, url = matcher.relative_path(name), matcher.file_url(name)
        row = file_view(display_name, file_diff, is_new_file=file_diff.is_new_file, url=url)

        everything.append(row)
        if classify(file_diff, config.change_threshold) == CHANGED:
            changed.append(row)
        else:
            unchanged.append(row)

    commit_sha = context.commit_sha
    commit_url = None
    if commit_sha and context.pull_url:
        commit_url = f"{context.pull_url}/files/{commit_sha}"

    return ViewModel(
        changed=changed,
        unchanged=unchanged,
        all=everything,
        total=file_view("Total", report.sections[TOTAL_KEY]),
        failed=failure_message is not None,
        failure_message=failure_message,
        has_diffs=bool(changed),
        title=config.title,
        custom_message=config.custom_message,
        commit_sha=commit_sha,
        commit_sha_short=commit_sha[:7] if commit_sha else None,
        commit_url=commit_url,
        pr_identifier=PR_IDENTIFIER,
    )
