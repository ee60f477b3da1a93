"""Markdown formatter — the pull request comment body."""

from typing import List

from ..models import METRICS, FileView, MetricView, ViewModel
from .base import BaseFormatter

NEW_FILE_BADGE = "🆕"


def _signed(diff: str) -> str:
    if diff == "0":
        return ""
    return diff if diff.startswith("-") else f"+{diff}"


def _cell(metric: MetricView) -> str:
    delta = _signed(metric.diff)
    if not delta:
        return f"{metric.percent}%"
    return f"{metric.percent}% ({delta})"


def file_summary_table_header() -> List[str]:
    titles = [m.capitalize() for m in METRICS]
    return [
        "| File | " + " | ".join(titles) + " |",
        "|------|" + "|".join("-" * (len(t) + 2) for t in titles) + "|",
    ]


def file_summary_table_row(row: FileView) -> str:
    name = f"`{row.name}`"
    if row.url:
        name = f"[{name}]({row.url})"
    if row.is_new_file:
        name = f"{name} {NEW_FILE_BADGE}"
    cells = [_cell(row.metric(m)) for m in METRICS]
    return f"| {name} | " + " | ".join(cells) + " |"


class MarkdownFormatter(BaseFormatter):
    """Comment body with totals, changed files, and a collapsed full list.

    The first line is the hidden marker used to find and update the comment
    on later runs.
    """

    def format(self, view: ViewModel) -> str:
        lines: list[str] = [view.pr_identifier, f"## {view.title}", ""]

        if view.failed:
            lines.append(f"> :x: **{view.failure_message}**")
            lines.append("")
        if view.custom_message:
            lines.append(view.custom_message)
            lines.append("")

        lines.extend(file_summary_table_header())
        lines.append(file_summary_table_row(view.total))
        lines.append("")

        lines.append("### Changed files")
        lines.append("")
        if view.has_diffs:
            lines.extend(file_summary_table_header())
            lines.extend(file_summary_table_row(row) for row in view.changed)
        else:
            lines.append("_No changed files with significant coverage changes._")
        lines.append("")

        if view.all:
            lines.append(f"<details><summary>All files ({len(view.all)})</summary>")
            lines.append("")
            lines.extend(file_summary_table_header())
            lines.extend(file_summary_table_row(row) for row in view.all)
            lines.append("")
            lines.append("</details>")
            lines.append("")

        if view.commit_sha_short:
            commit = f"`{view.commit_sha_short}`"
            if view.commit_url:
                commit = f"[{commit}]({view.commit_url})"
            lines.append(f"_Coverage for commit {commit}_")

        return "\n".join(lines).rstrip() + "\n"
