"""Diff layer — coverage deltas, classification, and view assembly."""

from .engine import CHANGE_THRESHOLD, CHANGED, UNCHANGED, classify, compute_report, diff_file
from .view import (
    PR_IDENTIFIER,
    assemble_view,
    format_decimal,
    format_diff,
    format_percent,
)

__all__ = [
    "CHANGE_THRESHOLD",
    "CHANGED",
    "UNCHANGED",
    "PR_IDENTIFIER",
    "assemble_view",
    "classify",
    "compute_report",
    "diff_file",
    "format_decimal",
    "format_diff",
    "format_percent",
]
