"""
coverdiff - Coverage diff comments for pull requests

Compares a pull request's coverage summary with the base branch, keeps
the files the pull request touches, and renders the changes as a review
comment.
"""

__version__ = "0.1.0"

from .diff import assemble_view, classify, compute_report, format_decimal
from .paths import PathMatcher, resolve_root
from .runner import check_failure, generate_report

__all__ = [
    "PathMatcher",
    "assemble_view",
    "check_failure",
    "classify",
    "compute_report",
    "format_decimal",
    "generate_report",
    "resolve_root",
]
