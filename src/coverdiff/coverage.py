"""Loading Istanbul ``coverage-summary.json`` files into CoverageSummary values.

The json-summary reporter writes one object per file keyed by its path,
plus a ``total`` entry::

    {
      "total": {"lines": {"total": 10, "covered": 8, "skipped": 0, "pct": 80}, ...},
      "/home/runner/work/app/src/index.js": {"lines": {...}, ...}
    }

Only ``total`` and ``covered`` are read; percentages are derived again so
that every summary uses the same rule for empty metrics.
"""

import json
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .exceptions import CoverageFileError, CoverageFormatError
from .logging_config import get_logger
from .models import METRICS, TOTAL_KEY, CoverageSummary, FileCoverage, MetricTotals

logger = get_logger(__name__)


def load_coverage_summary(path: Union[str, Path]) -> CoverageSummary:
    """Read a json-summary file from disk.

    Raises:
        CoverageFileError: If the file does not exist or cannot be read
        CoverageFormatError: If the content is not a coverage summary
    """
    p = Path(path)
    if not p.is_file():
        raise CoverageFileError(p, "file not found")

    try:
        with open(p, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise CoverageFormatError(p, f"invalid JSON: {e}")
    except OSError as e:
        raise CoverageFileError(p, str(e))

    summary = parse_coverage_summary(raw, source=p)
    logger.debug("Loaded %d coverage entries from %s", len(summary) - 1, p)
    return summary


def load_optional_summary(path: Union[str, Path]) -> Optional[CoverageSummary]:
    """Like load_coverage_summary, but None when the file is missing.

    The base report is absent on the first run for a branch; every file
    then counts as new.
    """
    if not Path(path).is_file():
        logger.warning("No base coverage report at %s, treating all files as new", path)
        return None
    return load_coverage_summary(path)


def parse_coverage_summary(raw: Any, source: Union[str, Path] = "<memory>") -> CoverageSummary:
    """Convert decoded json-summary content into a CoverageSummary."""
    if not isinstance(raw, dict):
        raise CoverageFormatError(source, "top level must be an object")
    if TOTAL_KEY not in raw:
        raise CoverageFormatError(source, f"missing '{TOTAL_KEY}' entry")

    summary: CoverageSummary = {}
    for filepath, entry in raw.items():
        summary[filepath] = _parse_entry(entry, filepath, source)
    return summary


def _parse_entry(entry: Any, filepath: str, source: Union[str, Path]) -> FileCoverage:
    if not isinstance(entry, dict):
        raise CoverageFormatError(source, f"entry for {filepath!r} must be an object")

    totals = {}
    for metric in METRICS:
        group = entry.get(metric)
        if not isinstance(group, Mapping):
            raise CoverageFormatError(source, f"{filepath!r} has no '{metric}' group")
        try:
            totals[metric] = MetricTotals(
                total=int(group.get("total", 0)),
                covered=int(group.get("covered", 0)),
            )
        except (TypeError, ValueError):
            raise CoverageFormatError(
                source, f"{filepath!r} has non-numeric '{metric}' counts"
            ) from None
    return FileCoverage(**totals)
