"""Tests for reading json-summary coverage files."""

import json

import pytest

from conftest import summary_json
from coverdiff.coverage import load_coverage_summary, load_optional_summary, parse_coverage_summary
from coverdiff.exceptions import CoverageFileError, CoverageFormatError
from coverdiff.models import FileCoverage, MetricTotals


class TestLoadCoverageSummary:
    def test_reads_all_entries(self, tmp_path):
        path = tmp_path / "coverage-summary.json"
        path.write_text(summary_json({"total": (20, 15), "/ci/src/a.js": (10, 5)}))

        summary = load_coverage_summary(path)

        assert set(summary) == {"total", "/ci/src/a.js"}
        assert summary["/ci/src/a.js"].lines == MetricTotals(total=10, covered=5)
        assert summary["total"].branches.percent == pytest.approx(75.0)

    def test_ignores_reported_pct(self, tmp_path):
        entry = {m: {"total": 0, "covered": 0, "skipped": 0, "pct": "Unknown"}
                 for m in ("lines", "statements", "functions", "branches")}
        path = tmp_path / "summary.json"
        path.write_text(json.dumps({"total": entry}))

        assert load_coverage_summary(path)["total"].lines.percent == 0.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(CoverageFileError) as exc:
            load_coverage_summary(tmp_path / "nope.json")
        assert exc.value.reason == "file not found"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "summary.json"
        path.write_text("{not json")
        with pytest.raises(CoverageFormatError):
            load_coverage_summary(path)


class TestParseCoverageSummary:
    def test_requires_total(self):
        with pytest.raises(CoverageFormatError) as exc:
            parse_coverage_summary({})
        assert "total" in exc.value.reason

    def test_requires_object(self):
        with pytest.raises(CoverageFormatError):
            parse_coverage_summary([1, 2])

    def test_missing_metric_group_names_the_file(self):
        raw = json.loads(summary_json({"total": (1, 1), "a.js": (1, 1)}))
        del raw["a.js"]["branches"]
        with pytest.raises(CoverageFormatError) as exc:
            parse_coverage_summary(raw)
        assert "a.js" in exc.value.reason
        assert "branches" in exc.value.reason

    def test_non_numeric_counts_name_the_file(self):
        raw = json.loads(summary_json({"total": (1, 1), "a.js": (1, 1)}))
        raw["a.js"]["lines"]["total"] = "n/a"
        with pytest.raises(CoverageFormatError) as exc:
            parse_coverage_summary(raw, "coverage/coverage-summary.json")
        assert exc.value.path.name == "coverage-summary.json"
        assert "a.js" in exc.value.reason
        assert "lines" in exc.value.reason

    def test_null_counts_rejected(self):
        raw = json.loads(summary_json({"total": (1, 1)}))
        raw["total"]["functions"]["covered"] = None
        with pytest.raises(CoverageFormatError):
            parse_coverage_summary(raw)

    def test_builds_file_coverage(self):
        raw = json.loads(summary_json({"total": (4, 1)}))
        summary = parse_coverage_summary(raw)
        assert isinstance(summary["total"], FileCoverage)
        assert summary["total"].functions.percent == pytest.approx(25.0)


class TestLoadOptionalSummary:
    def test_missing_base_is_none(self, tmp_path):
        assert load_optional_summary(tmp_path / "base.json") is None

    def test_present_base_is_loaded(self, tmp_path):
        path = tmp_path / "base.json"
        path.write_text(summary_json({"total": (2, 2)}))
        assert load_optional_summary(path)["total"].lines.covered == 2
