"""Shared test fixtures for coverdiff tests."""

import json
import os

import pytest

from coverdiff.config import ChangesetContext, ReporterConfig
from coverdiff.models import FileCoverage, FileDiff, MetricDiff, MetricTotals
from coverdiff.paths import ChangesetLister


class FakeLister(ChangesetLister):
    """In-memory changeset that counts how often it was asked."""

    def __init__(self, filenames, error=None):
        self.filenames = list(filenames)
        self.error = error
        self.calls = 0

    async def list_pull_files(self, pr_number):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return [{"filename": name, "status": "modified"} for name in self.filenames]


def make_coverage(lines=(10, 8), statements=None, functions=None, branches=None):
    """FileCoverage from (total, covered) pairs; unset metrics copy lines."""

    def totals(pair):
        total, covered = pair if pair is not None else lines
        return MetricTotals(total=total, covered=covered)

    return FileCoverage(
        lines=totals(lines),
        statements=totals(statements),
        functions=totals(functions),
        branches=totals(branches),
    )


def make_file_diff(total=100, percent=85.0, diff=0.0, is_new_file=False):
    """FileDiff with the given line values and fixed other metrics."""
    return FileDiff(
        lines=MetricDiff(total=total, percent=percent, diff=diff),
        statements=MetricDiff(total=1, percent=2, diff=0),
        functions=MetricDiff(total=3, percent=4, diff=0),
        branches=MetricDiff(total=5, percent=6, diff=0),
        is_new_file=is_new_file,
    )


def summary_json(entries):
    """Istanbul json-summary content for {path: (total, covered)} line counts."""
    data = {}
    for path, (total, covered) in entries.items():
        group = {"total": total, "covered": covered, "skipped": 0, "pct": 0}
        data[path] = {
            "lines": dict(group),
            "statements": dict(group),
            "functions": dict(group),
            "branches": dict(group),
        }
    return json.dumps(data)


@pytest.fixture
def context():
    return ChangesetContext(
        owner="octo",
        repo="app",
        pr_number=123,
        commit_sha="1234567890",
        repo_url="https://github.com/octo/app",
    )


@pytest.fixture
def config():
    return ReporterConfig(title="test")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep runner variables and project config files out of every test."""
    for key in (
        "GITHUB_REPOSITORY",
        "GITHUB_EVENT_PATH",
        "GITHUB_SERVER_URL",
        "GITHUB_SHA",
        "GITHUB_TOKEN",
        "GITHUB_API_URL",
    ):
        monkeypatch.delenv(key, raising=False)
    for key in list(os.environ):
        if key.startswith("COVERDIFF_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
