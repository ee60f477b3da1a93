"""Configuration loading and management for coverdiff.

Configuration sources are merged in priority order:
    1. Defaults (defined in ReporterConfig)
    2. Project config (./coverdiff.toml, or [tool.coverdiff] in ./pyproject.toml)
    3. Explicit config file (--config)
    4. Environment variables (COVERDIFF_* prefix)
    5. CLI overrides (passed as kwargs)

The pull request context (repository URL, PR number, head commit) is kept
apart in ChangesetContext because it describes the run, not the user's
preferences. Inside GitHub Actions it is read from the runner environment.

Example:
    >>> config = load_config(fail_file_reduced=1.0)
    >>> config.fail_file_reduced
    1.0
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional, get_type_hints

from .exceptions import CoverdiffError, InvalidConfigError

ENV_PREFIX = "COVERDIFF_"
PROJECT_CONFIG_NAME = "coverdiff.toml"


@dataclass(frozen=True)
class ReporterConfig:
    """Settings for one coverage diff run.

    Attributes:
        Output:
            title: Heading of the posted comment
            custom_message: Free text shown under the heading

        Paths:
            coverage_path: Current coverage summary (json-summary format)
            base_coverage_path: Coverage summary of the base branch
            strip_path_prefix: When non-empty, used verbatim as the prefix
                removed from coverage paths instead of inferring one

        Gating:
            fail_file_reduced: Fail when a changed file loses at least this
                many percentage points of line coverage (0 = never fail)
            change_threshold: Smallest absolute line diff that marks a file
                as changed; smaller diffs are rounding noise
    """

    title: str = "Test Coverage Report"
    custom_message: str = ""

    coverage_path: str = "coverage/coverage-summary.json"
    base_coverage_path: str = "base/coverage/coverage-summary.json"
    strip_path_prefix: str = ""

    fail_file_reduced: float = 0.0
    change_threshold: float = 0.05

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.title.strip():
            raise InvalidConfigError("title", self.title, "must not be empty")
        if self.fail_file_reduced < 0:
            raise InvalidConfigError(
                "fail_file_reduced", self.fail_file_reduced, "must be non-negative"
            )
        if self.change_threshold <= 0:
            raise InvalidConfigError(
                "change_threshold", self.change_threshold, "must be positive"
            )


@dataclass(frozen=True)
class ChangesetContext:
    """Where the changeset lives. Every field may be unknown."""

    owner: Optional[str] = None
    repo: Optional[str] = None
    pr_number: Optional[int] = None
    commit_sha: Optional[str] = None
    repo_url: Optional[str] = None

    @property
    def pull_url(self) -> Optional[str]:
        """Base URL of the pull request, or None without enough context."""
        if not self.repo_url or not self.pr_number:
            return None
        return f"{self.repo_url}/pull/{self.pr_number}"

    @classmethod
    def from_github_env(cls, env: Optional[Mapping[str, str]] = None) -> "ChangesetContext":
        """Build a context from the GitHub Actions runner environment.

        Reads GITHUB_REPOSITORY and GITHUB_SERVER_URL, then the webhook payload
        at GITHUB_EVENT_PATH for the pull request number, head commit and
        repository URL. Missing pieces are left as None.
        """
        env = os.environ if env is None else env

        owner = repo = repo_url = None
        full_name = env.get("GITHUB_REPOSITORY", "")
        if "/" in full_name:
            owner, repo = full_name.split("/", 1)
            server = env.get("GITHUB_SERVER_URL", "https://github.com").rstrip("/")
            repo_url = f"{server}/{full_name}"

        pr_number = None
        commit_sha = env.get("GITHUB_SHA") or None

        event_path = env.get("GITHUB_EVENT_PATH")
        if event_path and Path(event_path).is_file():
            with open(event_path, encoding="utf-8") as f:
                payload = json.load(f)
            pull_request = payload.get("pull_request") or {}
            if pull_request:
                pr_number = pull_request.get("number")
                commit_sha = (pull_request.get("head") or {}).get("sha") or commit_sha
            repo_url = (payload.get("repository") or {}).get("html_url") or repo_url

        return cls(
            owner=owner,
            repo=repo,
            pr_number=pr_number,
            commit_sha=commit_sha,
            repo_url=repo_url,
        )

    def merged(self, **overrides: Any) -> "ChangesetContext":
        """Return a copy with every non-None override applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ChangesetContext(**values)


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> ReporterConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). None values
            mean "not given" and are skipped.

    Returns:
        Validated ReporterConfig instance

    Raises:
        CoverdiffError: If a config file is missing or unreadable
        InvalidConfigError: If a value fails validation
    """
    merged: dict[str, Any] = {}

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    pyproject = Path.cwd() / "pyproject.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise CoverdiffError(f"Invalid project config '{project_config}': {e}")
    elif pyproject.exists():
        try:
            data = _load_toml_file(pyproject)
        except Exception as e:
            raise CoverdiffError(f"Invalid pyproject.toml '{pyproject}': {e}")
        merged.update(data.get("tool", {}).get("coverdiff", {}))

    if config_file is not None:
        if not config_file.exists():
            raise CoverdiffError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise CoverdiffError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ReporterConfig(**merged)
    except TypeError as e:
        raise CoverdiffError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from COVERDIFF_* environment variables.

    Supported environment variables:
        COVERDIFF_TITLE: str
        COVERDIFF_CUSTOM_MESSAGE: str
        COVERDIFF_COVERAGE_PATH: str
        COVERDIFF_BASE_COVERAGE_PATH: str
        COVERDIFF_STRIP_PATH_PREFIX: str
        COVERDIFF_FAIL_FILE_REDUCED: float
        COVERDIFF_CHANGE_THRESHOLD: float
    """
    type_hints = get_type_hints(ReporterConfig)

    result: dict[str, Any] = {}
    for field_name in ReporterConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        try:
            result[field_name] = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(field_name, env_value, f"{env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    if type_hint is float:
        return float(value)
    if type_hint is int:
        return int(value)
    return value


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise CoverdiffError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
