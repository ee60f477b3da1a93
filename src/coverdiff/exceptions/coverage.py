"""Coverage report exceptions: missing or malformed summary files."""

from pathlib import Path
from typing import Union

from .base import CoverdiffError


class CoverageError(CoverdiffError):
    """Base class for coverage report errors."""

    pass


class CoverageFileError(CoverageError):
    """Raised when a coverage summary file cannot be read."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(
            f"Cannot read coverage file: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = Path(path)
        self.reason = reason


class CoverageFormatError(CoverageError):
    """Raised when a coverage summary does not have the expected shape."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(
            f"Malformed coverage summary: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = Path(path)
        self.reason = reason
