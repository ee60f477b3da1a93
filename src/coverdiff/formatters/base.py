"""Base formatter interface for coverage comment rendering."""

from abc import ABC, abstractmethod

from ..models import ViewModel


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format(self, view: ViewModel) -> str:
        """Return formatted string representation of the view."""
