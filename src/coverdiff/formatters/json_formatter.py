"""JSON formatter for coverdiff."""

import json
from dataclasses import asdict

from ..models import ViewModel
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render the view model as JSON, for workflows that post it themselves."""

    def format(self, view: ViewModel) -> str:
        return json.dumps(asdict(view), indent=2)
