"""
JSON export of the findings document.
"""

import json
from typing import Any

from ..core.models import SecurityFindingsDocument
from .base import BaseReporter


class JSONReporter(BaseReporter):
    """Writes the complete findings document as data.json."""

    format_name = "json"
    filename = "data.json"

    def generate(self, document: SecurityFindingsDocument) -> str:
        """
        Generate JSON report.

        Args:
            document: Aggregated findings

        Returns:
            JSON string
        """
        return json.dumps(document.to_dict(), indent=2, default=self._json_serializer)

    def _json_serializer(self, obj: Any) -> Any:
        """Custom JSON serializer for non-serializable objects."""
        if hasattr(obj, "isoformat"):
            return obj.isoformat()
        if hasattr(obj, "value"):
            return obj.value
        return str(obj)
