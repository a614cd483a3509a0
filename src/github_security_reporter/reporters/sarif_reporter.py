"""
SARIF (Static Analysis Results Interchange Format) artifact writer.

The SARIF document of the latest code scanning analysis is written as a
standalone latest.sarif file so that other SARIF tooling can consume it.
"""

import json
from pathlib import Path
from typing import Optional

from ..core.models import SecurityFindingsDocument
from .base import BaseReporter


class SARIFReporter(BaseReporter):
    """Writes latest.sarif when the document carries a SARIF report."""

    format_name = "sarif"
    filename = "latest.sarif"

    def generate(self, document: SecurityFindingsDocument) -> str:
        """
        Serialize the document's SARIF report.

        Raises:
            ValueError: If the document has no SARIF report
        """
        if not document.sarif_reports:
            raise ValueError(f"No SARIF report for {document.metadata.repository}")
        return json.dumps(document.sarif_reports[0], indent=2)

    def write_if_present(
        self,
        document: SecurityFindingsDocument,
        raw_body: Optional[str] = None,
    ) -> Optional[Path]:
        """
        Write latest.sarif, preferring the body exactly as downloaded.

        Returns:
            Path to the written file, or None when there is no SARIF report
        """
        if not document.sarif_reports:
            return None

        if raw_body is None:
            return self.write(document)

        output_path = self._get_output_path(document)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(raw_body, encoding="utf-8")
        return output_path
