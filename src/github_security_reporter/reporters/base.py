"""
Base reporter class for generating repository reports.
"""

import html
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from ..core.config import RunConfig
from ..core.models import RepositoryRef, SecurityFindingsDocument


def escape(value: Any) -> str:
    """Escape any value for inclusion in HTML text or attribute context."""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


class BaseReporter(ABC):
    """
    Abstract base class for report generators.

    Subclasses implement specific output formats. Reporters only read the
    document they are given.
    """

    format_name: str = "base"
    filename: str = "report.txt"

    def __init__(self, config: RunConfig):
        """
        Initialize reporter.

        Args:
            config: Run configuration
        """
        self.config = config

    @abstractmethod
    def generate(self, document: SecurityFindingsDocument) -> str:
        """
        Generate report content.

        Args:
            document: Aggregated findings for one repository

        Returns:
            Report content as string
        """
        pass

    def write(
        self,
        document: SecurityFindingsDocument,
        output_path: Optional[Path] = None,
    ) -> Path:
        """
        Write report to file.

        Args:
            document: Aggregated findings for one repository
            output_path: Optional specific output path

        Returns:
            Path to written file
        """
        content = self.generate(document)

        if output_path is None:
            output_path = self._get_output_path(document)

        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)

        return output_path

    def _get_output_path(self, document: SecurityFindingsDocument) -> Path:
        """Place the report in the repository's own output directory."""
        ref = RepositoryRef(document.metadata.owner, document.metadata.repository_name)
        return self.config.repository_dir(ref.slug) / self.filename
