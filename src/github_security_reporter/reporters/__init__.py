"""Report generators module."""

from .base import BaseReporter
from .html_reporter import HTMLReporter
from .json_reporter import JSONReporter
from .pdf_reporter import PDFBackend, PDFBackendUnavailable, PDFReporter, PDFResult
from .sarif_reporter import SARIFReporter
from .summary_reporter import SummaryReporter, aggregate_totals

__all__ = [
    "BaseReporter",
    "HTMLReporter",
    "JSONReporter",
    "PDFBackend",
    "PDFBackendUnavailable",
    "PDFReporter",
    "PDFResult",
    "SARIFReporter",
    "SummaryReporter",
    "aggregate_totals",
]
