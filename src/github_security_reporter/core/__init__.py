"""Core module containing configuration, data models and the report pipeline."""

from .config import RunConfig, Settings, get_settings
from .models import (
    BatchResult,
    InvalidRepositoryError,
    ReportMetadata,
    RepositoryRef,
    RepositorySummary,
    SecurityFindingsDocument,
    SeverityCounts,
)

# Pipeline classes are imported lazily to avoid circular imports
# Use: from github_security_reporter.core.pipeline import RepositoryPipeline


def __getattr__(name: str):
    """Lazy import for pipeline and batch classes to avoid circular imports."""
    if name == "RepositoryPipeline":
        from .pipeline import RepositoryPipeline
        return RepositoryPipeline
    if name == "BatchCoordinator":
        from .batch import BatchCoordinator
        return BatchCoordinator
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "BatchCoordinator",
    "BatchResult",
    "InvalidRepositoryError",
    "ReportMetadata",
    "RepositoryPipeline",
    "RepositoryRef",
    "RepositorySummary",
    "RunConfig",
    "SecurityFindingsDocument",
    "SeverityCounts",
    "Settings",
    "get_settings",
]
