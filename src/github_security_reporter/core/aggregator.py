"""
Aggregation of alert feeds into a SecurityFindingsDocument.
"""

from datetime import datetime
from typing import Any, Optional

from ..github.security_alerts import AlertFeeds
from .models import ReportMetadata, RepositoryRef, SecurityFindingsDocument, utc_timestamp


def build_document(
    ref: RepositoryRef,
    feeds: AlertFeeds,
    sarif_reports: list[dict[str, Any]],
    tool_version: str,
    generated_at: Optional[datetime] = None,
) -> SecurityFindingsDocument:
    """
    Merge fetched feeds and run metadata into one document.

    Records are embedded as fetched: nothing is filtered, deduplicated or
    correlated across feeds. At most one SARIF document is kept.
    """
    metadata = ReportMetadata(
        repository=ref.full_name,
        owner=ref.owner,
        repository_name=ref.name,
        generated_at=utc_timestamp(generated_at),
        tool_version=tool_version,
    )

    return SecurityFindingsDocument(
        metadata=metadata,
        sarif_reports=list(sarif_reports[:1]),
        code_scanning_alerts=list(feeds.code_scanning),
        secret_scanning_alerts=list(feeds.secret_scanning),
        dependabot_alerts=list(feeds.dependabot),
        dependency_graph=feeds.dependency_graph,
    )
