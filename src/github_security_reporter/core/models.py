"""
Data models for the GitHub Security Reporter.

This module defines the dataclasses used throughout the reporter for
repository identifiers, the normalized findings document and the
per-repository summary rows used in batch mode.

Alert records fetched from GitHub are kept exactly as the API returned
them. The accessor functions at the bottom of this module are the only
place that knows where a given field lives inside those raw records.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional


SEVERITY_LEVELS = ("critical", "high", "medium", "low")
UNKNOWN_SEVERITY = "unknown"

_REPOSITORY_PATTERN = re.compile(r"^([^/]+)/(.+)$")


class InvalidRepositoryError(ValueError):
    """Raised when a repository identifier is not in owner/repo form."""


@dataclass(frozen=True)
class RepositoryRef:
    """A repository identified by its owner and name."""

    owner: str
    name: str

    @classmethod
    def parse(cls, value: str) -> "RepositoryRef":
        """Parse an 'owner/repo' token."""
        match = _REPOSITORY_PATTERN.match(value.strip())
        if not match:
            raise InvalidRepositoryError(
                f"Invalid repository format: {value}. Use owner/repo format."
            )
        return cls(owner=match.group(1), name=match.group(2))

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def slug(self) -> str:
        """Name of the per-repository output directory."""
        return f"{self.owner}-{self.name}".replace("/", "-")

    def __str__(self) -> str:
        return self.full_name


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a moment as a UTC ISO-8601 timestamp with a Z suffix."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class ReportMetadata:
    """Run metadata embedded in every findings document."""

    repository: str
    owner: str
    repository_name: str
    generated_at: str
    tool_version: str

    def to_dict(self) -> dict[str, str]:
        return {
            "repository": self.repository,
            "owner": self.owner,
            "repositoryName": self.repository_name,
            "generatedAt": self.generated_at,
            "toolVersion": self.tool_version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReportMetadata":
        repository = data.get("repository", "")
        owner, _, name = repository.partition("/")
        return cls(
            repository=repository,
            owner=data.get("owner", owner),
            repository_name=data.get("repositoryName", name),
            generated_at=data.get("generatedAt", ""),
            tool_version=data.get("toolVersion", ""),
        )


def empty_dependency_graph() -> dict[str, Any]:
    """Dependency graph response used when the GraphQL query fails."""
    return {
        "data": {
            "repository": {
                "dependencyGraphManifests": {"edges": []},
                "vulnerabilityAlerts": {"nodes": []},
            }
        }
    }


@dataclass(frozen=True)
class SecurityFindingsDocument:
    """
    Normalized security data for one repository.

    Every feed is always present; a feed that could not be fetched is an
    empty sequence. Renderers treat the document as read-only.
    """

    metadata: ReportMetadata
    sarif_reports: list[dict[str, Any]] = field(default_factory=list)
    code_scanning_alerts: list[dict[str, Any]] = field(default_factory=list)
    secret_scanning_alerts: list[dict[str, Any]] = field(default_factory=list)
    dependabot_alerts: list[dict[str, Any]] = field(default_factory=list)
    dependency_graph: dict[str, Any] = field(default_factory=empty_dependency_graph)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the data.json layout."""
        return {
            "metadata": self.metadata.to_dict(),
            "sarifReports": self.sarif_reports,
            "codeScanningAlerts": self.code_scanning_alerts,
            "secretScanningAlerts": self.secret_scanning_alerts,
            "dependabotAlerts": self.dependabot_alerts,
            "dependencyGraph": self.dependency_graph,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SecurityFindingsDocument":
        """Rebuild a document from a previously written data.json."""
        return cls(
            metadata=ReportMetadata.from_dict(data.get("metadata", {})),
            sarif_reports=list(data.get("sarifReports") or []),
            code_scanning_alerts=list(data.get("codeScanningAlerts") or []),
            secret_scanning_alerts=list(data.get("secretScanningAlerts") or []),
            dependabot_alerts=list(data.get("dependabotAlerts") or []),
            dependency_graph=data.get("dependencyGraph") or empty_dependency_graph(),
        )


@dataclass(frozen=True)
class SeverityCounts:
    """Alert counts per severity bucket, plus the raw feed length."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    total: int = 0

    @property
    def bucketed(self) -> int:
        return self.critical + self.high + self.medium + self.low

    @property
    def unclassified(self) -> int:
        """Alerts whose severity is missing or outside the four buckets."""
        return self.total - self.bucketed

    def get(self, level: str) -> int:
        return getattr(self, level) if level in SEVERITY_LEVELS else 0


@dataclass(frozen=True)
class RepositorySummary:
    """Per-repository row of a batch run."""

    repository: str
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    secrets: int = 0

    @classmethod
    def from_document(cls, document: SecurityFindingsDocument) -> "RepositorySummary":
        from .severity import count_code_scanning

        counts = count_code_scanning(document.code_scanning_alerts)
        return cls(
            repository=document.metadata.repository,
            critical=counts.critical,
            high=counts.high,
            medium=counts.medium,
            low=counts.low,
            secrets=len(document.secret_scanning_alerts),
        )

    @property
    def slug(self) -> str:
        return self.repository.replace("/", "-")

    @property
    def report_link(self) -> str:
        """Relative link from the batch index to this repository's report."""
        return f"./{self.slug}/summary.html"


@dataclass
class BatchResult:
    """Outcome of a batch run, ordered by input."""

    requested: list[str] = field(default_factory=list)
    summaries: list[RepositorySummary] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    summary_report: Optional[Path] = None

    @property
    def succeeded(self) -> bool:
        return not self.failed


# =============================================================================
# Raw alert accessors
# =============================================================================

def _dig(data: Any, *keys: Any, default: Any = None) -> Any:
    for key in keys:
        if isinstance(data, dict):
            data = data.get(key)
        elif isinstance(data, list) and isinstance(key, int) and -len(data) <= key < len(data):
            data = data[key]
        else:
            return default
        if data is None:
            return default
    return data


def code_scanning_severity(alert: dict[str, Any]) -> str:
    return _dig(alert, "rule", "security_severity_level") or UNKNOWN_SEVERITY


def code_scanning_description(alert: dict[str, Any]) -> str:
    return _dig(alert, "rule", "description") or _dig(alert, "rule", "id") or "Unnamed rule"


def code_scanning_location(alert: dict[str, Any]) -> str:
    location = _dig(alert, "most_recent_instance", "location", default={})
    path = location.get("path") or "Unknown"
    line = location.get("start_line")
    return f"{path}:{line}" if line is not None else path


def code_scanning_tags(alert: dict[str, Any]) -> list[str]:
    return [str(tag) for tag in _dig(alert, "rule", "tags", default=[])]


def secret_type(alert: dict[str, Any]) -> str:
    return alert.get("secret_type_display_name") or alert.get("secret_type") or "Unknown secret"


def secret_state(alert: dict[str, Any]) -> str:
    return alert.get("state") or UNKNOWN_SEVERITY


def secret_location(alert: dict[str, Any]) -> str:
    return _dig(alert, "locations", 0, "details", "path") or "Unknown"


def dependabot_severity(alert: dict[str, Any]) -> str:
    return (
        _dig(alert, "security_advisory", "severity")
        or _dig(alert, "security_vulnerability", "severity")
        or UNKNOWN_SEVERITY
    )


def dependabot_package(alert: dict[str, Any]) -> str:
    return _dig(alert, "dependency", "package", "name") or "unknown"


def dependabot_ecosystem(alert: dict[str, Any]) -> str:
    return _dig(alert, "dependency", "package", "ecosystem") or "unknown"


def dependabot_summary(alert: dict[str, Any]) -> str:
    return _dig(alert, "security_advisory", "summary") or ""


def dependabot_cve(alert: dict[str, Any]) -> Optional[str]:
    return _dig(alert, "security_advisory", "cve_id")


def dependabot_version_range(alert: dict[str, Any]) -> Optional[str]:
    return _dig(alert, "security_vulnerability", "vulnerable_version_range")


def dependabot_manifest(alert: dict[str, Any]) -> Optional[str]:
    return _dig(alert, "dependency", "manifest_path")
