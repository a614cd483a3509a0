"""
Severity bucketing for alert feeds.

Counts are taken by exact match against the four severity levels. Alerts
with a missing or unrecognized severity fall outside every bucket but are
still part of the raw total.
"""

from collections import Counter
from typing import Any, Callable, Iterable

from .models import (
    SEVERITY_LEVELS,
    SeverityCounts,
    code_scanning_severity,
    dependabot_severity,
)


def count_by_severity(
    alerts: Iterable[dict[str, Any]],
    severity_of: Callable[[dict[str, Any]], str],
) -> SeverityCounts:
    """Bucket alerts using the given severity accessor."""
    alerts = list(alerts)
    counter = Counter(severity_of(alert) for alert in alerts)
    return SeverityCounts(
        **{level: counter.get(level, 0) for level in SEVERITY_LEVELS},
        total=len(alerts),
    )


def count_code_scanning(alerts: Iterable[dict[str, Any]]) -> SeverityCounts:
    """Bucket code scanning alerts by rule.security_severity_level."""
    return count_by_severity(alerts, code_scanning_severity)


def count_dependabot(alerts: Iterable[dict[str, Any]]) -> SeverityCounts:
    """Bucket Dependabot alerts by advisory severity."""
    return count_by_severity(alerts, dependabot_severity)
