"""GitHub API client module."""

from .auth import resolve_token
from .client import AuthenticationError, GitHubAPIError, GitHubClient
from .security_alerts import (
    AlertFeeds,
    LatestSarif,
    fetch_all_feeds,
    fetch_code_scanning_alerts,
    fetch_dependabot_alerts,
    fetch_dependency_graph,
    fetch_secret_scanning_alerts,
    resolve_latest_sarif,
)

__all__ = [
    "AlertFeeds",
    "AuthenticationError",
    "GitHubAPIError",
    "GitHubClient",
    "LatestSarif",
    "fetch_all_feeds",
    "fetch_code_scanning_alerts",
    "fetch_dependabot_alerts",
    "fetch_dependency_graph",
    "fetch_secret_scanning_alerts",
    "resolve_latest_sarif",
    "resolve_token",
]
