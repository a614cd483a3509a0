"""
GitHub security alert feeds.

This module fetches the four alert feeds the reporter aggregates:
- Code Scanning Alerts (SAST findings, typically CodeQL)
- Secret Scanning Alerts (credentials detected in repository content)
- Dependabot Alerts (vulnerable dependencies)
- Dependency graph and vulnerability alerts (GraphQL)

and resolves the SARIF document of the latest code scanning analysis.

Error Handling:
Every fetcher absorbs its own failures. A 403/404 (feature not enabled,
no access), a network error, a timeout or a malformed body is logged and
replaced with an empty result so one unavailable feed never prevents a
report from being produced.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..core.models import RepositoryRef, empty_dependency_graph
from .client import SARIF_MEDIA_TYPE, GitHubAPIError, GitHubClient

logger = logging.getLogger(__name__)

CODE_SCANNING_ALERTS_URL = "/repos/{owner}/{repo}/code-scanning/alerts"
CODE_SCANNING_ANALYSES_URL = "/repos/{owner}/{repo}/code-scanning/analyses"
CODE_SCANNING_ANALYSIS_URL = "/repos/{owner}/{repo}/code-scanning/analyses/{analysis_id}"
SECRET_SCANNING_ALERTS_URL = "/repos/{owner}/{repo}/secret-scanning/alerts"
DEPENDABOT_ALERTS_URL = "/repos/{owner}/{repo}/dependabot/alerts"

DEPENDENCY_GRAPH_QUERY = """
query($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {
    dependencyGraphManifests(first: 100) {
      edges {
        node {
          filename
          dependencies(first: 100) {
            nodes {
              packageName
              packageManager
              requirements
            }
          }
        }
      }
    }
    vulnerabilityAlerts(first: 100) {
      nodes {
        vulnerableManifestFilename
        securityVulnerability {
          package {
            name
            ecosystem
          }
          severity
        }
      }
    }
  }
}
"""

FETCH_ERRORS = (GitHubAPIError, httpx.HTTPError, ValueError)


@dataclass(frozen=True)
class AlertFeeds:
    """Raw results of the four alert fetchers for one repository."""

    code_scanning: list[dict[str, Any]]
    secret_scanning: list[dict[str, Any]]
    dependabot: list[dict[str, Any]]
    dependency_graph: dict[str, Any]


@dataclass(frozen=True)
class LatestSarif:
    """SARIF document of the most recent code scanning analysis."""

    analysis_id: int
    body: str
    document: dict[str, Any]


def _url(template: str, ref: RepositoryRef, **kwargs: Any) -> str:
    return template.format(owner=ref.owner, repo=ref.name, **kwargs)


async def _fetch_alert_list(
    client: GitHubClient,
    endpoint: str,
    feed: str,
    ref: RepositoryRef,
    quiet_when_disabled: bool = False,
) -> list[dict[str, Any]]:
    """Fetch one alert list, substituting an empty list on any failure."""
    try:
        alerts = await client.get_json(endpoint, params={"per_page": client.settings.per_page})
    except GitHubAPIError as e:
        if quiet_when_disabled and e.feature_disabled:
            logger.info("%s alerts not available or accessible for %s", feed, ref)
        else:
            logger.warning("Could not fetch %s alerts for %s: %s", feed, ref, e)
        return []
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Could not fetch %s alerts for %s: %s", feed, ref, e)
        return []

    if not isinstance(alerts, list):
        logger.warning("Unexpected %s alerts response for %s; using empty list", feed, ref)
        return []

    logger.info("Fetched %d %s alerts for %s", len(alerts), feed, ref)
    return alerts


async def fetch_code_scanning_alerts(client: GitHubClient, ref: RepositoryRef) -> list[dict[str, Any]]:
    """Fetch code scanning alerts."""
    return await _fetch_alert_list(
        client, _url(CODE_SCANNING_ALERTS_URL, ref), "code scanning", ref
    )


async def fetch_secret_scanning_alerts(client: GitHubClient, ref: RepositoryRef) -> list[dict[str, Any]]:
    """Fetch secret scanning alerts. A disabled feature is not worth a warning."""
    return await _fetch_alert_list(
        client, _url(SECRET_SCANNING_ALERTS_URL, ref), "secret scanning", ref, quiet_when_disabled=True
    )


async def fetch_dependabot_alerts(client: GitHubClient, ref: RepositoryRef) -> list[dict[str, Any]]:
    """Fetch Dependabot alerts. A disabled feature is not worth a warning."""
    return await _fetch_alert_list(
        client, _url(DEPENDABOT_ALERTS_URL, ref), "Dependabot", ref, quiet_when_disabled=True
    )


async def fetch_dependency_graph(client: GitHubClient, ref: RepositoryRef) -> dict[str, Any]:
    """Fetch dependency manifests and vulnerability alerts through GraphQL."""
    try:
        return await client.graphql(
            DEPENDENCY_GRAPH_QUERY,
            {"owner": ref.owner, "name": ref.name},
        )
    except FETCH_ERRORS as e:
        logger.warning("Could not fetch dependency data for %s: %s", ref, e)
        return empty_dependency_graph()


async def fetch_all_feeds(client: GitHubClient, ref: RepositoryRef) -> AlertFeeds:
    """
    Fetch the four feeds concurrently.

    The feeds are independent reads; all four (or their empty
    substitutes) are awaited before returning.
    """
    code_scanning, secret_scanning, dependabot, dependency_graph = await asyncio.gather(
        fetch_code_scanning_alerts(client, ref),
        fetch_secret_scanning_alerts(client, ref),
        fetch_dependabot_alerts(client, ref),
        fetch_dependency_graph(client, ref),
    )
    return AlertFeeds(
        code_scanning=code_scanning,
        secret_scanning=secret_scanning,
        dependabot=dependabot,
        dependency_graph=dependency_graph,
    )


async def resolve_latest_sarif(client: GitHubClient, ref: RepositoryRef) -> Optional[LatestSarif]:
    """
    Download the SARIF document of the latest code scanning analysis.

    The analyses endpoint lists the newest analysis first; index 0 is taken
    as the latest without comparing timestamps.

    Returns:
        LatestSarif, or None when there is no analysis or it cannot be read
    """
    try:
        analyses = await client.get_json(_url(CODE_SCANNING_ANALYSES_URL, ref))
    except FETCH_ERRORS as e:
        logger.warning("Could not fetch code scanning analyses for %s: %s", ref, e)
        return None

    if not isinstance(analyses, list) or not analyses:
        logger.info("No code scanning analyses found for %s", ref)
        return None

    analysis_id = analyses[0].get("id") if isinstance(analyses[0], dict) else None
    if analysis_id is None:
        logger.info("No code scanning analyses found for %s", ref)
        return None

    logger.info("Downloading SARIF from analysis %s for %s", analysis_id, ref)
    try:
        body = await client.get_text(
            _url(CODE_SCANNING_ANALYSIS_URL, ref, analysis_id=analysis_id),
            accept=SARIF_MEDIA_TYPE,
        )
        document = json.loads(body)
    except FETCH_ERRORS as e:
        logger.warning("Could not download SARIF data for %s: %s", ref, e)
        return None

    if not isinstance(document, dict):
        logger.warning("SARIF response for %s is not a JSON object", ref)
        return None

    return LatestSarif(analysis_id=analysis_id, body=body, document=document)
