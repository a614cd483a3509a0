"""
GitHub API client.

Thin async wrapper over httpx that knows the GitHub REST and GraphQL
conventions needed by the reporter. Requests are issued once: there is no
retry or rate-limit scheduling, only a per-call timeout.
"""

import logging
from typing import Any, Optional

import httpx

from ..core.config import GitHubSettings
from ..core.models import RepositoryRef

logger = logging.getLogger(__name__)

RATE_LIMIT_WARNING_THRESHOLD = 100
SARIF_MEDIA_TYPE = "application/sarif+json"


class GitHubAPIError(Exception):
    """Exception raised for GitHub API errors."""

    def __init__(self, message: str, status_code: int = 0, response: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response or {}

    @property
    def feature_disabled(self) -> bool:
        """True for the 403/404 answers GitHub gives when a feature is off."""
        if self.status_code == 404:
            return True
        message = str(self).lower()
        return self.status_code == 403 and (
            "not enabled" in message or "disabled" in message or "no analysis found" in message
        )


class AuthenticationError(Exception):
    """Raised when no valid GitHub credential is available."""


class GitHubClient:
    """
    Async GitHub API client.

    Usage:
        async with GitHubClient(settings) as client:
            alerts = await client.get_json("/repos/owner/repo/code-scanning/alerts")
    """

    def __init__(
        self,
        settings: GitHubSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize GitHub client.

        Args:
            settings: GitHub configuration settings
            transport: Optional httpx transport (used to stub the API in tests)
        """
        self.settings = settings
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "GitHubClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def connect(self) -> None:
        """Initialize the HTTP client."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "GitHubSecurityReporter",
        }

        if self.settings.token:
            headers["Authorization"] = f"Bearer {self.settings.token}"

        self._client = httpx.AsyncClient(
            base_url=self.settings.api_url,
            headers=headers,
            timeout=self.settings.timeout,
            follow_redirects=True,
            transport=self._transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, raising if not connected."""
        if not self._client:
            raise RuntimeError("Client not connected. Use 'async with' or call connect()")
        return self._client

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> httpx.Response:
        """
        Make a single request to the GitHub API.

        Raises:
            GitHubAPIError: If the API returns an error status
            httpx.HTTPError: On transport failures and timeouts
        """
        response = await self.client.request(
            method,
            endpoint,
            params=params,
            json=json,
            headers=headers,
        )

        self._check_rate_limit(response)

        if response.status_code >= 400:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {}
            if not isinstance(error_data, dict):
                error_data = {}
            message = error_data.get("message", f"HTTP {response.status_code}")
            raise GitHubAPIError(message, response.status_code, error_data)

        return response

    def _check_rate_limit(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is not None and remaining.isdigit() and int(remaining) < RATE_LIMIT_WARNING_THRESHOLD:
            logger.warning(
                "GitHub API rate limit low: %s requests remaining (resets at %s)",
                remaining,
                response.headers.get("X-RateLimit-Reset", "unknown"),
            )

    async def get_json(self, endpoint: str, params: Optional[dict] = None) -> Any:
        """GET an endpoint and decode its JSON body."""
        response = await self._request("GET", endpoint, params=params)
        return response.json() if response.content else None

    async def get_text(self, endpoint: str, accept: str) -> str:
        """GET an endpoint with a specific media type and return the raw body."""
        response = await self._request("GET", endpoint, headers={"Accept": accept})
        return response.text

    async def graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """
        Run a GraphQL query.

        GitHub reports query errors with a 200 status and an "errors" key;
        those are raised as GitHubAPIError as well.
        """
        response = await self._request("POST", "/graphql", json={"query": query, "variables": variables})
        payload = response.json()
        if not isinstance(payload, dict):
            raise GitHubAPIError("Malformed GraphQL response", response.status_code)
        if payload.get("errors"):
            messages = "; ".join(str(e.get("message", e)) for e in payload["errors"] if isinstance(e, dict))
            raise GitHubAPIError(messages or "GraphQL query failed", response.status_code, payload)
        return payload

    async def verify_authentication(self) -> str:
        """
        Confirm the configured credential is accepted.

        Returns:
            Login of the authenticated account, or an empty string when the
            credential cannot read user details (e.g. installation tokens).

        Raises:
            AuthenticationError: If no token is configured or GitHub rejects it
        """
        if not self.settings.token:
            raise AuthenticationError("No GitHub credential configured")

        try:
            user = await self.get_json("/user")
        except GitHubAPIError as e:
            if e.status_code == 401:
                raise AuthenticationError(f"GitHub rejected the credential: {e}") from e
            logger.debug("Could not read authenticated user: %s", e)
            return ""

        return user.get("login", "") if isinstance(user, dict) else ""

    async def get_repository(self, ref: RepositoryRef) -> dict[str, Any]:
        """
        Get repository information.

        Raises:
            GitHubAPIError: If the repository does not exist or is not accessible
        """
        repo = await self.get_json(f"/repos/{ref.owner}/{ref.name}")
        if not isinstance(repo, dict):
            raise GitHubAPIError(f"Unexpected response for repository {ref}")
        return repo
