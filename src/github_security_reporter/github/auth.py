"""
Credential resolution.

The reporter never manages sessions itself. A token is taken from the
configuration or environment, and otherwise from the GitHub CLI's
credential store, which must already be logged in.
"""

import logging
import os
import subprocess

from ..core.config import GitHubSettings
from .client import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


def token_from_credential_store(hostname: str = "github.com", timeout: int = 15) -> str:
    """Ask the GitHub CLI for its stored token."""
    try:
        result = subprocess.run(
            ["gh", "auth", "token", "--hostname", hostname],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.debug("GitHub CLI credential store unavailable: %s", e)
        return ""

    if result.returncode != 0:
        logger.debug("gh auth token failed: %s", result.stderr.strip())
        return ""

    return result.stdout.strip()


def resolve_token(settings: GitHubSettings) -> str:
    """
    Find a GitHub token.

    Raises:
        AuthenticationError: If no credential can be found
    """
    if settings.token:
        return settings.token

    for name in TOKEN_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value

    token = token_from_credential_store(settings.hostname)
    if token:
        return token

    raise AuthenticationError(
        f"GitHub CLI is not authenticated for {settings.hostname}. "
        f"Run 'gh auth login --hostname {settings.hostname}' or set GITHUB_TOKEN."
    )
