"""GitHub Security Reporter: security dashboards from GitHub's built-in scanning features."""

__version__ = "1.1.0"
TOOL_NAME = "GitHub Security Reporter"
