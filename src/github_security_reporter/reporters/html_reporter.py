"""
HTML dashboard generator.

Produces a single self-contained page (inline styles, no external assets)
for one repository. Every value taken from alert data or repository names
is HTML-escaped before it is placed in the markup.
"""

from typing import Any

from .. import TOOL_NAME
from ..core.models import (
    SEVERITY_LEVELS,
    SecurityFindingsDocument,
    SeverityCounts,
    code_scanning_description,
    code_scanning_location,
    code_scanning_severity,
    code_scanning_tags,
    dependabot_cve,
    dependabot_ecosystem,
    dependabot_manifest,
    dependabot_package,
    dependabot_severity,
    dependabot_summary,
    dependabot_version_range,
    secret_location,
    secret_state,
    secret_type,
)
from ..core.severity import count_code_scanning, count_dependabot
from .base import BaseReporter, escape

MAX_TAGS = 3
PROJECT_URL = "https://github.com/Moose0621/github-security-reporter"

BASE_STYLES = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.6;
            color: #333;
            background: #f8f9fa;
        }
        .container { max-width: 1200px; margin: 0 auto; padding: 20px; }
        .header {
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            color: white;
            padding: 30px;
            border-radius: 10px;
            margin-bottom: 30px;
            text-align: center;
        }
        .header h1 { font-size: 2.5em; margin-bottom: 10px; }
        .header .repo, .header .info { font-size: 1.2em; opacity: 0.9; }
        .stats-grid {
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(180px, 1fr));
            gap: 20px;
            margin-bottom: 30px;
        }
        .stat-card {
            background: white;
            padding: 25px;
            border-radius: 10px;
            box-shadow: 0 2px 10px rgba(0,0,0,0.1);
            text-align: center;
            border-left: 5px solid #ddd;
        }
        .stat-card.critical { border-left-color: #dc3545; }
        .stat-card.high { border-left-color: #fd7e14; }
        .stat-card.medium { border-left-color: #ffc107; }
        .stat-card.low { border-left-color: #6f42c1; }
        .stat-card.info { border-left-color: #17a2b8; }
        .stat-number { font-size: 2.5em; font-weight: bold; margin-bottom: 5px; }
        .stat-label { color: #666; font-size: 0.9em; text-transform: uppercase; letter-spacing: 1px; }
        .footer {
            text-align: center;
            padding: 20px;
            color: #666;
            border-top: 1px solid #dee2e6;
            margin-top: 30px;
        }
        .footer a { color: #007bff; text-decoration: none; }
"""

REPORT_STYLES = """
        .section {
            background: white;
            margin-bottom: 30px;
            border-radius: 10px;
            box-shadow: 0 2px 10px rgba(0,0,0,0.1);
            overflow: hidden;
        }
        .section-header {
            background: #f8f9fa;
            padding: 20px;
            border-bottom: 1px solid #dee2e6;
            font-size: 1.3em;
            font-weight: 600;
        }
        .section-content { padding: 20px; }
        .section-note { color: #666; font-size: 0.9em; margin-bottom: 15px; }
        .alert-item {
            padding: 15px;
            border-left: 4px solid #ddd;
            margin-bottom: 15px;
            background: #f8f9fa;
            border-radius: 0 5px 5px 0;
        }
        .alert-item.critical { border-left-color: #dc3545; background: #f8d7da; }
        .alert-item.high { border-left-color: #fd7e14; background: #ffeaa7; }
        .alert-item.medium { border-left-color: #ffc107; background: #fff3cd; }
        .alert-item.low { border-left-color: #6f42c1; background: #e2e3f3; }
        .alert-title { font-weight: 600; margin-bottom: 8px; color: #333; }
        .alert-description { color: #666; margin-bottom: 8px; }
        .alert-location {
            font-family: 'Monaco', 'Courier New', monospace;
            background: #e9ecef;
            padding: 5px 10px;
            border-radius: 3px;
            font-size: 0.9em;
            display: inline-block;
        }
        .severity-badge {
            display: inline-block;
            padding: 4px 8px;
            border-radius: 4px;
            font-size: 0.8em;
            font-weight: bold;
            text-transform: uppercase;
            margin-left: 10px;
        }
        .severity-critical { background: #dc3545; color: white; }
        .severity-high { background: #fd7e14; color: white; }
        .severity-medium { background: #ffc107; color: black; }
        .severity-low { background: #6f42c1; color: white; }
        .severity-unknown { background: #6c757d; color: white; }
        .no-data { text-align: center; color: #666; padding: 40px; }
        .severity-breakdown { margin-bottom: 15px; }
        .breakdown-count {
            display: inline-block;
            padding: 4px 10px;
            border-radius: 4px;
            font-size: 0.85em;
            font-weight: bold;
            margin-right: 8px;
        }
        .rule-tags { margin-top: 8px; }
        .tag {
            display: inline-block;
            background: #e9ecef;
            padding: 2px 6px;
            border-radius: 3px;
            font-size: 0.8em;
            margin-right: 5px;
            margin-bottom: 3px;
        }
        @media print {
            body { background: white; }
            .section, .stat-card { box-shadow: none; }
        }
"""


def severity_class(severity: str) -> str:
    """CSS class for a severity value; anything unrecognized maps to 'unknown'."""
    return severity if severity in SEVERITY_LEVELS else "unknown"


def render_stat_card(css_class: str, value: int, label: str) -> str:
    return f"""
            <div class="stat-card {css_class}">
                <div class="stat-number">{value}</div>
                <div class="stat-label">{escape(label)}</div>
            </div>"""


def render_severity_breakdown(counts: SeverityCounts) -> str:
    """Per-severity counts shown at the top of a section."""
    badges = "".join(
        f'\n                    <span class="breakdown-count severity-{level}">'
        f"{level.capitalize()}: {counts.get(level)}</span>"
        for level in SEVERITY_LEVELS
    )
    return f'\n                <div class="severity-breakdown">{badges}\n                </div>'


def render_no_data(message: str) -> str:
    return f'                <div class="no-data">✅ {escape(message)}</div>\n'


class HTMLReporter(BaseReporter):
    """Generates the per-repository summary.html dashboard."""

    format_name = "html"
    filename = "summary.html"

    def generate(self, document: SecurityFindingsDocument) -> str:
        """
        Generate HTML report.

        The page depends only on the document: the embedded time is the
        document's generation timestamp.
        """
        code_counts = count_code_scanning(document.code_scanning_alerts)
        dependabot_counts = count_dependabot(document.dependabot_alerts)
        return self._render_template(document, code_counts, dependabot_counts)

    def _render_code_scanning_alert(self, alert: dict[str, Any]) -> str:
        severity = code_scanning_severity(alert)
        css = severity_class(severity)
        tags = "".join(
            f'\n                        <span class="tag">{escape(tag)}</span>'
            for tag in code_scanning_tags(alert)[:MAX_TAGS]
        )
        return f"""
                <div class="alert-item {css}">
                    <div class="alert-title">
                        {escape(code_scanning_description(alert))}
                        <span class="severity-badge severity-{css}">{escape(severity)}</span>
                    </div>
                    <div class="alert-location">{escape(code_scanning_location(alert))}</div>
                    <div class="rule-tags">{tags}
                    </div>
                </div>"""

    def _render_secret_alert(self, alert: dict[str, Any]) -> str:
        return f"""
                <div class="alert-item high">
                    <div class="alert-title">
                        {escape(secret_type(alert))} detected
                        <span class="severity-badge severity-high">{escape(secret_state(alert))}</span>
                    </div>
                    <div class="alert-location">{escape(secret_location(alert))}</div>
                </div>"""

    def _render_dependabot_alert(self, alert: dict[str, Any]) -> str:
        severity = dependabot_severity(alert)
        css = severity_class(severity)

        details = [f"Ecosystem: {dependabot_ecosystem(alert)}"]
        cve = dependabot_cve(alert)
        if cve:
            details.append(f"CVE: {cve}")
        version_range = dependabot_version_range(alert)
        if version_range:
            details.append(f"Vulnerable versions: {version_range}")

        tags = "".join(f'<span class="tag">{escape(d)}</span>' for d in details)

        manifest = dependabot_manifest(alert)
        location = (
            f'\n                    <div class="alert-location">{escape(manifest)}</div>' if manifest else ""
        )

        return f"""
                <div class="alert-item {css}">
                    <div class="alert-title">
                        {escape(dependabot_package(alert))}
                        <span class="severity-badge severity-{css}">{escape(severity)}</span>
                    </div>
                    <div class="alert-description">{escape(dependabot_summary(alert))}</div>
                    <div class="rule-tags">{tags}</div>{location}
                </div>"""

    def _render_section(
        self,
        title: str,
        items: list[str],
        empty_message: str,
        note: str = "",
        breakdown: str = "",
    ) -> str:
        body = "".join(items) + "\n" if items else render_no_data(empty_message)
        note_html = f'\n                <div class="section-note">{escape(note)}</div>' if note else ""
        return f"""
        <div class="section">
            <div class="section-header">{escape(title)}</div>
            <div class="section-content">{breakdown}{note_html}
{body}            </div>
        </div>
"""

    def _render_template(
        self,
        document: SecurityFindingsDocument,
        code_counts: SeverityCounts,
        dependabot_counts: SeverityCounts,
    ) -> str:
        """Render the complete HTML report."""
        metadata = document.metadata
        repo = escape(metadata.repository)
        generated = escape(metadata.generated_at)
        version = escape(metadata.tool_version)
        secrets_count = len(document.secret_scanning_alerts)

        stat_cards = "".join([
            *(render_stat_card(level, code_counts.get(level), level.capitalize()) for level in SEVERITY_LEVELS),
            render_stat_card("info", secrets_count, "Secrets Found"),
            render_stat_card("info", dependabot_counts.total, "Dependabot Alerts"),
        ])

        unclassified_note = ""
        if code_counts.unclassified:
            unclassified_note = f"{code_counts.unclassified} alert(s) have no severity rating and are not counted above."

        code_section = self._render_section(
            f"📊 Code Scanning Alerts ({code_counts.total} total)",
            [self._render_code_scanning_alert(a) for a in document.code_scanning_alerts],
            "No code scanning alerts found",
            unclassified_note,
        )
        secret_section = self._render_section(
            f"🔐 Secret Scanning Alerts ({secrets_count} total)",
            [self._render_secret_alert(a) for a in document.secret_scanning_alerts],
            "No secrets detected",
        )
        dependabot_note = ""
        if dependabot_counts.unclassified:
            dependabot_note = (
                f"{dependabot_counts.unclassified} alert(s) have no recognized severity "
                "and are not counted in the breakdown."
            )

        dependabot_section = self._render_section(
            f"📦 Dependabot Alerts ({dependabot_counts.total} total)",
            [self._render_dependabot_alert(a) for a in document.dependabot_alerts],
            "No Dependabot alerts found",
            dependabot_note,
            render_severity_breakdown(dependabot_counts) if dependabot_counts.total else "",
        )

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Security Report - {repo}</title>
    <style>{BASE_STYLES}{REPORT_STYLES}    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>🔒 Security Report</h1>
            <div class="repo">Repository: <strong>{repo}</strong></div>
            <div class="repo">Generated: <strong>{generated}</strong></div>
            <div class="repo">Tool Version: <strong>{version}</strong></div>
        </div>

        <div class="stats-grid">{stat_cards}
        </div>
{code_section}{secret_section}{dependabot_section}
        <div class="footer">
            <p>Report generated on {generated} |
            <a href="https://github.com/{repo}/security" target="_blank">View on GitHub</a> |
            Generated by <a href="{PROJECT_URL}" target="_blank">{TOOL_NAME} v{version}</a></p>
        </div>
    </div>
</body>
</html>
"""
