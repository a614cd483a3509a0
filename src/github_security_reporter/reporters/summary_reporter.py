"""
Cross-repository summary page for batch runs.
"""

from pathlib import Path
from typing import Optional, Sequence

from .. import TOOL_NAME
from ..core.config import RunConfig
from ..core.models import RepositorySummary, utc_timestamp
from .base import escape
from .html_reporter import BASE_STYLES, PROJECT_URL, render_stat_card

SUMMARY_FILENAME = "summary-report.html"

TABLE_STYLES = """
        .repos-table {
            background: white;
            border-radius: 10px;
            box-shadow: 0 2px 10px rgba(0,0,0,0.1);
            overflow: hidden;
            margin-bottom: 30px;
        }
        .table-header {
            background: #f8f9fa;
            padding: 20px;
            border-bottom: 1px solid #dee2e6;
            font-size: 1.3em;
            font-weight: 600;
        }
        table { width: 100%; border-collapse: collapse; }
        th, td { padding: 15px; text-align: left; border-bottom: 1px solid #dee2e6; }
        th { background: #f8f9fa; font-weight: 600; }
        .severity-critical { color: #dc3545; font-weight: bold; }
        .severity-high { color: #fd7e14; font-weight: bold; }
        .severity-medium { color: #ffc107; font-weight: bold; }
        .severity-low { color: #6f42c1; font-weight: bold; }
        .repo-link { color: #007bff; text-decoration: none; }
        .repo-link:hover { text-decoration: underline; }
        .failed-list { padding: 20px 40px; color: #dc3545; }
"""


def aggregate_totals(summaries: Sequence[RepositorySummary]) -> RepositorySummary:
    """Sum every counter across the per-repository summaries."""
    return RepositorySummary(
        repository="total",
        critical=sum(s.critical for s in summaries),
        high=sum(s.high for s in summaries),
        medium=sum(s.medium for s in summaries),
        low=sum(s.low for s in summaries),
        secrets=sum(s.secrets for s in summaries),
    )


class SummaryReporter:
    """Generates summary-report.html at the root of the output directory."""

    format_name = "summary"

    def __init__(self, config: RunConfig):
        self.config = config

    def _render_row(self, summary: RepositorySummary) -> str:
        repo = escape(summary.repository)
        return f"""
                    <tr>
                        <td><a href="https://github.com/{repo}" class="repo-link" target="_blank">{repo}</a></td>
                        <td class="severity-critical">{summary.critical}</td>
                        <td class="severity-high">{summary.high}</td>
                        <td class="severity-medium">{summary.medium}</td>
                        <td class="severity-low">{summary.low}</td>
                        <td>{summary.secrets}</td>
                        <td><a href="{escape(summary.report_link)}" class="repo-link">View Report</a></td>
                    </tr>"""

    def _render_failed(self, failed: Sequence[str]) -> str:
        if not failed:
            return ""
        items = "".join(f"\n                <li>{escape(name)}</li>" for name in failed)
        return f"""
        <div class="repos-table">
            <div class="table-header">❌ Failed Repositories ({len(failed)})</div>
            <ul class="failed-list">{items}
            </ul>
        </div>
"""

    def generate(
        self,
        summaries: Sequence[RepositorySummary],
        failed: Sequence[str] = (),
        generated_at: Optional[str] = None,
    ) -> str:
        """Render the summary page."""
        totals = aggregate_totals(summaries)
        generated = escape(generated_at or utc_timestamp())
        version = escape(self.config.tool_version)

        stat_cards = "".join([
            render_stat_card("info", len(summaries), "Repositories"),
            render_stat_card("critical", totals.critical, "Critical"),
            render_stat_card("high", totals.high, "High"),
            render_stat_card("medium", totals.medium, "Medium"),
            render_stat_card("low", totals.low, "Low"),
            render_stat_card("info", totals.secrets, "Secrets"),
        ])
        rows = "".join(self._render_row(s) for s in summaries)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Multi-Repository Security Summary</title>
    <style>{BASE_STYLES}{TABLE_STYLES}    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>🔒 Multi-Repository Security Summary</h1>
            <div class="info">Analyzed {len(summaries)} repositories</div>
            <div class="info">Generated: {generated}</div>
            <div class="info">Tool Version: {version}</div>
        </div>

        <div class="stats-grid">{stat_cards}
        </div>

        <div class="repos-table">
            <div class="table-header">📊 Repository Details</div>
            <table>
                <thead>
                    <tr>
                        <th>Repository</th>
                        <th>Critical</th>
                        <th>High</th>
                        <th>Medium</th>
                        <th>Low</th>
                        <th>Secrets</th>
                        <th>Report</th>
                    </tr>
                </thead>
                <tbody>{rows}
                </tbody>
            </table>
        </div>
{self._render_failed(failed)}
        <div class="footer">
            <p>Report generated on {generated} |
            Generated by <a href="{PROJECT_URL}" target="_blank">{TOOL_NAME} v{version}</a></p>
        </div>
    </div>
</body>
</html>
"""

    def write(
        self,
        summaries: Sequence[RepositorySummary],
        failed: Sequence[str] = (),
        generated_at: Optional[str] = None,
    ) -> Path:
        """Write summary-report.html and return its path."""
        output_path = self.config.output_dir / SUMMARY_FILENAME
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.generate(summaries, failed, generated_at), encoding="utf-8")
        return output_path
