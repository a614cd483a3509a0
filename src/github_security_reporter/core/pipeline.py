"""
Per-repository report pipeline.

Fetches every alert feed for one repository, aggregates them into a
SecurityFindingsDocument and writes the report artifacts into the
repository's own output directory.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from rich.console import Console

from ..github.client import GitHubClient
from ..github.security_alerts import fetch_all_feeds, resolve_latest_sarif
from ..reporters import HTMLReporter, JSONReporter, PDFReporter, SARIFReporter
from .aggregator import build_document
from .config import RunConfig
from .models import RepositorySummary, RepositoryRef, SecurityFindingsDocument

logger = logging.getLogger(__name__)


@dataclass
class PipelineOutput:
    """Files written and statistics for one processed repository."""

    document: SecurityFindingsDocument
    summary: RepositorySummary
    files: dict[str, Path] = field(default_factory=dict)


class RepositoryPipeline:
    """
    Runs fetch, aggregate and render for a single repository.

    Coordinates:
    - Repository access check (the only fetch whose failure is fatal)
    - SARIF resolution and the four alert feeds
    - JSON, SARIF, HTML and PDF reporters
    """

    def __init__(
        self,
        client: GitHubClient,
        config: RunConfig,
        pdf_reporter: Optional[PDFReporter] = None,
        console: Optional[Console] = None,
    ):
        """
        Initialize pipeline.

        Args:
            client: Connected GitHub client
            config: Run configuration
            pdf_reporter: PDF converter; built from config when omitted
            console: Console for progress messages
        """
        self.client = client
        self.config = config
        self.console = console or Console(stderr=True)
        self.json_reporter = JSONReporter(config)
        self.sarif_reporter = SARIFReporter(config)
        self.html_reporter = HTMLReporter(config)
        self.pdf_reporter = pdf_reporter or PDFReporter(config)

    async def collect(self, ref: RepositoryRef) -> tuple[SecurityFindingsDocument, Optional[str]]:
        """
        Fetch and aggregate the findings for a repository.

        Returns:
            The document and the raw SARIF body, if one was downloaded

        Raises:
            GitHubAPIError: If the repository itself cannot be accessed
        """
        await self.client.get_repository(ref)

        latest_sarif = await resolve_latest_sarif(self.client, ref)
        feeds = await fetch_all_feeds(self.client, ref)

        document = build_document(
            ref,
            feeds,
            sarif_reports=[latest_sarif.document] if latest_sarif else [],
            tool_version=self.config.tool_version,
        )
        return document, latest_sarif.body if latest_sarif else None

    async def render(
        self,
        document: SecurityFindingsDocument,
        sarif_body: Optional[str] = None,
    ) -> dict[str, Path]:
        """Write every artifact for a collected document."""
        files: dict[str, Path] = {}

        files["json"] = self.json_reporter.write(document)

        sarif_path = self.sarif_reporter.write_if_present(document, sarif_body)
        if sarif_path:
            files["sarif"] = sarif_path

        files["html"] = self.html_reporter.write(document)

        if self.config.pdf_enabled:
            # Converters are blocking subprocesses; keep them off the event loop
            loop = asyncio.get_running_loop()
            pdf = await loop.run_in_executor(None, self.pdf_reporter.write, files["html"])
            files["pdf" if pdf.is_pdf else "pdf_instructions"] = pdf.path

        return files

    async def run(self, ref: RepositoryRef) -> PipelineOutput:
        """Process one repository end to end."""
        self.console.print(f"[blue]ℹ Starting security analysis for {ref}[/blue]")

        document, sarif_body = await self.collect(ref)
        logger.info("Data collection completed for %s", ref)

        files = await self.render(document, sarif_body)
        summary = RepositorySummary.from_document(document)

        self.console.print(
            f"[green]✓ Report for {ref}:[/green] "
            f"{summary.critical} critical, {summary.high} high, {summary.medium} medium, "
            f"{summary.low} low, {summary.secrets} secrets"
        )
        for kind, path in files.items():
            self.console.print(f"   [dim]{kind}:[/dim] {path}")

        return PipelineOutput(document=document, summary=summary, files=files)
