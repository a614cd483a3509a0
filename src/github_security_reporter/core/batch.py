"""
Multi-repository batch processing.

Each repository runs through its own pipeline and writes to its own
output directory, so repositories are independent tasks. They run under a
semaphore bounded by RunConfig.max_parallel (1 means strictly one after
another) and results are joined back in input order.
"""

import asyncio
import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

import httpx
from rich.console import Console

from ..github.client import GitHubClient
from ..reporters import PDFReporter, SummaryReporter
from .config import RunConfig, Settings
from .models import BatchResult, InvalidRepositoryError, RepositoryRef, RepositorySummary
from .pipeline import RepositoryPipeline

logger = logging.getLogger(__name__)


def parse_repository_list(tokens: Iterable[str]) -> list[RepositoryRef]:
    """
    Parse explicit owner/repo tokens.

    Raises:
        InvalidRepositoryError: On the first malformed token
    """
    return [RepositoryRef.parse(token) for token in tokens]


def parse_repository_file(path: Path) -> list[RepositoryRef]:
    """
    Read repositories from a newline-delimited file.

    Blank lines and lines starting with '#' are ignored. Malformed lines are
    skipped with a warning rather than aborting the whole run.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Repository file not found: {path}")

    refs: list[RepositoryRef] = []
    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            entry = line.strip()
            if not entry or entry.startswith("#"):
                continue
            try:
                refs.append(RepositoryRef.parse(entry))
            except InvalidRepositoryError as e:
                logger.warning("%s:%d: %s Skipping.", path, line_number, e)
    return refs


class BatchCoordinator:
    """
    Runs the repository pipeline over a list of repositories.

    One repository failing never stops the others; it is recorded in the
    result's failed list instead. Output directories are named by slug, so
    a later entry whose slug is already taken (a duplicate, or e.g.
    'a-b/c' after 'a/b-c') is recorded as failed without being processed.
    """

    def __init__(
        self,
        pipeline: RepositoryPipeline,
        config: RunConfig,
        summary_reporter: Optional[SummaryReporter] = None,
        console: Optional[Console] = None,
    ):
        self.pipeline = pipeline
        self.config = config
        self.summary_reporter = summary_reporter or SummaryReporter(config)
        self.console = console or Console(stderr=True)

    async def _process(self, ref: RepositoryRef, semaphore: asyncio.Semaphore) -> Optional[RepositorySummary]:
        async with semaphore:
            try:
                output = await self.pipeline.run(ref)
            except Exception as e:
                logger.error("Failed to process %s: %s", ref, e)
                self.console.print(f"[red]✗ Failed to process: {ref} ({e})[/red]")
                return None
            self.console.print(f"[green]✓ Completed: {ref}[/green]")
            return output.summary

    async def _reject_collision(self, ref: RepositoryRef, owner: RepositoryRef) -> None:
        logger.error("Output directory %s of %s is already used by %s", ref.slug, ref, owner)
        self.console.print(f"[red]✗ Skipped: {ref} (output directory {ref.slug} already used by {owner})[/red]")
        return None

    def _schedule(self, refs: Sequence[RepositoryRef], semaphore: asyncio.Semaphore) -> list:
        """One coroutine per input entry; later entries sharing a slug are rejected."""
        first_by_slug: dict[str, RepositoryRef] = {}
        coroutines = []
        for ref in refs:
            if ref.slug in first_by_slug:
                coroutines.append(self._reject_collision(ref, first_by_slug[ref.slug]))
            else:
                first_by_slug[ref.slug] = ref
                coroutines.append(self._process(ref, semaphore))
        return coroutines

    async def run(self, refs: Sequence[RepositoryRef]) -> BatchResult:
        """
        Process every repository and, for more than one, write the summary page.

        Returns:
            BatchResult with summaries and failures in input order
        """
        self.config.output_dir.mkdir(parents=True, exist_ok=True)
        semaphore = asyncio.Semaphore(self.config.max_parallel)

        outcomes = await asyncio.gather(*self._schedule(refs, semaphore))

        result = BatchResult(requested=[ref.full_name for ref in refs])
        for ref, summary in zip(refs, outcomes):
            if summary is None:
                result.failed.append(ref.full_name)
            else:
                result.summaries.append(summary)

        if len(refs) > 1:
            result.summary_report = self.summary_reporter.write(result.summaries, result.failed)
            logger.info("Summary report generated: %s", result.summary_report)

        return result


async def run_reports(
    refs: Sequence[RepositoryRef],
    settings: Settings,
    token: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    pdf_reporter: Optional[PDFReporter] = None,
    console: Optional[Console] = None,
) -> BatchResult:
    """
    Authenticate once, then process every repository.

    Raises:
        AuthenticationError: If GitHub rejects the credential
    """
    config = settings.run_config()
    github_settings = settings.github.model_copy(update={"token": token})

    async with GitHubClient(github_settings, transport=transport) as client:
        login = await client.verify_authentication()
        logger.info("Authenticated with GitHub%s", f" as {login}" if login else "")

        pipeline = RepositoryPipeline(client, config, pdf_reporter=pdf_reporter, console=console)
        coordinator = BatchCoordinator(pipeline, config, console=console)
        return await coordinator.run(refs)
