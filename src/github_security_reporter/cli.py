"""
Command-line interface for the GitHub Security Reporter.

Usage:
    github-security-reporter <owner> <repo>
    github-security-reporter --list <owner/repo1> <owner/repo2> ...
    github-security-reporter --file <repos.txt>
"""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from . import TOOL_NAME, __version__
from .core.batch import parse_repository_file, parse_repository_list, run_reports
from .core.config import get_settings
from .core.models import BatchResult, InvalidRepositoryError, RepositoryRef
from .github.auth import resolve_token
from .github.client import AuthenticationError
from .utils.secure_logging import setup_secure_logging

EPILOG = """
Output, per repository under reports/<owner>-<repo>/: summary.html,
summary.pdf (or generate_pdf.md), data.json and latest.sarif.
With several repositories, reports/summary-report.html links them all.

Repository list files hold one owner/repo per line; blank lines and
lines starting with # are ignored.

Authentication comes from --token, GITHUB_TOKEN, GH_TOKEN or an
authenticated GitHub CLI ('gh auth login').
"""

app = typer.Typer(
    name="github-security-reporter",
    help="🔒 Generate security reports from GitHub code scanning, secret scanning and Dependabot alerts",
    epilog=EPILOG,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"{TOOL_NAME} v{__version__}")
        raise typer.Exit()


def _fail(message: str) -> None:
    err_console.print(f"[red]✗ {message}[/red]")
    raise typer.Exit(1)


def _resolve_repositories(
    targets: list[str],
    list_mode: bool,
    file: Optional[Path],
) -> tuple[str, list[RepositoryRef]]:
    """Turn the command line into a mode name and an ordered repository list."""
    if list_mode and file:
        _fail("Use either --list or --file, not both")

    if file:
        if targets:
            _fail("--file does not take repository arguments")
        return "file", parse_repository_file(file)

    if list_mode:
        return "list", parse_repository_list(targets)

    if len(targets) != 2:
        _fail(
            "Missing required arguments\n"
            "Usage: github-security-reporter <owner> <repo_name>\n"
            "   or: github-security-reporter --list <owner/repo1> <owner/repo2> ...\n"
            "   or: github-security-reporter --file <repos.txt>"
        )
    owner, name = targets
    return "single", [RepositoryRef(owner=owner, name=name)]


def _print_summary(result: BatchResult, output_dir: Path) -> None:
    lines = [
        f"[bold]Total repositories:[/bold] {len(result.requested)}",
        f"[bold]Successfully processed:[/bold] {len(result.summaries)}",
        f"[bold]Failed:[/bold] {len(result.failed)}",
        f"[bold]Output directory:[/bold] {output_dir}",
    ]
    if result.summary_report:
        lines.append(f"[bold]Summary report:[/bold] {result.summary_report}")

    console.print()
    console.print(Panel.fit("\n".join(lines), title=f"📊 {TOOL_NAME} completed"))

    if result.failed:
        console.print("\n[red]❌ Failed repositories:[/red]")
        for name in result.failed:
            console.print(f"   - {name}")


@app.command()
def main(
    targets: Annotated[
        Optional[list[str]],
        typer.Argument(help="<owner> <repo>, or owner/repo tokens with --list", show_default=False),
    ] = None,
    list_mode: Annotated[
        bool,
        typer.Option("--list", help="Treat arguments as owner/repo tokens"),
    ] = False,
    file: Annotated[
        Optional[Path],
        typer.Option("--file", help="Read owner/repo lines from a file"),
    ] = None,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-d", help="Output directory (default: $OUTPUT_DIR or ./reports)"),
    ] = None,
    parallel: Annotated[
        Optional[int],
        typer.Option("--parallel", "-p", min=1, max=32, help="Repositories processed concurrently"),
    ] = None,
    token: Annotated[
        Optional[str],
        typer.Option("--token", "-t", help="GitHub token (overrides GITHUB_TOKEN and gh)"),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to config file"),
    ] = None,
    no_pdf: Annotated[
        bool,
        typer.Option("--no-pdf", help="Skip PDF generation"),
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version"),
    ] = None,
) -> None:
    """
    Generate security reports for one or more GitHub repositories.

    Example:
        github-security-reporter microsoft vscode
    """
    try:
        mode, refs = _resolve_repositories(targets or [], list_mode, file)
    except (InvalidRepositoryError, FileNotFoundError) as e:
        _fail(str(e))

    if not refs:
        _fail("No repositories specified")

    settings = get_settings(str(config) if config else None).model_copy(deep=True)
    if output_dir:
        settings.output.directory = str(output_dir)
    if parallel:
        settings.batch.max_parallel = parallel
    if no_pdf:
        settings.output.pdf_enabled = False
    if token:
        settings.github.token = token

    setup_secure_logging(settings.logging)

    try:
        github_token = resolve_token(settings.github)
    except AuthenticationError as e:
        _fail(str(e))

    console.print(Panel.fit(
        f"[bold]Mode:[/bold] {mode}\n"
        f"[bold]Repositories:[/bold] {len(refs)}\n"
        f"[bold]Parallel:[/bold] {settings.batch.max_parallel}\n"
        f"[bold]Output Directory:[/bold] {settings.output.directory}",
        title=f"🔧 {TOOL_NAME} v{__version__}",
    ))

    try:
        result = asyncio.run(run_reports(refs, settings, github_token, console=err_console))
    except AuthenticationError as e:
        _fail(str(e))

    _print_summary(result, Path(settings.output.directory))

    if not result.succeeded:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
