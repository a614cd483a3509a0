"""
PDF conversion of the HTML dashboard.

Conversion is delegated to external tools. Backends are tried in a fixed
order, each at most once, and the first one that produces a PDF wins:

1. wkhtmltopdf
2. Headless Google Chrome / Chromium (--print-to-pdf)
3. Node.js with Puppeteer

A backend whose tool is missing raises PDFBackendUnavailable; a backend
that runs but fails is logged and the next one is tried. When no backend
succeeds, a markdown file with manual conversion steps is written instead.
"""

import logging
import shutil
import subprocess
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from ..core.config import RunConfig

logger = logging.getLogger(__name__)

PDF_FILENAME = "summary.pdf"
FALLBACK_FILENAME = "generate_pdf.md"


class PDFBackendUnavailable(Exception):
    """Raised when a backend's tool is not installed or usable."""


class PDFBackendError(Exception):
    """Raised when an available backend fails to produce a PDF."""


@dataclass(frozen=True)
class PDFResult:
    """Outcome of a conversion attempt."""

    path: Path
    backend: Optional[str]

    @property
    def is_pdf(self) -> bool:
        return self.backend is not None


class PDFBackend(ABC):
    """A single HTML-to-PDF conversion strategy."""

    name: str = "backend"

    def __init__(self, timeout: int = 120):
        self.timeout = timeout

    @abstractmethod
    def convert(self, html_path: Path, pdf_path: Path) -> None:
        """
        Convert html_path to pdf_path.

        Raises:
            PDFBackendUnavailable: If the tool is not available
            PDFBackendError: If the tool ran but did not produce a PDF
        """

    def _run(self, command: list[str], cwd: Optional[Path] = None) -> None:
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise PDFBackendUnavailable(str(e)) from e
        except subprocess.TimeoutExpired as e:
            raise PDFBackendError(f"{self.name} timed out after {self.timeout}s") from e

        if result.returncode != 0:
            raise PDFBackendError(
                f"{self.name} exited with status {result.returncode}: {result.stderr.strip()[:500]}"
            )

    @staticmethod
    def _require(*executables: str) -> str:
        for executable in executables:
            path = shutil.which(executable)
            if path:
                return path
        raise PDFBackendUnavailable(f"none of {', '.join(executables)} found on PATH")


class WkhtmltopdfBackend(PDFBackend):
    """Dedicated HTML-to-PDF converter binary."""

    name = "wkhtmltopdf"

    def convert(self, html_path: Path, pdf_path: Path) -> None:
        binary = self._require("wkhtmltopdf")
        self._run([
            binary,
            "--page-size", "A4",
            "--margin-top", "0.75in",
            "--margin-right", "0.75in",
            "--margin-bottom", "0.75in",
            "--margin-left", "0.75in",
            "--disable-smart-shrinking",
            "--print-media-type",
            str(html_path),
            str(pdf_path),
        ])


class ChromeBackend(PDFBackend):
    """Headless Chrome or Chromium print-to-PDF."""

    name = "chrome"
    executables = ("google-chrome", "chromium", "chromium-browser")

    def convert(self, html_path: Path, pdf_path: Path) -> None:
        binary = self._require(*self.executables)
        self._run([
            binary,
            "--headless",
            "--disable-gpu",
            "--no-sandbox",
            f"--print-to-pdf={pdf_path.resolve()}",
            "--virtual-time-budget=5000",
            html_path.resolve().as_uri(),
        ])


PUPPETEER_SCRIPT = """\
const puppeteer = require('puppeteer');
const fs = require('fs');

(async () => {
  const [htmlFile, pdfFile] = process.argv.slice(2);
  const browser = await puppeteer.launch({
    headless: true,
    args: ['--no-sandbox', '--disable-setuid-sandbox']
  });
  try {
    const page = await browser.newPage();
    await page.setContent(fs.readFileSync(htmlFile, 'utf-8'), { waitUntil: 'networkidle0' });
    await page.pdf({
      path: pdfFile,
      format: 'A4',
      margin: { top: '20mm', right: '20mm', bottom: '20mm', left: '20mm' },
      printBackground: true
    });
  } finally {
    await browser.close();
  }
})().catch((error) => {
  console.error('Error generating PDF:', error.message);
  process.exit(1);
});
"""


class PuppeteerBackend(PDFBackend):
    """Scripted browser automation through Node.js and Puppeteer."""

    name = "puppeteer"

    def convert(self, html_path: Path, pdf_path: Path) -> None:
        node = self._require("node")
        try:
            check = subprocess.run(
                [node, "-e", "require('puppeteer')"],
                capture_output=True,
                timeout=30,
            )
        except subprocess.TimeoutExpired as e:
            raise PDFBackendUnavailable("timed out loading puppeteer") from e
        if check.returncode != 0:
            raise PDFBackendUnavailable("puppeteer is not installed (npm install puppeteer)")

        with tempfile.TemporaryDirectory() as tmp:
            script = Path(tmp) / "html2pdf.js"
            script.write_text(PUPPETEER_SCRIPT, encoding="utf-8")
            self._run([node, str(script), str(html_path.resolve()), str(pdf_path.resolve())])


def default_backends(timeout: int = 120) -> list[PDFBackend]:
    """Backends in priority order."""
    return [
        WkhtmltopdfBackend(timeout),
        ChromeBackend(timeout),
        PuppeteerBackend(timeout),
    ]


FALLBACK_INSTRUCTIONS = """\
# PDF Generation Instructions

No PDF converter was available when this report was generated. To create
summary.pdf from summary.html, use one of these methods:

## Option 1: Install wkhtmltopdf
```bash
# On macOS:
brew install wkhtmltopdf

# On Ubuntu/Debian:
sudo apt-get install wkhtmltopdf

# Then run:
wkhtmltopdf summary.html summary.pdf
```

## Option 2: Use Chrome/Chromium
```bash
# Using Google Chrome:
google-chrome --headless --disable-gpu --print-to-pdf=summary.pdf file://$(pwd)/summary.html

# Using Chromium:
chromium --headless --disable-gpu --print-to-pdf=summary.pdf file://$(pwd)/summary.html
```

## Option 3: Use Node.js with Puppeteer
```bash
npm install puppeteer
# Then re-run github-security-reporter
```

## Option 4: Print from Browser
1. Open summary.html in your web browser
2. Press Ctrl+P (or Cmd+P on Mac)
3. Select "Save as PDF" as the destination
4. Adjust settings as needed and save
"""


class PDFReporter:
    """
    Converts an already written summary.html into summary.pdf.

    Never fails the run: the worst outcome is the fallback instructions file.
    """

    format_name = "pdf"

    def __init__(self, config: RunConfig, backends: Optional[Sequence[PDFBackend]] = None):
        self.config = config
        self.backends = list(backends) if backends is not None else default_backends(config.pdf_timeout)

    def write(self, html_path: Path) -> PDFResult:
        """
        Convert html_path, writing the PDF (or instructions) next to it.

        Returns:
            PDFResult naming the written file and the backend used, if any
        """
        pdf_path = html_path.with_name(PDF_FILENAME)

        for backend in self.backends:
            try:
                backend.convert(html_path, pdf_path)
            except PDFBackendUnavailable as e:
                logger.debug("PDF backend %s unavailable: %s", backend.name, e)
                continue
            except PDFBackendError as e:
                logger.warning("PDF generation with %s failed: %s", backend.name, e)
                continue

            if pdf_path.exists() and pdf_path.stat().st_size > 0:
                logger.info("PDF generated with %s", backend.name)
                return PDFResult(path=pdf_path, backend=backend.name)

            logger.warning("PDF backend %s reported success but wrote no file", backend.name)

        fallback_path = html_path.with_name(FALLBACK_FILENAME)
        fallback_path.write_text(FALLBACK_INSTRUCTIONS, encoding="utf-8")
        logger.info("PDF generation tools not found. See %s for instructions.", fallback_path)
        return PDFResult(path=fallback_path, backend=None)
