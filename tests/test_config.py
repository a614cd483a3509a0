"""Tests for settings loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from github_security_reporter import __version__
from github_security_reporter.core.config import LoggingSettings, Settings


@pytest.fixture(autouse=True)
def clean_environment(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("GITHUB_TOKEN", "OUTPUT_DIR", "BATCH_MAX_PARALLEL", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings()

    assert settings.github.api_url == "https://api.github.com"
    assert settings.output.directory == "./reports"
    assert settings.output.pdf_enabled is True
    assert settings.batch.max_parallel == 1


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("OUTPUT_DIR", "/srv/reports")
    monkeypatch.setenv("BATCH_MAX_PARALLEL", "4")
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_fromenv")

    settings = Settings()

    assert settings.output.directory == "/srv/reports"
    assert settings.batch.max_parallel == 4
    assert settings.github.token == "ghp_fromenv"


def test_yaml_with_environment_references(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("REPORTER_TOKEN", "ghp_fromyaml")
    path = tmp_path / "config.yaml"
    path.write_text(
        "github:\n"
        "  token: ${REPORTER_TOKEN}\n"
        "  timeout: 10\n"
        "output:\n"
        "  directory: ./security\n"
        "  pdf_enabled: false\n"
        "logging:\n"
        "  level: debug\n"
    )

    settings = Settings.from_yaml(path)

    assert settings.github.token == "ghp_fromyaml"
    assert settings.github.timeout == 10
    assert settings.output.directory == "./security"
    assert settings.output.pdf_enabled is False
    assert settings.logging.level == "DEBUG"


def test_missing_yaml_gives_defaults(tmp_path: Path):
    assert Settings.from_yaml(tmp_path / "absent.yaml").output.directory == "./reports"


def test_invalid_log_level():
    with pytest.raises(ValidationError):
        LoggingSettings(level="chatty")


def test_run_config():
    settings = Settings()
    settings.output.directory = "out"
    settings.batch.max_parallel = 2

    config = settings.run_config()

    assert config.output_dir == Path("out")
    assert config.max_parallel == 2
    assert config.tool_version == __version__
    assert config.repository_dir("octo-org-octo-repo") == Path("out/octo-org-octo-repo")
