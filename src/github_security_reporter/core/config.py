"""
Configuration management for the GitHub Security Reporter.

Uses Pydantic Settings for validation and environment variable support.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .. import __version__


class GitHubSettings(BaseSettings):
    """GitHub API configuration."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str = Field(default="", description="GitHub token (falls back to the gh credential store)")
    api_url: str = Field(default="https://api.github.com", description="GitHub API URL")
    hostname: str = Field(default="github.com", description="Host used when asking gh for a token")
    timeout: int = Field(default=30, ge=1, description="Timeout per API call in seconds")
    per_page: int = Field(default=100, ge=1, le=100, description="Alerts requested per feed")


class OutputSettings(BaseSettings):
    """Output configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    directory: str = Field(
        default="./reports",
        validation_alias=AliasChoices("OUTPUT_DIR", "directory"),
        description="Base output directory",
    )
    pdf_enabled: bool = Field(default=True, description="Attempt PDF conversion of the HTML report")
    pdf_timeout: int = Field(default=120, ge=1, description="Timeout per PDF backend in seconds")


class BatchSettings(BaseSettings):
    """Multi-repository configuration."""

    model_config = SettingsConfigDict(env_prefix="BATCH_", extra="ignore")

    max_parallel: int = Field(default=1, ge=1, le=32, description="Repositories processed concurrently")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    file: Optional[str] = Field(default=None, description="Log file path")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid:
            raise ValueError(f"level must be one of {valid}")
        return v.upper()


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration.

    Settings are loaded from:
    1. Environment variables (highest priority)
    2. .env file
    3. config.yaml file
    4. Default values (lowest priority)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    github: GitHubSettings = Field(default_factory=GitHubSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        data = cls._process_env_vars(data)

        return cls(**data)

    @classmethod
    def _process_env_vars(cls, data: Any) -> Any:
        """Recursively process environment variable references in config."""
        if isinstance(data, dict):
            return {k: cls._process_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [cls._process_env_vars(item) for item in data]
        elif isinstance(data, str):
            # Handle ${ENV_VAR} syntax
            if data.startswith("${") and data.endswith("}"):
                env_var = data[2:-1]
                return os.environ.get(env_var, "")
            return data
        return data

    def run_config(self) -> "RunConfig":
        """Freeze the settings that drive a single run."""
        return RunConfig(
            output_dir=Path(self.output.directory),
            tool_version=__version__,
            pdf_enabled=self.output.pdf_enabled,
            pdf_timeout=self.output.pdf_timeout,
            max_parallel=self.batch.max_parallel,
        )


@dataclass(frozen=True)
class RunConfig:
    """Immutable configuration passed explicitly to every pipeline component."""

    output_dir: Path
    tool_version: str = __version__
    pdf_enabled: bool = True
    pdf_timeout: int = 120
    max_parallel: int = 1

    def repository_dir(self, slug: str) -> Path:
        """Output directory for a single repository."""
        return self.output_dir / slug


@lru_cache
def get_settings(config_path: Optional[str] = None) -> Settings:
    """
    Get cached settings instance.

    Args:
        config_path: Optional path to config.yaml file

    Returns:
        Settings instance
    """
    if config_path:
        return Settings.from_yaml(config_path)

    possible_configs = [
        Path.cwd() / "config.yaml",
        Path.cwd() / ".github-security-reporter.yaml",
        Path.home() / ".config" / "github-security-reporter" / "config.yaml",
    ]

    for config in possible_configs:
        if config.exists():
            return Settings.from_yaml(config)

    return Settings()
