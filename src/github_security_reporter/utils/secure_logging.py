"""
Secure logging utilities.

Provides a logging filter and formatter that mask GitHub credentials in
log output. API error messages and subprocess stderr are logged verbatim,
so tokens must never reach a handler unmasked.
"""

import logging
import re
from typing import Any, Optional

from ..core.config import LoggingSettings


SENSITIVE_PATTERNS = [
    # GitHub tokens
    (r'(gh[pousr]_)[A-Za-z0-9]{20,}', r'\1****'),
    (r'(github_pat_)[A-Za-z0-9_]+', r'\1****'),

    # Bearer / token authorization headers
    (r'(Bearer\s+)[A-Za-z0-9_\-\.]+', r'\1****'),
    (r'(Authorization["\']?\s*:\s*["\']?)[^"\'\s]+(\s+[^"\'\s]+)?', r'\1****'),

    # token=..., "token": "..."
    (r'(token["\']?\s*[:=]\s*["\']?)[A-Za-z0-9_\-\.]{8,}', r'\1****'),

    # Credentials embedded in URLs
    (r'(://[^:/\s]+:)[^@\s]+(@)', r'\1****\2'),
]

COMPILED_PATTERNS = [(re.compile(pattern, re.IGNORECASE), repl) for pattern, repl in SENSITIVE_PATTERNS]


def mask_sensitive_string(text: str) -> str:
    """
    Mask sensitive data in a string.

    Args:
        text: Text to sanitize

    Returns:
        Text with credentials masked
    """
    if not text:
        return text

    result = text
    for pattern, replacement in COMPILED_PATTERNS:
        result = pattern.sub(replacement, result)

    return result


def _mask_arg(arg: Any) -> Any:
    if isinstance(arg, str):
        return mask_sensitive_string(arg)
    if isinstance(arg, Exception):
        return mask_sensitive_string(str(arg))
    return arg


class SensitiveDataFilter(logging.Filter):
    """Logging filter that masks credentials in messages and arguments."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = mask_sensitive_string(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: _mask_arg(v) for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(_mask_arg(arg) for arg in record.args)

        return True


class SecureFormatter(logging.Formatter):
    """Formatter that masks credentials in the fully formatted record."""

    def format(self, record: logging.LogRecord) -> str:
        return mask_sensitive_string(super().format(record))


def setup_secure_logging(
    settings: Optional[LoggingSettings] = None,
    format_string: str | None = None,
) -> logging.Logger:
    """
    Set up secure logging for the application.

    Args:
        settings: Logging configuration (level and optional file)
        format_string: Custom format string

    Returns:
        Configured package logger
    """
    settings = settings or LoggingSettings()
    level = getattr(logging, settings.level, logging.INFO)

    logger = logging.getLogger("github_security_reporter")
    logger.setLevel(level)

    # Repeated CLI invocations in one process must not stack handlers
    for handler in list(logger.handlers):
        if isinstance(handler.formatter, SecureFormatter):
            logger.removeHandler(handler)
            handler.close()

    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = SecureFormatter(format_string)
    sensitive_filter = SensitiveDataFilter()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(sensitive_filter)
    logger.addHandler(console_handler)

    if settings.file:
        file_handler = logging.FileHandler(settings.file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(sensitive_filter)
        logger.addHandler(file_handler)

    return logger
