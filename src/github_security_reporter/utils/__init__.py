"""Utility modules for the GitHub Security Reporter."""

from .secure_logging import SecureFormatter, SensitiveDataFilter, mask_sensitive_string, setup_secure_logging

__all__ = ["SecureFormatter", "SensitiveDataFilter", "mask_sensitive_string", "setup_secure_logging"]
