"""Configuration models with Pydantic validation."""

from retryfetch.domain.config.app import AppConfig
from retryfetch.domain.config.http import HttpConfig
from retryfetch.domain.config.retry import RetryConfig, normalize_retry_options, resolve_retry_config

__all__ = [
    "AppConfig",
    "HttpConfig",
    "RetryConfig",
    "normalize_retry_options",
    "resolve_retry_config",
]
