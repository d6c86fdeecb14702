"""Configuration manager for loading and validating .retryfetch.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from retryfetch.domain.config import AppConfig, HttpConfig, RetryConfig, normalize_retry_options

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".retryfetch.yml"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


class ConfigManager:
    """Manages configuration from .retryfetch.yml and environment variables

    Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .retryfetch.yml file (searched from current directory upwards)
    3. Environment variables (RETRYFETCH_*)
    4. Per-call overrides (handled by the caller)
    """

    DEFAULT_CONFIG = {
        "retry": {
            "max_retries": 0,
            "initial_backoff": 200,
            "backoff_factor": 1.0,
            "retryable_statuses": None,
        },
        "http": {
            "timeout": 30.0,
            "headers": {},
        },
    }

    # env var -> (section, key, converter)
    ENV_OVERRIDES: Dict[str, tuple] = {
        "RETRYFETCH_MAX_RETRIES": ("retry", "max_retries", int),
        "RETRYFETCH_INITIAL_BACKOFF": ("retry", "initial_backoff", int),
        "RETRYFETCH_BACKOFF_FACTOR": ("retry", "backoff_factor", float),
        "RETRYFETCH_TIMEOUT": ("http", "timeout", float),
    }

    def __init__(self, config_path: Optional[Union[Path, str]] = None):
        """Initialize config manager

        Args:
            config_path: Path to .retryfetch.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                errors.append(f"  - {field}: {error['msg']}")
            raise ConfigurationError("Configuration validation failed:\n" + "\n".join(errors)) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .retryfetch.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> AppConfig:
        """Load configuration from file and environment, then validate

        Raises:
            ValidationError: If configuration is invalid
            ConfigurationError: If the file cannot be parsed
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to read {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"{self.config_path} must contain a mapping at top level")
            file_config = self._normalize_sections(file_config)
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)
        return AppConfig(**config_dict)

    def _normalize_sections(self, file_config: Dict[str, Any]) -> Dict[str, Any]:
        """Check section shapes and map retry option aliases to field names

        An empty section (`retry:` with nothing under it) keeps the defaults.

        Raises:
            ConfigurationError: If a known section is not a mapping
        """
        result = dict(file_config)
        for section in self.DEFAULT_CONFIG:
            if section not in result:
                continue
            if result[section] is None:
                del result[section]
            elif not isinstance(result[section], dict):
                raise ConfigurationError(f"'{section}' section in {self.config_path} must be a mapping")
        if "retry" in result:
            result["retry"] = normalize_retry_options(result["retry"])
        return result

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries"""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply RETRYFETCH_* environment variable overrides

        Raises:
            ConfigurationError: If a variable cannot be converted
        """
        for env_name, (section, key, convert) in self.ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if not raw:
                continue
            config[section][key] = self._convert_env(env_name, raw, convert)
        return config

    @staticmethod
    def _convert_env(env_name: str, raw: str, convert: Callable[[str], Any]) -> Any:
        try:
            return convert(raw)
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for {env_name}: {raw!r}") from e

    def get_retry_config(self) -> RetryConfig:
        """Get default retry configuration"""
        return self.config.retry

    def get_http_config(self) -> HttpConfig:
        """Get HTTP transport configuration"""
        return self.config.http

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)

        Args:
            key: Configuration key (e.g., "retry.max_retries" or "http")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.config.model_dump()
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
