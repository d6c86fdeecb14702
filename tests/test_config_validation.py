"""Tests for configuration validation with Pydantic."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from retryfetch.domain.config import (
    AppConfig,
    HttpConfig,
    RetryConfig,
    normalize_retry_options,
    resolve_retry_config,
)
from retryfetch.infrastructure.config.config_manager import ConfigManager, ConfigurationError


class TestRetryConfigValidation:
    """Tests for RetryConfig validation."""

    def test_defaults(self):
        """Test defaults: fail after first error, constant 200 ms backoff"""
        config = RetryConfig()
        assert config.max_retries == 0
        assert config.initial_backoff == 200
        assert config.backoff_factor == 1.0
        assert config.on_retry is None
        assert config.retryable_statuses is None

    def test_negative_max_retries(self):
        with pytest.raises(ValidationError, match="max_retries"):
            RetryConfig(max_retries=-1)

    def test_negative_initial_backoff(self):
        with pytest.raises(ValidationError, match="initial_backoff"):
            RetryConfig(initial_backoff=-5)

    def test_negative_backoff_factor(self):
        with pytest.raises(ValidationError, match="backoff_factor"):
            RetryConfig(backoff_factor=-1)

    def test_shrinking_factor_allowed(self):
        assert RetryConfig(backoff_factor=0.5).backoff_factor == 0.5

    def test_unknown_field(self):
        with pytest.raises(ValidationError):
            RetryConfig(jitter=0.1)

    def test_frozen(self):
        config = RetryConfig()
        with pytest.raises(ValidationError):
            config.max_retries = 3

    def test_aliases(self):
        hook = lambda remaining, backoff: None  # noqa: E731
        config = RetryConfig.model_validate(
            {"maxRetries": 2, "initialBackoff": 50, "backoffFactor": 1.5, "onRetry": hook}
        )
        assert config.max_retries == 2
        assert config.initial_backoff == 50
        assert config.backoff_factor == 1.5
        assert config.on_retry is hook

    def test_hook_not_dumped(self):
        config = RetryConfig(on_retry=lambda remaining, backoff: None)
        assert "on_retry" not in config.model_dump()


class TestResolveRetryConfig:
    def test_none_gives_defaults(self):
        assert resolve_retry_config(None) == RetryConfig()

    def test_partial_overrides_keep_other_defaults(self):
        config = resolve_retry_config({"max_retries": 4})
        assert config.max_retries == 4
        assert config.initial_backoff == 200
        assert config.backoff_factor == 1.0

    def test_overrides_merge_over_custom_defaults(self):
        defaults = RetryConfig(max_retries=3, initial_backoff=500, backoff_factor=2)
        config = resolve_retry_config({"backoff": 100}, defaults=defaults)
        assert config.max_retries == 3
        assert config.initial_backoff == 100
        assert config.backoff_factor == 2.0

    def test_complete_config_used_as_is(self):
        config = RetryConfig(max_retries=1)
        assert resolve_retry_config(config, defaults=RetryConfig(max_retries=9)) is config


class TestHttpConfigValidation:
    def test_defaults(self):
        config = HttpConfig()
        assert config.timeout == 30.0
        assert config.headers == {}

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError, match="timeout"):
            HttpConfig(timeout=0)


class TestAppConfig:
    def test_unknown_section(self):
        with pytest.raises(ValidationError):
            AppConfig(cache={"enabled": True})


class TestConfigManager:
    """Tests for ConfigManager loading."""

    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        for name in ConfigManager.ENV_OVERRIDES:
            monkeypatch.delenv(name, raising=False)

    def _write(self, tmp_path: Path, data) -> Path:
        path = tmp_path / ".retryfetch.yml"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    def test_defaults_without_file(self, tmp_path):
        manager = ConfigManager(tmp_path / "missing.yml")
        assert manager.get_retry_config() == RetryConfig()
        assert manager.get_http_config().timeout == 30.0

    def test_load_from_file(self, tmp_path):
        path = self._write(
            tmp_path,
            {
                "retry": {"max_retries": 3, "backoff_factor": 2, "retryable_statuses": [502, 503]},
                "http": {"headers": {"Accept": "application/json"}},
            },
        )
        manager = ConfigManager(str(path))
        retry = manager.get_retry_config()
        assert retry.max_retries == 3
        assert retry.initial_backoff == 200
        assert retry.backoff_factor == 2.0
        assert retry.retryable_statuses == frozenset({502, 503})
        assert manager.get_http_config().headers == {"Accept": "application/json"}

    def test_find_config_in_parent(self, tmp_path, monkeypatch):
        self._write(tmp_path, {"retry": {"max_retries": 5}})
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        manager = ConfigManager()

        assert manager.config_path.resolve() == (tmp_path / ".retryfetch.yml").resolve()
        assert manager.get_retry_config().max_retries == 5

    def test_invalid_value_in_file(self, tmp_path):
        path = self._write(tmp_path, {"retry": {"max_retries": -2}})
        with pytest.raises(ConfigurationError, match="retry.max_retries"):
            ConfigManager(path)

    def test_unknown_key_in_file(self, tmp_path):
        path = self._write(tmp_path, {"retry": {"max_attempts": 3}})
        with pytest.raises(ConfigurationError):
            ConfigManager(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / ".retryfetch.yml"
        path.write_text("retry: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Failed to read"):
            ConfigManager(path)

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / ".retryfetch.yml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigManager(path)

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = self._write(tmp_path, {"retry": {"max_retries": 1}})
        monkeypatch.setenv("RETRYFETCH_MAX_RETRIES", "4")
        monkeypatch.setenv("RETRYFETCH_INITIAL_BACKOFF", "50")
        monkeypatch.setenv("RETRYFETCH_BACKOFF_FACTOR", "1.5")
        monkeypatch.setenv("RETRYFETCH_TIMEOUT", "2.5")

        manager = ConfigManager(path)

        assert manager.get_retry_config().max_retries == 4
        assert manager.get_retry_config().initial_backoff == 50
        assert manager.get_retry_config().backoff_factor == 1.5
        assert manager.get_http_config().timeout == 2.5

    def test_invalid_env_value(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RETRYFETCH_MAX_RETRIES", "many")
        with pytest.raises(ConfigurationError, match="RETRYFETCH_MAX_RETRIES"):
            ConfigManager(tmp_path / "missing.yml")

    def test_get_dot_notation(self, tmp_path):
        manager = ConfigManager(self._write(tmp_path, {"retry": {"max_retries": 2}}))
        assert manager.get("retry.max_retries") == 2
        assert manager.get("http.timeout") == 30.0
        assert manager.get("retry.missing", "fallback") == "fallback"

    def test_camel_case_keys_in_file(self, tmp_path):
        path = self._write(
            tmp_path,
            {"retry": {"maxRetries": 3, "initialBackoff": 100, "backoffFactor": 2, "retryableStatuses": [503]}},
        )
        retry = ConfigManager(path).get_retry_config()
        assert retry.max_retries == 3
        assert retry.initial_backoff == 100
        assert retry.backoff_factor == 2.0
        assert retry.retryable_statuses == frozenset({503})

    def test_legacy_keys_in_file(self, tmp_path):
        path = self._write(tmp_path, {"retry": {"retries": 4, "backoff": 50}})
        retry = ConfigManager(path).get_retry_config()
        assert retry.max_retries == 4
        assert retry.initial_backoff == 50
        assert retry.backoff_factor == 1.0

    def test_empty_section_keeps_defaults(self, tmp_path, monkeypatch):
        path = tmp_path / ".retryfetch.yml"
        path.write_text("retry:\nhttp:\n", encoding="utf-8")
        monkeypatch.setenv("RETRYFETCH_MAX_RETRIES", "2")
        monkeypatch.setenv("RETRYFETCH_TIMEOUT", "9")

        manager = ConfigManager(path)

        assert manager.get_retry_config().max_retries == 2
        assert manager.get_retry_config().initial_backoff == 200
        assert manager.get_http_config().timeout == 9.0

    def test_non_mapping_section(self, tmp_path, monkeypatch):
        path = self._write(tmp_path, {"http": 5})
        monkeypatch.setenv("RETRYFETCH_TIMEOUT", "9")
        with pytest.raises(ConfigurationError, match="'http' section"):
            ConfigManager(path)


class TestNormalizeRetryOptions:
    def test_aliases_renamed(self):
        assert normalize_retry_options({"maxRetries": 1, "backoff": 10, "callback": None}) == {
            "max_retries": 1,
            "initial_backoff": 10,
            "on_retry": None,
        }

    def test_unknown_keys_kept(self):
        assert normalize_retry_options({"jitter": 0.1}) == {"jitter": 0.1}
