"""Tests for core.settings module.

Covers:
- DevspineSettings defaults
- DEVSPINE_* environment variable override
- Field validation
- get_settings caching
"""

import pytest
from pydantic import ValidationError

from devspine.core.errors import ConfigError
from devspine.core.settings import DevspineSettings, get_settings


class TestDefaults:
    def test_defaults(self):
        s = DevspineSettings()
        assert s.docker_binary == "docker"
        assert s.command_timeout_seconds == 60
        assert s.stop_timeout_seconds == 10
        assert s.max_concurrency is None
        assert s.log_level == "WARNING"
        assert s.json_logs is None


class TestEnvOverride:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("DEVSPINE_DOCKER_BINARY", "podman")
        monkeypatch.setenv("DEVSPINE_STOP_TIMEOUT_SECONDS", "3")
        monkeypatch.setenv("DEVSPINE_MAX_CONCURRENCY", "4")
        monkeypatch.setenv("DEVSPINE_JSON_LOGS", "true")
        s = DevspineSettings()
        assert s.docker_binary == "podman"
        assert s.stop_timeout_seconds == 3
        assert s.max_concurrency == 4
        assert s.json_logs is True

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("DEVSPINE_LOG_LEVEL", "debug")
        assert DevspineSettings().log_level == "DEBUG"


class TestValidation:
    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            DevspineSettings(log_level="chatty")

    def test_negative_stop_timeout(self):
        with pytest.raises(ValidationError):
            DevspineSettings(stop_timeout_seconds=-1)

    def test_zero_max_concurrency(self):
        with pytest.raises(ValidationError):
            DevspineSettings(max_concurrency=0)


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_env(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("DEVSPINE_COMMAND_TIMEOUT_SECONDS", "5")
        get_settings.cache_clear()
        second = get_settings()
        assert first is not second
        assert second.command_timeout_seconds == 5

    def test_invalid_env_raises_config_error(self, monkeypatch):
        monkeypatch.setenv("DEVSPINE_LOG_LEVEL", "bogus")
        with pytest.raises(ConfigError) as exc_info:
            get_settings()
        assert "invalid configuration" in str(exc_info.value)
        assert "DEVSPINE_LOG_LEVEL" in str(exc_info.value)
        assert isinstance(exc_info.value.cause, ValidationError)
