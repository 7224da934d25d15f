"""Tests for Settings configuration helpers."""

import pytest

from httpflow.config.settings import (
    Environment,
    LogLevel,
    Settings,
    build_settings,
    settings_from_env,
)
from httpflow.domain.exceptions import ConfigurationError
from httpflow.domain.parsing import JsonMode
from httpflow.domain.retry import DelayStrategy


@pytest.fixture
def default_settings():
    """Provide default Settings for comparison."""
    return Settings()


class TestSettingsDefaults:
    def test_defaults(self, default_settings):
        assert default_settings.environment == Environment.PRODUCTION
        assert default_settings.log_level == LogLevel.INFO
        assert default_settings.timeout is None
        assert default_settings.default_retries == 0
        assert default_settings.delay_strategy is DelayStrategy.LINEAR
        assert default_settings.json_mode is JsonMode.LENIENT

    def test_rejects_zero_parser_workers(self):
        with pytest.raises(ConfigurationError, match="parser_workers"):
            Settings(parser_workers=0)

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ConfigurationError, match="timeout"):
            Settings(timeout=0)


class TestBuildSettings:
    """Test our build_settings helper logic."""

    def test_filters_none_values(self, default_settings):
        settings = build_settings(default_retries=None, log_level=LogLevel.DEBUG)

        assert settings.default_retries == default_settings.default_retries
        assert settings.log_level == LogLevel.DEBUG

    def test_applies_all_overrides(self):
        settings = build_settings(
            default_retries=3,
            log_level=LogLevel.ERROR,
            timeout=30.0,
        )

        assert settings.default_retries == 3
        assert settings.log_level == LogLevel.ERROR
        assert settings.timeout == 30.0


class TestSettingsFromEnv:
    def test_empty_environment_gives_defaults(self, default_settings):
        assert settings_from_env({}) == default_settings

    def test_reads_prefixed_variables(self):
        settings = settings_from_env(
            {
                "HTTPFLOW_ENVIRONMENT": "development",
                "HTTPFLOW_LOG_LEVEL": "debug",
                "HTTPFLOW_TIMEOUT": "2.5",
                "HTTPFLOW_DEFAULT_RETRIES": "4",
                "HTTPFLOW_DEFAULT_DELAY": "0.25",
                "HTTPFLOW_DELAY_STRATEGY": "fixed",
                "HTTPFLOW_JSON_MODE": "strict",
                "HTTPFLOW_PARSER_WORKERS": "8",
            }
        )

        assert settings == Settings(
            environment=Environment.DEVELOPMENT,
            log_level=LogLevel.DEBUG,
            timeout=2.5,
            default_retries=4,
            default_delay=0.25,
            delay_strategy=DelayStrategy.FIXED,
            json_mode=JsonMode.STRICT,
            parser_workers=8,
        )

    def test_ignores_empty_and_unprefixed_variables(self, default_settings):
        settings = settings_from_env({"HTTPFLOW_TIMEOUT": "", "TIMEOUT": "5"})

        assert settings == default_settings

    @pytest.mark.parametrize(
        "name,value",
        [
            ("HTTPFLOW_DEFAULT_RETRIES", "many"),
            ("HTTPFLOW_JSON_MODE", "sloppy"),
            ("HTTPFLOW_ENVIRONMENT", "staging"),
        ],
    )
    def test_invalid_value_raises(self, name, value):
        with pytest.raises(ConfigurationError, match=name):
            settings_from_env({name: value})

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("HTTPFLOW_DEFAULT_RETRIES", "2")

        assert settings_from_env().default_retries == 2
