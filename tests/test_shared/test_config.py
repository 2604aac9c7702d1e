"""
Tests for environment-driven settings.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from shared.config import Settings, get_settings, reset_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings.catalog_service_url == "http://localhost:8001"
        assert settings.retry_max_attempts == 3
        assert settings.breaker_failure_rate_threshold == 50.0

    def test_env_overrides_are_coerced(self):
        settings = Settings.from_env({
            "CATALOG_SERVICE_URL": "http://catalog:8080",
            "RETRY_MAX_ATTEMPTS": "5",
            "BREAKER_WAIT_SECONDS": "1.5",
            "DATA_DIR": "/tmp/fixtures",
        })

        assert settings.catalog_service_url == "http://catalog:8080"
        assert settings.retry_max_attempts == 5
        assert settings.breaker_wait_seconds == 1.5
        assert settings.data_dir == Path("/tmp/fixtures")

    def test_invalid_value_rejected(self):
        with pytest.raises(ValidationError):
            Settings.from_env({"RETRY_MAX_ATTEMPTS": "0"})


class TestSettingsSingleton:
    def test_reset_settings(self):
        custom = Settings(catalog_service_url="http://elsewhere")
        try:
            reset_settings(custom)
            assert get_settings() is custom
        finally:
            reset_settings(None)
