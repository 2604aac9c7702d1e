"""
Runtime configuration for the catalog and order services.

Values come from environment variables with sensible local defaults, so
both services run out of the box with `uv run python cli.py serve ...`.

Design decisions:
- One Settings model shared by both services (they are deployed from the same tree)
- Pydantic for coercion, so "3" in the environment becomes an int
- Module-level singleton like the data store, resettable from tests
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


class Settings(BaseModel):
    """Configuration knobs for the services and the catalog gateway."""

    # Catalog lookup
    catalog_service_url: str = Field(
        default="http://localhost:8001",
        description="Base URL of the catalog service",
    )
    catalog_timeout_seconds: float = Field(
        default=2.0, gt=0, description="Timeout applied to each catalog request attempt"
    )

    # Retry policy
    retry_max_attempts: int = Field(default=3, ge=1)
    retry_wait_seconds: float = Field(default=0.5, ge=0)
    retry_multiplier: float = Field(default=2.0, ge=1)

    # Circuit breaker
    breaker_failure_rate_threshold: float = Field(
        default=50.0, gt=0, le=100, description="Failure percentage that opens the circuit"
    )
    breaker_sliding_window_size: int = Field(default=10, ge=1)
    breaker_minimum_calls: int = Field(default=5, ge=1)
    breaker_wait_seconds: float = Field(
        default=30.0, ge=0, description="How long the circuit stays open before probing"
    )
    breaker_half_open_calls: int = Field(default=2, ge=1)

    # Storage and logging
    data_dir: Path = Field(default=DEFAULT_DATA_DIR, description="JSON fixture directory")
    log_level: str = Field(default="INFO")

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Only variables that are actually set override the defaults.
        """
        environ = os.environ if environ is None else environ
        mapping = {
            "CATALOG_SERVICE_URL": "catalog_service_url",
            "CATALOG_TIMEOUT_SECONDS": "catalog_timeout_seconds",
            "RETRY_MAX_ATTEMPTS": "retry_max_attempts",
            "RETRY_WAIT_SECONDS": "retry_wait_seconds",
            "RETRY_MULTIPLIER": "retry_multiplier",
            "BREAKER_FAILURE_RATE_THRESHOLD": "breaker_failure_rate_threshold",
            "BREAKER_SLIDING_WINDOW_SIZE": "breaker_sliding_window_size",
            "BREAKER_MINIMUM_CALLS": "breaker_minimum_calls",
            "BREAKER_WAIT_SECONDS": "breaker_wait_seconds",
            "BREAKER_HALF_OPEN_CALLS": "breaker_half_open_calls",
            "DATA_DIR": "data_dir",
            "LOG_LEVEL": "log_level",
        }
        values = {field: environ[var] for var, field in mapping.items() if var in environ}
        return cls(**values)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the process-wide settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings(settings: Optional[Settings] = None) -> Optional[Settings]:
    """Replace (or clear) the cached settings. Used by tests."""
    global _settings
    _settings = settings
    return _settings
