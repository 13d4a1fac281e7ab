"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
the storage bounds used by the session stores (history length, TTL,
registry size) plus the cleanup interval and log level.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from core.errors import ConfigurationError


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Validated snapshot of the storage bounds.

    Field groups:
    - History: max_history (iterations per analogy), max_analogies
    - Domain registry: max_domains
    - Shared: ttl_minutes, cleanup_interval_minutes
    """

    max_history: int = 100
    max_analogies: int = 100
    max_domains: int = 50
    ttl_minutes: float = 1440.0
    cleanup_interval_minutes: float = 5.0
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        for env_name, value in (
            ("AR_MAX_HISTORY", self.max_history),
            ("AR_MAX_ANALOGIES", self.max_analogies),
            ("AR_MAX_DOMAINS", self.max_domains),
            ("AR_TTL_MINUTES", self.ttl_minutes),
            ("AR_CLEANUP_INTERVAL_MINUTES", self.cleanup_interval_minutes),
        ):
            if value <= 0:
                raise ConfigurationError(f"{env_name} must be positive, got: {value}")

    @property
    def ttl_seconds(self) -> float:
        return self.ttl_minutes * 60.0

    @property
    def cleanup_interval_seconds(self) -> float:
        return self.cleanup_interval_minutes * 60.0


def load_settings() -> Settings:
    # Read at call time so tests can monkeypatch the environment.
    return Settings(
        max_history=_env_int("AR_MAX_HISTORY", 100),
        max_analogies=_env_int("AR_MAX_ANALOGIES", 100),
        max_domains=_env_int("AR_MAX_DOMAINS", 50),
        ttl_minutes=_env_float("AR_TTL_MINUTES", 1440.0),
        cleanup_interval_minutes=_env_float("AR_CLEANUP_INTERVAL_MINUTES", 5.0),
        log_level=os.environ.get("LOG_LEVEL", "INFO").strip() or "INFO",
    )
