import pytest

import config as config_mod
from core.errors import ConfigurationError


def test_load_settings_defaults(monkeypatch):
    for name in (
        "AR_MAX_HISTORY", "AR_MAX_ANALOGIES", "AR_MAX_DOMAINS",
        "AR_TTL_MINUTES", "AR_CLEANUP_INTERVAL_MINUTES", "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    s = config_mod.load_settings()

    assert s.max_history == 100
    assert s.max_domains == 50
    assert s.ttl_seconds == 1440 * 60
    assert s.cleanup_interval_seconds == 300
    assert s.log_level == "INFO"


def test_load_settings_reads_env(monkeypatch):
    monkeypatch.setenv("AR_MAX_HISTORY", "3")
    monkeypatch.setenv("AR_TTL_MINUTES", "1")
    monkeypatch.setenv("AR_MAX_DOMAINS", " 2 ")
    monkeypatch.setenv("AR_MAX_ANALOGIES", "not-a-number")

    s = config_mod.load_settings()

    assert (s.max_history, s.ttl_seconds, s.max_domains) == (3, 60.0, 2)
    assert s.max_analogies == 100


@pytest.mark.parametrize(
    "name,value",
    [("AR_MAX_HISTORY", "0"), ("AR_TTL_MINUTES", "-1"), ("AR_MAX_DOMAINS", "0")],
)
def test_load_settings_rejects_non_positive(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=f"{name} must be positive"):
        config_mod.load_settings()
