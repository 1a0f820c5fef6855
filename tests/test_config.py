import pytest
from pydantic import ValidationError

from blecap.core.config import Settings, get_settings


def test_defaults():
    cfg = Settings()
    assert cfg.buffer_capacity == 100
    assert cfg.flush_interval == 0.5
    assert cfg.deviation_threshold == 3.0
    assert cfg.cache_enabled is True


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BLECAP_BUFFER_CAPACITY", "3")
    monkeypatch.setenv("BLECAP_FLUSH_INTERVAL", "0.25")
    cfg = Settings()
    assert cfg.buffer_capacity == 3
    assert cfg.flush_interval == 0.25


def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        Settings(buffer_capacity=0)
    with pytest.raises(ValidationError):
        Settings(flush_interval=-1)


def test_get_settings_is_singleton():
    assert get_settings() is get_settings()
