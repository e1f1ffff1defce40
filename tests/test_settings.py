# tests/test_settings.py
import pytest
from pydantic import ValidationError

from ogs_client.config.settings import RetrySettings, Settings

def test_defaults():
    settings = Settings()
    assert settings.base_url == "https://online-go.com"
    assert settings.max_board_size == 25
    assert settings.clock.sudden_death_seconds == 10.0
    assert settings.clock.timeout_epsilon == 1e-7
    assert settings.retry.attempts == 3

def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("OGS_CLIENT_BASE_URL", "https://beta.online-go.com")
    monkeypatch.setenv("OGS_CLIENT_CLOCK__SUDDEN_DEATH_SECONDS", "30")
    settings = Settings()
    assert settings.base_url == "https://beta.online-go.com"
    assert settings.clock.sudden_death_seconds == 30.0

def test_backoff_bounds_are_validated():
    with pytest.raises(ValidationError):
        RetrySettings(initial_backoff_s=10, max_backoff_s=1)
