"""Tests for settings defaults and environment overrides."""

import pytest

from products_api.core.config import AppSettings, LogSettings


def test_app_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("APP_RATE_LIMIT_REQUESTS", "APP_RATE_LIMIT_WINDOW_SECONDS", "APP_PORT"):
        monkeypatch.delenv(name, raising=False)

    cfg = AppSettings()

    assert cfg.rate_limit_requests == 100
    assert cfg.rate_limit_window_seconds == 60
    assert cfg.default_per_page == 20
    assert cfg.max_per_page == 100
    assert cfg.port == 3000


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_RATE_LIMIT_REQUESTS", "5")
    monkeypatch.setenv("APP_RATE_LIMIT_ENABLED", "false")
    monkeypatch.setenv("LOG_FORMAT", "plain")

    assert AppSettings().rate_limit_requests == 5
    assert AppSettings().rate_limit_enabled is False
    assert LogSettings().format == "plain"


def test_rejects_invalid_rate_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_RATE_LIMIT_REQUESTS", "0")

    with pytest.raises(ValueError):
        AppSettings()
