"""Tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

from mise.config import get_settings


def test_defaults_when_environment_is_empty():
    settings = get_settings()

    assert settings.fixtures_path is None
    assert settings.api_token is None
    assert settings.simulated_latency_seconds == 0.0
    assert settings.default_task_minutes == 15
    assert settings.expiry_warning_days == 7
    assert settings.meal_log_deducts_inventory is False


def test_environment_overrides(monkeypatch, tmp_path):
    fixtures = tmp_path / "kitchen.json"
    monkeypatch.setenv("MISE_FIXTURES_PATH", str(fixtures))
    monkeypatch.setenv("MISE_SIMULATED_LATENCY", "0.5")
    monkeypatch.setenv("MISE_DEFAULT_TASK_MINUTES", "20")
    monkeypatch.setenv("MISE_MEAL_LOG_DEDUCTS_INVENTORY", "yes")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.fixtures_path == Path(fixtures)
    assert settings.simulated_latency_seconds == 0.5
    assert settings.default_task_minutes == 20
    assert settings.meal_log_deducts_inventory is True


def test_unparseable_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("MISE_SIMULATED_LATENCY", "soon")
    monkeypatch.setenv("MISE_EXPIRY_WARNING_DAYS", "a week")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.simulated_latency_seconds == 0.0
    assert settings.expiry_warning_days == 7
