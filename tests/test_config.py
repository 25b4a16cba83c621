from __future__ import annotations

import pytest
from pydantic import ValidationError

from packing_forecast.core.config import ForecastSettings, load_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ForecastSettings.model_fields:
        monkeypatch.delenv(f"FORECAST_{name.upper()}", raising=False)
    return monkeypatch


def test_load_settings_defaults(clean_env):
    settings = load_settings()

    assert settings.default_current_stock == 1000
    assert settings.default_safety_stock == 50
    assert settings.default_avg_daily_consumption == 100
    assert settings.moving_average_window_days == 7
    assert settings.moving_average_min_samples == 3
    assert settings.safety_level_normal_above == 100
    assert settings.safety_level_low_above == 50


def test_load_settings_reads_environment(clean_env):
    clean_env.setenv("FORECAST_DEFAULT_HORIZON_DAYS", "14")
    clean_env.setenv("FORECAST_DEFAULT_SAFETY_STOCK", "75.5")
    clean_env.setenv("FORECAST_LOG_LEVEL", "debug")
    clean_env.setenv("forecast_trend_window_days", "3")

    settings = load_settings()

    assert settings.default_horizon_days == 14
    assert settings.default_safety_stock == 75.5
    assert settings.log_level == "DEBUG"
    assert settings.trend_window_days == 3


def test_load_settings_ignores_empty_variables(clean_env):
    clean_env.setenv("FORECAST_MOVING_AVERAGE_MIN_SAMPLES", "")

    assert load_settings().moving_average_min_samples == 3


def test_load_settings_rejects_invalid_values(clean_env):
    clean_env.setenv("FORECAST_DEFAULT_AVG_DAILY_CONSUMPTION", "0")

    with pytest.raises(ValidationError):
        load_settings()


def test_init_arguments_take_precedence_over_environment(clean_env):
    clean_env.setenv("FORECAST_DEFAULT_HORIZON_DAYS", "14")

    assert ForecastSettings(default_horizon_days=10).default_horizon_days == 10
