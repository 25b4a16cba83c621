from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class ForecastSettings(BaseSettings):
    """Policy constants for the stock forecasting engine.

    Every field can be overridden with a FORECAST_-prefixed environment
    variable, e.g. FORECAST_DEFAULT_HORIZON_DAYS=14. Fallback magnitudes are
    used by the parameter resolver whenever master data for an area is
    missing or invalid, so they must stay positive.
    """

    model_config = SettingsConfigDict(env_prefix="FORECAST_", env_ignore_empty=True)

    default_current_stock: float = Field(1000.0, gt=0)
    default_safety_stock: float = Field(50.0, gt=0)
    default_avg_daily_consumption: float = Field(100.0, gt=0)

    moving_average_window_days: int = Field(7, ge=1)
    moving_average_min_samples: int = Field(3, ge=1)

    default_horizon_days: int = Field(30, ge=1)
    default_history_window_days: int = Field(7, ge=0)

    default_delivery_quantity: float = Field(100.0, ge=0)
    default_delivery_frequency_days: int = Field(7, ge=1)

    # Closing stock above these levels is Normal / Low, anything else Critical
    safety_level_normal_above: float = Field(100.0, ge=0)
    safety_level_low_above: float = Field(50.0, ge=0)

    trend_window_days: int = Field(5, ge=1)

    log_level: str = Field("INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value


def load_settings() -> ForecastSettings:
    settings = ForecastSettings()
    logger.debug("Forecast settings loaded: %s", settings.model_dump())
    return settings


@lru_cache
def get_settings() -> ForecastSettings:
    return load_settings()
