from __future__ import annotations

from datetime import date
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from packing_forecast.core.config import ForecastSettings, get_settings
from packing_forecast.core.forecasting import (
    HistoricalStockEntry,
    PlantParameters,
    normalize_history,
)
from packing_forecast.main import app
from tests.test_utils import scenario_ledger


@pytest.fixture
def today() -> date:
    """Fixed 'today' so projections are reproducible."""
    return date(2024, 1, 8)


@pytest.fixture
def settings() -> ForecastSettings:
    return ForecastSettings()


@pytest.fixture
def scenario_history(today) -> list[HistoricalStockEntry]:
    return normalize_history(scenario_ledger(today))


@pytest.fixture
def scenario_parameters() -> PlantParameters:
    return PlantParameters(current_stock=85, safety_stock=40, avg_daily_consumption=11)


@pytest.fixture
def client(settings) -> Generator[TestClient, None, None]:
    def _get_settings_override() -> ForecastSettings:
        return settings

    app.dependency_overrides[get_settings] = _get_settings_override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
