from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Optional

from packing_forecast.core.config import ForecastSettings, get_settings
from packing_forecast.core.forecasting.domain import PlantParameters
from packing_forecast.core.forecasting.records import MasterDataRecord, parse_master_record


logger = logging.getLogger(__name__)


def default_parameters(settings: ForecastSettings) -> PlantParameters:
    return PlantParameters(
        current_stock=settings.default_current_stock,
        safety_stock=settings.default_safety_stock,
        avg_daily_consumption=settings.default_avg_daily_consumption,
    )


def _find_area_record(master_records: Any, area: str) -> Optional[MasterDataRecord]:
    if master_records is None or isinstance(master_records, (str, bytes)) or not isinstance(
        master_records, Iterable
    ):
        return None
    for record in master_records:
        parsed = parse_master_record(record)
        if parsed is not None and parsed.area == area:
            return parsed
    return None


def resolve_parameters(
    master_records: Any,
    area: str,
    settings: Optional[ForecastSettings] = None,
) -> PlantParameters:
    """Derive PlantParameters for `area` from plant master data.

    Current and safety stock must be non-negative, average daily consumption
    strictly positive. Each invalid value falls back to its default from
    ForecastSettings, and a missing area falls back entirely. Never raises.
    """

    settings = settings or get_settings()
    defaults = default_parameters(settings)

    record = _find_area_record(master_records, area)
    if record is None:
        logger.warning("No master data found for area %s, using fallback parameters", area)
        return defaults

    fallbacks: list[str] = []

    current_stock = record.current_stock
    if current_stock is None or current_stock < 0:
        current_stock = defaults.current_stock
        fallbacks.append("current_stock")

    safety_stock = record.safety_stock
    if safety_stock is None or safety_stock < 0:
        safety_stock = defaults.safety_stock
        fallbacks.append("safety_stock")

    avg_daily_consumption = record.avg_daily_consumption
    if avg_daily_consumption is None or avg_daily_consumption <= 0:
        avg_daily_consumption = defaults.avg_daily_consumption
        fallbacks.append("avg_daily_consumption")

    if fallbacks:
        logger.warning(
            "Invalid master data for area %s, using fallback values for %s",
            area,
            ", ".join(fallbacks),
        )

    return PlantParameters(
        current_stock=current_stock,
        safety_stock=safety_stock,
        avg_daily_consumption=avg_daily_consumption,
    )
