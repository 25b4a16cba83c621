from __future__ import annotations

import math
import numbers
from datetime import date, timedelta
from typing import Any, Optional

from packing_forecast.core.forecasting.domain import PlannedDelivery, as_quantity


def _whole_days(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real) and math.isfinite(value) and float(value).is_integer():
        return int(value)
    return None


def generate_delivery_schedule(
    start_date: date,
    horizon_days: int,
    avg_quantity: float = 100,
    frequency_days: int = 7,
) -> list[PlannedDelivery]:
    """Generate one delivery every `frequency_days` within the horizon.

    Deliveries land on start_date + frequency_days, + 2 * frequency_days, ...
    up to and including start_date + horizon_days. Periods that are not whole
    positive day counts yield no deliveries.
    """

    horizon = _whole_days(horizon_days)
    frequency = _whole_days(frequency_days)
    if horizon is None or frequency is None or frequency <= 0 or horizon <= 0:
        return []

    quantity = as_quantity(avg_quantity)

    return [
        PlannedDelivery(arrival_date=start_date + timedelta(days=offset), quantity=quantity)
        for offset in range(frequency, horizon + 1, frequency)
    ]
