from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable
from datetime import date, timedelta
from typing import Optional

from packing_forecast.core.forecasting.domain import (
    DailyProjectionData,
    HistoricalStockEntry,
    InvalidParameters,
    PlannedDelivery,
    PlantParameters,
    PredictionResult,
    as_quantity,
)


def _validate_inputs(
    parameters: Optional[PlantParameters],
    horizon_days: int,
    history_window_days: int,
) -> None:
    if parameters is None:
        raise InvalidParameters("Invalid plant parameters: parameters are missing")

    current_stock = getattr(parameters, "current_stock", None)
    if (
        isinstance(current_stock, bool)
        or not isinstance(current_stock, (int, float))
        or not math.isfinite(current_stock)
    ):
        raise InvalidParameters("Invalid plant parameters: current_stock must be a finite number")

    for name, value in (("horizon_days", horizon_days), ("history_window_days", history_window_days)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidParameters(f"Invalid period parameters: {name} must be an integer")

    if horizon_days <= 0 or history_window_days < 0:
        raise InvalidParameters(
            "Invalid period parameters: horizon_days must be > 0 and history_window_days >= 0"
        )


def _index_history(history: Iterable[HistoricalStockEntry]) -> dict[date, HistoricalStockEntry]:
    by_date: dict[date, HistoricalStockEntry] = {}
    for entry in history:
        # First entry of a day wins
        by_date.setdefault(entry.date, entry)
    return by_date


def _deliveries_by_date(deliveries: Iterable[PlannedDelivery]) -> dict[date, float]:
    totals: dict[date, float] = defaultdict(float)
    for delivery in deliveries:
        totals[delivery.arrival_date] += as_quantity(delivery.quantity)
    return totals


def predict(
    history: Iterable[HistoricalStockEntry],
    deliveries: Iterable[PlannedDelivery],
    parameters: PlantParameters,
    horizon_days: int,
    history_window_days: int,
    today: Optional[date] = None,
) -> PredictionResult:
    """Project daily stock levels around `today`.

    The result holds `history_window_days` rows before today, one row for
    today and `horizon_days` projected rows. Days missing from the history
    are filled with current stock and average consumption as placeholders.
    Projected stock is clamped at zero; the critical date is the first
    projected day below safety stock and is never moved once found.
    """

    _validate_inputs(parameters, horizon_days, history_window_days)

    today = today or date.today()
    current_stock = as_quantity(parameters.current_stock)
    safety_stock = as_quantity(parameters.safety_stock)
    avg_consumption = as_quantity(parameters.avg_daily_consumption)

    history_by_date = _index_history(history)
    stock_in_by_date = _deliveries_by_date(deliveries)

    rows: list[DailyProjectionData] = []

    # Recorded days, oldest first
    for offset in range(history_window_days, 0, -1):
        day = today - timedelta(days=offset)
        entry = history_by_date.get(day)
        if entry is not None:
            rows.append(
                DailyProjectionData(
                    date=day,
                    stock_level=entry.stock_level,
                    consumption=entry.consumption,
                    arrivals=entry.arrivals,
                    is_actual=True,
                )
            )
        else:
            rows.append(
                DailyProjectionData(
                    date=day,
                    stock_level=current_stock,
                    consumption=avg_consumption,
                    arrivals=0.0,
                    is_actual=True,
                )
            )

    today_entry = history_by_date.get(today)
    rows.append(
        DailyProjectionData(
            date=today,
            stock_level=current_stock,
            consumption=avg_consumption,
            arrivals=today_entry.arrivals if today_entry is not None else 0.0,
            is_actual=True,
        )
    )

    projected_stock = current_stock
    critical_stock_date: Optional[date] = None

    for offset in range(1, horizon_days + 1):
        day = today + timedelta(days=offset)
        stock_in = stock_in_by_date.get(day, 0.0)
        projected_stock = max(0.0, projected_stock + stock_in - avg_consumption)

        rows.append(
            DailyProjectionData(
                date=day,
                stock_level=projected_stock,
                consumption=avg_consumption,
                arrivals=stock_in,
                is_actual=False,
            )
        )

        if critical_stock_date is None and projected_stock < safety_stock:
            critical_stock_date = day

    return PredictionResult(prognosis_data=tuple(rows), critical_stock_date=critical_stock_date)
