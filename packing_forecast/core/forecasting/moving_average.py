from __future__ import annotations

import dataclasses
import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, timedelta
from typing import Any, Optional

from packing_forecast.core.config import ForecastSettings, get_settings
from packing_forecast.core.forecasting.domain import PerformanceRow, as_quantity, round_half_up
from packing_forecast.core.forecasting.metrics import (
    centred_moving_average,
    classify_safety_level,
    compute_row_metrics,
)
from packing_forecast.core.forecasting.normalizer import filter_area_records
from packing_forecast.core.forecasting.records import RawStockRecord, parse_calendar_day


def _row_value(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def _window_start(current_date: date, window_days: int) -> date:
    return current_date - timedelta(days=window_days - 1)


def _actual_stock_out_in_window(
    records: Iterable[RawStockRecord],
    start: date,
    current_date: date,
) -> list[float]:
    by_day: dict[date, float] = {}
    for record in records:
        if start <= record.date <= current_date and record.stock_out > 0:
            by_day.setdefault(record.date, record.stock_out)
    return list(by_day.values())


def _predicted_stock_out_in_window(
    partial_results: Iterable[Any],
    start: date,
    current_date: date,
) -> list[float]:
    values: list[float] = []
    for row in partial_results:
        value = _row_value(row, "predicted_stock_out")
        if value is None:
            continue
        try:
            day = parse_calendar_day(_row_value(row, "date"))
        except ValueError:
            continue
        if start <= day < current_date:
            values.append(as_quantity(value))
    return values


def _estimate_from_area_records(
    area_records: Sequence[RawStockRecord],
    partial_results: Iterable[Any],
    current_date: date,
    fallback: float,
    window_days: int,
    min_samples: int,
) -> float:
    start = _window_start(current_date, window_days)

    actual = _actual_stock_out_in_window(area_records, start, current_date)
    if actual and len(actual) >= min_samples:
        return float(round_half_up(sum(actual) / len(actual)))

    predicted = _predicted_stock_out_in_window(partial_results, start, current_date)
    if predicted and len(predicted) >= min_samples:
        return float(round_half_up(sum(predicted) / len(predicted)))

    if fallback is None or not math.isfinite(fallback):
        return 0.0
    return max(0.0, float(fallback))


def estimate_moving_average(
    raw_records: Any,
    partial_results: Iterable[Any],
    current_date: date,
    area: str,
    fallback: float,
    window_days: Optional[int] = None,
    min_samples: Optional[int] = None,
) -> float:
    """Estimate the stock-out for `current_date` from a trailing window.

    The window covers `window_days` days ending on `current_date`. Recorded
    stock-out (> 0) of the area is preferred; without enough recorded days the
    predicted values already computed for earlier days in the window are
    averaged instead; without enough of either, `fallback` (floored at 0) is
    returned. Averages are rounded to whole units.
    """

    settings = get_settings()
    if window_days is None:
        window_days = settings.moving_average_window_days
    if min_samples is None:
        min_samples = settings.moving_average_min_samples

    return _estimate_from_area_records(
        area_records=filter_area_records(raw_records, area),
        partial_results=partial_results,
        current_date=current_date,
        fallback=fallback,
        window_days=window_days,
        min_samples=min_samples,
    )


def build_performance_rows(
    raw_records: Any,
    area: str,
    dates: Iterable[date],
    fallback: float,
    settings: Optional[ForecastSettings] = None,
) -> list[PerformanceRow]:
    """Build the predicted vs. actual stock-out table for `dates`.

    Each day's prediction only sees the rows built for earlier days, so the
    moving average bootstraps from the fallback on the first days and from
    its own estimates afterwards. Days with a ledger row also carry net flow,
    closing-stock variance, a safety level and centred trend averages.
    """

    settings = settings or get_settings()
    area_records = filter_area_records(raw_records, area)

    records_by_day: dict[date, RawStockRecord] = {}
    for record in area_records:
        records_by_day.setdefault(record.date, record)

    rows: list[PerformanceRow] = []
    for day in sorted(set(dates)):
        predicted = _estimate_from_area_records(
            area_records=area_records,
            partial_results=rows,
            current_date=day,
            fallback=fallback,
            window_days=settings.moving_average_window_days,
            min_samples=settings.moving_average_min_samples,
        )

        record = records_by_day.get(day)
        actual_stock_out = record.stock_out if record is not None else None
        opening_stock = record.opening_stock if record is not None else 0.0
        closing_stock = record.closing_stock if record is not None else 0.0
        stock_received = record.stock_received if record is not None else 0.0

        metrics = compute_row_metrics(
            actual_stock_out=actual_stock_out,
            predicted_stock_out=predicted,
            opening_stock=opening_stock,
            stock_received=stock_received,
        )

        rows.append(
            PerformanceRow(
                date=day,
                is_actual=record is not None,
                opening_stock=opening_stock,
                closing_stock=closing_stock,
                stock_received=stock_received,
                actual_stock_out=actual_stock_out,
                predicted_stock_out=predicted,
                deviation=metrics.deviation,
                achievement_percentage=metrics.achievement_percentage,
                turnover_ratio=metrics.turnover_ratio,
                efficiency=metrics.efficiency,
            )
        )

    return _with_recorded_day_fields(rows, settings)


def _with_recorded_day_fields(
    rows: list[PerformanceRow],
    settings: ForecastSettings,
) -> list[PerformanceRow]:
    # Flow, variance, safety level and trends only describe recorded days
    recorded = [index for index, row in enumerate(rows) if row.is_actual]
    closing = [rows[index].closing_stock for index in recorded]
    stock_out = [rows[index].actual_stock_out or 0.0 for index in recorded]
    trend_closing = centred_moving_average(closing, settings.trend_window_days)
    trend_out = centred_moving_average(stock_out, settings.trend_window_days)

    enriched = list(rows)
    for position, index in enumerate(recorded):
        row = rows[index]
        enriched[index] = dataclasses.replace(
            row,
            net_flow=row.stock_received - stock_out[position],
            stock_variance=closing[position] - closing[position - 1] if position > 0 else 0.0,
            safety_level=classify_safety_level(
                row.closing_stock,
                normal_above=settings.safety_level_normal_above,
                low_above=settings.safety_level_low_above,
            ),
            trend_closing_stock=trend_closing[position],
            trend_stock_out=trend_out[position],
        )
    return enriched
