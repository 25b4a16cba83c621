from __future__ import annotations

import math
import numbers
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional

from packing_forecast.core.forecasting.domain import (
    ColumnSummary,
    HistorySummary,
    PlantParameters,
    PredictionMetrics,
    PredictionResult,
    TrendAnalysis,
    as_quantity,
    round_half_up,
)
from packing_forecast.core.forecasting.records import RawStockRecord, parse_stock_record


@dataclass(frozen=True)
class RowMetrics:
    deviation: Optional[float]
    achievement_percentage: Optional[int]
    turnover_ratio: float
    efficiency: int


def compute_row_metrics(
    actual_stock_out: Optional[float],
    predicted_stock_out: float,
    opening_stock: float,
    stock_received: float,
) -> RowMetrics:
    """Per-day comparison figures for the performance table.

    Deviation and achievement are only defined when the day has a recorded
    stock-out; achievement additionally needs a positive prediction.
    """

    stock_out = actual_stock_out if actual_stock_out is not None else 0.0

    deviation: Optional[float] = None
    achievement: Optional[int] = None
    if actual_stock_out is not None:
        deviation = actual_stock_out - predicted_stock_out
        if predicted_stock_out > 0:
            achievement = round_half_up(actual_stock_out / predicted_stock_out * 100)

    if opening_stock > 0:
        turnover_ratio = round_half_up(stock_out / opening_stock * 100 * 10) / 10
    else:
        turnover_ratio = 0.0

    efficiency = round_half_up(stock_out / stock_received * 100) if stock_received > 0 else 0

    return RowMetrics(
        deviation=deviation,
        achievement_percentage=achievement,
        turnover_ratio=turnover_ratio,
        efficiency=efficiency,
    )


SAFETY_LEVEL_NORMAL = "Normal"
SAFETY_LEVEL_LOW = "Low"
SAFETY_LEVEL_CRITICAL = "Critical"


def classify_safety_level(closing_stock: float, normal_above: float, low_above: float) -> str:
    if closing_stock > normal_above:
        return SAFETY_LEVEL_NORMAL
    if closing_stock > low_above:
        return SAFETY_LEVEL_LOW
    return SAFETY_LEVEL_CRITICAL


def centred_moving_average(values: list[float], window: int) -> list[int]:
    """Rounded mean of a window of up to `window` values around each position.

    The window starts `window // 2` positions before the value and is cut
    short at the end of the series.
    """
    size = min(window, len(values))
    averages: list[int] = []
    for index in range(len(values)):
        start = max(0, index - size // 2)
        end = min(len(values), start + size)
        chunk = values[start:end]
        averages.append(round_half_up(sum(chunk) / len(chunk)))
    return averages


def _finite_values(values: Iterable[Any]) -> list[float]:
    finite: list[float] = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            continue
        if math.isfinite(value):
            finite.append(float(value))
    return finite


def summarize_column(values: Iterable[Any]) -> ColumnSummary:
    """Min / avg / max / sum of the finite numbers in `values`."""
    finite = _finite_values(values)
    if not finite:
        return ColumnSummary()
    total = sum(finite)
    return ColumnSummary(min=min(finite), avg=total / len(finite), max=max(finite), sum=total)


def _variance(values: list[float]) -> float:
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def _projection_accuracy(actual_levels: list[float]) -> float:
    # 100 minus the coefficient of variation of recorded stock levels, in percent
    if len(actual_levels) < 2:
        return 0.0
    mean = sum(actual_levels) / len(actual_levels)
    cv = math.sqrt(_variance(actual_levels)) / mean if mean > 0 else 0.0
    return max(0.0, min(100.0, 100.0 - cv * 100.0))


def aggregate_metrics(result: PredictionResult, parameters: PlantParameters) -> PredictionMetrics:
    """Summarize a prediction for presentation.

    `days_until_empty` is current stock over average daily consumption and is
    math.inf when the area consumes nothing.
    """

    current_stock = as_quantity(parameters.current_stock)
    avg_consumption = as_quantity(parameters.avg_daily_consumption)

    actual_rows = [row for row in result.prognosis_data if row.is_actual]
    projected_rows = [row for row in result.prognosis_data if not row.is_actual]

    days_until_empty = current_stock / avg_consumption if avg_consumption > 0 else math.inf

    days_until_critical: Optional[int] = None
    if result.critical_stock_date is not None and actual_rows:
        days_until_critical = (result.critical_stock_date - actual_rows[-1].date).days

    if projected_rows:
        avg_projected_stock = sum(r.stock_level for r in projected_rows) / len(projected_rows)
    else:
        avg_projected_stock = 0.0

    total_consumption = sum(r.consumption for r in projected_rows)
    total_arrivals = sum(r.arrivals for r in projected_rows)
    turnover = total_consumption / current_stock if current_stock > 0 else 0.0

    return PredictionMetrics(
        days_until_empty=days_until_empty,
        days_until_critical=days_until_critical,
        avg_projected_stock=avg_projected_stock,
        total_projected_consumption=total_consumption,
        total_projected_arrivals=total_arrivals,
        stock_turnover_rate=turnover,
        is_stock_critical=result.critical_stock_date is not None,
        projection_accuracy=_projection_accuracy([r.stock_level for r in actual_rows]),
    )


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _trend_percent(first: float, second: float) -> float:
    return (second - first) / first * 100 if first > 0 else 0.0


def summarize_history(records: Iterable[Any]) -> HistorySummary:
    """Summarize the recorded ledger of one area and period.

    Records are parsed and sorted by date; the latest closing stock is taken
    from the last day. Trends compare the first and second half of the period.
    """

    parsed: list[RawStockRecord] = []
    for record in records or ():
        row = parse_stock_record(record)
        if row is not None:
            parsed.append(row)
    parsed.sort(key=lambda r: r.date)

    if not parsed:
        return HistorySummary(
            latest_closing_stock=0.0,
            avg_daily_stock_out=0,
            avg_daily_stock_received=0,
            days_until_empty=math.inf,
            trend_analysis=TrendAnalysis(),
            record_count=0,
        )

    latest_closing_stock = parsed[-1].closing_stock
    avg_out = round_half_up(_mean([r.stock_out for r in parsed]))
    avg_in = round_half_up(_mean([r.stock_received for r in parsed]))
    days_until_empty = math.floor(latest_closing_stock / avg_out) if avg_out > 0 else math.inf

    trend = TrendAnalysis()
    if len(parsed) >= 2:
        middle = len(parsed) // 2
        first_half, second_half = parsed[:middle], parsed[middle:]
        trend = TrendAnalysis(
            stock_out_trend=_trend_percent(
                _mean([r.stock_out for r in first_half]),
                _mean([r.stock_out for r in second_half]),
            ),
            closing_stock_trend=_trend_percent(
                _mean([r.closing_stock for r in first_half]),
                _mean([r.closing_stock for r in second_half]),
            ),
            efficiency=avg_out / avg_in * 100 if avg_in > 0 else 0.0,
        )

    return HistorySummary(
        latest_closing_stock=latest_closing_stock,
        avg_daily_stock_out=avg_out,
        avg_daily_stock_received=avg_in,
        days_until_empty=days_until_empty,
        trend_analysis=trend,
        record_count=len(parsed),
    )
