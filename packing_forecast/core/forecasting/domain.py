from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from decimal import Decimal
from datetime import date
from typing import Optional, Tuple


class InvalidParameters(ValueError):
    """Raised by the prediction engine when its inputs cannot seed a projection."""


@dataclass(frozen=True)
class HistoricalStockEntry:
    """One closed accounting day for a single plant area."""

    date: date
    """Calendar day of the ledger entry."""

    stock_level: float
    """Closing stock at the end of the day."""

    consumption: float
    """Stock-out recorded for the day."""

    arrivals: float
    """Stock received during the day."""


@dataclass(frozen=True)
class PlannedDelivery:
    """Expected inbound shipment; it may or may not materialize."""

    arrival_date: date
    quantity: float


@dataclass(frozen=True)
class PlantParameters:
    """Starting state and depletion rate of one area."""

    current_stock: float
    safety_stock: float
    avg_daily_consumption: float


@dataclass(frozen=True)
class DailyProjectionData:
    """A single day of the combined history + projection series.

    `is_actual` is True for days backed by the ledger (including today) and
    False for projected days.
    """

    date: date
    stock_level: float
    consumption: float
    arrivals: float
    is_actual: bool


@dataclass(frozen=True)
class PredictionResult:
    prognosis_data: Tuple[DailyProjectionData, ...]
    """Chronological rows, one per calendar day, without gaps."""

    critical_stock_date: Optional[date] = None
    """First projected day with stock below safety stock, if any."""


@dataclass(frozen=True)
class PerformanceRow:
    """Predicted vs. actual stock-out for one day of the performance table."""

    date: date
    is_actual: bool

    opening_stock: float
    closing_stock: float
    stock_received: float

    actual_stock_out: Optional[float]
    """Recorded stock-out, None when the ledger has no row for the day."""

    predicted_stock_out: float
    """Moving-average estimate used as the comparison baseline."""

    deviation: Optional[float]
    achievement_percentage: Optional[int]
    turnover_ratio: float
    efficiency: int

    net_flow: Optional[float] = None
    """Stock received minus recorded stock-out; None on days without a ledger row."""

    stock_variance: Optional[float] = None
    """Closing stock change against the previous recorded day (0 for the first)."""

    safety_level: Optional[str] = None
    """Normal, Low or Critical classification of the recorded closing stock."""

    trend_closing_stock: Optional[int] = None
    trend_stock_out: Optional[int] = None


@dataclass(frozen=True)
class ColumnSummary:
    min: float = 0.0
    avg: float = 0.0
    max: float = 0.0
    sum: float = 0.0


@dataclass(frozen=True)
class PredictionMetrics:
    """Presentation metrics derived from a PredictionResult.

    `days_until_empty` is math.inf when the area has no consumption.
    """

    days_until_empty: float
    days_until_critical: Optional[int]
    avg_projected_stock: float
    total_projected_consumption: float
    total_projected_arrivals: float
    stock_turnover_rate: float
    is_stock_critical: bool
    projection_accuracy: float


@dataclass(frozen=True)
class TrendAnalysis:
    stock_out_trend: float = 0.0
    closing_stock_trend: float = 0.0
    efficiency: float = 0.0


@dataclass(frozen=True)
class HistorySummary:
    """Figures describing the recorded ledger of the selected period."""

    latest_closing_stock: float
    avg_daily_stock_out: int
    avg_daily_stock_received: int
    days_until_empty: float
    trend_analysis: TrendAnalysis
    record_count: int

    @property
    def not_enough_data(self) -> bool:
        return self.record_count == 0


def as_quantity(value: object) -> float:
    """Coerce a loosely typed number to a finite, non-negative float.

    Strings are parsed, everything unparsable, non-finite or negative
    (and booleans) becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    elif isinstance(value, (numbers.Real, Decimal)):
        try:
            number = float(value)
        except (ValueError, OverflowError):
            return 0.0
    else:
        return 0.0

    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))
