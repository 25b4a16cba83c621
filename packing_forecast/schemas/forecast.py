from __future__ import annotations

import datetime as dt
import math
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _finite_or_none(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


# Unbounded quantities (math.inf) are not valid JSON and are sent as null
UnboundedFloat = Annotated[Optional[float], BeforeValidator(_finite_or_none)]


class PlannedDeliverySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    arrival_date: dt.date
    quantity: float = Field(ge=0)


class StockForecastRequest(BaseModel):
    """Forecast request for one plant area.

    `records` are raw stock ledger rows and `master_data` plant master rows as
    delivered by the data source; both are parsed leniently and rows that are
    not objects are dropped. When `planned_deliveries` is omitted a regular
    schedule is generated.
    """

    area: str
    records: list[Any] = Field(default_factory=list)
    master_data: list[Any] = Field(default_factory=list)
    planned_deliveries: Optional[list[PlannedDeliverySchema]] = None

    horizon_days: Optional[int] = None
    history_window_days: Optional[int] = None
    today: Optional[dt.date] = None

    delivery_quantity: Optional[float] = Field(None, ge=0)
    delivery_frequency_days: Optional[int] = Field(None, ge=1)

    year: Optional[int] = None
    month: Optional[int] = Field(None, ge=1, le=12)


class PlantParametersSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current_stock: float
    safety_stock: float
    avg_daily_consumption: float


class DailyProjectionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    stock_level: float
    consumption: float
    arrivals: float
    is_actual: bool


class PredictionMetricsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    days_until_empty: UnboundedFloat
    """None when stock never runs out (no consumption)."""

    days_until_critical: Optional[int]
    avg_projected_stock: float
    total_projected_consumption: float
    total_projected_arrivals: float
    stock_turnover_rate: float
    is_stock_critical: bool
    projection_accuracy: float


class PerformanceRowSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    is_actual: bool
    opening_stock: float
    closing_stock: float
    stock_received: float
    actual_stock_out: Optional[float]
    predicted_stock_out: float
    deviation: Optional[float]
    achievement_percentage: Optional[int]
    turnover_ratio: float
    efficiency: int
    net_flow: Optional[float] = None
    stock_variance: Optional[float] = None
    safety_level: Optional[str] = None
    trend_closing_stock: Optional[int] = None
    trend_stock_out: Optional[int] = None


class ColumnSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    min: float
    avg: float
    max: float
    sum: float


class TrendAnalysisSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stock_out_trend: float
    closing_stock_trend: float
    efficiency: float


class HistorySummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    latest_closing_stock: float
    avg_daily_stock_out: int
    avg_daily_stock_received: int
    days_until_empty: UnboundedFloat
    trend_analysis: TrendAnalysisSchema
    record_count: int
    not_enough_data: bool


class StockForecastResponse(BaseModel):
    area: str
    today: dt.date
    horizon_days: int
    history_window_days: int

    parameters: PlantParametersSchema
    planned_deliveries: list[PlannedDeliverySchema]

    prognosis_data: list[DailyProjectionSchema]
    critical_stock_date: Optional[dt.date]
    metrics: PredictionMetricsSchema

    performance: list[PerformanceRowSchema]
    performance_summary: dict[str, ColumnSummarySchema]
    history_summary: HistorySummarySchema


class DeliveryScheduleRequest(BaseModel):
    start_date: dt.date
    horizon_days: int = Field(ge=1)
    avg_quantity: Optional[float] = Field(None, ge=0)
    frequency_days: Optional[int] = Field(None, ge=1)


class DeliveryScheduleResponse(BaseModel):
    start_date: dt.date
    items: list[PlannedDeliverySchema]
