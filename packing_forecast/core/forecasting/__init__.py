from packing_forecast.core.forecasting.domain import (
    ColumnSummary,
    DailyProjectionData,
    HistoricalStockEntry,
    HistorySummary,
    InvalidParameters,
    PerformanceRow,
    PlannedDelivery,
    PlantParameters,
    PredictionMetrics,
    PredictionResult,
    TrendAnalysis,
)
from packing_forecast.core.forecasting.engine import predict
from packing_forecast.core.forecasting.metrics import (
    aggregate_metrics,
    compute_row_metrics,
    summarize_column,
    summarize_history,
)
from packing_forecast.core.forecasting.moving_average import (
    build_performance_rows,
    estimate_moving_average,
)
from packing_forecast.core.forecasting.normalizer import filter_area_records, normalize_history
from packing_forecast.core.forecasting.parameters import resolve_parameters
from packing_forecast.core.forecasting.schedule import generate_delivery_schedule

__all__ = [
    "ColumnSummary",
    "DailyProjectionData",
    "HistoricalStockEntry",
    "HistorySummary",
    "InvalidParameters",
    "PerformanceRow",
    "PlannedDelivery",
    "PlantParameters",
    "PredictionMetrics",
    "PredictionResult",
    "TrendAnalysis",
    "aggregate_metrics",
    "build_performance_rows",
    "compute_row_metrics",
    "estimate_moving_average",
    "filter_area_records",
    "generate_delivery_schedule",
    "normalize_history",
    "predict",
    "resolve_parameters",
    "summarize_column",
    "summarize_history",
]
