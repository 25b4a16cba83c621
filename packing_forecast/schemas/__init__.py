from packing_forecast.schemas.forecast import (
    ColumnSummarySchema,
    DailyProjectionSchema,
    DeliveryScheduleRequest,
    DeliveryScheduleResponse,
    HistorySummarySchema,
    PerformanceRowSchema,
    PlannedDeliverySchema,
    PlantParametersSchema,
    PredictionMetricsSchema,
    StockForecastRequest,
    StockForecastResponse,
    TrendAnalysisSchema,
)

__all__ = [
    "ColumnSummarySchema",
    "DailyProjectionSchema",
    "DeliveryScheduleRequest",
    "DeliveryScheduleResponse",
    "HistorySummarySchema",
    "PerformanceRowSchema",
    "PlannedDeliverySchema",
    "PlantParametersSchema",
    "PredictionMetricsSchema",
    "StockForecastRequest",
    "StockForecastResponse",
    "TrendAnalysisSchema",
]
