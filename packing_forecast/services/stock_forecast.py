from __future__ import annotations

import logging
from datetime import date

from packing_forecast.core.config import ForecastSettings
from packing_forecast.core.forecasting import (
    PlannedDelivery,
    aggregate_metrics,
    build_performance_rows,
    filter_area_records,
    generate_delivery_schedule,
    normalize_history,
    predict,
    resolve_parameters,
    summarize_column,
    summarize_history,
)
from packing_forecast.schemas import (
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
)


logger = logging.getLogger(__name__)

PERFORMANCE_SUMMARY_COLUMNS = ("actual_stock_out", "predicted_stock_out", "deviation", "closing_stock")


def _resolve_deliveries(
    payload: StockForecastRequest,
    settings: ForecastSettings,
    today: date,
    horizon_days: int,
) -> list[PlannedDelivery]:
    if payload.planned_deliveries is not None:
        return [
            PlannedDelivery(arrival_date=d.arrival_date, quantity=d.quantity)
            for d in payload.planned_deliveries
        ]

    quantity = (
        payload.delivery_quantity
        if payload.delivery_quantity is not None
        else settings.default_delivery_quantity
    )
    frequency = payload.delivery_frequency_days or settings.default_delivery_frequency_days
    return generate_delivery_schedule(
        start_date=today,
        horizon_days=horizon_days,
        avg_quantity=quantity,
        frequency_days=frequency,
    )


def build_stock_forecast(
    payload: StockForecastRequest,
    settings: ForecastSettings,
) -> StockForecastResponse:
    """Run the full forecast for one area.

    Raises InvalidParameters when the horizon or history window cannot be
    projected; everything else degrades to fallbacks or empty results.
    """

    today = payload.today or date.today()
    horizon_days = (
        payload.horizon_days if payload.horizon_days is not None else settings.default_horizon_days
    )
    history_window_days = (
        payload.history_window_days
        if payload.history_window_days is not None
        else settings.default_history_window_days
    )

    area_records = filter_area_records(payload.records, payload.area)
    history = normalize_history(area_records)
    parameters = resolve_parameters(payload.master_data, payload.area, settings)
    deliveries = _resolve_deliveries(payload, settings, today, horizon_days)

    result = predict(
        history=history,
        deliveries=deliveries,
        parameters=parameters,
        horizon_days=horizon_days,
        history_window_days=history_window_days,
        today=today,
    )
    metrics = aggregate_metrics(result, parameters)

    performance = build_performance_rows(
        raw_records=area_records,
        area=payload.area,
        dates=[row.date for row in result.prognosis_data],
        fallback=parameters.avg_daily_consumption,
        settings=settings,
    )
    performance_summary = {
        column: ColumnSummarySchema.model_validate(
            summarize_column(getattr(row, column) for row in performance)
        )
        for column in PERFORMANCE_SUMMARY_COLUMNS
    }

    if payload.year is not None:
        period_records = filter_area_records(
            area_records, payload.area, year=payload.year, month=payload.month
        )
    else:
        period_records = area_records
    history_summary = summarize_history(period_records)

    if history_summary.not_enough_data:
        logger.info("Not enough recorded stock data for area %s in the selected period", payload.area)

    logger.info(
        "Stock forecast for area %s: rows=%s, deliveries=%s, critical_stock_date=%s",
        payload.area,
        len(result.prognosis_data),
        len(deliveries),
        result.critical_stock_date,
    )

    return StockForecastResponse(
        area=payload.area,
        today=today,
        horizon_days=horizon_days,
        history_window_days=history_window_days,
        parameters=PlantParametersSchema.model_validate(parameters),
        planned_deliveries=[PlannedDeliverySchema.model_validate(d) for d in deliveries],
        prognosis_data=[DailyProjectionSchema.model_validate(row) for row in result.prognosis_data],
        critical_stock_date=result.critical_stock_date,
        metrics=PredictionMetricsSchema.model_validate(metrics),
        performance=[PerformanceRowSchema.model_validate(row) for row in performance],
        performance_summary=performance_summary,
        history_summary=HistorySummarySchema.model_validate(history_summary),
    )


def build_delivery_schedule(
    payload: DeliveryScheduleRequest,
    settings: ForecastSettings,
) -> DeliveryScheduleResponse:
    quantity = (
        payload.avg_quantity
        if payload.avg_quantity is not None
        else settings.default_delivery_quantity
    )
    deliveries = generate_delivery_schedule(
        start_date=payload.start_date,
        horizon_days=payload.horizon_days,
        avg_quantity=quantity,
        frequency_days=payload.frequency_days or settings.default_delivery_frequency_days,
    )
    return DeliveryScheduleResponse(
        start_date=payload.start_date,
        items=[PlannedDeliverySchema.model_validate(d) for d in deliveries],
    )
