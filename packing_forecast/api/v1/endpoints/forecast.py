from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from packing_forecast.core.config import ForecastSettings, get_settings
from packing_forecast.core.forecasting import InvalidParameters
from packing_forecast.schemas import (
    DeliveryScheduleRequest,
    DeliveryScheduleResponse,
    StockForecastRequest,
    StockForecastResponse,
)
from packing_forecast.services.stock_forecast import build_delivery_schedule, build_stock_forecast


router = APIRouter()


@router.post("/stock", response_model=StockForecastResponse)
def stock_forecast(
    payload: StockForecastRequest,
    settings: ForecastSettings = Depends(get_settings),
) -> StockForecastResponse:
    if payload.month is not None and payload.year is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="month filter requires a year",
        )

    try:
        return build_stock_forecast(payload=payload, settings=settings)
    except InvalidParameters as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc


@router.post("/stock/deliveries", response_model=DeliveryScheduleResponse)
def stock_delivery_schedule(
    payload: DeliveryScheduleRequest,
    settings: ForecastSettings = Depends(get_settings),
) -> DeliveryScheduleResponse:
    return build_delivery_schedule(payload=payload, settings=settings)


@router.get("/settings", response_model=ForecastSettings)
def forecast_settings(settings: ForecastSettings = Depends(get_settings)) -> ForecastSettings:
    return settings
