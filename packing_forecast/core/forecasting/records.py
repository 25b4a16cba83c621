from __future__ import annotations

import dataclasses
import datetime as dt
import math
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from packing_forecast.core.forecasting.domain import as_quantity


MIN_DATE_LENGTH = 10


def parse_calendar_day(value: Any) -> dt.date:
    """Parse a ledger date into a calendar day.

    Accepts `date`/`datetime` objects and strings of at least ten characters
    whose first ten characters are an ISO day (`YYYY-MM-DD`); any time
    component after the day is ignored.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str) or len(value) < MIN_DATE_LENGTH:
        raise ValueError("date must be a string of at least 10 characters")
    day_part = value.split("T")[0]
    if len(day_part) != MIN_DATE_LENGTH:
        raise ValueError(f"date {value!r} is not a calendar day")
    return dt.date.fromisoformat(day_part)


class RawStockRecord(BaseModel):
    """Strict view of one loosely typed stock ledger row.

    Quantities may arrive as numbers or strings; anything that is not a finite,
    non-negative number is read as 0. Field aliases also accept the canonical
    names of HistoricalStockEntry so normalized output can be parsed again.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    date: dt.date
    area: Optional[str] = None
    opening_stock: float = 0.0
    closing_stock: float = Field(
        0.0, validation_alias=AliasChoices("closing_stock", "stock_level")
    )
    stock_out: float = Field(0.0, validation_alias=AliasChoices("stock_out", "consumption"))
    stock_received: float = Field(
        0.0, validation_alias=AliasChoices("stock_received", "arrivals")
    )

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> dt.date:
        return parse_calendar_day(value)

    @field_validator("opening_stock", "closing_stock", "stock_out", "stock_received", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: Any) -> float:
        return as_quantity(value)

    @field_validator("area", mode="before")
    @classmethod
    def _coerce_area(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)


class MasterDataRecord(BaseModel):
    """Plant master data for one area.

    Values that cannot be read as finite numbers become None, leaving the
    fallback decision to the parameter resolver.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    area: Optional[str] = None
    current_stock: Optional[float] = None
    safety_stock: Optional[float] = None
    avg_daily_consumption: Optional[float] = None

    @field_validator("current_stock", "safety_stock", "avg_daily_consumption", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> Optional[float]:
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None

    @field_validator("area", mode="before")
    @classmethod
    def _coerce_area(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)


def _as_mapping(record: Any) -> Optional[Mapping[str, Any]]:
    if isinstance(record, Mapping):
        return record
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return dataclasses.asdict(record)
    if isinstance(record, BaseModel):
        return record.model_dump()
    return None


def parse_stock_record(record: Any) -> Optional[RawStockRecord]:
    """Return the parsed ledger row, or None when it has no usable date."""
    if isinstance(record, RawStockRecord):
        return record
    data = _as_mapping(record)
    if data is None:
        return None
    try:
        return RawStockRecord.model_validate(data)
    except ValidationError:
        return None


def parse_master_record(record: Any) -> Optional[MasterDataRecord]:
    if isinstance(record, MasterDataRecord):
        return record
    data = _as_mapping(record)
    if data is None:
        return None
    try:
        return MasterDataRecord.model_validate(data)
    except ValidationError:
        return None
