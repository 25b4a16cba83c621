from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Optional

from packing_forecast.core.forecasting.domain import HistoricalStockEntry
from packing_forecast.core.forecasting.records import RawStockRecord, parse_stock_record


logger = logging.getLogger(__name__)


def _iter_records(raw_records: Any) -> Iterable[Any]:
    if raw_records is None or isinstance(raw_records, (str, bytes)) or not isinstance(
        raw_records, Iterable
    ):
        logger.warning(
            "Invalid stock records provided (%s), returning empty history",
            type(raw_records).__name__,
        )
        return ()
    return raw_records


def normalize_history(raw_records: Any) -> list[HistoricalStockEntry]:
    """Convert raw ledger rows into HistoricalStockEntry values.

    Rows without a usable calendar day are dropped; quantities that are not
    finite, non-negative numbers are read as 0. Input order is preserved.
    Applying the function to its own output returns an equal list.
    """

    entries: list[HistoricalStockEntry] = []
    dropped = 0

    for record in _iter_records(raw_records):
        parsed = parse_stock_record(record)
        if parsed is None:
            dropped += 1
            continue
        entries.append(
            HistoricalStockEntry(
                date=parsed.date,
                stock_level=parsed.closing_stock,
                consumption=parsed.stock_out,
                arrivals=parsed.stock_received,
            )
        )

    if dropped:
        logger.debug("Dropped %s stock records without a valid date", dropped)

    return entries


def filter_area_records(
    raw_records: Any,
    area: str,
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> list[RawStockRecord]:
    """Return parsed ledger rows of one area, sorted by date.

    `month` is 1-12 and is only applied together with `year`, matching how the
    dashboard selects a reporting period.
    """

    selected: list[RawStockRecord] = []
    for record in _iter_records(raw_records):
        parsed = parse_stock_record(record)
        if parsed is None or parsed.area != area:
            continue
        if year is not None and parsed.date.year != year:
            continue
        if year is not None and month is not None and parsed.date.month != month:
            continue
        selected.append(parsed)

    selected.sort(key=lambda r: r.date)
    return selected
