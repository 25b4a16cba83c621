from __future__ import annotations

from datetime import date
from decimal import Decimal
from fractions import Fraction

import pytest

from packing_forecast.core.forecasting import (
    HistoricalStockEntry,
    filter_area_records,
    normalize_history,
)
from tests.test_utils import make_ledger_record, scenario_ledger


def test_normalize_history_parses_string_quantities():
    records = [
        {"date": "2024-01-01", "closing_stock": "150", "stock_out": "10", "stock_received": "0"},
        {"date": "2024-01-02", "closing_stock": 140, "stock_out": 12.5, "stock_received": "20"},
    ]

    entries = normalize_history(records)

    assert entries == [
        HistoricalStockEntry(date=date(2024, 1, 1), stock_level=150.0, consumption=10.0, arrivals=0.0),
        HistoricalStockEntry(date=date(2024, 1, 2), stock_level=140.0, consumption=12.5, arrivals=20.0),
    ]


@pytest.mark.parametrize(
    "record",
    [
        {"closing_stock": 10},
        {"date": None, "closing_stock": 10},
        {"date": "2024-1-1", "closing_stock": 10},
        {"date": "not-a-date", "closing_stock": 10},
        {"date": 20240101, "closing_stock": 10},
        42,
        None,
    ],
)
def test_normalize_history_drops_records_without_valid_date(record):
    """Records lacking a usable calendar day are dropped, never raised."""
    valid = make_ledger_record("2024-01-05", closing_stock=1)

    entries = normalize_history([record, valid])

    assert [e.date for e in entries] == [date(2024, 1, 5)]


def test_normalize_history_coerces_invalid_quantities_to_zero():
    records = [
        {
            "date": "2024-01-03",
            "closing_stock": "-5",
            "stock_out": float("nan"),
            "stock_received": "abc",
        },
        {
            "date": "2024-01-04",
            "closing_stock": float("inf"),
            "stock_out": None,
            "stock_received": "",
        },
    ]

    entries = normalize_history(records)

    assert len(entries) == 2
    for entry in entries:
        assert entry.stock_level == 0.0
        assert entry.consumption == 0.0
        assert entry.arrivals == 0.0


def test_normalize_history_truncates_time_of_day():
    entries = normalize_history(
        [{"date": "2024-01-03T08:15:00Z", "closing_stock": 7, "stock_out": 1, "stock_received": 0}]
    )

    assert entries[0].date == date(2024, 1, 3)


def test_normalize_history_is_idempotent(today):
    records = scenario_ledger(today) + [
        {"date": "bad"},
        {"date": "2024-01-20", "closing_stock": "-3", "stock_out": "x"},
    ]

    once = normalize_history(records)
    twice = normalize_history(once)

    assert twice == once


@pytest.mark.parametrize("raw", [None, "2024-01-01", 123])
def test_normalize_history_invalid_container_returns_empty(raw):
    assert normalize_history(raw) == []


def test_filter_area_records_selects_area_and_period():
    records = [
        make_ledger_record("2024-02-03", closing_stock=30, area="Packing A"),
        make_ledger_record("2024-01-31", closing_stock=10, area="Packing A"),
        make_ledger_record("2024-02-01", closing_stock=20, area="Packing A"),
        make_ledger_record("2024-02-02", closing_stock=99, area="Packing B"),
        make_ledger_record("2023-02-02", closing_stock=5, area="Packing A"),
        {"area": "Packing A"},
    ]

    all_a = filter_area_records(records, "Packing A")
    february = filter_area_records(records, "Packing A", year=2024, month=2)
    year_2024 = filter_area_records(records, "Packing A", year=2024)

    assert [r.closing_stock for r in all_a] == [5, 10, 20, 30]
    assert [r.date for r in february] == [date(2024, 2, 1), date(2024, 2, 3)]
    assert len(year_2024) == 3
    assert filter_area_records(records, "Unknown") == []


def test_normalize_history_accepts_decimal_and_fraction_quantities():
    entries = normalize_history(
        [
            {
                "date": "2024-01-03",
                "closing_stock": Decimal("120.5"),
                "stock_out": Fraction(21, 2),
                "stock_received": Decimal("NaN"),
            }
        ]
    )

    assert entries[0].stock_level == 120.5
    assert entries[0].consumption == 10.5
    assert entries[0].arrivals == 0.0
