from __future__ import annotations

from datetime import date

import pytest

from packing_forecast.core.forecasting import PlannedDelivery, generate_delivery_schedule


def test_weekly_schedule_over_thirty_days():
    deliveries = generate_delivery_schedule(date(2024, 1, 8), 30, avg_quantity=100, frequency_days=7)

    assert deliveries == [
        PlannedDelivery(arrival_date=date(2024, 1, 15), quantity=100.0),
        PlannedDelivery(arrival_date=date(2024, 1, 22), quantity=100.0),
        PlannedDelivery(arrival_date=date(2024, 1, 29), quantity=100.0),
        PlannedDelivery(arrival_date=date(2024, 2, 5), quantity=100.0),
    ]


def test_schedule_includes_delivery_on_last_horizon_day():
    deliveries = generate_delivery_schedule(date(2024, 1, 8), 14, avg_quantity=50, frequency_days=7)

    assert [d.arrival_date for d in deliveries] == [date(2024, 1, 15), date(2024, 1, 22)]


def test_schedule_defaults():
    deliveries = generate_delivery_schedule(date(2024, 1, 1), 7)

    assert deliveries == [PlannedDelivery(arrival_date=date(2024, 1, 8), quantity=100.0)]


def test_degenerate_schedules_are_empty():
    assert generate_delivery_schedule(date(2024, 1, 1), 30, frequency_days=0) == []
    assert generate_delivery_schedule(date(2024, 1, 1), 0) == []
    assert generate_delivery_schedule(date(2024, 1, 1), 5, frequency_days=7) == []


def test_negative_quantity_is_clamped():
    deliveries = generate_delivery_schedule(date(2024, 1, 1), 7, avg_quantity=-20)

    assert deliveries[0].quantity == 0.0


def test_whole_float_periods_are_accepted():
    assert generate_delivery_schedule(date(2024, 1, 1), 14.0, frequency_days=7.0) == (
        generate_delivery_schedule(date(2024, 1, 1), 14, frequency_days=7)
    )


@pytest.mark.parametrize(
    "horizon_days, frequency_days",
    [(30, 7.5), (30.5, 7), (30, "7"), (None, 7), (30, float("nan")), (30, True)],
)
def test_unusable_periods_yield_no_deliveries(horizon_days, frequency_days):
    assert generate_delivery_schedule(date(2024, 1, 1), horizon_days, frequency_days=frequency_days) == []
