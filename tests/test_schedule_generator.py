from datetime import date
from decimal import Decimal

import pytest

from app.api.billing.exceptions import ScheduleGenerationError
from app.api.billing.services.schedule_generator import (
    MAX_SCHEDULE_ITERATIONS,
    amount_per_payment,
    generate_schedule,
    next_due_date,
    normalize_frequency,
)


def test_monthly_contract_for_one_year_has_twelve_payments():
    payments = generate_schedule(date(2026, 1, 1), date(2026, 12, 31), Decimal("12000"), "monthly")

    assert len(payments) == 12
    assert payments[0].due_date == date(2026, 1, 1)
    assert payments[-1].due_date == date(2026, 12, 1)
    assert all(p.amount == Decimal("1000.00") for p in payments)


def test_end_date_is_inclusive():
    payments = generate_schedule(date(2026, 1, 1), date(2026, 2, 1), Decimal("12000"), "monthly")
    assert [p.due_date for p in payments] == [date(2026, 1, 1), date(2026, 2, 1)]


def test_single_day_contract_has_one_payment():
    payments = generate_schedule(date(2026, 5, 5), date(2026, 5, 5), Decimal("1200"), "yearly")
    assert len(payments) == 1
    assert payments[0].amount == Decimal("1200.00")


def test_month_end_clamping_carries_forward():
    payments = generate_schedule(date(2026, 1, 31), date(2026, 4, 30), Decimal("12000"), "monthly")
    assert [p.due_date for p in payments] == [
        date(2026, 1, 31),
        date(2026, 2, 28),
        date(2026, 3, 28),
        date(2026, 4, 28),
    ]


def test_quarterly_and_semi_annual_steps():
    quarterly = generate_schedule(date(2026, 1, 15), date(2026, 12, 31), Decimal("40000"), "quarterly")
    assert [p.due_date.month for p in quarterly] == [1, 4, 7, 10]
    assert quarterly[0].amount == Decimal("10000.00")

    semi = generate_schedule(date(2026, 1, 15), date(2026, 12, 31), Decimal("40000"), "semi-annually")
    assert [p.due_date.month for p in semi] == [1, 7]
    assert semi[0].amount == Decimal("20000.00")


def test_weekly_three_weeks_lands_on_each_seventh_day():
    payments = generate_schedule(date(2025, 1, 1), date(2025, 1, 22), Decimal("52000"), "weekly")
    assert [p.due_date for p in payments] == [
        date(2025, 1, 1),
        date(2025, 1, 8),
        date(2025, 1, 15),
        date(2025, 1, 22),
    ]


def test_weekly_step_is_seven_days():
    payments = generate_schedule(date(2026, 1, 1), date(2026, 1, 31), Decimal("52000"), "weekly")
    assert len(payments) == 5
    assert payments[1].due_date == date(2026, 1, 8)
    assert payments[0].amount == Decimal("1000.00")


def test_unknown_or_missing_frequency_falls_back_to_monthly():
    assert normalize_frequency("fortnightly") == "monthly"
    assert normalize_frequency(None) == "monthly"
    assert normalize_frequency(" Quarterly ") == "quarterly"
    assert next_due_date(date(2026, 1, 10), "bogus") == date(2026, 2, 10)


def test_amount_is_rounded_half_up_to_cents():
    assert amount_per_payment(Decimal("10000"), "monthly") == Decimal("833.33")
    assert amount_per_payment("1000.05", "yearly") == Decimal("1000.05")
    assert amount_per_payment(Decimal("0.30"), "quarterly") == Decimal("0.08")


def test_end_before_start_raises():
    with pytest.raises(ScheduleGenerationError):
        generate_schedule(date(2026, 2, 1), date(2026, 1, 1), Decimal("1000"), "monthly", contract_id="c-1")


def test_runaway_schedule_is_rejected():
    with pytest.raises(ScheduleGenerationError) as exc:
        generate_schedule(date(2000, 1, 1), date(2030, 1, 1), Decimal("52000"), "weekly", contract_id="c-2")
    assert str(MAX_SCHEDULE_ITERATIONS) in str(exc.value)
    assert exc.value.contract_id == "c-2"


@pytest.mark.parametrize("frequency, per_year", [
    ("weekly", 52),
    ("monthly", 12),
    ("quarterly", 4),
    ("semi-annually", 2),
    ("yearly", 1),
])
def test_one_year_total_stays_within_rounding_of_rent(frequency, per_year):
    rent = Decimal("10000")
    end = date(2026, 12, 31) if frequency != "weekly" else date(2026, 12, 30)
    payments = generate_schedule(date(2026, 1, 1), end, rent, frequency)

    assert len(payments) == per_year
    total = sum(p.amount for p in payments)
    assert abs(total - rent) <= Decimal("0.01") * per_year


def test_monthly_rounding_drift_is_not_reconciled():
    payments = generate_schedule(date(2026, 1, 1), date(2026, 12, 31), Decimal("10000"), "monthly")
    assert sum(p.amount for p in payments) == Decimal("9999.96")
