from datetime import date

from app.api.notifications.services.reminder_policy import (
    ReminderTier,
    days_until,
    reminder_dedup_key,
    tier_for,
)


def test_monthly_contracts_only_get_the_five_day_reminder():
    assert tier_for(5, "monthly") == ReminderTier.DAYS_5
    assert tier_for(15, "monthly") is None
    assert tier_for(30, "Monthly") is None


def test_other_frequencies_get_all_three_tiers_on_the_exact_day():
    assert tier_for(30, "quarterly") == ReminderTier.DAYS_30
    assert tier_for(15, "yearly") == ReminderTier.DAYS_15
    assert tier_for(5, "weekly") == ReminderTier.DAYS_5
    assert tier_for(14, "quarterly") is None
    assert tier_for(0, "quarterly") is None


def test_catch_up_picks_tightest_tier_reached():
    assert tier_for(20, "quarterly", catch_up=True) == ReminderTier.DAYS_30
    assert tier_for(10, "quarterly", catch_up=True) == ReminderTier.DAYS_15
    assert tier_for(3, "quarterly", catch_up=True) == ReminderTier.DAYS_5
    assert tier_for(0, "quarterly", catch_up=True) == ReminderTier.DAYS_5
    assert tier_for(40, "quarterly", catch_up=True) is None
    assert tier_for(-1, "quarterly", catch_up=True) is None
    assert tier_for(20, "monthly", catch_up=True) is None


def test_helpers():
    assert days_until(date(2026, 4, 9), date(2026, 3, 10)) == 30
    assert ReminderTier.DAYS_15.days == 15
    assert reminder_dedup_key("p-1", ReminderTier.DAYS_5) == "p-1:5d"
