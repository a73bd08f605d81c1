import asyncio
from datetime import date, datetime

import pytest

from app.database.db_connection import SessionLocal
from app.api.notifications.models.notification import Notification, NotificationType
from app.api.notifications.repositories.job_run_repository import JobRunRepository
from app.api.notifications.workers.reminder_scheduler import (
    ALL_JOBS,
    JOB_MONTHLY_SUMMARY,
    JOB_PAYMENT_REMINDERS,
    TRIGGER_MANUAL,
    ReminderScheduler,
    is_last_day_of_month,
)

from .factories import add_payment, create_contract


def make_scheduler(channels, clock, **kwargs):
    return ReminderScheduler(session_factory=SessionLocal, clock=clock, channels=channels, **kwargs)


def test_last_day_of_month():
    assert is_last_day_of_month(date(2026, 2, 28))
    assert not is_last_day_of_month(date(2024, 2, 28))
    assert is_last_day_of_month(date(2026, 12, 31))
    assert not is_last_day_of_month(date(2026, 3, 30))


@pytest.mark.asyncio
async def test_manual_payment_reminders_record_job_run(db_session, channels, clock):
    contract = create_contract(db_session, date(2026, 1, 1), date(2026, 12, 31), frequency="monthly")
    add_payment(db_session, contract, date(2026, 3, 15))
    scheduler = make_scheduler(channels, clock)

    run = await scheduler.run_payment_reminders_now()

    assert run.status == "success"
    assert run.trigger == TRIGGER_MANUAL
    assert (run.processed, run.sent) == (1, 1)
    assert run.started_at == clock.now
    runs = JobRunRepository(db_session).list_recent(job=JOB_PAYMENT_REMINDERS)
    assert [r.id for r in runs] == [run.id]


@pytest.mark.asyncio
async def test_disabled_automatic_run_is_skipped_but_manual_runs(db_session, channels, clock):
    scheduler = make_scheduler(channels, clock, auto_payment_notifications=False)

    scheduled = await scheduler.run_payment_reminders()
    manual = await scheduler.run_payment_reminders_now()

    assert scheduled.status == "skipped"
    assert manual.status == "success"


@pytest.mark.asyncio
async def test_monthly_summary_only_acts_on_last_day(db_session, channels, clock):
    contract = create_contract(db_session, date(2025, 12, 1), date(2026, 11, 30))
    add_payment(db_session, contract, date(2026, 2, 1))
    scheduler = make_scheduler(channels, clock)

    assert await scheduler.run_monthly_summary() is None

    clock.now = datetime(2026, 3, 31, 9, 0)
    run = await scheduler.run_monthly_summary()

    assert run.status == "success"
    assert run.sent == 1
    assert JobRunRepository(db_session).list_recent(job=JOB_MONTHLY_SUMMARY)[0].id == run.id


@pytest.mark.asyncio
async def test_manual_monthly_summary_ignores_the_calendar(db_session, channels, clock):
    scheduler = make_scheduler(channels, clock, auto_monthly_summary=False)
    run = await scheduler.run_monthly_summary_now()
    assert run.status == "success"


@pytest.mark.asyncio
async def test_failing_job_is_recorded_as_error(db_session, channels, clock):
    scheduler = make_scheduler(channels, clock)

    async def boom(notifications, reminders):
        raise RuntimeError("boom")

    run = await scheduler._run_job(JOB_PAYMENT_REMINDERS, TRIGGER_MANUAL, boom)

    assert run.status == "error"
    assert run.error == "boom"
    assert run.finished_at == clock.now


@pytest.mark.asyncio
async def test_concurrent_triggers_are_serialized(db_session, channels, clock, whatsapp):
    contract = create_contract(db_session, date(2026, 1, 1), date(2026, 12, 31), frequency="quarterly")
    add_payment(db_session, contract, date(2026, 4, 9))
    scheduler = make_scheduler(channels, clock)

    first, second = await asyncio.gather(
        scheduler.run_payment_reminders_now(),
        scheduler.run_payment_reminders_now(),
    )

    assert first.status == second.status == "success"
    assert first.sent + second.sent == 1
    assert db_session.query(Notification).filter(Notification.type == NotificationType.PAYMENT_REMINDER).count() == 1
    assert len(whatsapp.sent) == 1


@pytest.mark.asyncio
async def test_start_registers_all_jobs(db_session, channels, clock):
    scheduler = make_scheduler(channels, clock)
    scheduler.start()
    try:
        status = scheduler.get_status()
        assert status["running"] is True
        assert sorted(job["id"] for job in status["jobs"]) == sorted(ALL_JOBS)
    finally:
        scheduler.stop()
    assert scheduler.running is False
