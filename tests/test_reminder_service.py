from datetime import date

import pytest

from app.api.billing.models.model_payment import PaymentStatus
from app.api.billing.repositories.contract_repository import ContractRepository
from app.api.billing.repositories.payment_repository import PaymentRepository
from app.api.notifications.models.notification import Notification, NotificationType
from app.api.notifications.services.reminder_service import ReminderService

from .factories import add_payment, create_contract


@pytest.fixture
def reminder_service(notification_service, db_session, clock):
    return ReminderService(
        notification_service,
        PaymentRepository(db_session),
        ContractRepository(db_session),
        clock=clock,
        catch_up=False,
        lookahead_days=31,
        expiry_notice_days=[60, 30],
    )


def notifications_of(db, notification_type):
    return db.query(Notification).filter(Notification.type == notification_type).all()


@pytest.mark.asyncio
async def test_payment_reminder_sent_once_per_tier(reminder_service, db_session, whatsapp):
    contract = create_contract(db_session, date(2026, 1, 1), date(2026, 12, 31), frequency="quarterly")
    payment = add_payment(db_session, contract, date(2026, 4, 9))

    first = await reminder_service.send_payment_reminders()
    second = await reminder_service.send_payment_reminders()

    assert (first.processed, first.sent) == (1, 1)
    assert (second.processed, second.sent) == (1, 0)
    reminders = notifications_of(db_session, NotificationType.PAYMENT_REMINDER)
    assert len(reminders) == 1
    assert reminders[0].dedup_key == f"{payment.id}:30d"
    assert reminders[0].notification_metadata["reminderType"] == "30d"
    assert reminders[0].notification_metadata["contractId"] == contract.id
    assert len(whatsapp.sent) == 1
    assert "A-101" in whatsapp.sent[0]["text"]


@pytest.mark.asyncio
async def test_monthly_contract_only_reminded_five_days_before(reminder_service, db_session):
    contract = create_contract(db_session, date(2026, 1, 1), date(2026, 12, 31), frequency="monthly")
    add_payment(db_session, contract, date(2026, 4, 9))
    close = add_payment(db_session, contract, date(2026, 3, 15))

    sweep = await reminder_service.send_payment_reminders()

    assert (sweep.processed, sweep.sent) == (2, 1)
    reminders = notifications_of(db_session, NotificationType.PAYMENT_REMINDER)
    assert [r.dedup_key for r in reminders] == [f"{close.id}:5d"]


@pytest.mark.asyncio
async def test_paid_and_far_payments_are_ignored(reminder_service, db_session):
    contract = create_contract(db_session, date(2026, 1, 1), date(2026, 12, 31), frequency="quarterly")
    add_payment(db_session, contract, date(2026, 4, 9), status=PaymentStatus.PAID.value)
    add_payment(db_session, contract, date(2026, 5, 25))

    sweep = await reminder_service.send_payment_reminders()

    assert sweep.processed == 0
    assert notifications_of(db_session, NotificationType.PAYMENT_REMINDER) == []


@pytest.mark.asyncio
async def test_catch_up_sends_missed_tier(notification_service, db_session, clock):
    service = ReminderService(
        notification_service,
        PaymentRepository(db_session),
        ContractRepository(db_session),
        clock=clock,
        catch_up=True,
    )
    contract = create_contract(db_session, date(2026, 1, 1), date(2026, 12, 31), frequency="yearly")
    payment = add_payment(db_session, contract, date(2026, 3, 22))

    sweep = await service.send_payment_reminders()

    assert sweep.sent == 1
    assert notifications_of(db_session, NotificationType.PAYMENT_REMINDER)[0].dedup_key == f"{payment.id}:15d"


@pytest.mark.asyncio
async def test_monthly_summary_groups_unpaid_by_contract(reminder_service, db_session, whatsapp):
    contract = create_contract(db_session, date(2025, 12, 1), date(2026, 11, 30))
    add_payment(db_session, contract, date(2026, 2, 1))
    add_payment(db_session, contract, date(2026, 1, 1))
    add_payment(db_session, contract, date(2026, 1, 15), status=PaymentStatus.PAID.value)
    add_payment(db_session, contract, date(2026, 3, 1))
    no_phone = create_contract(db_session, date(2025, 12, 1), date(2026, 11, 30), phone=None, name="No Phone")
    add_payment(db_session, no_phone, date(2026, 1, 1))

    first = await reminder_service.send_monthly_unpaid_summary()
    second = await reminder_service.send_monthly_unpaid_summary()

    assert (first.processed, first.sent) == (2, 1)
    assert second.sent == 0
    summaries = notifications_of(db_session, NotificationType.MONTHLY_UNPAID_SUMMARY)
    assert len(summaries) == 1
    summary = summaries[0]
    assert summary.dedup_key == f"{contract.id}:2026-03"
    assert len(summary.notification_metadata["paymentIds"]) == 2
    assert "1. 2026-01-01 - 1,000.00" in whatsapp.sent[0]["text"]
    assert "2. 2026-02-01 - 1,000.00" in whatsapp.sent[0]["text"]


@pytest.mark.asyncio
async def test_contract_expiry_notice_on_configured_days(reminder_service, db_session):
    expiring = create_contract(db_session, date(2025, 4, 10), date(2026, 4, 9))
    create_contract(db_session, date(2025, 4, 11), date(2026, 4, 10), name="Other")

    first = await reminder_service.send_contract_expiry_notices()
    second = await reminder_service.send_contract_expiry_notices()

    assert (first.processed, first.sent) == (1, 1)
    assert second.sent == 0
    notices = notifications_of(db_session, NotificationType.CONTRACT_EXPIRING)
    assert [n.dedup_key for n in notices] == [f"{expiring.id}:30d"]
