from datetime import date, datetime
from decimal import Decimal

from app.api.notifications.models.notification import NotificationType
from app.api.notifications.schemas.template_payloads import (
    MonthlyUnpaidSummaryData,
    PaymentReminderData,
    UnpaidItem,
)
from app.api.notifications.templates.renderer import format_value, get_template, render_template


def test_every_catalogue_entry_has_english_and_arabic():
    for notification_type in (
        NotificationType.PAYMENT_REMINDER,
        NotificationType.PAYMENT_RECEIVED,
        NotificationType.PAYMENT_OVERDUE,
        NotificationType.MONTHLY_UNPAID_SUMMARY,
        NotificationType.CONTRACT_EXPIRING,
        NotificationType.CONTRACT_RENEWED,
        NotificationType.WELCOME,
        NotificationType.MAINTENANCE_SCHEDULED,
        NotificationType.ANNOUNCEMENT,
    ):
        assert get_template(notification_type, "en")["body"]
        assert get_template(notification_type, "ar")["body"]


def test_unknown_language_falls_back_to_english():
    assert get_template("payment_reminder", "fr") == get_template("payment_reminder", "en")
    assert get_template("payment_reminder", None) == get_template("payment_reminder", "en")


def test_unknown_type_has_no_template():
    assert get_template("does_not_exist", "en") is None
    assert get_template(NotificationType.CONTRACT_EXPIRED, "en") is None


def test_format_value():
    assert format_value(date(2026, 3, 1)) == "2026-03-01"
    assert format_value(datetime(2026, 3, 1, 10, 30)) == "2026-03-01"
    assert format_value(12000) == "12,000"
    assert format_value(Decimal("1234.5")) == "1,234.50"
    assert format_value("text") == "text"


def test_render_replaces_known_and_keeps_unknown_placeholders():
    body = "Hi {{tenantName}}, pay {{ amount }} by {{dueDate}} ({{missing}})"
    rendered = render_template(body, {"tenantName": "Sara", "amount": Decimal("1500"), "dueDate": date(2026, 4, 1)})
    assert rendered == "Hi Sara, pay 1,500.00 by 2026-04-01 ({{missing}})"


def test_render_empty_body():
    assert render_template(None, {"a": 1}) == ""


def test_payment_reminder_payload_variables():
    payload = PaymentReminderData(
        tenant_name="Sara",
        unit_number="B-2",
        amount=Decimal("1000"),
        due_date=date(2026, 4, 1),
        days_until_due=5,
    )
    variables = payload.to_variables()
    assert variables["tenantName"] == "Sara"
    assert variables["daysUntilDue"] == 5
    assert variables["buildingName"] == ""

    body = render_template(get_template("payment_reminder", "en")["body"], variables)
    assert "1,000.00" in body
    assert "2026-04-01" in body
    assert "{{tenantName}}" not in body


def test_monthly_summary_lists_items_sorted_by_due_date():
    payload = MonthlyUnpaidSummaryData(
        tenant_name="Sara",
        unit_number="B-2",
        items=[
            UnpaidItem(due_date=date(2026, 2, 1), amount=Decimal("1000")),
            UnpaidItem(due_date=date(2026, 1, 1), amount=Decimal("1000")),
        ],
    )
    variables = payload.to_variables()
    assert variables["paymentCount"] == 2
    assert variables["totalAmount"] == Decimal("2000")
    assert variables["paymentList"] == "1. 2026-01-01 - 1,000.00\n2. 2026-02-01 - 1,000.00"
