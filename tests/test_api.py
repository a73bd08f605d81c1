from datetime import date, timedelta

import pytest
from dateutil.relativedelta import relativedelta
from fastapi.testclient import TestClient

from app.main import app
from app.database.db_connection import SessionLocal
from app.utils.database_utils import now_trimmed
from app.api.notifications.router.notification_router import get_channels
from app.api.notifications.workers.reminder_scheduler import ReminderScheduler

from .factories import add_payment, create_contract

client = TestClient(app)


@pytest.fixture(autouse=True)
def api_setup(db_session, channels):
    app.dependency_overrides[get_channels] = lambda: channels
    app.state.reminder_scheduler = ReminderScheduler(session_factory=SessionLocal, channels=channels)
    yield
    app.dependency_overrides.clear()
    app.state.reminder_scheduler = None


def send_payload(**overrides):
    payload = {
        "type": "payment_reminder",
        "recipientId": "tenant-1",
        "recipientPhone": "0501234567",
        "recipientName": "Sara",
        "templateData": {"amount": 1000, "unitNumber": "A-1", "dueDate": "2026-03-15", "daysUntilDue": 5},
    }
    payload.update(overrides)
    return payload


# ───────────────────────── raiz ─────────────────────────

def test_health_and_metrics():
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/health").json() == {"status": "healthy"}

    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "http_requests_total" in resp.text


# ───────────────────────── billing ─────────────────────────

def test_schedule_preview():
    resp = client.post("/api/billing/schedule/preview", json={
        "startDate": "2026-01-01",
        "endDate": "2026-12-31",
        "rentAmount": "12000",
        "paymentFrequency": "monthly",
    })

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["count"] == 12
    assert body["paymentsPerYear"] == 12
    assert float(body["amountPerPayment"]) == 1000.0
    assert float(body["totalAmount"]) == 12000.0
    assert body["payments"][1]["dueDate"] == "2026-02-01"


def test_schedule_preview_rejects_inverted_period():
    resp = client.post("/api/billing/schedule/preview", json={
        "startDate": "2026-12-31",
        "endDate": "2026-01-01",
        "rentAmount": "12000",
    })
    assert resp.status_code == 422
    assert resp.json()["success"] is False


def test_validation_errors_use_envelope():
    resp = client.post("/api/billing/schedule/preview", json={
        "startDate": "2026-01-01",
        "endDate": "2026-12-31",
        "rentAmount": "0",
    })
    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert body["errors"]


def test_create_schedule_once_and_list_with_view_status(db_session):
    start = now_trimmed().date() - relativedelta(months=2)
    contract = create_contract(db_session, start, start + relativedelta(months=12) - timedelta(days=1))

    created = client.post(f"/api/billing/contracts/{contract.id}/schedule")
    assert created.status_code == 201, created.text
    assert created.json()["count"] == 12

    again = client.post(f"/api/billing/contracts/{contract.id}/schedule")
    assert again.status_code == 409

    listed = client.get(f"/api/billing/contracts/{contract.id}/payments").json()
    assert listed["count"] == 12
    assert listed["payments"][0]["status"] == "overdue"
    assert listed["payments"][-1]["status"] == "pending"


def test_unknown_contract_returns_404():
    assert client.post("/api/billing/contracts/missing/schedule").status_code == 404
    assert client.get("/api/billing/contracts/missing/payments").status_code == 404


# ───────────────────────── notificações ─────────────────────────

def test_send_and_history(whatsapp):
    resp = client.post("/api/notifications/send", json=send_payload())

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["success"] is True
    assert body["status"] == "sent"
    assert len(whatsapp.sent) == 1

    history = client.get("/api/notifications/history", params={"recipientId": "tenant-1"}).json()
    assert history["total"] == 1
    assert history["totalPages"] == 1
    assert history["notifications"][0]["id"] == body["notificationId"]
    assert history["notifications"][0]["channel"] == "whatsapp"

    stats = client.get("/api/notifications/stats").json()
    assert stats["total"] == 1
    assert stats["byStatus"] == {"sent": 1}


def test_suppressed_send():
    client.put("/api/notifications/preferences", params={"recipientId": "tenant-1"}, json={"paymentReminders": False})

    body = client.post("/api/notifications/send", json=send_payload()).json()

    assert body["success"] is False
    assert body["notificationId"] is None
    assert body["suppressed"] is True


def test_send_without_template_returns_400():
    resp = client.post("/api/notifications/send", json=send_payload(type="contract_expired"))
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_whatsapp_test_message(whatsapp):
    resp = client.post("/api/notifications/test-whatsapp", json={"phone": "0501234567", "message": "ping"})
    assert resp.json()["success"] is True
    assert "ping" in whatsapp.sent[0]["text"]


def test_payment_reminder_endpoint_deduplicates(whatsapp):
    payload = {
        "recipientId": "tenant-1",
        "phone": "0501234567",
        "tenantName": "Sara",
        "unitNumber": "A-1",
        "amount": "1000",
        "dueDate": (now_trimmed().date() + timedelta(days=5)).isoformat(),
        "paymentId": "p-1",
        "reminderType": "5d",
    }
    first = client.post("/api/notifications/payment-reminder", json=payload).json()
    second = client.post("/api/notifications/payment-reminder", json=payload).json()

    assert first["success"] is True
    assert second["duplicate"] is True
    assert len(whatsapp.sent) == 1

    invalid = client.post("/api/notifications/payment-reminder", json={**payload, "reminderType": "7d"})
    assert invalid.status_code == 400


def test_contract_expiring_endpoint():
    resp = client.post("/api/notifications/contract-expiring", json={
        "recipientId": "tenant-1",
        "phone": "0501234567",
        "tenantName": "Sara",
        "unitNumber": "A-1",
        "currentRent": "12000",
        "expiryDate": "2026-12-31",
        "daysRemaining": 30,
        "contractId": "c-1",
    })
    assert resp.json()["success"] is True


def test_announcement_reports_each_recipient():
    resp = client.post("/api/notifications/announcement", json={
        "recipients": [
            {"recipientId": "tenant-1", "name": "Sara", "phone": "0501234567"},
            {"recipientId": "tenant-2", "name": "Omar"},
        ],
        "subject": "Water",
        "message": "Maintenance tomorrow",
    })

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["total"] == 2
    assert body["sent"] == 2
    assert len(body["notificationIds"]) == 2
    assert [r["recipientId"] for r in body["results"]] == ["tenant-1", "tenant-2"]


def test_announcement_requires_recipients():
    resp = client.post("/api/notifications/announcement", json={"recipients": [], "subject": "x", "message": "y"})
    assert resp.status_code == 422


def test_status_reports():
    sent = client.post("/api/notifications/send", json=send_payload()).json()
    pending = client.post(
        "/api/notifications/send",
        json=send_payload(scheduledFor=(now_trimmed() + timedelta(days=1)).isoformat()),
    ).json()

    delivered = client.put(f"/api/notifications/{sent['notificationId']}/delivered")
    assert delivered.status_code == 200
    assert delivered.json()["status"] == "delivered"

    read = client.put(f"/api/notifications/{sent['notificationId']}/read")
    assert read.json()["status"] == "read"

    assert client.put(f"/api/notifications/{pending['notificationId']}/read").status_code == 409
    assert client.put("/api/notifications/missing/read").status_code == 404


def test_preferences_defaults_and_update():
    defaults = client.get("/api/notifications/preferences", params={"recipientId": "tenant-9"}).json()
    assert defaults["whatsappEnabled"] is True
    assert defaults["smsEnabled"] is False

    updated = client.put(
        "/api/notifications/preferences",
        params={"recipientId": "tenant-9"},
        json={"smsEnabled": True, "preferredLanguage": "ar"},
    ).json()
    assert updated["smsEnabled"] is True
    assert updated["whatsappEnabled"] is True

    again = client.get("/api/notifications/preferences", params={"recipientId": "tenant-9"}).json()
    assert again["preferredLanguage"] == "ar"


def test_manual_trigger_runs_in_background_and_is_listed(db_session, whatsapp):
    today = now_trimmed().date()
    contract = create_contract(db_session, date(today.year - 1, 1, 1), today + timedelta(days=200), frequency="monthly")
    add_payment(db_session, contract, today + timedelta(days=5))

    resp = client.post("/api/notifications/trigger/payment-reminders")
    assert resp.status_code == 202
    assert resp.json()["success"] is True

    jobs = client.get("/api/notifications/jobs", params={"job": "payment_reminders"}).json()
    assert len(jobs) == 1
    assert jobs[0]["trigger"] == "manual"
    assert jobs[0]["status"] == "success"
    assert jobs[0]["sent"] == 1
    assert len(whatsapp.sent) == 1


@pytest.mark.parametrize("path", [
    "/trigger/monthly-summary",
    "/trigger/contract-expiry",
    "/trigger/process-pending",
    "/trigger/retry-failed",
])
def test_other_triggers_acknowledge(path):
    resp = client.post(f"/api/notifications{path}")
    assert resp.status_code == 202
