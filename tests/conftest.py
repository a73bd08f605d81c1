import os

# Ambiente isolado antes de importar qualquer módulo do app
os.environ["RUNNING_IN_DOCKER"] = "1"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["WASENDER_API_KEY"] = ""

from datetime import datetime

import pytest

from app.database.db_connection import Base, SessionLocal, engine
from app.database.init_db import importar_models
from app.api.notifications.adapters.recipient_adapters import ContactRecipientAdapter
from app.api.notifications.channels.in_app_channel import InAppChannel
from app.api.notifications.repositories.notification_repository import NotificationRepository
from app.api.notifications.repositories.preference_repository import PreferenceRepository
from app.api.notifications.services.notification_service import NotificationService

from .factories import FakeChannel, FixedClock


@pytest.fixture
def db_session():
    importar_models()
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def whatsapp():
    return FakeChannel()


@pytest.fixture
def channels(whatsapp):
    return {
        "whatsapp": whatsapp,
        "email": FakeChannel("email", "recipient_email"),
        "sms": FakeChannel("sms"),
        "in_app": InAppChannel(),
    }


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 3, 10, 9, 0))


@pytest.fixture
def notification_service(db_session, channels, clock):
    return NotificationService(
        NotificationRepository(db_session),
        PreferenceRepository(db_session),
        recipient_provider=ContactRecipientAdapter(db_session),
        channels=channels,
        clock=clock,
        max_retries=3,
    )
