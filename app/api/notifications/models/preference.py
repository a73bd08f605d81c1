from sqlalchemy import Column, String, Boolean, DateTime
import uuid

from ....database.db_connection import Base
from ....utils.database_utils import now_trimmed

class NotificationPreference(Base):
    """Preferências de canal e de tipo por destinatário (ausência = tudo habilitado)"""
    __tablename__ = "notification_preferences"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    recipient_id = Column(String, nullable=False, unique=True, index=True)

    # Canais
    whatsapp_enabled = Column(Boolean, nullable=False, default=True)
    email_enabled = Column(Boolean, nullable=False, default=True)
    sms_enabled = Column(Boolean, nullable=False, default=False)
    in_app_enabled = Column(Boolean, nullable=False, default=True)

    # Tipos
    payment_reminders = Column(Boolean, nullable=False, default=True)
    contract_alerts = Column(Boolean, nullable=False, default=True)
    maintenance_updates = Column(Boolean, nullable=False, default=True)
    announcements = Column(Boolean, nullable=False, default=True)

    preferred_language = Column(String(5), nullable=True)

    created_at = Column(DateTime, default=now_trimmed)
    updated_at = Column(DateTime, default=now_trimmed, onupdate=now_trimmed)
