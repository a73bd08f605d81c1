from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, ForeignKey, TypeDecorator, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum
import uuid

from ....database.db_connection import Base
from ....utils.database_utils import now_trimmed

class EnumValueType(TypeDecorator):
    """TypeDecorator que força o SQLAlchemy a usar o valor do enum, não o nome"""
    impl = String
    cache_ok = True

    def __init__(self, enum_class, *args, **kwargs):
        self.enum_class = enum_class
        super().__init__(*args, **kwargs)

    def process_bind_param(self, value, dialect):
        """Converte enum para seu valor (string) antes de salvar no banco"""
        if value is None:
            return None
        if isinstance(value, self.enum_class):
            return value.value
        if hasattr(value, 'value'):
            return str(value.value).lower()
        return str(value).lower()

    def process_result_value(self, value, dialect):
        """Converte string do banco de volta para enum"""
        if value is None:
            return None
        return self.enum_class(value.lower())

class NotificationStatus(str, PyEnum):
    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"

class NotificationChannel(str, PyEnum):
    WHATSAPP = "whatsapp"
    EMAIL = "email"
    SMS = "sms"
    IN_APP = "in_app"

class NotificationType(str, PyEnum):
    PAYMENT_REMINDER = "payment_reminder"
    PAYMENT_RECEIVED = "payment_received"
    PAYMENT_OVERDUE = "payment_overdue"
    MONTHLY_UNPAID_SUMMARY = "monthly_unpaid_summary"
    CONTRACT_EXPIRING = "contract_expiring"
    CONTRACT_EXPIRED = "contract_expired"
    CONTRACT_RENEWED = "contract_renewed"
    MAINTENANCE_SCHEDULED = "maintenance_scheduled"
    MAINTENANCE_COMPLETED = "maintenance_completed"
    ANNOUNCEMENT = "announcement"
    WELCOME = "welcome"

# Transições permitidas da máquina de estados.
# FAILED -> SENT/FAILED acontece apenas pela varredura de reenvio, no mesmo registro.
ALLOWED_TRANSITIONS = {
    NotificationStatus.PENDING: {NotificationStatus.SENT, NotificationStatus.FAILED},
    NotificationStatus.FAILED: {NotificationStatus.SENT, NotificationStatus.FAILED},
    NotificationStatus.SENT: {NotificationStatus.DELIVERED, NotificationStatus.READ},
    NotificationStatus.DELIVERED: {NotificationStatus.READ},
    NotificationStatus.READ: set(),
}

def can_transition(current: NotificationStatus, target: NotificationStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, set())

class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (
        # Garante no máximo uma notificação por (tipo, chave de deduplicação)
        UniqueConstraint("type", "dedup_key", name="uq_notifications_type_dedup_key"),
        Index("idx_notifications_status_scheduled_for", "status", "scheduled_for"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    type = Column(EnumValueType(NotificationType), nullable=False, index=True)
    channel = Column(EnumValueType(NotificationChannel), nullable=False, index=True)
    status = Column(EnumValueType(NotificationStatus), nullable=False, default=NotificationStatus.PENDING, index=True)

    # Destinatário
    recipient_id = Column(String, nullable=False, index=True)
    recipient_phone = Column(String, nullable=True)
    recipient_email = Column(String, nullable=True)
    recipient_name = Column(String, nullable=True)

    # Conteúdo renderizado
    subject = Column(String, nullable=True)
    message = Column(Text, nullable=False)
    template_id = Column(String, nullable=True)
    template_data = Column(JSON, nullable=True)

    # Metadados livres (paymentId, reminderType, contractId...)
    notification_metadata = Column("metadata", JSON, nullable=True)
    dedup_key = Column(String, nullable=True)

    # Entrega
    scheduled_for = Column(DateTime, nullable=True)
    sent_at = Column(DateTime, nullable=True)
    delivered_at = Column(DateTime, nullable=True)
    read_at = Column(DateTime, nullable=True)
    failed_at = Column(DateTime, nullable=True)
    failure_reason = Column(Text, nullable=True)
    retry_count = Column(Integer, nullable=False, default=0)
    external_message_id = Column(String, nullable=True)

    created_at = Column(DateTime, default=now_trimmed, nullable=False)
    updated_at = Column(DateTime, default=now_trimmed, onupdate=now_trimmed, nullable=False)

    # Relacionamentos
    logs = relationship("NotificationLog", back_populates="notification", cascade="all, delete-orphan")

class NotificationLog(Base):
    __tablename__ = "notification_logs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    notification_id = Column(String, ForeignKey("notifications.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(EnumValueType(NotificationStatus), nullable=False)
    message = Column(Text, nullable=True)
    error_details = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=now_trimmed)

    # Relacionamentos
    notification = relationship("Notification", back_populates="logs")
