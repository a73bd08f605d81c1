from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, Dict, Any, List
from datetime import date, datetime
from decimal import Decimal

from ..models.notification import NotificationStatus, NotificationChannel, NotificationType
from ....utils.database_utils import to_local_naive


class CamelModel(BaseModel):
    """Entrada e saída em camelCase, aceitando também snake_case"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NotificationRecipient(CamelModel):
    recipient_id: str = Field(..., min_length=1, description="ID do destinatário (contato)")
    name: Optional[str] = Field(None, description="Nome exibido na mensagem")
    phone: Optional[str] = None
    email: Optional[str] = None
    language: Optional[str] = Field(None, description="Idioma do template (en, ar)")


class SendNotificationRequest(CamelModel):
    """Pedido de envio de uma notificação"""
    type: NotificationType
    recipient_id: str = Field(..., min_length=1)
    recipient_phone: Optional[str] = None
    recipient_email: Optional[str] = None
    recipient_name: Optional[str] = None
    language: Optional[str] = None

    template_data: Dict[str, Any] = Field(default_factory=dict, description="Variáveis do template")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Metadados livres (paymentId, contractId...)")

    channel: Optional[NotificationChannel] = Field(None, description="Força um canal específico")
    scheduled_for: Optional[datetime] = Field(None, description="Envio agendado (horário local)")
    dedup_key: Optional[str] = Field(None, description="Garante no máximo um envio por (tipo, chave)")

    @field_validator('scheduled_for')
    @classmethod
    def drop_timezone(cls, v):
        # Horários são gravados em hora local sem timezone
        if v is not None and v.tzinfo is not None:
            return to_local_naive(v)
        return v

    def for_recipient(self, recipient: NotificationRecipient) -> "SendNotificationRequest":
        """Cópia do pedido apontando para outro destinatário"""
        template_data = dict(self.template_data)
        if recipient.name and "tenantName" not in template_data:
            template_data["tenantName"] = recipient.name
        return self.model_copy(update={
            "recipient_id": recipient.recipient_id,
            "recipient_name": recipient.name,
            "recipient_phone": recipient.phone,
            "recipient_email": recipient.email,
            "language": recipient.language or self.language,
            "template_data": template_data,
            "metadata": dict(self.metadata),
            "dedup_key": f"{self.dedup_key}:{recipient.recipient_id}" if self.dedup_key else None,
        })


class SendNotificationResponse(CamelModel):
    success: bool
    notification_id: Optional[str] = None
    status: Optional[NotificationStatus] = None
    suppressed: bool = False
    duplicate: bool = False
    error: Optional[str] = None


class WhatsAppTestRequest(CamelModel):
    phone: str = Field(..., min_length=3)
    message: str = Field(..., min_length=1)
    name: Optional[str] = None


class PaymentReminderRequest(CamelModel):
    """Lembrete avulso montado a partir dos dados informados"""
    recipient_id: str
    phone: Optional[str] = None
    email: Optional[str] = None
    tenant_name: str
    unit_number: str
    building_name: Optional[str] = None
    amount: Decimal
    due_date: date
    days_until_due: Optional[int] = None
    payment_id: Optional[str] = None
    reminder_type: Optional[str] = Field(None, description="30d, 15d ou 5d")
    language: Optional[str] = None
    channel: Optional[NotificationChannel] = None


class ContractExpiringRequest(CamelModel):
    recipient_id: str
    phone: Optional[str] = None
    email: Optional[str] = None
    tenant_name: str
    unit_number: str
    building_name: Optional[str] = None
    current_rent: Decimal
    expiry_date: date
    days_remaining: Optional[int] = None
    contract_id: Optional[str] = None
    language: Optional[str] = None
    channel: Optional[NotificationChannel] = None


class AnnouncementRequest(CamelModel):
    recipients: List[NotificationRecipient]
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    channel: Optional[NotificationChannel] = None

    @model_validator(mode='after')
    def validate_recipients(self):
        if not self.recipients:
            raise ValueError('Pelo menos um destinatário deve ser informado')
        return self


class BulkSendResult(CamelModel):
    recipient_id: str
    success: bool
    notification_id: Optional[str] = None
    suppressed: bool = False
    error: Optional[str] = None


class BulkSendResponse(CamelModel):
    success: bool
    total: int
    sent: int
    failed: int
    notification_ids: List[str]
    results: List[BulkSendResult]


class NotificationResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    type: NotificationType
    channel: NotificationChannel
    status: NotificationStatus
    recipient_id: str
    recipient_phone: Optional[str] = None
    recipient_email: Optional[str] = None
    recipient_name: Optional[str] = None
    subject: Optional[str] = None
    message: str
    template_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="notification_metadata")
    scheduled_for: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    read_at: Optional[datetime] = None
    failed_at: Optional[datetime] = None
    failure_reason: Optional[str] = None
    retry_count: int = 0
    external_message_id: Optional[str] = None
    created_at: datetime


class NotificationListResponse(CamelModel):
    notifications: List[NotificationResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class NotificationStatsResponse(CamelModel):
    total: int
    by_status: Dict[str, int]
    by_channel: Dict[str, int]
    by_type: Dict[str, int]


class NotificationFilter(CamelModel):
    recipient_id: Optional[str] = None
    status: Optional[NotificationStatus] = None
    type: Optional[NotificationType] = None
    channel: Optional[NotificationChannel] = None


class TriggerResponse(CamelModel):
    success: bool = True
    message: str
