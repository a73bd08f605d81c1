from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from functools import lru_cache
from typing import Dict, Optional
import logging

from ....database.db_connection import get_db
from ....utils.database_utils import now_trimmed
from ..adapters.recipient_adapters import ContactRecipientAdapter
from ..channels.base_channel import BaseNotificationChannel
from ..channels.channel_factory import ChannelFactory
from ..exceptions import InvalidStatusTransitionError, NotificationNotFoundError, TemplateNotFoundError
from ..models.notification import NotificationChannel, NotificationStatus, NotificationType
from ..repositories.notification_repository import NotificationRepository
from ..repositories.preference_repository import PreferenceRepository
from ..schemas.dispatch_results import DispatchOutcome
from ..schemas.notification_schemas import (
    AnnouncementRequest,
    BulkSendResponse,
    ContractExpiringRequest,
    NotificationFilter,
    NotificationListResponse,
    NotificationResponse,
    NotificationStatsResponse,
    PaymentReminderRequest,
    SendNotificationRequest,
    SendNotificationResponse,
    WhatsAppTestRequest,
)
from ..schemas.preference_schemas import PreferenceResponse, PreferenceUpdateRequest
from ..schemas.template_payloads import AnnouncementData, ContractExpiringData, PaymentReminderData
from ..services.notification_service import NotificationService
from ..services.reminder_policy import ReminderTier, reminder_dedup_key

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])


@lru_cache()
def get_channels() -> Dict[str, BaseNotificationChannel]:
    """Canais instanciados uma vez por processo"""
    return ChannelFactory.create_all()


def get_notification_service(
    db: Session = Depends(get_db),
    channels: Dict[str, BaseNotificationChannel] = Depends(get_channels),
) -> NotificationService:
    """Dependency para obter o serviço de notificações"""
    return NotificationService(
        NotificationRepository(db),
        PreferenceRepository(db),
        recipient_provider=ContactRecipientAdapter(db),
        channels=channels,
    )


def _to_send_response(outcome: DispatchOutcome) -> SendNotificationResponse:
    return SendNotificationResponse(
        success=outcome.success,
        notification_id=outcome.notification_id,
        status=outcome.status,
        suppressed=outcome.suppressed,
        duplicate=outcome.duplicate,
        error=outcome.error,
    )


async def _dispatch(service: NotificationService, request: SendNotificationRequest) -> SendNotificationResponse:
    try:
        outcome = await service.dispatch(request)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _to_send_response(outcome)


@router.post("/send", response_model=SendNotificationResponse)
async def send_notification(
    request: SendNotificationRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Envia uma notificação (imediata ou agendada)"""
    return await _dispatch(service, request)


@router.post("/test-whatsapp", response_model=SendNotificationResponse)
async def send_test_whatsapp(
    request: WhatsAppTestRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Mensagem de teste por WhatsApp para um telefone"""
    payload = AnnouncementData(tenant_name=request.name or "Test", subject="Test", message=request.message)
    notification_request = SendNotificationRequest(
        type=NotificationType.ANNOUNCEMENT,
        recipient_id=f"test:{request.phone}",
        recipient_phone=request.phone,
        recipient_name=payload.tenant_name,
        channel=NotificationChannel.WHATSAPP,
        template_data=payload.to_variables(),
        metadata={"test": True},
    )
    return await _dispatch(service, notification_request)


@router.post("/payment-reminder", response_model=SendNotificationResponse)
async def send_payment_reminder(
    request: PaymentReminderRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Lembrete de pagamento avulso"""
    days = request.days_until_due
    if days is None:
        days = (request.due_date - now_trimmed().date()).days

    payload = PaymentReminderData(
        tenant_name=request.tenant_name,
        unit_number=request.unit_number,
        building_name=request.building_name,
        amount=request.amount,
        due_date=request.due_date,
        days_until_due=days,
    )
    metadata = {"daysUntilDue": days}
    dedup_key = None
    if request.payment_id:
        metadata["paymentId"] = request.payment_id
    if request.reminder_type:
        try:
            tier = ReminderTier(request.reminder_type)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"reminderType inválido: {request.reminder_type}")
        metadata["reminderType"] = tier.value
        if request.payment_id:
            dedup_key = reminder_dedup_key(request.payment_id, tier)

    notification_request = SendNotificationRequest(
        type=NotificationType.PAYMENT_REMINDER,
        recipient_id=request.recipient_id,
        recipient_phone=request.phone,
        recipient_email=request.email,
        recipient_name=request.tenant_name,
        language=request.language,
        channel=request.channel,
        template_data=payload.to_variables(),
        metadata=metadata,
        dedup_key=dedup_key,
    )
    return await _dispatch(service, notification_request)


@router.post("/contract-expiring", response_model=SendNotificationResponse)
async def send_contract_expiring(
    request: ContractExpiringRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Aviso avulso de término de contrato"""
    days = request.days_remaining
    if days is None:
        days = (request.expiry_date - now_trimmed().date()).days

    payload = ContractExpiringData(
        tenant_name=request.tenant_name,
        unit_number=request.unit_number,
        building_name=request.building_name,
        current_rent=request.current_rent,
        expiry_date=request.expiry_date,
        days_remaining=days,
    )
    metadata = {"daysRemaining": days}
    if request.contract_id:
        metadata["contractId"] = request.contract_id

    notification_request = SendNotificationRequest(
        type=NotificationType.CONTRACT_EXPIRING,
        recipient_id=request.recipient_id,
        recipient_phone=request.phone,
        recipient_email=request.email,
        recipient_name=request.tenant_name,
        language=request.language,
        channel=request.channel,
        template_data=payload.to_variables(),
        metadata=metadata,
    )
    return await _dispatch(service, notification_request)


@router.post("/announcement", response_model=BulkSendResponse)
async def send_announcement(
    request: AnnouncementRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Comunicado em lote; falhas individuais não interrompem o envio"""
    base_request = SendNotificationRequest(
        type=NotificationType.ANNOUNCEMENT,
        recipient_id=request.recipients[0].recipient_id,
        channel=request.channel,
        template_data={"subject": request.subject, "message": request.message},
        metadata={"announcement": True},
    )
    results = await service.send_bulk_notifications(request.recipients, base_request)
    sent = sum(1 for r in results if r.success)
    return BulkSendResponse(
        success=sent > 0,
        total=len(results),
        sent=sent,
        failed=len(results) - sent,
        notification_ids=[r.notification_id for r in results if r.notification_id],
        results=results,
    )


@router.get("/history", response_model=NotificationListResponse)
def get_history(
    recipient_id: Optional[str] = Query(None, alias="recipientId", description="ID do destinatário"),
    status: Optional[NotificationStatus] = Query(None, description="Status da notificação"),
    type: Optional[NotificationType] = Query(None, description="Tipo da notificação"),
    channel: Optional[NotificationChannel] = Query(None, description="Canal"),
    page: int = Query(1, ge=1, description="Página"),
    limit: int = Query(50, ge=1, le=100, description="Itens por página"),
    service: NotificationService = Depends(get_notification_service),
):
    """Histórico paginado de notificações"""
    filters = NotificationFilter(recipient_id=recipient_id, status=status, type=type, channel=channel)
    notifications, total = service.get_history(filters, page, limit)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        total=total,
        page=page,
        limit=limit,
        total_pages=(total + limit - 1) // limit,
    )


@router.get("/stats", response_model=NotificationStatsResponse)
def get_stats(service: NotificationService = Depends(get_notification_service)):
    """Contagens por status, canal e tipo"""
    return service.get_stats()


@router.get("/preferences", response_model=PreferenceResponse)
def get_preferences(
    recipient_id: str = Query(..., alias="recipientId"),
    service: NotificationService = Depends(get_notification_service),
):
    """Preferências do destinatário (padrão quando não há registro)"""
    return PreferenceResponse.model_validate(service.get_preferences(recipient_id))


@router.put("/preferences", response_model=PreferenceResponse)
def update_preferences(
    request: PreferenceUpdateRequest,
    recipient_id: str = Query(..., alias="recipientId"),
    service: NotificationService = Depends(get_notification_service),
):
    """Atualiza as preferências informadas"""
    changes = request.model_dump(exclude_none=True)
    return PreferenceResponse.model_validate(service.update_preferences(recipient_id, changes))


def _report_status(service: NotificationService, notification_id: str, target: NotificationStatus) -> NotificationResponse:
    try:
        if target == NotificationStatus.READ:
            notification = service.mark_as_read(notification_id)
        else:
            notification = service.mark_as_delivered(notification_id)
    except NotificationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return NotificationResponse.model_validate(notification)


@router.put("/{notification_id}/read", response_model=NotificationResponse)
def mark_as_read(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    """Marca a notificação como lida"""
    return _report_status(service, notification_id, NotificationStatus.READ)


@router.put("/{notification_id}/delivered", response_model=NotificationResponse)
def mark_as_delivered(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    """Marca a notificação como entregue (reportado pelo canal)"""
    return _report_status(service, notification_id, NotificationStatus.DELIVERED)
