from typing import Callable, List, Optional, Dict, Any, Tuple
from datetime import datetime
import logging

from fastapi.encoders import jsonable_encoder

from ..channels.base_channel import BaseNotificationChannel, DeliveryResult
from ..channels.channel_factory import ChannelFactory
from ..contracts.notification_service_contract import INotificationService
from ..contracts.recipient_provider_contract import IRecipientProvider
from ..contracts.repository_contracts import INotificationRepository, IPreferenceRepository
from ..exceptions import (
    DuplicateNotificationError,
    InvalidStatusTransitionError,
    NotificationNotFoundError,
    TemplateNotFoundError,
)
from ..models.notification import (
    Notification,
    NotificationChannel,
    NotificationStatus,
    NotificationType,
    can_transition,
)
from ..models.preference import NotificationPreference
from ..schemas.dispatch_results import DispatchOutcome, SweepResult
from ..schemas.notification_schemas import (
    BulkSendResult,
    NotificationFilter,
    NotificationRecipient,
    NotificationStatsResponse,
    SendNotificationRequest,
)
from ..templates.renderer import get_template, render_template
from ....config.settings import (
    COMPANY_NAME,
    DEFAULT_LANGUAGE,
    NOTIFICATION_BATCH_LIMIT,
    NOTIFICATION_RETRY_ATTEMPTS,
)
from ....utils.database_utils import now_trimmed
from ....utils.prometheus_metrics import record_dispatch

logger = logging.getLogger(__name__)

# Tipo de notificação -> campo de preferência que o habilita
TYPE_PREFERENCE_FIELD = {
    NotificationType.PAYMENT_REMINDER: "payment_reminders",
    NotificationType.PAYMENT_RECEIVED: "payment_reminders",
    NotificationType.PAYMENT_OVERDUE: "payment_reminders",
    NotificationType.MONTHLY_UNPAID_SUMMARY: "payment_reminders",
    NotificationType.CONTRACT_EXPIRING: "contract_alerts",
    NotificationType.CONTRACT_EXPIRED: "contract_alerts",
    NotificationType.CONTRACT_RENEWED: "contract_alerts",
    NotificationType.MAINTENANCE_SCHEDULED: "maintenance_updates",
    NotificationType.MAINTENANCE_COMPLETED: "maintenance_updates",
    NotificationType.ANNOUNCEMENT: "announcements",
}

CHANNEL_PREFERENCE_FIELD = {
    NotificationChannel.WHATSAPP: "whatsapp_enabled",
    NotificationChannel.EMAIL: "email_enabled",
    NotificationChannel.SMS: "sms_enabled",
    NotificationChannel.IN_APP: "in_app_enabled",
}

class NotificationService(INotificationService):
    """Motor de envio: preferências, template, registro, canal e máquina de estados"""

    def __init__(
        self,
        notification_repo: INotificationRepository,
        preference_repo: IPreferenceRepository,
        recipient_provider: Optional[IRecipientProvider] = None,
        channels: Optional[Dict[str, BaseNotificationChannel]] = None,
        clock: Callable[[], datetime] = now_trimmed,
        max_retries: int = NOTIFICATION_RETRY_ATTEMPTS,
        batch_limit: int = NOTIFICATION_BATCH_LIMIT,
    ):
        self.notification_repo = notification_repo
        self.preference_repo = preference_repo
        self.recipient_provider = recipient_provider
        self.channels = channels if channels is not None else ChannelFactory.create_all()
        self.clock = clock
        self.max_retries = max_retries
        self.batch_limit = batch_limit

    # ───────────────────────── envio ─────────────────────────

    async def send_notification(self, request: SendNotificationRequest) -> Optional[str]:
        """Envia uma notificação; devolve o ID ou None quando suprimida"""
        outcome = await self.dispatch(request)
        return outcome.notification_id

    async def dispatch(self, request: SendNotificationRequest) -> DispatchOutcome:
        """
        Cria e, se não houver agendamento futuro, envia a notificação.

        Raises:
            TemplateNotFoundError: tipo sem template cadastrado
        """
        request = self._complete_recipient(request)
        preference = self.preference_repo.get_or_default(request.recipient_id)

        if not self._type_enabled(preference, request.type):
            logger.info(f"Notificação {request.type.value} suprimida pelas preferências de {request.recipient_id}")
            return DispatchOutcome(suppressed=True)

        channel = self._resolve_channel(request, preference)
        if channel is None:
            logger.info(f"Canal {request.channel.value} desabilitado para {request.recipient_id}; envio suprimido")
            return DispatchOutcome(suppressed=True)

        if request.dedup_key:
            existing = self.notification_repo.get_by_dedup_key(request.type, request.dedup_key)
            if existing:
                logger.info(f"Notificação {request.type.value} já registrada para a chave {request.dedup_key}")
                return DispatchOutcome(existing.id, existing.status, duplicate=True)

        language = request.language or preference.preferred_language or DEFAULT_LANGUAGE
        template = get_template(request.type, language)
        if not template:
            raise TemplateNotFoundError(request.type.value, language)

        # Horário já vencido: envio imediato, fora da varredura de pendentes
        scheduled_for = request.scheduled_for
        if scheduled_for and scheduled_for <= self.clock():
            scheduled_for = None

        variables = self._template_variables(request)
        subject = render_template(template.get("subject"), variables) or None
        body = render_template(template["body"], variables)

        notification_data = {
            "type": request.type,
            "channel": channel,
            "recipient_id": request.recipient_id,
            "recipient_phone": request.recipient_phone,
            "recipient_email": request.recipient_email,
            "recipient_name": request.recipient_name,
            "subject": subject,
            "message": body,
            "template_id": f"{request.type.value}:{language}",
            "template_data": jsonable_encoder(variables),
            "notification_metadata": jsonable_encoder(request.metadata) or None,
            "dedup_key": request.dedup_key,
            "scheduled_for": scheduled_for,
        }

        try:
            notification = self.notification_repo.create(notification_data)
        except DuplicateNotificationError:
            existing = self.notification_repo.get_by_dedup_key(request.type, request.dedup_key)
            return DispatchOutcome(
                existing.id if existing else None,
                existing.status if existing else None,
                duplicate=True,
            )

        self.notification_repo.add_log(notification.id, NotificationStatus.PENDING, f"Criada para o canal {channel.value}")

        if notification.scheduled_for:
            logger.info(f"Notificação {notification.id} agendada para {notification.scheduled_for.isoformat()}")
            return DispatchOutcome(notification.id, NotificationStatus.PENDING)

        result = await self.process_notification(notification)
        return DispatchOutcome(
            notification.id,
            notification.status,
            error=None if result.success else result.error,
        )

    async def process_notification(self, notification: Notification) -> DeliveryResult:
        """
        Faz uma tentativa de envio pelo canal da notificação.

        Exceções do canal nunca escapam: viram DeliveryResult(success=False).

        Raises:
            InvalidStatusTransitionError: notificação não está pending nem failed
        """
        if not can_transition(notification.status, NotificationStatus.SENT):
            raise InvalidStatusTransitionError(notification.id, notification.status.value, NotificationStatus.SENT.value)

        channel_key = notification.channel.value
        channel = self.channels.get(channel_key)
        if channel is None:
            result = DeliveryResult(False, error=f"Canal {channel_key} não configurado", retryable=False)
        else:
            address = channel.get_recipient_address(notification)
            if not address:
                result = DeliveryResult(
                    False,
                    error=f"Destinatário {notification.recipient_id} sem endereço para o canal {channel_key}",
                    retryable=False,
                )
            else:
                try:
                    result = await channel.deliver(address, notification.message, notification.subject)
                except Exception as e:
                    logger.exception(f"Erro inesperado no canal {channel_key} para a notificação {notification.id}")
                    result = DeliveryResult(False, error=f"Erro inesperado no canal {channel_key}: {e}")

        now = self.clock()
        attempt = notification.retry_count + 1
        if result.success:
            self.notification_repo.mark_sent(notification, now, result.message_id)
            self.notification_repo.add_log(
                notification.id,
                NotificationStatus.SENT,
                f"Enviada via {channel_key} na tentativa {attempt}",
                {"external_id": result.message_id},
            )
            record_dispatch(channel_key, NotificationStatus.SENT.value)
            logger.info(f"Notificação {notification.id} enviada com sucesso via {channel_key}")
        else:
            # Falha sem chance de sucesso esgota as tentativas de uma vez
            retry_count = attempt if result.retryable else max(attempt, self.max_retries)
            self.notification_repo.mark_failed(notification, now, result.error, retry_count)
            self.notification_repo.add_log(
                notification.id,
                NotificationStatus.FAILED,
                f"Tentativa {attempt} falhou: {result.error}",
                result.error_details,
            )
            record_dispatch(channel_key, NotificationStatus.FAILED.value)
            if retry_count >= self.max_retries:
                logger.error(f"Notificação {notification.id} falhou definitivamente após {attempt} tentativa(s): {result.error}")
            else:
                logger.warning(f"Notificação {notification.id} falhou, será tentada novamente: {result.error}")

        return result

    async def send_bulk_notifications(
        self,
        recipients: List[NotificationRecipient],
        request: SendNotificationRequest
    ) -> List[BulkSendResult]:
        """Envia para cada destinatário em ordem; a falha de um não interrompe os demais"""
        results: List[BulkSendResult] = []
        for recipient in recipients:
            try:
                outcome = await self.dispatch(request.for_recipient(recipient))
                error = outcome.error
                if outcome.suppressed:
                    error = "Envio suprimido pelas preferências do destinatário"
                results.append(BulkSendResult(
                    recipient_id=recipient.recipient_id,
                    success=outcome.success,
                    notification_id=outcome.notification_id,
                    suppressed=outcome.suppressed,
                    error=error,
                ))
            except Exception as e:
                logger.error(f"Erro ao enviar notificação em lote para {recipient.recipient_id}: {e}")
                results.append(BulkSendResult(recipient_id=recipient.recipient_id, success=False, error=str(e)))

        failed = sum(1 for r in results if not r.success)
        logger.info(f"Envio em lote concluído: {len(results) - failed} sucesso(s), {failed} falha(s)")
        return results

    # ───────────────────────── varreduras ─────────────────────────

    async def _process_batch(self, notifications: List[Notification]) -> SweepResult:
        sweep = SweepResult()
        for notification in notifications:
            sweep.processed += 1
            try:
                result = await self.process_notification(notification)
            except InvalidStatusTransitionError as e:
                logger.warning(str(e))
                continue
            except Exception as e:
                logger.error(f"Erro ao processar notificação {notification.id}: {e}")
                continue
            if result.success:
                sweep.sent += 1
        return sweep

    async def process_scheduled_notifications(self, limit: Optional[int] = None) -> SweepResult:
        """Processa pendentes cujo scheduled_for já chegou"""
        pending = self.notification_repo.get_due_pending(self.clock(), limit or self.batch_limit)
        sweep = await self._process_batch(pending)
        if sweep.processed:
            logger.info(f"Pendentes processadas: {sweep.processed}, enviadas: {sweep.sent}")
        return sweep

    async def retry_failed_notifications(self, limit: Optional[int] = None) -> SweepResult:
        """Tenta reenviar falhas com retry_count abaixo do limite"""
        failed = self.notification_repo.get_failed_retryable(self.max_retries, limit or self.batch_limit)
        sweep = await self._process_batch(failed)
        if sweep.processed:
            logger.info(f"Reenvios tentados: {sweep.processed}, enviados: {sweep.sent}")
        return sweep

    # ───────────────────────── status reportado ─────────────────────────

    def _transition(self, notification_id: str, target: NotificationStatus) -> Notification:
        notification = self.notification_repo.get_by_id(notification_id)
        if not notification:
            raise NotificationNotFoundError(f"Notificação {notification_id} não encontrada")
        if notification.status == target:
            return notification
        if not can_transition(notification.status, target):
            raise InvalidStatusTransitionError(notification_id, notification.status.value, target.value)
        return self.notification_repo.update_status(notification, target, self.clock())

    def mark_as_delivered(self, notification_id: str) -> Notification:
        return self._transition(notification_id, NotificationStatus.DELIVERED)

    def mark_as_read(self, notification_id: str) -> Notification:
        return self._transition(notification_id, NotificationStatus.READ)

    # ───────────────────────── consultas ─────────────────────────

    def get_notification_by_id(self, notification_id: str) -> Optional[Notification]:
        return self.notification_repo.get_by_id(notification_id)

    def get_notification_logs(self, notification_id: str):
        return self.notification_repo.get_logs(notification_id)

    def get_history(self, filters: NotificationFilter, page: int = 1, limit: int = 50) -> Tuple[List[Notification], int]:
        offset = (page - 1) * limit
        notifications = self.notification_repo.filter_notifications(filters, limit, offset)
        total = self.notification_repo.count_notifications(filters)
        return notifications, total

    def get_stats(self) -> NotificationStatsResponse:
        total, by_status, by_channel, by_type = self.notification_repo.get_stats()
        return NotificationStatsResponse(
            total=total,
            by_status=by_status,
            by_channel=by_channel,
            by_type=by_type,
        )

    def get_preferences(self, recipient_id: str) -> NotificationPreference:
        return self.preference_repo.get_or_default(recipient_id)

    def update_preferences(self, recipient_id: str, changes: Dict[str, Any]) -> NotificationPreference:
        return self.preference_repo.upsert(recipient_id, changes)

    # ───────────────────────── auxiliares ─────────────────────────

    def _complete_recipient(self, request: SendNotificationRequest) -> SendNotificationRequest:
        """Completa nome/telefone/email/idioma a partir do cadastro de contatos"""
        if not self.recipient_provider:
            return request
        if request.recipient_phone and request.recipient_email and request.recipient_name and request.language:
            return request

        recipient = self.recipient_provider.get_recipient_by_id(request.recipient_id)
        if not recipient:
            return request

        return request.model_copy(update={
            "recipient_phone": request.recipient_phone or recipient.phone,
            "recipient_email": request.recipient_email or recipient.email,
            "recipient_name": request.recipient_name or recipient.name,
            "language": request.language or recipient.language,
        })

    @staticmethod
    def _type_enabled(preference: NotificationPreference, notification_type: NotificationType) -> bool:
        field = TYPE_PREFERENCE_FIELD.get(notification_type)
        if field is None:
            return True
        return bool(getattr(preference, field))

    @staticmethod
    def _channel_enabled(preference: NotificationPreference, channel: NotificationChannel) -> bool:
        return bool(getattr(preference, CHANNEL_PREFERENCE_FIELD[channel]))

    def _channel_usable(self, preference: NotificationPreference, channel: NotificationChannel) -> bool:
        adapter = self.channels.get(channel.value)
        return self._channel_enabled(preference, channel) and adapter is not None and adapter.implemented

    def _resolve_channel(
        self,
        request: SendNotificationRequest,
        preference: NotificationPreference
    ) -> Optional[NotificationChannel]:
        """Canal forçado (None se desabilitado) ou o primeiro canal habilitado, implementado e com endereço; in-app por último"""
        if request.channel:
            return request.channel if self._channel_enabled(preference, request.channel) else None

        if self._channel_usable(preference, NotificationChannel.WHATSAPP) and request.recipient_phone:
            return NotificationChannel.WHATSAPP
        if self._channel_usable(preference, NotificationChannel.EMAIL) and request.recipient_email:
            return NotificationChannel.EMAIL
        if self._channel_usable(preference, NotificationChannel.SMS) and request.recipient_phone:
            return NotificationChannel.SMS
        return NotificationChannel.IN_APP

    @staticmethod
    def _template_variables(request: SendNotificationRequest) -> Dict[str, Any]:
        variables: Dict[str, Any] = {"companyName": COMPANY_NAME}
        if request.recipient_name:
            variables["tenantName"] = request.recipient_name
        variables.update(request.template_data)
        return variables
