"""
Lembretes automáticos gerados a partir das parcelas e contratos.

Cada lembrete leva uma chave de deduplicação, então rodar a mesma varredura
duas vezes (agendada + manual) não gera um segundo envio.
"""
from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional
import logging

from .notification_service import NotificationService
from .reminder_policy import days_until, reminder_dedup_key, tier_for
from ..models.notification import NotificationChannel, NotificationType
from ..schemas.dispatch_results import DispatchOutcome, SweepResult
from ..schemas.notification_schemas import SendNotificationRequest
from ..schemas.template_payloads import (
    ContractExpiringData,
    MonthlyUnpaidSummaryData,
    PaymentReminderData,
    UnpaidItem,
)
from ...billing.repositories.contract_repository import ContractRepository
from ...billing.repositories.payment_repository import PaymentRepository, PaymentWithDetails
from ....config.settings import (
    CONTRACT_EXPIRY_NOTICE_DAYS,
    REMINDER_CATCH_UP,
    REMINDER_LOOKAHEAD_DAYS,
)
from ....utils.database_utils import now_trimmed

logger = logging.getLogger(__name__)


def monthly_summary_dedup_key(contract_id: str, today: date) -> str:
    return f"{contract_id}:{today:%Y-%m}"


def contract_expiry_dedup_key(contract_id: str, days: int) -> str:
    return f"{contract_id}:{days}d"


class ReminderService:
    """Varreduras de lembretes de pagamento, resumo mensal e vencimento de contrato"""

    def __init__(
        self,
        notification_service: NotificationService,
        payment_repo: PaymentRepository,
        contract_repo: ContractRepository,
        clock: Callable[[], datetime] = now_trimmed,
        catch_up: bool = REMINDER_CATCH_UP,
        lookahead_days: int = REMINDER_LOOKAHEAD_DAYS,
        expiry_notice_days: Optional[List[int]] = None,
    ):
        self.notification_service = notification_service
        self.payment_repo = payment_repo
        self.contract_repo = contract_repo
        self.clock = clock
        self.catch_up = catch_up
        self.lookahead_days = lookahead_days
        self.expiry_notice_days = expiry_notice_days if expiry_notice_days is not None else CONTRACT_EXPIRY_NOTICE_DAYS

    # ───────────────────────── lembretes de pagamento ─────────────────────────

    async def send_payment_reminders(self) -> SweepResult:
        """Parcelas pendentes dos próximos dias: aplica a política e envia o lembrete da faixa"""
        today = self.clock().date()
        rows = self.payment_repo.get_upcoming_payments_with_details(today, self.lookahead_days)
        logger.info(f"Verificando lembretes de pagamento: {len(rows)} parcela(s) até {self.lookahead_days} dias")

        sweep = SweepResult()
        for row in rows:
            sweep.processed += 1
            try:
                outcome = await self.send_payment_reminder(row, today)
            except Exception as e:
                logger.error(f"Erro ao processar lembrete da parcela {row.payment.id}: {e}")
                continue
            if outcome and outcome.success and not outcome.duplicate:
                sweep.sent += 1

        logger.info(f"Lembretes de pagamento: {sweep.processed} parcela(s) verificada(s), {sweep.sent} enviado(s)")
        return sweep

    async def send_payment_reminder(self, row: PaymentWithDetails, today: date) -> Optional[DispatchOutcome]:
        """Envia o lembrete de uma parcela se a política indicar uma faixa para hoje"""
        payment, contract, contact, unit = row
        days = days_until(payment.due_date, today)
        tier = tier_for(days, contract.payment_frequency, catch_up=self.catch_up)
        if tier is None:
            return None

        payload = PaymentReminderData(
            tenant_name=contact.full_name,
            unit_number=unit.unit_number,
            building_name=unit.building_name,
            amount=payment.amount,
            due_date=payment.due_date,
            days_until_due=days,
        )
        request = SendNotificationRequest(
            type=NotificationType.PAYMENT_REMINDER,
            recipient_id=contact.id,
            recipient_phone=contact.phone,
            recipient_email=contact.email,
            recipient_name=contact.full_name,
            language=contact.preferred_language,
            template_data=payload.to_variables(),
            metadata={
                "paymentId": payment.id,
                "reminderType": tier.value,
                "contractId": contract.id,
                "daysUntilDue": days,
            },
            dedup_key=reminder_dedup_key(payment.id, tier),
        )
        outcome = await self.notification_service.dispatch(request)
        if outcome.duplicate:
            logger.debug(f"Lembrete {tier.value} da parcela {payment.id} já enviado")
        return outcome

    # ───────────────────────── resumo mensal ─────────────────────────

    async def send_monthly_unpaid_summary(self) -> SweepResult:
        """Um resumo por contrato com as parcelas em aberto vencidas antes do mês corrente"""
        today = self.clock().date()
        cutoff = today.replace(day=1)
        rows = self.payment_repo.get_unpaid_due_before_with_details(cutoff)

        by_contract: "OrderedDict[str, List[PaymentWithDetails]]" = OrderedDict()
        for row in rows:
            by_contract.setdefault(row.contract.id, []).append(row)

        sweep = SweepResult()
        for contract_id, items in by_contract.items():
            sweep.processed += 1
            contact = items[0].contact
            if not contact.phone:
                logger.info(f"Contrato {contract_id}: contato sem telefone, resumo mensal ignorado")
                continue

            payload = MonthlyUnpaidSummaryData(
                tenant_name=contact.full_name,
                unit_number=items[0].unit.unit_number,
                items=[UnpaidItem(due_date=i.payment.due_date, amount=i.payment.amount) for i in items],
            )
            request = SendNotificationRequest(
                type=NotificationType.MONTHLY_UNPAID_SUMMARY,
                channel=NotificationChannel.WHATSAPP,
                recipient_id=contact.id,
                recipient_phone=contact.phone,
                recipient_email=contact.email,
                recipient_name=contact.full_name,
                language=contact.preferred_language,
                template_data=payload.to_variables(),
                metadata={
                    "contractId": contract_id,
                    "month": f"{today:%Y-%m}",
                    "paymentIds": [i.payment.id for i in items],
                    "totalAmount": str(payload.total_amount),
                },
                dedup_key=monthly_summary_dedup_key(contract_id, today),
            )
            try:
                outcome = await self.notification_service.dispatch(request)
            except Exception as e:
                logger.error(f"Erro ao enviar resumo mensal do contrato {contract_id}: {e}")
                continue
            if outcome.success and not outcome.duplicate:
                sweep.sent += 1

        logger.info(f"Resumo mensal: {sweep.processed} contrato(s) com pendências, {sweep.sent} enviado(s)")
        return sweep

    # ───────────────────────── vencimento de contrato ─────────────────────────

    async def send_contract_expiry_notices(self) -> SweepResult:
        """Avisa contratos que terminam exatamente em um dos prazos configurados"""
        today = self.clock().date()
        end_dates = [today + timedelta(days=d) for d in self.expiry_notice_days]
        contracts = self.contract_repo.get_ending_on(end_dates)

        sweep = SweepResult()
        for contract in contracts:
            sweep.processed += 1
            days = (contract.end_date - today).days
            contact, unit = contract.contact, contract.unit
            payload = ContractExpiringData(
                tenant_name=contact.full_name,
                unit_number=unit.unit_number,
                building_name=unit.building_name,
                current_rent=contract.rent_amount,
                expiry_date=contract.end_date,
                days_remaining=days,
            )
            request = SendNotificationRequest(
                type=NotificationType.CONTRACT_EXPIRING,
                recipient_id=contact.id,
                recipient_phone=contact.phone,
                recipient_email=contact.email,
                recipient_name=contact.full_name,
                language=contact.preferred_language,
                template_data=payload.to_variables(),
                metadata={"contractId": contract.id, "daysRemaining": days},
                dedup_key=contract_expiry_dedup_key(contract.id, days),
            )
            try:
                outcome = await self.notification_service.dispatch(request)
            except Exception as e:
                logger.error(f"Erro ao enviar aviso de vencimento do contrato {contract.id}: {e}")
                continue
            if outcome.success and not outcome.duplicate:
                sweep.sent += 1

        logger.info(f"Avisos de vencimento: {sweep.processed} contrato(s), {sweep.sent} enviado(s)")
        return sweep
