"""
Agendador dos jobs de notificação.

Jobs:
- process_pending: a cada minuto, envia pendentes cujo horário chegou
- retry_failed: a cada 15 minutos, reenvia falhas abaixo do limite de tentativas
- payment_reminders: diário, lembretes de vencimento de parcelas
- contract_expiry: diário, avisos de término de contrato
- monthly_summary: último dia do mês, resumo das parcelas em aberto

Cada job abre a própria sessão, registra um SchedulerJobRun e segura um
asyncio.Lock próprio; gatilhos manuais usam o mesmo caminho e esperam o
lock em vez de rodar em paralelo.
"""
import asyncio
from datetime import date, datetime, timedelta
from typing import Awaitable, Callable, Dict, Optional, Tuple
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import Session

from ..adapters.recipient_adapters import ContactRecipientAdapter
from ..channels.base_channel import BaseNotificationChannel
from ..channels.channel_factory import ChannelFactory
from ..models.job_run import SchedulerJobRun
from ..repositories.job_run_repository import JobRunRepository
from ..repositories.notification_repository import NotificationRepository
from ..repositories.preference_repository import PreferenceRepository
from ..schemas.dispatch_results import SweepResult
from ..services.notification_service import NotificationService
from ..services.reminder_service import ReminderService
from ...billing.repositories.contract_repository import ContractRepository
from ...billing.repositories.payment_repository import PaymentRepository
from ....config.settings import (
    AUTO_MONTHLY_SUMMARY,
    AUTO_PAYMENT_NOTIFICATIONS,
    CONTRACT_EXPIRY_HOUR,
    MONTHLY_SUMMARY_HOUR,
    PAYMENT_REMINDER_HOUR,
    SCHEDULER_TIMEZONE,
)
from ....database.db_connection import SessionLocal
from ....utils.database_utils import now_trimmed
from ....utils.prometheus_metrics import record_job_run

logger = logging.getLogger(__name__)

JOB_PROCESS_PENDING = "process_pending"
JOB_RETRY_FAILED = "retry_failed"
JOB_PAYMENT_REMINDERS = "payment_reminders"
JOB_CONTRACT_EXPIRY = "contract_expiry"
JOB_MONTHLY_SUMMARY = "monthly_summary"

ALL_JOBS = (
    JOB_PROCESS_PENDING,
    JOB_RETRY_FAILED,
    JOB_PAYMENT_REMINDERS,
    JOB_CONTRACT_EXPIRY,
    JOB_MONTHLY_SUMMARY,
)

TRIGGER_SCHEDULED = "scheduled"
TRIGGER_MANUAL = "manual"

JobWork = Callable[[NotificationService, ReminderService], Awaitable[SweepResult]]


def is_last_day_of_month(day: date) -> bool:
    return (day + timedelta(days=1)).month != day.month


class ReminderScheduler:
    """Agendador explícito: recebe fábrica de sessão e relógio, é iniciado pelo processo"""

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        clock: Callable[[], datetime] = now_trimmed,
        channels: Optional[Dict[str, BaseNotificationChannel]] = None,
        timezone: str = SCHEDULER_TIMEZONE,
        auto_payment_notifications: bool = AUTO_PAYMENT_NOTIFICATIONS,
        auto_monthly_summary: bool = AUTO_MONTHLY_SUMMARY,
    ):
        self.session_factory = session_factory
        self.clock = clock
        self.channels = channels if channels is not None else ChannelFactory.create_all()
        self.timezone = timezone
        self.auto_payment_notifications = auto_payment_notifications
        self.auto_monthly_summary = auto_monthly_summary

        self.scheduler: Optional[AsyncIOScheduler] = None
        self.running = False
        self._locks: Dict[str, asyncio.Lock] = {job: asyncio.Lock() for job in ALL_JOBS}

    # ───────────────────────── ciclo de vida ─────────────────────────

    def start(self) -> None:
        """Registra os jobs e inicia o AsyncIOScheduler (precisa de um event loop rodando)"""
        if self.running:
            logger.warning("Agendador de notificações já está rodando")
            return

        self.scheduler = AsyncIOScheduler(timezone=self.timezone)
        job_defaults = {"coalesce": True, "max_instances": 1, "misfire_grace_time": 300}

        self.scheduler.add_job(
            self.process_pending_notifications,
            trigger=IntervalTrigger(minutes=1),
            id=JOB_PROCESS_PENDING,
            name="Processar notificações agendadas",
            replace_existing=True,
            **job_defaults,
        )
        self.scheduler.add_job(
            self.retry_failed_notifications,
            trigger=IntervalTrigger(minutes=15),
            id=JOB_RETRY_FAILED,
            name="Reenviar notificações com falha",
            replace_existing=True,
            **job_defaults,
        )
        self.scheduler.add_job(
            self.run_payment_reminders,
            trigger=CronTrigger(hour=PAYMENT_REMINDER_HOUR, minute=0, timezone=self.timezone),
            id=JOB_PAYMENT_REMINDERS,
            name="Lembretes de pagamento",
            replace_existing=True,
            **job_defaults,
        )
        self.scheduler.add_job(
            self.run_contract_expiry,
            trigger=CronTrigger(hour=CONTRACT_EXPIRY_HOUR, minute=0, timezone=self.timezone),
            id=JOB_CONTRACT_EXPIRY,
            name="Avisos de vencimento de contrato",
            replace_existing=True,
            **job_defaults,
        )
        self.scheduler.add_job(
            self.run_monthly_summary,
            trigger=CronTrigger(day="28-31", hour=MONTHLY_SUMMARY_HOUR, minute=0, timezone=self.timezone),
            id=JOB_MONTHLY_SUMMARY,
            name="Resumo mensal de parcelas em aberto",
            replace_existing=True,
            **job_defaults,
        )

        self.scheduler.start()
        self.running = True
        logger.info(f"Agendador de notificações iniciado ({self.timezone})")

    def stop(self) -> None:
        if not self.running or not self.scheduler:
            return
        self.scheduler.shutdown(wait=False)
        self.running = False
        logger.info("Agendador de notificações encerrado")

    def get_status(self) -> Dict[str, object]:
        jobs = []
        if self.scheduler:
            for job in self.scheduler.get_jobs():
                next_run = getattr(job, "next_run_time", None)
                jobs.append({
                    "id": job.id,
                    "name": job.name,
                    "nextRunTime": next_run.isoformat() if next_run else None,
                })
        return {"running": self.running, "timezone": self.timezone, "jobs": jobs}

    # ───────────────────────── execução ─────────────────────────

    def _build_services(self, db: Session) -> Tuple[NotificationService, ReminderService]:
        notification_service = NotificationService(
            NotificationRepository(db),
            PreferenceRepository(db),
            recipient_provider=ContactRecipientAdapter(db),
            channels=self.channels,
            clock=self.clock,
        )
        reminder_service = ReminderService(
            notification_service,
            PaymentRepository(db),
            ContractRepository(db),
            clock=self.clock,
        )
        return notification_service, reminder_service

    async def _run_job(self, job: str, trigger: str, work: JobWork, enabled: bool = True) -> SchedulerJobRun:
        """Executa um job com lock, sessão própria e registro em scheduler_job_runs"""
        lock = self._locks[job]
        if lock.locked():
            logger.info(f"Job {job} em execução; execução {trigger} aguardando")

        async with lock:
            db = self.session_factory()
            try:
                runs = JobRunRepository(db)
                run = runs.start(job, trigger, self.clock())

                if not enabled:
                    logger.info(f"Job {job} desabilitado por configuração; execução ignorada")
                    record_job_run(job, "skipped")
                    return runs.finish(run, "skipped", self.clock())

                logger.info(f"Job {job} iniciado ({trigger})")
                try:
                    notification_service, reminder_service = self._build_services(db)
                    sweep = await work(notification_service, reminder_service)
                except Exception as e:
                    db.rollback()
                    logger.exception(f"Erro no job {job}")
                    record_job_run(job, "error")
                    return runs.finish(run, "error", self.clock(), error=str(e))

                logger.info(f"Job {job} concluído: {sweep.processed} processado(s), {sweep.sent} enviado(s)")
                record_job_run(job, "success")
                return runs.finish(run, "success", self.clock(), sweep.processed, sweep.sent)
            finally:
                db.close()

    async def process_pending_notifications(self, trigger: str = TRIGGER_SCHEDULED) -> SchedulerJobRun:
        return await self._run_job(
            JOB_PROCESS_PENDING,
            trigger,
            lambda notifications, reminders: notifications.process_scheduled_notifications(),
        )

    async def retry_failed_notifications(self, trigger: str = TRIGGER_SCHEDULED) -> SchedulerJobRun:
        return await self._run_job(
            JOB_RETRY_FAILED,
            trigger,
            lambda notifications, reminders: notifications.retry_failed_notifications(),
        )

    async def run_payment_reminders(self, trigger: str = TRIGGER_SCHEDULED) -> SchedulerJobRun:
        return await self._run_job(
            JOB_PAYMENT_REMINDERS,
            trigger,
            lambda notifications, reminders: reminders.send_payment_reminders(),
            enabled=self.auto_payment_notifications or trigger == TRIGGER_MANUAL,
        )

    async def run_contract_expiry(self, trigger: str = TRIGGER_SCHEDULED) -> SchedulerJobRun:
        return await self._run_job(
            JOB_CONTRACT_EXPIRY,
            trigger,
            lambda notifications, reminders: reminders.send_contract_expiry_notices(),
            enabled=self.auto_payment_notifications or trigger == TRIGGER_MANUAL,
        )

    async def run_monthly_summary(self, trigger: str = TRIGGER_SCHEDULED) -> Optional[SchedulerJobRun]:
        """O cron dispara nos dias 28-31; só age no último dia do mês (gatilho manual age sempre)"""
        if trigger == TRIGGER_SCHEDULED and not is_last_day_of_month(self.clock().date()):
            logger.debug("Resumo mensal: hoje não é o último dia do mês")
            return None
        return await self._run_job(
            JOB_MONTHLY_SUMMARY,
            trigger,
            lambda notifications, reminders: reminders.send_monthly_unpaid_summary(),
            enabled=self.auto_monthly_summary or trigger == TRIGGER_MANUAL,
        )

    # ───────────────────────── gatilhos manuais ─────────────────────────

    async def run_payment_reminders_now(self) -> SchedulerJobRun:
        return await self.run_payment_reminders(TRIGGER_MANUAL)

    async def run_contract_expiry_now(self) -> SchedulerJobRun:
        return await self.run_contract_expiry(TRIGGER_MANUAL)

    async def run_monthly_summary_now(self) -> Optional[SchedulerJobRun]:
        return await self.run_monthly_summary(TRIGGER_MANUAL)

    async def process_pending_now(self) -> SchedulerJobRun:
        return await self.process_pending_notifications(TRIGGER_MANUAL)

    async def retry_failed_now(self) -> SchedulerJobRun:
        return await self.retry_failed_notifications(TRIGGER_MANUAL)
