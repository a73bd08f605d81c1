from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ....database.db_connection import get_db
from ..repositories.job_run_repository import JobRunRepository
from ..schemas.notification_schemas import TriggerResponse
from ..schemas.preference_schemas import JobRunResponse
from ..workers.reminder_scheduler import ReminderScheduler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scheduler"])


def get_reminder_scheduler(request: Request) -> ReminderScheduler:
    """Agendador do processo; criado sob demanda quando o app roda sem agendamento automático"""
    scheduler = getattr(request.app.state, "reminder_scheduler", None)
    if scheduler is None:
        scheduler = ReminderScheduler()
        request.app.state.reminder_scheduler = scheduler
    return scheduler


# ========================================
# GATILHOS MANUAIS (rodam em background)
# ========================================

@router.post("/trigger/payment-reminders", response_model=TriggerResponse, status_code=202)
async def trigger_payment_reminders(
    background_tasks: BackgroundTasks,
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """Dispara a varredura de lembretes de pagamento"""
    background_tasks.add_task(scheduler.run_payment_reminders_now)
    logger.info("Varredura de lembretes de pagamento disparada manualmente")
    return TriggerResponse(message="Verificação de lembretes de pagamento iniciada")


@router.post("/trigger/monthly-summary", response_model=TriggerResponse, status_code=202)
async def trigger_monthly_summary(
    background_tasks: BackgroundTasks,
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """Dispara o resumo mensal de parcelas em aberto, independente do dia"""
    background_tasks.add_task(scheduler.run_monthly_summary_now)
    logger.info("Resumo mensal disparado manualmente")
    return TriggerResponse(message="Resumo mensal de parcelas em aberto iniciado")


@router.post("/trigger/contract-expiry", response_model=TriggerResponse, status_code=202)
async def trigger_contract_expiry(
    background_tasks: BackgroundTasks,
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    background_tasks.add_task(scheduler.run_contract_expiry_now)
    logger.info("Avisos de vencimento de contrato disparados manualmente")
    return TriggerResponse(message="Verificação de vencimento de contratos iniciada")


@router.post("/trigger/process-pending", response_model=TriggerResponse, status_code=202)
async def trigger_process_pending(
    background_tasks: BackgroundTasks,
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    background_tasks.add_task(scheduler.process_pending_now)
    return TriggerResponse(message="Processamento de notificações agendadas iniciado")


@router.post("/trigger/retry-failed", response_model=TriggerResponse, status_code=202)
async def trigger_retry_failed(
    background_tasks: BackgroundTasks,
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
):
    background_tasks.add_task(scheduler.retry_failed_now)
    return TriggerResponse(message="Reenvio de notificações com falha iniciado")


# ========================================
# CONSULTA DE EXECUÇÕES
# ========================================

@router.get("/jobs", response_model=List[JobRunResponse])
def list_job_runs(
    job: Optional[str] = Query(None, description="Filtra por job"),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """Últimas execuções dos jobs agendados e manuais"""
    return [JobRunResponse.model_validate(run) for run in JobRunRepository(db).list_recent(job=job, limit=limit)]


@router.get("/scheduler/status")
def get_scheduler_status(scheduler: ReminderScheduler = Depends(get_reminder_scheduler)):
    return scheduler.get_status()
