from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from decimal import Decimal
import logging

from ....database.db_connection import get_db
from ....utils.database_utils import now_trimmed
from ..exceptions import ContractNotFoundError, ScheduleAlreadyExistsError, ScheduleGenerationError
from ..repositories.contract_repository import ContractRepository
from ..repositories.payment_repository import PaymentRepository
from ..schemas.schemas_billing import (
    ContractPaymentsResponse,
    PaymentResponse,
    SchedulePreviewRequest,
    SchedulePreviewResponse,
    ScheduledPaymentResponse,
)
from ..services.payment_schedule_service import PaymentScheduleService, payment_view_status
from ..services.schedule_generator import generate_schedule, normalize_frequency, payments_per_year

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/billing", tags=["API - Billing"])


def get_payment_schedule_service(db: Session = Depends(get_db)) -> PaymentScheduleService:
    """Dependency para obter o serviço de cronograma"""
    return PaymentScheduleService(ContractRepository(db), PaymentRepository(db))


def _to_payment_response(payment, today) -> PaymentResponse:
    return PaymentResponse(
        id=payment.id,
        contract_id=payment.contract_id,
        due_date=payment.due_date,
        amount=payment.amount,
        status=payment_view_status(payment, today),
        paid_date=payment.paid_date,
    )


@router.post("/schedule/preview", response_model=SchedulePreviewResponse)
def preview_schedule(request: SchedulePreviewRequest):
    """Calcula o cronograma sem persistir"""
    try:
        scheduled = generate_schedule(
            start_date=request.start_date,
            end_date=request.end_date,
            rent_amount=request.rent_amount,
            payment_frequency=request.payment_frequency,
        )
    except ScheduleGenerationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    frequency = normalize_frequency(request.payment_frequency)
    return SchedulePreviewResponse(
        payment_frequency=frequency,
        payments_per_year=payments_per_year(frequency),
        amount_per_payment=scheduled[0].amount,
        count=len(scheduled),
        total_amount=sum((p.amount for p in scheduled), Decimal("0")),
        payments=[ScheduledPaymentResponse(due_date=p.due_date, amount=p.amount) for p in scheduled],
    )


@router.post("/contracts/{contract_id}/schedule", response_model=ContractPaymentsResponse, status_code=201)
def create_contract_schedule(
    contract_id: str,
    service: PaymentScheduleService = Depends(get_payment_schedule_service),
):
    """Gera e grava as parcelas de um contrato (uma única vez)"""
    try:
        payments = service.create_schedule(contract_id)
    except ContractNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ScheduleAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ScheduleGenerationError as e:
        logger.error(f"Cronograma inválido para o contrato {contract_id}: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    today = now_trimmed().date()
    return ContractPaymentsResponse(
        contract_id=contract_id,
        count=len(payments),
        payments=[_to_payment_response(p, today) for p in payments],
    )


@router.get("/contracts/{contract_id}/payments", response_model=ContractPaymentsResponse)
def list_contract_payments(
    contract_id: str,
    service: PaymentScheduleService = Depends(get_payment_schedule_service),
):
    """Parcelas do contrato com status de leitura (pending vencido aparece como overdue)"""
    try:
        payments = service.list_payments(contract_id)
    except ContractNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    today = now_trimmed().date()
    return ContractPaymentsResponse(
        contract_id=contract_id,
        count=len(payments),
        payments=[_to_payment_response(p, today) for p in payments],
    )
