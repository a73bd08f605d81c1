"""
Gerador do cronograma de pagamentos de um contrato de locação.

Função pura: recebe os dados do contrato e devolve a sequência ordenada
de parcelas (vencimento + valor). A persistência fica com quem chama.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List, Optional
import logging

from dateutil.relativedelta import relativedelta

from ..exceptions import ScheduleGenerationError
from ..models.model_contract import PaymentFrequency

logger = logging.getLogger(__name__)

MAX_SCHEDULE_ITERATIONS = 1000

CENTS = Decimal("0.01")

PAYMENTS_PER_YEAR = {
    PaymentFrequency.WEEKLY.value: 52,
    PaymentFrequency.MONTHLY.value: 12,
    PaymentFrequency.QUARTERLY.value: 4,
    PaymentFrequency.SEMI_ANNUALLY.value: 2,
    PaymentFrequency.YEARLY.value: 1,
}

PERIOD_STEPS = {
    PaymentFrequency.WEEKLY.value: relativedelta(days=7),
    PaymentFrequency.MONTHLY.value: relativedelta(months=1),
    PaymentFrequency.QUARTERLY.value: relativedelta(months=3),
    PaymentFrequency.SEMI_ANNUALLY.value: relativedelta(months=6),
    PaymentFrequency.YEARLY.value: relativedelta(months=12),
}


@dataclass(frozen=True)
class ScheduledPayment:
    due_date: date
    amount: Decimal


def normalize_frequency(frequency: Optional[str]) -> str:
    """Frequência em minúsculas; desconhecida ou vazia vira mensal"""
    freq = (frequency or "").strip().lower()
    if freq not in PERIOD_STEPS:
        if freq:
            logger.warning(f"Frequência desconhecida '{frequency}', usando mensal")
        return PaymentFrequency.MONTHLY.value
    return freq


def payments_per_year(frequency: Optional[str]) -> int:
    return PAYMENTS_PER_YEAR[normalize_frequency(frequency)]


def next_due_date(current: date, frequency: Optional[str]) -> date:
    """Avança um período a partir da data atual (dias no fim do mês são ajustados)"""
    return current + PERIOD_STEPS[normalize_frequency(frequency)]


def amount_per_payment(annual_rent: Any, frequency: Optional[str]) -> Decimal:
    """Aluguel anual dividido pelo número de parcelas no ano, arredondado em centavos"""
    annual = Decimal(str(annual_rent))
    return (annual / payments_per_year(frequency)).quantize(CENTS, rounding=ROUND_HALF_UP)


def generate_schedule(
    start_date: date,
    end_date: date,
    rent_amount: Any,
    payment_frequency: Optional[str],
    contract_id: Optional[str] = None,
) -> List[ScheduledPayment]:
    """
    Gera as parcelas de start_date até end_date (inclusive).

    Raises:
        ScheduleGenerationError: se end_date < start_date ou se o número de
            períodos ultrapassar MAX_SCHEDULE_ITERATIONS
    """
    if start_date is None or end_date is None:
        raise ScheduleGenerationError("Contrato sem data de início ou fim", contract_id)
    if end_date < start_date:
        raise ScheduleGenerationError(
            f"Data final {end_date.isoformat()} anterior à data inicial {start_date.isoformat()}",
            contract_id,
        )

    frequency = normalize_frequency(payment_frequency)
    amount = amount_per_payment(rent_amount, frequency)

    payments: List[ScheduledPayment] = []
    current = start_date
    while current <= end_date:
        if len(payments) >= MAX_SCHEDULE_ITERATIONS:
            logger.error(f"Limite de {MAX_SCHEDULE_ITERATIONS} parcelas atingido para o contrato {contract_id}")
            raise ScheduleGenerationError(
                f"Cronograma excede o limite de {MAX_SCHEDULE_ITERATIONS} parcelas",
                contract_id,
            )
        payments.append(ScheduledPayment(due_date=current, amount=amount))
        current = next_due_date(current, frequency)

    logger.info(
        f"Cronograma gerado para contrato {contract_id}: {len(payments)} parcelas "
        f"de {amount} ({frequency})"
    )
    return payments


def generate_schedule_for_contract(contract) -> List[ScheduledPayment]:
    """Atalho para um ContractModel (ou objeto com os mesmos atributos)"""
    return generate_schedule(
        start_date=contract.start_date,
        end_date=contract.end_date,
        rent_amount=contract.rent_amount,
        payment_frequency=contract.payment_frequency,
        contract_id=getattr(contract, "id", None),
    )
