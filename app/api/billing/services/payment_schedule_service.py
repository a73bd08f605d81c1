from datetime import date
from typing import List
import logging

from ..exceptions import ContractNotFoundError, ScheduleAlreadyExistsError
from ..models.model_payment import PaymentModel, PaymentStatus
from ..repositories.contract_repository import ContractRepository
from ..repositories.payment_repository import PaymentRepository
from .schedule_generator import generate_schedule_for_contract

logger = logging.getLogger(__name__)


def payment_view_status(payment: PaymentModel, today: date) -> str:
    """Status exibido: pending vencido vira overdue (cálculo de leitura, nunca persistido)"""
    if payment.status == PaymentStatus.PENDING.value and payment.due_date < today:
        return PaymentStatus.OVERDUE.value
    return payment.status


class PaymentScheduleService:
    """Gera e persiste o cronograma de parcelas de um contrato"""

    def __init__(self, contract_repo: ContractRepository, payment_repo: PaymentRepository):
        self.contract_repo = contract_repo
        self.payment_repo = payment_repo

    def create_schedule(self, contract_id: str) -> List[PaymentModel]:
        """
        Chamado uma vez na criação do contrato.

        Raises:
            ContractNotFoundError: contrato inexistente
            ScheduleAlreadyExistsError: contrato já tem parcelas
            ScheduleGenerationError: contrato malformado (criação deve ser abortada)
        """
        contract = self.contract_repo.get_by_id(contract_id)
        if not contract:
            raise ContractNotFoundError(f"Contrato {contract_id} não encontrado")

        if self.payment_repo.count_by_contract(contract_id) > 0:
            raise ScheduleAlreadyExistsError(f"Contrato {contract_id} já possui parcelas geradas")

        scheduled = generate_schedule_for_contract(contract)
        return self.payment_repo.create_many(contract_id, scheduled)

    def list_payments(self, contract_id: str) -> List[PaymentModel]:
        if not self.contract_repo.get_by_id(contract_id):
            raise ContractNotFoundError(f"Contrato {contract_id} não encontrado")
        return self.payment_repo.get_by_contract(contract_id)
