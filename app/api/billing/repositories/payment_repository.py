from sqlalchemy.orm import Session, joinedload
from sqlalchemy import and_
from typing import List, Optional, Iterable, NamedTuple
from datetime import date, timedelta
import logging

from ..models.model_contract import ContractModel
from ..models.model_payment import PaymentModel, PaymentStatus
from ..services.schedule_generator import ScheduledPayment
from ...cadastros.models.model_contact import ContactModel
from ...cadastros.models.model_unit import UnitModel

logger = logging.getLogger(__name__)


class PaymentWithDetails(NamedTuple):
    payment: PaymentModel
    contract: ContractModel
    contact: ContactModel
    unit: UnitModel


class PaymentRepository:
    """Repositório para parcelas de contratos"""

    def __init__(self, db: Session):
        self.db = db

    def create_many(self, contract_id: str, scheduled: Iterable[ScheduledPayment]) -> List[PaymentModel]:
        """Persiste as parcelas geradas (tudo ou nada)"""
        try:
            payments = [
                PaymentModel(
                    contract_id=contract_id,
                    due_date=item.due_date,
                    amount=item.amount,
                    status=PaymentStatus.PENDING.value,
                )
                for item in scheduled
            ]
            self.db.add_all(payments)
            self.db.commit()
            for payment in payments:
                self.db.refresh(payment)
            logger.info(f"{len(payments)} parcelas criadas para o contrato {contract_id}")
            return payments
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao criar parcelas do contrato {contract_id}: {e}")
            raise

    def get_by_id(self, payment_id: str) -> Optional[PaymentModel]:
        return self.db.query(PaymentModel).filter(PaymentModel.id == payment_id).first()

    def get_by_contract(self, contract_id: str) -> List[PaymentModel]:
        return (
            self.db.query(PaymentModel)
            .filter(PaymentModel.contract_id == contract_id)
            .order_by(PaymentModel.due_date)
            .all()
        )

    def count_by_contract(self, contract_id: str) -> int:
        return self.db.query(PaymentModel).filter(PaymentModel.contract_id == contract_id).count()

    def _with_details(self, query) -> List[PaymentWithDetails]:
        rows = (
            query.join(ContractModel, PaymentModel.contract_id == ContractModel.id)
            .join(ContactModel, ContractModel.contact_id == ContactModel.id)
            .join(UnitModel, ContractModel.unit_id == UnitModel.id)
            .options(
                joinedload(PaymentModel.contract).joinedload(ContractModel.contact),
                joinedload(PaymentModel.contract).joinedload(ContractModel.unit),
            )
            .order_by(PaymentModel.due_date, PaymentModel.id)
            .all()
        )
        return [
            PaymentWithDetails(p, p.contract, p.contract.contact, p.contract.unit)
            for p in rows
        ]

    def get_upcoming_payments_with_details(self, today: date, days: int) -> List[PaymentWithDetails]:
        """Parcelas pendentes com vencimento entre hoje e hoje + days, com contrato/contato/unidade"""
        limit_date = today + timedelta(days=days)
        query = self.db.query(PaymentModel).filter(
            and_(
                PaymentModel.status == PaymentStatus.PENDING.value,
                PaymentModel.due_date >= today,
                PaymentModel.due_date <= limit_date,
            )
        )
        return self._with_details(query)

    def get_unpaid_due_before_with_details(self, cutoff: date) -> List[PaymentWithDetails]:
        """Parcelas não pagas com vencimento anterior a cutoff"""
        query = self.db.query(PaymentModel).filter(
            and_(
                PaymentModel.status.in_([PaymentStatus.PENDING.value, PaymentStatus.OVERDUE.value]),
                PaymentModel.due_date < cutoff,
            )
        )
        return self._with_details(query)
