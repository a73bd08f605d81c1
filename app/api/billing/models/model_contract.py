import uuid
from enum import Enum as PyEnum

from sqlalchemy import Column, String, Date, DateTime, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from app.database.db_connection import Base
from app.utils.database_utils import now_trimmed


class PaymentFrequency(str, PyEnum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUALLY = "semi-annually"
    YEARLY = "yearly"


class ContractModel(Base):
    """Contrato de locação (entidade do CRUD externo; somente leitura para o núcleo)"""
    __tablename__ = "contracts"
    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_contracts_periodo_valido"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    unit_id = Column(String, ForeignKey("units.id", ondelete="CASCADE"), nullable=False, index=True)
    contact_id = Column(String, ForeignKey("contacts.id", ondelete="CASCADE"), nullable=False, index=True)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    # Valor ANUAL do aluguel
    rent_amount = Column(Numeric(14, 2), nullable=False)
    # Guardado como texto: frequências desconhecidas caem no padrão mensal
    payment_frequency = Column(String(20), nullable=False, default=PaymentFrequency.MONTHLY.value)
    security_deposit = Column(Numeric(14, 2), nullable=True)

    created_at = Column(DateTime, default=now_trimmed, nullable=False)

    unit = relationship("UnitModel", back_populates="contracts")
    contact = relationship("ContactModel", back_populates="contracts")
    payments = relationship(
        "PaymentModel",
        back_populates="contract",
        cascade="all, delete-orphan",
        order_by="PaymentModel.due_date",
    )
