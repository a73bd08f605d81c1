import uuid
from enum import Enum as PyEnum

from sqlalchemy import Column, String, Date, DateTime, Numeric, ForeignKey, Index
from sqlalchemy.orm import relationship

from app.database.db_connection import Base
from app.utils.database_utils import now_trimmed


class PaymentStatus(str, PyEnum):
    PENDING = "pending"
    PAID = "paid"
    # Nunca persistido: calculado na leitura (pending + vencido)
    OVERDUE = "overdue"


class PaymentModel(Base):
    __tablename__ = "payments"
    __table_args__ = (
        Index("idx_payments_status_due_date", "status", "due_date"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    contract_id = Column(String, ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, index=True)

    due_date = Column(Date, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    paid_date = Column(Date, nullable=True)

    created_at = Column(DateTime, default=now_trimmed, nullable=False)

    contract = relationship("ContractModel", back_populates="payments")
