import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from app.database.db_connection import Base
from app.utils.database_utils import now_trimmed


class UnitModel(Base):
    __tablename__ = "units"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    unit_number = Column(String(30), nullable=False)
    building_name = Column(String(150), nullable=True)

    created_at = Column(DateTime, default=now_trimmed, nullable=False)

    contracts = relationship("ContractModel", back_populates="unit")
