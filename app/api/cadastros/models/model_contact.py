import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from app.database.db_connection import Base
from app.utils.database_utils import now_trimmed


class ContactModel(Base):
    """Inquilino/contato mantido pelo CRUD de cadastros (somente leitura aqui)"""
    __tablename__ = "contacts"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name = Column(String(150), nullable=False)
    phone = Column(String(30), nullable=True)
    email = Column(String(150), nullable=True)
    preferred_language = Column(String(5), nullable=False, default="en")

    created_at = Column(DateTime, default=now_trimmed, nullable=False)

    contracts = relationship("ContractModel", back_populates="contact")
