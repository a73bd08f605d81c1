"""Adaptadores para provedores de destinatários"""

from typing import Optional
import logging
from sqlalchemy.orm import Session

from ..contracts.recipient_provider_contract import IRecipientProvider
from ..schemas.notification_schemas import NotificationRecipient
from app.api.cadastros.models.model_contact import ContactModel

logger = logging.getLogger(__name__)

class ContactRecipientAdapter(IRecipientProvider):
    """Adaptador para buscar destinatários do modelo ContactModel"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _to_recipient(contact: ContactModel) -> NotificationRecipient:
        return NotificationRecipient(
            recipient_id=str(contact.id),
            name=contact.full_name,
            phone=contact.phone,
            email=contact.email,
            language=contact.preferred_language,
        )

    def get_recipient_by_id(self, recipient_id: str) -> Optional[NotificationRecipient]:
        """Busca contato por ID e retorna informações de destinatário"""
        contact = self.db.query(ContactModel).filter(ContactModel.id == recipient_id).first()
        if not contact:
            return None
        return self._to_recipient(contact)
