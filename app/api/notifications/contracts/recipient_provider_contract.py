"""Contrato para provedor de destinatários"""

from abc import ABC, abstractmethod
from typing import Optional
from ..schemas.notification_schemas import NotificationRecipient

class IRecipientProvider(ABC):
    """Interface para provedor de destinatários de notificações"""

    @abstractmethod
    def get_recipient_by_id(self, recipient_id: str) -> Optional[NotificationRecipient]:
        """
        Busca informações de um destinatário por ID

        Args:
            recipient_id: ID do contato

        Returns:
            Destinatário com nome, telefone, email e idioma, ou None
        """
        pass
