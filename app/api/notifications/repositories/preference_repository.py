from sqlalchemy.orm import Session
from typing import Optional, Dict, Any
import logging

from ..contracts.repository_contracts import IPreferenceRepository
from ..models.preference import NotificationPreference

logger = logging.getLogger(__name__)

# Valores usados quando o destinatário não tem registro de preferências
DEFAULT_PREFERENCES = {
    "whatsapp_enabled": True,
    "email_enabled": True,
    "sms_enabled": False,
    "in_app_enabled": True,
    "payment_reminders": True,
    "contract_alerts": True,
    "maintenance_updates": True,
    "announcements": True,
    "preferred_language": None,
}

class PreferenceRepository(IPreferenceRepository):
    """Repositório de preferências de notificação por destinatário"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_recipient(self, recipient_id: str) -> Optional[NotificationPreference]:
        return (
            self.db.query(NotificationPreference)
            .filter(NotificationPreference.recipient_id == recipient_id)
            .first()
        )

    def get_or_default(self, recipient_id: str) -> NotificationPreference:
        """Registro salvo ou um objeto transiente com os valores padrão (não adicionado à sessão)"""
        preference = self.get_by_recipient(recipient_id)
        if preference:
            return preference
        return NotificationPreference(recipient_id=recipient_id, **DEFAULT_PREFERENCES)

    def upsert(self, recipient_id: str, changes: Dict[str, Any]) -> NotificationPreference:
        """Cria ou atualiza as preferências; apenas as chaves informadas são alteradas"""
        try:
            preference = self.get_by_recipient(recipient_id)
            if not preference:
                preference = NotificationPreference(recipient_id=recipient_id, **DEFAULT_PREFERENCES)
                self.db.add(preference)

            for field, value in changes.items():
                if field in DEFAULT_PREFERENCES:
                    setattr(preference, field, value)

            self.db.commit()
            self.db.refresh(preference)
            logger.info(f"Preferências atualizadas para {recipient_id}: {sorted(changes)}")
            return preference
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao salvar preferências de {recipient_id}: {e}")
            raise
