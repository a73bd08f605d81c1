"""Contratos para repositórios"""

from abc import ABC, abstractmethod
from typing import List, Optional, Dict, Any, Tuple
from datetime import datetime
from ..models.notification import Notification, NotificationLog, NotificationStatus
from ..models.preference import NotificationPreference

class INotificationRepository(ABC):
    """Interface para repositório de notificações"""

    @abstractmethod
    def create(self, notification_data: Dict[str, Any]) -> Notification:
        """Cria uma nova notificação (DuplicateNotificationError se a chave de deduplicação já existir)"""
        pass

    @abstractmethod
    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        """Busca notificação por ID"""
        pass

    @abstractmethod
    def get_by_dedup_key(self, notification_type, dedup_key: str) -> Optional[Notification]:
        """Busca notificação pela chave de deduplicação"""
        pass

    @abstractmethod
    def get_due_pending(self, now: datetime, limit: int = 100) -> List[Notification]:
        """Pendentes agendadas para até `now`"""
        pass

    @abstractmethod
    def get_failed_retryable(self, max_retries: int, limit: int = 100) -> List[Notification]:
        """Falhas com retry_count abaixo do limite"""
        pass

    @abstractmethod
    def mark_sent(self, notification: Notification, sent_at: datetime, external_message_id: Optional[str] = None) -> Notification:
        pass

    @abstractmethod
    def mark_failed(self, notification: Notification, failed_at: datetime, reason: str, retry_count: int) -> Notification:
        pass

    @abstractmethod
    def update_status(self, notification: Notification, status: NotificationStatus, at: datetime) -> Notification:
        pass

    @abstractmethod
    def add_log(
        self,
        notification_id: str,
        status: NotificationStatus,
        message: Optional[str] = None,
        error_details: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Adiciona log à notificação"""
        pass

    @abstractmethod
    def get_logs(self, notification_id: str) -> List[NotificationLog]:
        pass

    @abstractmethod
    def get_stats(self) -> Tuple[int, Dict[str, int], Dict[str, int], Dict[str, int]]:
        pass

class IPreferenceRepository(ABC):
    """Interface para repositório de preferências"""

    @abstractmethod
    def get_or_default(self, recipient_id: str) -> NotificationPreference:
        """Preferências salvas ou padrão (tudo habilitado)"""
        pass

    @abstractmethod
    def upsert(self, recipient_id: str, changes: Dict[str, Any]) -> NotificationPreference:
        pass
