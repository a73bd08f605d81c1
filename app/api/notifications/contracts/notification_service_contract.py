"""Contrato para o serviço de notificações"""

from abc import ABC, abstractmethod
from typing import List, Optional
from ..schemas.dispatch_results import SweepResult
from ..schemas.notification_schemas import (
    NotificationRecipient,
    SendNotificationRequest,
    BulkSendResult
)

class INotificationService(ABC):
    """Interface para o serviço de notificações"""

    @abstractmethod
    async def send_notification(self, request: SendNotificationRequest) -> Optional[str]:
        """
        Envia uma notificação

        Args:
            request: Dados da notificação

        Returns:
            ID da notificação criada, ou None se o envio foi suprimido
        """
        pass

    @abstractmethod
    async def send_bulk_notifications(
        self,
        recipients: List[NotificationRecipient],
        request: SendNotificationRequest
    ) -> List[BulkSendResult]:
        """
        Envia a mesma notificação para vários destinatários

        Returns:
            Um resultado por destinatário, na ordem recebida
        """
        pass

    @abstractmethod
    async def process_scheduled_notifications(self, limit: int = 100) -> SweepResult:
        """Processa notificações pendentes cujo horário chegou"""
        pass

    @abstractmethod
    async def retry_failed_notifications(self, limit: int = 100) -> SweepResult:
        """Tenta reenviar notificações que falharam"""
        pass

    @abstractmethod
    def get_notification_by_id(self, notification_id: str):
        """Busca notificação por ID"""
        pass

    @abstractmethod
    def get_notification_logs(self, notification_id: str):
        """Busca logs de uma notificação"""
        pass
