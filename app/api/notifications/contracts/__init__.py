"""Contratos (interfaces) para o sistema de notificações"""

from .notification_service_contract import INotificationService
from .recipient_provider_contract import IRecipientProvider
from .repository_contracts import (
    INotificationRepository,
    IPreferenceRepository
)

__all__ = [
    "INotificationService",
    "IRecipientProvider",
    "INotificationRepository",
    "IPreferenceRepository"
]
