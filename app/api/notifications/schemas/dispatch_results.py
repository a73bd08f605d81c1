from dataclasses import dataclass
from typing import Optional

from ..models.notification import NotificationStatus


@dataclass
class DispatchOutcome:
    """Resultado de um envio pelo motor de notificações"""
    notification_id: Optional[str] = None
    status: Optional[NotificationStatus] = None
    error: Optional[str] = None
    suppressed: bool = False
    duplicate: bool = False

    @property
    def success(self) -> bool:
        return self.notification_id is not None and self.status != NotificationStatus.FAILED


@dataclass
class SweepResult:
    """Contadores de uma varredura (agendador ou gatilho manual)"""
    processed: int = 0
    sent: int = 0
