from typing import Optional
import logging

from .base_channel import BaseNotificationChannel, DeliveryResult

logger = logging.getLogger(__name__)

class SMSChannel(BaseNotificationChannel):
    """Canal de SMS (ainda sem provedor integrado)"""

    recipient_field = "recipient_phone"
    implemented = False

    def get_channel_name(self) -> str:
        return "sms"

    async def deliver(
        self,
        recipient: str,
        text: str,
        subject: Optional[str] = None
    ) -> DeliveryResult:
        error_msg = "Canal de SMS não implementado"
        self._log_error(recipient or "-", error_msg)
        return self._create_error_result(error_msg, retryable=False)
