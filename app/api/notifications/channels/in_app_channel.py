from typing import Optional
import logging
import uuid

from .base_channel import BaseNotificationChannel, DeliveryResult

logger = logging.getLogger(__name__)

class InAppChannel(BaseNotificationChannel):
    """Canal in-app: o próprio registro da notificação é a caixa de entrada do usuário"""

    recipient_field = "recipient_id"

    def get_channel_name(self) -> str:
        return "in_app"

    async def deliver(
        self,
        recipient: str,
        text: str,
        subject: Optional[str] = None
    ) -> DeliveryResult:
        if not recipient:
            error_msg = "Destinatário in-app não informado"
            self._log_error("-", error_msg)
            return self._create_error_result(error_msg, retryable=False)

        message_id = f"in_app-{uuid.uuid4()}"
        self._log_success(recipient, message_id)
        return self._create_success_result(message_id)
