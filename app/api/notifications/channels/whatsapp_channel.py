import httpx
from typing import Dict, Any, Optional
import logging

from .base_channel import BaseNotificationChannel, DeliveryResult
from ....config.settings import WASENDER_API_KEY, WASENDER_API_URL, WHATSAPP_TIMEOUT_SECONDS
from ....utils.telefone import normalizar_telefone, telefone_valido

logger = logging.getLogger(__name__)

class WhatsAppChannel(BaseNotificationChannel):
    """Canal de notificação via Wasender API (WhatsApp)"""

    recipient_field = "recipient_phone"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.api_key = self.config.get('api_key', WASENDER_API_KEY)
        self.api_url = self.config.get('api_url', WASENDER_API_URL)
        self.timeout = float(self.config.get('timeout', WHATSAPP_TIMEOUT_SECONDS))
        # Permite injetar httpx.MockTransport nos testes
        self.transport = self.config.get('transport')

        if not self.api_key:
            logger.warning("WASENDER_API_KEY não configurada; envios por WhatsApp vão falhar")

    def get_channel_name(self) -> str:
        return "whatsapp"

    def _get_headers(self) -> Dict[str, str]:
        """Retorna os headers para requisições à Wasender"""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _extract_message_id(body: Any) -> Optional[str]:
        if not isinstance(body, dict):
            return None
        message_id = body.get("id")
        if message_id is None and isinstance(body.get("data"), dict):
            message_id = body["data"].get("id") or body["data"].get("msgId")
        return str(message_id) if message_id is not None else None

    async def deliver(
        self,
        recipient: str,
        text: str,
        subject: Optional[str] = None
    ) -> DeliveryResult:
        """Envia mensagem de texto via Wasender"""
        if not self.api_key:
            error_msg = "Wasender API key não configurada"
            self._log_error(recipient, error_msg)
            return self._create_error_result(error_msg, retryable=False)

        phone_formatted = normalizar_telefone(recipient)
        if not telefone_valido(phone_formatted):
            error_msg = f"Telefone inválido para WhatsApp: {recipient!r}"
            self._log_error(recipient, error_msg)
            return self._create_error_result(error_msg, retryable=False)

        # WhatsApp não tem assunto; ele vira a primeira linha em negrito
        full_message = f"*{subject}*\n\n{text}" if subject else text
        payload = {"to": phone_formatted, "text": full_message}

        logger.info(f"Enviando WhatsApp via Wasender para {phone_formatted} ({len(full_message)} caracteres)")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.api_url, json=payload, headers=self._get_headers())

            if 200 <= response.status_code < 300:
                try:
                    body = response.json()
                except ValueError:
                    body = {}
                message_id = self._extract_message_id(body)
                self._log_success(phone_formatted, message_id)
                return self._create_success_result(message_id)

            try:
                error_data = response.json() if response.text else {}
            except ValueError:
                error_data = {"raw": response.text}
            api_message = error_data.get("message") if isinstance(error_data, dict) else None
            error_msg = f"Erro ao enviar WhatsApp: {api_message or f'HTTP {response.status_code}'}"
            details = {"status_code": response.status_code, "wasender_error": error_data}
            self._log_error(phone_formatted, error_msg, details)
            # Credencial recusada não se resolve com reenvio
            return self._create_error_result(
                error_msg,
                details,
                retryable=response.status_code not in (401, 403)
            )

        except httpx.TimeoutException as e:
            error_msg = f"Timeout ao enviar WhatsApp após {self.timeout}s"
            self._log_error(phone_formatted, error_msg, {"exception": str(e)})
            return self._create_error_result(error_msg, {"exception": str(e)})
        except httpx.HTTPError as e:
            error_msg = f"Erro de rede ao enviar WhatsApp: {str(e)}"
            self._log_error(phone_formatted, error_msg)
            return self._create_error_result(error_msg, {"exception": str(e)})
