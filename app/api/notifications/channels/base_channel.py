from abc import ABC, abstractmethod
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

class DeliveryResult:
    """Resultado do envio de uma notificação"""

    def __init__(
        self,
        success: bool,
        message_id: Optional[str] = None,
        error: Optional[str] = None,
        error_details: Optional[Dict[str, Any]] = None,
        retryable: bool = True
    ):
        self.success = success
        self.message_id = message_id
        self.error = error
        self.error_details = error_details
        # Falhas de configuração não devem voltar na varredura de reenvio
        self.retryable = retryable if not success else False

    def __repr__(self) -> str:
        if self.success:
            return f"DeliveryResult(success=True, message_id={self.message_id!r})"
        return f"DeliveryResult(success=False, error={self.error!r}, retryable={self.retryable})"

class BaseNotificationChannel(ABC):
    """Interface base para canais de notificação"""

    # Campo da notificação usado como endereço de entrega
    recipient_field = "recipient_id"

    # Canais sem provedor integrado ficam fora da escolha automática
    implemented = True

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.logger = logging.getLogger(f"{self.__class__.__name__}")

    @abstractmethod
    async def deliver(
        self,
        recipient: str,
        text: str,
        subject: Optional[str] = None
    ) -> DeliveryResult:
        """
        Entrega uma mensagem já renderizada.

        Nunca levanta exceção: qualquer erro vira DeliveryResult(success=False).

        Args:
            recipient: Destinatário (telefone, email, id do usuário)
            text: Corpo da mensagem
            subject: Assunto, quando o canal suporta
        """
        pass

    @abstractmethod
    def get_channel_name(self) -> str:
        """Retorna o nome do canal"""
        pass

    def get_recipient_address(self, notification) -> Optional[str]:
        """Endereço de entrega a partir do registro da notificação"""
        return getattr(notification, self.recipient_field, None)

    def _log_success(self, recipient: str, message_id: Optional[str] = None):
        """Log de sucesso"""
        self.logger.info(f"Notificação enviada com sucesso para {recipient}")
        if message_id:
            self.logger.info(f"ID externo: {message_id}")

    def _log_error(self, recipient: str, error: str, details: Optional[Dict[str, Any]] = None):
        """Log de erro"""
        self.logger.error(f"Erro ao enviar notificação para {recipient}: {error}")
        if details:
            self.logger.error(f"Detalhes do erro: {details}")

    def _create_error_result(
        self,
        error: str,
        details: Optional[Dict[str, Any]] = None,
        retryable: bool = True
    ) -> DeliveryResult:
        """Cria um resultado de erro"""
        return DeliveryResult(
            success=False,
            error=error,
            error_details=details,
            retryable=retryable
        )

    def _create_success_result(self, message_id: Optional[str] = None) -> DeliveryResult:
        """Cria um resultado de sucesso"""
        return DeliveryResult(success=True, message_id=message_id)
