from typing import Dict, Any, Optional
import logging
from .base_channel import BaseNotificationChannel
from .email_channel import EmailChannel
from .in_app_channel import InAppChannel
from .sms_channel import SMSChannel
from .whatsapp_channel import WhatsAppChannel

logger = logging.getLogger(__name__)

class ChannelFactory:
    """Factory para criar canais de notificação"""

    _channels = {
        'whatsapp': WhatsAppChannel,
        'email': EmailChannel,
        'sms': SMSChannel,
        'in_app': InAppChannel,
    }

    @classmethod
    def create_channel(cls, channel_type: str, config: Optional[Dict[str, Any]] = None) -> BaseNotificationChannel:
        """
        Cria um canal de notificação

        Args:
            channel_type: Tipo do canal (whatsapp, email, sms, in_app)
            config: Configuração do canal (sobrepõe as variáveis de ambiente)

        Raises:
            ValueError: Se o tipo de canal não for suportado
        """
        channel_type = getattr(channel_type, "value", channel_type)
        if channel_type not in cls._channels:
            supported_channels = ', '.join(cls._channels.keys())
            raise ValueError(f"Canal '{channel_type}' não suportado. Canais disponíveis: {supported_channels}")

        channel_class = cls._channels[channel_type]
        return channel_class(config or {})

    @classmethod
    def create_all(cls, configs: Optional[Dict[str, Dict[str, Any]]] = None) -> Dict[str, BaseNotificationChannel]:
        """Instancia todos os canais suportados, um por tipo"""
        configs = configs or {}
        return {name: cls.create_channel(name, configs.get(name)) for name in cls._channels}
