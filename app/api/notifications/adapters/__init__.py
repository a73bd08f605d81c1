"""Adaptadores para o sistema de notificações"""

from .recipient_adapters import ContactRecipientAdapter

__all__ = [
    "ContactRecipientAdapter",
]
