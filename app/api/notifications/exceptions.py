"""Erros do sistema de notificações"""


class NotificationConfigurationError(Exception):
    """Erro de configuração: nunca é reenviado, sobe direto para quem chamou"""


class TemplateNotFoundError(NotificationConfigurationError):
    """Não existe template para o tipo de notificação"""

    def __init__(self, notification_type: str, language: str = "en"):
        super().__init__(f"Template não encontrado para o tipo '{notification_type}' ({language})")
        self.notification_type = notification_type
        self.language = language


class InvalidStatusTransitionError(Exception):
    """Transição de status não permitida pela máquina de estados"""

    def __init__(self, notification_id: str, current: str, target: str):
        super().__init__(f"Notificação {notification_id}: transição {current} -> {target} não permitida")
        self.notification_id = notification_id
        self.current = current
        self.target = target


class NotificationNotFoundError(Exception):
    """Notificação não encontrada"""


class DuplicateNotificationError(Exception):
    """Já existe notificação com o mesmo (tipo, chave de deduplicação)"""

    def __init__(self, notification_type: str, dedup_key: str):
        super().__init__(f"Notificação duplicada: {notification_type} / {dedup_key}")
        self.notification_type = notification_type
        self.dedup_key = dedup_key
