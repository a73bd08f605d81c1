from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import and_, desc, func
from typing import List, Optional, Dict, Any, Tuple
from datetime import datetime
import logging

from ..contracts.repository_contracts import INotificationRepository
from ..exceptions import DuplicateNotificationError
from ..models.notification import Notification, NotificationLog, NotificationStatus
from ..schemas.notification_schemas import NotificationFilter

logger = logging.getLogger(__name__)

class NotificationRepository(INotificationRepository):
    """Repositório para operações com notificações"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, notification_data: Dict[str, Any]) -> Notification:
        """
        Cria uma nova notificação em `pending`.

        Raises:
            DuplicateNotificationError: já existe (tipo, dedup_key) igual
        """
        notification_data.setdefault('status', NotificationStatus.PENDING)
        notification_data.setdefault('retry_count', 0)
        notification = Notification(**notification_data)
        try:
            self.db.add(notification)
            self.db.commit()
            self.db.refresh(notification)
        except IntegrityError:
            self.db.rollback()
            logger.info(
                f"Notificação duplicada ignorada: {notification_data.get('type')} / {notification_data.get('dedup_key')}"
            )
            raise DuplicateNotificationError(
                str(getattr(notification_data.get('type'), 'value', notification_data.get('type'))),
                notification_data.get('dedup_key'),
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao criar notificação: {e}")
            raise

        logger.info(f"Notificação criada: {notification.id}")
        return notification

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        """Busca notificação por ID"""
        return self.db.query(Notification).filter(Notification.id == notification_id).first()

    def get_by_dedup_key(self, notification_type, dedup_key: str) -> Optional[Notification]:
        """Busca pela chave de deduplicação (índice único)"""
        return (
            self.db.query(Notification)
            .filter(and_(Notification.type == notification_type, Notification.dedup_key == dedup_key))
            .first()
        )

    def get_due_pending(self, now: datetime, limit: int = 100) -> List[Notification]:
        """Pendentes com scheduled_for já vencido"""
        return (
            self.db.query(Notification)
            .filter(
                and_(
                    Notification.status == NotificationStatus.PENDING,
                    Notification.scheduled_for.isnot(None),
                    Notification.scheduled_for <= now,
                )
            )
            .order_by(Notification.scheduled_for, Notification.created_at)
            .limit(limit)
            .all()
        )

    def get_failed_retryable(self, max_retries: int, limit: int = 100) -> List[Notification]:
        """Falhas que ainda não esgotaram as tentativas"""
        return (
            self.db.query(Notification)
            .filter(
                and_(
                    Notification.status == NotificationStatus.FAILED,
                    Notification.retry_count < max_retries,
                )
            )
            .order_by(Notification.failed_at, Notification.created_at)
            .limit(limit)
            .all()
        )

    def mark_sent(self, notification: Notification, sent_at: datetime, external_message_id: Optional[str] = None) -> Notification:
        try:
            notification.status = NotificationStatus.SENT
            notification.sent_at = sent_at
            notification.external_message_id = external_message_id
            notification.failure_reason = None
            self.db.commit()
            self.db.refresh(notification)
            return notification
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao marcar notificação {notification.id} como enviada: {e}")
            raise

    def mark_failed(self, notification: Notification, failed_at: datetime, reason: str, retry_count: int) -> Notification:
        try:
            notification.status = NotificationStatus.FAILED
            notification.failed_at = failed_at
            notification.failure_reason = reason
            notification.retry_count = retry_count
            self.db.commit()
            self.db.refresh(notification)
            return notification
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao marcar notificação {notification.id} como falha: {e}")
            raise

    def update_status(self, notification: Notification, status: NotificationStatus, at: datetime) -> Notification:
        """Transições reportadas pelo canal (delivered/read)"""
        try:
            notification.status = status
            if status == NotificationStatus.DELIVERED:
                notification.delivered_at = at
            elif status == NotificationStatus.READ:
                notification.read_at = at
            self.db.commit()
            self.db.refresh(notification)
            logger.info(f"Status da notificação {notification.id} atualizado para {status.value}")
            return notification
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao atualizar status da notificação {notification.id}: {e}")
            raise

    def add_log(self, notification_id: str, status: NotificationStatus,
                message: Optional[str] = None, error_details: Optional[Dict[str, Any]] = None) -> bool:
        """Adiciona log à notificação"""
        try:
            log = NotificationLog(
                notification_id=notification_id,
                status=status,
                message=message,
                error_details=error_details
            )
            self.db.add(log)
            self.db.commit()
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Erro ao adicionar log à notificação {notification_id}: {e}")
            return False

    def get_logs(self, notification_id: str) -> List[NotificationLog]:
        """Busca logs de uma notificação"""
        return (
            self.db.query(NotificationLog)
            .filter(NotificationLog.notification_id == notification_id)
            .order_by(NotificationLog.created_at)
            .all()
        )

    def _apply_filters(self, query, filters: NotificationFilter):
        if filters.recipient_id:
            query = query.filter(Notification.recipient_id == filters.recipient_id)
        if filters.status:
            query = query.filter(Notification.status == filters.status)
        if filters.type:
            query = query.filter(Notification.type == filters.type)
        if filters.channel:
            query = query.filter(Notification.channel == filters.channel)
        return query

    def filter_notifications(self, filters: NotificationFilter, limit: int = 50, offset: int = 0) -> List[Notification]:
        """Filtra notificações com base nos critérios fornecidos"""
        query = self._apply_filters(self.db.query(Notification), filters)
        return (
            query.order_by(desc(Notification.created_at), desc(Notification.id))
            .limit(limit)
            .offset(offset)
            .all()
        )

    def count_notifications(self, filters: NotificationFilter) -> int:
        """Conta notificações com base nos filtros"""
        return self._apply_filters(self.db.query(Notification), filters).count()

    def _count_by(self, column) -> Dict[str, int]:
        rows = self.db.query(column, func.count(Notification.id)).group_by(column).all()
        return {getattr(key, 'value', key): count for key, count in rows}

    def get_stats(self) -> Tuple[int, Dict[str, int], Dict[str, int], Dict[str, int]]:
        """Total e contagens por status, canal e tipo"""
        total = self.db.query(func.count(Notification.id)).scalar() or 0
        return (
            total,
            self._count_by(Notification.status),
            self._count_by(Notification.channel),
            self._count_by(Notification.type),
        )
