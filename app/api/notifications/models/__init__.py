"""Modelos do domínio de notificações."""

from .notification import Notification, NotificationLog, NotificationStatus, NotificationChannel, NotificationType  # noqa: F401
from .preference import NotificationPreference  # noqa: F401
from .job_run import SchedulerJobRun  # noqa: F401
