from datetime import datetime
from zoneinfo import ZoneInfo

from app.config.settings import SCHEDULER_TIMEZONE
#

def now_trimmed():
    """Retorna datetime atual no timezone da aplicação (naive), sem microsegundos"""
    tz = ZoneInfo(SCHEDULER_TIMEZONE)
    return datetime.now(tz).replace(microsecond=0, tzinfo=None)


def to_local_naive(value: datetime) -> datetime:
    """Converte datetime com timezone para hora local da aplicação (naive)"""
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(SCHEDULER_TIMEZONE)).replace(tzinfo=None)
