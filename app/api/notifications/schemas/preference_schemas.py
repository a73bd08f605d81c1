from pydantic import ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from .notification_schemas import CamelModel


class PreferenceResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    recipient_id: str
    whatsapp_enabled: bool = True
    email_enabled: bool = True
    sms_enabled: bool = False
    in_app_enabled: bool = True
    payment_reminders: bool = True
    contract_alerts: bool = True
    maintenance_updates: bool = True
    announcements: bool = True
    preferred_language: Optional[str] = None


class PreferenceUpdateRequest(CamelModel):
    """Atualização parcial: campos omitidos mantêm o valor atual"""
    whatsapp_enabled: Optional[bool] = None
    email_enabled: Optional[bool] = None
    sms_enabled: Optional[bool] = None
    in_app_enabled: Optional[bool] = None
    payment_reminders: Optional[bool] = None
    contract_alerts: Optional[bool] = None
    maintenance_updates: Optional[bool] = None
    announcements: Optional[bool] = None
    preferred_language: Optional[str] = None


class JobRunResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    job: str
    trigger: str
    status: str
    processed: int
    sent: int
    error: Optional[str] = None
    started_at: datetime
    finished_at: Optional[datetime] = None
