"""
Payloads tipados por tipo de notificação.

Cada payload sabe se converter no dicionário de variáveis usado pelo template
(chaves em camelCase, como nos templates).
"""
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..templates.renderer import format_value


class TemplatePayload(BaseModel):
    tenant_name: str = Field(..., description="Nome do inquilino")

    def to_variables(self) -> Dict[str, Any]:
        raise NotImplementedError


class PaymentReminderData(TemplatePayload):
    unit_number: str
    building_name: Optional[str] = None
    amount: Decimal
    due_date: date
    days_until_due: int

    def to_variables(self) -> Dict[str, Any]:
        return {
            "tenantName": self.tenant_name,
            "unitNumber": self.unit_number,
            "buildingName": self.building_name or "",
            "amount": self.amount,
            "dueDate": self.due_date,
            "daysUntilDue": self.days_until_due,
        }


class ContractExpiringData(TemplatePayload):
    unit_number: str
    building_name: Optional[str] = None
    current_rent: Decimal
    expiry_date: date
    days_remaining: int

    def to_variables(self) -> Dict[str, Any]:
        return {
            "tenantName": self.tenant_name,
            "unitNumber": self.unit_number,
            "buildingName": self.building_name or "",
            "currentRent": self.current_rent,
            "expiryDate": self.expiry_date,
            "daysRemaining": self.days_remaining,
        }


class UnpaidItem(BaseModel):
    due_date: date
    amount: Decimal


class MonthlyUnpaidSummaryData(TemplatePayload):
    unit_number: str
    items: List[UnpaidItem] = Field(default_factory=list)

    @property
    def total_amount(self) -> Decimal:
        return sum((item.amount for item in self.items), Decimal("0"))

    def payment_list(self) -> str:
        """Lista numerada "<n>. <data> - <valor>" ordenada por vencimento"""
        ordered = sorted(self.items, key=lambda item: item.due_date)
        return "\n".join(
            f"{index}. {format_value(item.due_date)} - {format_value(item.amount)}"
            for index, item in enumerate(ordered, start=1)
        )

    def to_variables(self) -> Dict[str, Any]:
        return {
            "tenantName": self.tenant_name,
            "unitNumber": self.unit_number,
            "paymentCount": len(self.items),
            "paymentList": self.payment_list(),
            "totalAmount": self.total_amount,
        }


class AnnouncementData(TemplatePayload):
    subject: str
    message: str

    def to_variables(self) -> Dict[str, Any]:
        return {
            "tenantName": self.tenant_name,
            "subject": self.subject,
            "message": self.message,
        }
