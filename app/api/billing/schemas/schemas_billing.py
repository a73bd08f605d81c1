from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import date
from decimal import Decimal


class BillingModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SchedulePreviewRequest(BillingModel):
    """Dados mínimos do contrato para simular o cronograma"""
    start_date: date
    end_date: date
    rent_amount: Decimal = Field(..., gt=0, description="Valor ANUAL do aluguel")
    payment_frequency: Optional[str] = Field("monthly", description="weekly, monthly, quarterly, semi-annually, yearly")


class ScheduledPaymentResponse(BillingModel):
    due_date: date
    amount: Decimal


class SchedulePreviewResponse(BillingModel):
    payment_frequency: str
    payments_per_year: int
    amount_per_payment: Decimal
    count: int
    total_amount: Decimal
    payments: List[ScheduledPaymentResponse]


class PaymentResponse(BillingModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    contract_id: str
    due_date: date
    amount: Decimal
    status: str
    paid_date: Optional[date] = None


class ContractPaymentsResponse(BillingModel):
    contract_id: str
    count: int
    payments: List[PaymentResponse]
