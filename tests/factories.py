import asyncio
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from app.api.billing.models.model_contract import ContractModel
from app.api.billing.models.model_payment import PaymentModel, PaymentStatus
from app.api.cadastros.models.model_contact import ContactModel
from app.api.cadastros.models.model_unit import UnitModel
from app.api.notifications.channels.base_channel import BaseNotificationChannel, DeliveryResult


class FakeChannel(BaseNotificationChannel):
    """Canal de teste: registra as entregas e devolve os resultados programados"""

    def __init__(
        self,
        name: str = "whatsapp",
        recipient_field: str = "recipient_phone",
        results: Optional[List] = None,
        delay: float = 0,
    ):
        super().__init__()
        self.delay = delay
        self.name = name
        self.recipient_field = recipient_field
        self.results = list(results or [])
        self.sent = []

    def get_channel_name(self) -> str:
        return self.name

    async def deliver(self, recipient, text, subject=None) -> DeliveryResult:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.sent.append({"recipient": recipient, "text": text, "subject": subject})
        result = self.results.pop(0) if self.results else DeliveryResult(True, message_id=f"msg-{len(self.sent)}")
        if isinstance(result, Exception):
            raise result
        return result


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def create_contract(
    db,
    start: date,
    end: date,
    rent: str = "12000",
    frequency: str = "monthly",
    phone: Optional[str] = "0501234567",
    name: str = "Ahmed Ali",
) -> ContractModel:
    contact = ContactModel(full_name=name, phone=phone, email="tenant@example.com", preferred_language="en")
    unit = UnitModel(unit_number="A-101", building_name="Palm Tower")
    db.add_all([contact, unit])
    db.flush()
    contract = ContractModel(
        unit_id=unit.id,
        contact_id=contact.id,
        start_date=start,
        end_date=end,
        rent_amount=Decimal(rent),
        payment_frequency=frequency,
    )
    db.add(contract)
    db.commit()
    db.refresh(contract)
    return contract


def add_payment(db, contract: ContractModel, due: date, amount: str = "1000.00", status: str = PaymentStatus.PENDING.value) -> PaymentModel:
    payment = PaymentModel(contract_id=contract.id, due_date=due, amount=Decimal(amount), status=status)
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return payment
