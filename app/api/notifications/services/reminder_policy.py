"""
Política de lembretes de pagamento.

Decide, a partir dos dias até o vencimento e da frequência do contrato,
qual faixa de lembrete (30d, 15d, 5d) vale para o dia.
"""
from datetime import date
from enum import Enum
from typing import Optional


class ReminderTier(str, Enum):
    DAYS_30 = "30d"
    DAYS_15 = "15d"
    DAYS_5 = "5d"

    @property
    def days(self) -> int:
        return int(self.value[:-1])


# Contratos mensais só recebem o lembrete de 5 dias
MONTHLY_TIERS = (ReminderTier.DAYS_5,)
DEFAULT_TIERS = (ReminderTier.DAYS_30, ReminderTier.DAYS_15, ReminderTier.DAYS_5)


def tiers_for_frequency(frequency: Optional[str]):
    if (frequency or "").strip().lower() == "monthly":
        return MONTHLY_TIERS
    return DEFAULT_TIERS


def tier_for(days_until_due: int, frequency: Optional[str], catch_up: bool = False) -> Optional[ReminderTier]:
    """
    Faixa de lembrete para o dia, ou None.

    Modo padrão: só dispara no dia exato (30, 15 ou 5 dias antes).
    Com catch_up=True: escolhe a menor faixa já alcançada (0 <= dias <= faixa),
    assim um dia perdido pelo agendador ainda gera o lembrete daquela faixa.
    """
    tiers = tiers_for_frequency(frequency)

    if not catch_up:
        for tier in tiers:
            if days_until_due == tier.days:
                return tier
        return None

    if days_until_due < 0:
        return None
    reached = [tier for tier in tiers if days_until_due <= tier.days]
    if not reached:
        return None
    return min(reached, key=lambda tier: tier.days)


def days_until(due_date: date, today: date) -> int:
    return (due_date - today).days


def reminder_dedup_key(payment_id: str, tier: ReminderTier) -> str:
    return f"{payment_id}:{tier.value}"
