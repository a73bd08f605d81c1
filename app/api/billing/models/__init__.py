from .model_contract import ContractModel, PaymentFrequency
from .model_payment import PaymentModel, PaymentStatus

__all__ = ["ContractModel", "PaymentFrequency", "PaymentModel", "PaymentStatus"]
