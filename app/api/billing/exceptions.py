"""Erros do domínio de cobrança"""


class ScheduleGenerationError(Exception):
    """Contrato malformado: o cronograma não pode ser gerado com segurança"""

    def __init__(self, message: str, contract_id=None):
        super().__init__(message)
        self.contract_id = contract_id


class ScheduleAlreadyExistsError(Exception):
    """O contrato já possui parcelas geradas"""


class ContractNotFoundError(Exception):
    """Contrato não encontrado"""
