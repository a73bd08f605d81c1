"""
Models de Cadastros
Entidades mantidas pelo CRUD externo e lidas pelo núcleo de cobrança
"""

from app.api.cadastros.models.model_contact import ContactModel
from app.api.cadastros.models.model_unit import UnitModel

__all__ = ["ContactModel", "UnitModel"]
