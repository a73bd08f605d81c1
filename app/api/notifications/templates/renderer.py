from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional
import re

from .notification_templates import NOTIFICATION_TEMPLATES

DEFAULT_TEMPLATE_LANGUAGE = "en"

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def get_template(notification_type: Any, language: Optional[str] = DEFAULT_TEMPLATE_LANGUAGE) -> Optional[Dict[str, str]]:
    """Template do tipo no idioma pedido; idioma desconhecido cai para inglês, tipo desconhecido devolve None"""
    type_key = getattr(notification_type, "value", notification_type)
    template = NOTIFICATION_TEMPLATES.get(type_key)
    if not template:
        return None
    return template.get(language or DEFAULT_TEMPLATE_LANGUAGE) or template[DEFAULT_TEMPLATE_LANGUAGE]


def format_value(value: Any) -> str:
    """Datas em ISO, números com separador de milhar"""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, (float, Decimal)):
        return f"{value:,.2f}"
    return str(value)


def render_template(body: Optional[str], variables: Optional[Dict[str, Any]]) -> str:
    """Substitui {{chave}} pelos valores; placeholders sem valor ficam como estão"""
    if not body:
        return ""
    variables = variables or {}

    def _replace(match):
        key = match.group(1)
        if key not in variables or variables[key] is None:
            return match.group(0)
        return format_value(variables[key])

    return _PLACEHOLDER.sub(_replace, body)
