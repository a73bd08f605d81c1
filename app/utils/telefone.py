import re
from typing import Optional

from app.config.settings import PHONE_COUNTRY_CODE, PHONE_MOBILE_LENGTH, PHONE_MOBILE_PREFIX

# Prefixo herdado do transporte antigo (Twilio)
LEGACY_TRANSPORT_PREFIX = "whatsapp:"


def normalizar_telefone(
    telefone: Optional[str],
    country_code: str = PHONE_COUNTRY_CODE,
    mobile_length: int = PHONE_MOBILE_LENGTH,
    mobile_prefix: str = PHONE_MOBILE_PREFIX,
) -> Optional[str]:
    """
    Normaliza o telefone para o formato E.164 (+<país><número>).

    Regras:
    - Remove o prefixo legado "whatsapp:".
    - Remove máscara: espaços, parênteses, hífen etc. (o '+' inicial é lembrado).
    - Número que já veio com '+' é tratado como internacional; só recebe o país se tiver
      o formato de celular local (ex: +5XXXXXXXX).
    - Remove prefixo internacional "00" (ex: 00966...).
    - Já começa com o código do país: mantém.
    - Começa com "0" (ex: 05XXXXXXXX): troca o zero inicial pelo código do país.
    - Número de assinante com o tamanho de celular (ex: 5XXXXXXXX): prefixa o país.
    - Sempre devolve exatamente um '+' no início.

    Idempotente: normalizar um número já normalizado devolve o mesmo número.
    """
    if telefone is None:
        return None

    limpo = str(telefone).strip()
    if limpo.lower().startswith(LEGACY_TRANSPORT_PREFIX):
        limpo = limpo[len(LEGACY_TRANSPORT_PREFIX):].strip()

    internacional = limpo.startswith("+")
    digitos = re.sub(r"[^\d]", "", limpo)
    if not digitos:
        return ""

    if not internacional:
        if digitos.startswith("00"):
            digitos = digitos[2:]
        elif digitos.startswith(country_code):
            pass
        elif digitos.startswith("0"):
            digitos = country_code + digitos.lstrip("0")
        elif len(digitos) == mobile_length and digitos.startswith(mobile_prefix):
            digitos = country_code + digitos
    elif len(digitos) == mobile_length and digitos.startswith(mobile_prefix):
        digitos = country_code + digitos

    return "+" + digitos


def telefone_valido(telefone: Optional[str]) -> bool:
    """Verificação mínima de formato E.164 após normalização"""
    normalizado = normalizar_telefone(telefone)
    return bool(normalizado) and re.fullmatch(r"\+\d{8,15}", normalizado) is not None
