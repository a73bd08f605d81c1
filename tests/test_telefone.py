import pytest

from app.utils.telefone import normalizar_telefone, telefone_valido


def test_local_formats_get_country_code():
    assert normalizar_telefone("0501234567") == "+966501234567"
    assert normalizar_telefone("501234567") == "+966501234567"
    assert normalizar_telefone("050-123 4567") == "+966501234567"


def test_international_formats_are_kept():
    assert normalizar_telefone("+966 50 123 4567") == "+966501234567"
    assert normalizar_telefone("00966501234567") == "+966501234567"
    assert normalizar_telefone("966501234567") == "+966501234567"
    assert normalizar_telefone("+5511999998888") == "+5511999998888"


def test_legacy_transport_prefix_is_removed():
    assert normalizar_telefone("whatsapp:+966501234567") == "+966501234567"


NUMEROS = [
    "0501234567",
    "501234567",
    "050-123 4567",
    "+966 50 123 4567",
    "00966501234567",
    "966501234567",
    "+5511999998888",
    "+501234567",
    "whatsapp:+966501234567",
]


def test_plus_prefixed_local_mobile_gets_country_code():
    assert normalizar_telefone("+501234567") == "+966501234567"
    assert normalizar_telefone("+50 123 4567") == "+966501234567"


@pytest.mark.parametrize("numero", NUMEROS)
def test_normalization_is_idempotent(numero):
    once = normalizar_telefone(numero)
    assert normalizar_telefone(once) == once


def test_empty_values():
    assert normalizar_telefone(None) is None
    assert normalizar_telefone("abc") == ""


def test_validation():
    assert telefone_valido("0501234567")
    assert not telefone_valido("123")
    assert not telefone_valido(None)
    assert not telefone_valido("")
