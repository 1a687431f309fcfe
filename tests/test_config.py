from decimal import Decimal

from config import format_currency, format_number, format_percent, parse_inteiro, parse_percentual, parse_valor_br


def test_parse_valor_br_remove_milhar_antes_da_virgula():
    assert parse_valor_br("1.500,00") == Decimal("1500.00")
    assert parse_valor_br("12.345.678,9") == Decimal("12345678.9")
    assert parse_valor_br("R$ 800,50") == Decimal("800.50")


def test_parse_valor_br_invalido_vira_zero():
    assert parse_valor_br(None) == 0
    assert parse_valor_br("") == 0
    assert parse_valor_br("abc") == 0
    assert parse_valor_br(",") == 0


def test_parse_valor_br_aceita_numeros():
    assert parse_valor_br(1500) == Decimal("1500")
    assert parse_valor_br(Decimal("2.5")) == Decimal("2.5")


def test_parse_percentual():
    assert parse_percentual("35") == Decimal("35")
    assert parse_percentual("27,5") == Decimal("27.5")
    assert parse_percentual("27.5") == Decimal("27.5")
    assert parse_percentual("30%") == Decimal("30")
    assert parse_percentual("outro") == 0
    assert parse_percentual(None) == 0


def test_parse_inteiro():
    assert parse_inteiro("45") == 45
    assert parse_inteiro(" 5 dias") == 5
    assert parse_inteiro("outro") is None
    assert parse_inteiro("") is None
    assert parse_inteiro(None) is None


def test_formatacao_brasileira():
    assert format_currency(Decimal("1234.5")) == "R$ 1.234,50"
    assert format_currency(None) == "-"
    assert format_number(Decimal("5000"), 2) == "5.000,00"
    assert format_percent(0.25) == "25,0%"
