"""
Configurações do Plantão Financeiro
Planejamento financeiro para plantonistas
"""

import re
from decimal import Decimal, InvalidOperation
from pathlib import Path

# Diretórios
BASE_DIR = Path(__file__).parent
DATA_DIR = BASE_DIR / "data"

# Configurações do sistema
APP_NAME = "Plantão Financeiro"
APP_VERSION = "1.4.0"
APP_SUBTITLE = "Previsão de recebimentos | Plantões médicos"

# Chaves dos documentos persistidos (mesmas do app web)
CHAVE_PLANTOES = "plantonmed_shifts"
CHAVE_AVULSOS = "plantonmed_sporadic_shifts"
CHAVE_ESTIMATIVA = "plantonmed_sporadic_estimate"
CHAVE_STATUS_PLANTOES = "plantonmed_shift_statuses"
CHAVE_STATUS_PAGAMENTOS = "plantonmed_payment_statuses"
CHAVE_PERFIL = "plantonmed_profile"
CHAVE_ULTIMO_PAGAMENTO = "plantonmed_last_sporadic_payment"

# Tabela do Supabase com os documentos por usuário
TABELA_DOCUMENTOS = "documentos"

# Meses
MESES = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro"
]

MESES_ABREV = ["Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
               "Jul", "Ago", "Set", "Out", "Nov", "Dez"]

ZERO = Decimal("0")


# Formatação de valores
def format_currency(value, prefix="R$ "):
    """Formata valor como moeda brasileira"""
    if value is None:
        return "-"
    try:
        return f"{prefix}{value:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    except (TypeError, ValueError):
        return "-"

def format_percent(value, decimals=1):
    """Formata fração como percentual (0.35 -> 35,0%)"""
    if value is None:
        return "-"
    try:
        return f"{value * 100:,.{decimals}f}%".replace(",", "X").replace(".", ",").replace("X", ".")
    except (TypeError, ValueError):
        return "-"

def format_number(value, decimals=0):
    """Formata número com separador de milhar"""
    if value is None:
        return "-"
    try:
        return f"{value:,.{decimals}f}".replace(",", "X").replace(".", ",").replace("X", ".")
    except (TypeError, ValueError):
        return "-"


# ============================================
# LEITURA DE VALORES DIGITADOS
# ============================================

# Prefixos numéricos lidos como parseFloat/parseInt do navegador ("35%" -> 35, "12abc" -> 12)
_NUMERO = re.compile(r"^\s*[-+]?(\d+(\.\d*)?|\.\d+)")
_INTEIRO = re.compile(r"^\s*[-+]?\d+")


def _prefixo_decimal(texto: str) -> Decimal:
    match = _NUMERO.match(texto)
    if not match:
        return ZERO
    try:
        return Decimal(match.group(0).strip())
    except InvalidOperation:
        return ZERO


def parse_valor_br(valor) -> Decimal:
    """
    Converte valor monetário no formato brasileiro para Decimal.

    "1.500,00" -> 1500.00. Os pontos de milhar são removidos antes de
    trocar a vírgula decimal. Vazio, None ou texto inválido viram zero.
    """
    if valor is None or isinstance(valor, bool):
        return ZERO
    if isinstance(valor, Decimal):
        return valor
    if isinstance(valor, (int, float)):
        return Decimal(str(valor))
    texto = str(valor).replace("R$", "").strip()
    if not texto:
        return ZERO
    texto = texto.replace(".", "").replace(",", ".", 1)
    return _prefixo_decimal(texto)


def parse_percentual(valor) -> Decimal:
    """Converte taxa digitada ("35", "27,5", "27.5") para Decimal. Inválido vira zero."""
    if valor is None or isinstance(valor, bool):
        return ZERO
    if isinstance(valor, Decimal):
        return valor
    if isinstance(valor, (int, float)):
        return Decimal(str(valor))
    texto = str(valor).replace("%", "").strip().replace(",", ".", 1)
    return _prefixo_decimal(texto)


def parse_inteiro(valor):
    """Lê inteiro de um campo digitado. Retorna None se não houver número."""
    if valor is None or isinstance(valor, bool):
        return None
    if isinstance(valor, int):
        return valor
    match = _INTEIRO.match(str(valor))
    if not match:
        return None
    return int(match.group(0))
