"""
Regras de Pagamento - Plantão Financeiro
Opções de cada forma de pagamento e resolução dos campos "outro"
"""

from decimal import Decimal
from typing import Dict, List, Optional

from config import parse_inteiro, parse_percentual, ZERO

# ============================================
# FORMAS DE PAGAMENTO
# ============================================

COOPERATIVA = "cooperativa"
PESSOA_FISICA = "pf"
PESSOA_JURIDICA = "pj"
CLT = "clt"

METODOS_PAGAMENTO = {
    COOPERATIVA: "Cooperativa",
    PESSOA_FISICA: "Pessoa Física (RPA / autônomo)",
    PESSOA_JURIDICA: "PJ (CNPJ próprio / Nota Fiscal)",
    CLT: "Contratado CLT",
}

# Valor usado pelo wizard quando o usuário escolhe digitar o próprio valor
OUTRO = "outro"

COOPERATIVAS = [
    "Unimed Fortaleza",
    "Unimed Ceará",
    "Hapvida",
    "SulAmérica",
    "Coopanest-CE",
    "Cooperanest Ceará",
    "Coopcardio",
    "Coopermed Ceará",
    "Coopego",
    "Coopanest Metropolitana",
]

# ============================================
# COOPERATIVA
# ============================================

PERIODOS_TRABALHO = {
    "21-20": "Do dia 21 ao 20",
    "1-30": "Do dia 1 ao 30/31 (mês cheio)",
    "25-25": "Do dia 25 ao 25",
    OUTRO: "Outro período",
}

ATRASOS_PAGAMENTO = {
    "30": "30 dias",
    "45": "45 dias",
    "60": "60 dias",
    OUTRO: "Outro",
}

ATRASO_PADRAO_DIAS = 30
ATRASO_MAXIMO_DIAS = 365

PERIODO_EXATO = "exato"

# Período do mês -> (dia alvo, rótulo exibido)
PERIODOS_PAGAMENTO = {
    "1-5": (5, "Entre dias 1-5"),
    "10-15": (15, "Entre dias 10-15"),
    "20-30": (30, "Entre dias 20-30"),
}

TAXAS_COOPERATIVA = {
    "20": "20%",
    "25": "25%",
    "35": "35% (média das cooperativas)",
    "40": "40%",
    OUTRO: "Outro (%)",
}

# ============================================
# PAGAMENTO DIRETO (PF / PJ / CLT)
# ============================================

DIAS_PAGAMENTO = ["1", "5", "10", "15", "20", "25", "30", OUTRO]

TAXAS_DESCONTO = {
    "20": "20%",
    "25": "25%",
    "27": "27%",
    "30": "30%",
    "32": "32%",
    OUTRO: "Outro (%)",
}

MESMO_MES = "mesmo-mes"

# Grafias aceitas nos documentos
_ALIASES = {
    "exact": PERIODO_EXATO,
    "same-month": MESMO_MES,
    "weekly": "semanal",
    "biweekly": "quinzenal",
    "monthly": "mensal",
}

# ============================================
# CADASTRO DO PLANTÃO
# ============================================

DURACOES = {
    "diurno-6h": ("Plantão diurno — 6h", 6),
    "diurno-12h": ("Plantão diurno — 12h", 12),
    "noturno-12h": ("Plantão noturno — 12h", 12),
}

RECORRENCIAS = {
    "semanal": ("Toda semana", 4),
    "quinzenal": ("A cada 15 dias", 2),
    "mensal": ("1x por mês", 1),
}

# Nome do dia -> date.weekday() (segunda = 0)
DIAS_SEMANA = {
    "Segunda-feira": 0,
    "Terça-feira": 1,
    "Quarta-feira": 2,
    "Quinta-feira": 3,
    "Sexta-feira": 4,
    "Sábado": 5,
    "Domingo": 6,
}

TIPOS_ESCALA = ["fixed", "sporadic", "hybrid"]


def normalizar_opcao(valor: Optional[str]) -> Optional[str]:
    """Converte grafias alternativas (exact, same-month, weekly...) para as do wizard"""
    if valor is None:
        return None
    valor = str(valor).strip()
    return _ALIASES.get(valor, valor)


def e_cooperativa(metodo: Optional[str]) -> bool:
    return metodo == COOPERATIVA


# ============================================
# RESOLUÇÃO DE CAMPOS
# ============================================

def resolver_taxa(preset: Optional[str], personalizada: Optional[str] = None) -> Decimal:
    """
    Taxa efetiva em %.
    O campo personalizado vence quando preenchido; "outro" sem valor
    ou texto inválido resultam em zero.
    """
    if personalizada not in (None, ""):
        return parse_percentual(personalizada)
    if preset in (None, "", OUTRO):
        return ZERO
    return parse_percentual(preset)


def resolver_taxa_texto(preset: Optional[str], personalizada: Optional[str] = None) -> str:
    """Mesma regra de resolver_taxa, mas mantendo o texto digitado (campo discountRate)"""
    if personalizada not in (None, ""):
        return str(personalizada)
    if preset in (None, OUTRO):
        return ""
    return str(preset)


def resolver_atraso(preset: Optional[str], personalizado: Optional[str] = None) -> int:
    """Dias entre o fechamento e o pagamento da cooperativa (padrão 30)"""
    for valor in (personalizado, preset):
        dias = parse_inteiro(valor)
        if dias is not None:
            return dias
    return ATRASO_PADRAO_DIAS


def resolver_dia_pagamento(preset: Optional[str], personalizado: Optional[str] = None) -> Optional[int]:
    """Dia do mês escolhido para o pagamento direto, ou None se não informado"""
    for valor in (personalizado, preset):
        dia = parse_inteiro(valor)
        if dia is not None:
            return dia
    return None


def calcular_horario_termino(inicio: str, duracao: str) -> str:
    """
    Horário de término a partir do início e da duração ("19:00" + noturno-12h -> "07:00").
    Retorna "" se faltar dado.
    """
    if not inicio or duracao not in DURACOES:
        return ""
    try:
        horas, minutos = (int(p) for p in inicio.split(":")[:2])
    except ValueError:
        return ""
    _, duracao_horas = DURACOES[duracao]
    fim = (horas + duracao_horas) % 24
    return f"{fim:02d}:{minutos:02d}"


def estimar_plantoes_mes(recorrencia: Optional[str], dias_por_semana: int) -> int:
    """Estimativa exibida no resumo: dias por semana × 4 / 2 / 1 conforme a recorrência"""
    recorrencia = normalizar_opcao(recorrencia)
    _, fator = RECORRENCIAS.get(recorrencia, RECORRENCIAS["semanal"])
    return dias_por_semana * fator


def rotulo_metodo(metodo: str, cooperativa: str = "") -> str:
    if metodo == COOPERATIVA and cooperativa:
        return cooperativa
    return METODOS_PAGAMENTO.get(metodo, metodo)


# ============================================
# VALIDAÇÃO DOS PARÂMETROS
# ============================================

def _dia_valido(dia: Optional[int]) -> bool:
    return dia is not None and 1 <= dia <= 31


def validar_cooperativa(dados: Dict) -> List[str]:
    """
    Confere os parâmetros da cooperativa contra os domínios permitidos.
    Retorna a lista de problemas encontrados (vazia se estiver tudo certo).
    """
    erros = []
    periodo_trabalho = dados.get("workPeriod")
    if periodo_trabalho and periodo_trabalho not in PERIODOS_TRABALHO:
        erros.append(f"Período de trabalho desconhecido: {periodo_trabalho}")
    if periodo_trabalho == OUTRO:
        inicio = parse_inteiro(dados.get("customWorkPeriodStart"))
        fim = parse_inteiro(dados.get("customWorkPeriodEnd"))
        if not (_dia_valido(inicio) and _dia_valido(fim)):
            erros.append("Período de trabalho personalizado precisa de início e fim entre 1 e 31")

    atraso = dados.get("paymentDelay")
    if atraso and atraso not in ATRASOS_PAGAMENTO:
        erros.append(f"Prazo de pagamento desconhecido: {atraso}")
    if atraso == OUTRO or dados.get("customPaymentDelay"):
        dias = parse_inteiro(dados.get("customPaymentDelay"))
        if dias is None or not 0 <= dias <= ATRASO_MAXIMO_DIAS:
            erros.append(f"Prazo de pagamento personalizado deve estar entre 0 e {ATRASO_MAXIMO_DIAS} dias")

    periodo = normalizar_opcao(dados.get("paymentPeriod"))
    if periodo and periodo != PERIODO_EXATO and periodo not in PERIODOS_PAGAMENTO:
        erros.append(f"Período de pagamento desconhecido: {periodo}")
    if periodo == PERIODO_EXATO and not _dia_valido(parse_inteiro(dados.get("customPaymentDay"))):
        erros.append("Dia exato de pagamento deve estar entre 1 e 31")

    taxa = dados.get("taxRate")
    if taxa and taxa not in TAXAS_COOPERATIVA:
        erros.append(f"Taxa desconhecida: {taxa}")
    if taxa == OUTRO and not dados.get("customTaxRate"):
        erros.append("Informe a taxa personalizada")
    return erros


def validar_pagamento_direto(dados: Dict) -> List[str]:
    """Confere os parâmetros de pagamento direto (PF, PJ, CLT)"""
    erros = []
    dia = dados.get("paymentDay")
    if dia and dia not in DIAS_PAGAMENTO:
        erros.append(f"Dia de pagamento desconhecido: {dia}")
    personalizado = dados.get("customPaymentDay")
    if dia == OUTRO or personalizado:
        if not _dia_valido(parse_inteiro(personalizado)):
            erros.append("Dia de pagamento personalizado deve estar entre 1 e 31")

    desconto = dados.get("discountRate")
    if desconto and desconto not in TAXAS_DESCONTO:
        erros.append(f"Desconto desconhecido: {desconto}")
    if desconto == OUTRO and not dados.get("customDiscountRate"):
        erros.append("Informe o desconto personalizado")
    return erros


def validar_parametros(metodo: str, dados: Optional[Dict]) -> List[str]:
    """Valida o pacote de parâmetros de acordo com a forma de pagamento"""
    if metodo not in METODOS_PAGAMENTO:
        return [f"Forma de pagamento desconhecida: {metodo}"]
    if dados is None:
        return ["Parâmetros de pagamento ausentes"]
    if metodo == COOPERATIVA:
        return validar_cooperativa(dados)
    return validar_pagamento_direto(dados)
