"""
Motor de Cálculo - Plantão Financeiro
Núcleo de projeção: valor líquido, ocorrências dos plantões fixos
e data prevista de pagamento de cada plantão
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from config import MESES_ABREV, ZERO, parse_inteiro, parse_valor_br, parse_percentual
import regras_pagamento as regras

CEM = Decimal("100")

# ============================================
# STATUS
# ============================================

class StatusTrabalho(str, Enum):
    """Situação do plantão (ausência no documento = pendente)"""
    PENDENTE = "pending"
    REALIZADO = "completed"
    FALTOU = "missed"


class StatusPagamento(str, Enum):
    """Situação do pagamento (ausência no documento = pendente)"""
    PENDENTE = "pending"
    RECEBIDO = "received"


# ============================================
# ESTRUTURAS DE DADOS
# ============================================

# atributo -> chave no documento JSON
_CAMPOS_COOPERATIVA = {
    "cooperativa": "cooperativa",
    "periodo_trabalho": "workPeriod",
    "inicio_periodo": "customWorkPeriodStart",
    "fim_periodo": "customWorkPeriodEnd",
    "atraso": "paymentDelay",
    "atraso_personalizado": "customPaymentDelay",
    "periodo_pagamento": "paymentPeriod",
    "dia_personalizado": "customPaymentDay",
    "valor_bruto": "grossValue",
    "taxa": "taxRate",
    "taxa_personalizada": "customTaxRate",
}

_CAMPOS_DIRETO = {
    "paga_mes_seguinte": "paysNextMonth",
    "momento_pagamento": "paymentTiming",
    "dia_pagamento": "paymentDay",
    "dia_personalizado": "customPaymentDay",
    "valor_bruto": "grossValue",
    "desconto": "discountRate",
    "desconto_personalizado": "customDiscountRate",
}


def _texto(valor) -> str:
    if valor is None:
        return ""
    return str(valor)


def _para_dict(obj, campos: Dict[str, str]) -> Dict:
    # Campos vazios não são gravados, como no wizard
    return {chave: getattr(obj, attr) for attr, chave in campos.items() if getattr(obj, attr)}


def _de_dict(cls, dados: Dict, campos: Dict[str, str]):
    return cls(**{attr: _texto(dados.get(chave)) for attr, chave in campos.items()})


@dataclass
class DadosCooperativa:
    """Parâmetros de pagamento via cooperativa"""
    cooperativa: str = ""
    periodo_trabalho: str = ""  # "21-20", "1-30", "25-25" ou "outro"
    inicio_periodo: str = ""
    fim_periodo: str = ""
    atraso: str = ""  # dias após o fechamento ("30", "45", "60", "outro")
    atraso_personalizado: str = ""
    periodo_pagamento: str = ""  # "1-5", "10-15", "20-30" ou "exato"
    dia_personalizado: str = ""
    valor_bruto: str = ""  # "1.500,00"
    taxa: str = ""
    taxa_personalizada: str = ""

    @property
    def dias_atraso(self) -> int:
        return regras.resolver_atraso(self.atraso, self.atraso_personalizado)

    @property
    def taxa_efetiva(self) -> Decimal:
        return regras.resolver_taxa(self.taxa, self.taxa_personalizada)

    def to_dict(self) -> Dict:
        return _para_dict(self, _CAMPOS_COOPERATIVA)

    @classmethod
    def from_dict(cls, dados: Dict) -> 'DadosCooperativa':
        return _de_dict(cls, dados or {}, _CAMPOS_COOPERATIVA)


@dataclass
class DadosPagamentoDireto:
    """Parâmetros de pagamento direto (PF / PJ / CLT)"""
    paga_mes_seguinte: str = ""  # "sim" ou "nao"
    momento_pagamento: str = ""  # "mesmo-mes" quando pago no próprio mês
    dia_pagamento: str = ""
    dia_personalizado: str = ""
    valor_bruto: str = ""
    desconto: str = ""
    desconto_personalizado: str = ""

    @property
    def mesmo_mes(self) -> bool:
        if regras.normalizar_opcao(self.momento_pagamento) == regras.MESMO_MES:
            return True
        return self.paga_mes_seguinte == "nao"

    @property
    def dia(self) -> Optional[int]:
        return regras.resolver_dia_pagamento(self.dia_pagamento, self.dia_personalizado)

    @property
    def taxa_efetiva(self) -> Decimal:
        return regras.resolver_taxa(self.desconto, self.desconto_personalizado)

    def to_dict(self) -> Dict:
        return _para_dict(self, _CAMPOS_DIRETO)

    @classmethod
    def from_dict(cls, dados: Dict) -> 'DadosPagamentoDireto':
        return _de_dict(cls, dados or {}, _CAMPOS_DIRETO)


@dataclass(frozen=True)
class ValorPlantao:
    """Valores de um plantão após o desconto"""
    bruto: Decimal = ZERO
    liquido: Decimal = ZERO
    imposto: Decimal = ZERO


@dataclass(frozen=True)
class PrevisaoPagamento:
    """Data prevista de crédito e o texto mostrado ao usuário"""
    rotulo: str
    data: date


@dataclass
class PlantaoFixo:
    """Plantão recorrente cadastrado no onboarding ou pela agenda"""
    id: str
    hospital: str
    setor: str = ""
    dias_semana: List[str] = field(default_factory=list)
    recorrencia: str = "semanal"  # semanal, quinzenal, mensal
    duracao: str = ""
    inicio: str = ""  # "07:00"
    termino: str = ""  # calculado uma vez no cadastro
    metodo_pagamento: str = ""
    valor_bruto: str = ""
    taxa_desconto: str = ""  # taxa já resolvida (preset ou personalizada)
    cooperativa: Optional[DadosCooperativa] = None
    pagamento_direto: Optional[DadosPagamentoDireto] = None

    @property
    def valor(self) -> ValorPlantao:
        return converter_valor(self.valor_bruto, self.taxa_desconto)

    def to_dict(self) -> Dict:
        dados = {
            "id": self.id,
            "hospital": self.hospital,
            "sector": self.setor,
            "duration": self.duracao,
            "recurrence": self.recorrencia,
            "daysOfWeek": list(self.dias_semana),
            "startTime": self.inicio,
            "endTime": self.termino,
            "paymentMethod": self.metodo_pagamento,
            "grossValue": self.valor_bruto,
            "discountRate": self.taxa_desconto,
        }
        if self.cooperativa is not None:
            dados["cooperativaData"] = self.cooperativa.to_dict()
        if self.pagamento_direto is not None:
            dados["directPaymentData"] = self.pagamento_direto.to_dict()
        return dados

    @classmethod
    def from_dict(cls, dados: Dict) -> 'PlantaoFixo':
        cooperativa = dados.get("cooperativaData")
        direto = dados.get("directPaymentData")
        dias = dados.get("daysOfWeek") or []
        if not isinstance(dias, list):
            print(f"[LOAD] ⚠️ daysOfWeek inválido no plantão {dados.get('id')!r}: {dias!r}")
            dias = []
        return cls(
            id=_texto(dados.get("id")),
            hospital=_texto(dados.get("hospital")),
            setor=_texto(dados.get("sector")),
            dias_semana=[d for d in dias if isinstance(d, str)],
            recorrencia=_texto(dados.get("recurrence")) or "semanal",
            duracao=_texto(dados.get("duration")),
            inicio=_texto(dados.get("startTime")),
            termino=_texto(dados.get("endTime")),
            metodo_pagamento=_texto(dados.get("paymentMethod")),
            valor_bruto=_texto(dados.get("grossValue")),
            taxa_desconto=_texto(dados.get("discountRate")),
            cooperativa=DadosCooperativa.from_dict(cooperativa) if isinstance(cooperativa, dict) else None,
            pagamento_direto=DadosPagamentoDireto.from_dict(direto) if isinstance(direto, dict) else None,
        )


@dataclass
class PlantaoAvulso:
    """Plantão avulso, com data única"""
    id: str
    hospital: str
    data: str  # "yyyy-MM-dd"
    setor: str = ""
    inicio: str = ""
    termino: str = ""
    ja_realizado: bool = False
    metodo_pagamento: str = ""
    cooperativa: Optional[DadosCooperativa] = None
    pagamento_direto: Optional[DadosPagamentoDireto] = None
    status_pagamento: str = "pending"  # pending, received, overdue (informativo)
    previsao_pagamento: str = ""  # "dd/MM/yyyy" gravado no cadastro

    @property
    def data_plantao(self) -> Optional[date]:
        """Data do plantão, ou None se o texto gravado for inválido"""
        try:
            return datetime.strptime(self.data, "%Y-%m-%d").date()
        except (TypeError, ValueError):
            return None

    @property
    def valor(self) -> ValorPlantao:
        if regras.e_cooperativa(self.metodo_pagamento) and self.cooperativa is not None:
            return converter_valor(self.cooperativa.valor_bruto, self.cooperativa.taxa_efetiva)
        if self.pagamento_direto is not None:
            return converter_valor(self.pagamento_direto.valor_bruto, self.pagamento_direto.taxa_efetiva)
        return ValorPlantao()

    def to_dict(self) -> Dict:
        dados = {
            "id": self.id,
            "hospital": self.hospital,
            "sector": self.setor,
            "date": self.data,
            "startTime": self.inicio,
            "endTime": self.termino,
            "alreadyRealized": self.ja_realizado,
            "paymentMethod": self.metodo_pagamento,
            "paymentStatus": self.status_pagamento,
            "predictedPaymentDate": self.previsao_pagamento,
        }
        if self.cooperativa is not None:
            dados["cooperativaData"] = self.cooperativa.to_dict()
        if self.pagamento_direto is not None:
            dados["directPaymentData"] = self.pagamento_direto.to_dict()
        return dados

    @classmethod
    def from_dict(cls, dados: Dict) -> 'PlantaoAvulso':
        cooperativa = dados.get("cooperativaData")
        direto = dados.get("directPaymentData")
        return cls(
            id=_texto(dados.get("id")),
            hospital=_texto(dados.get("hospital")),
            data=_texto(dados.get("date")),
            setor=_texto(dados.get("sector")),
            inicio=_texto(dados.get("startTime")),
            termino=_texto(dados.get("endTime")),
            ja_realizado=bool(dados.get("alreadyRealized", False)),
            metodo_pagamento=_texto(dados.get("paymentMethod")),
            cooperativa=DadosCooperativa.from_dict(cooperativa) if isinstance(cooperativa, dict) else None,
            pagamento_direto=DadosPagamentoDireto.from_dict(direto) if isinstance(direto, dict) else None,
            status_pagamento=_texto(dados.get("paymentStatus")) or "pending",
            previsao_pagamento=_texto(dados.get("predictedPaymentDate")),
        )


@dataclass
class EstimativaAvulsos:
    """
    Estimativa grosseira de avulsos, usada quando o usuário não cadastra
    cada plantão. Entra só no total previsto; nunca vira "recebido".
    """
    media_plantoes: str = ""  # averageShiftsPerMonth
    valor_medio: str = ""  # averageNetValue (já líquido)
    periodo_pagamento: str = ""
    dia_personalizado: str = ""

    @property
    def contribuicao_mensal(self) -> Decimal:
        quantidade = parse_inteiro(self.media_plantoes) or 0
        return parse_valor_br(self.valor_medio) * quantidade

    def to_dict(self) -> Dict:
        dados = {
            "averageShiftsPerMonth": self.media_plantoes,
            "averageNetValue": self.valor_medio,
            "paymentPeriod": self.periodo_pagamento,
        }
        if self.dia_personalizado:
            dados["customPaymentDay"] = self.dia_personalizado
        return dados

    @classmethod
    def from_dict(cls, dados: Dict) -> 'EstimativaAvulsos':
        return cls(
            media_plantoes=_texto(dados.get("averageShiftsPerMonth")),
            valor_medio=_texto(dados.get("averageNetValue")),
            periodo_pagamento=_texto(dados.get("paymentPeriod")),
            dia_personalizado=_texto(dados.get("customPaymentDay")),
        )


# ============================================
# CONVERSÃO DE VALORES
# ============================================

def calcular_valor_liquido(bruto: Decimal, taxa_percentual: Decimal) -> Decimal:
    """Líquido = Bruto × (1 - Taxa/100)"""
    return bruto * (1 - taxa_percentual / CEM)


def calcular_imposto(bruto: Decimal, taxa_percentual: Decimal) -> Decimal:
    """Valor descontado (bruto - líquido)"""
    return bruto - calcular_valor_liquido(bruto, taxa_percentual)


def converter_valor(bruto, taxa_percentual) -> ValorPlantao:
    """
    Converte bruto digitado ("1.500,00") e taxa em bruto/líquido/imposto.
    Valores ausentes ou inválidos contam como zero.
    """
    valor_bruto = parse_valor_br(bruto)
    taxa = parse_percentual(taxa_percentual)
    liquido = calcular_valor_liquido(valor_bruto, taxa)
    return ValorPlantao(bruto=valor_bruto, liquido=liquido, imposto=valor_bruto - liquido)


# ============================================
# DATAS
# ============================================

def data_normalizada(ano: int, mes: int, dia: int) -> date:
    """
    Monta uma data aceitando mês e dia fora da faixa, que transbordam
    para os seguintes (30/02/2024 -> 01/03/2024, mês 13 -> janeiro do ano seguinte).
    Dia 0 é o último dia do mês anterior.
    """
    ano += (mes - 1) // 12
    mes = (mes - 1) % 12 + 1
    return date(ano, mes, 1) + timedelta(days=dia - 1)


def ultimo_dia_mes(ano: int, mes: int) -> date:
    return date(ano, mes, calendar.monthrange(ano, mes)[1])


def somar_meses(referencia: date, meses: int) -> date:
    """Primeiro dia do mês deslocado em `meses`"""
    return data_normalizada(referencia.year, referencia.month + meses, 1)


def no_mesmo_mes(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def _avancar_se_passou(candidata: date, referencia: date) -> date:
    # comparação estrita: cair exatamente na referência não avança
    if candidata < referencia:
        return data_normalizada(candidata.year, candidata.month + 1, candidata.day)
    return candidata


def _rotulo_data(dia: date) -> str:
    return f"{dia.day} {MESES_ABREV[dia.month - 1].lower()}"


# ============================================
# OCORRÊNCIAS DOS PLANTÕES FIXOS
# ============================================

def expandir_ocorrencias(plantao: PlantaoFixo, inicio: date, fim: date) -> List[date]:
    """
    Datas em [inicio, fim] cujo dia da semana está no plantão.

    A recorrência (quinzenal, mensal) não reduz as ocorrências: todo dia
    da semana marcado conta, como se fosse semanal.
    """
    dias = {regras.DIAS_SEMANA[nome] for nome in plantao.dias_semana if nome in regras.DIAS_SEMANA}
    if not dias:
        return []
    ocorrencias = []
    dia = inicio
    while dia <= fim:
        if dia.weekday() in dias:
            ocorrencias.append(dia)
        dia += timedelta(days=1)
    return ocorrencias


def id_ocorrencia_fixa(plantao_id: str, dia: date) -> str:
    return f"{plantao_id}-{dia.isoformat()}"


def id_ocorrencia_avulsa(plantao_id: str) -> str:
    return f"sporadic-{plantao_id}"


# ============================================
# PREVISÃO DE PAGAMENTO
# ============================================

def _prever_cooperativa(dia: date, dados: DadosCooperativa) -> PrevisaoPagamento:
    base = dia + timedelta(days=dados.dias_atraso)
    periodo = regras.normalizar_opcao(dados.periodo_pagamento)

    dia_alvo = None
    if periodo == regras.PERIODO_EXATO:
        dia_alvo = parse_inteiro(dados.dia_personalizado)
        rotulo = f"Dia {dados.dia_personalizado}"
    elif periodo in regras.PERIODOS_PAGAMENTO:
        dia_alvo, rotulo = regras.PERIODOS_PAGAMENTO[periodo]

    if dia_alvo is None:
        return PrevisaoPagamento(rotulo=_rotulo_data(base), data=base)

    candidata = data_normalizada(base.year, base.month, dia_alvo)
    return PrevisaoPagamento(rotulo=rotulo, data=_avancar_se_passou(candidata, base))


def _prever_direto(dia: date, dados: DadosPagamentoDireto) -> PrevisaoPagamento:
    dia_pagamento = dados.dia
    if dia_pagamento is not None:
        candidata = data_normalizada(dia.year, dia.month, dia_pagamento)
        if not dados.mesmo_mes or candidata < dia:
            candidata = data_normalizada(candidata.year, candidata.month + 1, candidata.day)
        return PrevisaoPagamento(rotulo=f"Dia {dia_pagamento}", data=candidata)
    if dados.mesmo_mes:
        return PrevisaoPagamento(rotulo="Mesmo mês", data=ultimo_dia_mes(dia.year, dia.month))
    seguinte = somar_meses(dia, 1)
    return PrevisaoPagamento(rotulo="Mês seguinte", data=ultimo_dia_mes(seguinte.year, seguinte.month))


def prever_data_pagamento(
    dia: date,
    metodo_pagamento: str,
    cooperativa: Optional[DadosCooperativa] = None,
    pagamento_direto: Optional[DadosPagamentoDireto] = None,
) -> Optional[PrevisaoPagamento]:
    """
    Data prevista de crédito de um plantão realizado em `dia`.

    Cooperativa: dia + atraso, ajustado para o dia alvo do período de
    pagamento; se o dia alvo já passou no mês da base, vai para o mês seguinte.
    Direto: dia escolhido no mês do plantão, empurrado um mês salvo quando o
    pagamento é no mesmo mês e o dia ainda não passou.
    Sem parâmetros de pagamento, ou com atraso/dia que estoura o calendário,
    não há previsão (None).
    """
    try:
        if regras.e_cooperativa(metodo_pagamento) and cooperativa is not None:
            return _prever_cooperativa(dia, cooperativa)
        if pagamento_direto is not None:
            return _prever_direto(dia, pagamento_direto)
    except (OverflowError, ValueError) as e:
        # atraso ou dia gravado fora do calendário
        print(f"[LOAD] ⚠️ Previsão impossível para {dia}: {e}")
    return None


def calcular_dias_atraso(data_prevista: Optional[date], hoje: Optional[date] = None) -> Optional[int]:
    """Dias de atraso do pagamento; None se ainda não venceu ou vence hoje"""
    if data_prevista is None:
        return None
    if isinstance(data_prevista, datetime):
        data_prevista = data_prevista.date()
    if hoje is None:
        hoje = date.today()
    elif isinstance(hoje, datetime):
        hoje = hoje.date()
    if hoje <= data_prevista:
        return None
    return (hoje - data_prevista).days
