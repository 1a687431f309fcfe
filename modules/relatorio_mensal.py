"""
Relatório Mensal - Plantão Financeiro
Previsto x Recebido do mês, meta e visões de agenda

O mês de um plantão no relatório é o mês da DATA PREVISTA DE PAGAMENTO,
não o mês em que o plantão foi feito. Tudo é recalculado a partir dos
documentos a cada chamada.
"""

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from config import ZERO
from motor_calculo import (
    EstimativaAvulsos, PlantaoAvulso, PlantaoFixo, StatusPagamento, StatusTrabalho,
    calcular_dias_atraso, expandir_ocorrencias, id_ocorrencia_avulsa, id_ocorrencia_fixa,
    no_mesmo_mes, prever_data_pagamento, somar_meses, ultimo_dia_mes,
)
from modules.armazenamento import ArmazenamentoBase
from modules.plantao_manager import PlantaoManager
from status_manager import StatusManager

# Meses anteriores varridos: plantão de um mês pode ser pago 1-2 meses depois
MESES_RETROATIVOS = 3

# ============================================
# ESTRUTURAS DE DADOS
# ============================================

@dataclass
class RegistroPlantao:
    """Uma ocorrência de plantão com valores, previsão e status"""
    id: str
    hospital: str
    data: date
    tipo: str  # "fixed" ou "sporadic"
    setor: str = ""
    inicio: str = ""
    termino: str = ""
    valor_bruto: Decimal = ZERO
    valor_liquido: Decimal = ZERO
    imposto: Decimal = ZERO
    previsao_rotulo: str = ""
    previsao_data: Optional[date] = None
    status_trabalho: StatusTrabalho = StatusTrabalho.PENDENTE
    status_pagamento: StatusPagamento = StatusPagamento.PENDENTE

    @property
    def recebido(self) -> bool:
        return self.status_pagamento == StatusPagamento.RECEBIDO

    def dias_atraso(self, hoje: Optional[date] = None) -> Optional[int]:
        """Atraso do pagamento em dias; None se já recebido ou ainda no prazo"""
        if self.recebido:
            return None
        return calcular_dias_atraso(self.previsao_data, hoje)


@dataclass
class RelatorioMensal:
    """Totais do mês (por data prevista de pagamento)"""
    ano: int
    mes: int
    plantoes: List[RegistroPlantao] = field(default_factory=list)
    total_previsto: Decimal = ZERO
    total_recebido: Decimal = ZERO
    total_pendente: Decimal = ZERO
    impostos_previstos: Decimal = ZERO
    impostos_pagos: Decimal = ZERO
    estimativa_avulsos: Decimal = ZERO

    @property
    def quantidade_plantoes(self) -> int:
        return len(self.plantoes)

    @property
    def pct_recebido(self) -> float:
        if self.total_previsto <= 0:
            return 0.0
        return float(self.total_recebido / self.total_previsto * 100)

    @property
    def pct_pendente(self) -> float:
        if self.total_previsto <= 0:
            return 0.0
        return float(self.total_pendente / self.total_previsto * 100)

    def pagamentos_recebidos(self) -> List[RegistroPlantao]:
        """Recebimentos confirmados, pela data prevista"""
        recebidos = [p for p in self.plantoes if p.recebido]
        return sorted(recebidos, key=lambda p: p.previsao_data or p.data)


@dataclass
class ProgressoMeta:
    """Progresso do recebido do mês em relação à meta"""
    meta: Decimal = ZERO
    recebido: Decimal = ZERO
    percentual: Decimal = ZERO  # 0-100
    faltante: Decimal = ZERO
    plantoes_necessarios: int = 0
    valor_medio_plantao: Decimal = ZERO

    @property
    def meta_definida(self) -> bool:
        return self.meta > 0


# ============================================
# AGREGAÇÃO
# ============================================

def _registro_fixo(plantao: PlantaoFixo, dia: date, valor, previsao) -> RegistroPlantao:
    return RegistroPlantao(
        id=id_ocorrencia_fixa(plantao.id, dia),
        hospital=plantao.hospital,
        data=dia,
        tipo="fixed",
        setor=plantao.setor,
        inicio=plantao.inicio,
        termino=plantao.termino,
        valor_bruto=valor.bruto,
        valor_liquido=valor.liquido,
        imposto=valor.imposto,
        previsao_rotulo=previsao.rotulo if previsao else "",
        previsao_data=previsao.data if previsao else None,
    )


def _registro_avulso(plantao: PlantaoAvulso, dia: date, previsao) -> RegistroPlantao:
    valor = plantao.valor
    return RegistroPlantao(
        id=id_ocorrencia_avulsa(plantao.id),
        hospital=plantao.hospital,
        data=dia,
        tipo="sporadic",
        setor=plantao.setor,
        inicio=plantao.inicio,
        termino=plantao.termino,
        valor_bruto=valor.bruto,
        valor_liquido=valor.liquido,
        imposto=valor.imposto,
        previsao_rotulo=previsao.rotulo if previsao else "",
        previsao_data=previsao.data if previsao else None,
    )


def _aplicar_status(registro: RegistroPlantao, status_trabalho: Dict, status_pagamento: Dict):
    registro.status_trabalho = status_trabalho.get(registro.id, StatusTrabalho.PENDENTE)
    registro.status_pagamento = status_pagamento.get(registro.id, StatusPagamento.PENDENTE)
    return registro


def agregar_mes(
    fixos: List[PlantaoFixo],
    avulsos: List[PlantaoAvulso],
    estimativa: Optional[EstimativaAvulsos],
    status_trabalho: Dict[str, StatusTrabalho],
    status_pagamento: Dict[str, StatusPagamento],
    ano: int,
    mes: int,
    hoje: Optional[date] = None,
) -> RelatorioMensal:
    """
    Monta o relatório do mês `mes`/`ano`.

    1. Cada plantão fixo é expandido desde o início do 3º mês anterior até
       o fim do mês do relatório.
    2. Entra no relatório a ocorrência cuja data prevista de pagamento cai
       no mês do relatório (avulsos seguem a mesma regra).
    3. A estimativa de avulsos soma no previsto apenas se o relatório for do
       mês corrente; ela nunca aparece como recebida.
    4. Pendente = previsto - recebido, então previsto == recebido + pendente.
    """
    if hoje is None:
        hoje = date.today()
    referencia = date(ano, mes, 1)
    inicio_busca = somar_meses(referencia, -MESES_RETROATIVOS)
    fim_busca = ultimo_dia_mes(ano, mes)

    registros = []

    for plantao in fixos:
        valor = plantao.valor
        for dia in expandir_ocorrencias(plantao, inicio_busca, fim_busca):
            previsao = prever_data_pagamento(
                dia, plantao.metodo_pagamento, plantao.cooperativa, plantao.pagamento_direto
            )
            if previsao is None or not no_mesmo_mes(previsao.data, referencia):
                continue
            registros.append(_registro_fixo(plantao, dia, valor, previsao))

    for plantao in avulsos:
        dia = plantao.data_plantao
        if dia is None:
            print(f"[LOAD] ⚠️ Data inválida no avulso {plantao.id}: {plantao.data!r}")
            continue
        previsao = prever_data_pagamento(
            dia, plantao.metodo_pagamento, plantao.cooperativa, plantao.pagamento_direto
        )
        if previsao is None or not no_mesmo_mes(previsao.data, referencia):
            continue
        registros.append(_registro_avulso(plantao, dia, previsao))

    for registro in registros:
        _aplicar_status(registro, status_trabalho, status_pagamento)

    # sort estável: empates mantêm a ordem de cadastro
    registros.sort(key=lambda r: r.data)

    estimativa_mes = ZERO
    if estimativa is not None and no_mesmo_mes(referencia, hoje):
        estimativa_mes = estimativa.contribuicao_mensal

    total_previsto = sum((r.valor_liquido for r in registros), ZERO) + estimativa_mes
    impostos_previstos = sum((r.imposto for r in registros), ZERO)
    total_recebido = sum((r.valor_liquido for r in registros if r.recebido), ZERO)
    impostos_pagos = sum((r.imposto for r in registros if r.recebido), ZERO)

    return RelatorioMensal(
        ano=ano,
        mes=mes,
        plantoes=registros,
        total_previsto=total_previsto,
        total_recebido=total_recebido,
        total_pendente=total_previsto - total_recebido,
        impostos_previstos=impostos_previstos,
        impostos_pagos=impostos_pagos,
        estimativa_avulsos=estimativa_mes,
    )


def gerar_relatorio_mensal(
    armazenamento: ArmazenamentoBase, ano: int, mes: int, hoje: Optional[date] = None
) -> RelatorioMensal:
    """Relê todos os documentos e recalcula o relatório do mês"""
    plantoes = PlantaoManager(armazenamento)
    status = StatusManager(armazenamento)
    return agregar_mes(
        fixos=plantoes.carregar_plantoes().fixos,
        avulsos=plantoes.carregar_avulsos(),
        estimativa=plantoes.carregar_estimativa(),
        status_trabalho=status.carregar_status_trabalho(),
        status_pagamento=status.carregar_status_pagamento(),
        ano=ano,
        mes=mes,
        hoje=hoje,
    )


# ============================================
# META
# ============================================

def calcular_progresso_meta(meta: Decimal, relatorio: RelatorioMensal) -> ProgressoMeta:
    """
    Percentual da meta já recebido (limitado a 100%), quanto falta e
    quantos plantões de valor médio cobririam a diferença.
    Meta zero = usuário sem meta; todos os números ficam zerados.
    """
    if meta <= 0:
        return ProgressoMeta(recebido=relatorio.total_recebido)

    recebido = relatorio.total_recebido
    percentual = min(recebido / meta * 100, Decimal("100"))
    faltante = max(meta - recebido, ZERO)

    quantidade = relatorio.quantidade_plantoes
    valor_medio = relatorio.total_previsto / quantidade if quantidade else ZERO
    if valor_medio > 0:
        plantoes_necessarios = math.ceil(faltante / valor_medio)
    else:
        plantoes_necessarios = 0

    return ProgressoMeta(
        meta=meta,
        recebido=recebido,
        percentual=percentual,
        faltante=faltante,
        plantoes_necessarios=plantoes_necessarios,
        valor_medio_plantao=valor_medio,
    )


def progresso_meta_mes(armazenamento: ArmazenamentoBase, hoje: Optional[date] = None) -> ProgressoMeta:
    """Progresso da meta do mês corrente, lendo meta e plantões do armazenamento"""
    if hoje is None:
        hoje = date.today()
    meta = PlantaoManager(armazenamento).meta_mensal()
    relatorio = gerar_relatorio_mensal(armazenamento, hoje.year, hoje.month, hoje)
    return calcular_progresso_meta(meta, relatorio)


# ============================================
# AGENDA (SEMANA E CALENDÁRIO)
# ============================================

def _ocorrencias_por_data(armazenamento: ArmazenamentoBase, inicio: date, fim: date) -> List[RegistroPlantao]:
    plantoes = PlantaoManager(armazenamento)
    status = StatusManager(armazenamento)
    status_trabalho = status.carregar_status_trabalho()
    status_pagamento = status.carregar_status_pagamento()

    registros = []
    for plantao in plantoes.carregar_plantoes().fixos:
        valor = plantao.valor
        for dia in expandir_ocorrencias(plantao, inicio, fim):
            previsao = prever_data_pagamento(
                dia, plantao.metodo_pagamento, plantao.cooperativa, plantao.pagamento_direto
            )
            registros.append(_registro_fixo(plantao, dia, valor, previsao))

    for plantao in plantoes.carregar_avulsos():
        dia = plantao.data_plantao
        if dia is None or not (inicio <= dia <= fim):
            continue
        previsao = prever_data_pagamento(
            dia, plantao.metodo_pagamento, plantao.cooperativa, plantao.pagamento_direto
        )
        registros.append(_registro_avulso(plantao, dia, previsao))

    for registro in registros:
        _aplicar_status(registro, status_trabalho, status_pagamento)
    registros.sort(key=lambda r: (r.data, r.inicio))
    return registros


def agenda_semanal(armazenamento: ArmazenamentoBase, hoje: Optional[date] = None) -> List[RegistroPlantao]:
    """Plantões da semana corrente (segunda a domingo) para o painel"""
    if hoje is None:
        hoje = date.today()
    segunda = hoje - timedelta(days=hoje.weekday())
    return _ocorrencias_por_data(armazenamento, segunda, segunda + timedelta(days=6))


def calcular_horas_plantao(inicio: str, termino: str) -> float:
    """Duração em horas; término menor ou igual ao início cruza a meia-noite"""
    try:
        h_ini, m_ini = (int(p) for p in inicio.split(":")[:2])
        h_fim, m_fim = (int(p) for p in termino.split(":")[:2])
    except (AttributeError, ValueError):
        return 0.0
    horas = h_fim - h_ini + (m_fim - m_ini) / 60
    if horas <= 0:
        horas += 24
    return horas


def _contagem(registros: List[RegistroPlantao]) -> Dict:
    return {
        "total": len(registros),
        "fixos": sum(1 for r in registros if r.tipo == "fixed"),
        "avulsos": sum(1 for r in registros if r.tipo == "sporadic"),
        "horas": round(sum(calcular_horas_plantao(r.inicio, r.termino) for r in registros)),
    }


def resumo_calendario(armazenamento: ArmazenamentoBase, ano: int, mes: int) -> Dict:
    """
    Plantões do mês pela data do plantão: previstos (todos) e realizados
    (marcados como realizados), com quantidade e horas.
    """
    registros = _ocorrencias_por_data(armazenamento, date(ano, mes, 1), ultimo_dia_mes(ano, mes))
    realizados = [r for r in registros if r.status_trabalho == StatusTrabalho.REALIZADO]
    return {
        "plantoes": registros,
        "previsto": _contagem(registros),
        "realizado": _contagem(realizados),
    }
