"""
Fixtures compartilhadas:
- armazenamento: documentos em memória
- plantoes / status: gerenciadores sobre o mesmo armazenamento
- cooperativa / direto: pacotes de pagamento prontos
"""
import json

import pytest

from motor_calculo import DadosCooperativa, DadosPagamentoDireto
from modules.armazenamento import ArmazenamentoMemoria
from modules.plantao_manager import PlantaoManager
from status_manager import StatusManager


@pytest.fixture
def armazenamento():
    return ArmazenamentoMemoria()


@pytest.fixture
def plantoes(armazenamento):
    return PlantaoManager(armazenamento)


@pytest.fixture
def status(armazenamento):
    return StatusManager(armazenamento)


@pytest.fixture
def cooperativa():
    """Unimed: 30 dias, pagamento entre 1-5, R$ 1.500,00 com 35%"""
    return DadosCooperativa(
        cooperativa="Unimed Fortaleza",
        periodo_trabalho="21-20",
        atraso="30",
        periodo_pagamento="1-5",
        valor_bruto="1.500,00",
        taxa="35",
    )


@pytest.fixture
def direto():
    """PJ pago no dia 10 do mês seguinte, R$ 2.000,00 com 20%"""
    return DadosPagamentoDireto(
        paga_mes_seguinte="sim",
        dia_pagamento="10",
        valor_bruto="2.000,00",
        desconto="20",
    )


@pytest.fixture
def ler_documento(armazenamento):
    """Documento gravado, decodificado (None se ausente)"""
    def ler(chave):
        texto = armazenamento.obter(chave)
        return None if texto is None else json.loads(texto)
    return ler


class FakeResposta:
    def __init__(self, data):
        self.data = data


class FakeConsulta:
    """Imita o encadeamento table().select().eq().execute() do supabase-py"""

    def __init__(self, linhas, operacao, payload=None):
        self.linhas = linhas
        self.operacao = operacao
        self.payload = payload
        self.filtros = {}

    def eq(self, coluna, valor):
        self.filtros[coluna] = valor
        return self

    def _combina(self, linha):
        return all(linha.get(c) == v for c, v in self.filtros.items())

    def execute(self):
        if self.operacao == "select":
            return FakeResposta([dict(l) for l in self.linhas if self._combina(l)])
        if self.operacao == "delete":
            self.linhas[:] = [l for l in self.linhas if not self._combina(l)]
            return FakeResposta([])
        # upsert por (user_id, chave)
        for linha in self.linhas:
            if linha["user_id"] == self.payload["user_id"] and linha["chave"] == self.payload["chave"]:
                linha.update(self.payload)
                return FakeResposta([linha])
        self.linhas.append(dict(self.payload))
        return FakeResposta([self.payload])


class FakeTabela:
    def __init__(self, linhas):
        self.linhas = linhas

    def select(self, *colunas):
        return FakeConsulta(self.linhas, "select")

    def upsert(self, payload, on_conflict=None):
        return FakeConsulta(self.linhas, "upsert", payload)

    def delete(self):
        return FakeConsulta(self.linhas, "delete")


class FakeSupabase:
    def __init__(self):
        self.tabelas = {}

    def table(self, nome):
        return FakeTabela(self.tabelas.setdefault(nome, []))


@pytest.fixture
def fake_supabase():
    return FakeSupabase()
