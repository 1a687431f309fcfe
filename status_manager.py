"""
Status dos Plantões - Plantão Financeiro
Plantão realizado/faltou e pagamento recebido, por ocorrência
"""

from typing import Dict

from config import CHAVE_STATUS_PAGAMENTOS, CHAVE_STATUS_PLANTOES
from motor_calculo import StatusPagamento, StatusTrabalho
from modules.armazenamento import ArmazenamentoBase


# ============================================
# GERENCIADOR DE STATUS
# ============================================

class StatusManager:
    """
    Mantém os dois mapas de status (trabalho e pagamento).

    Os mapas são esparsos: só ficam gravados os status diferentes de
    pendente. Voltar para pendente remove a chave. Cada alteração lê o
    documento atual e grava de volta antes de retornar.
    """

    def __init__(self, armazenamento: ArmazenamentoBase):
        self.armazenamento = armazenamento

    # ---- leitura ----

    def carregar_status_trabalho(self) -> Dict[str, StatusTrabalho]:
        return self._carregar(CHAVE_STATUS_PLANTOES, StatusTrabalho)

    def carregar_status_pagamento(self) -> Dict[str, StatusPagamento]:
        return self._carregar(CHAVE_STATUS_PAGAMENTOS, StatusPagamento)

    def _carregar(self, chave: str, tipo) -> Dict:
        mapa = {}
        for ocorrencia_id, valor in self.armazenamento.carregar_mapa(chave).items():
            try:
                status = tipo(valor)
            except ValueError:
                print(f"[LOAD] ⚠️ Status desconhecido '{valor}' para {ocorrencia_id}, ignorando")
                continue
            if status != tipo.PENDENTE:
                mapa[ocorrencia_id] = status
        return mapa

    def status_trabalho(self, ocorrencia_id: str) -> StatusTrabalho:
        return self.carregar_status_trabalho().get(ocorrencia_id, StatusTrabalho.PENDENTE)

    def status_pagamento(self, ocorrencia_id: str) -> StatusPagamento:
        return self.carregar_status_pagamento().get(ocorrencia_id, StatusPagamento.PENDENTE)

    # ---- alteração ----

    def _definir(self, chave: str, ocorrencia_id: str, status, pendente) -> bool:
        mapa = self.armazenamento.carregar_mapa(chave)
        if status == pendente:
            mapa.pop(ocorrencia_id, None)
        else:
            mapa[ocorrencia_id] = status.value
        return self.armazenamento.salvar_json(chave, mapa)

    def definir_status_trabalho(self, ocorrencia_id: str, status) -> bool:
        """Aceita StatusTrabalho ou o texto ("completed", "missed", "pending")"""
        status = StatusTrabalho(status)
        return self._definir(CHAVE_STATUS_PLANTOES, ocorrencia_id, status, StatusTrabalho.PENDENTE)

    def definir_status_pagamento(self, ocorrencia_id: str, status) -> bool:
        status = StatusPagamento(status)
        return self._definir(CHAVE_STATUS_PAGAMENTOS, ocorrencia_id, status, StatusPagamento.PENDENTE)

    def marcar_realizado(self, ocorrencia_id: str) -> bool:
        return self.definir_status_trabalho(ocorrencia_id, StatusTrabalho.REALIZADO)

    def marcar_faltou(self, ocorrencia_id: str) -> bool:
        return self.definir_status_trabalho(ocorrencia_id, StatusTrabalho.FALTOU)

    def resetar_status(self, ocorrencia_id: str) -> bool:
        return self.definir_status_trabalho(ocorrencia_id, StatusTrabalho.PENDENTE)

    def marcar_recebido(self, ocorrencia_id: str) -> bool:
        return self.definir_status_pagamento(ocorrencia_id, StatusPagamento.RECEBIDO)

    def marcar_pendente(self, ocorrencia_id: str) -> bool:
        """Desfaz o recebimento (remove a chave do mapa de pagamentos)"""
        return self.definir_status_pagamento(ocorrencia_id, StatusPagamento.PENDENTE)

    resetar_pagamento = marcar_pendente
