"""
Gerenciador de Plantões
Cadastro dos plantões fixos, avulsos, estimativa de avulsos e perfil (meta)
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional, Union

from config import (
    CHAVE_AVULSOS, CHAVE_ESTIMATIVA, CHAVE_PERFIL, CHAVE_PLANTOES,
    CHAVE_ULTIMO_PAGAMENTO, format_number, parse_valor_br,
)
from motor_calculo import (
    DadosCooperativa, DadosPagamentoDireto, EstimativaAvulsos, PlantaoAvulso,
    PlantaoFixo, id_ocorrencia_avulsa, prever_data_pagamento,
)
import regras_pagamento as regras
from modules.armazenamento import ArmazenamentoBase
from status_manager import StatusManager


def gerar_id() -> str:
    """Identificador único para plantões novos"""
    return uuid.uuid4().hex


@dataclass
class DocumentoPlantoes:
    """Documento `plantonmed_shifts`: tipo de escala + plantões fixos em ordem"""
    tipo_escala: str = ""  # fixed, sporadic, hybrid
    fixos: List[PlantaoFixo] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "shiftType": self.tipo_escala,
            "fixedShifts": [p.to_dict() for p in self.fixos],
        }


def _parametros_do_metodo(metodo, cooperativa, pagamento_direto):
    # O wizard guarda apenas o pacote correspondente à forma de pagamento
    if regras.e_cooperativa(metodo):
        if cooperativa is None and pagamento_direto is not None:
            raise ValueError("Forma de pagamento cooperativa exige os dados da cooperativa")
        return cooperativa or DadosCooperativa(), None
    if pagamento_direto is None and cooperativa is not None:
        raise ValueError(f"Forma de pagamento {metodo} exige os dados de pagamento direto")
    return None, pagamento_direto or DadosPagamentoDireto()


def _validar(metodo, cooperativa, pagamento_direto) -> None:
    pacote = cooperativa if cooperativa is not None else pagamento_direto
    erros = regras.validar_parametros(metodo, pacote.to_dict() if pacote is not None else None)
    if erros:
        raise ValueError("; ".join(erros))


class PlantaoManager:
    """Lê e grava os documentos de plantões de um usuário"""

    def __init__(self, armazenamento: ArmazenamentoBase):
        self.armazenamento = armazenamento

    # ============================================
    # PLANTÕES FIXOS
    # ============================================

    def carregar_plantoes(self) -> DocumentoPlantoes:
        dados = self.armazenamento.carregar_mapa(CHAVE_PLANTOES)
        fixos = []
        itens = dados.get("fixedShifts") or []
        if not isinstance(itens, list):
            print(f"[LOAD] ⚠️ fixedShifts não é uma lista, ignorando: {itens!r}")
            itens = []
        for item in itens:
            if isinstance(item, dict):
                fixos.append(PlantaoFixo.from_dict(item))
            else:
                print(f"[LOAD] ⚠️ Plantão fixo inválido ignorado: {item!r}")
        return DocumentoPlantoes(tipo_escala=str(dados.get("shiftType") or ""), fixos=fixos)

    def salvar_plantoes(self, documento: DocumentoPlantoes) -> bool:
        return self.armazenamento.salvar_json(CHAVE_PLANTOES, documento.to_dict())

    def adicionar_plantao_fixo(
        self,
        hospital: str,
        dias_semana: List[str],
        inicio: str,
        duracao: str,
        metodo_pagamento: str,
        cooperativa: Optional[DadosCooperativa] = None,
        pagamento_direto: Optional[DadosPagamentoDireto] = None,
        setor: str = "",
        recorrencia: str = "semanal",
        tipo_escala: Optional[str] = None,
    ) -> PlantaoFixo:
        """
        Cadastra um plantão fixo no fim da lista.

        O horário de término é calculado aqui, uma única vez. Valor bruto e
        taxa efetiva são copiados do pacote de pagamento.
        """
        if not hospital:
            raise ValueError("Hospital é obrigatório")
        dias = list(dict.fromkeys(dias_semana))
        desconhecidos = [d for d in dias if d not in regras.DIAS_SEMANA]
        if not dias or desconhecidos:
            raise ValueError(f"Dias da semana inválidos: {desconhecidos or dias_semana}")
        recorrencia = regras.normalizar_opcao(recorrencia)
        if recorrencia not in regras.RECORRENCIAS:
            raise ValueError(f"Recorrência desconhecida: {recorrencia}")
        if tipo_escala and tipo_escala not in regras.TIPOS_ESCALA:
            raise ValueError(f"Tipo de escala desconhecido: {tipo_escala}")

        cooperativa, pagamento_direto = _parametros_do_metodo(metodo_pagamento, cooperativa, pagamento_direto)
        _validar(metodo_pagamento, cooperativa, pagamento_direto)

        if cooperativa is not None:
            valor_bruto = cooperativa.valor_bruto
            taxa = regras.resolver_taxa_texto(cooperativa.taxa, cooperativa.taxa_personalizada)
        else:
            valor_bruto = pagamento_direto.valor_bruto
            taxa = regras.resolver_taxa_texto(pagamento_direto.desconto, pagamento_direto.desconto_personalizado)

        plantao = PlantaoFixo(
            id=gerar_id(),
            hospital=hospital,
            setor=setor,
            dias_semana=dias,
            recorrencia=recorrencia,
            duracao=duracao,
            inicio=inicio,
            termino=regras.calcular_horario_termino(inicio, duracao),
            metodo_pagamento=metodo_pagamento,
            valor_bruto=valor_bruto,
            taxa_desconto=taxa,
            cooperativa=cooperativa,
            pagamento_direto=pagamento_direto,
        )

        documento = self.carregar_plantoes()
        documento.fixos.append(plantao)
        if tipo_escala:
            documento.tipo_escala = tipo_escala
        elif not documento.tipo_escala:
            documento.tipo_escala = "fixed"
        self.salvar_plantoes(documento)
        print(f"[SAVE] ✅ Plantão fixo {plantao.id} ({hospital}) cadastrado")
        return plantao

    def remover_plantao_fixo(self, plantao_id: str) -> bool:
        documento = self.carregar_plantoes()
        restantes = [p for p in documento.fixos if p.id != plantao_id]
        if len(restantes) == len(documento.fixos):
            return False
        documento.fixos = restantes
        return self.salvar_plantoes(documento)

    def substituir_plantao_fixo(self, plantao_id: str, **dados) -> PlantaoFixo:
        """Edição = remove o antigo e cadastra de novo (recebe um id novo)"""
        if not self.remover_plantao_fixo(plantao_id):
            raise ValueError(f"Plantão fixo não encontrado: {plantao_id}")
        return self.adicionar_plantao_fixo(**dados)

    def resumo_plantao(self, plantao: PlantaoFixo) -> Dict:
        """Dados do cartão de resumo mostrado após o cadastro"""
        duracao, _ = regras.DURACOES.get(plantao.duracao, (plantao.duracao, 0))
        recorrencia, _ = regras.RECORRENCIAS.get(plantao.recorrencia, (plantao.recorrencia, 0))
        cooperativa = plantao.cooperativa.cooperativa if plantao.cooperativa else ""
        return {
            "hospital": plantao.hospital,
            "setor": plantao.setor,
            "duracao": duracao,
            "recorrencia": recorrencia,
            "dias": ", ".join(d[:3] for d in plantao.dias_semana),
            "horario": f"{plantao.inicio} às {plantao.termino}",
            "plantoes_mes": regras.estimar_plantoes_mes(plantao.recorrencia, len(plantao.dias_semana)),
            "pagamento": regras.rotulo_metodo(plantao.metodo_pagamento, cooperativa),
            "valor_bruto": plantao.valor_bruto,
            "taxa": plantao.taxa_desconto,
        }

    # ============================================
    # PLANTÕES AVULSOS
    # ============================================

    def carregar_avulsos(self) -> List[PlantaoAvulso]:
        avulsos = []
        for item in self.armazenamento.carregar_lista(CHAVE_AVULSOS):
            if isinstance(item, dict):
                avulsos.append(PlantaoAvulso.from_dict(item))
            else:
                print(f"[LOAD] ⚠️ Plantão avulso inválido ignorado: {item!r}")
        return avulsos

    def adicionar_plantao_avulso(
        self,
        hospital: str,
        data: Union[date, str],
        inicio: str,
        termino: str,
        metodo_pagamento: str,
        cooperativa: Optional[DadosCooperativa] = None,
        pagamento_direto: Optional[DadosPagamentoDireto] = None,
        setor: str = "",
        ja_realizado: bool = False,
    ) -> PlantaoAvulso:
        """
        Acrescenta um plantão avulso. Se já foi realizado, marca o status
        de trabalho como realizado.
        """
        if not hospital:
            raise ValueError("Hospital é obrigatório")
        if isinstance(data, str):
            data = datetime.strptime(data, "%Y-%m-%d").date()

        cooperativa, pagamento_direto = _parametros_do_metodo(metodo_pagamento, cooperativa, pagamento_direto)
        _validar(metodo_pagamento, cooperativa, pagamento_direto)

        previsao = prever_data_pagamento(data, metodo_pagamento, cooperativa, pagamento_direto)
        plantao = PlantaoAvulso(
            id=gerar_id(),
            hospital=hospital,
            data=data.isoformat(),
            setor=setor,
            inicio=inicio,
            termino=termino,
            ja_realizado=ja_realizado,
            metodo_pagamento=metodo_pagamento,
            cooperativa=cooperativa,
            pagamento_direto=pagamento_direto,
            previsao_pagamento=previsao.data.strftime("%d/%m/%Y") if previsao else "",
        )

        avulsos = self.armazenamento.carregar_lista(CHAVE_AVULSOS)
        avulsos.append(plantao.to_dict())
        self.armazenamento.salvar_json(CHAVE_AVULSOS, avulsos)

        if ja_realizado:
            StatusManager(self.armazenamento).marcar_realizado(id_ocorrencia_avulsa(plantao.id))

        self.armazenamento.salvar_json(CHAVE_ULTIMO_PAGAMENTO, {"paymentMethod": metodo_pagamento})
        print(f"[SAVE] ✅ Plantão avulso {plantao.id} ({hospital} {plantao.data}) cadastrado")
        return plantao

    def ultimo_metodo_pagamento(self) -> str:
        """Forma de pagamento usada no último avulso (sugestão no próximo cadastro)"""
        return str(self.armazenamento.carregar_mapa(CHAVE_ULTIMO_PAGAMENTO).get("paymentMethod") or "")

    # ============================================
    # ESTIMATIVA DE AVULSOS
    # ============================================

    def carregar_estimativa(self) -> Optional[EstimativaAvulsos]:
        dados = self.armazenamento.carregar_json(CHAVE_ESTIMATIVA)
        if not isinstance(dados, dict):
            return None
        return EstimativaAvulsos.from_dict(dados)

    def salvar_estimativa(self, estimativa: EstimativaAvulsos) -> bool:
        return self.armazenamento.salvar_json(CHAVE_ESTIMATIVA, estimativa.to_dict())

    # ============================================
    # PERFIL E META
    # ============================================

    def carregar_perfil(self) -> Dict:
        return self.armazenamento.carregar_mapa(CHAVE_PERFIL)

    def meta_mensal(self) -> Decimal:
        """Meta de recebimento líquido; zero significa sem meta"""
        return parse_valor_br(self.carregar_perfil().get("monthlyGoal"))

    def salvar_meta(self, meta: Union[Decimal, str]) -> bool:
        """Atualiza só a meta, preservando as respostas do questionário"""
        if not isinstance(meta, str):
            meta = format_number(meta, 2)
        perfil = self.carregar_perfil()
        perfil["monthlyGoal"] = meta
        return self.armazenamento.salvar_json(CHAVE_PERFIL, perfil)
