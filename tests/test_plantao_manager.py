from datetime import date
from decimal import Decimal

import pytest

from motor_calculo import DadosCooperativa, DadosPagamentoDireto, EstimativaAvulsos, StatusTrabalho


class TestPlantoesFixos:

    def test_cadastro_calcula_termino_e_copia_valores(self, plantoes, cooperativa, ler_documento):
        plantao = plantoes.adicionar_plantao_fixo(
            hospital="HGF",
            dias_semana=["Segunda-feira", "Quarta-feira"],
            inicio="19:00",
            duracao="noturno-12h",
            metodo_pagamento="cooperativa",
            cooperativa=cooperativa,
            setor="UTI",
        )
        assert len(plantao.id) == 32
        assert plantao.termino == "07:00"
        assert plantao.valor_bruto == "1.500,00"
        assert plantao.taxa_desconto == "35"
        assert plantao.pagamento_direto is None

        documento = ler_documento("plantonmed_shifts")
        assert documento["shiftType"] == "fixed"
        assert documento["fixedShifts"][0]["endTime"] == "07:00"
        assert documento["fixedShifts"][0]["cooperativaData"]["cooperativa"] == "Unimed Fortaleza"

    def test_ids_unicos_e_ordem_preservada(self, plantoes, direto):
        a = plantoes.adicionar_plantao_fixo("A", ["Domingo"], "07:00", "diurno-12h", "pj", pagamento_direto=direto)
        b = plantoes.adicionar_plantao_fixo("B", ["Domingo"], "07:00", "diurno-12h", "pj", pagamento_direto=direto)
        assert a.id != b.id
        assert [p.hospital for p in plantoes.carregar_plantoes().fixos] == ["A", "B"]

    def test_taxa_personalizada_resolvida(self, plantoes):
        direto = DadosPagamentoDireto(dia_pagamento="5", valor_bruto="1.000", desconto="outro", desconto_personalizado="12")
        plantao = plantoes.adicionar_plantao_fixo("HGF", ["Sábado"], "07:00", "diurno-6h", "pf", pagamento_direto=direto)
        assert plantao.taxa_desconto == "12"
        assert plantao.valor.liquido == Decimal("880")

    def test_dias_repetidos_removidos(self, plantoes, direto):
        plantao = plantoes.adicionar_plantao_fixo(
            "HGF", ["Sábado", "Domingo", "Sábado"], "07:00", "diurno-12h", "clt", pagamento_direto=direto
        )
        assert plantao.dias_semana == ["Sábado", "Domingo"]

    @pytest.mark.parametrize("dados", [
        dict(hospital="", dias_semana=["Domingo"]),
        dict(hospital="HGF", dias_semana=[]),
        dict(hospital="HGF", dias_semana=["Dom"]),
        dict(hospital="HGF", dias_semana=["Domingo"], recorrencia="anual"),
        dict(hospital="HGF", dias_semana=["Domingo"], tipo_escala="plantao"),
        dict(hospital="HGF", dias_semana=["Domingo"], metodo_pagamento="pix"),
        dict(hospital="HGF", dias_semana=["Domingo"], pagamento_direto=DadosPagamentoDireto(desconto="99")),
        dict(hospital="HGF", dias_semana=["Domingo"], metodo_pagamento="cooperativa",
             pagamento_direto=DadosPagamentoDireto(dia_pagamento="10", valor_bruto="1.000")),
        dict(hospital="HGF", dias_semana=["Domingo"], cooperativa=DadosCooperativa(atraso="30")),
        dict(hospital="HGF", dias_semana=["Domingo"], metodo_pagamento="cooperativa",
             cooperativa=DadosCooperativa(atraso="outro", atraso_personalizado="99999999")),
    ])
    def test_cadastro_invalido(self, plantoes, dados):
        base = dict(inicio="07:00", duracao="diurno-12h", metodo_pagamento="pj")
        base.update(dados)
        with pytest.raises(ValueError):
            plantoes.adicionar_plantao_fixo(**base)
        assert plantoes.carregar_plantoes().fixos == []

    def test_recorrencia_alias(self, plantoes, direto):
        plantao = plantoes.adicionar_plantao_fixo(
            "HGF", ["Domingo"], "07:00", "diurno-12h", "pj", pagamento_direto=direto, recorrencia="biweekly"
        )
        assert plantao.recorrencia == "quinzenal"

    def test_remover(self, plantoes, direto):
        plantao = plantoes.adicionar_plantao_fixo("HGF", ["Domingo"], "07:00", "diurno-12h", "pj", pagamento_direto=direto)
        assert plantoes.remover_plantao_fixo(plantao.id)
        assert not plantoes.remover_plantao_fixo(plantao.id)
        assert plantoes.carregar_plantoes().fixos == []

    def test_substituir_gera_novo_id(self, plantoes, direto):
        antigo = plantoes.adicionar_plantao_fixo("HGF", ["Domingo"], "07:00", "diurno-12h", "pj", pagamento_direto=direto)
        novo = plantoes.substituir_plantao_fixo(
            antigo.id, hospital="HGF", dias_semana=["Sábado"], inicio="07:00",
            duracao="diurno-12h", metodo_pagamento="pj", pagamento_direto=direto,
        )
        assert novo.id != antigo.id
        assert [p.id for p in plantoes.carregar_plantoes().fixos] == [novo.id]

    def test_substituir_inexistente(self, plantoes):
        with pytest.raises(ValueError):
            plantoes.substituir_plantao_fixo("nao-existe", hospital="HGF")

    def test_tipo_escala_informado(self, plantoes, direto):
        plantoes.adicionar_plantao_fixo(
            "HGF", ["Domingo"], "07:00", "diurno-12h", "pj", pagamento_direto=direto, tipo_escala="hybrid"
        )
        assert plantoes.carregar_plantoes().tipo_escala == "hybrid"

    def test_documento_malformado(self, armazenamento, plantoes):
        armazenamento.salvar("plantonmed_shifts", '{"shiftType": "fixed", "fixedShifts": [1, {"id": "x", "hospital": "H"}]}')
        documento = plantoes.carregar_plantoes()
        assert [p.id for p in documento.fixos] == ["x"]

    def test_resumo(self, plantoes, cooperativa):
        plantao = plantoes.adicionar_plantao_fixo(
            "HGF", ["Segunda-feira", "Quarta-feira"], "07:00", "diurno-12h", "cooperativa", cooperativa=cooperativa
        )
        resumo = plantoes.resumo_plantao(plantao)
        assert resumo["dias"] == "Seg, Qua"
        assert resumo["horario"] == "07:00 às 19:00"
        assert resumo["plantoes_mes"] == 8
        assert resumo["pagamento"] == "Unimed Fortaleza"
        assert resumo["recorrencia"] == "Toda semana"


class TestAvulsos:

    def test_cadastro_grava_previsao(self, plantoes, cooperativa, ler_documento):
        avulso = plantoes.adicionar_plantao_avulso(
            "Hospital São José", "2024-01-10", "07:00", "19:00", "cooperativa", cooperativa=cooperativa
        )
        assert avulso.previsao_pagamento == "05/03/2024"
        documento = ler_documento("plantonmed_sporadic_shifts")
        assert documento[0]["date"] == "2024-01-10"
        assert documento[0]["paymentStatus"] == "pending"
        assert documento[0]["predictedPaymentDate"] == "05/03/2024"
        assert ler_documento("plantonmed_shift_statuses") is None

    def test_ja_realizado_marca_status(self, plantoes, direto, status):
        avulso = plantoes.adicionar_plantao_avulso(
            "HGF", date(2024, 1, 15), "07:00", "19:00", "pj", pagamento_direto=direto, ja_realizado=True
        )
        assert status.status_trabalho(f"sporadic-{avulso.id}") == StatusTrabalho.REALIZADO

    def test_lembra_ultimo_metodo(self, plantoes, direto):
        assert plantoes.ultimo_metodo_pagamento() == ""
        plantoes.adicionar_plantao_avulso("HGF", "2024-01-15", "07:00", "19:00", "pf", pagamento_direto=direto)
        assert plantoes.ultimo_metodo_pagamento() == "pf"

    def test_acrescenta_no_fim(self, plantoes, direto):
        plantoes.adicionar_plantao_avulso("A", "2024-01-15", "07:00", "19:00", "pj", pagamento_direto=direto)
        plantoes.adicionar_plantao_avulso("B", "2024-01-01", "07:00", "19:00", "pj", pagamento_direto=direto)
        assert [a.hospital for a in plantoes.carregar_avulsos()] == ["A", "B"]

    def test_data_invalida(self, plantoes, direto):
        with pytest.raises(ValueError):
            plantoes.adicionar_plantao_avulso("HGF", "15/01/2024", "07:00", "19:00", "pj", pagamento_direto=direto)


class TestEstimativaEMeta:

    def test_estimativa(self, plantoes, ler_documento):
        assert plantoes.carregar_estimativa() is None
        plantoes.salvar_estimativa(EstimativaAvulsos(media_plantoes="3", valor_medio="900", periodo_pagamento="10-15"))
        assert ler_documento("plantonmed_sporadic_estimate") == {
            "averageShiftsPerMonth": "3",
            "averageNetValue": "900",
            "paymentPeriod": "10-15",
        }
        assert plantoes.carregar_estimativa().contribuicao_mensal == Decimal("2700")

    def test_estimativa_malformada(self, armazenamento, plantoes):
        armazenamento.salvar("plantonmed_sporadic_estimate", "[]")
        assert plantoes.carregar_estimativa() is None

    def test_meta_preserva_perfil(self, armazenamento, plantoes, ler_documento):
        armazenamento.salvar_json("plantonmed_profile", {"specialty": "Clínica", "monthlyGoal": "5.000"})
        assert plantoes.meta_mensal() == Decimal("5000")

        plantoes.salvar_meta(Decimal("12000"))
        assert ler_documento("plantonmed_profile") == {"specialty": "Clínica", "monthlyGoal": "12.000,00"}
        assert plantoes.meta_mensal() == Decimal("12000")

    def test_sem_meta(self, plantoes):
        assert plantoes.meta_mensal() == 0
