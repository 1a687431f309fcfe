from decimal import Decimal

import pytest

import regras_pagamento as regras


class TestResolucao:

    def test_taxa_personalizada_vence_preset(self):
        assert regras.resolver_taxa("outro", "22") == Decimal("22")
        assert regras.resolver_taxa("35", "") == Decimal("35")

    def test_taxa_sem_valor_e_zero(self):
        assert regras.resolver_taxa(None, None) == 0
        assert regras.resolver_taxa("outro", "") == 0
        assert regras.resolver_taxa("", None) == 0

    def test_taxa_texto_mantem_digitado(self):
        assert regras.resolver_taxa_texto("outro", "27,5") == "27,5"
        assert regras.resolver_taxa_texto("35") == "35"
        assert regras.resolver_taxa_texto("outro") == ""

    def test_atraso_padrao_30(self):
        assert regras.resolver_atraso(None) == 30
        assert regras.resolver_atraso("outro", "") == 30
        assert regras.resolver_atraso("45") == 45
        assert regras.resolver_atraso("outro", "50") == 50

    def test_dia_pagamento(self):
        assert regras.resolver_dia_pagamento("10") == 10
        assert regras.resolver_dia_pagamento("outro", "28") == 28
        assert regras.resolver_dia_pagamento("outro", "") is None
        assert regras.resolver_dia_pagamento(None) is None

    def test_aliases(self):
        assert regras.normalizar_opcao("exact") == "exato"
        assert regras.normalizar_opcao("same-month") == "mesmo-mes"
        assert regras.normalizar_opcao("biweekly") == "quinzenal"
        assert regras.normalizar_opcao("1-5") == "1-5"


class TestCadastro:

    @pytest.mark.parametrize("inicio,duracao,esperado", [
        ("07:00", "diurno-12h", "19:00"),
        ("19:00", "noturno-12h", "07:00"),
        ("13:30", "diurno-6h", "19:30"),
        ("", "diurno-6h", ""),
        ("07:00", "desconhecida", ""),
    ])
    def test_horario_termino(self, inicio, duracao, esperado):
        assert regras.calcular_horario_termino(inicio, duracao) == esperado

    def test_estimativa_mensal_por_recorrencia(self):
        assert regras.estimar_plantoes_mes("semanal", 2) == 8
        assert regras.estimar_plantoes_mes("quinzenal", 2) == 4
        assert regras.estimar_plantoes_mes("mensal", 2) == 2
        assert regras.estimar_plantoes_mes("monthly", 3) == 3
        assert regras.estimar_plantoes_mes("", 1) == 4

    def test_rotulo_metodo(self):
        assert regras.rotulo_metodo("cooperativa", "Coopcardio") == "Coopcardio"
        assert regras.rotulo_metodo("pj") == "PJ (CNPJ próprio / Nota Fiscal)"


class TestValidacao:

    def test_cooperativa_valida(self):
        dados = {"workPeriod": "21-20", "paymentDelay": "30", "paymentPeriod": "1-5", "taxRate": "35"}
        assert regras.validar_parametros("cooperativa", dados) == []

    def test_cooperativa_dia_exato_obrigatorio(self):
        erros = regras.validar_parametros("cooperativa", {"paymentPeriod": "exato"})
        assert erros == ["Dia exato de pagamento deve estar entre 1 e 31"]
        assert regras.validar_parametros("cooperativa", {"paymentPeriod": "exact", "customPaymentDay": "5"}) == []

    @pytest.mark.parametrize("atraso", ["99999999", "366", "-1"])
    def test_cooperativa_prazo_personalizado_fora_da_faixa(self, atraso):
        erros = regras.validar_cooperativa({"paymentDelay": "outro", "customPaymentDelay": atraso})
        assert erros == ["Prazo de pagamento personalizado deve estar entre 0 e 365 dias"]

    def test_cooperativa_prazo_personalizado_valido(self):
        assert regras.validar_cooperativa({"paymentDelay": "outro", "customPaymentDelay": "365"}) == []

    def test_cooperativa_periodo_personalizado(self):
        erros = regras.validar_cooperativa({"workPeriod": "outro", "customWorkPeriodStart": "10"})
        assert len(erros) == 1

    def test_cooperativa_opcao_fora_do_dominio(self):
        erros = regras.validar_cooperativa({"paymentPeriod": "5-10", "taxRate": "99"})
        assert len(erros) == 2

    def test_direto_dia_personalizado(self):
        assert regras.validar_pagamento_direto({"paymentDay": "outro", "customPaymentDay": "32"})
        assert regras.validar_pagamento_direto({"paymentDay": "outro", "customPaymentDay": "31"}) == []

    def test_direto_desconto_outro_sem_valor(self):
        assert regras.validar_pagamento_direto({"discountRate": "outro"}) == ["Informe o desconto personalizado"]

    def test_metodo_desconhecido(self):
        assert regras.validar_parametros("pix", {}) == ["Forma de pagamento desconhecida: pix"]
        assert regras.validar_parametros("clt", None) == ["Parâmetros de pagamento ausentes"]
