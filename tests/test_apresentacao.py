from datetime import datetime

import pytest

from pizzaria.api.pedidos.schemas.schema_painel import FiltroOrigemEnum
from pizzaria.api.pedidos.services.service_apresentacao import (
    filtrar_pedidos,
    montar_card,
    origem_label,
    progresso,
    status_visual,
)
from pizzaria.api.shared.schemas.schema_shared_enums import (
    OrigemPedidoEnum,
    PedidoStatusEnum,
    pode_transicionar,
    transicoes_disponiveis,
)
from pizzaria.utils.formatacao import (
    formatar_data_hora,
    formatar_hora,
    formatar_moeda,
    mascarar_email,
    mascarar_id,
    mascarar_nome,
    mascarar_telefone,
)
from tests.fakes import pedido


@pytest.mark.parametrize(
    "status, esperado",
    [
        ("PENDING", 20.0),
        ("CONFIRMED", 40.0),
        ("PREPARING", 60.0),
        ("READY", 80.0),
        ("OUT_FOR_DELIVERY", 100.0),
        ("DELIVERED", 100.0),
        ("CANCELLED", 0.0),
        ("QUALQUER", 20.0),
    ],
)
def test_progresso(status, esperado):
    assert progresso(status) == pytest.approx(esperado)


def test_status_visual_em_portugues():
    assert status_visual(PedidoStatusEnum.OUT_FOR_DELIVERY).label == "Saiu para Entrega"
    assert status_visual("PENDING").label == "Aguardando"
    assert status_visual("???").label == "Desconhecido"


def test_transicoes_oferecidas():
    assert transicoes_disponiveis(PedidoStatusEnum.PENDING) == [PedidoStatusEnum.CONFIRMED, PedidoStatusEnum.CANCELLED]
    assert transicoes_disponiveis(PedidoStatusEnum.DELIVERED) == []
    assert pode_transicionar(PedidoStatusEnum.CONFIRMED, PedidoStatusEnum.READY)
    assert not pode_transicionar(PedidoStatusEnum.READY, PedidoStatusEnum.PREPARING)
    assert not pode_transicionar(PedidoStatusEnum.CANCELLED, PedidoStatusEnum.PENDING)


# ---------------------------------------------------------------------------
# Formatação e máscaras
# ---------------------------------------------------------------------------
def test_formatar_moeda():
    assert formatar_moeda(1234.5) == "R$ 1.234,50"
    assert formatar_moeda(0) == "R$ 0,00"
    assert formatar_moeda(None) == "R$ 0,00"


def test_formatar_datas():
    data = datetime(2024, 5, 10, 9, 5, 7)
    assert formatar_hora(data) == "09:05"
    assert formatar_data_hora(data) == "10/05/2024 09:05:07"
    assert formatar_hora(None) == ""


def test_mascaras():
    assert mascarar_nome("João Silva") == "João S***"
    assert mascarar_nome("Maria") == "Mar***"
    assert mascarar_telefone("(11) 98765-4321") == "(11) 9****-4321"
    assert mascarar_email("admin@pizzaria.com") == "ad***@pizzaria.com"
    assert mascarar_id("abc123def456") == "abc***456"


# ---------------------------------------------------------------------------
# Origem e filtros
# ---------------------------------------------------------------------------
def test_origem_derivada_do_id_do_marketplace():
    direto = pedido("d1")
    ifood = pedido("m1", ifoodOrderId="IF-998")

    assert direto.origem == OrigemPedidoEnum.DIRETO
    assert ifood.origem == OrigemPedidoEnum.MARKETPLACE
    assert origem_label(ifood) == "iFood"
    assert origem_label(direto) == "Sistema"


def test_filtros_por_status_e_origem():
    pedidos = [
        pedido("d1", "PENDING"),
        pedido("d2", "READY"),
        pedido("m1", "PENDING", ifoodOrderId="IF-1"),
    ]

    assert [p.id for p in filtrar_pedidos(pedidos, status="ALL")] == ["d1", "d2", "m1"]
    assert [p.id for p in filtrar_pedidos(pedidos, status="PENDING")] == ["d1", "m1"]
    assert [p.id for p in filtrar_pedidos(pedidos, origem=FiltroOrigemEnum.IFOOD)] == ["m1"]
    assert [p.id for p in filtrar_pedidos(pedidos, status="PENDING", origem="SYSTEM")] == ["d1"]


# ---------------------------------------------------------------------------
# Card
# ---------------------------------------------------------------------------
def test_card_mascarado_por_padrao():
    card = montar_card(pedido("abc123xyz789"))

    assert card.numero == "#XYZ789"
    assert card.cliente_nome == "João S***"
    assert card.cliente_telefone == "(11) 9****-4321"
    assert card.endereco == "Centro"
    assert card.total_formatado == "R$ 59,90"
    assert card.hora == "19:42"
    assert card.status.label == "Aguardando"
    assert card.pode_aceitar and card.pode_rejeitar


def test_card_mascara_email_e_id_do_marketplace():
    dados = pedido("ifd789", ifoodOrderId="IFOOD-9876543", user={"email": "joao.silva@gmail.com"})

    card = montar_card(dados)
    assert card.cliente_email == "jo***@gmail.com"
    assert card.marketplace_id == "IFO***543"

    card = montar_card(dados, mostrar_sensivel=True)
    assert card.cliente_email == "joao.silva@gmail.com"
    assert card.marketplace_id == "IFOOD-9876543"


def test_card_sensivel_mostra_dados_completos():
    card = montar_card(pedido("abc123"), mostrar_sensivel=True)

    assert card.cliente_nome == "João Silva"
    assert card.cliente_telefone == "(11) 98765-4321"
    assert card.endereco == "Rua das Flores, 120 - Centro"


def test_card_mostra_tres_itens_e_conta_ocultos():
    itens = [
        {"quantity": 1, "combo": {"id": f"c{i}", "name": f"Combo {i}"}, "selectedFlavors": '["Calabresa"]'}
        for i in range(5)
    ]
    card = montar_card(pedido("abc123", "PREPARING", items=itens))

    assert len(card.itens) == 3
    assert card.itens_ocultos == 2
    assert card.itens[0].sabores == ["Calabresa"]
    assert not card.pode_aceitar
    assert PedidoStatusEnum.READY in card.transicoes
