import asyncio

import pytest

from pizzaria.api.notifications.services.central_notificacoes import ConfirmacaoFixa
from pizzaria.api.pedidos.schemas.schema_pedido import AcaoPedidoResponse
from pizzaria.api.pedidos.services.service_sessao_pedidos import SessaoPedidosAoVivo
from pizzaria.api.shared.schemas.schema_shared_enums import PedidoStatusEnum, TipoImpressaoEnum
from pizzaria.core.exceptions import ErroProtocolo, ErroTransporte
from tests.fakes import pedido_json, rodar_pendentes


async def _sessao(gateway, notificador, relogio, reprodutor, pedidos, confirmacao=None) -> SessaoPedidosAoVivo:
    gateway.pedidos = pedidos
    sessao = SessaoPedidosAoVivo(
        gateway,
        relogio=relogio,
        reprodutor=reprodutor,
        notificador=notificador,
        confirmacao=confirmacao,
    )
    await sessao.refresh()
    return sessao


def _status(sessao, pedido_id):
    return sessao.repo.obter(pedido_id).status


# ---------------------------------------------------------------------------
# Aceitar
# ---------------------------------------------------------------------------
@pytest.mark.anyio
async def test_aceitar_aplica_confirmed_antes_da_resposta(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123")])
    gateway.bloqueios["aceitar"] = asyncio.Event()

    tarefa = asyncio.ensure_future(sessao.acoes.aceitar("abc123"))
    await rodar_pendentes()
    assert _status(sessao, "abc123") == PedidoStatusEnum.CONFIRMED
    assert sessao.executor.em_processamento("abc123")

    gateway.bloqueios["aceitar"].set()
    assert await tarefa is True
    assert notificador.do_tipo("sucesso") == ["Pedido aceito com sucesso!"]
    assert notificador.do_tipo("erro") == []


@pytest.mark.anyio
async def test_aceitar_com_sucesso_reconcilia_apos_atraso(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123")])

    await sessao.acoes.aceitar("abc123")
    assert len(gateway.chamadas_de("listar_pedidos")) == 1

    gateway.pedidos = [pedido_json("abc123", "CONFIRMED")]
    await relogio.avancar(0.3)

    assert len(gateway.chamadas_de("listar_pedidos")) == 2
    assert _status(sessao, "abc123") == PedidoStatusEnum.CONFIRMED
    assert not sessao.repo.tem_patch("abc123")


@pytest.mark.anyio
async def test_aceitar_com_400_reverte_e_mostra_mensagem_do_servidor(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123")])
    gateway.falhas["aceitar"] = ErroProtocolo(400, "Order already processed")

    assert await sessao.acoes.aceitar("abc123") is False

    assert _status(sessao, "abc123") == PedidoStatusEnum.PENDING
    assert notificador.do_tipo("erro") == ["Order already processed"]
    assert relogio.agendados == []


@pytest.mark.anyio
async def test_success_false_no_corpo_tambem_reverte(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123")])
    gateway.respostas["aceitar"] = AcaoPedidoResponse(success=False, message="Loja fechada")

    assert await sessao.acoes.aceitar("abc123") is False
    assert _status(sessao, "abc123") == PedidoStatusEnum.PENDING
    assert notificador.do_tipo("erro") == ["Loja fechada"]


@pytest.mark.anyio
async def test_falha_de_rede_usa_mensagem_generica(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123")])
    gateway.falhas["aceitar"] = ErroTransporte()

    await sessao.acoes.aceitar("abc123")

    assert notificador.do_tipo("erro") == ["Erro ao processar pedido"]


@pytest.mark.anyio
async def test_clique_duplicado_enquanto_em_voo_e_ignorado(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123")])
    gateway.bloqueios["aceitar"] = asyncio.Event()

    primeira = asyncio.ensure_future(sessao.acoes.aceitar("abc123"))
    await rodar_pendentes()
    # status já otimista; um segundo comando de status também é barrado
    segunda = await sessao.acoes.atualizar_status("abc123", PedidoStatusEnum.PREPARING)
    gateway.bloqueios["aceitar"].set()
    await primeira

    assert segunda is False
    assert len(gateway.chamadas_de("aceitar")) == 1
    assert gateway.chamadas_de("atualizar") == []


@pytest.mark.anyio
async def test_chave_de_idempotencia_unica_por_tentativa(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123")])
    gateway.falhas["aceitar"] = ErroTransporte()

    await sessao.acoes.aceitar("abc123")
    await sessao.acoes.aceitar("abc123")

    chaves = [c[2] for c in gateway.chamadas_de("aceitar")]
    assert len(chaves) == 2
    assert all(chaves) and chaves[0] != chaves[1]


@pytest.mark.anyio
async def test_pedido_inexistente_nao_chama_backend(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [])

    assert await sessao.acoes.aceitar("nao-existe") is False
    assert gateway.chamadas_de("aceitar") == []
    assert notificador.do_tipo("erro") == ["Pedido não encontrado"]


# ---------------------------------------------------------------------------
# Rejeitar
# ---------------------------------------------------------------------------
@pytest.mark.anyio
async def test_rejeitar_sem_confirmacao_nao_envia_requisicao(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123")])

    assert await sessao.acoes.rejeitar("abc123", ConfirmacaoFixa(False)) is False
    assert await sessao.acoes.rejeitar("abc123") is False

    assert gateway.chamadas_de("rejeitar") == []
    assert _status(sessao, "abc123") == PedidoStatusEnum.PENDING


@pytest.mark.anyio
async def test_rejeitar_confirmado_cancela(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(
        gateway, notificador, relogio, reprodutor, [pedido_json("abc123")], confirmacao=ConfirmacaoFixa(True)
    )

    assert await sessao.acoes.rejeitar("abc123") is True
    assert _status(sessao, "abc123") == PedidoStatusEnum.CANCELLED
    assert notificador.do_tipo("sucesso") == ["Pedido cancelado com sucesso!"]


@pytest.mark.anyio
async def test_rejeitar_falho_reverte(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123", "PREPARING")])
    gateway.falhas["rejeitar"] = ErroTransporte()

    await sessao.acoes.rejeitar("abc123", ConfirmacaoFixa(True))

    assert _status(sessao, "abc123") == PedidoStatusEnum.PREPARING
    assert notificador.do_tipo("erro") == ["Erro ao cancelar pedido"]


@pytest.mark.anyio
async def test_rejeitar_pedido_finalizado_e_barrado(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123", "DELIVERED")])

    assert await sessao.acoes.rejeitar("abc123", ConfirmacaoFixa(True)) is False
    assert gateway.chamadas_de("rejeitar") == []


# ---------------------------------------------------------------------------
# Status e motoboy
# ---------------------------------------------------------------------------
@pytest.mark.anyio
async def test_mesmo_status_e_no_op(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123", "PREPARING")])
    antes = sessao.repo.listar()

    assert await sessao.acoes.atualizar_status("abc123", PedidoStatusEnum.PREPARING) is False

    assert gateway.chamadas_de("atualizar") == []
    assert sessao.repo.listar() == antes
    assert notificador.mensagens == []


@pytest.mark.anyio
async def test_atualizar_status_envia_apenas_status(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123", "PREPARING")])

    assert await sessao.acoes.atualizar_status("abc123", PedidoStatusEnum.READY) is True

    _, pedido_id, corpo, chave = gateway.chamadas_de("atualizar")[0]
    assert pedido_id == "abc123"
    assert corpo == {"status": "READY"}
    assert chave
    assert notificador.do_tipo("sucesso") == ["Status atualizado com sucesso!"]


@pytest.mark.anyio
async def test_status_cancelled_sem_confirmacao_nao_envia_nada(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(
        gateway, notificador, relogio, reprodutor, [pedido_json("abc123", "PREPARING")],
        confirmacao=ConfirmacaoFixa(False),
    )

    assert await sessao.acoes.atualizar_status("abc123", PedidoStatusEnum.CANCELLED) is False

    assert gateway.chamadas_de("atualizar") == []
    assert gateway.chamadas_de("rejeitar") == []
    assert _status(sessao, "abc123") == PedidoStatusEnum.PREPARING


@pytest.mark.anyio
async def test_status_cancelled_confirmado_usa_rejeicao(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123", "PREPARING")])

    ok = await sessao.acoes.atualizar_status("abc123", PedidoStatusEnum.CANCELLED, ConfirmacaoFixa(True))

    assert ok is True
    assert gateway.chamadas_de("atualizar") == []
    assert len(gateway.chamadas_de("rejeitar")) == 1
    assert _status(sessao, "abc123") == PedidoStatusEnum.CANCELLED


@pytest.mark.anyio
async def test_transicao_nao_permitida_nao_chama_backend(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123", "PENDING")])

    assert await sessao.acoes.atualizar_status("abc123", PedidoStatusEnum.READY) is False
    assert gateway.chamadas_de("atualizar") == []
    assert len(notificador.do_tipo("erro")) == 1


@pytest.mark.anyio
async def test_marcar_entregue_com_falha_reverte(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123", "OUT_FOR_DELIVERY")])
    gateway.falhas["atualizar"] = ErroProtocolo(500)

    assert await sessao.acoes.marcar_entregue("abc123") is False

    assert _status(sessao, "abc123") == PedidoStatusEnum.OUT_FOR_DELIVERY
    assert notificador.do_tipo("erro") == ["Erro ao marcar como entregue"]


@pytest.mark.anyio
async def test_atribuir_entregador(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123", "READY")])

    assert await sessao.acoes.atribuir_entregador("abc123", "  Carlos  ") is True

    assert sessao.repo.obter("abc123").entregador == "Carlos"
    assert gateway.chamadas_de("atualizar")[0][2] == {"deliveryPerson": "Carlos"}
    assert notificador.do_tipo("sucesso") == ["Motoboy atualizado!"]


@pytest.mark.anyio
async def test_atribuir_entregador_falho_restaura_anterior(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(
        gateway, notificador, relogio, reprodutor, [pedido_json("abc123", "READY", deliveryPerson="Ana")]
    )
    gateway.falhas["atualizar"] = ErroTransporte()

    await sessao.acoes.atribuir_entregador("abc123", "Carlos")

    assert sessao.repo.obter("abc123").entregador == "Ana"
    assert notificador.do_tipo("erro") == ["Erro ao atualizar motoboy"]


# ---------------------------------------------------------------------------
# Patch otimista x polling
# ---------------------------------------------------------------------------
@pytest.mark.anyio
async def test_polling_durante_comando_nao_desfaz_patch(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123")])
    gateway.bloqueios["aceitar"] = asyncio.Event()

    tarefa = asyncio.ensure_future(sessao.acoes.aceitar("abc123"))
    await rodar_pendentes()
    # servidor ainda devolve PENDING e já não lista o pedido em outra leitura
    await sessao.refresh()
    assert _status(sessao, "abc123") == PedidoStatusEnum.CONFIRMED

    gateway.pedidos = []
    await sessao.refresh()
    assert sessao.repo.ids() == ["abc123"]

    gateway.bloqueios["aceitar"].set()
    await tarefa


# ---------------------------------------------------------------------------
# Impressão e mensagem
# ---------------------------------------------------------------------------
@pytest.mark.anyio
async def test_imprimir_retorna_payload(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123")])

    conteudo = await sessao.acoes.imprimir("abc123", TipoImpressaoEnum.COZINHA)

    assert conteudo["printType"] == "kitchen"
    assert notificador.do_tipo("sucesso") == ["Pedido enviado para impressão!"]


@pytest.mark.anyio
async def test_imprimir_com_erro_retorna_none(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123")])
    gateway.falhas["imprimir"] = ErroTransporte()

    assert await sessao.acoes.imprimir("abc123") is None
    assert notificador.do_tipo("erro") == ["Erro ao imprimir pedido"]


@pytest.mark.anyio
async def test_mensagem_sem_telefone_e_barrada(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(
        gateway, notificador, relogio, reprodutor, [pedido_json("abc123", customerPhone=None)]
    )

    assert await sessao.acoes.enviar_mensagem_cliente("abc123", "order_ready") is False
    assert gateway.chamadas_de("enviar_mensagem") == []
    assert notificador.do_tipo("erro") == ["Telefone do cliente não disponível para enviar mensagem."]


@pytest.mark.anyio
async def test_mensagem_enviada_com_telefone_do_pedido(gateway, notificador, relogio, reprodutor):
    sessao = await _sessao(gateway, notificador, relogio, reprodutor, [pedido_json("abc123")])

    assert await sessao.acoes.enviar_mensagem_cliente("abc123", "order_ready") is True
    assert gateway.chamadas_de("enviar_mensagem") == [
        ("enviar_mensagem", "abc123", "(11) 98765-4321", "order_ready")
    ]
