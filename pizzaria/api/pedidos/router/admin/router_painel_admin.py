"""
Router do painel de pedidos ao vivo (admin).

Toda mutação passa pela sessão: o patch otimista é aplicado antes da
chamada ao backend e desfeito se ela falhar. O resultado de cada ação
também é publicado como toast em /api/notifications/painel.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from pizzaria.api.notifications.services.central_notificacoes import ConfirmacaoFixa
from pizzaria.api.pedidos.schemas.schema_painel import (
    AlterarStatusBody,
    AtribuirEntregadorBody,
    ComandoResponse,
    FiltroOrigemEnum,
    ImpressaoResponse,
    ImprimirBody,
    MensagemBody,
    PainelResponse,
)
from pizzaria.api.pedidos.schemas.schema_pedido import Entregador
from pizzaria.api.pedidos.services.dependencies import get_sessao_pedidos
from pizzaria.api.pedidos.services.service_apresentacao import filtrar_pedidos, montar_card
from pizzaria.api.pedidos.services.service_sessao_pedidos import SessaoPedidosAoVivo
from pizzaria.utils.logger import logger

router = APIRouter(
    prefix="/api/pedidos/admin/painel",
    tags=["Admin - Painel de Pedidos"],
)


def _resposta_comando(sessao: SessaoPedidosAoVivo, pedido_id: str, ok: bool) -> ComandoResponse:
    pedido = sessao.repo.obter(pedido_id)
    card = montar_card(pedido, em_processamento=sessao.executor.em_processamento(pedido_id)) if pedido else None
    return ComandoResponse(ok=ok, pedido=card)


# ======================================================================
# ============================ LISTAGEM ================================
# ======================================================================
@router.get(
    "",
    response_model=PainelResponse,
    status_code=status.HTTP_200_OK,
)
def listar_painel(
    status_filtro: Optional[str] = Query("ALL", alias="status", description="ALL ou um status de pedido"),
    origem: FiltroOrigemEnum = Query(FiltroOrigemEnum.ALL, description="ALL, IFOOD ou SYSTEM"),
    mostrar_sensivel: bool = Query(False, description="Exibe nome/telefone/endereço sem máscara"),
    sessao: SessaoPedidosAoVivo = Depends(get_sessao_pedidos),
):
    """
    Retorna a lista ao vivo (última leitura + patches otimistas pendentes).

    - **status**: `ALL` ou um dos status do pedido
    - **origem**: `ALL`, `IFOOD` (marketplace) ou `SYSTEM` (pedido direto)
    - **erro**: mensagem do banner quando a última leitura falhou
    """
    snapshot = sessao.snapshot()
    pedidos = filtrar_pedidos(snapshot.pedidos, status=status_filtro, origem=origem)
    cards = [
        montar_card(p, mostrar_sensivel=mostrar_sensivel, em_processamento=sessao.executor.em_processamento(p.id))
        for p in pedidos
    ]
    return PainelResponse(pedidos=cards, total=len(cards), erro=snapshot.erro, carregando=snapshot.carregando)


@router.post(
    "/refresh",
    response_model=PainelResponse,
    status_code=status.HTTP_200_OK,
)
async def atualizar_painel(
    sessao: SessaoPedidosAoVivo = Depends(get_sessao_pedidos),
):
    """Força uma leitura imediata, fora do intervalo do polling."""
    logger.info("[Painel] Refresh manual solicitado")
    await sessao.refresh()
    snapshot = sessao.snapshot()
    cards = [montar_card(p) for p in snapshot.pedidos]
    return PainelResponse(pedidos=cards, total=len(cards), erro=snapshot.erro, carregando=snapshot.carregando)


@router.get(
    "/entregadores",
    response_model=List[Entregador],
    response_model_by_alias=False,
    status_code=status.HTTP_200_OK,
)
async def listar_entregadores(
    apenas_ativos: bool = Query(True),
    sessao: SessaoPedidosAoVivo = Depends(get_sessao_pedidos),
):
    dados = await sessao.gateway.listar_entregadores()
    entregadores = [Entregador.model_validate(d) for d in dados]
    if apenas_ativos:
        entregadores = [e for e in entregadores if e.ativo]
    return entregadores


# ======================================================================
# ============================ AÇÕES ===================================
# ======================================================================
@router.post(
    "/{pedido_id}/aceitar",
    response_model=ComandoResponse,
    status_code=status.HTTP_200_OK,
)
async def aceitar_pedido(
    pedido_id: str = Path(..., description="ID do pedido"),
    sessao: SessaoPedidosAoVivo = Depends(get_sessao_pedidos),
):
    logger.info(f"[Painel] Aceitar pedido - pedido_id={pedido_id}")
    ok = await sessao.acoes.aceitar(pedido_id)
    return _resposta_comando(sessao, pedido_id, ok)


@router.post(
    "/{pedido_id}/rejeitar",
    response_model=ComandoResponse,
    status_code=status.HTTP_200_OK,
)
async def rejeitar_pedido(
    pedido_id: str = Path(..., description="ID do pedido"),
    confirmar: bool = Query(False, description="Confirmação explícita do operador"),
    sessao: SessaoPedidosAoVivo = Depends(get_sessao_pedidos),
):
    """
    Cancela o pedido. Sem `confirmar=true` nenhuma requisição é enviada.
    """
    logger.info(f"[Painel] Rejeitar pedido - pedido_id={pedido_id} confirmar={confirmar}")
    ok = await sessao.acoes.rejeitar(pedido_id, ConfirmacaoFixa(confirmar))
    return _resposta_comando(sessao, pedido_id, ok)


@router.post(
    "/{pedido_id}/status",
    response_model=ComandoResponse,
    status_code=status.HTTP_200_OK,
)
async def alterar_status_pedido(
    body: AlterarStatusBody,
    pedido_id: str = Path(..., description="ID do pedido"),
    confirmar: bool = Query(False, description="Obrigatório para status CANCELLED"),
    sessao: SessaoPedidosAoVivo = Depends(get_sessao_pedidos),
):
    """
    Avança o status do pedido. `CANCELLED` segue o fluxo de rejeição e
    só é enviado com `confirmar=true`.
    """
    logger.info(f"[Painel] Atualizar status - pedido_id={pedido_id} -> {body.status.value}")
    ok = await sessao.acoes.atualizar_status(pedido_id, body.status, ConfirmacaoFixa(confirmar))
    return _resposta_comando(sessao, pedido_id, ok)


@router.post(
    "/{pedido_id}/entregador",
    response_model=ComandoResponse,
    status_code=status.HTTP_200_OK,
)
async def atribuir_entregador(
    body: AtribuirEntregadorBody,
    pedido_id: str = Path(..., description="ID do pedido"),
    sessao: SessaoPedidosAoVivo = Depends(get_sessao_pedidos),
):
    logger.info(f"[Painel] Atribuir motoboy - pedido_id={pedido_id} entregador={body.entregador}")
    ok = await sessao.acoes.atribuir_entregador(pedido_id, body.entregador)
    return _resposta_comando(sessao, pedido_id, ok)


@router.post(
    "/{pedido_id}/imprimir",
    response_model=ImpressaoResponse,
    status_code=status.HTTP_200_OK,
)
async def imprimir_pedido(
    body: ImprimirBody,
    pedido_id: str = Path(..., description="ID do pedido"),
    sessao: SessaoPedidosAoVivo = Depends(get_sessao_pedidos),
):
    logger.info(f"[Painel] Imprimir pedido - pedido_id={pedido_id} tipo={body.tipo.value}")
    conteudo = await sessao.acoes.imprimir(pedido_id, body.tipo)
    return ImpressaoResponse(ok=conteudo is not None, conteudo=conteudo)


@router.post(
    "/{pedido_id}/mensagem",
    response_model=ComandoResponse,
    status_code=status.HTTP_200_OK,
)
async def enviar_mensagem_cliente(
    body: MensagemBody,
    pedido_id: str = Path(..., description="ID do pedido"),
    sessao: SessaoPedidosAoVivo = Depends(get_sessao_pedidos),
):
    logger.info(f"[Painel] Enviar mensagem - pedido_id={pedido_id} gatilho={body.gatilho}")
    ok = await sessao.acoes.enviar_mensagem_cliente(pedido_id, body.gatilho)
    return _resposta_comando(sessao, pedido_id, ok)
