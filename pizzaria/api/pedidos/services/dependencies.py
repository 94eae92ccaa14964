from fastapi import Depends, HTTPException, Request, status

from pizzaria.api.notifications.services.central_notificacoes import CentralNotificacoes
from pizzaria.api.pedidos.contracts import IPedidosGateway
from pizzaria.api.pedidos.services.service_sessao_pedidos import SessaoPedidosAoVivo


def get_sessao_pedidos(request: Request) -> SessaoPedidosAoVivo:
    sessao = getattr(request.app.state, "sessao_pedidos", None)
    if sessao is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Sessão de pedidos não inicializada",
        )
    return sessao


def get_central_notificacoes(request: Request) -> CentralNotificacoes:
    central = getattr(request.app.state, "central_notificacoes", None)
    if central is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Central de notificações não inicializada",
        )
    return central


def get_pedidos_gateway(sessao: SessaoPedidosAoVivo = Depends(get_sessao_pedidos)) -> IPedidosGateway:
    return sessao.gateway
