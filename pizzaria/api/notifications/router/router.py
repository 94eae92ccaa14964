from fastapi import APIRouter, Depends, Query, status

from pizzaria.api.notifications.schemas.schema_notificacao import NotificacoesResponse
from pizzaria.api.notifications.services.central_notificacoes import CentralNotificacoes
from pizzaria.api.pedidos.services.dependencies import get_central_notificacoes

router = APIRouter(
    prefix="/api/notifications",
    tags=["API - Notifications"]
)


@router.get(
    "/painel",
    response_model=NotificacoesResponse,
    status_code=status.HTTP_200_OK,
)
def consumir_notificacoes_painel(
    consumir: bool = Query(True, description="Remove da fila as notificações retornadas"),
    central: CentralNotificacoes = Depends(get_central_notificacoes),
):
    """
    Toasts e eventos de som pendentes do painel, em ordem de chegada.
    """
    itens = central.consumir() if consumir else central.pendentes()
    return NotificacoesResponse(notificacoes=itens, total=len(itens))
