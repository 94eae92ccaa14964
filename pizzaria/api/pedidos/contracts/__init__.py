from .pedidos_contract import FontePedidos, IPedidosGateway
from .dispositivos_contract import (
    IAgendamento,
    IConfirmacao,
    INotificador,
    IRelogio,
    IReprodutorSom,
)

__all__ = [
    "FontePedidos",
    "IPedidosGateway",
    "IAgendamento",
    "IConfirmacao",
    "INotificador",
    "IRelogio",
    "IReprodutorSom",
]
