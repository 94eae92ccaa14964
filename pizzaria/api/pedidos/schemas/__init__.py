"""
Schemas (DTOs) do painel de pedidos.
"""

from .schema_pedido import (
    AcaoPedidoResponse,
    AtualizarPedidoRequest,
    ComboRef,
    EnderecoPedido,
    Entregador,
    ImpressaoRequest,
    ItemPedido,
    MensagemClienteRequest,
    Pedido,
)
from .schema_painel import (
    AlterarStatusBody,
    AtribuirEntregadorBody,
    ComandoResponse,
    FiltroOrigemEnum,
    ImpressaoResponse,
    ImprimirBody,
    ItemCardResponse,
    MensagemBody,
    PainelResponse,
    PedidoCardResponse,
    StatusVisualResponse,
)

__all__ = [
    "AcaoPedidoResponse",
    "AtualizarPedidoRequest",
    "ComboRef",
    "EnderecoPedido",
    "Entregador",
    "ImpressaoRequest",
    "ItemPedido",
    "MensagemClienteRequest",
    "Pedido",
    "AlterarStatusBody",
    "AtribuirEntregadorBody",
    "ComandoResponse",
    "FiltroOrigemEnum",
    "ImpressaoResponse",
    "ImprimirBody",
    "ItemCardResponse",
    "MensagemBody",
    "PainelResponse",
    "PedidoCardResponse",
    "StatusVisualResponse",
]
