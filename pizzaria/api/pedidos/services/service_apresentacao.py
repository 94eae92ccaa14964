from __future__ import annotations

from typing import Dict, Iterable, List, NamedTuple, Optional, Union

from pizzaria.api.pedidos.schemas.schema_painel import (
    FiltroOrigemEnum,
    ItemCardResponse,
    PedidoCardResponse,
    StatusVisualResponse,
)
from pizzaria.api.pedidos.schemas.schema_pedido import Pedido
from pizzaria.api.shared.schemas.schema_shared_enums import (
    PedidoStatusEnum,
    TipoEntregaEnum,
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

MAX_ITENS_CARD = 3


class StatusVisual(NamedTuple):
    label: str
    cor: str
    icone: str


STATUS_VISUAL: Dict[PedidoStatusEnum, StatusVisual] = {
    PedidoStatusEnum.PENDING: StatusVisual("Aguardando", "yellow", "clock"),
    PedidoStatusEnum.CONFIRMED: StatusVisual("Confirmado", "blue", "check-circle"),
    PedidoStatusEnum.PREPARING: StatusVisual("Preparando", "orange", "chef-hat"),
    PedidoStatusEnum.READY: StatusVisual("Pronto", "green", "package"),
    PedidoStatusEnum.OUT_FOR_DELIVERY: StatusVisual("Saiu para Entrega", "purple", "truck"),
    PedidoStatusEnum.DELIVERED: StatusVisual("Entregue", "gray", "truck"),
    PedidoStatusEnum.CANCELLED: StatusVisual("Cancelado", "red", "x-circle"),
}
STATUS_DESCONHECIDO = StatusVisual("Desconhecido", "gray", "clock")

# Etapas exibidas na barra de progresso do quadro de ativos
ETAPAS_PROGRESSO: List[PedidoStatusEnum] = [
    PedidoStatusEnum.PENDING,
    PedidoStatusEnum.CONFIRMED,
    PedidoStatusEnum.PREPARING,
    PedidoStatusEnum.READY,
    PedidoStatusEnum.OUT_FOR_DELIVERY,
]


def _normalizar_status(status: Union[PedidoStatusEnum, str, None]) -> Optional[PedidoStatusEnum]:
    if status is None:
        return None
    try:
        return PedidoStatusEnum(status)
    except ValueError:
        return None


def status_visual(status: Union[PedidoStatusEnum, str, None]) -> StatusVisual:
    normalizado = _normalizar_status(status)
    return STATUS_VISUAL.get(normalizado, STATUS_DESCONHECIDO) if normalizado else STATUS_DESCONHECIDO


def progresso(status: Union[PedidoStatusEnum, str, None]) -> float:
    """
    Percentual da barra de progresso.

    - etapas ativas: (índice + 1) / 5 * 100;
    - DELIVERED: 100; CANCELLED: 0;
    - status desconhecido é tratado como a primeira etapa.
    """
    normalizado = _normalizar_status(status)
    if normalizado == PedidoStatusEnum.DELIVERED:
        return 100.0
    if normalizado == PedidoStatusEnum.CANCELLED:
        return 0.0
    indice = ETAPAS_PROGRESSO.index(normalizado) if normalizado in ETAPAS_PROGRESSO else 0
    return (indice + 1) / len(ETAPAS_PROGRESSO) * 100


def origem_label(pedido: Pedido) -> str:
    return "iFood" if pedido.eh_marketplace else "Sistema"


def origem_icone(pedido: Pedido) -> str:
    return "iF" if pedido.eh_marketplace else "S"


# ---------------------------------------------------------------------------
# Filtros
# ---------------------------------------------------------------------------
def filtrar_pedidos(
    pedidos: Iterable[Pedido],
    status: Union[PedidoStatusEnum, str, None] = None,
    origem: Union[FiltroOrigemEnum, str, None] = None,
) -> List[Pedido]:
    resultado = list(pedidos)

    if status and str(getattr(status, "value", status)).upper() != "ALL":
        alvo = _normalizar_status(status)
        resultado = [p for p in resultado if p.status == alvo]

    if origem:
        filtro = FiltroOrigemEnum(str(getattr(origem, "value", origem)).upper())
        if filtro == FiltroOrigemEnum.IFOOD:
            resultado = [p for p in resultado if p.eh_marketplace]
        elif filtro == FiltroOrigemEnum.SYSTEM:
            resultado = [p for p in resultado if not p.eh_marketplace]

    return resultado


# ---------------------------------------------------------------------------
# Card
# ---------------------------------------------------------------------------
def montar_card(pedido: Pedido, mostrar_sensivel: bool = False, em_processamento: bool = False) -> PedidoCardResponse:
    visual = status_visual(pedido.status)

    nome = pedido.cliente_nome or "Cliente"
    telefone = pedido.cliente_telefone
    email = pedido.cliente_email
    marketplace_id = pedido.marketplace_id
    if not mostrar_sensivel:
        nome = mascarar_nome(pedido.cliente_nome) or "Cliente"
        telefone = mascarar_telefone(telefone) or None
        email = mascarar_email(email)
        marketplace_id = mascarar_id(marketplace_id) if marketplace_id else None

    endereco = None
    if pedido.tipo_entrega == TipoEntregaEnum.DELIVERY and pedido.endereco:
        endereco = pedido.endereco.resumo() if mostrar_sensivel else pedido.endereco.bairro or None

    itens = [
        ItemCardResponse(
            quantidade=item.quantidade,
            nome=item.combo.nome,
            sabores=item.sabores,
            observacoes=item.observacoes,
        )
        for item in pedido.itens[:MAX_ITENS_CARD]
    ]
    transicoes = transicoes_disponiveis(pedido.status)

    return PedidoCardResponse(
        id=pedido.id,
        numero=f"#{pedido.numero_curto}",
        status=StatusVisualResponse(status=pedido.status, label=visual.label, cor=visual.cor, icone=visual.icone),
        progresso=progresso(pedido.status),
        origem=pedido.origem,
        origem_label=origem_label(pedido),
        origem_icone=origem_icone(pedido),
        marketplace_id=marketplace_id,
        total=pedido.total,
        total_formatado=formatar_moeda(pedido.total),
        hora=formatar_hora(pedido.criado_em),
        data_hora=formatar_data_hora(pedido.criado_em),
        criado_em=pedido.criado_em,
        cliente_nome=nome,
        cliente_telefone=telefone,
        cliente_email=email,
        tipo_entrega=pedido.tipo_entrega,
        endereco=endereco,
        entregador=pedido.entregador,
        itens=itens,
        itens_ocultos=max(len(pedido.itens) - MAX_ITENS_CARD, 0),
        transicoes=transicoes,
        pode_aceitar=PedidoStatusEnum.CONFIRMED in transicoes and pedido.status == PedidoStatusEnum.PENDING,
        pode_rejeitar=PedidoStatusEnum.CANCELLED in transicoes,
        em_processamento=em_processamento,
    )
