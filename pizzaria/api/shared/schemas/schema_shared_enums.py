from enum import Enum
from typing import List


class PedidoStatusEnum(str, Enum):
    PENDING = "PENDING"  # AGUARDANDO
    CONFIRMED = "CONFIRMED"  # CONFIRMADO
    PREPARING = "PREPARING"  # EM_PREPARO
    READY = "READY"  # PRONTO
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"  # SAIU_PARA_ENTREGA
    DELIVERED = "DELIVERED"  # ENTREGUE
    CANCELLED = "CANCELLED"  # CANCELADO

    @classmethod
    def _missing_(cls, value):
        # Grafia antiga ainda devolvida por alguns registros do backend
        if isinstance(value, str) and value.upper() == "OUTFOR_DELIVERY":
            return cls.OUT_FOR_DELIVERY
        return None


class MetodoPagamentoEnum(str, Enum):
    PIX = "PIX"
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    CASH = "CASH"
    IFOOD = "IFOOD"  # pago no marketplace


class TipoEntregaEnum(str, Enum):
    DELIVERY = "DELIVERY"
    PICKUP = "PICKUP"


class OrigemPedidoEnum(str, Enum):
    DIRETO = "DIRETO"
    MARKETPLACE = "MARKETPLACE"


class TipoImpressaoEnum(str, Enum):
    COZINHA = "kitchen"
    CLIENTE = "customer"
    COMPLETO = "full"


# Sequência do ciclo de vida; CANCELLED fica fora por ser saída lateral
SEQUENCIA_STATUS: List[PedidoStatusEnum] = [
    PedidoStatusEnum.PENDING,
    PedidoStatusEnum.CONFIRMED,
    PedidoStatusEnum.PREPARING,
    PedidoStatusEnum.READY,
    PedidoStatusEnum.OUT_FOR_DELIVERY,
    PedidoStatusEnum.DELIVERED,
]

STATUS_TERMINAIS = frozenset({PedidoStatusEnum.DELIVERED, PedidoStatusEnum.CANCELLED})


def eh_terminal(status: PedidoStatusEnum) -> bool:
    return status in STATUS_TERMINAIS


def pode_transicionar(atual: PedidoStatusEnum, novo: PedidoStatusEnum) -> bool:
    """
    Transições oferecidas pelo painel (convenção de UI, o backend não valida):
    - PENDING só vai para CONFIRMED (aceitar) ou CANCELLED (rejeitar);
    - demais status ativos avançam para qualquer etapa posterior ou cancelam;
    - DELIVERED e CANCELLED não oferecem mais nada.
    """
    if eh_terminal(atual) or atual == novo:
        return False
    if novo == PedidoStatusEnum.CANCELLED:
        return True
    if atual == PedidoStatusEnum.PENDING:
        return novo == PedidoStatusEnum.CONFIRMED
    return SEQUENCIA_STATUS.index(novo) > SEQUENCIA_STATUS.index(atual)


def transicoes_disponiveis(atual: PedidoStatusEnum) -> List[PedidoStatusEnum]:
    return [s for s in PedidoStatusEnum if pode_transicionar(atual, s)]
