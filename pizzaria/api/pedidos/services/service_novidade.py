from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Set

from pizzaria.api.pedidos.contracts import IReprodutorSom
from pizzaria.api.pedidos.schemas.schema_pedido import Pedido
from pizzaria.api.shared.schemas.schema_shared_enums import PedidoStatusEnum
from pizzaria.utils.prometheus_metrics import novos_pedidos_total

logger = logging.getLogger(__name__)


class DetectorNovidadeService:
    """
    Decide se um ciclo de polling trouxe pedido PENDING nunca visto e,
    nesse caso, toca o som de alerta uma única vez para o ciclo inteiro.

    `ids_vistos` só serve para não repetir o alerta; não é garantia de entrega.
    """

    def __init__(
        self,
        reprodutor: IReprodutorSom,
        url_som: Optional[str] = None,
        volume: float = 0.7,
    ) -> None:
        self.reprodutor = reprodutor
        self.url_som = url_som
        self.volume = volume
        self.ids_vistos: Set[str] = set()

    def avaliar(self, pedidos: Iterable[Pedido]) -> List[str]:
        pedidos = list(pedidos)
        novos = [
            p.id for p in pedidos
            if p.status == PedidoStatusEnum.PENDING and p.id not in self.ids_vistos
        ]
        # todos os ids observados entram no conjunto, não só os pendentes
        self.ids_vistos.update(p.id for p in pedidos)
        return list(dict.fromkeys(novos))

    async def processar(self, pedidos: Iterable[Pedido]) -> List[str]:
        novos = self.avaliar(pedidos)
        if not novos:
            return novos

        novos_pedidos_total.inc(len(novos))
        if not self.url_som:
            logger.debug(f"[Novidade] {len(novos)} pedido(s) novo(s), sem som configurado")
            return novos

        try:
            await self.reprodutor.tocar(self.url_som, self.volume)
            logger.info(f"[Novidade] Som de notificação reproduzido para {len(novos)} novo(s) pedido(s)")
        except Exception as e:
            # autoplay bloqueado etc.; nunca chega ao operador e não é repetido
            logger.warning(f"[Novidade] Erro ao reproduzir som: {e}")
        return novos

    def resetar(self) -> None:
        self.ids_vistos.clear()
