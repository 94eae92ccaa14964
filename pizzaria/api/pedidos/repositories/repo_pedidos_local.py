from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pizzaria.api.pedidos.schemas.schema_pedido import Pedido
from pizzaria.utils.logger import logger


@dataclass
class PatchOtimista:
    """Cópia-sombra dos campos mutáveis de um pedido aplicada antes da confirmação do servidor."""
    pedido_id: str
    campos: Dict[str, Any]
    anteriores: Dict[str, Any] = field(default_factory=dict)
    # número da leitura em que o servidor confirmou; None = ainda em voo
    confirmado_seq: Optional[int] = None


class PedidoLocalRepository:
    """
    Lista de pedidos mantida pela sessão do painel (estado só do cliente).

    - Toda leitura bem-sucedida substitui a lista inteira.
    - Patches otimistas em voo são reaplicados sobre os dados frescos e
      mantêm o pedido visível mesmo se ele sumir da resposta.
    - Um patch confirmado é descartado pela primeira leitura iniciada
      depois da confirmação.
    """

    def __init__(self) -> None:
        self._pedidos: List[Pedido] = []
        self._patches: Dict[str, PatchOtimista] = {}
        self._seq = 0

    # ------------------------------------------------------------------ #
    # Consulta
    # ------------------------------------------------------------------ #
    def listar(self) -> List[Pedido]:
        return list(self._pedidos)

    def obter(self, pedido_id: str) -> Optional[Pedido]:
        for pedido in self._pedidos:
            if pedido.id == pedido_id:
                return pedido
        return None

    def ids(self) -> List[str]:
        return [p.id for p in self._pedidos]

    def tem_patch(self, pedido_id: str) -> bool:
        return pedido_id in self._patches

    # ------------------------------------------------------------------ #
    # Escrita pelo polling
    # ------------------------------------------------------------------ #
    def iniciar_leitura(self) -> int:
        self._seq += 1
        return self._seq

    def substituir_todos(self, pedidos: List[Pedido], seq_leitura: Optional[int] = None) -> None:
        seq_leitura = self._seq if seq_leitura is None else seq_leitura

        for pedido_id, patch in list(self._patches.items()):
            if patch.confirmado_seq is not None and seq_leitura > patch.confirmado_seq:
                del self._patches[pedido_id]

        novos: List[Pedido] = []
        vistos = set()
        for pedido in pedidos:
            patch = self._patches.get(pedido.id)
            if patch:
                pedido = pedido.model_copy(update=patch.campos)
            novos.append(pedido)
            vistos.add(pedido.id)

        # pedido com patch em voo que não veio na resposta continua visível
        for pedido_id in self._patches:
            if pedido_id not in vistos:
                atual = self.obter(pedido_id)
                if atual:
                    novos.append(atual)

        self._pedidos = novos

    def limpar(self) -> None:
        self._pedidos = [p for p in self._pedidos if p.id in self._patches]

    # ------------------------------------------------------------------ #
    # Escrita pelos comandos otimistas
    # ------------------------------------------------------------------ #
    def aplicar_patch(self, pedido_id: str, campos: Dict[str, Any]) -> Optional[PatchOtimista]:
        atual = self.obter(pedido_id)
        if atual is None:
            return None

        patch = PatchOtimista(
            pedido_id=pedido_id,
            campos=dict(campos),
            anteriores={nome: getattr(atual, nome) for nome in campos},
        )
        self._patches[pedido_id] = patch
        self._trocar(atual.model_copy(update=patch.campos))
        return patch

    def confirmar_patch(self, patch: PatchOtimista) -> None:
        self._seq += 1
        patch.confirmado_seq = self._seq

    def desfazer_patch(self, patch: PatchOtimista) -> None:
        if self._patches.get(patch.pedido_id) is patch:
            del self._patches[patch.pedido_id]
        atual = self.obter(patch.pedido_id)
        if atual is None:
            logger.warning(f"[Painel] Rollback sem pedido na lista: pedido_id={patch.pedido_id}")
            return
        self._trocar(atual.model_copy(update=patch.anteriores))

    def _trocar(self, pedido: Pedido) -> None:
        self._pedidos = [pedido if p.id == pedido.id else p for p in self._pedidos]
