"""
Contract (Interface) para o backend REST de pedidos.
O painel só conhece esta interface; o adapter httpx é injetado na sessão.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

from pizzaria.api.pedidos.schemas.schema_pedido import (
    AcaoPedidoResponse,
    AtualizarPedidoRequest,
)
from pizzaria.api.shared.schemas.schema_shared_enums import TipoImpressaoEnum


class FontePedidos(str, Enum):
    """Endpoint de listagem consultado pelo polling."""
    TODOS = "/orders"
    HISTORICO = "/orders/history"
    MARKETPLACE = "/ifood/orders"

    @classmethod
    def por_nome(cls, nome: str) -> "FontePedidos":
        """`TODOS`, `HISTORICO` ou `MARKETPLACE` (sem diferenciar maiúsculas)."""
        try:
            return cls[nome.strip().upper()]
        except KeyError:
            opcoes = ", ".join(cls.__members__)
            raise ValueError(f"Fonte de pedidos inválida: {nome!r} (use {opcoes})") from None


class IPedidosGateway(ABC):
    """Contrato de acesso ao backend de pedidos, cardápio e integrações."""

    @abstractmethod
    async def listar_pedidos(self, fonte: FontePedidos = FontePedidos.TODOS, limite: Optional[int] = None) -> List[Dict[str, Any]]:
        """Lista pedidos. Levanta ErroRespostaMalformada se o corpo não for um array."""
        raise NotImplementedError

    @abstractmethod
    async def aceitar(self, pedido_id: str, chave_idempotencia: Optional[str] = None) -> AcaoPedidoResponse:
        raise NotImplementedError

    @abstractmethod
    async def rejeitar(self, pedido_id: str, chave_idempotencia: Optional[str] = None) -> AcaoPedidoResponse:
        raise NotImplementedError

    @abstractmethod
    async def atualizar(
        self,
        pedido_id: str,
        payload: AtualizarPedidoRequest,
        chave_idempotencia: Optional[str] = None,
    ) -> AcaoPedidoResponse:
        raise NotImplementedError

    @abstractmethod
    async def imprimir(self, pedido_id: str, tipo: TipoImpressaoEnum = TipoImpressaoEnum.COMPLETO) -> Dict[str, Any]:
        """Devolve o payload pré-formatado consumido pelo helper de impressão."""
        raise NotImplementedError

    @abstractmethod
    async def enviar_mensagem(self, pedido_id: str, telefone: str, gatilho: str) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    async def obter_configuracoes(self) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    async def listar_entregadores(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    async def listar_categorias(self) -> List[Dict[str, Any]]:
        """Categorias do cardápio com seus combos."""
        raise NotImplementedError

    @abstractmethod
    async def criar_pedido(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError
