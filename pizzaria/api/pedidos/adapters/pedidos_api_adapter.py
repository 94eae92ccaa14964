from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from pizzaria.api.pedidos.contracts import FontePedidos, IPedidosGateway
from pizzaria.api.pedidos.schemas.schema_pedido import (
    AcaoPedidoResponse,
    AtualizarPedidoRequest,
    ImpressaoRequest,
    MensagemClienteRequest,
)
from pizzaria.api.shared.schemas.schema_shared_enums import TipoImpressaoEnum
from pizzaria.core.exceptions import ErroProtocolo, ErroRespostaMalformada, ErroTransporte
from pizzaria.utils.logger import logger


class PedidosApiAdapter(IPedidosGateway):
    """
    Implementação httpx do gateway de pedidos.

    Um único AsyncClient é reaproveitado entre requisições; `transport`
    permite apontar para um app ASGI nos testes.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        chave_idempotencia: Optional[str] = None,
    ) -> Any:
        headers = {"Idempotency-Key": chave_idempotencia} if chave_idempotencia else None
        try:
            response = await self._client.request(method, url, json=json, params=params, headers=headers)
        except httpx.TransportError as e:
            logger.error(f"[PedidosAPI] Falha de conexão em {method} {url}: {e}")
            raise ErroTransporte() from e

        if response.status_code >= 400:
            mensagem = self._extrair_mensagem(response)
            logger.error(f"[PedidosAPI] {method} {url} -> {response.status_code} {mensagem or ''}".rstrip())
            raise ErroProtocolo(response.status_code, mensagem)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"[PedidosAPI] {method} {url} devolveu corpo que não é JSON")
            raise ErroRespostaMalformada() from e

    @staticmethod
    def _extrair_mensagem(response: httpx.Response) -> Optional[str]:
        try:
            corpo = response.json()
        except ValueError:
            return None
        if isinstance(corpo, dict):
            mensagem = corpo.get("message") or corpo.get("detail")
            return mensagem if isinstance(mensagem, str) else None
        return None

    @staticmethod
    def _como_lista(dados: Any, recurso: str) -> List[Dict[str, Any]]:
        if not isinstance(dados, list):
            raise ErroRespostaMalformada(f"{recurso}: esperado array, recebido {type(dados).__name__}")
        return dados

    @staticmethod
    def _como_acao(dados: Any) -> AcaoPedidoResponse:
        if isinstance(dados, dict):
            return AcaoPedidoResponse.model_validate(dados)
        return AcaoPedidoResponse()

    # ------------------------------------------------------------------ #
    # Pedidos
    # ------------------------------------------------------------------ #
    async def listar_pedidos(self, fonte: FontePedidos = FontePedidos.TODOS, limite: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"limit": limite} if limite else None
        dados = await self._request("GET", fonte.value, params=params)
        return self._como_lista(dados, fonte.value)

    async def aceitar(self, pedido_id: str, chave_idempotencia: Optional[str] = None) -> AcaoPedidoResponse:
        dados = await self._request("POST", f"/orders/{pedido_id}/accept", chave_idempotencia=chave_idempotencia)
        return self._como_acao(dados)

    async def rejeitar(self, pedido_id: str, chave_idempotencia: Optional[str] = None) -> AcaoPedidoResponse:
        dados = await self._request("POST", f"/orders/{pedido_id}/reject", chave_idempotencia=chave_idempotencia)
        return self._como_acao(dados)

    async def atualizar(
        self,
        pedido_id: str,
        payload: AtualizarPedidoRequest,
        chave_idempotencia: Optional[str] = None,
    ) -> AcaoPedidoResponse:
        await self._request("PUT", f"/orders/{pedido_id}", json=payload.to_wire(), chave_idempotencia=chave_idempotencia)
        # PUT sinaliza sucesso só pelo 2xx; o corpo é o pedido atualizado
        return AcaoPedidoResponse()

    async def criar_pedido(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        dados = await self._request("POST", "/orders", json=payload)
        return dados if isinstance(dados, dict) else {}

    # ------------------------------------------------------------------ #
    # Integrações
    # ------------------------------------------------------------------ #
    async def imprimir(self, pedido_id: str, tipo: TipoImpressaoEnum = TipoImpressaoEnum.COMPLETO) -> Dict[str, Any]:
        corpo = ImpressaoRequest(pedido_id=pedido_id, tipo=tipo).model_dump(by_alias=True, mode="json")
        dados = await self._request("POST", "/print", json=corpo)
        if not isinstance(dados, dict):
            raise ErroRespostaMalformada("print: esperado objeto")
        return dados

    async def enviar_mensagem(self, pedido_id: str, telefone: str, gatilho: str) -> Dict[str, Any]:
        corpo = MensagemClienteRequest(pedido_id=pedido_id, telefone=telefone, gatilho=gatilho).model_dump(by_alias=True)
        dados = await self._request("POST", "/chatbot/send", json=corpo)
        return dados if isinstance(dados, dict) else {}

    async def obter_configuracoes(self) -> Dict[str, Any]:
        dados = await self._request("GET", "/settings")
        return dados if isinstance(dados, dict) else {}

    async def listar_entregadores(self) -> List[Dict[str, Any]]:
        dados = await self._request("GET", "/delivery-persons")
        return self._como_lista(dados, "/delivery-persons")

    async def listar_categorias(self) -> List[Dict[str, Any]]:
        dados = await self._request("GET", "/categories")
        return self._como_lista(dados, "/categories")
