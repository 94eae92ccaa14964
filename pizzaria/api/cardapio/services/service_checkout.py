from __future__ import annotations

import json
from typing import Any, Dict, List

from pizzaria.api.cardapio.schemas.schema_carrinho import CheckoutRequest, CheckoutResponse
from pizzaria.api.cardapio.services.service_carrinho import CHAVE_ULTIMO_PEDIDO, CarrinhoService
from pizzaria.api.pedidos.contracts import IPedidosGateway
from pizzaria.api.shared.schemas.schema_shared_enums import TipoEntregaEnum
from pizzaria.core.exceptions import ErroValidacao
from pizzaria.utils.logger import logger


def validar_pedido(dados: Dict[str, Any]) -> List[str]:
    """Erros de preenchimento do pedido, na ordem em que aparecem para o cliente."""
    erros: List[str] = []
    itens = dados.get("items")

    if not isinstance(itens, list) or not itens:
        erros.append("Nenhum item encontrado no pedido")
    if not dados.get("deliveryType"):
        erros.append("Tipo de entrega obrigatório")
    if not dados.get("paymentMethod"):
        erros.append("Método de pagamento obrigatório")
    if not dados.get("total") or dados["total"] <= 0:
        erros.append("Total do pedido inválido")
    if dados.get("deliveryType") == TipoEntregaEnum.DELIVERY.value and not dados.get("addressId") and not dados.get("address"):
        erros.append("Endereço obrigatório para entrega")

    if isinstance(itens, list):
        for posicao, item in enumerate(itens, start=1):
            if not item.get("comboId"):
                erros.append(f"Item {posicao}: ID do combo obrigatório")
            if not item.get("quantity") or item["quantity"] <= 0:
                erros.append(f"Item {posicao}: Quantidade inválida")
            if not item.get("price") or item["price"] <= 0:
                erros.append(f"Item {posicao}: Preço inválido")

    return erros


class CheckoutService:
    def __init__(self, gateway: IPedidosGateway, carrinho: CarrinhoService, taxa_entrega: float = 5.0):
        self.gateway = gateway
        self.carrinho = carrinho
        self.taxa_entrega = taxa_entrega

    def calcular_taxa(self, tipo_entrega) -> float:
        return self.taxa_entrega if tipo_entrega == TipoEntregaEnum.DELIVERY else 0.0

    def montar_payload(self, request: CheckoutRequest) -> Dict[str, Any]:
        eh_entrega = request.tipo_entrega == TipoEntregaEnum.DELIVERY
        itens = [
            {"comboId": item.combo.id, "quantity": item.quantidade, "price": item.combo.preco}
            for item in self.carrinho.itens
        ]
        return {
            "items": itens,
            "deliveryType": request.tipo_entrega.value if request.tipo_entrega else None,
            "paymentMethod": request.metodo_pagamento.value if request.metodo_pagamento else None,
            "addressId": request.endereco_id if eh_entrega else None,
            "notes": request.observacoes or "",
            # soma das linhas enviadas; ignora totalPrice salvo no carrinho
            "total": round(sum(i["price"] * i["quantity"] for i in itens), 2),
        }

    def validar(self, request: CheckoutRequest) -> Dict[str, Any]:
        payload = self.montar_payload(request)
        erros = validar_pedido(payload)
        if erros:
            logger.warning(f"[Checkout] Pedido inválido: {'; '.join(erros)}")
            raise ErroValidacao(erros)
        return payload

    async def finalizar(self, request: CheckoutRequest) -> CheckoutResponse:
        """
        Valida, envia POST /orders e, com sucesso, limpa o carrinho e
        guarda o pedido criado em `lastOrder`. Erros do backend propagam.
        """
        payload = self.validar(request)
        taxa = self.calcular_taxa(request.tipo_entrega)

        logger.info(
            f"[Checkout] Enviando pedido: {len(payload['items'])} item(ns), "
            f"total={payload['total']:.2f} taxa={taxa:.2f}"
        )
        pedido = await self.gateway.criar_pedido(payload)

        self.carrinho.limpar()
        self.carrinho.armazenamento.set(CHAVE_ULTIMO_PEDIDO, json.dumps(pedido, ensure_ascii=False, default=str))
        logger.info(f"[Checkout] Pedido criado: {pedido.get('id')}")

        return CheckoutResponse(
            pedido=pedido,
            subtotal=payload["total"],
            taxa_entrega=taxa,
            total_com_taxa=round(payload["total"] + taxa, 2),
        )
