import uuid
from typing import Optional

from fastapi import Cookie, Depends, Header, HTTPException, Request, Response, status

from pizzaria.api.cardapio.adapters.armazenamento_adapter import ArmazenamentoPorCliente
from pizzaria.api.cardapio.contracts.armazenamento_contract import IArmazenamentoLocal
from pizzaria.api.cardapio.services.service_carrinho import CarrinhoService, combos_do_catalogo
from pizzaria.api.cardapio.services.service_checkout import CheckoutService
from pizzaria.api.pedidos.contracts import IPedidosGateway
from pizzaria.api.pedidos.services.dependencies import get_pedidos_gateway
from pizzaria.config.settings import TAXA_ENTREGA

COOKIE_CARRINHO = "carrinho_id"


def get_armazenamento(request: Request) -> IArmazenamentoLocal:
    armazenamento = getattr(request.app.state, "armazenamento", None)
    if armazenamento is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Armazenamento do carrinho não inicializado",
        )
    return armazenamento


def get_armazenamento_cliente(
    response: Response,
    x_carrinho_id: Optional[str] = Header(None),
    carrinho_id: Optional[str] = Cookie(None),
    armazenamento: IArmazenamentoLocal = Depends(get_armazenamento),
) -> IArmazenamentoLocal:
    # cada navegador tem seu próprio `cart`/`lastOrder`
    cliente_id = x_carrinho_id or carrinho_id
    if not cliente_id:
        cliente_id = uuid.uuid4().hex
        response.set_cookie(COOKIE_CARRINHO, cliente_id, httponly=True, samesite="lax")
    return ArmazenamentoPorCliente(armazenamento, cliente_id)


async def get_carrinho_service(
    armazenamento: IArmazenamentoLocal = Depends(get_armazenamento_cliente),
    gateway: IPedidosGateway = Depends(get_pedidos_gateway),
) -> CarrinhoService:
    # catálogo atual resolve preços e o formato legado do carrinho
    categorias = await gateway.listar_categorias()
    service = CarrinhoService(armazenamento)
    service.carregar(combos_do_catalogo(categorias))
    return service


def get_checkout_service(
    carrinho: CarrinhoService = Depends(get_carrinho_service),
    gateway: IPedidosGateway = Depends(get_pedidos_gateway),
) -> CheckoutService:
    return CheckoutService(gateway, carrinho, taxa_entrega=TAXA_ENTREGA)
