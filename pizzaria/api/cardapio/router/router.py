from fastapi import APIRouter

from pizzaria.api.cardapio.router.client import router_carrinho_client

api_cardapio = APIRouter(
    tags=["API - Cardápio"]
)

# Routers para clientes
api_cardapio.include_router(router_carrinho_client.router)
