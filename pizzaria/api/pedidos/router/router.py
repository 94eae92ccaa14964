"""
Router principal do bounded context de Pedidos.
"""
from fastapi import APIRouter

from pizzaria.api.pedidos.router.admin.router_painel_admin import router as router_painel_admin

api_pedidos = APIRouter(
    tags=["API - Pedidos"]
)

api_pedidos.include_router(router_painel_admin)
