from fastapi import APIRouter, Depends, HTTPException, Path, status

from pizzaria.api.cardapio.schemas.schema_carrinho import (
    AdicionarItemRequest,
    CarrinhoResponse,
    CheckoutRequest,
    CheckoutResponse,
)
from pizzaria.api.cardapio.services.dependencies import get_carrinho_service, get_checkout_service
from pizzaria.api.cardapio.services.service_carrinho import CarrinhoService
from pizzaria.api.cardapio.services.service_checkout import CheckoutService
from pizzaria.utils.logger import logger

router = APIRouter(
    prefix="/api/cardapio/client",
    tags=["Client - Carrinho"],
)


# ======================================================================
# ============================ CARRINHO ================================
# ======================================================================
@router.get(
    "/carrinho",
    response_model=CarrinhoResponse,
    response_model_by_alias=False,
    status_code=status.HTTP_200_OK,
)
def obter_carrinho(
    svc: CarrinhoService = Depends(get_carrinho_service),
):
    return svc.resumo()


@router.post(
    "/carrinho/itens",
    response_model=CarrinhoResponse,
    response_model_by_alias=False,
    status_code=status.HTTP_200_OK,
)
def adicionar_item_carrinho(
    body: AdicionarItemRequest,
    svc: CarrinhoService = Depends(get_carrinho_service),
):
    logger.info(f"[Carrinho] Adicionar item - combo_id={body.combo_id}")
    try:
        svc.adicionar(body.combo_id)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Combo não encontrado")
    return svc.resumo()


@router.delete(
    "/carrinho/itens/{combo_id}",
    response_model=CarrinhoResponse,
    response_model_by_alias=False,
    status_code=status.HTTP_200_OK,
)
def remover_item_carrinho(
    combo_id: str = Path(..., description="ID do combo"),
    svc: CarrinhoService = Depends(get_carrinho_service),
):
    logger.info(f"[Carrinho] Remover item - combo_id={combo_id}")
    if not svc.remover(combo_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item não está no carrinho")
    return svc.resumo()


@router.delete(
    "/carrinho",
    response_model=CarrinhoResponse,
    response_model_by_alias=False,
    status_code=status.HTTP_200_OK,
)
def limpar_carrinho(
    svc: CarrinhoService = Depends(get_carrinho_service),
):
    svc.limpar()
    return svc.resumo()


# ======================================================================
# ============================ CHECKOUT ================================
# ======================================================================
@router.post(
    "/checkout",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
)
async def finalizar_checkout(
    body: CheckoutRequest,
    svc: CheckoutService = Depends(get_checkout_service),
):
    """
    Finaliza o pedido com os itens do carrinho.

    - Dados incompletos retornam 400 com a lista `errors`, sem chamar o backend
    - Entrega (`DELIVERY`) exige `endereco_id` e soma a taxa de entrega
    """
    logger.info(f"[Checkout] Finalizar - tipo_entrega={body.tipo_entrega} pagamento={body.metodo_pagamento}")
    return await svc.finalizar(body)
