from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from pizzaria.api.shared.schemas.schema_shared_enums import MetodoPagamentoEnum, TipoEntregaEnum


# ======================================================================
# ============================ CATÁLOGO ================================
# ======================================================================
class ComboCatalogo(BaseModel):
    id: str
    nome: str = Field("", alias="name")
    descricao: Optional[str] = Field(None, alias="description")
    preco: float = Field(0.0, alias="price")
    imagem: Optional[str] = Field(None, alias="image")
    ativo: bool = Field(True, alias="isActive")
    eh_pizza: bool = Field(False, alias="isPizza")
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CategoriaCatalogo(BaseModel):
    id: str
    nome: str = Field("", alias="name")
    combos: List[ComboCatalogo] = Field(default_factory=list)
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ======================================================================
# ============================ CARRINHO ================================
# ======================================================================
class ItemCarrinho(BaseModel):
    """Linha do carrinho no formato persistido (array) em `cart`."""
    id: str
    combo: ComboCatalogo
    quantidade: int = Field(1, ge=1, alias="quantity")
    observacoes: str = Field("", alias="observations")
    borda_recheada: bool = Field(False, alias="stuffedCrust")
    preco_total: Optional[float] = Field(None, alias="totalPrice")
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @property
    def subtotal(self) -> float:
        if self.preco_total is not None:
            return self.preco_total
        return self.combo.preco * self.quantidade


class CarrinhoResponse(BaseModel):
    itens: List[ItemCarrinho] = Field(default_factory=list)
    quantidade_itens: int = 0
    total: float = 0.0
    total_formatado: str = "R$ 0,00"


class AdicionarItemRequest(BaseModel):
    combo_id: str = Field(..., min_length=1)


# ======================================================================
# ============================ CHECKOUT ================================
# ======================================================================
class CheckoutRequest(BaseModel):
    tipo_entrega: Optional[TipoEntregaEnum] = None
    metodo_pagamento: Optional[MetodoPagamentoEnum] = None
    endereco_id: Optional[str] = None
    observacoes: Optional[str] = None


class CheckoutResponse(BaseModel):
    pedido: Dict[str, Any] = Field(default_factory=dict)
    subtotal: float
    taxa_entrega: float
    total_com_taxa: float
