import json
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pizzaria.api.shared.schemas.schema_shared_enums import (
    MetodoPagamentoEnum,
    OrigemPedidoEnum,
    PedidoStatusEnum,
    TipoEntregaEnum,
    TipoImpressaoEnum,
)


# ======================================================================
# ============================ PEDIDO ==================================
# ======================================================================
class ComboRef(BaseModel):
    id: str
    nome: str = Field("", alias="name")
    descricao: Optional[str] = Field(None, alias="description")
    preco: Optional[float] = Field(None, alias="price")
    imagem: Optional[str] = Field(None, alias="image")
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ItemPedido(BaseModel):
    id: Optional[str] = None
    quantidade: int = Field(1, ge=1, alias="quantity")
    preco: Optional[float] = Field(None, alias="price")
    combo: ComboRef
    sabores: List[str] = Field(default_factory=list, alias="selectedFlavors")
    observacoes: Optional[str] = Field(None, alias="observations")
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("sabores", mode="before")
    @classmethod
    def _normalizar_sabores(cls, v: Any) -> List[str]:
        # O backend grava sabores como lista, string JSON ou lista de objetos
        if v is None or v == "":
            return []
        if isinstance(v, str):
            try:
                v = json.loads(v)
            except ValueError:
                return [v]
        if isinstance(v, dict):
            v = [v]
        sabores = []
        for sabor in v if isinstance(v, list) else []:
            if isinstance(sabor, dict):
                nome = sabor.get("name") or sabor.get("nome") or sabor.get("id")
                if nome:
                    sabores.append(str(nome))
            elif sabor is not None:
                sabores.append(str(sabor))
        return sabores


class EnderecoPedido(BaseModel):
    rua: str = Field("", alias="street")
    numero: str = Field("", alias="number")
    bairro: str = Field("", alias="neighborhood")
    cidade: str = Field("", alias="city")
    estado: str = Field("", alias="state")
    cep: Optional[str] = Field(None, alias="zipCode")
    complemento: Optional[str] = Field(None, alias="complement")
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def resumo(self) -> str:
        return f"{self.rua}, {self.numero} - {self.bairro}"


class Pedido(BaseModel):
    """
    Pedido consolidado usado por todas as telas do painel.

    `origem` é derivada uma única vez na leitura do JSON do backend
    (MARKETPLACE quando existe id externo) e depois trafega explicitamente.
    """
    id: str
    origem: OrigemPedidoEnum = OrigemPedidoEnum.DIRETO
    marketplace_id: Optional[str] = Field(None, alias="ifoodOrderId")
    status: PedidoStatusEnum
    total: float = Field(0.0, ge=0)
    metodo_pagamento: Optional[MetodoPagamentoEnum] = Field(None, alias="paymentMethod")
    tipo_entrega: Optional[TipoEntregaEnum] = Field(None, alias="deliveryType")
    itens: List[ItemPedido] = Field(default_factory=list, alias="items")
    entregador: Optional[str] = Field(None, alias="deliveryPerson")
    criado_em: Optional[datetime] = Field(None, alias="createdAt")
    atualizado_em: Optional[datetime] = Field(None, alias="updatedAt")
    cliente_nome: Optional[str] = Field(None, alias="customerName")
    cliente_telefone: Optional[str] = Field(None, alias="customerPhone")
    cliente_email: Optional[str] = Field(None, alias="customerEmail")
    endereco: Optional[EnderecoPedido] = Field(None, alias="address")
    observacoes: Optional[str] = Field(None, alias="notes")
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _normalizar_wire(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        externo = data.get("ifoodOrderId") or data.get("externalMarketplaceId") or data.get("marketplace_id")
        if externo:
            data["ifoodOrderId"] = str(externo)
            data.pop("marketplace_id", None)
        if "origem" not in data:
            data["origem"] = OrigemPedidoEnum.MARKETPLACE if externo else OrigemPedidoEnum.DIRETO
        status = data.get("status")
        if isinstance(status, str) and status.upper() == "OUTFOR_DELIVERY":
            data["status"] = PedidoStatusEnum.OUT_FOR_DELIVERY
        # Alguns endpoints devolvem o cliente aninhado em `user`
        usuario = data.get("user")
        if isinstance(usuario, dict):
            data.setdefault("customerName", usuario.get("name"))
            data.setdefault("customerPhone", usuario.get("phone"))
            data.setdefault("customerEmail", usuario.get("email"))
        return data

    @property
    def eh_marketplace(self) -> bool:
        return self.origem == OrigemPedidoEnum.MARKETPLACE

    @property
    def numero_curto(self) -> str:
        return self.id[-6:].upper()


# ======================================================================
# ============================ REQUESTS ================================
# ======================================================================
class AtualizarPedidoRequest(BaseModel):
    """Corpo do PUT /orders/{id}; só os campos tocados vão para o wire."""
    status: Optional[PedidoStatusEnum] = None
    entregador: Optional[str] = Field(None, alias="deliveryPerson")
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


class AcaoPedidoResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    model_config = ConfigDict(extra="allow")


class ImpressaoRequest(BaseModel):
    pedido_id: str = Field(..., alias="orderId")
    tipo: TipoImpressaoEnum = Field(TipoImpressaoEnum.COMPLETO, alias="printType")
    model_config = ConfigDict(populate_by_name=True)


class MensagemClienteRequest(BaseModel):
    pedido_id: str = Field(..., alias="orderId")
    telefone: str = Field(..., alias="phone")
    gatilho: str = Field(..., alias="trigger")
    model_config = ConfigDict(populate_by_name=True)


class Entregador(BaseModel):
    id: str
    nome: str = Field(..., alias="name")
    telefone: Optional[str] = Field(None, alias="phone")
    placa: Optional[str] = Field(None, alias="plate")
    status: Optional[str] = None
    ativo: bool = Field(True, alias="isActive")
    model_config = ConfigDict(populate_by_name=True, extra="ignore")
