from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from pizzaria.api.shared.schemas.schema_shared_enums import (
    OrigemPedidoEnum,
    PedidoStatusEnum,
    TipoEntregaEnum,
    TipoImpressaoEnum,
)


class FiltroOrigemEnum(str, Enum):
    ALL = "ALL"
    IFOOD = "IFOOD"
    SYSTEM = "SYSTEM"


# ======================================================================
# ============================ RESPOSTAS ===============================
# ======================================================================
class StatusVisualResponse(BaseModel):
    status: PedidoStatusEnum
    label: str
    cor: str
    icone: str


class ItemCardResponse(BaseModel):
    quantidade: int
    nome: str
    sabores: List[str] = Field(default_factory=list)
    observacoes: Optional[str] = None


class PedidoCardResponse(BaseModel):
    id: str
    numero: str  # "#ABC123"
    status: StatusVisualResponse
    progresso: float
    origem: OrigemPedidoEnum
    origem_label: str  # "iFood" | "Sistema"
    origem_icone: str
    marketplace_id: Optional[str] = None
    total: float
    total_formatado: str
    hora: str
    data_hora: str
    criado_em: Optional[datetime] = None
    cliente_nome: str
    cliente_telefone: Optional[str] = None
    cliente_email: Optional[str] = None
    tipo_entrega: Optional[TipoEntregaEnum] = None
    endereco: Optional[str] = None
    entregador: Optional[str] = None
    itens: List[ItemCardResponse] = Field(default_factory=list)
    itens_ocultos: int = 0
    transicoes: List[PedidoStatusEnum] = Field(default_factory=list)
    pode_aceitar: bool = False
    pode_rejeitar: bool = False
    em_processamento: bool = False


class PainelResponse(BaseModel):
    pedidos: List[PedidoCardResponse] = Field(default_factory=list)
    total: int = 0
    erro: Optional[str] = None
    carregando: bool = False


class ComandoResponse(BaseModel):
    ok: bool
    pedido: Optional[PedidoCardResponse] = None


class ImpressaoResponse(BaseModel):
    ok: bool
    conteudo: Optional[dict] = None


# ======================================================================
# ============================ REQUESTS ================================
# ======================================================================
class AlterarStatusBody(BaseModel):
    status: PedidoStatusEnum


class AtribuirEntregadorBody(BaseModel):
    entregador: Optional[str] = Field(None, description="Nome do motoboy; vazio remove")


class ImprimirBody(BaseModel):
    tipo: TipoImpressaoEnum = TipoImpressaoEnum.COMPLETO


class MensagemBody(BaseModel):
    gatilho: str = Field(..., min_length=1, description="Gatilho do template do chatbot")
