from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class TipoNotificacaoEnum(str, Enum):
    SUCESSO = "sucesso"
    ERRO = "erro"
    INFO = "info"
    TOCAR_SOM = "tocar_som"


class NotificacaoOut(BaseModel):
    tipo: TipoNotificacaoEnum
    mensagem: Optional[str] = None
    url: Optional[str] = None
    volume: Optional[float] = None
    criada_em: datetime


class NotificacoesResponse(BaseModel):
    notificacoes: List[NotificacaoOut] = Field(default_factory=list)
    total: int = 0
