from __future__ import annotations

import logging
from collections import deque
from datetime import datetime
from typing import Deque, List, Optional

from pizzaria.api.notifications.schemas.schema_notificacao import NotificacaoOut, TipoNotificacaoEnum
from pizzaria.api.pedidos.contracts import IConfirmacao, INotificador, IReprodutorSom

logger = logging.getLogger(__name__)


class CentralNotificacoes(INotificador):
    """
    Fila em memória dos toasts do painel.

    O navegador consome a fila via GET /api/notifications/painel; quando
    cheia, as notificações mais antigas são descartadas.
    """

    def __init__(self, max_itens: int = 100):
        self._fila: Deque[NotificacaoOut] = deque(maxlen=max_itens)

    def _publicar(self, tipo: TipoNotificacaoEnum, mensagem: Optional[str] = None, **extra) -> NotificacaoOut:
        notificacao = NotificacaoOut(tipo=tipo, mensagem=mensagem, criada_em=datetime.now(), **extra)
        self._fila.append(notificacao)
        return notificacao

    def sucesso(self, mensagem: str) -> None:
        self._publicar(TipoNotificacaoEnum.SUCESSO, mensagem)

    def erro(self, mensagem: str) -> None:
        self._publicar(TipoNotificacaoEnum.ERRO, mensagem)

    def info(self, mensagem: str) -> None:
        self._publicar(TipoNotificacaoEnum.INFO, mensagem)

    def tocar_som(self, url: str, volume: float) -> None:
        self._publicar(TipoNotificacaoEnum.TOCAR_SOM, url=url, volume=volume)

    def pendentes(self) -> List[NotificacaoOut]:
        return list(self._fila)

    def consumir(self) -> List[NotificacaoOut]:
        """Retorna e remove todas as notificações pendentes."""
        itens = list(self._fila)
        self._fila.clear()
        return itens

    def __len__(self) -> int:
        return len(self._fila)


class ReprodutorSomNotificacao(IReprodutorSom):
    """Repassa o alerta sonoro ao navegador como um evento `tocar_som`."""

    def __init__(self, central: CentralNotificacoes):
        self.central = central

    async def tocar(self, url: str, volume: float = 0.7) -> None:
        if not url:
            raise ValueError("URL do som de notificação não configurada")
        self.central.tocar_som(url, volume)
        logger.debug(f"[Som] Evento de som publicado: {url}")


class ConfirmacaoFixa(IConfirmacao):
    """
    Resposta do operador já coletada pela tela (ex.: `?confirmar=true`)
    antes da chamada chegar à sessão.
    """

    def __init__(self, resposta: bool):
        self.resposta = resposta

    async def confirmar(self, mensagem: str) -> bool:
        logger.info(f"[Confirmacao] '{mensagem}' -> {'sim' if self.resposta else 'não'}")
        return self.resposta
