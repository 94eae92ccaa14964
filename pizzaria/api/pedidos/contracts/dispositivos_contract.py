"""
Contracts dos colaboradores "de tela" da sessão de pedidos: relógio,
som de alerta, toasts e confirmação do operador.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Awaitable, Callable


class IAgendamento(ABC):
    @abstractmethod
    def cancelar(self) -> None:
        raise NotImplementedError

    @property
    @abstractmethod
    def concluido(self) -> bool:
        raise NotImplementedError


class IRelogio(ABC):
    """Espera e timers; substituível por um relógio falso nos testes."""

    @abstractmethod
    async def dormir(self, segundos: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def agendar(self, segundos: float, callback: Callable[[], Awaitable[object]]) -> IAgendamento:
        """Executa `callback` uma vez após `segundos`."""
        raise NotImplementedError


class IReprodutorSom(ABC):
    @abstractmethod
    async def tocar(self, url: str, volume: float = 0.7) -> None:
        """Pode levantar exceção (ex.: autoplay bloqueado); quem chama decide."""
        raise NotImplementedError


class INotificador(ABC):
    """Toasts exibidos ao operador."""

    @abstractmethod
    def sucesso(self, mensagem: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def erro(self, mensagem: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def info(self, mensagem: str) -> None:
        raise NotImplementedError


class IConfirmacao(ABC):
    """Prompt bloqueante antes de ações destrutivas."""

    @abstractmethod
    async def confirmar(self, mensagem: str) -> bool:
        raise NotImplementedError
