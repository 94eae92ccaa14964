from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class IArmazenamentoLocal(ABC):
    """Chave/valor de strings no estilo do localStorage do navegador."""

    @abstractmethod
    def get(self, chave: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def set(self, chave: str, valor: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove(self, chave: str) -> None:
        raise NotImplementedError
