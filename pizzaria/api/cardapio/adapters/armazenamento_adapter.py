from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from pizzaria.api.cardapio.contracts.armazenamento_contract import IArmazenamentoLocal
from pizzaria.utils.logger import logger


class ArmazenamentoMemoria(IArmazenamentoLocal):
    def __init__(self, valores: Optional[Dict[str, str]] = None):
        self._valores: Dict[str, str] = dict(valores or {})

    def get(self, chave: str) -> Optional[str]:
        return self._valores.get(chave)

    def set(self, chave: str, valor: str) -> None:
        self._valores[chave] = valor

    def remove(self, chave: str) -> None:
        self._valores.pop(chave, None)


class ArmazenamentoArquivoJson(IArmazenamentoLocal):
    """
    Persiste as chaves em um único arquivo JSON ({chave: string}).
    Arquivo ausente ou ilegível equivale a armazenamento vazio.
    """

    def __init__(self, caminho: Union[str, Path]):
        self.caminho = Path(caminho)
        self._lock = threading.Lock()

    def _ler(self) -> Dict[str, str]:
        if not self.caminho.exists():
            return {}
        try:
            dados = json.loads(self.caminho.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"[Armazenamento] Arquivo {self.caminho} ilegível, ignorando: {e}")
            return {}
        return dados if isinstance(dados, dict) else {}

    def _gravar(self, dados: Dict[str, str]) -> None:
        self.caminho.parent.mkdir(parents=True, exist_ok=True)
        self.caminho.write_text(json.dumps(dados, ensure_ascii=False), encoding="utf-8")

    def get(self, chave: str) -> Optional[str]:
        with self._lock:
            valor = self._ler().get(chave)
        return valor if isinstance(valor, str) else None

    def set(self, chave: str, valor: str) -> None:
        with self._lock:
            dados = self._ler()
            dados[chave] = valor
            self._gravar(dados)

    def remove(self, chave: str) -> None:
        with self._lock:
            dados = self._ler()
            if dados.pop(chave, None) is not None:
                self._gravar(dados)


class ArmazenamentoPorCliente(IArmazenamentoLocal):
    """Visão de um único cliente (navegador) sobre o armazenamento compartilhado."""

    def __init__(self, base: IArmazenamentoLocal, cliente_id: str):
        self.base = base
        self.cliente_id = cliente_id

    def _chave(self, chave: str) -> str:
        return f"{self.cliente_id}:{chave}"

    def get(self, chave: str) -> Optional[str]:
        return self.base.get(self._chave(chave))

    def set(self, chave: str, valor: str) -> None:
        self.base.set(self._chave(chave), valor)

    def remove(self, chave: str) -> None:
        self.base.remove(self._chave(chave))
