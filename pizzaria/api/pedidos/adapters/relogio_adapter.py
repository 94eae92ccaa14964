from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from pizzaria.api.pedidos.contracts import IAgendamento, IRelogio
from pizzaria.utils.logger import logger


class AgendamentoAsyncio(IAgendamento):
    def __init__(self, tarefa: asyncio.Task):
        self._tarefa = tarefa

    def cancelar(self) -> None:
        self._tarefa.cancel()

    @property
    def concluido(self) -> bool:
        return self._tarefa.done()


class RelogioAsyncio(IRelogio):
    """Relógio real baseado no event loop corrente."""

    async def dormir(self, segundos: float) -> None:
        await asyncio.sleep(segundos)

    def agendar(self, segundos: float, callback: Callable[[], Awaitable[object]]) -> IAgendamento:
        async def _executar():
            await asyncio.sleep(segundos)
            try:
                await callback()
            except Exception as e:
                logger.error(f"[Relogio] Erro em tarefa agendada: {e}", exc_info=True)

        return AgendamentoAsyncio(asyncio.get_running_loop().create_task(_executar()))
