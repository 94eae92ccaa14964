from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional

from pizzaria.api.pedidos.contracts import (
    FontePedidos,
    IConfirmacao,
    INotificador,
    IPedidosGateway,
    IRelogio,
    IReprodutorSom,
)
from pizzaria.api.pedidos.repositories.repo_pedidos_local import PedidoLocalRepository
from pizzaria.api.pedidos.schemas.schema_pedido import Pedido
from pizzaria.api.pedidos.services.service_acoes_pedido import AcoesPedidoService
from pizzaria.api.pedidos.services.service_comando_otimista import ExecutorComandoOtimista
from pizzaria.api.pedidos.services.service_novidade import DetectorNovidadeService
from pizzaria.api.pedidos.services.service_polling import PollingPedidosService
from pizzaria.core.exceptions import ErroPainel
from pizzaria.utils.logger import logger


@dataclass
class SnapshotPainel:
    pedidos: List[Pedido] = field(default_factory=list)
    erro: Optional[str] = None
    carregando: bool = False


class SessaoPedidosAoVivo:
    """
    Dona explícita do estado "ao vivo" de uma tela de pedidos: o loop de
    polling, o conjunto de ids já vistos e os patches otimistas.

    Todas as dependências entram pelo construtor; com um relógio falso o
    ciclo de polling fica determinístico nos testes.
    """

    def __init__(
        self,
        gateway: IPedidosGateway,
        *,
        relogio: IRelogio,
        reprodutor: IReprodutorSom,
        notificador: INotificador,
        confirmacao: Optional[IConfirmacao] = None,
        intervalo: float = 3.0,
        atraso_reconciliacao: float = 0.3,
        fonte: FontePedidos = FontePedidos.TODOS,
        limite: Optional[int] = None,
        somente_ativos: bool = False,
        manter_lista_em_falha: bool = False,
        url_som: Optional[str] = None,
        volume: float = 0.7,
    ) -> None:
        self.gateway = gateway
        self.relogio = relogio
        self.notificador = notificador
        self.intervalo = intervalo

        self.repo = PedidoLocalRepository()
        self.detector = DetectorNovidadeService(reprodutor, url_som=url_som, volume=volume)
        self.polling = PollingPedidosService(
            gateway,
            self.repo,
            notificador,
            self.detector,
            fonte=fonte,
            limite=limite,
            somente_ativos=somente_ativos,
            manter_lista_em_falha=manter_lista_em_falha,
        )
        self.executor = ExecutorComandoOtimista(
            self.repo,
            notificador,
            relogio,
            reconciliar=self.polling.refresh,
            atraso_reconciliacao=atraso_reconciliacao,
        )
        self.acoes = AcoesPedidoService(gateway, self.repo, self.executor, notificador, confirmacao)
        self._tarefa: Optional[asyncio.Task] = None
        self.ciclos = 0

    @property
    def ativa(self) -> bool:
        return self._tarefa is not None and not self._tarefa.done()

    # ------------------------------------------------------------------ #
    # Ciclo de vida
    # ------------------------------------------------------------------ #
    async def start(self) -> None:
        if self.ativa:
            return
        self.polling.ativo = True
        logger.info(f"[Sessao] Iniciando painel: fonte={self.polling.fonte.value} intervalo={self.intervalo}s")
        await self._carregar_configuracoes()
        await self.refresh()
        self._tarefa = asyncio.get_running_loop().create_task(self._loop())

    async def stop(self) -> None:
        self.polling.ativo = False
        self.executor.cancelar_agendamentos()
        tarefa, self._tarefa = self._tarefa, None
        if tarefa is None:
            return
        tarefa.cancel()
        try:
            await tarefa
        except asyncio.CancelledError:
            pass
        logger.info("[Sessao] Painel encerrado")

    async def refresh(self) -> bool:
        resultado = await self.polling.refresh()
        self.ciclos += 1
        return resultado

    def snapshot(self) -> SnapshotPainel:
        return SnapshotPainel(
            pedidos=self.repo.listar(),
            erro=self.polling.erro,
            carregando=self.polling.carregando,
        )

    # ------------------------------------------------------------------ #
    # Internos
    # ------------------------------------------------------------------ #
    async def _loop(self) -> None:
        while True:
            await self.relogio.dormir(self.intervalo)
            try:
                await self.refresh()
            except Exception as e:
                logger.error(f"[Sessao] Erro no ciclo de polling: {e}", exc_info=True)

    async def _carregar_configuracoes(self) -> None:
        try:
            configuracoes = await self.gateway.obter_configuracoes()
        except ErroPainel as e:
            logger.warning(f"[Sessao] Erro ao carregar configurações: {e.mensagem}")
            return
        som = configuracoes.get("notificationSound") if isinstance(configuracoes, dict) else None
        if som:
            self.detector.url_som = som
