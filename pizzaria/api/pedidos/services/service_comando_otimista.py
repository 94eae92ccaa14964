from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from pizzaria.api.pedidos.contracts import IAgendamento, INotificador, IRelogio
from pizzaria.api.pedidos.repositories.repo_pedidos_local import PedidoLocalRepository
from pizzaria.api.pedidos.schemas.schema_pedido import AcaoPedidoResponse
from pizzaria.core.exceptions import ErroPainel, ErroProtocolo
from pizzaria.utils.logger import logger
from pizzaria.utils.prometheus_metrics import comandos_total

# recebe a chave de idempotência gerada para a tentativa
Requisicao = Callable[[str], Awaitable[Optional[AcaoPedidoResponse]]]


@dataclass
class ComandoOtimista:
    acao: str
    pedido_id: str
    patch: Dict[str, Any]
    requisicao: Requisicao
    mensagem_sucesso: str
    mensagem_erro: str


class ExecutorComandoOtimista:
    """
    apply(patch) -> issue(request) -> sucesso: agenda reconciliação
                                   -> falha: undo(patch)

    Usado igualmente por aceitar, rejeitar, status e entregador. Nenhum
    comando é repetido automaticamente; toda falha termina em toast.
    """

    def __init__(
        self,
        repo: PedidoLocalRepository,
        notificador: INotificador,
        relogio: IRelogio,
        reconciliar: Callable[[], Awaitable[Any]],
        atraso_reconciliacao: float = 0.3,
    ) -> None:
        self.repo = repo
        self.notificador = notificador
        self.relogio = relogio
        self.reconciliar = reconciliar
        self.atraso_reconciliacao = atraso_reconciliacao
        self._em_processamento: Set[str] = set()
        self._agendamentos: List[IAgendamento] = []

    def em_processamento(self, pedido_id: str) -> bool:
        return pedido_id in self._em_processamento

    async def executar(self, comando: ComandoOtimista) -> bool:
        if comando.pedido_id in self._em_processamento:
            logger.info(f"[Comando] {comando.acao} ignorado: pedido {comando.pedido_id} já em processamento")
            return False

        patch = self.repo.aplicar_patch(comando.pedido_id, comando.patch)
        if patch is None:
            logger.warning(f"[Comando] {comando.acao}: pedido {comando.pedido_id} não está na lista")
            self.notificador.erro("Pedido não encontrado")
            return False

        self._em_processamento.add(comando.pedido_id)
        chave = uuid.uuid4().hex
        try:
            resposta = await comando.requisicao(chave)
            if resposta is not None and not resposta.success:
                raise ErroProtocolo(200, resposta.message)
        except Exception as e:
            self.repo.desfazer_patch(patch)
            comandos_total.labels(acao=comando.acao, resultado="rollback").inc()
            mensagem = self._mensagem_erro(e, comando.mensagem_erro)
            if isinstance(e, ErroPainel):
                logger.error(f"[Comando] {comando.acao} falhou para pedido {comando.pedido_id}: {e.mensagem}")
            else:
                logger.error(f"[Comando] {comando.acao} falhou para pedido {comando.pedido_id}: {e}", exc_info=True)
            self.notificador.erro(mensagem)
            return False
        finally:
            self._em_processamento.discard(comando.pedido_id)

        self.repo.confirmar_patch(patch)
        comandos_total.labels(acao=comando.acao, resultado="sucesso").inc()
        logger.info(f"[Comando] {comando.acao} confirmado: pedido={comando.pedido_id} chave={chave}")
        self.notificador.sucesso(comando.mensagem_sucesso)
        self._agendar_reconciliacao()
        return True

    def cancelar_agendamentos(self) -> None:
        for agendamento in self._agendamentos:
            agendamento.cancelar()
        self._agendamentos.clear()

    def _agendar_reconciliacao(self) -> None:
        self._agendamentos = [a for a in self._agendamentos if not a.concluido]
        self._agendamentos.append(self.relogio.agendar(self.atraso_reconciliacao, self.reconciliar))

    @staticmethod
    def _mensagem_erro(erro: Exception, padrao: str) -> str:
        if isinstance(erro, ErroProtocolo) and erro.mensagem_servidor:
            return erro.mensagem_servidor
        return padrao
