from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pizzaria.api.pedidos.contracts import IConfirmacao, INotificador, IPedidosGateway
from pizzaria.api.pedidos.repositories.repo_pedidos_local import PedidoLocalRepository
from pizzaria.api.pedidos.schemas.schema_pedido import AtualizarPedidoRequest, Pedido
from pizzaria.api.pedidos.services.service_comando_otimista import (
    ComandoOtimista,
    ExecutorComandoOtimista,
)
from pizzaria.api.shared.schemas.schema_shared_enums import (
    PedidoStatusEnum,
    TipoImpressaoEnum,
    eh_terminal,
    pode_transicionar,
)
from pizzaria.core.exceptions import ErroPainel, ErroProtocolo
from pizzaria.utils.logger import logger

PedidoRef = Union[Pedido, str]


class AcoesPedidoService:
    """Ações do operador sobre um pedido da lista ao vivo."""

    def __init__(
        self,
        gateway: IPedidosGateway,
        repo: PedidoLocalRepository,
        executor: ExecutorComandoOtimista,
        notificador: INotificador,
        confirmacao: Optional[IConfirmacao] = None,
    ) -> None:
        self.gateway = gateway
        self.repo = repo
        self.executor = executor
        self.notificador = notificador
        self.confirmacao = confirmacao

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _resolver(self, pedido: PedidoRef) -> Optional[Pedido]:
        pedido_id = pedido if isinstance(pedido, str) else pedido.id
        atual = self.repo.obter(pedido_id)
        if atual is None:
            logger.warning(f"[Acoes] Pedido {pedido_id} não encontrado na lista local")
            self.notificador.erro("Pedido não encontrado")
        return atual

    # ------------------------------------------------------------------ #
    # Mutações otimistas
    # ------------------------------------------------------------------ #
    async def aceitar(self, pedido: PedidoRef) -> bool:
        atual = self._resolver(pedido)
        if atual is None:
            return False
        if not pode_transicionar(atual.status, PedidoStatusEnum.CONFIRMED):
            self.notificador.erro("Pedido não pode ser aceito no status atual")
            return False

        return await self.executor.executar(ComandoOtimista(
            acao="aceitar",
            pedido_id=atual.id,
            patch={"status": PedidoStatusEnum.CONFIRMED},
            requisicao=lambda chave: self.gateway.aceitar(atual.id, chave),
            mensagem_sucesso="Pedido aceito com sucesso!",
            mensagem_erro="Erro ao processar pedido",
        ))

    async def rejeitar(self, pedido: PedidoRef, confirmacao: Optional[IConfirmacao] = None) -> bool:
        atual = self._resolver(pedido)
        if atual is None:
            return False
        if eh_terminal(atual.status):
            self.notificador.erro("Pedido já finalizado")
            return False

        confirmacao = confirmacao or self.confirmacao
        mensagem = f"Tem certeza que deseja cancelar o pedido #{atual.numero_curto}?"
        if confirmacao is None or not await confirmacao.confirmar(mensagem):
            logger.info(f"[Acoes] Cancelamento do pedido {atual.id} não confirmado pelo operador")
            return False

        return await self.executor.executar(ComandoOtimista(
            acao="rejeitar",
            pedido_id=atual.id,
            patch={"status": PedidoStatusEnum.CANCELLED},
            requisicao=lambda chave: self.gateway.rejeitar(atual.id, chave),
            mensagem_sucesso="Pedido cancelado com sucesso!",
            mensagem_erro="Erro ao cancelar pedido",
        ))

    async def atualizar_status(
        self,
        pedido: PedidoRef,
        novo_status: PedidoStatusEnum,
        confirmacao: Optional[IConfirmacao] = None,
    ) -> bool:
        atual = self._resolver(pedido)
        if atual is None:
            return False
        novo_status = PedidoStatusEnum(novo_status)
        if atual.status == novo_status:
            return False
        if novo_status == PedidoStatusEnum.CANCELLED:
            # cancelamento só pelo fluxo de rejeição, que exige confirmação
            return await self.rejeitar(atual, confirmacao)
        if not pode_transicionar(atual.status, novo_status):
            self.notificador.erro(
                f"Não é possível mudar o pedido de {atual.status.value} para {novo_status.value}"
            )
            return False

        if novo_status == PedidoStatusEnum.DELIVERED:
            sucesso, erro = "Pedido marcado como entregue!", "Erro ao marcar como entregue"
        else:
            sucesso, erro = "Status atualizado com sucesso!", "Erro ao atualizar status"

        payload = AtualizarPedidoRequest(status=novo_status)
        return await self.executor.executar(ComandoOtimista(
            acao="status",
            pedido_id=atual.id,
            patch={"status": novo_status},
            requisicao=lambda chave: self.gateway.atualizar(atual.id, payload, chave),
            mensagem_sucesso=sucesso,
            mensagem_erro=erro,
        ))

    async def marcar_entregue(self, pedido: PedidoRef) -> bool:
        return await self.atualizar_status(pedido, PedidoStatusEnum.DELIVERED)

    async def atribuir_entregador(self, pedido: PedidoRef, nome: Optional[str]) -> bool:
        atual = self._resolver(pedido)
        if atual is None:
            return False
        nome = (nome or "").strip() or None

        payload = AtualizarPedidoRequest(entregador=nome)
        return await self.executor.executar(ComandoOtimista(
            acao="entregador",
            pedido_id=atual.id,
            patch={"entregador": nome},
            requisicao=lambda chave: self.gateway.atualizar(atual.id, payload, chave),
            mensagem_sucesso="Motoboy atualizado!",
            mensagem_erro="Erro ao atualizar motoboy",
        ))

    # ------------------------------------------------------------------ #
    # Efeitos colaterais (sem mudança de estado)
    # ------------------------------------------------------------------ #
    async def imprimir(
        self,
        pedido: PedidoRef,
        tipo: TipoImpressaoEnum = TipoImpressaoEnum.COMPLETO,
    ) -> Optional[Dict[str, Any]]:
        atual = self._resolver(pedido)
        if atual is None:
            return None
        try:
            conteudo = await self.gateway.imprimir(atual.id, tipo)
        except ErroPainel as e:
            logger.error(f"[Acoes] Erro ao imprimir pedido {atual.id}: {e.mensagem}")
            self.notificador.erro(self._mensagem(e, "Erro ao imprimir pedido"))
            return None
        self.notificador.sucesso("Pedido enviado para impressão!")
        return conteudo

    async def enviar_mensagem_cliente(self, pedido: PedidoRef, gatilho: str) -> bool:
        atual = self._resolver(pedido)
        if atual is None:
            return False
        if not atual.cliente_telefone:
            self.notificador.erro("Telefone do cliente não disponível para enviar mensagem.")
            return False
        try:
            await self.gateway.enviar_mensagem(atual.id, atual.cliente_telefone, gatilho)
        except ErroPainel as e:
            logger.error(f"[Acoes] Erro ao enviar mensagem do pedido {atual.id}: {e.mensagem}")
            self.notificador.erro(self._mensagem(e, "Erro ao enviar mensagem."))
            return False
        self.notificador.sucesso("Mensagem enviada com sucesso!")
        return True

    @staticmethod
    def _mensagem(erro: ErroPainel, padrao: str) -> str:
        if isinstance(erro, ErroProtocolo) and erro.mensagem_servidor:
            return erro.mensagem_servidor
        return padrao
