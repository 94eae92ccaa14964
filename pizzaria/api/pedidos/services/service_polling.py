from __future__ import annotations

from typing import Any, List, Optional

from pydantic import ValidationError

from pizzaria.api.pedidos.contracts import FontePedidos, INotificador, IPedidosGateway
from pizzaria.api.pedidos.repositories.repo_pedidos_local import PedidoLocalRepository
from pizzaria.api.pedidos.schemas.schema_pedido import Pedido
from pizzaria.api.pedidos.services.service_novidade import DetectorNovidadeService
from pizzaria.api.shared.schemas.schema_shared_enums import eh_terminal
from pizzaria.core.exceptions import ErroPainel, ErroProtocolo, ErroRespostaMalformada
from pizzaria.utils.logger import logger
from pizzaria.utils.prometheus_metrics import pedidos_visiveis, polling_total

MENSAGEM_FORMATO_INVALIDO = "Formato de dados inválido"
MENSAGEM_ERRO_CARREGAR = "Erro ao carregar pedidos"


class PollingPedidosService:
    """
    Busca periódica da lista de pedidos.

    Cada `refresh()` bem-sucedido substitui a lista local inteira. Enquanto
    uma busca está em voo, novas chamadas são descartadas (single-flight),
    evitando que uma resposta antiga sobrescreva uma mais nova.
    """

    def __init__(
        self,
        gateway: IPedidosGateway,
        repo: PedidoLocalRepository,
        notificador: INotificador,
        detector: Optional[DetectorNovidadeService] = None,
        *,
        fonte: FontePedidos = FontePedidos.TODOS,
        limite: Optional[int] = None,
        somente_ativos: bool = False,
        manter_lista_em_falha: bool = False,
    ) -> None:
        self.gateway = gateway
        self.repo = repo
        self.notificador = notificador
        self.detector = detector
        self.fonte = fonte
        self.limite = limite
        self.somente_ativos = somente_ativos
        self.manter_lista_em_falha = manter_lista_em_falha

        self.ativo = True
        self.carregando = True
        self.erro: Optional[str] = None
        self._em_andamento = False

    @property
    def em_andamento(self) -> bool:
        return self._em_andamento

    async def refresh(self) -> bool:
        if self._em_andamento:
            polling_total.labels(resultado="ignorado").inc()
            logger.debug("[Polling] Busca anterior ainda em andamento; ciclo ignorado")
            return False

        self._em_andamento = True
        seq = self.repo.iniciar_leitura()
        try:
            dados = await self.gateway.listar_pedidos(self.fonte, limite=self.limite)
            pedidos = self._converter(dados)
        except ErroRespostaMalformada as e:
            logger.error(f"[Polling] Dados recebidos não são um array: {e.mensagem}")
            self._falhar(MENSAGEM_FORMATO_INVALIDO, resultado="malformado")
            return False
        except ErroProtocolo as e:
            logger.error(f"[Polling] Erro ao buscar pedidos: status={e.status_code} mensagem={e.mensagem}")
            self._falhar(e.mensagem, resultado="erro")
            return False
        except ErroPainel as e:
            logger.error(f"[Polling] Erro ao carregar pedidos: {e.mensagem}")
            self._falhar(MENSAGEM_ERRO_CARREGAR, resultado="erro")
            return False
        except Exception as e:
            logger.error(f"[Polling] Falha inesperada ao carregar pedidos: {e}", exc_info=True)
            self._falhar(MENSAGEM_ERRO_CARREGAR, resultado="erro")
            return False
        finally:
            self._em_andamento = False
            self.carregando = False

        if not self.ativo:
            # resposta chegou depois do stop(); descartada
            logger.debug("[Polling] Resposta descartada: sessão encerrada")
            return False

        if self.detector:
            await self.detector.processar(pedidos)

        if self.somente_ativos:
            pedidos = [p for p in pedidos if not eh_terminal(p.status)]

        self.repo.substituir_todos(pedidos, seq)
        self.erro = None
        polling_total.labels(resultado="ok").inc()
        pedidos_visiveis.set(len(self.repo.listar()))
        return True

    def _converter(self, dados: Any) -> List[Pedido]:
        if not isinstance(dados, list):
            raise ErroRespostaMalformada(f"esperado array, recebido {type(dados).__name__}")

        pedidos: List[Pedido] = []
        for bruto in dados:
            try:
                pedidos.append(Pedido.model_validate(bruto))
            except ValidationError as e:
                pedido_id = bruto.get("id") if isinstance(bruto, dict) else None
                logger.warning(f"[Polling] Pedido ignorado por formato inválido: id={pedido_id} erros={e.error_count()}")
        return pedidos

    def _falhar(self, mensagem: str, *, resultado: str) -> None:
        polling_total.labels(resultado=resultado).inc()
        if not self.ativo:
            return
        self.erro = mensagem
        self.notificador.erro(mensagem)
        if not self.manter_lista_em_falha:
            self.repo.limpar()
        pedidos_visiveis.set(len(self.repo.listar()))
