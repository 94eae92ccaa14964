import asyncio
import copy
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pizzaria.api.pedidos.contracts import (
    FontePedidos,
    IAgendamento,
    INotificador,
    IPedidosGateway,
    IRelogio,
    IReprodutorSom,
)
from pizzaria.api.pedidos.schemas.schema_pedido import AcaoPedidoResponse, Pedido
from pizzaria.api.shared.schemas.schema_shared_enums import TipoImpressaoEnum


def pedido_json(pedido_id: str, status: str = "PENDING", **extra) -> Dict[str, Any]:
    """Pedido no formato devolvido pelo backend (camelCase)."""
    dados = {
        "id": pedido_id,
        "status": status,
        "total": 59.9,
        "paymentMethod": "PIX",
        "deliveryType": "DELIVERY",
        "createdAt": "2024-05-10T19:42:00",
        "customerName": "João Silva",
        "customerPhone": "(11) 98765-4321",
        "address": {"street": "Rua das Flores", "number": "120", "neighborhood": "Centro", "city": "São Paulo", "state": "SP"},
        "items": [
            {"id": f"{pedido_id}-i1", "quantity": 1, "price": 59.9, "combo": {"id": "combo-1", "name": "Pizza Grande"}},
        ],
    }
    dados.update(extra)
    return dados


def pedido(pedido_id: str, status: str = "PENDING", **extra) -> Pedido:
    return Pedido.model_validate(pedido_json(pedido_id, status, **extra))


# ---------------------------------------------------------------------------
# Gateway em memória
# ---------------------------------------------------------------------------
class GatewayFalso(IPedidosGateway):
    def __init__(self, pedidos: Optional[List[Dict[str, Any]]] = None):
        self.pedidos: Any = list(pedidos or [])
        self.chamadas: List[tuple] = []
        self.falhas: Dict[str, Exception] = {}
        self.respostas: Dict[str, AcaoPedidoResponse] = {}
        self.bloqueios: Dict[str, asyncio.Event] = {}
        self.configuracoes: Dict[str, Any] = {}
        self.entregadores: List[Dict[str, Any]] = []
        self.categorias: List[Dict[str, Any]] = []
        self.pedido_criado: Dict[str, Any] = {"id": "novo-pedido-1", "status": "PENDING"}

    async def _passo(self, metodo: str, *args) -> None:
        self.chamadas.append((metodo, *args))
        if metodo in self.bloqueios:
            await self.bloqueios[metodo].wait()
        if metodo in self.falhas:
            raise self.falhas[metodo]

    def chamadas_de(self, metodo: str) -> List[tuple]:
        return [c for c in self.chamadas if c[0] == metodo]

    async def listar_pedidos(self, fonte: FontePedidos = FontePedidos.TODOS, limite: Optional[int] = None):
        await self._passo("listar_pedidos", fonte, limite)
        return copy.deepcopy(self.pedidos)

    async def aceitar(self, pedido_id, chave_idempotencia=None):
        await self._passo("aceitar", pedido_id, chave_idempotencia)
        return self.respostas.get("aceitar", AcaoPedidoResponse())

    async def rejeitar(self, pedido_id, chave_idempotencia=None):
        await self._passo("rejeitar", pedido_id, chave_idempotencia)
        return self.respostas.get("rejeitar", AcaoPedidoResponse())

    async def atualizar(self, pedido_id, payload, chave_idempotencia=None):
        await self._passo("atualizar", pedido_id, payload.to_wire(), chave_idempotencia)
        return self.respostas.get("atualizar", AcaoPedidoResponse())

    async def imprimir(self, pedido_id, tipo=TipoImpressaoEnum.COMPLETO):
        await self._passo("imprimir", pedido_id, tipo)
        return {"orderId": pedido_id, "printType": tipo.value, "content": "PIZZARIA"}

    async def enviar_mensagem(self, pedido_id, telefone, gatilho):
        await self._passo("enviar_mensagem", pedido_id, telefone, gatilho)
        return {"success": True}

    async def obter_configuracoes(self):
        await self._passo("obter_configuracoes")
        return dict(self.configuracoes)

    async def listar_entregadores(self):
        await self._passo("listar_entregadores")
        return copy.deepcopy(self.entregadores)

    async def listar_categorias(self):
        await self._passo("listar_categorias")
        return copy.deepcopy(self.categorias)

    async def criar_pedido(self, payload):
        await self._passo("criar_pedido", payload)
        return dict(self.pedido_criado)


# ---------------------------------------------------------------------------
# Colaboradores de tela
# ---------------------------------------------------------------------------
class NotificadorFalso(INotificador):
    def __init__(self):
        self.mensagens: List[tuple] = []

    def sucesso(self, mensagem: str) -> None:
        self.mensagens.append(("sucesso", mensagem))

    def erro(self, mensagem: str) -> None:
        self.mensagens.append(("erro", mensagem))

    def info(self, mensagem: str) -> None:
        self.mensagens.append(("info", mensagem))

    def do_tipo(self, tipo: str) -> List[str]:
        return [m for t, m in self.mensagens if t == tipo]


class ReprodutorFalso(IReprodutorSom):
    def __init__(self, erro: Optional[Exception] = None):
        self.tocados: List[tuple] = []
        self.erro = erro

    async def tocar(self, url: str, volume: float = 0.7) -> None:
        self.tocados.append((url, volume))
        if self.erro:
            raise self.erro


class AgendamentoFalso(IAgendamento):
    def __init__(self, prazo: float, callback: Callable[[], Awaitable[object]]):
        self.prazo = prazo
        self.callback = callback
        self.cancelado = False
        self._concluido = False

    def cancelar(self) -> None:
        self.cancelado = True

    @property
    def concluido(self) -> bool:
        return self._concluido or self.cancelado


class RelogioFalso(IRelogio):
    """Tempo só anda quando o teste chama `avancar`."""

    def __init__(self):
        self.decorrido = 0.0
        self.dormindo: List[tuple] = []
        self.agendados: List[AgendamentoFalso] = []

    async def dormir(self, segundos: float) -> None:
        futuro = asyncio.get_running_loop().create_future()
        self.dormindo.append((self.decorrido + segundos, futuro))
        await futuro

    def agendar(self, segundos: float, callback: Callable[[], Awaitable[object]]) -> IAgendamento:
        agendamento = AgendamentoFalso(self.decorrido + segundos, callback)
        self.agendados.append(agendamento)
        return agendamento

    async def avancar(self, segundos: float) -> None:
        self.decorrido += segundos
        for item in list(self.dormindo):
            prazo, futuro = item
            if prazo <= self.decorrido:
                self.dormindo.remove(item)
                if not futuro.done():
                    futuro.set_result(None)
        for agendamento in list(self.agendados):
            if agendamento.prazo <= self.decorrido and not agendamento.concluido:
                agendamento._concluido = True
                await agendamento.callback()
        await rodar_pendentes()


async def rodar_pendentes(voltas: int = 10) -> None:
    for _ in range(voltas):
        await asyncio.sleep(0)
