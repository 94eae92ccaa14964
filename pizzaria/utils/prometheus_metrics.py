"""
Métricas Prometheus do painel de pedidos.

Além das métricas HTTP do próprio BFF, registra o comportamento da sessão
ao vivo: ciclos de polling, comandos otimistas e alertas de pedidos novos.
"""
import re
from time import time
from typing import Callable

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Métricas de requisições HTTP
http_requests_total = Counter(
    'painel_http_requests_total',
    'Total de requisições HTTP',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'painel_http_request_duration_seconds',
    'Duração das requisições HTTP em segundos',
    ['method', 'endpoint'],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Métricas de logs
log_messages_total = Counter(
    'painel_log_messages_total',
    'Total de mensagens de log',
    ['level']
)

# Métricas da sessão de pedidos
polling_total = Counter(
    'painel_polling_total',
    'Ciclos de polling da lista de pedidos',
    ['resultado']  # ok | erro | malformado | ignorado
)

comandos_total = Counter(
    'painel_comandos_total',
    'Comandos otimistas executados sobre pedidos',
    ['acao', 'resultado']  # resultado: sucesso | rollback
)

novos_pedidos_total = Counter(
    'painel_novos_pedidos_total',
    'Pedidos PENDING vistos pela primeira vez'
)

pedidos_visiveis = Gauge(
    'painel_pedidos_visiveis',
    'Quantidade de pedidos na lista local'
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware para coletar métricas Prometheus das requisições HTTP."""

    async def dispatch(self, request: Request, call_next: Callable):
        # Ignora o endpoint de métricas para evitar loop
        if request.url.path.endswith("/metrics"):
            return await call_next(request)

        method = request.method
        endpoint = self._normalize_endpoint(request.url.path)
        start_time = time()

        try:
            response = await call_next(request)
        except Exception:
            http_requests_total.labels(method=method, endpoint=endpoint, status_code=500).inc()
            raise

        http_requests_total.labels(
            method=method,
            endpoint=endpoint,
            status_code=response.status_code
        ).inc()
        http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(time() - start_time)
        return response

    def _normalize_endpoint(self, endpoint: str) -> str:
        """
        Normaliza endpoints removendo IDs para evitar alta cardinalidade.
        Ex: /api/pedidos/admin/painel/ckx91abc/aceitar -> /api/pedidos/admin/painel/{id}/aceitar
        """
        endpoint = re.sub(r'/painel/(?!refresh|entregadores)[^/]+', '/painel/{id}', endpoint)
        endpoint = re.sub(r'/\d+', '/{id}', endpoint)
        return endpoint


def get_metrics():
    """Retorna as métricas no formato Prometheus."""
    return generate_latest()


def record_log(level: str):
    """Registra uma mensagem de log nas métricas."""
    log_messages_total.labels(level=level).inc()


__all__ = [
    "CONTENT_TYPE_LATEST",
    "PrometheusMiddleware",
    "comandos_total",
    "get_metrics",
    "novos_pedidos_total",
    "pedidos_visiveis",
    "polling_total",
    "record_log",
]
