"""
Router para monitoramento: métricas Prometheus e últimas linhas de log.
"""
from collections import deque
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse, StreamingResponse

from pizzaria.utils.logger import LOG_FILE
from pizzaria.utils.prometheus_metrics import CONTENT_TYPE_LATEST, get_metrics

router = APIRouter(
    prefix="/api/monitoring",
    tags=["Monitoring - Monitoramento"]
)


@router.get("/metrics")
async def metrics():
    """
    Endpoint de métricas Prometheus.
    Acesse em: /api/monitoring/metrics
    """
    return StreamingResponse(
        iter([get_metrics()]),
        media_type=CONTENT_TYPE_LATEST
    )


@router.get("/logs", response_class=PlainTextResponse)
async def view_logs(
    lines: int = Query(100, ge=1, le=1000, description="Número de linhas para exibir"),
    level: Optional[str] = Query(None, description="Filtrar por nível (INFO, ERROR, WARNING, DEBUG)"),
    search: Optional[str] = Query(None, description="Buscar texto nas linhas"),
):
    """
    Últimas linhas do log do painel.
    Acesse em: /api/monitoring/logs?lines=100&level=ERROR&search=pedido
    """
    if not LOG_FILE.exists():
        return PlainTextResponse("Arquivo de log não encontrado", status_code=404)

    ultimas: deque = deque(maxlen=lines)
    with LOG_FILE.open(encoding="utf-8", errors="replace") as arquivo:
        for linha in arquivo:
            if level and f"[{level.upper()}]" not in linha:
                continue
            if search and search.lower() not in linha.lower():
                continue
            ultimas.append(linha)
    return PlainTextResponse("".join(ultimas))
