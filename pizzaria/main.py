from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from pizzaria.core.exception_handlers import (
    validation_exception_handler,
    http_exception_handler,
    painel_exception_handler,
    general_exception_handler
)
from pizzaria.core.exceptions import ErroPainel
from pizzaria.utils.logger import logger
from pizzaria.config.settings import (
    BASE_URL,
    CARRINHO_ARQUIVO,
    CORS_ALLOW_ALL,
    CORS_ORIGINS,
    ENABLE_DOCS,
    PAINEL_ATRASO_RECONCILIACAO_SECONDS,
    PAINEL_AUTOSTART,
    PAINEL_FONTE,
    PAINEL_INTERVALO_POLLING_SECONDS,
    PAINEL_LIMITE,
    PAINEL_MANTER_LISTA_EM_FALHA,
    PAINEL_MAX_NOTIFICACOES,
    PAINEL_SOMENTE_ATIVOS,
    PAINEL_SOM_NOTIFICACAO_URL,
    PAINEL_SOM_VOLUME,
    PEDIDOS_API_BASE_URL,
    PEDIDOS_API_TIMEOUT_SECONDS,
    PEDIDOS_API_TOKEN,
)

from pizzaria.api.cardapio.adapters.armazenamento_adapter import ArmazenamentoArquivoJson, ArmazenamentoMemoria
from pizzaria.api.cardapio.router.router import api_cardapio
from pizzaria.api.monitoring.router import router as monitoring_router
from pizzaria.api.notifications.router.router import router as notifications_router
from pizzaria.api.notifications.services.central_notificacoes import (
    CentralNotificacoes,
    ReprodutorSomNotificacao,
)
from pizzaria.api.pedidos.adapters.pedidos_api_adapter import PedidosApiAdapter
from pizzaria.api.pedidos.adapters.relogio_adapter import RelogioAsyncio
from pizzaria.api.pedidos.contracts import FontePedidos
from pizzaria.api.pedidos.router.router import api_pedidos
from pizzaria.api.pedidos.services.service_sessao_pedidos import SessaoPedidosAoVivo
from pizzaria.utils.prometheus_metrics import PrometheusMiddleware

# ──────────────────────────
# Instância FastAPI
# ──────────────────────────
app = FastAPI(
    title="Painel de Pedidos - Pizzaria",
    version="1.0.0",
    description="Lista de pedidos ao vivo, ações do operador, carrinho e checkout",
    docs_url=("/swagger" if ENABLE_DOCS else None),
    redoc_url=("/redoc" if ENABLE_DOCS else None),
    openapi_url=("/openapi.json" if ENABLE_DOCS else None),
    servers=[{"url": BASE_URL, "description": "Base URL do ambiente"}] if BASE_URL else None,
    redirect_slashes=False
)

# ───────────────────────────
# Exception Handlers Globais
# ───────────────────────────
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(ErroPainel, painel_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# ───────────────────────────
# Middlewares
# ───────────────────────────
# Executados na ORDEM REVERSA da adição (último adicionado = primeiro executado)
app.add_middleware(PrometheusMiddleware)

# - CORS_ALLOW_ALL=true => allow_origins=["*"], allow_credentials=False
# - caso contrário => CORS_ORIGINS (vazio cai para ["*"]); credentials só com origens explícitas
if CORS_ALLOW_ALL:
    allowed_origins = ["*"]
    allow_credentials = False
else:
    allowed_origins = CORS_ORIGINS or ["*"]
    allow_credentials = bool(CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ───────────────────────────
# Startup
# ───────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Iniciando painel de pedidos...")

    central = CentralNotificacoes(max_itens=PAINEL_MAX_NOTIFICACOES)
    gateway = PedidosApiAdapter(
        PEDIDOS_API_BASE_URL,
        token=PEDIDOS_API_TOKEN,
        timeout=PEDIDOS_API_TIMEOUT_SECONDS,
    )
    sessao = SessaoPedidosAoVivo(
        gateway,
        relogio=RelogioAsyncio(),
        reprodutor=ReprodutorSomNotificacao(central),
        notificador=central,
        intervalo=PAINEL_INTERVALO_POLLING_SECONDS,
        atraso_reconciliacao=PAINEL_ATRASO_RECONCILIACAO_SECONDS,
        fonte=FontePedidos.por_nome(PAINEL_FONTE),
        limite=PAINEL_LIMITE,
        somente_ativos=PAINEL_SOMENTE_ATIVOS,
        manter_lista_em_falha=PAINEL_MANTER_LISTA_EM_FALHA,
        url_som=PAINEL_SOM_NOTIFICACAO_URL,
        volume=PAINEL_SOM_VOLUME,
    )

    app.state.central_notificacoes = central
    app.state.pedidos_gateway = gateway
    app.state.sessao_pedidos = sessao
    app.state.armazenamento = (
        ArmazenamentoArquivoJson(CARRINHO_ARQUIVO) if CARRINHO_ARQUIVO else ArmazenamentoMemoria()
    )

    if PAINEL_AUTOSTART:
        await sessao.start()
        logger.info(f"Sessão de pedidos iniciada (backend={PEDIDOS_API_BASE_URL} fonte={PAINEL_FONTE}).")
    else:
        logger.info("PAINEL_AUTOSTART desativado; sessão de pedidos aguardando refresh manual.")

    logger.info("API iniciada com sucesso.")


# ───────────────────────────
# Shutdown
# ───────────────────────────
@app.on_event("shutdown")
async def shutdown():
    logger.info("Encerrando API...")

    sessao = getattr(app.state, "sessao_pedidos", None)
    if sessao is not None:
        await sessao.stop()

    gateway = getattr(app.state, "pedidos_gateway", None)
    if gateway is not None:
        await gateway.aclose()

    logger.info("API encerrada.")


# ───────────────────────────
# Rotas
# ───────────────────────────
@app.get("/")
async def root():
    return {"status": "ok", "message": "API is running"}


@app.get("/health")
async def health():
    sessao = getattr(app.state, "sessao_pedidos", None)
    return {
        "status": "healthy",
        "painel_ativo": bool(sessao and sessao.ativa),
        "painel_erro": sessao.polling.erro if sessao else None,
    }


app.include_router(monitoring_router)
app.include_router(api_pedidos)
app.include_router(notifications_router)
app.include_router(api_cardapio)
