import os
from dotenv import load_dotenv
from pathlib import Path

# Carrega o .env manualmente se estiver fora do Docker
if not os.getenv("RUNNING_IN_DOCKER"):
    dotenv_path = Path(__file__).resolve().parents[2] / ".env"
    load_dotenv(dotenv_path=dotenv_path)


def _bool_env(nome: str, padrao: str = "false") -> bool:
    return os.getenv(nome, padrao).lower() in ("1", "true", "yes", "on")


# Backend REST (fonte da verdade dos pedidos)
PEDIDOS_API_BASE_URL = os.getenv("PEDIDOS_API_BASE_URL", "http://localhost:3000/api")
PEDIDOS_API_TOKEN = os.getenv("PEDIDOS_API_TOKEN")
PEDIDOS_API_TIMEOUT_SECONDS = float(os.getenv("PEDIDOS_API_TIMEOUT_SECONDS", 10))

# Painel de pedidos ao vivo
PAINEL_INTERVALO_POLLING_SECONDS = float(os.getenv("PAINEL_INTERVALO_POLLING_SECONDS", 3))
PAINEL_ATRASO_RECONCILIACAO_SECONDS = float(os.getenv("PAINEL_ATRASO_RECONCILIACAO_SECONDS", 0.3))
# TODOS (/orders), HISTORICO (/orders/history) ou MARKETPLACE (/ifood/orders)
PAINEL_FONTE = os.getenv("PAINEL_FONTE", "TODOS")
PAINEL_LIMITE = int(os.getenv("PAINEL_LIMITE")) if os.getenv("PAINEL_LIMITE") else None
# false => lista zerada quando o polling falha
PAINEL_MANTER_LISTA_EM_FALHA = _bool_env("PAINEL_MANTER_LISTA_EM_FALHA")
PAINEL_SOMENTE_ATIVOS = _bool_env("PAINEL_SOMENTE_ATIVOS")
PAINEL_SOM_NOTIFICACAO_URL = os.getenv("PAINEL_SOM_NOTIFICACAO_URL")
PAINEL_SOM_VOLUME = float(os.getenv("PAINEL_SOM_VOLUME", 0.7))
PAINEL_AUTOSTART = _bool_env("PAINEL_AUTOSTART", "true")
PAINEL_MAX_NOTIFICACOES = int(os.getenv("PAINEL_MAX_NOTIFICACOES", 100))

# Carrinho / checkout
CARRINHO_ARQUIVO = os.getenv("CARRINHO_ARQUIVO")
TAXA_ENTREGA = float(os.getenv("TAXA_ENTREGA", 5.0))

# CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
CORS_ALLOW_ALL = _bool_env("CORS_ALLOW_ALL")

# FastAPI / App
BASE_URL = os.getenv("BASE_URL", "")
ENABLE_DOCS = _bool_env("ENABLE_DOCS", "true")
