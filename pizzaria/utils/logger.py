# pizzaria/utils/logger.py

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Caminho da pasta logs/ (pode ser sobrescrito via LOG_DIR)
BASE_DIR = Path(__file__).resolve().parent.parent
LOG_DIR = Path(os.getenv("LOG_DIR") or str(BASE_DIR / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)
LOG_FILE = LOG_DIR / "painel.log"

# Instância do logger
logger = logging.getLogger("pizzaria")
logger.setLevel(logging.INFO)

# Evita duplicar handlers se importar várias vezes
if not logger.handlers:
    formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] %(name)s: %(message)s")

    # Handler para arquivo com rotação
    file_handler = RotatingFileHandler(
        filename=LOG_FILE,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)


class PrometheusLogHandler(logging.Handler):
    """Handler que contabiliza as mensagens de log nas métricas Prometheus."""

    def emit(self, record):
        try:
            from pizzaria.utils.prometheus_metrics import record_log
            record_log(record.levelname)
        except Exception:
            # Métrica nunca pode quebrar o logging
            pass


if not any(isinstance(h, PrometheusLogHandler) for h in logger.handlers):
    logger.addHandler(PrometheusLogHandler())
