"""
Exception handlers globais para capturar e logar erros do painel.
"""
import json
import traceback

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pizzaria.core.exceptions import ErroPainel, ErroProtocolo, ErroValidacao
from pizzaria.utils.logger import logger


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler para erros de validação (422) do FastAPI/Pydantic.
    Registra os erros detalhados nos logs.
    """
    error_details = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", []))
        error_details.append({
            "field": field,
            "type": error.get("type", "unknown"),
            "message": error.get("msg", "Erro de validação"),
        })

    logger.error(
        f"[VALIDATION ERROR 422] {request.method} {request.url.path} - "
        f"Erros de validação detectados:\n{json.dumps(error_details, indent=2, ensure_ascii=False)}"
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": error_details,
            "message": "Erro de validação nos dados fornecidos",
            "errors": error_details
        }
    )


async def http_exception_handler(request: Request, exc):
    """
    Handler para HTTPExceptions.
    Registra erros HTTP nos logs com detalhes.
    """
    status_code = exc.status_code
    log_message = (
        f"[HTTP ERROR {status_code}] {request.method} {request.url.path} - "
        f"Detalhes: {exc.detail}"
    )
    if status_code >= 500:
        logger.error(log_message)
    elif status_code >= 400:
        logger.warning(log_message)

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.detail,
            "message": exc.detail if isinstance(exc.detail, str) else None,
            "status_code": status_code
        }
    )


async def painel_exception_handler(request: Request, exc: ErroPainel):
    """
    Handler para erros do painel que escaparam de um service.
    Validação vira 400 com a lista de erros; falhas do backend viram 502.
    """
    if isinstance(exc, ErroValidacao):
        status_code = status.HTTP_400_BAD_REQUEST
        content = {"detail": exc.mensagem, "message": exc.mensagem, "errors": exc.erros}
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
        content = {"detail": exc.mensagem, "message": exc.mensagem}
        if isinstance(exc, ErroProtocolo):
            content["upstream_status"] = exc.status_code

    logger.error(f"[PAINEL ERROR {status_code}] {request.method} {request.url.path} - {type(exc).__name__}: {exc.mensagem}")
    return JSONResponse(status_code=status_code, content=content)


async def general_exception_handler(request: Request, exc: Exception):
    """
    Handler para exceções não tratadas.
    Registra erros críticos nos logs.
    """
    logger.error(
        f"[UNHANDLED EXCEPTION] {request.method} {request.url.path} - "
        f"{type(exc).__name__}: {str(exc)}"
    )
    logger.error(f"[UNHANDLED EXCEPTION] Traceback completo:\n{traceback.format_exc()}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Erro interno do servidor",
            "error_type": type(exc).__name__,
            "message": str(exc)
        }
    )
