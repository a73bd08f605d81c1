"""
Exception handlers globais para capturar e logar erros da API.

Todas as respostas de erro seguem o envelope {"success": false, "error": ...}.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import traceback
import json
import logging

logger = logging.getLogger(__name__)


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
            "success": False,
            "error": "Erro de validação nos dados fornecidos",
            "errors": error_details,
        }
    )


async def http_exception_handler(request: Request, exc):
    """
    Handler para HTTPExceptions.
    Registra erros HTTP nos logs com detalhes.
    """
    status_code = exc.status_code
    log_message = f"[HTTP ERROR {status_code}] {request.method} {request.url.path} - Detalhes: {exc.detail}"

    if status_code >= 500:
        logger.error(log_message)
    elif status_code >= 400:
        logger.warning(log_message)

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": str(exc.detail),
            "status_code": status_code,
        },
        headers=getattr(exc, "headers", None),
    )


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
            "success": False,
            "error": "Erro interno do servidor",
            "error_type": type(exc).__name__,
        }
    )
