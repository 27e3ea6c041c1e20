# backend/indovendor/core/exceptions.py
"""
Errores HTTP de la API y manejadores que los traducen al sobre de respuesta
uniforme `{success, message, data?, errors?}`.

Los servicios lanzan `ApiError` (o `HTTPException` a secas) con el código de
estado adecuado; nunca se infiere el estado a partir del texto del mensaje.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """
    HTTPException con código de máquina, lista de errores y datos adicionales.

    Attributes:
        code: Identificador estable del error (p. ej. "TOKEN_EXPIRED")
        errors: Lista de mensajes de validación individuales
        data: Información de contexto para el cliente
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        code: Optional[str] = None,
        errors: Optional[List[Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.errors = errors
        self.data = data


def validation_error(errors: List[str]) -> ApiError:
    """Construye el error 400 estándar para validaciones de dominio."""
    return ApiError(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Validation failed: {', '.join(errors)}",
        errors=errors,
    )


def error_body(
    message: str,
    code: Optional[str] = None,
    errors: Optional[List[Any]] = None,
    data: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    if code:
        body["code"] = code
    if errors:
        body["errors"] = errors
    if data:
        body["data"] = data
    return body


# ========================================
# MANEJADORES DE EXCEPCIONES
# ========================================

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    body = error_body(
        message,
        code=getattr(exc, "code", None),
        errors=getattr(exc, "errors", None),
        data=getattr(exc, "data", None),
    )
    if exc.status_code >= 500:
        logger.error(f"❌ ERROR: {request.method} {request.url.path} -> {exc.status_code} {message}")
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        location = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(location), "message": err.get("msg", "Invalid value")})
    return JSONResponse(
        status_code=422,
        content=error_body("Validation failed", errors=errors),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"💥 ERROR: Excepción no controlada en {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registra los manejadores que producen el sobre de error uniforme."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
