"""
Application exceptions and the handlers that turn them into the JSON envelope
``{"success": false, "message": ...}``.

Usage:
    from exceptions import NotFoundError

    if entrega is None:
        raise NotFoundError("Entrega não encontrada")
"""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from logging_config import get_logger

logger = get_logger("errors")

GENERIC_ERROR_MESSAGE = "Erro interno do servidor"


class LojaSocialError(Exception):
    """Base exception for all application errors"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(LojaSocialError):
    """Missing or malformed input"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Dados inválidos"):
        super().__init__(message)


class AuthenticationError(LojaSocialError):
    """Credentials or session token rejected"""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Credenciais inválidas"):
        super().__init__(message)


class NotFoundError(LojaSocialError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Recurso não encontrado"):
        super().__init__(message)


def error_response(
    status_code: int,
    message: str,
    errors: Optional[List[Dict[str, Any]]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _field_name(loc: tuple) -> str:
    # ("body", "email") -> "email"; ("path", "entrega_id") -> "entrega_id"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "body"


async def lojasocial_error_handler(request: Request, exc: LojaSocialError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return error_response(exc.status_code, exc.message, headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    if any(err.get("type") == "json_invalid" for err in exc.errors()):
        return error_response(status.HTTP_400_BAD_REQUEST, "JSON inválido")

    errors = [
        {"campo": _field_name(tuple(err.get("loc", ()))), "erro": err.get("msg", "")}
        for err in exc.errors()
    ]
    fields = sorted({e["campo"] for e in errors})
    message = "Dados inválidos: " + ", ".join(fields) if fields else "Dados inválidos"
    return error_response(status.HTTP_400_BAD_REQUEST, message, errors=errors)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = "Rota não encontrada" if exc.detail == "Not Found" else str(exc.detail)
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = "Método não permitido"
    else:
        message = str(exc.detail)
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return error_response(status.HTTP_400_BAD_REQUEST, "Referência inválida")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LojaSocialError, lojasocial_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
