"""
Middleware para manejo centralizado de errores no controlados.

Los errores del pipeline (SyncException) se resuelven antes, en el
exception handler registrado en `main.py`; aqui solo llegan bugs o fallos
inesperados.
"""
from fastapi import Request, status
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from loguru import logger


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware para capturar errores inesperados y responder en texto plano."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.opt(exception=exc).error(
                f"Error no manejado en {request.method} {request.url.path}: {exc}"
            )
            return PlainTextResponse(
                "Ha ocurrido un error interno del servidor",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
