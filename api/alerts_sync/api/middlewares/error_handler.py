"""
Middleware para errores no manejados por los routers.

Los errores de sync (AppException) los resuelve el handler global de la
app; aca solo llegan fallas inesperadas, que se responden con el mismo
formato JSON y sin filtrar el mensaje interno.
"""
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from loguru import logger

from alerts_sync.shared.exceptions.base import AppException


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Convierte excepciones inesperadas en un 500 con formato AppException."""
    
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            route = f"{request.method} {request.url.path}"
            logger.opt(exception=exc).error("Error no manejado en {}: {}", route, exc)
            
            error = AppException(
                "Ha ocurrido un error interno del servidor",
                error_code="INTERNAL_SERVER_ERROR",
                details={"route": route},
            )
            return JSONResponse(status_code=error.status_code, content=error.to_payload())
