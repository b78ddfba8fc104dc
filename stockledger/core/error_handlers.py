import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .exceptions import DomainError

logger = logging.getLogger(__name__)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Errores de dominio: se devuelven tal cual con su código HTTP"""
    body = {"error": exc.message}
    body.update(exc.to_dict())
    return JSONResponse(status_code=exc.status_code, content=body)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Cualquier otro error se registra y se oculta al cliente"""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


def setup_error_handlers(app: FastAPI):
    """Registrar manejadores de errores"""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
