"""
DigPaper - Exceptions
Erros de domínio e respetivos handlers HTTP
"""
import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Erro base da aplicação"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "bad_request"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "unauthorized"


class InternalError(AppError):
    pass


def _error_response(status_code: int, error_type: str, message: str, **extra) -> JSONResponse:
    body = {"error": error_type, "message": message}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Internal error em {request.method} {request.url.path}: {exc.message}")
        return _error_response(exc.status_code, exc.error_type, "Internal server error")

    logger.warning(f"Request error em {request.method} {request.url.path}: {exc.message}")
    return _error_response(exc.status_code, exc.error_type, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Pedido inválido em {request.method} {request.url.path}: {exc.errors()}")
    details = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg")}
        for err in exc.errors()
    ]
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "validation_error",
        "Invalid request data",
        details=details,
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Database error em {request.method} {request.url.path}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "database_error", "Internal server error"
    )


async def io_error_handler(request: Request, exc: OSError) -> JSONResponse:
    logger.exception(f"IO error em {request.method} {request.url.path}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "io_error", "Internal server error"
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Erro inesperado em {request.method} {request.url.path}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "Internal server error"
    )


def register_exception_handlers(app) -> None:
    """Regista os handlers de erro na aplicação"""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(OSError, io_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
