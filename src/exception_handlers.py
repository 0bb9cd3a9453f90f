from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import OperationalError

from src.exceptions import (
    DomainError,
    ErrorCode,
    InvalidCredentialError,
    UnauthenticatedError,
    UnknownUserError,
)


def _error_body(code: str, message: str, **extra) -> dict:
    return {"success": False, "error": code, "message": message, **extra}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Domain error on {request.url.path}: {exc}")
    else:
        logger.warning(f"Domain error on {request.url.path}: {exc}")

    headers = None
    if isinstance(exc, (UnauthenticatedError, InvalidCredentialError, UnknownUserError)):
        headers = {"WWW-Authenticate": "Bearer"}

    # Expired and revoked tokens answer exactly like an invalid one
    code = exc.code.value
    if isinstance(exc, InvalidCredentialError):
        code = ErrorCode.INVALID_CREDENTIAL.value

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(code, exc.message, **exc.details),
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
    logger.info(f"Validation error on {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(ErrorCode.INVALID_INPUT.value, "Request validation failed", fields=errors),
    )


async def store_error_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.exception(f"Database error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(ErrorCode.STORE_UNAVAILABLE.value, "The database is unavailable"),
    )


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("INTERNAL_ERROR", "Internal server error"),
    )


EXCEPTION_HANDLERS = {
    DomainError: domain_error_handler,
    RequestValidationError: validation_error_handler,
    OperationalError: store_error_handler,
    Exception: general_500_exception_handler,
}


def register_exception_handlers(app):
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
