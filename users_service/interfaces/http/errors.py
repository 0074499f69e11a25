"""Классификатор ошибок: ErrorCode -> HTTP-статус, прочее -> 500 без деталей."""
import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from ...domain.errors import (
    AccountError,
    DuplicateFailure,
    ErrorCode,
    UnexpectedFailure,
    ValidationFailure,
)
from ...infrastructure.repositories import is_unique_violation

logger = structlog.get_logger(__name__)

ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_USER: status.HTTP_400_BAD_REQUEST,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.TOKEN_MISSING: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.TOKEN_INVALID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: AccountError) -> int:
    return ERROR_CODE_TO_STATUS.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(exc: AccountError) -> JSONResponse:
    return JSONResponse(
        status_code=status_for(exc),
        content={"error": exc.message, "code": exc.code.value},
    )


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    err = errors[0]
    field = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
    msg = err.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


def setup_exception_handlers(app: FastAPI, expose_details: bool = False) -> None:
    """Регистрирует обработчики; вызывать до остальных middleware."""

    @app.exception_handler(AccountError)
    async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
        logger.warning(
            "request_failed",
            method=request.method,
            path=request.url.path,
            code=exc.code.value,
            error=exc.message,
        )
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        failure = ValidationFailure(_first_validation_message(exc))
        logger.warning(
            "request_failed",
            method=request.method,
            path=request.url.path,
            code=failure.code.value,
            error=failure.message,
        )
        return error_response(failure)

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        if is_unique_violation(exc):
            failure = DuplicateFailure()
            logger.warning(
                "request_failed",
                method=request.method,
                path=request.url.path,
                code=failure.code.value,
                error=str(exc.orig),
            )
            return error_response(failure)
        return _unexpected(request, exc, expose_details)

    @app.middleware("http")
    async def catch_unexpected(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return _unexpected(request, exc, expose_details)


def _unexpected(request: Request, exc: Exception, expose_details: bool) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        method=request.method,
        path=request.url.path,
        error=str(exc),
        exc_type=type(exc).__name__,
        exc_info=exc,
    )
    failure = UnexpectedFailure(str(exc) if expose_details and str(exc) else None)
    return error_response(failure)
