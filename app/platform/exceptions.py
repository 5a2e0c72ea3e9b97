import logging
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.platform.response import api_response

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors surfaced to the immediate caller with a stable code."""

    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, data: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.data = data or {}


class JobNotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class JobNotAcceptingBatchesError(AppError):
    code = "JOB_CLOSED"
    status_code = status.HTTP_409_CONFLICT


class DuplicateBatchError(AppError):
    code = "DUPLICATE_BATCH"
    status_code = status.HTTP_409_CONFLICT


class DuplicatePageError(AppError):
    code = "DUPLICATE_PAGE"
    status_code = status.HTTP_409_CONFLICT


class ConcurrentUpdateError(AppError):
    code = "CONCURRENT_UPDATE"
    status_code = status.HTTP_409_CONFLICT


class InvalidStatusTransitionError(AppError):
    code = "INVALID_TRANSITION"
    status_code = status.HTTP_409_CONFLICT


class IntegrationAuthError(AppError):
    code = "INTEGRATION_AUTH"
    status_code = status.HTTP_502_BAD_GATEWAY


class ProviderRequestError(AppError):
    code = "PROVIDER_ERROR"
    status_code = status.HTTP_502_BAD_GATEWAY


def add_exception_handlers(app):
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return api_response(
            message=exc.message,
            status_code=exc.status_code,
            code=exc.code,
            data=exc.data,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return api_response(message=str(exc.detail) or "Error", status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return api_response(
            message="Invalid batch payload",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            code="VALIDATION_ERROR",
            data={"errors": exc.errors()},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return api_response(
            message="Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="INTERNAL_ERROR",
        )
