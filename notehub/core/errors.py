"""Domain errors and their translation to JSON HTTP responses.

Services raise subclasses of :class:`AppError`; the handlers installed by
:func:`install_exception_handlers` turn them (and anything unexpected) into a
stable ``{"error": "..."}`` body.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc
from starlette.exceptions import HTTPException as StarletteHTTPException

from notehub.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, **extra: Any) -> None:
        self.message = message or self.message
        self.extra = extra
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message, **self.extra}


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Access token required"


class InvalidCredentialsError(AuthenticationError):
    message = "Invalid credentials"


class InvalidTokenError(AuthenticationError):
    """Token present but unusable: bad signature, expired, or unknown user."""

    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid or expired token"


class TokenExpiredError(InvalidTokenError):
    pass


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Insufficient permissions"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class LimitReachedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Note limit reached for free plan. Upgrade to Pro for unlimited notes."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, upgradeRequired=True)


class ConflictError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Conflict"


class StoreError(AppError):
    message = "Database error"


class ServiceUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Service temporarily unavailable"


class SchemaVersionError(RuntimeError):
    """Raised at startup when the database schema is older than the code."""


# ── Handlers ─────────────────────────────────────────────────

def _app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def _server_error(request: Request, error: AppError, exc: Exception) -> JSONResponse:
    body = error.to_body()
    if _app_settings(request).is_development:
        body["message"] = str(exc)
    return JSONResponse(status_code=error.status_code, content=body)


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    else:
        message = "Invalid request body"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    # The app itself raises AppError; a bare 404 here means no route matched.
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        detail = "Route not found"
    else:
        detail = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=getattr(exc, "headers", None),
    )


async def _sqlalchemy_handler(request: Request, exc: sa_exc.SQLAlchemyError) -> JSONResponse:
    if isinstance(exc, (sa_exc.TimeoutError, sa_exc.OperationalError, sa_exc.InterfaceError)):
        logger.warning("Store unavailable during %s %s: %s", request.method, request.url.path, exc)
        return _server_error(request, ServiceUnavailableError(), exc)
    logger.exception("Store error during %s %s", request.method, request.url.path)
    return _server_error(request, StoreError(), exc)


async def _timeout_handler(request: Request, exc: TimeoutError) -> JSONResponse:
    logger.warning("Store round-trip timed out during %s %s", request.method, request.url.path)
    return _server_error(request, ServiceUnavailableError(), exc)


async def _unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error during %s %s", request.method, request.url.path)
    return _server_error(request, AppError(), exc)


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(sa_exc.SQLAlchemyError, _sqlalchemy_handler)
    app.add_exception_handler(TimeoutError, _timeout_handler)
    app.add_exception_handler(Exception, _unhandled_handler)
