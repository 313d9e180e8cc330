"""
Domain errors and the handlers that turn them into the uniform error body::

    {"path": ..., "timestamp": <ms epoch>, "message": ..., "validationErrors": {...}}

``validationErrors`` is present only for validation failures. Messages are
message keys until they reach the boundary, where they are translated for the
request's Accept-Language.
"""
from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hoaxify.i18n import get_locale, translate

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    message_key = "internal_server_error"

    def __init__(self, message_key: str | None = None):
        if message_key:
            self.message_key = message_key
        super().__init__(self.message_key)


class ValidationError(AppError):
    status_code = 400
    message_key = "validation_failure"

    def __init__(self, errors: dict[str, str]):
        super().__init__()
        self.errors = errors


class AuthenticationError(AppError):
    status_code = 401
    message_key = "authentication_failure"


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404
    message_key = "user_not_found"


class InvalidTokenError(AppError):
    status_code = 400
    message_key = "account_activation_failure"


class EmailDeliveryError(AppError):
    status_code = 502
    message_key = "email_failure"


class FileSizeError(AppError):
    status_code = 400
    message_key = "attachment_size_limit"


def error_body(request: Request, message: str, validation_errors: dict[str, str] | None = None) -> dict:
    body = {
        "path": request.url.path,
        "timestamp": int(time.time() * 1000),
        "message": message,
    }
    if validation_errors is not None:
        body["validationErrors"] = validation_errors
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    locale = get_locale(request)
    validation_errors = None
    if isinstance(exc, ValidationError):
        validation_errors = {field: translate(key, locale) for field, key in exc.errors.items()}

    logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message_key)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, translate(exc.message_key, locale), validation_errors),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # malformed bodies (wrong JSON types, unparsable payloads)
    locale = get_locale(request)
    fields: dict[str, str] = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        if loc:
            fields.setdefault(loc[0], translate("validation_failure", locale))
    return JSONResponse(
        status_code=400,
        content=error_body(request, translate("validation_failure", locale), fields),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # unknown routes, wrong methods
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_body(request, translate("internal_server_error", get_locale(request))),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
