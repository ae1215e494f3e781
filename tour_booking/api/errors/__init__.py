"""Global error handling.

Every failure leaves the API as a JSend body: `{"status": "fail" | "error",
"message": ...}`. In development the exception type and traceback are added.
Anything that is not an operational `AppError` is logged and, in production,
answered with a generic 500.
"""

import logging
import re
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from jose import ExpiredSignatureError, JWTError
from mongoengine import NotUniqueError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from tour_booking.utils.config import settings
from tour_booking.utils.errors import AppError


logger = logging.getLogger(__name__)

DUPLICATE_VALUE_PATTERN = re.compile(r"dup key: \{[^:]*:\s*(?P<value>\"[^\"]*\"|'[^']*'|[^ }]+)")


def _flatten_errors(errors, prefix: str = "") -> list[str]:
    messages: list[str] = []
    for field, error in errors.items():
        name = f"{prefix}{field}"
        if isinstance(error, dict):
            messages.extend(_flatten_errors(error, prefix=f"{name}."))
        else:
            messages.append(f"{name}: {error}")
    return messages


def handle_validation_error_db(exc: ValidationError) -> AppError:
    messages = _flatten_errors(exc.to_dict()) or [str(exc)]
    return AppError(f"Invalid input data. {'. '.join(messages)}", 400)


def handle_duplicate_fields_db(exc: NotUniqueError) -> AppError:
    match = DUPLICATE_VALUE_PATTERN.search(str(exc))
    if match:
        return AppError(f"Duplicate field value: {match.group('value')}. Please use another value!", 400)
    return AppError("Duplicate field value. Please use another value!", 400)


def handle_request_validation_error(exc: RequestValidationError) -> AppError:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query"))
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return AppError(f"Invalid input data. {'. '.join(messages)}", 400)


def handle_jwt_error(exc: JWTError) -> AppError:
    return AppError("Invalid token. Please log in again!", 401)


def handle_jwt_expired_error(exc: ExpiredSignatureError) -> AppError:
    return AppError("Your token has expired! Please log in again.", 401)


def send_error(err: AppError, exc: Exception) -> JSONResponse:
    body = {"status": err.status, "message": err.message}
    if not settings.is_production:
        body["error"] = type(exc).__name__
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=err.status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the global error handlers to `app`."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return send_error(exc, exc)

    @app.exception_handler(ValidationError)
    async def db_validation_error_handler(request: Request, exc: ValidationError):
        return send_error(handle_validation_error_db(exc), exc)

    @app.exception_handler(NotUniqueError)
    async def duplicate_fields_handler(request: Request, exc: NotUniqueError):
        return send_error(handle_duplicate_fields_db(exc), exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        return send_error(handle_request_validation_error(exc), exc)

    @app.exception_handler(ExpiredSignatureError)
    async def jwt_expired_error_handler(request: Request, exc: ExpiredSignatureError):
        return send_error(handle_jwt_expired_error(exc), exc)

    @app.exception_handler(JWTError)
    async def jwt_error_handler(request: Request, exc: JWTError):
        return send_error(handle_jwt_error(exc), exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return send_error(AppError(str(exc.detail), exc.status_code), exc)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error("Unexpected error on %s %s", request.method, request.url.path, exc_info=exc)
        if settings.is_production:
            err = AppError("Something went very wrong!", 500)
        else:
            err = AppError(str(exc) or type(exc).__name__, 500)
        err.is_operational = False
        return send_error(err, exc)
