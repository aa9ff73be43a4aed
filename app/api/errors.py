# app/api/errors.py
"""
HTTP boundary: maps error kinds to envelopes and status codes.
"""

import logging
from typing import Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError

from app.core import responses
from app.core.errors import (
    Forbidden,
    NotFound,
    ServerError,
    ServiceError,
    StorageError,
    Unauthenticated,
    ValidationFailed,
)

logger = logging.getLogger(__name__)


def service_error_response(exc: ServiceError):
    if isinstance(exc, ValidationFailed):
        return responses.validation_error(exc.errors, exc.message)
    if isinstance(exc, Unauthenticated):
        return responses.unauthorized(exc.message)
    if isinstance(exc, Forbidden):
        return responses.error(exc.message, status.HTTP_403_FORBIDDEN)
    if isinstance(exc, NotFound):
        return responses.not_found(exc.message)
    if isinstance(exc, StorageError):
        return responses.error(exc.message, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return responses.server_error(exc.message)


def request_validation_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        label = field.replace("_", " ")
        msg = err.get("msg", "is invalid")
        errors.setdefault(field, []).append(f"The {label} field is invalid: {msg}.")
    return errors


def operation_name(request: Request) -> str:
    endpoint = request.scope.get("endpoint")
    return getattr(endpoint, "__name__", None) or request.url.path


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError):
        if isinstance(exc, StorageError):
            logger.error("%s failed: %s", operation_name(request), exc.message)
        return service_error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return responses.validation_error(request_validation_errors(exc))

    @app.middleware("http")
    async def catch_unhandled(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception(
                "Unhandled error in %s (%s %s): %s",
                operation_name(request),
                request.method,
                request.url.path,
                exc,
            )
            return service_error_response(ServerError())
