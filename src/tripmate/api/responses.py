"""Uniform ``{status: 0|1, ...}`` response envelope and the exception handlers
that produce it.

Every chat route answers with

    {"status": 1, "data": <payload>, "message": "<what happened>"}

or, on failure,

    {"status": 0, "message": "<what went wrong>", "errors": {...}?}

Stack traces never reach clients; in a ``development`` deployment the
unexpected-error envelope carries the exception text under ``error``.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tripmate.core.config import get_settings
from tripmate.core.errors import (
    AuthenticationError,
    PersistenceError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

__all__ = ["success", "failure", "install_error_handlers"]


def success(data: Any = None, message: str = "", status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": 1, "data": data, "message": message})


def failure(
    message: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    errors: Optional[dict[str, Any]] = None,
    **extra: Any,
) -> JSONResponse:
    body: dict[str, Any] = {"status": 0, "message": message}
    if errors:
        body["errors"] = errors
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def _field_errors(exc: RequestValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form")]
        errors[".".join(loc) or "body"] = err.get("msg", "Invalid value")
    return errors


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return failure(str(exc), status.HTTP_400_BAD_REQUEST, exc.errors)


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return failure("Invalid request", status.HTTP_400_BAD_REQUEST, _field_errors(exc))


async def _authentication_error(request: Request, exc: AuthenticationError) -> JSONResponse:
    logger.info("Request rejected", extra={"path": request.url.path, "reason": str(exc)})
    return failure("Unauthorized", status.HTTP_401_UNAUTHORIZED)


async def _persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("Persistence failure", extra={"path": request.url.path, "reason": str(exc)})
    return failure(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)


async def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
    return failure(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return failure(str(exc.detail), exc.status_code)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", extra={"path": request.url.path})
    extra = {"error": str(exc)} if get_settings().is_development else {}
    return failure("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR, **extra)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(AuthenticationError, _authentication_error)
    app.add_exception_handler(PersistenceError, _persistence_error)
    app.add_exception_handler(StorageError, _storage_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled_error)
