from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        return {"msg": self.message}


class ValidationError(AppError):
    """Rejected input. Carries one entry per offending field."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"

    def __init__(self, errors: list[dict[str, str]]) -> None:
        self.errors = errors
        params = ", ".join(error["param"] for error in errors)
        super().__init__(f"Invalid fields: {params}")

    def to_body(self) -> dict[str, Any]:
        return {"errors": self.errors}


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Admin access required"


class InternalError(AppError):
    """Store or transport failure. The message is for logs only."""

    def to_body(self) -> dict[str, Any]:
        return {"msg": self.default_message}


def _param_from_loc(loc: tuple[Any, ...]) -> str:
    # FastAPI prefixes the location ("query", "body", "path"); callers only care about the field.
    parts = [str(part) for part in loc]
    if parts and parts[0] in {"query", "body", "path", "header"}:
        parts = parts[1:]
    return ".".join(parts) or "body"


def errors_from_pydantic(raw_errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    errors: list[dict[str, str]] = []
    seen: set[tuple[str, str]] = set()
    for raw in raw_errors:
        entry = (_param_from_loc(tuple(raw.get("loc", ()))), str(raw.get("msg", "Invalid value")))
        if entry in seen:
            continue
        seen.add(entry)
        errors.append({"param": entry[0], "msg": entry[1]})
    return errors


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("internal error method=%s path=%s error=%s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(errors_from_pydantic(list(exc.errors())))
    return JSONResponse(status_code=error.status_code, content=error.to_body())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled exception method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=InternalError().to_body(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
