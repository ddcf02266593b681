"""
API error taxonomy and the handlers that turn errors into responses.

Every error response has the same shape:

    {"success": false, "message": "...", "errors": [...]}   # errors optional
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors
        if status_code is not None:
            self.status_code = status_code


class ValidationFailure(ApiError):
    status_code = 400


class NotFound(ApiError):
    status_code = 404


class UpstreamStoreFailure(ApiError):
    status_code = 500


def field_errors(exc: ValidationError | RequestValidationError) -> list[dict[str, str]]:
    """
    Flatten pydantic/FastAPI validation errors into [{"field", "message"}].
    """
    out: list[dict[str, str]] = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        message = str(err.get("msg") or "Invalid value")
        # pydantic prefixes custom ValueError messages.
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        out.append({"field": ".".join(loc) or "__root__", "message": message})
    return out


def error_payload(message: str, errors: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": False, "message": message}
    if errors:
        payload["errors"] = errors
    return payload


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request_failed path=%s status=%s message=%s", request.url.path, exc.status_code, exc.message)
        return JSONResponse(error_payload(exc.message, exc.errors), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(error_payload("Validation failed", field_errors(exc)), status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            error_payload(str(exc.detail)),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request_failed path=%s", request.url.path)
        return JSONResponse(error_payload("Something went wrong!"), status_code=500)
