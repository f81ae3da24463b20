from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from domain import ForwarderError, InternalError


logger = logging.getLogger("gemini-relay.errors")


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    if not location:
        return "Please send a message or messages array."
    return f"Invalid request body: {location}: {message}"


def install_error_handlers(app: FastAPI) -> None:
    """Render every failure as `{"error": ...}` instead of FastAPI's `detail`."""

    @app.exception_handler(ForwarderError)
    async def forwarder_error_handler(_: Request, exc: ForwarderError) -> JSONResponse:
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error: %s", exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.default_message)
