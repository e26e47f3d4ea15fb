"""Request correlation and the error-to-HTTP mapping."""

from __future__ import annotations

import time
import uuid
from typing import TYPE_CHECKING

import structlog
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from growthcase.errors import AnalysisError, InvalidInputError, NotFoundError, UnavailableError

if TYPE_CHECKING:
    from fastapi import FastAPI, Request, Response

logger = structlog.get_logger()

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tags every log line of a request with one correlation id.

    A client-supplied X-Correlation-ID is reused, otherwise a short random
    one is generated; either way it is echoed on the response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex[:12]
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.monotonic()
        response = await call_next(request)
        elapsed_ms = round((time.monotonic() - start) * 1000, 2)

        log = logger.warning if response.status_code >= 500 else logger.info
        log("Request handled", status=response.status_code, duration_ms=elapsed_ms)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


def _error(status_code: int, code: str, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "detail": detail})


def add_exception_handlers(app: FastAPI) -> None:
    """Map case-library errors onto status codes with an {error, detail} body."""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(404, "not_found", str(exc))

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(_request: Request, exc: InvalidInputError) -> JSONResponse:
        return _error(400, "bad_request", str(exc))

    @app.exception_handler(ValueError)
    async def value_error_handler(_request: Request, exc: ValueError) -> JSONResponse:
        return _error(400, "bad_request", str(exc))

    @app.exception_handler(UnavailableError)
    async def unavailable_handler(_request: Request, exc: UnavailableError) -> JSONResponse:
        logger.error("Persistence unavailable", error=str(exc))
        return _error(503, "unavailable", "The case library is temporarily unavailable")

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(_request: Request, exc: AnalysisError) -> JSONResponse:
        logger.warning("Analysis failed", error=str(exc))
        return _error(502, "analysis_failed", str(exc))

    @app.exception_handler(Exception)
    async def generic_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled exception", error=str(exc), exc_info=exc)
        return _error(500, "internal_server_error", "An unexpected error occurred")
