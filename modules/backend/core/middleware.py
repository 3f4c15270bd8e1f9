"""
Request Context Middleware.

Every HTTP request gets a correlation id and a client label bound to the
structlog context, so credit, billing and admin log lines can be traced
back to the call that caused them.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

# Values accepted in X-Client; anything else is logged as "unknown".
KNOWN_CLIENTS = {"web", "admin", "stripe-webhook", "internal"}


def _client_label(request: Request) -> str:
    client = request.headers.get("X-Client", "unknown").lower()
    return client if client in KNOWN_CLIENTS else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Propagates or generates X-Request-ID and reports X-Response-Time.

    Handlers read `request.state.request_id` and `request.state.client`.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        client = _client_label(request)
        request.state.request_id = request_id
        request.state.client = client

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            client=client,
            method=request.method,
            path=request.url.path,
        )
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={
                    "duration_ms": int((time.perf_counter() - started) * 1000),
                    "error_type": type(exc).__name__,
                    "remote": request.client.host if request.client else None,
                },
            )
            raise
        finally:
            structlog.contextvars.clear_contextvars()

        duration_ms = int((time.perf_counter() - started) * 1000)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        logger.debug(
            "Request completed",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
