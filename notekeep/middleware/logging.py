"""
Notekeep Backend: Request Logging Middleware
=============================================

What:  One access-log line per note API request.
How:   Times the downstream call and logs it on the `notekeep.access`
       logger, keyed by route template (`/notes/{note_id}`) so per-note
       requests group together; the concrete path is kept in `extra`.
When:  After RequestIDMiddleware, so the request ID is already set.

Level by outcome:
    exception raised downstream → ERROR (then re-raised)
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Request bodies are never logged. Paths in UNLOGGED_PATHS are skipped.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notekeep.middleware.request_id import request_id_var

logger = logging.getLogger("notekeep.access")

UNLOGGED_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def route_template(request: Request) -> str:
    """The matched route's path template, or the raw path when unrouted."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for note requests, one line per request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in UNLOGGED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        rid = request_id_var.get("")
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "%s %s raised after %.1fms [%s]",
                request.method,
                route_template(request),
                (time.perf_counter() - started) * 1000,
                rid,
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        template = route_template(request)
        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s]",
            request.method,
            template,
            response.status_code,
            elapsed_ms,
            rid,
            extra={
                "request_id": rid,
                "route": template,
                "path": request.url.path,
                "note_id": request.path_params.get("note_id"),
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        return response
