"""Request context middleware for fault logs."""

import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from faultline.config import settings


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request ID into the log context of every request.

    - Reads the request ID header (``X-Request-ID`` by default), or generates a UUID
    - Binds request_id, method and path to structlog contextvars, so the
      translator's ``unhandled_exception`` entries carry them
    - Echoes the request ID on the response, error envelopes included

    Usage:
        app.add_middleware(RequestIDMiddleware)
    """

    def __init__(self, app: ASGIApp, header_name: str | None = None) -> None:
        super().__init__(app)
        self.header_name = header_name or settings.request_id_header

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        response = await call_next(request)
        response.headers[self.header_name] = request_id
        return response
