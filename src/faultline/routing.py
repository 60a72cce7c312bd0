"""FastAPI integration: run every endpoint through the fault translator.

``FaultTranslatingRoute`` wraps each route handler so that whatever the
endpoint raises or returns reaches the client as one well-formed response.
The route name is the component reported in unexpected-fault logs.

Usage:
    app = FastAPI()
    install(app)  # before routes are declared

    @app.get("/items/{item_id}")
    async def get_item(item_id: int) -> Item:
        raise GoneError()  # → 410 {"error": {"code": "410", "message": "Gone"}}
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import pydantic_core
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from faultline.config import settings
from faultline.translator import FaultTranslator, HandlerResult, RequestContext, ResponseOutcome

default_translator = FaultTranslator()

_ENTITY_HEADERS = {b"content-length", b"content-type"}


def _context(request: Request, component: str) -> RequestContext:
    request_id = structlog.contextvars.get_contextvars().get("request_id")
    return RequestContext(
        component=component,
        method=request.method,
        path=request.url.path,
        request_id=request_id or request.headers.get(settings.request_id_header),
    )


def _to_response(
    outcome: ResponseOutcome,
    headers: Mapping[str, str] | None = None,
    raw_headers: list[tuple[bytes, bytes]] | None = None,
) -> JSONResponse:
    response = JSONResponse(status_code=outcome.status_code, content=outcome.body, headers=headers)
    if raw_headers:
        response.raw_headers.extend(
            (key, value) for key, value in raw_headers if key.lower() not in _ENTITY_HEADERS
        )
    return response


def _status_of(exc: StarletteHTTPException | RequestValidationError) -> int:
    if isinstance(exc, StarletteHTTPException):
        return exc.status_code
    return 422


def _headers_of(exc: StarletteHTTPException | RequestValidationError) -> Mapping[str, str] | None:
    if isinstance(exc, StarletteHTTPException):
        return exc.headers
    return None


def _body_of(response: Response) -> Any:
    """Decoded JSON body of a returned response, or its raw bytes."""
    body = getattr(response, "body", b"")
    try:
        return pydantic_core.from_json(body)
    except ValueError:
        return body


class FaultTranslatingRoute(APIRoute):
    """APIRoute whose handler never lets a fault escape untranslated."""

    translator: FaultTranslator = default_translator

    def get_route_handler(self) -> Callable[[Request], Awaitable[Response]]:
        route_handler = super().get_route_handler()
        translator = self.translator
        component = self.name

        async def translating_route_handler(request: Request) -> Response:
            context = _context(request, component)
            headers: Mapping[str, str] | None = None
            raw_headers: list[tuple[bytes, bytes]] | None = None
            try:
                response = await route_handler(request)
            except (StarletteHTTPException, RequestValidationError) as exc:
                result = HandlerResult.ok(ResponseOutcome(status_code=_status_of(exc)))
                headers = _headers_of(exc)
            except Exception as exc:
                result = HandlerResult.failed(exc)
            else:
                # Success bodies were already serialized by FastAPI; a failure
                # there surfaces as an exception above.
                if response.status_code < 400:
                    return response
                result = HandlerResult.ok(
                    ResponseOutcome(status_code=response.status_code, body=_body_of(response))
                )
                raw_headers = response.raw_headers
            outcome = translator.handle(context, result)
            return _to_response(outcome, headers=headers, raw_headers=raw_headers)

        return translating_route_handler


def route_class_for(translator: FaultTranslator) -> type[FaultTranslatingRoute]:
    """Build a route class bound to ``translator``, e.g. for ``APIRouter(route_class=...)``."""
    return type("FaultTranslatingRoute", (FaultTranslatingRoute,), {"translator": translator})


def install(app: FastAPI, translator: FaultTranslator | None = None) -> None:
    """Route all endpoints declared after this call through ``translator``.

    Also envelopes HTTP errors raised outside a route (e.g. 404 for unknown
    paths, 405 for wrong methods), keeping their headers such as ``Allow``.
    """
    translator = translator or default_translator
    app.router.route_class = route_class_for(translator)

    async def http_error_handler(
        request: Request, exc: StarletteHTTPException | RequestValidationError
    ) -> JSONResponse:
        result = HandlerResult.ok(ResponseOutcome(status_code=_status_of(exc)))
        outcome = translator.handle(_context(request, "router"), result)
        return _to_response(outcome, headers=_headers_of(exc))

    app.add_exception_handler(StarletteHTTPException, http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, http_error_handler)  # type: ignore[arg-type]
