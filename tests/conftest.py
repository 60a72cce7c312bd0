from collections.abc import AsyncIterator

import pytest_asyncio
from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from faultline.exceptions import GoneError, NotFoundError, UnprocessableError
from faultline.middleware import RequestIDMiddleware
from faultline.routing import install
from faultline.schemas.error import ErrorResponse


class Item(BaseModel):
    id: int
    name: str


class Opaque:
    __slots__ = ()


def create_app() -> FastAPI:
    """Small API exercising every translation path."""
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)
    install(app)

    @app.get("/items/{item_id}", response_model=Item)
    async def get_item(item_id: int) -> Item:
        if item_id == 404:
            raise NotFoundError("Item", item_id)
        return Item(id=item_id, name="lamp")

    @app.post("/items/{item_id}/reserve")
    async def reserve_item(item_id: int) -> dict[str, int]:
        raise UnprocessableError("Item is not available", error_code="ITEM_NOT_AVAILABLE")

    @app.get("/archive")
    async def read_archive() -> dict[str, str]:
        raise GoneError("archive moved to cold storage")

    @app.get("/explode")
    async def explode() -> dict[str, str]:
        raise RuntimeError("connection pool exhausted")

    @app.get("/removed")
    async def removed() -> Response:
        return Response(status_code=410, content="gone")

    @app.get("/forbidden")
    async def forbidden() -> dict[str, str]:
        raise HTTPException(status_code=403, detail="not yours")

    @app.post("/signup")
    async def signup() -> JSONResponse:
        return JSONResponse(
            status_code=409,
            content=ErrorResponse.build("DUPLICATE_EMAIL", "Email already registered").model_dump(),
            headers={"Retry-After": "30"},
        )

    @app.get("/private")
    async def private() -> dict[str, str]:
        raise HTTPException(status_code=401, headers={"WWW-Authenticate": "Bearer"})

    @app.get("/opaque", response_model=None)
    async def opaque() -> dict[str, object]:
        return {"value": Opaque()}

    @app.get("/search")
    async def search(limit: int = Query(20, ge=1, le=100)) -> dict[str, int]:
        return {"limit": limit}

    return app


@pytest_asyncio.fixture
async def client() -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the test application."""
    async with AsyncClient(
        transport=ASGITransport(app=create_app()),
        base_url="http://test",
    ) as client:
        yield client
