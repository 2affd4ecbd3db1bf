"""Unit tests for exception handlers."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.exception_handlers import setup_exception_handlers
from core.exceptions import (
    ConcurrencyRetriesExhaustedError,
    QueueFullError,
    QueueNotFoundError,
    StoreConflictError,
)


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


async def _get(app: FastAPI, path: str):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path)


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_app_exception_returns_error_code_and_message(self) -> None:
        app = _create_test_app()

        @app.get("/raise-app")
        async def _() -> None:
            raise QueueNotFoundError("some-id")

        response = await _get(app, "/raise-app")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "QUEUE_NOT_FOUND"
        assert "some-id" in body["message"]
        assert body["details"]["queue_id"] == "some-id"

    @pytest.mark.asyncio
    async def test_queue_full_is_conflict(self) -> None:
        app = _create_test_app()

        @app.get("/full")
        async def _() -> None:
            raise QueueFullError("q-1", 5)

        response = await _get(app, "/full")

        assert response.status_code == 409
        body = response.json()
        assert body["error_code"] == "QUEUE_FULL"
        assert body["details"]["max_participants"] == 5

    @pytest.mark.asyncio
    async def test_retries_exhausted_is_service_unavailable(self) -> None:
        app = _create_test_app()

        @app.get("/busy")
        async def _() -> None:
            raise ConcurrencyRetriesExhaustedError("join", 5)

        response = await _get(app, "/busy")

        assert response.status_code == 503
        assert response.json()["error_code"] == "CONCURRENCY_RETRIES_EXHAUSTED"

    @pytest.mark.asyncio
    async def test_escaped_store_conflict_is_hidden(self) -> None:
        app = _create_test_app()

        @app.get("/conflict")
        async def _() -> None:
            raise StoreConflictError("queue", "q-1")

        response = await _get(app, "/conflict")

        assert response.status_code == 503
        body = response.json()
        assert body["error_code"] == "INTERNAL_ERROR"
        assert "queue" not in body["message"]

    @pytest.mark.asyncio
    async def test_http_exception_returns_standard_format(self) -> None:
        from starlette.exceptions import HTTPException

        app = _create_test_app()

        @app.get("/raise-http")
        async def _() -> None:
            raise HTTPException(status_code=403, detail="Forbidden")

        response = await _get(app, "/raise-http")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "HTTP_ERROR"
        assert body["message"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_validation_error_returns_field_details(self) -> None:
        from pydantic import BaseModel, Field

        app = _create_test_app()

        class Body(BaseModel):
            title: str = Field(..., min_length=1)

        @app.post("/validate")
        async def _(body: Body) -> dict[str, bool]:
            return {"ok": True}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/validate", json={"title": ""})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert isinstance(body["details"], list)
        assert body["details"][0]["field"] == "body.title"

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self) -> None:
        import json
        from unittest.mock import MagicMock

        app = _create_test_app()

        mock_request = MagicMock()
        mock_request.state.request_id = "test-req-id"

        exc = RuntimeError("Something went wrong")

        handler = app.exception_handlers.get(Exception)
        assert handler is not None, "Global exception handler not registered"

        response = await handler(mock_request, exc)  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "test-req-id"
