"""
Tests for the envelope produced by each registered exception handler.
"""

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from api.exceptions.handlers import register_exception_handlers
from editor.result import ApiError, ErrorKind
from persistence.errors import ConflictError, ForbiddenError, NotFoundError, StoreError
from tests.helpers import TEST_BASE_URL


class Payload(BaseModel):
    title: str
    tags: list


def build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/api-error")
    async def api_error():
        raise ApiError.of(ErrorKind.CONFLICT, "Already there", {"email": "taken"})

    @app.get("/http/{status}")
    async def http_error(status: int):
        raise HTTPException(status_code=status, detail=f"HTTP {status}", headers={"X-Why": "test"})

    @app.get("/store/{name}")
    async def store_error(name: str):
        errors = {
            "missing": NotFoundError("Session not found"),
            "forbidden": ForbiddenError("Not yours"),
            "conflict": ConflictError("Duplicate"),
            "other": StoreError("Disk full"),
        }
        raise errors[name]

    @app.get("/value-error")
    async def value_error():
        raise ValueError("bad value")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    @app.post("/payload")
    async def payload(body: Payload):
        return {"ok": True}

    return app


@pytest_asyncio.fixture
async def handler_client():
    # Unhandled exceptions are re-raised by Starlette after the 500 response is sent
    transport = httpx.ASGITransport(app=build_app(), raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url=TEST_BASE_URL) as client:
        yield client


HANDLER_CASES = [
    ("/api-error", 409, "conflict", "Already there"),
    ("/http/401", 401, "authentication", "HTTP 401"),
    ("/http/403", 403, "authorization", "HTTP 403"),
    ("/http/404", 404, "not_found", "HTTP 404"),
    ("/store/missing", 404, "not_found", "Session not found"),
    ("/store/forbidden", 403, "authorization", "Not yours"),
    ("/store/conflict", 409, "conflict", "Duplicate"),
    ("/store/other", 500, "server", "Disk full"),
    ("/value-error", 400, "validation", "bad value"),
    ("/boom", 500, "server", "Internal server error"),
    ("/does-not-exist", 404, "not_found", "Not Found"),
]


@pytest.mark.asyncio
@pytest.mark.parametrize("path,status,kind,message", HANDLER_CASES)
async def test_handlers_render_envelope(handler_client, monkeypatch, path, status, kind, message):
    monkeypatch.delenv("DEBUG_TRACEBACK", raising=False)
    response = await handler_client.get(path)
    assert response.status_code == status
    body = response.json()
    assert body["success"] is False
    assert body["kind"] == kind
    assert body["message"] == message
    assert "traceback" not in body


@pytest.mark.asyncio
async def test_api_error_keeps_field_errors(handler_client):
    response = await handler_client.get("/api-error")
    assert response.json()["errors"] == {"email": "taken"}
    assert response.json()["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_http_exception_headers_are_kept(handler_client):
    response = await handler_client.get("/http/401")
    assert response.headers["x-why"] == "test"


@pytest.mark.asyncio
async def test_unauthorized_debug_output_masks_credentials(handler_client, monkeypatch, capsys):
    monkeypatch.setenv("print__token_debug", "1")
    response = await handler_client.get(
        "/http/401",
        headers={"Authorization": "Bearer secret.jwt.value", "Cookie": "token=secret.jwt.value"},
    )
    assert response.status_code == 401

    output = capsys.readouterr().out
    assert "Request headers" in output
    assert "secret.jwt.value" not in output
    assert "'authorization': '[redacted]'" in output
    assert "'cookie': '[redacted]'" in output


@pytest.mark.asyncio
async def test_request_validation_becomes_400(handler_client):
    response = await handler_client.post("/payload", json={"tags": "nope"})
    assert response.status_code == 400
    body = response.json()
    assert body["kind"] == "validation"
    assert body["code"] == "VALIDATION_ERROR"
    assert set(body["errors"]) == {"title", "tags"}
    assert body["message"] == body["errors"]["title"]


@pytest.mark.asyncio
async def test_debug_traceback_mode(handler_client, monkeypatch):
    monkeypatch.setenv("DEBUG_TRACEBACK", "1")
    response = await handler_client.get("/boom")
    assert response.status_code == 500
    body = response.json()
    assert body["kind"] == "server"
    assert body["message"] == "secret internals"
    assert "RuntimeError" in body["traceback"]
