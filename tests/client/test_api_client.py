"""
Tests for SessionsApiClient: envelope parsing, read retries, network failures
and an end-to-end run against the in-process API.
"""

import httpx
import pytest

from client import SessionsApiClient
from client.retry import is_retryable, retry_read
from editor.orchestrator import SessionEditor
from editor.result import Err, ErrorKind, Ok, unwrap
from tests.helpers import DEFAULT_PASSWORD, TEST_BASE_URL


class ScriptedHandler:
    """MockTransport handler replaying (status, json) pairs and recording requests."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, payload = self.responses[min(len(self.requests), len(self.responses)) - 1]
        if isinstance(payload, Exception):
            raise payload
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)


def make_client(handler, **kwargs) -> SessionsApiClient:
    return SessionsApiClient(
        base_url=TEST_BASE_URL,
        transport=httpx.MockTransport(handler),
        retry_delay=0,
        **kwargs,
    )


SERVER_ERROR = (500, {"success": False, "kind": "server", "message": "Internal server error"})
SESSIONS_OK = (200, {"success": True, "sessions": []})


@pytest.mark.asyncio
async def test_read_retries_server_errors_until_success():
    handler = ScriptedHandler(SERVER_ERROR, SERVER_ERROR, SESSIONS_OK)
    async with make_client(handler, token="t.o.k") as api:
        result = await api.list_published_sessions()

    assert isinstance(result, Ok)
    assert result.data == {"sessions": []}
    assert len(handler.requests) == 3
    assert handler.requests[0].headers["authorization"] == "Bearer t.o.k"


@pytest.mark.asyncio
async def test_read_gives_up_after_attempts_and_returns_last_error():
    handler = ScriptedHandler(SERVER_ERROR)
    async with make_client(handler, retry_attempts=2) as api:
        result = await api.list_my_sessions()

    assert isinstance(result, Err)
    assert result.kind is ErrorKind.SERVER
    assert len(handler.requests) == 2


NON_RETRYABLE_CASES = [
    (404, {"success": False, "kind": "not_found", "message": "Session not found"}, ErrorKind.NOT_FOUND),
    (401, {"success": False, "kind": "authentication", "message": "Authentication required"}, ErrorKind.AUTHENTICATION),
    (400, {"success": False, "kind": "validation", "message": "Invalid session ID"}, ErrorKind.VALIDATION),
]


@pytest.mark.asyncio
@pytest.mark.parametrize("status,payload,kind", NON_RETRYABLE_CASES)
async def test_client_errors_are_not_retried(status, payload, kind):
    handler = ScriptedHandler((status, payload))
    async with make_client(handler) as api:
        result = await api.get_my_session("abc")

    assert result.kind is kind
    assert result.message == payload["message"]
    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_writes_are_sent_once():
    handler = ScriptedHandler(SERVER_ERROR)
    async with make_client(handler) as api:
        result = await api.create_session({"title": "Evening Calm"})

    assert result.kind is ErrorKind.SERVER
    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_network_failures_become_network_errors():
    handler = ScriptedHandler((0, httpx.ConnectError("connection refused")))
    async with make_client(handler) as api:
        write = await api.auto_save("abc", {"title": "Evening Calm"})
        read = await api.me()

    assert write.kind is ErrorKind.NETWORK
    assert write.status == 0
    assert read.kind is ErrorKind.NETWORK
    # One write plus three read attempts
    assert len(handler.requests) == 4


@pytest.mark.asyncio
async def test_non_json_error_body_uses_status():
    handler = ScriptedHandler((502, "<html>Bad gateway</html>"))
    async with make_client(handler, retry_attempts=1) as api:
        result = await api.me()

    assert result.kind is ErrorKind.SERVER
    assert result.status == 502


@pytest.mark.asyncio
async def test_request_bodies():
    ok = (200, {"success": True, "session": {"id": "s1"}})
    handler = ScriptedHandler(ok)
    async with make_client(handler) as api:
        await api.save_draft({"title": "Evening Calm"})
        await api.save_draft({"title": "Evening Calm"}, session_id="s1")
        await api.publish("s1")

    paths = [r.url.path for r in handler.requests]
    bodies = [r.read() for r in handler.requests]
    assert paths == ["/my-sessions/save-draft", "/my-sessions/save-draft", "/my-sessions/publish"]
    assert b'"id"' not in bodies[0]
    assert b'"id":"s1"' in bodies[1].replace(b" ", b"")
    assert b'"id":"s1"' in bodies[2].replace(b" ", b"")


@pytest.mark.asyncio
async def test_retry_read_helper():
    calls = []

    async def flaky():
        calls.append(1)
        return Err(ErrorKind.NETWORK) if len(calls) < 2 else Ok({"n": len(calls)})

    result = await retry_read(flaky, attempts=3, delay=0)
    assert result.data == {"n": 2}
    assert is_retryable(Err(ErrorKind.SERVER))
    assert not is_retryable(Err(ErrorKind.CONFLICT))
    assert not is_retryable(Ok())


@pytest.mark.asyncio
async def test_end_to_end_against_app(app):
    transport = httpx.ASGITransport(app=app)
    async with SessionsApiClient(base_url=TEST_BASE_URL, transport=transport) as api:
        registered = await api.register("Ada Lovelace", "ada@example.com", DEFAULT_PASSWORD, DEFAULT_PASSWORD)
        assert isinstance(registered, Ok)
        assert api.token == registered.data["token"]
        assert registered.message == "User registered successfully"

        duplicate = await api.register("Ada Lovelace", "ada@example.com", DEFAULT_PASSWORD, DEFAULT_PASSWORD)
        assert duplicate.kind is ErrorKind.CONFLICT
        assert duplicate.field_errors == {"email": "User with this email already exists"}

        me = unwrap(await api.me())
        assert me["user"]["email"] == "ada@example.com"

        # Editor driven through the client: create, edit, publish
        editor = SessionEditor.for_client(api, autosave_delay=0.01, validation_debounce=0.01)
        editor.handle_input_change("title", "Evening Calm")
        editor.handle_tags_change("calm, sleep")
        assert await editor.save_draft() is True
        session_id = editor.session_id

        editor.handle_input_change("title", "Evening Calm Extended")
        assert await editor.handle_visibility_change("hidden") is True
        assert await editor.publish() is True
        editor.teardown()

        stored = unwrap(await api.get_my_session(session_id))["session"]
        assert stored["title"] == "Evening Calm Extended"
        assert stored["tags"] == ["calm", "sleep"]
        assert stored["status"] == "published"

        published = unwrap(await api.list_published_sessions())["sessions"]
        assert [s["id"] for s in published] == [session_id]

        logout = await api.logout()
        assert isinstance(logout, Ok)
        assert api.token is None
        assert (await api.me()).kind is ErrorKind.AUTHENTICATION
