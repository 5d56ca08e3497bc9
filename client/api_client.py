"""
MODULE_DESCRIPTION: Sessions API Client - Typed Results Over httpx

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Async client for the Wellness Sessions API. Every call returns an
editor.result value:

    Ok(data, message)   2xx responses; ``data`` is the envelope without
                        "success"/"message"
    Err(kind, ...)      error envelopes, non-JSON error bodies (kind from the
                        status code) and transport failures (kind "network")

Nothing is raised for HTTP or network failures; use editor.result.unwrap when
an exception is more convenient.

===================================================================================
AUTHENTICATION
===================================================================================

register/login store the returned token and send it as
"Authorization: Bearer <token>" on later calls; logout forgets it. The
underlying httpx client also keeps the http-only cookie the server sets.

===================================================================================
RETRIES
===================================================================================

Read calls (me, list_published_sessions, list_my_sessions, get_my_session)
retry network and server failures with linear backoff (client.retry). Writes
are sent exactly once.
"""

from typing import Any, Dict, Optional

import httpx

from api.utils.debug import print__client_debug
from client.retry import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_DELAY, retry_read
from editor.result import Err, ErrorKind, Ok, Result, from_response

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 10.0


class SessionsApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        self.token = token
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay

    async def __aenter__(self) -> "SessionsApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ==========================================================================
    # TRANSPORT
    # ==========================================================================

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    async def _request(self, method: str, path: str, json: Any = None) -> Result:
        try:
            response = await self._http.request(method, path, json=json, headers=self._headers())
        except httpx.HTTPError as exc:
            print__client_debug(f"🌐 {method} {path} failed: {type(exc).__name__}: {exc}")
            return Err(ErrorKind.NETWORK)

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        result = from_response(response.status_code, payload)
        if isinstance(result, Err):
            print__client_debug(
                f"❌ {method} {path} -> {response.status_code} {result.kind.value}: {result.message}"
            )
        return result

    async def _read(self, path: str) -> Result:
        return await retry_read(
            lambda: self._request("GET", path),
            attempts=self.retry_attempts,
            delay=self.retry_delay,
        )

    def _remember_token(self, result: Result) -> Result:
        if isinstance(result, Ok) and result.data.get("token"):
            self.token = result.data["token"]
        return result

    # ==========================================================================
    # AUTH
    # ==========================================================================

    async def register(
        self, name: str, email: str, password: str, confirm_password: str
    ) -> Result:
        result = await self._request(
            "POST",
            "/auth/register",
            {
                "name": name,
                "email": email,
                "password": password,
                "confirm_password": confirm_password,
            },
        )
        return self._remember_token(result)

    async def login(self, email: str, password: str) -> Result:
        result = await self._request("POST", "/auth/login", {"email": email, "password": password})
        return self._remember_token(result)

    async def logout(self) -> Result:
        result = await self._request("POST", "/auth/logout")
        self.token = None
        self._http.cookies.clear()
        return result

    async def me(self) -> Result:
        return await self._read("/auth/me")

    # ==========================================================================
    # SESSIONS
    # ==========================================================================

    async def list_published_sessions(self) -> Result:
        return await self._read("/sessions")

    async def create_session(self, payload: Dict[str, Any]) -> Result:
        return await self._request("POST", "/sessions", payload)

    async def update_session(self, session_id: str, payload: Dict[str, Any]) -> Result:
        return await self._request("PUT", f"/sessions/{session_id}", payload)

    async def auto_save(self, session_id: str, payload: Dict[str, Any]) -> Result:
        return await self._request("POST", f"/sessions/{session_id}/auto-save", payload)

    async def list_my_sessions(self) -> Result:
        return await self._read("/my-sessions")

    async def get_my_session(self, session_id: str) -> Result:
        return await self._read(f"/my-sessions/{session_id}")

    async def save_draft(
        self, payload: Dict[str, Any], session_id: Optional[str] = None
    ) -> Result:
        body = dict(payload)
        if session_id:
            body["id"] = session_id
        return await self._request("POST", "/my-sessions/save-draft", body)

    async def publish(
        self, session_id: str, payload: Optional[Dict[str, Any]] = None
    ) -> Result:
        body = dict(payload or {})
        body["id"] = session_id
        return await self._request("POST", "/my-sessions/publish", body)
