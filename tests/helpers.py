"""Test helpers and utilities for the test suite."""

import os
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
import jwt
from dotenv import load_dotenv

load_dotenv()

TEST_JWT_SECRET = "test-secret-for-wellness-sessions"
TEST_BASE_URL = "http://testserver"
DEFAULT_PASSWORD = "Secret123"


def print_test_status(message: str):
    """Print test status messages with timestamp."""
    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    print(f"[{timestamp}] {message}")


class BaseTestResults:
    """Track endpoint results of a table-driven test run."""

    def __init__(self, required_endpoints: set = None):
        self.results: List[Dict[str, Any]] = []
        self.errors: List[Dict[str, Any]] = []
        self.required_endpoints = required_endpoints or set()

    def add_result(
        self,
        test_id: str,
        endpoint: str,
        description: str,
        response_data: Dict,
        status_code: int,
        expected_status: int,
    ):
        result = {
            "test_id": test_id,
            "endpoint": endpoint,
            "description": description,
            "response_data": response_data,
            "status_code": status_code,
            "timestamp": datetime.now().isoformat(),
            "success": status_code == expected_status,
        }
        self.results.append(result)
        if not result["success"]:
            self.errors.append(result)
            print(
                f"❌ Test {test_id} failed: expected HTTP {expected_status}, "
                f"got {status_code}: {response_data}"
            )

    def get_summary(self) -> Dict[str, Any]:
        tested_endpoints = {r["endpoint"] for r in self.results}
        return {
            "total_requests": len(self.results),
            "failed_requests": len(self.errors),
            "all_endpoints_tested": self.required_endpoints.issubset(tested_endpoints),
            "missing_endpoints": self.required_endpoints - tested_endpoints,
        }


def create_test_jwt_token(
    user_id: str = "00000000-0000-0000-0000-000000000001",
    secret: Optional[str] = None,
    expires_in: int = 3600,
    issuer: Optional[str] = None,
):
    """Create a token the way api.auth.jwt_auth.issue_token does, with overrides."""
    now = int(time.time())
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + expires_in,
        "iss": issuer or os.environ.get("TOKEN_ISSUER", "wellness-sessions"),
    }
    return jwt.encode(payload, secret or os.environ["JWT_SECRET"], algorithm="HS256")


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@asynccontextmanager
async def app_client(app):
    """In-process httpx client bound to ``app``."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url=TEST_BASE_URL) as client:
        yield client


async def register_user(
    client: httpx.AsyncClient,
    email: str = "ada@example.com",
    name: str = "Ada Lovelace",
    password: str = DEFAULT_PASSWORD,
) -> Dict[str, Any]:
    """Register through the API; returns {"user": ..., "token": ...}."""
    response = await client.post(
        "/auth/register",
        json={
            "name": name,
            "email": email,
            "password": password,
            "confirm_password": password,
        },
    )
    assert response.status_code == 201, response.text
    # Tests authenticate explicitly with headers
    client.cookies.clear()
    body = response.json()
    return {"user": body["user"], "token": body["token"]}


async def create_session(
    client: httpx.AsyncClient, token: str, **fields
) -> Dict[str, Any]:
    payload = {"title": "Morning Breathing", "tags": ["breath"], **fields}
    response = await client.post("/sessions", json=payload, headers=auth_headers(token))
    assert response.status_code == 201, response.text
    return response.json()["session"]
