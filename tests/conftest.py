"""Shared fixtures: environment, in-memory store, app and HTTP client."""

import os
import sys
from pathlib import Path

# Environment must be in place before api.config.settings is imported
os.environ.setdefault("JWT_SECRET", "test-secret-for-wellness-sessions")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

import pytest
import pytest_asyncio

from api.main import create_app
from persistence.memory_store import InMemoryStore
from tests.helpers import app_client, register_user


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def app(store):
    return create_app(store=store, enable_rate_limit=False)


@pytest_asyncio.fixture
async def client(app):
    async with app_client(app) as http_client:
        yield http_client


@pytest_asyncio.fixture
async def alice(client):
    return await register_user(client, email="alice@example.com", name="Alice Smith")


@pytest_asyncio.fixture
async def bob(client):
    return await register_user(client, email="bob@example.com", name="Bob Jones")
