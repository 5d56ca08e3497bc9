"""
Tests for store backend selection and the in-memory fallback.
"""

import pytest

import persistence.factory as factory
from persistence.config import check_postgres_env_vars, get_db_config, get_store_backend
from persistence.memory_store import InMemoryStore

POSTGRES_VARS = ("host", "port", "dbname", "user", "password")


@pytest.fixture
def no_postgres_env(monkeypatch):
    for var in POSTGRES_VARS:
        monkeypatch.delenv(var, raising=False)


BACKEND_CASES = [
    ("memory", "memory"),
    (" Postgres ", "postgres"),
]


@pytest.mark.parametrize("raw,expected", BACKEND_CASES)
def test_get_store_backend(monkeypatch, raw, expected):
    monkeypatch.setenv("STORE_BACKEND", raw)
    assert get_store_backend() == expected


def test_unknown_backend_is_rejected(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "mongodb")
    with pytest.raises(ValueError):
        get_store_backend()


def test_postgres_env_check(monkeypatch, no_postgres_env):
    assert check_postgres_env_vars() is False
    for var in POSTGRES_VARS:
        monkeypatch.setenv(var, "5432" if var == "port" else "value")
    assert check_postgres_env_vars() is True

    config = get_db_config()
    assert config["port"] == 5432
    assert config["sslmode"] == "prefer"


@pytest.mark.asyncio
async def test_memory_backend():
    store = await factory.create_store("memory")
    assert isinstance(store, InMemoryStore)


@pytest.mark.asyncio
async def test_postgres_without_config_falls_back(monkeypatch, no_postgres_env):
    monkeypatch.setattr(factory, "INMEMORY_FALLBACK_ENABLED", True)
    store = await factory.create_store("postgres")
    assert isinstance(store, InMemoryStore)


@pytest.mark.asyncio
async def test_postgres_without_config_fails_when_fallback_disabled(
    monkeypatch, no_postgres_env
):
    monkeypatch.setattr(factory, "INMEMORY_FALLBACK_ENABLED", False)
    with pytest.raises(RuntimeError):
        await factory.create_store("postgres")
