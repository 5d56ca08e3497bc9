"""Store factory used by the FastAPI lifespan."""

from __future__ import annotations

from typing import Optional

from api.utils.debug import print__store_debug
from persistence.base import SessionStore
from persistence.config import (
    INMEMORY_FALLBACK_ENABLED,
    STORE_BACKEND_MEMORY,
    check_postgres_env_vars,
    get_store_backend,
)
from persistence.memory_store import InMemoryStore


async def create_store(backend: Optional[str] = None) -> SessionStore:
    """Build the configured store.

    With the postgres backend, a missing configuration or an unreachable
    database falls back to InMemoryStore when INMEMORY_FALLBACK_ENABLED is set;
    otherwise the error propagates and startup fails.
    """
    backend = backend or get_store_backend()
    print__store_debug(f"🏗️ Creating store for backend: {backend}")

    if backend == STORE_BACKEND_MEMORY:
        return InMemoryStore()

    try:
        if not check_postgres_env_vars():
            raise RuntimeError("Missing required PostgreSQL environment variables")

        # Imported lazily so the memory backend never touches psycopg
        from persistence.postgres_store import PostgresStore

        return await PostgresStore.open()
    except Exception as exc:  # pylint: disable=broad-except
        if not INMEMORY_FALLBACK_ENABLED:
            raise
        print__store_debug(
            f"⚠️ PostgreSQL store unavailable ({type(exc).__name__}: {exc}), "
            "falling back to InMemoryStore"
        )
        return InMemoryStore()
