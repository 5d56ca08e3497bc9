"""Table and index creation for the PostgreSQL session store."""

from __future__ import annotations

from api.utils.debug import print__store_debug
from persistence.database.connection import get_direct_connection


async def setup_tables():
    """Create the users and sessions tables plus their indexes if missing.

    Uses a dedicated autocommit connection so each DDL statement stands alone.
    """
    print__store_debug("TABLE SETUP START: Creating users/sessions tables")

    try:
        async with get_direct_connection() as conn:
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id UUID PRIMARY KEY,
                    name VARCHAR(50) NOT NULL,
                    email VARCHAR(254) NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
                );
            """
            )
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS sessions (
                    id UUID PRIMARY KEY,
                    user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                    title VARCHAR(100) NOT NULL,
                    tags TEXT[] NOT NULL DEFAULT '{}',
                    json_file_url TEXT NOT NULL DEFAULT '',
                    status VARCHAR(16) NOT NULL DEFAULT 'draft'
                        CHECK (status IN ('draft', 'published')),
                    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
                );
            """
            )

            print__store_debug("TABLE SETUP: Creating indexes")
            await conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_sessions_user_updated
                ON sessions(user_id, updated_at DESC);
            """
            )
            await conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_sessions_status_created
                ON sessions(status, created_at DESC);
            """
            )
    except Exception as setup_error:
        print__store_debug(f"TABLE SETUP ERROR: Failed to create tables: {setup_error}")
        raise

    print__store_debug("TABLE SETUP SUCCESS: users/sessions tables ready")
