"""
MODULE_DESCRIPTION: PostgreSQL Session Store

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

SessionStore implementation backed by PostgreSQL through psycopg 3 and a
psycopg_pool AsyncConnectionPool. The pool is owned by the store: it is created
in PostgresStore.open() and closed in close(), both driven by the FastAPI
lifespan.

Tables (see persistence.database.table_setup):
    users(id, name, email UNIQUE, password_hash, created_at, updated_at)
    sessions(id, user_id -> users.id, title, tags TEXT[], json_file_url,
             status, created_at, updated_at)

===================================================================================
OWNERSHIP CHECK
===================================================================================

update_session() locks the row (SELECT ... FOR UPDATE) inside a transaction,
verifies the owner and only then issues the UPDATE, so a forbidden or missing
record is never modified.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from psycopg import errors as pg_errors
from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from api.utils.debug import print__store_debug
from persistence.base import SessionStore
from persistence.database.connection import check_connection_health
from persistence.database.pool_manager import close_pool, create_pool
from persistence.database.table_setup import setup_tables
from persistence.errors import ConflictError, ForbiddenError, NotFoundError
from persistence.records import (
    SESSION_DRAFT,
    SESSION_MUTABLE_FIELDS,
    SESSION_PUBLISHED,
    SessionRecord,
    User,
)

_SESSION_COLUMNS = "id, user_id, title, tags, json_file_url, status, created_at, updated_at"


def _user_from_row(row: Dict[str, Any]) -> User:
    return User(
        id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _session_from_row(row: Dict[str, Any]) -> SessionRecord:
    owner = None
    if row.get("owner_id") is not None:
        owner = {
            "id": str(row["owner_id"]),
            "name": row["owner_name"],
            "email": row["owner_email"],
        }
    return SessionRecord(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        title=row["title"],
        tags=list(row["tags"] or []),
        json_file_url=row["json_file_url"] or "",
        status=row["status"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        owner=owner,
    )


def _as_uuid(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class PostgresStore(SessionStore):
    name = "postgres"

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    @classmethod
    async def open(cls) -> "PostgresStore":
        """Create tables if needed, open the pool and return the store."""
        await setup_tables()
        pool = await create_pool()
        print__store_debug("✅ PostgresStore ready")
        return cls(pool)

    # ==========================================================================
    # USERS
    # ==========================================================================

    async def create_user(self, name: str, email: str, password_hash: str) -> User:
        try:
            async with self.pool.connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(
                        """
                        INSERT INTO users (id, name, email, password_hash)
                        VALUES (%s, %s, %s, %s)
                        RETURNING id, name, email, password_hash, created_at, updated_at
                    """,
                        (uuid.uuid4(), name, email.strip().lower(), password_hash),
                    )
                    row = await cur.fetchone()
        except pg_errors.UniqueViolation as exc:
            raise ConflictError(f"User with email {email} already exists") from exc

        print__store_debug(f"👤 Created user {row['id']}")
        return _user_from_row(row)

    async def find_user_by_email(self, email: str) -> Optional[User]:
        async with self.pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    """
                    SELECT id, name, email, password_hash, created_at, updated_at
                    FROM users WHERE email = %s
                """,
                    (email.strip().lower(),),
                )
                row = await cur.fetchone()
        return _user_from_row(row) if row else None

    async def find_user_by_id(self, user_id: str) -> Optional[User]:
        user_uuid = _as_uuid(user_id)
        if user_uuid is None:
            return None
        async with self.pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    """
                    SELECT id, name, email, password_hash, created_at, updated_at
                    FROM users WHERE id = %s
                """,
                    (user_uuid,),
                )
                row = await cur.fetchone()
        return _user_from_row(row) if row else None

    # ==========================================================================
    # SESSIONS
    # ==========================================================================

    async def create_session(self, owner_id: str, draft: Dict[str, Any]) -> SessionRecord:
        async with self.pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"""
                    INSERT INTO sessions (id, user_id, title, tags, json_file_url, status)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING {_SESSION_COLUMNS}
                """,
                    (
                        uuid.uuid4(),
                        uuid.UUID(owner_id),
                        draft.get("title", ""),
                        list(draft.get("tags") or []),
                        draft.get("json_file_url") or "",
                        draft.get("status") or SESSION_DRAFT,
                    ),
                )
                row = await cur.fetchone()
        print__store_debug(f"📝 Created session {row['id']} for owner {owner_id}")
        return _session_from_row(row)

    async def get_session(self, session_id: str) -> Optional[SessionRecord]:
        session_uuid = _as_uuid(session_id)
        if session_uuid is None:
            return None
        async with self.pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"SELECT {_SESSION_COLUMNS} FROM sessions WHERE id = %s",
                    (session_uuid,),
                )
                row = await cur.fetchone()
        return _session_from_row(row) if row else None

    async def update_session(
        self, session_id: str, owner_id: str, partial: Dict[str, Any]
    ) -> SessionRecord:
        session_uuid = _as_uuid(session_id)
        if session_uuid is None:
            raise NotFoundError(f"Session {session_id} not found")

        changes = {k: v for k, v in partial.items() if k in SESSION_MUTABLE_FIELDS}
        if "tags" in changes:
            changes["tags"] = list(changes["tags"] or [])

        assignments = [
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in changes
        ]
        assignments.append(sql.SQL("updated_at = now()"))
        query = sql.SQL("UPDATE sessions SET {} WHERE id = %s RETURNING {}").format(
            sql.SQL(", ").join(assignments), sql.SQL(_SESSION_COLUMNS)
        )

        async with self.pool.connection() as conn:
            async with conn.transaction():
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(
                        "SELECT user_id FROM sessions WHERE id = %s FOR UPDATE",
                        (session_uuid,),
                    )
                    current = await cur.fetchone()
                    if current is None:
                        raise NotFoundError(f"Session {session_id} not found")
                    if str(current["user_id"]) != str(owner_id):
                        raise ForbiddenError(f"Session {session_id} is owned by another user")

                    await cur.execute(query, (*changes.values(), session_uuid))
                    row = await cur.fetchone()

        print__store_debug(f"✏️ Updated session {session_id}: {sorted(changes)}")
        return _session_from_row(row)

    async def find_sessions_by_owner(self, owner_id: str) -> List[SessionRecord]:
        owner_uuid = _as_uuid(owner_id)
        if owner_uuid is None:
            return []
        async with self.pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"""
                    SELECT {_SESSION_COLUMNS} FROM sessions
                    WHERE user_id = %s
                    ORDER BY updated_at DESC
                """,
                    (owner_uuid,),
                )
                rows = await cur.fetchall()
        return [_session_from_row(row) for row in rows]

    async def find_published_sessions(self) -> List[SessionRecord]:
        async with self.pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    """
                    SELECT s.id, s.user_id, s.title, s.tags, s.json_file_url, s.status,
                           s.created_at, s.updated_at,
                           u.id AS owner_id, u.name AS owner_name, u.email AS owner_email
                    FROM sessions s
                    LEFT JOIN users u ON u.id = s.user_id
                    WHERE s.status = %s
                    ORDER BY s.created_at DESC
                """,
                    (SESSION_PUBLISHED,),
                )
                rows = await cur.fetchall()
        return [_session_from_row(row) for row in rows]

    # ==========================================================================
    # LIFECYCLE
    # ==========================================================================

    async def ping(self) -> bool:
        try:
            async with self.pool.connection() as conn:
                return await check_connection_health(conn)
        except Exception as exc:  # pylint: disable=broad-except
            print__store_debug(f"❌ Store ping failed: {exc}")
            return False

    async def close(self) -> None:
        await close_pool(self.pool)
