"""In-memory SessionStore used for tests, local development and as the
fallback when PostgreSQL is unavailable at startup."""

import asyncio
import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from api.utils.debug import print__store_debug
from persistence.base import SessionStore
from persistence.errors import ConflictError, ForbiddenError, NotFoundError
from persistence.records import (
    SESSION_DRAFT,
    SESSION_MUTABLE_FIELDS,
    SESSION_PUBLISHED,
    SessionRecord,
    User,
)


class InMemoryStore(SessionStore):
    name = "memory"

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._sessions: Dict[str, SessionRecord] = {}
        self._lock = asyncio.Lock()
        self._last_timestamp: Optional[datetime] = None

    def _now(self) -> datetime:
        # Strictly increasing so "newest first" ordering is stable
        now = datetime.now(timezone.utc)
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    # ==========================================================================
    # USERS
    # ==========================================================================

    async def create_user(self, name: str, email: str, password_hash: str) -> User:
        async with self._lock:
            normalized = email.strip().lower()
            if any(user.email == normalized for user in self._users.values()):
                raise ConflictError(f"User with email {normalized} already exists")
            now = self._now()
            user = User(
                id=str(uuid.uuid4()),
                name=name,
                email=normalized,
                password_hash=password_hash,
                created_at=now,
                updated_at=now,
            )
            self._users[user.id] = user
            print__store_debug(f"👤 Created user {user.id}")
            return replace(user)

    async def find_user_by_email(self, email: str) -> Optional[User]:
        normalized = email.strip().lower()
        for user in self._users.values():
            if user.email == normalized:
                return replace(user)
        return None

    async def find_user_by_id(self, user_id: str) -> Optional[User]:
        user = self._users.get(user_id)
        return replace(user) if user else None

    # ==========================================================================
    # SESSIONS
    # ==========================================================================

    async def create_session(self, owner_id: str, draft: Dict[str, Any]) -> SessionRecord:
        async with self._lock:
            now = self._now()
            record = SessionRecord(
                id=str(uuid.uuid4()),
                user_id=owner_id,
                title=draft.get("title", ""),
                tags=list(draft.get("tags") or []),
                json_file_url=draft.get("json_file_url") or "",
                status=draft.get("status") or SESSION_DRAFT,
                created_at=now,
                updated_at=now,
            )
            self._sessions[record.id] = record
            print__store_debug(f"📝 Created session {record.id} for owner {owner_id}")
            return replace(record, tags=list(record.tags))

    async def get_session(self, session_id: str) -> Optional[SessionRecord]:
        record = self._sessions.get(session_id)
        return replace(record, tags=list(record.tags)) if record else None

    async def update_session(
        self, session_id: str, owner_id: str, partial: Dict[str, Any]
    ) -> SessionRecord:
        async with self._lock:
            record = self._sessions.get(session_id)
            if record is None:
                raise NotFoundError(f"Session {session_id} not found")
            if record.user_id != owner_id:
                raise ForbiddenError(f"Session {session_id} is owned by another user")

            changes = {k: v for k, v in partial.items() if k in SESSION_MUTABLE_FIELDS}
            if "tags" in changes:
                changes["tags"] = list(changes["tags"] or [])
            updated = replace(record, **changes, updated_at=self._now())
            self._sessions[session_id] = updated
            print__store_debug(f"✏️ Updated session {session_id}: {sorted(changes)}")
            return replace(updated, tags=list(updated.tags))

    async def find_sessions_by_owner(self, owner_id: str) -> List[SessionRecord]:
        owned = [r for r in self._sessions.values() if r.user_id == owner_id]
        owned.sort(key=lambda r: r.updated_at, reverse=True)
        return [replace(r, tags=list(r.tags)) for r in owned]

    async def find_published_sessions(self) -> List[SessionRecord]:
        published = [r for r in self._sessions.values() if r.status == SESSION_PUBLISHED]
        published.sort(key=lambda r: r.created_at, reverse=True)
        results = []
        for record in published:
            owner = self._users.get(record.user_id)
            owner_view = {"id": owner.id, "name": owner.name, "email": owner.email} if owner else None
            results.append(replace(record, tags=list(record.tags), owner=owner_view))
        return results
