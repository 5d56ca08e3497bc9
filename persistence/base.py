"""
MODULE_DESCRIPTION: Session Store Contract

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

SessionStore is the persistence collaborator consumed by the API route handlers.
One store instance is created per application (in the FastAPI lifespan or by the
caller of create_app) and handed to handlers through app.state; there is no
module-level store singleton.

Implementations:
    - persistence.memory_store.InMemoryStore   (default, tests, local development)
    - persistence.postgres_store.PostgresStore (psycopg + psycopg_pool)

===================================================================================
OWNERSHIP
===================================================================================

update_session() performs owner-match verification itself: it raises
NotFoundError for unknown ids and ForbiddenError when owner_id differs from the
record's user_id, and in both cases leaves the record untouched.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from persistence.records import SessionRecord, User


class SessionStore(ABC):
    """Abstract persistence collaborator for users and session records."""

    name = "abstract"

    # ==========================================================================
    # USERS
    # ==========================================================================

    @abstractmethod
    async def create_user(self, name: str, email: str, password_hash: str) -> User:
        """Create a user; raises ConflictError when the email is taken."""

    @abstractmethod
    async def find_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_user_by_id(self, user_id: str) -> Optional[User]:
        ...

    # ==========================================================================
    # SESSIONS
    # ==========================================================================

    @abstractmethod
    async def create_session(self, owner_id: str, draft: Dict[str, Any]) -> SessionRecord:
        """Insert a new session owned by ``owner_id``."""

    @abstractmethod
    async def get_session(self, session_id: str) -> Optional[SessionRecord]:
        ...

    @abstractmethod
    async def update_session(
        self, session_id: str, owner_id: str, partial: Dict[str, Any]
    ) -> SessionRecord:
        """Apply ``partial`` to an owned session and bump updated_at.

        Raises:
            NotFoundError: no session with this id
            ForbiddenError: the session belongs to another user
        """

    @abstractmethod
    async def find_sessions_by_owner(self, owner_id: str) -> List[SessionRecord]:
        """All sessions of one owner, most recently updated first."""

    @abstractmethod
    async def find_published_sessions(self) -> List[SessionRecord]:
        """Published sessions with owner name/email, newest first."""

    # ==========================================================================
    # LIFECYCLE
    # ==========================================================================

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None
