"""Record types returned by the session stores."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

SESSION_DRAFT = "draft"
SESSION_PUBLISHED = "published"

# Columns a caller may change on a session record
SESSION_MUTABLE_FIELDS = ("title", "tags", "json_file_url", "status")


@dataclass
class User:
    id: str
    name: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime

    def to_public(self) -> Dict[str, Any]:
        """Serializable view without the password hash."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass
class SessionRecord:
    id: str
    user_id: str
    title: str
    tags: List[str] = field(default_factory=list)
    json_file_url: str = ""
    status: str = SESSION_DRAFT
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Populated by published listings
    owner: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "tags": list(self.tags),
            "json_file_url": self.json_file_url,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if self.owner is not None:
            data["owner"] = dict(self.owner)
        return data
