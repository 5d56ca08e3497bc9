"""
MODULE_DESCRIPTION: Session Payload Helpers - Strict and Lenient Write Rules

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Shared by the /sessions and /my-sessions routers:

    parse_session_id(raw)                      -> canonical UUID string or 400
    load_owned_session(store, id, user_id)     -> record, 404 / 403
    strict_changes(provided, base=None)        -> sanitized fields or 400
    lenient_changes(provided, record)          -> auto-save fields (never 400)

Strict writes sanitize the provided fields, merge them over the stored record
(when there is one) and validate the merged result with SESSION_SCHEMA, so an
update cannot leave a record that would fail creation. Only the provided
fields are written back.

Lenient writes (auto-save) keep the stored title when the new one is blank,
drop blank tags, store the URL trimmed without URL validation and never touch
the status.
"""

import uuid
from typing import Any, Dict, List, Optional

from api.utils.debug import print__validation_debug
from editor.result import ApiError, ErrorKind
from editor.validation import SESSION_SCHEMA, sanitize_input, validate_form
from persistence.base import SessionStore
from persistence.errors import ForbiddenError, NotFoundError
from persistence.records import SessionRecord


def parse_session_id(raw: Optional[str]) -> str:
    if not raw or not str(raw).strip():
        raise ApiError.of(
            ErrorKind.VALIDATION, "Session ID is required", {"id": "Session ID is required"}
        )
    try:
        return str(uuid.UUID(str(raw).strip()))
    except ValueError as exc:
        raise ApiError.of(
            ErrorKind.VALIDATION, "Invalid session ID", {"id": "Invalid session ID"}
        ) from exc


async def load_owned_session(
    store: SessionStore, session_id: str, user_id: str, hide_foreign: bool = False
) -> SessionRecord:
    """Fetch a session the caller owns.

    With ``hide_foreign`` a session owned by someone else is reported as
    missing instead of forbidden.
    """
    record = await store.get_session(session_id)
    if record is None:
        raise NotFoundError("Session not found")
    if record.user_id != user_id:
        if hide_foreign:
            raise NotFoundError("Session not found")
        raise ForbiddenError("You can only modify your own sessions")
    return record


def clean_tags(raw: Any) -> List[str]:
    """Trim and sanitize tags, dropping blank ones.

    Unlike editor.validation.parse_tags this keeps every tag, so the
    MAX_TAGS rule can still reject an oversized list.
    """
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    tags = [sanitize_input(part) for part in parts if isinstance(part, str)]
    return [tag for tag in tags if tag]


def _sanitize_provided(provided: Dict[str, Any]) -> Dict[str, Any]:
    changes: Dict[str, Any] = {}
    if "title" in provided:
        changes["title"] = sanitize_input(provided["title"])
    if "tags" in provided:
        changes["tags"] = clean_tags(provided["tags"])
    if "json_file_url" in provided:
        url = provided["json_file_url"]
        changes["json_file_url"] = url.strip() if isinstance(url, str) else ""
    if "status" in provided and provided["status"] is not None:
        changes["status"] = provided["status"]
    return changes


def strict_changes(
    provided: Dict[str, Any], base: Optional[SessionRecord] = None
) -> Dict[str, Any]:
    """Sanitize and validate a strict write; raise a 400 ApiError on failure."""
    changes = _sanitize_provided(provided)

    merged: Dict[str, Any] = {"title": "", "tags": [], "json_file_url": "", "status": None}
    if base is not None:
        merged.update(
            {
                "title": base.title,
                "tags": list(base.tags),
                "json_file_url": base.json_file_url,
                "status": base.status,
            }
        )
    merged.update(changes)

    result = validate_form(merged, SESSION_SCHEMA)
    if not result.is_valid:
        print__validation_debug(f"❌ Session payload rejected: {result.errors}")
        raise ApiError.of(ErrorKind.VALIDATION, result.first_error(), result.errors)
    return changes


def lenient_changes(provided: Dict[str, Any], record: SessionRecord) -> Dict[str, Any]:
    """Auto-save rules: never rejects, never changes status."""
    changes: Dict[str, Any] = {}
    if "title" in provided:
        title = sanitize_input(provided["title"])
        changes["title"] = title or record.title
    if "tags" in provided:
        # null keeps the stored tags; an explicit [] clears them
        tags = provided["tags"]
        changes["tags"] = list(record.tags) if tags is None else clean_tags(tags)
    if "json_file_url" in provided:
        url = provided["json_file_url"]
        changes["json_file_url"] = url.strip() if isinstance(url, str) else ""
    return changes
