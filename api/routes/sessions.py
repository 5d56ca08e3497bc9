"""
MODULE_DESCRIPTION: Session Endpoints - Published Listing, Create, Update, Auto-Save

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

    GET  /sessions                 published sessions, newest first, with owner
    POST /sessions                 strict create (status defaults to draft), 201
    PUT  /sessions/{id}            strict update of the provided fields
    POST /sessions/{id}/auto-save  lenient partial update, status untouched

All endpoints require authentication. Ownership is checked before any write:
a missing session is 404, a session owned by someone else is 403, and neither
case mutates anything. Ids that are not UUIDs are rejected with 400.
"""

# CRITICAL: Set Windows event loop policy FIRST, before any other imports
# This must be the very first thing that happens to fix psycopg compatibility
import sys

if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from api.dependencies.auth import get_current_user_id
from api.dependencies.store import get_store
from api.helpers import ok_response
from api.models.requests import SessionPayload
from api.models.responses import (
    ERROR_RESPONSES,
    AutoSaveResponse,
    SessionListResponse,
    SessionResponse,
)
from api.utils.debug import print__sessions_debug
from api.utils.session_payloads import (
    lenient_changes,
    load_owned_session,
    parse_session_id,
    strict_changes,
)
from persistence.base import SessionStore
from persistence.records import SESSION_DRAFT

router = APIRouter()


@router.get(
    "/sessions",
    response_model=SessionListResponse,
    responses={401: ERROR_RESPONSES[401]},
)
async def list_published_sessions(
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_store),
):
    sessions = await store.find_published_sessions()
    print__sessions_debug(f"📚 {len(sessions)} published sessions for {user_id}")
    return ok_response(
        {"sessions": [record.to_dict() for record in sessions]},
        message=None if sessions else "No published sessions found",
    )


@router.post(
    "/sessions",
    status_code=201,
    response_model=SessionResponse,
    responses={400: ERROR_RESPONSES[400], 401: ERROR_RESPONSES[401]},
)
async def create_session(
    body: SessionPayload,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_store),
):
    changes = strict_changes(body.provided_fields())
    changes.setdefault("status", SESSION_DRAFT)
    record = await store.create_session(user_id, changes)
    print__sessions_debug(f"🆕 Session {record.id} created by {user_id}")
    return ok_response(
        {"session": record.to_dict()},
        message="Session created successfully",
        status_code=201,
    )


@router.put(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    responses=ERROR_RESPONSES,
)
async def update_session(
    session_id: str,
    body: SessionPayload,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_store),
):
    session_id = parse_session_id(session_id)
    record = await load_owned_session(store, session_id, user_id)
    changes = strict_changes(body.provided_fields(), base=record)
    updated = await store.update_session(session_id, user_id, changes)
    print__sessions_debug(f"✏️ Session {session_id} updated: {sorted(changes)}")
    return ok_response({"session": updated.to_dict()}, message="Session updated successfully")


@router.post(
    "/sessions/{session_id}/auto-save",
    response_model=AutoSaveResponse,
    responses=ERROR_RESPONSES,
)
async def auto_save_session(
    session_id: str,
    body: SessionPayload,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_store),
):
    session_id = parse_session_id(session_id)
    record = await load_owned_session(store, session_id, user_id)
    changes = lenient_changes(body.provided_fields(), record)
    updated = await store.update_session(session_id, user_id, changes)
    print__sessions_debug(f"💾 Session {session_id} auto-saved: {sorted(changes)}")
    return ok_response(
        {
            "session": updated.to_dict(),
            "lastSaved": datetime.now(timezone.utc).isoformat(),
        },
        message="Session auto-saved successfully",
    )
