"""
MODULE_DESCRIPTION: My-Sessions Endpoints - Owner Views, Draft Upsert, Publish

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

    GET  /my-sessions             the caller's sessions, newest update first
    GET  /my-sessions/{id}        one of the caller's sessions (404 otherwise)
    POST /my-sessions/save-draft  strict upsert with status forced to draft;
                                  no id creates a new draft (201)
    POST /my-sessions/publish     strict publish of an owned session; the body
                                  may carry field changes applied together
                                  with the status change

Requests for another user's session return 404 on reads (the record is not
revealed) and 403 on writes.
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

from fastapi import APIRouter, Depends

from api.dependencies.auth import get_current_user_id
from api.dependencies.store import get_store
from api.helpers import ok_response
from api.models.requests import PublishRequest, SaveDraftRequest
from api.models.responses import ERROR_RESPONSES, SessionListResponse, SessionResponse
from api.utils.debug import print__sessions_debug
from api.utils.session_payloads import load_owned_session, parse_session_id, strict_changes
from persistence.base import SessionStore
from persistence.records import SESSION_DRAFT, SESSION_PUBLISHED

router = APIRouter(prefix="/my-sessions")


@router.get("", response_model=SessionListResponse, responses={401: ERROR_RESPONSES[401]})
async def list_my_sessions(
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_store),
):
    sessions = await store.find_sessions_by_owner(user_id)
    print__sessions_debug(f"📂 {len(sessions)} sessions owned by {user_id}")
    return ok_response(
        {"sessions": [record.to_dict() for record in sessions]},
        message=None if sessions else "No sessions found",
    )


@router.post("/save-draft", response_model=SessionResponse, responses=ERROR_RESPONSES)
async def save_draft(
    body: SaveDraftRequest,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_store),
):
    provided = body.provided_fields()
    provided["status"] = SESSION_DRAFT

    if body.id is None:
        changes = strict_changes(provided)
        record = await store.create_session(user_id, changes)
        print__sessions_debug(f"🆕 Draft {record.id} created by {user_id}")
        return ok_response(
            {"session": record.to_dict()},
            message="Draft saved successfully",
            status_code=201,
        )

    session_id = parse_session_id(body.id)
    record = await load_owned_session(store, session_id, user_id)
    changes = strict_changes(provided, base=record)
    updated = await store.update_session(session_id, user_id, changes)
    print__sessions_debug(f"💾 Draft {session_id} saved: {sorted(changes)}")
    return ok_response({"session": updated.to_dict()}, message="Draft updated successfully")


@router.post("/publish", response_model=SessionResponse, responses=ERROR_RESPONSES)
async def publish_session(
    body: PublishRequest,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_store),
):
    session_id = parse_session_id(body.id)
    record = await load_owned_session(store, session_id, user_id)

    provided = body.provided_fields()
    provided["status"] = SESSION_PUBLISHED
    changes = strict_changes(provided, base=record)
    updated = await store.update_session(session_id, user_id, changes)
    print__sessions_debug(f"📣 Session {session_id} published by {user_id}")
    return ok_response({"session": updated.to_dict()}, message="Session published successfully")


@router.get("/{session_id}", response_model=SessionResponse, responses=ERROR_RESPONSES)
async def get_my_session(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_store),
):
    session_id = parse_session_id(session_id)
    record = await load_owned_session(store, session_id, user_id, hide_foreign=True)
    return ok_response({"session": record.to_dict()}, message="Session retrieved successfully")
