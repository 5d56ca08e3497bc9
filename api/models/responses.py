# Response models for the Wellness Sessions API

# CRITICAL: Set Windows event loop policy FIRST, before any other imports
# This must be the very first thing that happens to fix psycopg compatibility
import sys

if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# Standard imports
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ==============================================================================
# RESPONSE MODELS - PYDANTIC SCHEMAS FOR API DOCUMENTATION
# ==============================================================================
# Routes return JSONResponse envelopes; these models describe them in OpenAPI.


class UserOut(BaseModel):
    """Public view of a user (no password hash)."""

    id: str = Field(description="User id", examples=["8f14e45f-ceea-467f-a0e6-1c0b3a4f2d11"])
    name: str = Field(examples=["Ada Lovelace"])
    email: str = Field(examples=["ada@example.com"])
    created_at: datetime
    updated_at: datetime


class OwnerOut(BaseModel):
    id: str
    name: str
    email: str


class SessionOut(BaseModel):
    """A wellness session record."""

    id: str
    user_id: str
    title: str = Field(examples=["Morning Breathing"])
    tags: List[str] = Field(default_factory=list, examples=[["breath", "morning"]])
    json_file_url: str = Field("", examples=["https://cdn.example.com/breathing.json"])
    status: str = Field(description="draft or published", examples=["draft"])
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    owner: Optional[OwnerOut] = Field(
        None, description="Author details, present on published listings"
    )


class SuccessEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None


class ErrorEnvelope(BaseModel):
    """Failure envelope shared by every endpoint."""

    success: bool = False
    kind: str = Field(examples=["validation"])
    code: str = Field(examples=["VALIDATION_ERROR"])
    message: str = Field(examples=["Title is required"])
    errors: Optional[Dict[str, str]] = Field(None, examples=[{"title": "Title is required"}])


class AuthResponse(SuccessEnvelope):
    user: UserOut
    token: str


class UserResponse(SuccessEnvelope):
    user: UserOut


class SessionResponse(SuccessEnvelope):
    session: SessionOut


class SessionListResponse(SuccessEnvelope):
    sessions: List[SessionOut]


class AutoSaveResponse(SuccessEnvelope):
    session: SessionOut
    lastSaved: datetime = Field(description="Server time the auto-save was applied")


# Shared error responses for route declarations
ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope, "description": "Validation error"},
    401: {"model": ErrorEnvelope, "description": "Authentication required"},
    403: {"model": ErrorEnvelope, "description": "Not the owner of the session"},
    404: {"model": ErrorEnvelope, "description": "Session not found"},
}
