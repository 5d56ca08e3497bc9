"""
MODULE_DESCRIPTION: Request Models - Pydantic Schemas for Incoming Payloads

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Pydantic models for the bodies accepted by the Wellness Sessions API.

These models only establish the SHAPE of a payload (which keys exist and their
JSON types). Field rules (lengths, patterns, password strength, URL format) are
applied by the routes with the shared schemas from editor.validation, so the
server reports exactly the messages the form controller shows client-side.

Aliases accept the field spellings used by browser clients:
    confirmPassword -> confirm_password
    jsonFileUrl     -> json_file_url
    _id             -> id
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

# Standard imports
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ==============================================================================
# AUTH REQUEST MODELS
# ==============================================================================


class RegisterRequest(BaseModel):
    """Request model for POST /auth/register."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Ada Lovelace",
                    "email": "ada@example.com",
                    "password": "Secret123",
                    "confirm_password": "Secret123",
                }
            ]
        },
    )

    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = Field("", alias="confirmPassword")

    def form_data(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "confirm_password": self.confirm_password,
        }


class LoginRequest(BaseModel):
    """Request model for POST /auth/login."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [{"email": "ada@example.com", "password": "Secret123"}]
        }
    )

    email: str = ""
    password: str = ""

    def form_data(self) -> Dict[str, Any]:
        return {"email": self.email, "password": self.password}


# ==============================================================================
# SESSION REQUEST MODELS
# ==============================================================================


class SessionPayload(BaseModel):
    """Session fields; every field is optional and only provided ones count.

    ``tags`` may be a list of strings or a comma-separated string.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "title": "Morning Breathing",
                    "tags": ["breath", "morning"],
                    "json_file_url": "https://cdn.example.com/sessions/breathing.json",
                    "status": "draft",
                }
            ]
        },
    )

    title: Optional[str] = None
    tags: Optional[Union[List[str], str]] = None
    json_file_url: Optional[str] = Field(None, alias="jsonFileUrl")
    status: Optional[str] = None

    def provided_fields(self) -> Dict[str, Any]:
        """Fields the client actually sent (``id`` excluded)."""
        return self.model_dump(exclude_unset=True, exclude={"id"})


class SaveDraftRequest(SessionPayload):
    """Upsert body for POST /my-sessions/save-draft; no ``id`` creates a draft."""

    id: Optional[str] = Field(None, alias="_id")


class PublishRequest(SessionPayload):
    """Body for POST /my-sessions/publish; ``id`` is required by the route."""

    id: Optional[str] = Field(None, alias="_id")
