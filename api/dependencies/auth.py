"""
MODULE_DESCRIPTION: Authentication Dependencies - Request Token Extraction

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

FastAPI dependencies that resolve the caller's identity. A token is looked up
in the Authorization header ("Bearer <token>") first and then in the http-only
auth cookie set by /auth/login. Verification is delegated to
api.auth.jwt_auth.

    verify_request_token(request)  -> Optional[str]  (never raises)
    get_current_user_id(request)   -> str            (401 when unauthenticated)
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

from typing import Optional

from fastapi import HTTPException, Request

from api.auth.jwt_auth import verify_token
from api.config.settings import AUTH_COOKIE_NAME
from api.utils.debug import print__token_debug


def extract_request_token(request: Request) -> Optional[str]:
    """Return the raw token from the Authorization header or the auth cookie."""
    authorization = request.headers.get("authorization")
    if authorization:
        auth_parts = authorization.split(" ", 1)
        if len(auth_parts) == 2 and auth_parts[0].lower() == "bearer":
            token = auth_parts[1].strip()
            if token:
                print__token_debug(
                    f"🔍 AUTH TOKEN: Bearer token extracted (length: {len(token)})"
                )
                return token
        print__token_debug("❌ AUTH ERROR: Malformed authorization header ignored")

    token = request.cookies.get(AUTH_COOKIE_NAME)
    if token:
        print__token_debug(f"🔍 AUTH TOKEN: Cookie token extracted (length: {len(token)})")
        return token
    return None


def verify_request_token(request: Request) -> Optional[str]:
    """Return the authenticated user id, or None when no valid token is present."""
    return verify_token(extract_request_token(request))


def get_current_user_id(request: Request) -> str:
    user_id = verify_request_token(request)
    if user_id is None:
        print__token_debug("❌ AUTH TRACE: No valid token on request - raising 401")
        raise HTTPException(status_code=401, detail="Authentication required")
    return user_id
