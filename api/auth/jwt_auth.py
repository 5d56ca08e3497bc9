# CRITICAL: Set Windows event loop policy FIRST, before any other imports
# This must be the very first thing that happens to fix psycopg compatibility
import sys

if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

from datetime import datetime, timedelta, timezone
from typing import Optional

# Standard imports
import jwt
from fastapi import HTTPException

# Import constants from api.config.settings
from api.config.settings import (
    JWT_ALGORITHM,
    get_jwt_secret,
    get_token_issuer,
    get_token_ttl_seconds,
)

# Import debug utilities
from api.utils.debug import print__token_debug


# ============================================================
# AUTHENTICATION - TOKEN ISSUANCE
# ============================================================
def issue_token(user_id: str) -> str:
    """Issue a signed HS256 token for ``user_id``.

    Claims: sub (user id), iat, exp (TOKEN_TTL_SECONDS from now), iss.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(seconds=get_token_ttl_seconds()),
        "iss": get_token_issuer(),
    }
    token = jwt.encode(payload, get_jwt_secret(), algorithm=JWT_ALGORITHM)
    print__token_debug(f"🔑 Issued token for user {user_id}")
    return token


# ============================================================
# AUTHENTICATION - TOKEN VERIFICATION
# ============================================================
def decode_token(token: str) -> dict:
    """Verify signature, expiry and issuer; return the claims.

    Raises:
        HTTPException: 401 with a detail describing the failure
    """
    # JWT tokens must have exactly 3 non-empty parts (header.payload.signature)
    token_parts = token.split(".") if token else []
    if len(token_parts) != 3 or not all(token_parts):
        raise HTTPException(status_code=401, detail="Invalid JWT token format")

    try:
        payload = jwt.decode(
            token,
            get_jwt_secret(),
            algorithms=[JWT_ALGORITHM],
            issuer=get_token_issuer(),
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        print__token_debug("JWT token has expired")
        raise HTTPException(status_code=401, detail="Token has expired")
    except jwt.InvalidSignatureError:
        print__token_debug("JWT token has invalid signature")
        raise HTTPException(status_code=401, detail="Invalid token signature")
    except jwt.InvalidIssuerError:
        print__token_debug("JWT token has invalid issuer")
        raise HTTPException(status_code=401, detail="Invalid token issuer")
    except jwt.DecodeError as e:
        print__token_debug(f"JWT decode error: {e}")
        raise HTTPException(status_code=401, detail="Invalid token format")
    except jwt.InvalidTokenError as e:
        print__token_debug(f"JWT token is invalid: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")

    print__token_debug(f"✅ Token verified for user {payload.get('sub')}")
    return payload


def verify_token(token: Optional[str]) -> Optional[str]:
    """Return the user id carried by ``token``, or None when it is not valid."""
    if not token:
        return None
    try:
        return decode_token(token)["sub"]
    except HTTPException as e:
        print__token_debug(f"Token rejected: {e.detail}")
        return None
