"""
MODULE_DESCRIPTION: API Configuration Settings - Application Constants and Env Accessors

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

This module is the central configuration hub for the Wellness Sessions API.
Static values (rate limits, cookie name, defaults) are module constants; values
that tests and deployments change at runtime (JWT secret, token TTL, cookie
security) are read through small accessor functions at call time.

The session store is NOT configured here as a global object: it is created in
the FastAPI lifespan (or passed to create_app) and stored on app.state.

===================================================================================
ENVIRONMENT VARIABLES
===================================================================================

Authentication:
    JWT_SECRET            HMAC secret for HS256 tokens (required for auth routes)
    TOKEN_TTL_SECONDS     Token lifetime in seconds (default 3600)
    TOKEN_ISSUER          "iss" claim (default "wellness-sessions")
    AUTH_COOKIE_NAME      http-only cookie carrying the token (default "token")
    AUTH_COOKIE_SECURE    "1" to mark the cookie Secure (default "0")

Persistence:
    STORE_BACKEND         memory | postgres (see persistence.config)

Rate limiting:
    RATE_LIMIT_ENABLED    "0" disables the throttling middleware (default "1")

Debugging:
    DEBUG_TRACEBACK       "1" includes tracebacks in 500 responses
"""

# CRITICAL: Set Windows event loop policy FIRST, before any other imports
# This must be the very first thing that happens to fix psycopg compatibility
import os
import sys

if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# Standard imports
import time

# ============================================================
# CONFIGURATION AND CONSTANTS
# ============================================================

# Application startup time for uptime tracking
start_time = time.time()

APP_TITLE = "Wellness Sessions API"
APP_VERSION = "1.0.0"

# =======================================================================
# AUTHENTICATION
# =======================================================================

JWT_ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL_SECONDS = 3600
DEFAULT_TOKEN_ISSUER = "wellness-sessions"
AUTH_COOKIE_NAME = os.environ.get("AUTH_COOKIE_NAME", "token")

# =======================================================================
# RATE LIMITING
# =======================================================================

RATE_LIMIT_REQUESTS = int(os.environ.get("RATE_LIMIT_REQUESTS", "100"))  # per window
RATE_LIMIT_WINDOW = int(os.environ.get("RATE_LIMIT_WINDOW", "60"))  # seconds
RATE_LIMIT_BURST = int(os.environ.get("RATE_LIMIT_BURST", "20"))  # per 10 seconds
RATE_LIMIT_MAX_WAIT = 5  # maximum seconds to wait before giving up
THROTTLE_MAX_CONCURRENT = 8  # concurrent requests per IP


# ============================================================
# RUNTIME ACCESSORS
# ============================================================


def get_jwt_secret() -> str:
    """Return JWT_SECRET; raises RuntimeError when it is not configured."""
    secret = os.environ.get("JWT_SECRET")
    if not secret:
        raise RuntimeError("JWT_SECRET environment variable is not set")
    return secret


def get_token_ttl_seconds() -> int:
    return int(os.environ.get("TOKEN_TTL_SECONDS", str(DEFAULT_TOKEN_TTL_SECONDS)))


def get_token_issuer() -> str:
    return os.environ.get("TOKEN_ISSUER", DEFAULT_TOKEN_ISSUER)


def auth_cookie_secure() -> bool:
    return os.environ.get("AUTH_COOKIE_SECURE", "0") == "1"


def rate_limit_enabled() -> bool:
    return os.environ.get("RATE_LIMIT_ENABLED", "1") == "1"
