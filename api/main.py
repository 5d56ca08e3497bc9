"""Wellness Sessions FastAPI Backend Application

This module is the entry point of the Wellness Sessions API: users register,
author wellness sessions (title, tags, JSON content URL) as drafts that are
auto-saved while they edit, and publish them to a shared listing.
"""

MODULE_DESCRIPTION = r"""Wellness Sessions FastAPI Backend Application

This module builds the FastAPI application for the Wellness Sessions service.

Key Features:
-------------
1. Session Authoring:
   - Strict create/update validated with the same schemas the editor uses
   - Lenient auto-save endpoint that never rejects work in progress
   - Draft upsert and publish endpoints scoped to the session owner

2. Authentication:
   - HS256 JWT tokens issued on register/login
   - Tokens accepted as "Authorization: Bearer" or an http-only cookie
   - bcrypt password hashing

3. Production-Ready Infrastructure:
   - Store created in the lifespan (in-memory or PostgreSQL via psycopg_pool)
   - CORS, Brotli compression and wait-instead-of-reject throttling
   - One JSON envelope for every success and failure

Application Factory:
--------------------
create_app(store=None, enable_rate_limit=None, rate_limiter=None)
    store              a ready SessionStore; when None the lifespan creates one
                       from STORE_BACKEND and closes it on shutdown
    enable_rate_limit  defaults to RATE_LIMIT_ENABLED ("1")
    rate_limiter       RateLimiter to install; a default one when omitted

The module-level ``app`` is what uvicorn serves (see uvicorn_start.py).

Error Envelope:
---------------
{"success": false, "kind": "...", "code": "...", "message": "...", "errors": {...}}
"""

# ==============================================================================
# CRITICAL WINDOWS COMPATIBILITY SETUP
# ==============================================================================
# MUST BE FIRST: Set Windows event loop policy before ANY other imports
# This fixes psycopg[binary] async compatibility issues on Windows platforms
import os
import sys

if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# ==============================================================================
# ENVIRONMENT VARIABLES LOADING
# ==============================================================================
from dotenv import load_dotenv

load_dotenv()

# ==============================================================================
# PROJECT ROOT DIRECTORY CONFIGURATION
# ==============================================================================
try:
    from pathlib import Path

    BASE_DIR = Path(__file__).resolve().parents[1]  # Go up one level from api/main.py
except NameError:
    # Fallback for interactive environments (Jupyter, REPL)
    BASE_DIR = Path(os.getcwd())

if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

# ==============================================================================
# STANDARD LIBRARY AND THIRD-PARTY IMPORTS
# ==============================================================================
from contextlib import asynccontextmanager  # For lifespan management
from datetime import datetime  # For timestamp tracking
from typing import Optional

from fastapi import FastAPI

# ==============================================================================
# APPLICATION MODULE IMPORTS
# ==============================================================================
from api.config.settings import APP_TITLE, APP_VERSION, rate_limit_enabled
from api.exceptions.handlers import register_exception_handlers
from api.middleware.cors import setup_brotli_middleware, setup_cors_middleware
from api.middleware.rate_limiting import setup_throttling_middleware
from api.models.responses import ErrorEnvelope
from api.routes import (
    auth_router,
    health_router,
    my_sessions_router,
    root_router,
    sessions_router,
)
from api.utils.debug import print__startup_debug
from api.utils.rate_limiting import RateLimiter
from persistence.base import SessionStore
from persistence.factory import create_store


# ==============================================================================
# APPLICATION LIFESPAN MANAGEMENT
# ==============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the session store on startup (unless one was injected) and close it on shutdown."""
    started_at = datetime.now()
    print__startup_debug("🚀 FastAPI application starting up...")

    owns_store = app.state.store is None
    if owns_store:
        app.state.store = await create_store()
        print__startup_debug(f"✅ Session store ready: {type(app.state.store).__name__}")

    print__startup_debug("✅ FastAPI application ready to serve requests")

    yield  # Application runs here, serving requests

    print__startup_debug("🛑 FastAPI application shutting down...")
    print__startup_debug(f"Application ran for {datetime.now() - started_at}")
    if owns_store and app.state.store is not None:
        try:
            await app.state.store.close()
        finally:
            app.state.store = None


# ==============================================================================
# FASTAPI APPLICATION FACTORY
# ==============================================================================
def create_app(
    store: Optional[SessionStore] = None,
    enable_rate_limit: Optional[bool] = None,
    rate_limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    """Build a fully wired FastAPI application."""
    app = FastAPI(
        title=APP_TITLE,
        description="""Create, auto-save and publish wellness sessions.

## Features
- 🧘 Session drafts with title, tags and a JSON content URL
- 💾 Lenient auto-save while editing, strict validation on save/publish
- 📣 Shared listing of published sessions

## Authentication
All endpoints except `/`, `/health` and `/auth/*` (other than `/auth/me`)
require a token, sent as `Authorization: Bearer <token>` or in the auth cookie.
        """,
        version=APP_VERSION,
        lifespan=lifespan,
        servers=[
            {"url": "http://localhost:8000", "description": "Development server"},
        ],
        responses={
            401: {"model": ErrorEnvelope, "description": "Authentication required"},
            429: {"description": "Rate Limit Exceeded - Too many requests"},
            500: {"model": ErrorEnvelope, "description": "Internal Server Error"},
        },
    )
    app.state.store = store

    # ==========================================================================
    # MIDDLEWARE REGISTRATION
    # ==========================================================================
    setup_cors_middleware(app)
    setup_brotli_middleware(app)

    if enable_rate_limit is None:
        enable_rate_limit = rate_limit_enabled()
    if enable_rate_limit:
        setup_throttling_middleware(app, rate_limiter)
    else:
        print__startup_debug("ℹ️ Rate limiting disabled")

    # ==========================================================================
    # EXCEPTION HANDLERS
    # ==========================================================================
    register_exception_handlers(app)

    # ==========================================================================
    # ROUTE REGISTRATION
    # ==========================================================================
    print__startup_debug("[ROUTES] Registering route routers...")
    app.include_router(root_router, tags=["Root"])
    app.include_router(health_router, tags=["Health & Monitoring"])
    app.include_router(auth_router, tags=["Authentication"])
    app.include_router(sessions_router, tags=["Sessions"])
    app.include_router(my_sessions_router, tags=["My Sessions"])
    print__startup_debug("[SUCCESS] All route routers registered successfully")

    return app


app = create_app()
