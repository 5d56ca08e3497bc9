"""
Routes package for the API server.

This package contains FastAPI route handlers for the root catalog, health
checks, authentication, sessions and the caller's own sessions.
"""

# CRITICAL: Set Windows event loop policy FIRST, before any other imports
# This must be the very first thing that happens to fix psycopg compatibility
import sys
import os

if sys.platform == "win32":
    import asyncio
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Load environment variables early
from dotenv import load_dotenv
load_dotenv()

# Routes module initialization
from .root import router as root_router
from .health import router as health_router
from .auth import router as auth_router
from .sessions import router as sessions_router
from .my_sessions import router as my_sessions_router

# Export all routers for easy import
__all__ = [
    "root_router",
    "health_router",
    "auth_router",
    "sessions_router",
    "my_sessions_router",
]
