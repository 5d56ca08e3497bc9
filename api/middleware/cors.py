"""
MODULE_DESCRIPTION: CORS and Compression Middleware - Cross-Origin and Performance Setup

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

This module configures two middleware components for the Wellness Sessions API:

1. CORS (Cross-Origin Resource Sharing) Middleware:
   - Lets the browser frontend call the API from another origin
   - Credentials are allowed so the http-only auth cookie travels with requests

2. Brotli Compression Middleware:
   - Compresses JSON responses of 1000 bytes or more
   - Clients that do not send "Accept-Encoding: br" get uncompressed bodies

===================================================================================
CONFIGURATION
===================================================================================

    CORS_ALLOWED_ORIGINS  comma-separated origins
                          (default "http://localhost:3000,http://localhost:8000")

A wildcard origin cannot be combined with credentials, so list concrete
origins in production.
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
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from brotli_asgi import BrotliMiddleware

from api.utils.debug import print__startup_debug


# ==============================================================================
# MIDDLEWARE SETUP - CORS AND BROTLI
# ==============================================================================
def get_allowed_origins():
    allowed_origins_str = os.getenv(
        "CORS_ALLOWED_ORIGINS",
        "http://localhost:3000,http://localhost:8000",  # Default for development
    )
    return [origin.strip() for origin in allowed_origins_str.split(",") if origin.strip()]


def setup_cors_middleware(app: FastAPI):
    """Setup CORS middleware for the FastAPI application.

    Args:
        app: The FastAPI application instance

    Configuration:
        - allow_origins: From CORS_ALLOWED_ORIGINS env var
        - allow_credentials: True - the auth cookie must be sent cross-origin
        - allow_methods: GET, POST, PUT, DELETE, OPTIONS
        - allow_headers: ["*"]
    """
    print__startup_debug("📋 Registering CORS middleware...")

    allowed_origins = get_allowed_origins()
    print__startup_debug(f"📋 CORS allowed origins: {allowed_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )


def setup_brotli_middleware(app: FastAPI):
    """Setup Brotli compression middleware (responses >= 1000 bytes only)."""
    print__startup_debug("📋 Registering Brotli compression middleware...")
    app.add_middleware(BrotliMiddleware, minimum_size=1000)
