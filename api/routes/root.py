"""
MODULE_DESCRIPTION: Root Endpoint - API Discovery and Endpoint Catalog

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

GET / returns a self-describing catalog of the Wellness Sessions API: version,
documentation links and every endpoint grouped by purpose. It needs no
authentication and touches no storage.

Keep the catalog in sync when routes are added.
"""

from datetime import datetime

from fastapi import APIRouter

from api.config.settings import APP_TITLE, APP_VERSION
from api.helpers import ok_response

router = APIRouter()


@router.get("/")
async def api_root():
    """API root endpoint - endpoint catalog for discovery and onboarding."""
    return ok_response(
        {
            "name": APP_TITLE,
            "version": APP_VERSION,
            "description": "Create, auto-save and publish wellness sessions",
            "status": "operational",
            "timestamp": datetime.now().isoformat(),
            "documentation": {
                "swagger_ui": "/docs",
                "redoc": "/redoc",
                "openapi_spec": "/openapi.json",
            },
            "auth_endpoints": {
                "register": {"endpoint": "/auth/register", "method": "POST"},
                "login": {"endpoint": "/auth/login", "method": "POST"},
                "logout": {"endpoint": "/auth/logout", "method": "POST"},
                "me": {"endpoint": "/auth/me", "method": "GET", "auth": True},
            },
            "session_endpoints": {
                "published": {"endpoint": "/sessions", "method": "GET", "auth": True},
                "create": {"endpoint": "/sessions", "method": "POST", "auth": True},
                "update": {"endpoint": "/sessions/{id}", "method": "PUT", "auth": True},
                "auto_save": {
                    "endpoint": "/sessions/{id}/auto-save",
                    "method": "POST",
                    "auth": True,
                },
                "mine": {"endpoint": "/my-sessions", "method": "GET", "auth": True},
                "mine_one": {"endpoint": "/my-sessions/{id}", "method": "GET", "auth": True},
                "save_draft": {
                    "endpoint": "/my-sessions/save-draft",
                    "method": "POST",
                    "auth": True,
                },
                "publish": {
                    "endpoint": "/my-sessions/publish",
                    "method": "POST",
                    "auth": True,
                },
            },
            "system_endpoints": {
                "health": {"endpoint": "/health", "method": "GET"},
                "rate_limits": {"endpoint": "/health/rate-limits", "method": "GET"},
            },
            "getting_started": [
                "1. POST /auth/register or /auth/login to obtain a token",
                "2. Send it as 'Authorization: Bearer <token>' (or rely on the cookie)",
                "3. POST /sessions to create a draft",
                "4. POST /sessions/{id}/auto-save while editing",
                "5. POST /my-sessions/publish when ready",
            ],
        }
    )
