"""
MODULE_DESCRIPTION: Health Check Endpoints - Process and Store Monitoring

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Endpoints used by load balancers and operators:

    GET /health              process memory (psutil), uptime and store health;
                             503 when the store does not answer its ping
    GET /health/rate-limits  limiter configuration and tracked client count

/health is exempt from throttling; neither endpoint requires authentication.
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

import time
from datetime import datetime

import psutil
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.config.settings import APP_VERSION, start_time
from api.dependencies.store import get_store
from api.helpers import ok_response, traceback_json_response
from api.utils.debug import print__debug
from editor.result import Err, ErrorKind
from persistence.base import SessionStore

router = APIRouter()


@router.get("/health")
async def health_check(store: SessionStore = Depends(get_store)):
    """Health check with memory monitoring and store verification."""
    try:
        process = psutil.Process()
        memory_info = process.memory_info()

        store_healthy = True
        store_error = None
        ping_started = time.time()
        try:
            store_healthy = await store.ping()
        except Exception as e:  # pylint: disable=broad-except
            store_healthy = False
            store_error = str(e)
        ping_ms = round((time.time() - ping_started) * 1000, 2)

        health_data = {
            "status": "healthy" if store_healthy else "degraded",
            "timestamp": datetime.now().isoformat(),
            "uptime_seconds": time.time() - start_time,
            "memory": {
                "rss_mb": round(memory_info.rss / 1024 / 1024, 2),
                "vms_mb": round(memory_info.vms / 1024 / 1024, 2),
                "percent": round(process.memory_percent(), 2),
            },
            "store": {
                "healthy": store_healthy,
                "backend": type(store).__name__,
                "ping_ms": ping_ms,
                "error": store_error,
            },
            "version": APP_VERSION,
        }

        if not store_healthy:
            print__debug(f"⚠️ Health check degraded: {store_error}")
            content = Err(ErrorKind.SERVER, "Session store is unavailable", status=503).to_payload()
            content.update(health_data)
            return JSONResponse(status_code=503, content=content)

        return ok_response(health_data)

    except Exception as e:  # pylint: disable=broad-except
        resp = traceback_json_response(e)
        if resp:
            return resp
        content = Err(ErrorKind.SERVER, str(e)).to_payload()
        content.update({"status": "error", "timestamp": datetime.now().isoformat()})
        return JSONResponse(status_code=500, content=content)


@router.get("/health/rate-limits")
async def rate_limit_health(request: Request):
    """Rate limiting configuration and tracked client count."""
    limiter = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        return ok_response({"enabled": False, "timestamp": datetime.now().isoformat()})
    return ok_response(
        {
            "enabled": True,
            "total_tracked_clients": len(limiter.storage),
            "rate_limit_window": limiter.window,
            "rate_limit_requests": limiter.requests,
            "rate_limit_burst": limiter.burst,
            "max_wait_seconds": limiter.max_wait,
            "timestamp": datetime.now().isoformat(),
        }
    )
