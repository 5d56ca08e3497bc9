"""
MODULE_DESCRIPTION: Rate Limiting Middleware - Wait-Instead-Of-Reject Throttling

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Per-client-IP throttling for the Wellness Sessions API. Instead of rejecting a
request the moment a limit is hit, the middleware waits (up to
RATE_LIMIT_MAX_WAIT seconds per attempt, three attempts) for capacity to free
up, and only then answers 429.

Limiter state (request timestamps and per-IP semaphores) is a RateLimiter
stored on app.state.rate_limiter, created by setup_throttling_middleware.

Exempted Endpoints:
    - /health, /docs, /openapi.json

Rate Limit Response (429):
    {
        "success": false,
        "kind": "server",
        "code": "INTERNAL_ERROR",
        "message": "Rate limit exceeded. Please wait Xs before retrying.",
        "retry_after": X,
        "burst_usage": "Y/Z",
        "window_usage": "A/B"
    }
    Header: Retry-After: X
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
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.utils.debug import print__rate_limit_debug, print__startup_debug
from api.utils.rate_limiting import RateLimiter
from editor.result import Err, ErrorKind

EXEMPT_PATHS = ("/health", "/docs", "/openapi.json")


# ==============================================================================
# RATE LIMITING MIDDLEWARE
# ==============================================================================
async def throttling_middleware(request: Request, call_next):
    """Throttling middleware that makes requests wait instead of rejecting them."""
    if request.url.path in EXEMPT_PATHS:
        return await call_next(request)

    limiter: RateLimiter = request.app.state.rate_limiter
    client_ip = request.client.host if request.client else "unknown"

    async with limiter.semaphores[client_ip]:
        if not await limiter.wait_for_capacity(client_ip):
            rate_info = limiter.check_with_throttling(client_ip)
            print__rate_limit_debug(
                f"Rate limit exceeded for IP: {client_ip} after waiting. "
                f"Burst: {rate_info['burst_count']}/{rate_info['burst_limit']}, "
                f"Window: {rate_info['window_count']}/{rate_info['window_limit']}"
            )

            retry_after = max(int(rate_info["suggested_wait"]), 1)
            response_content = Err(
                ErrorKind.SERVER,
                f"Rate limit exceeded. Please wait "
                f"{rate_info['suggested_wait']:.1f}s before retrying.",
                status=429,
            ).to_payload()
            response_content.update(
                {
                    "retry_after": retry_after,
                    "burst_usage": f"{rate_info['burst_count']}/{rate_info['burst_limit']}",
                    "window_usage": f"{rate_info['window_count']}/{rate_info['window_limit']}",
                }
            )
            return JSONResponse(
                status_code=429,
                content=response_content,
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)


# ==============================================================================
# MIDDLEWARE SETUP FUNCTION
# ==============================================================================
def setup_throttling_middleware(app: FastAPI, limiter: Optional[RateLimiter] = None):
    """Attach a RateLimiter to ``app`` and register the throttling middleware."""
    print__startup_debug("📋 Registering rate limiting middleware...")
    app.state.rate_limiter = limiter or RateLimiter()
    app.middleware("http")(throttling_middleware)
    print__startup_debug("✅ Rate limiting middleware registered successfully")
