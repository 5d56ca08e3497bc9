"""
Configuration package for the API server.

This package contains settings, constants, and configuration accessors
for the Wellness Sessions application.
"""

# Import key configuration items for easier access
from .settings import (
    APP_TITLE,
    APP_VERSION,
    AUTH_COOKIE_NAME,
    RATE_LIMIT_BURST,
    RATE_LIMIT_MAX_WAIT,
    RATE_LIMIT_REQUESTS,
    RATE_LIMIT_WINDOW,
    auth_cookie_secure,
    get_jwt_secret,
    get_token_issuer,
    get_token_ttl_seconds,
    rate_limit_enabled,
    start_time,
)

__all__ = [
    "APP_TITLE",
    "APP_VERSION",
    "AUTH_COOKIE_NAME",
    "RATE_LIMIT_BURST",
    "RATE_LIMIT_MAX_WAIT",
    "RATE_LIMIT_REQUESTS",
    "RATE_LIMIT_WINDOW",
    "auth_cookie_secure",
    "get_jwt_secret",
    "get_token_issuer",
    "get_token_ttl_seconds",
    "rate_limit_enabled",
    "start_time",
]
