"""
Utility functions package for the API server.

This package contains debug utilities, rate limiting and session payload
helpers for the Wellness Sessions application.

Only the dependency-free helpers are re-exported here: the editor and
persistence packages import api.utils.debug, so this module must not import
anything that imports them back.
"""

# Debug utilities
from .debug import (
    print__auth_debug,
    print__autosave_debug,
    print__client_debug,
    print__debug,
    print__rate_limit_debug,
    print__sessions_debug,
    print__startup_debug,
    print__store_debug,
    print__token_debug,
    print__validation_debug,
)

# Rate limiting utilities
from .rate_limiting import RateLimiter

# Export all utilities for easy access
__all__ = [
    # Debug utilities
    'print__auth_debug',
    'print__autosave_debug',
    'print__client_debug',
    'print__debug',
    'print__rate_limit_debug',
    'print__sessions_debug',
    'print__startup_debug',
    'print__store_debug',
    'print__token_debug',
    'print__validation_debug',
    # Rate limiting utilities
    'RateLimiter',
]
