"""
Dependencies package for the API server.

This package contains FastAPI dependencies for authentication and store
access for the Wellness Sessions application.
"""

# Import dependencies
from .auth import extract_request_token, get_current_user_id, verify_request_token
from .store import get_store

# Export all dependencies for easier access
__all__ = [
    'extract_request_token',
    'get_current_user_id',
    'get_store',
    'verify_request_token',
]
