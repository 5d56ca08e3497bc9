"""
Authentication package for the API server.

This package contains HS256 token issuance/verification and bcrypt password
hashing for the Wellness Sessions application.
"""

# Import authentication functions
from .jwt_auth import decode_token, issue_token, verify_token
from .passwords import hash_password, verify_password

# Export all authentication functions for easier access
__all__ = [
    'decode_token',
    'hash_password',
    'issue_token',
    'verify_password',
    'verify_token',
]
