"""
Data models package for the API server.

This package contains Pydantic models for request/response validation
and documentation of the Wellness Sessions API.
"""

# Import request models
from .requests import (
    LoginRequest,
    PublishRequest,
    RegisterRequest,
    SaveDraftRequest,
    SessionPayload,
)

# Import response models
from .responses import (
    AuthResponse,
    AutoSaveResponse,
    ErrorEnvelope,
    SessionListResponse,
    SessionResponse,
    UserResponse,
)

# Export all models for easier access
__all__ = [
    # Request models
    'LoginRequest',
    'PublishRequest',
    'RegisterRequest',
    'SaveDraftRequest',
    'SessionPayload',

    # Response models
    'AuthResponse',
    'AutoSaveResponse',
    'ErrorEnvelope',
    'SessionListResponse',
    'SessionResponse',
    'UserResponse',
]
