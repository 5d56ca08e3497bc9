"""
API package for the Wellness Sessions application.

This package contains the FastAPI service: configuration, authentication,
middleware, exception handlers, models and routes.
"""

__version__ = "1.0.0"

# Don't import anything during package initialization to avoid import errors
# that could prevent the API server from starting.
# Individual modules will import what they need when they need it.
__all__ = []
