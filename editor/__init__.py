"""
Editor package for the Wellness Sessions application.

This package contains the shared validation schema engine, the form-state
controller, the auto-save coordinator and the session editor orchestrator.
The validation schemas are also consulted by the API route handlers.
"""

__version__ = "1.0.0"

__all__ = []
