"""
HTTP client package for the Wellness Sessions API.

SessionsApiClient wraps httpx.AsyncClient and returns editor.result values
(Ok / Err) instead of raising, so callers branch on the same error taxonomy
the server renders.
"""

from .api_client import SessionsApiClient

__all__ = ['SessionsApiClient']
