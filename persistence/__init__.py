"""
Persistence package for the Wellness Sessions application.

This package contains the SessionStore contract, the in-memory store and the
PostgreSQL store (psycopg + psycopg_pool), plus the store factory used by the
API lifespan.
"""

__all__ = []
