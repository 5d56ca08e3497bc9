"""Persistence Configuration Management

This module provides centralized configuration for the session store: backend
selection, PostgreSQL connection parameters, timeouts and pool sizing.
"""

from __future__ import annotations

import os

from api.utils.debug import print__store_debug

# ==============================================================================
# BACKEND SELECTION
# ==============================================================================

STORE_BACKEND_MEMORY = "memory"
STORE_BACKEND_POSTGRES = "postgres"

# Fall back to the in-memory store when PostgreSQL cannot be reached at startup
INMEMORY_FALLBACK_ENABLED = os.environ.get("InMemoryStore_fallback", "1") == "1"

# ==============================================================================
# CONNECTION TIMEOUT CONFIGURATION
# ==============================================================================

CONNECT_TIMEOUT = 30  # Initial connection timeout (seconds)
TCP_USER_TIMEOUT = 60000  # TCP-level timeout in milliseconds
KEEPALIVES_IDLE = 300  # Time (seconds) before first keepalive probe
KEEPALIVES_INTERVAL = 30  # Interval (seconds) between keepalive probes
KEEPALIVES_COUNT = 3  # Failed probes before the connection is declared dead

# ==============================================================================
# CONNECTION POOL CONFIGURATION
# ==============================================================================

DEFAULT_POOL_MIN_SIZE = int(os.environ.get("POOL_MIN_SIZE", "1"))
DEFAULT_POOL_MAX_SIZE = int(os.environ.get("POOL_MAX_SIZE", "10"))
DEFAULT_POOL_TIMEOUT = 30  # Maximum wait (seconds) for a pooled connection
DEFAULT_MAX_IDLE = 600  # Idle connection timeout (seconds)
DEFAULT_MAX_LIFETIME = 3600  # Maximum connection lifetime (seconds)


# ==============================================================================
# CONFIGURATION FUNCTIONS
# ==============================================================================


def get_store_backend() -> str:
    """Return the configured store backend name (``memory`` or ``postgres``)."""
    backend = os.environ.get("STORE_BACKEND", STORE_BACKEND_MEMORY).strip().lower()
    if backend not in (STORE_BACKEND_MEMORY, STORE_BACKEND_POSTGRES):
        raise ValueError(f"Unsupported STORE_BACKEND: {backend!r}")
    return backend


def get_db_config():
    """Extract PostgreSQL configuration from environment variables.

    Returns:
        dict: user, password, host, port (default 5432), dbname, sslmode
    """
    config = {
        "user": os.environ.get("user"),
        "password": os.environ.get("password"),
        "host": os.environ.get("host"),
        "port": int(os.environ.get("port", 5432)),
        "dbname": os.environ.get("dbname"),
        "sslmode": os.environ.get("sslmode", "prefer"),
    }
    # Password intentionally left out of the log line
    print__store_debug(
        f"DB CONFIG: host: {config['host']}, port: {config['port']}, "
        f"dbname: {config['dbname']}, user: {config['user']}"
    )
    return config


def check_postgres_env_vars():
    """Validate that all required PostgreSQL environment variables are set.

    Returns:
        bool: True if host, port, dbname, user and password are all present
    """
    required_vars = ["host", "port", "dbname", "user", "password"]
    missing_vars = [var for var in required_vars if not os.environ.get(var)]

    if missing_vars:
        print__store_debug(
            f"ENV VARS MISSING: Missing required environment variables: {missing_vars}"
        )
        return False

    print__store_debug("ENV VARS COMPLETE: All required PostgreSQL environment variables are set")
    return True
