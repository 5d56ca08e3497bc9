"""Connection pool creation and cleanup for the PostgreSQL session store."""

from __future__ import annotations

import gc

from psycopg_pool import AsyncConnectionPool

from api.utils.debug import print__store_debug
from persistence.config import (
    CONNECT_TIMEOUT,
    DEFAULT_MAX_IDLE,
    DEFAULT_MAX_LIFETIME,
    DEFAULT_POOL_MAX_SIZE,
    DEFAULT_POOL_MIN_SIZE,
    DEFAULT_POOL_TIMEOUT,
)
from persistence.database.connection import (
    get_connection_kwargs,
    get_connection_string,
)


async def create_pool() -> AsyncConnectionPool:
    """Create and open the application connection pool.

    The pool is created with ``open=False`` and opened explicitly, then waits
    until ``min_size`` connections are ready so startup fails fast on a bad
    configuration.
    """
    print__store_debug("POOL CREATE START: Creating AsyncConnectionPool")

    pool = AsyncConnectionPool(
        conninfo=get_connection_string(),
        min_size=DEFAULT_POOL_MIN_SIZE,
        max_size=DEFAULT_POOL_MAX_SIZE,
        timeout=DEFAULT_POOL_TIMEOUT,
        max_idle=DEFAULT_MAX_IDLE,
        max_lifetime=DEFAULT_MAX_LIFETIME,
        kwargs={
            **get_connection_kwargs(),
            "connect_timeout": CONNECT_TIMEOUT,
        },
        check=AsyncConnectionPool.check_connection,
        open=False,
    )
    await pool.open(wait=True, timeout=DEFAULT_POOL_TIMEOUT)

    print__store_debug(
        f"POOL CREATE SUCCESS: pool open (min={DEFAULT_POOL_MIN_SIZE}, max={DEFAULT_POOL_MAX_SIZE})"
    )
    return pool


async def close_pool(pool: AsyncConnectionPool) -> None:
    """Close ``pool``; cleanup errors are logged, never raised."""
    if pool is None:
        return
    try:
        await pool.close()
        print__store_debug("POOL CLOSE: Connection pool closed successfully")
    except Exception as exc:  # pylint: disable=broad-except
        print__store_debug(f"POOL CLOSE ERROR: Error while closing pool: {exc}")
    finally:
        gc.collect()
