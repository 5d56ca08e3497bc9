"""PostgreSQL Connection String Generation and Basic Connection Management

Builds the connection string and connection kwargs shared by the pool and by
direct connections, and provides the SELECT 1 health check behind the
store ping.
"""

from __future__ import annotations

import os
import threading
import time
import uuid
from contextlib import asynccontextmanager

import psycopg

from api.utils.debug import print__store_debug
from persistence.config import (
    CONNECT_TIMEOUT,
    KEEPALIVES_COUNT,
    KEEPALIVES_IDLE,
    KEEPALIVES_INTERVAL,
    TCP_USER_TIMEOUT,
    get_db_config,
)


def get_connection_string():
    """Generate a PostgreSQL connection string with timeout and keepalive parameters.

    The application name combines process id, thread id, startup time and a
    random suffix so connections can be told apart in pg_stat_activity.
    """
    config = get_db_config()

    app_name = (
        f"wellness_sessions_{os.getpid()}_{threading.get_ident()}_"
        f"{int(time.time())}_{uuid.uuid4().hex[:8]}"
    )
    print__store_debug(f"CONNECTION STRING: application name {app_name}")

    return (
        f"postgresql://{config['user']}:{config['password']}@"
        f"{config['host']}:{config['port']}/{config['dbname']}?"
        f"sslmode={config['sslmode']}"
        f"&application_name={app_name}"
        f"&connect_timeout={CONNECT_TIMEOUT}"
        f"&keepalives_idle={KEEPALIVES_IDLE}"
        f"&keepalives_interval={KEEPALIVES_INTERVAL}"
        f"&keepalives_count={KEEPALIVES_COUNT}"
        f"&tcp_user_timeout={TCP_USER_TIMEOUT}"
    )


def get_connection_kwargs():
    """Connection kwargs for every psycopg connection.

    Returns:
        dict: autocommit disabled, prepared statements disabled
    """
    return {
        "autocommit": False,
        "prepare_threshold": None,
    }


async def check_connection_health(connection):
    """Return True when ``connection`` can still run ``SELECT 1``.

    Never raises.
    """
    try:
        async with connection.cursor() as cur:
            await cur.execute("SELECT 1")
            result = await cur.fetchone()
            return result is not None and result[0] == 1
    except Exception as exc:  # pylint: disable=broad-except
        print__store_debug(f"Connection health check failed: {exc}")
        return False


@asynccontextmanager
async def get_direct_connection():
    """Open a dedicated connection outside the pool (DDL, table setup)."""
    connection_string = get_connection_string()
    connection_kwargs = {**get_connection_kwargs(), "autocommit": True}

    async with await psycopg.AsyncConnection.connect(
        connection_string, **connection_kwargs
    ) as conn:
        yield conn
