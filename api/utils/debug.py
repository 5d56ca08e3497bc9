# CRITICAL: Set Windows event loop policy FIRST, before any other imports
# This must be the very first thing that happens to fix psycopg compatibility
import os
import sys

if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# ==============================================================================
# DEBUG FUNCTIONS
# ==============================================================================
def _emit(channel: str, msg: str) -> None:
    print(f"[{channel}] {msg}")
    sys.stdout.flush()


def print__debug(msg: str) -> None:
    """Print DEBUG messages when debug mode is enabled.

    Args:
        msg: The message to print
    """
    debug_mode = os.environ.get("DEBUG", "0")
    if debug_mode == "1":
        _emit("DEBUG", msg)


def print__token_debug(msg: str) -> None:
    """Print print__token_debug messages when debug mode is enabled.

    Args:
        msg: The message to print
    """
    debug_mode = os.environ.get("print__token_debug", "0")
    if debug_mode == "1":
        _emit("print__token_debug", msg)


def print__startup_debug(msg: str) -> None:
    """Print application startup/shutdown messages when debug mode is enabled."""
    debug_mode = os.environ.get("print__startup_debug", "0")
    if debug_mode == "1":
        _emit("print__startup_debug", msg)


def print__sessions_debug(msg: str) -> None:
    """Print session route messages when debug mode is enabled.

    Args:
        msg: The message to print
    """
    debug_mode = os.environ.get("print__sessions_debug", "0")
    if debug_mode == "1":
        _emit("print__sessions_debug", msg)


def print__auth_debug(msg: str) -> None:
    """Print register/login/logout messages when debug mode is enabled."""
    debug_mode = os.environ.get("print__auth_debug", "0")
    if debug_mode == "1":
        _emit("print__auth_debug", msg)


def print__autosave_debug(msg: str) -> None:
    """Print auto-save coordinator and editor messages when debug mode is enabled.

    Args:
        msg: The message to print
    """
    debug_mode = os.environ.get("print__autosave_debug", "0")
    if debug_mode == "1":
        _emit("print__autosave_debug", msg)


def print__validation_debug(msg: str) -> None:
    """Print validation engine and form-state messages when debug mode is enabled."""
    debug_mode = os.environ.get("print__validation_debug", "0")
    if debug_mode == "1":
        _emit("print__validation_debug", msg)


def print__store_debug(msg: str) -> None:
    """Print persistence layer messages when debug mode is enabled.

    Args:
        msg: The message to print
    """
    debug_mode = os.environ.get("print__store_debug", "0")
    if debug_mode == "1":
        _emit("print__store_debug", msg)


def print__client_debug(msg: str) -> None:
    """Print HTTP client messages when debug mode is enabled."""
    debug_mode = os.environ.get("print__client_debug", "0")
    if debug_mode == "1":
        _emit("print__client_debug", msg)


def print__rate_limit_debug(msg: str) -> None:
    """Print throttling middleware messages when debug mode is enabled."""
    debug_mode = os.environ.get("print__rate_limit_debug", "0")
    if debug_mode == "1":
        _emit("print__rate_limit_debug", msg)
