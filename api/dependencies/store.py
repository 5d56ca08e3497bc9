"""FastAPI dependency returning the session store attached to the app."""

from fastapi import Request

from persistence.base import SessionStore


def get_store(request: Request) -> SessionStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Session store is not initialized")
    return store
