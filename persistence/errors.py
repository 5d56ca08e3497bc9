"""Store-level exceptions raised by SessionStore implementations."""


class StoreError(Exception):
    """Base class for persistence errors."""


class NotFoundError(StoreError):
    """The requested record does not exist."""


class ForbiddenError(StoreError):
    """The caller does not own the record it tried to mutate."""


class ConflictError(StoreError):
    """A uniqueness constraint was violated (e.g. duplicate email)."""
