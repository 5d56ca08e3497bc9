"""Timer handles owned by form and auto-save controllers.

A Debouncer wraps a single ``loop.call_later`` handle: scheduling again
replaces the previous callback, so at most one is ever pending.
"""

import asyncio
import inspect
from typing import Any, Callable, Optional, Set


class Debouncer:
    """Single pending callback that is re-armed on every schedule()."""

    def __init__(self, delay: float):
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[[], Any], delay: Optional[float] = None) -> None:
        """Cancel any pending callback and arm ``callback`` after ``delay`` seconds.

        Coroutine functions are run as tasks on the running loop. Must be called
        from inside a running event loop.
        """
        self.cancel()
        loop = asyncio.get_running_loop()
        wait = self.delay if delay is None else delay
        self._handle = loop.call_later(wait, self._fire, callback)

    def _fire(self, callback: Callable[[], Any]) -> None:
        self._handle = None
        result = callback()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def drain(self) -> None:
        """Wait for callback tasks that already started."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
