"""
MODULE_DESCRIPTION: Auto-Save Coordinator - Debounced Background Persistence

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

AutoSaveCoordinator sits between the session editor and the persistence call
that stores a draft. Edits are handed to save(); the coordinator waits for a
quiet window and then persists the most recent snapshot. manual_save() skips the
window and persists immediately.

===================================================================================
STATE MACHINE
===================================================================================

    idle --save(data)--> [timer pending] --fires--> saving
    saving --ok-->   saved --(saved_reset_delay)--> idle
    saving --fail--> error --(error_reset_delay)--> idle

    - save() during a pending timer replaces the payload and restarts the timer
    - manual_save() cancels the pending timer and persists its own payload
    - failures are surfaced (status + notifier) and never retried automatically

===================================================================================
IN-FLIGHT GUARD
===================================================================================

Persistence calls of one coordinator never overlap. Every request takes a
ticket; requests queue on a single-slot lock and a request whose ticket was
overtaken while it waited is dropped, so the newest payload always wins and at
most one call is outstanding. exclusive() lets explicit save/publish actions
take the same slot.

===================================================================================
TEARDOWN
===================================================================================

teardown() clears the liveness flag and cancels both timers. The flag is checked
before every continuation: after teardown no status transition, notification or
persistence call happens, even for a request that was already waiting.
"""

import asyncio
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from api.utils.debug import print__autosave_debug
from editor.timers import Debouncer

# ==============================================================================
# CONSTANTS
# ==============================================================================

DEFAULT_AUTOSAVE_DELAY = float(os.environ.get("AUTOSAVE_DELAY_SECONDS", "5"))
SAVED_RESET_DELAY = 3.0
ERROR_RESET_DELAY = 5.0

AUTOSAVE_SUCCESS_MESSAGE = "Changes saved automatically"
AUTOSAVE_FAILURE_MESSAGE = "Auto-save failed. Please save manually."


class AutoSaveStatus(str, Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class Notifier:
    """User-facing notifications; the default implementation only logs."""

    def success(self, message: str) -> None:
        print__autosave_debug(f"✅ {message}")

    def error(self, message: str) -> None:
        print__autosave_debug(f"❌ {message}")


SaveCallback = Callable[[Any], Awaitable[Any]]
StatusListener = Callable[[AutoSaveStatus], None]


class AutoSaveCoordinator:
    """Debounced persistence of the latest snapshot handed to save()."""

    def __init__(
        self,
        on_save: SaveCallback,
        delay: float = DEFAULT_AUTOSAVE_DELAY,
        enabled: bool = True,
        saved_reset_delay: float = SAVED_RESET_DELAY,
        error_reset_delay: float = ERROR_RESET_DELAY,
        notifier: Optional[Notifier] = None,
        on_status_change: Optional[StatusListener] = None,
    ):
        self.on_save = on_save
        self.enabled = enabled
        self.saved_reset_delay = saved_reset_delay
        self.error_reset_delay = error_reset_delay
        self.notifier = notifier or Notifier()
        self.on_status_change = on_status_change

        self._status = AutoSaveStatus.IDLE
        self._last_saved: Optional[datetime] = None
        self._pending: Any = None
        self._alive = True

        self._save_timer = Debouncer(delay)
        self._reset_timer = Debouncer(saved_reset_delay)

        # Single in-flight slot plus request tickets
        self._slot = asyncio.Lock()
        self._ticket = 0

    # ==========================================================================
    # STATE
    # ==========================================================================

    @property
    def status(self) -> AutoSaveStatus:
        return self._status

    @property
    def last_saved(self) -> Optional[datetime]:
        return self._last_saved

    @property
    def has_pending_save(self) -> bool:
        return self._save_timer.pending

    @property
    def is_alive(self) -> bool:
        return self._alive

    def _set_status(self, status: AutoSaveStatus) -> None:
        if not self._alive or status == self._status:
            return
        self._status = status
        print__autosave_debug(f"💾 Auto-save status -> {status.value}")
        if self.on_status_change is not None:
            self.on_status_change(status)

    # ==========================================================================
    # PUBLIC OPERATIONS
    # ==========================================================================

    def save(self, data: Any) -> None:
        """Queue ``data`` and restart the quiet window."""
        if not self.enabled or not self._alive:
            return
        self._pending = data
        self._save_timer.schedule(self._flush)

    async def manual_save(self, data: Any) -> Optional[bool]:
        """Cancel the pending timer and persist ``data`` now.

        Returns:
            True when persisted, False when the save failed, None when the
            request was skipped (disabled, torn down or overtaken by a newer one)
        """
        self._save_timer.cancel()
        self._pending = None
        if not self.enabled or not self._alive:
            return None
        return await self._persist(data)

    def teardown(self) -> None:
        self._alive = False
        self._pending = None
        self._save_timer.cancel()
        self._reset_timer.cancel()
        print__autosave_debug("🛑 Auto-save coordinator torn down")

    @asynccontextmanager
    async def exclusive(self):
        """Hold the in-flight slot for an explicit save or publish.

        Drops the pending debounced payload and any queued auto-save request,
        since the explicit action carries the newer snapshot.
        """
        self._save_timer.cancel()
        self._pending = None
        self._ticket += 1
        async with self._slot:
            yield

    # ==========================================================================
    # PERSISTENCE
    # ==========================================================================

    async def _flush(self) -> None:
        data, self._pending = self._pending, None
        if data is None or not self._alive:
            return
        await self._persist(data)

    async def _persist(self, data: Any) -> Optional[bool]:
        self._ticket += 1
        ticket = self._ticket

        async with self._slot:
            if not self._alive:
                return None
            if ticket != self._ticket:
                print__autosave_debug(f"⏭️ Save request {ticket} superseded, dropping")
                return None

            self._reset_timer.cancel()
            self._set_status(AutoSaveStatus.SAVING)
            try:
                await self.on_save(data)
            except Exception as e:  # pylint: disable=broad-except
                print__autosave_debug(f"❌ Auto-save failed: {type(e).__name__}: {e}")
                if not self._alive:
                    return False
                self._set_status(AutoSaveStatus.ERROR)
                self.notifier.error(AUTOSAVE_FAILURE_MESSAGE)
                self._reset_timer.schedule(self._return_to_idle, self.error_reset_delay)
                return False

            if not self._alive:
                return True
            self._last_saved = datetime.now(timezone.utc)
            self._set_status(AutoSaveStatus.SAVED)
            self.notifier.success(AUTOSAVE_SUCCESS_MESSAGE)
            self._reset_timer.schedule(self._return_to_idle, self.saved_reset_delay)
            return True

    def _return_to_idle(self) -> None:
        if self._alive and self._status in (AutoSaveStatus.SAVED, AutoSaveStatus.ERROR):
            self._set_status(AutoSaveStatus.IDLE)
