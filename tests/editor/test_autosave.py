"""
Tests for AutoSaveCoordinator: debounce, manual saves, failure handling,
overlap serialization and teardown.
"""

import asyncio

import pytest

from editor.autosave import (
    AUTOSAVE_FAILURE_MESSAGE,
    AUTOSAVE_SUCCESS_MESSAGE,
    AutoSaveCoordinator,
    AutoSaveStatus,
    Notifier,
)

DELAY = 0.05
RESET = 0.05


class RecordingNotifier(Notifier):
    def __init__(self):
        self.successes = []
        self.errors = []

    def success(self, message):
        self.successes.append(message)

    def error(self, message):
        self.errors.append(message)


class RecordingSaver:
    """Persistence callback that records payloads, optionally slow or failing."""

    def __init__(self, pause: float = 0.0, fail: bool = False):
        self.calls = []
        self.pause = pause
        self.fail = fail
        self.active = 0
        self.max_active = 0

    async def __call__(self, data):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.pause:
                await asyncio.sleep(self.pause)
            if self.fail:
                raise RuntimeError("store offline")
            self.calls.append(data)
        finally:
            self.active -= 1


def make_coordinator(saver, **kwargs):
    statuses = []
    notifier = RecordingNotifier()
    coordinator = AutoSaveCoordinator(
        saver,
        delay=DELAY,
        saved_reset_delay=RESET,
        error_reset_delay=RESET,
        notifier=notifier,
        on_status_change=statuses.append,
        **kwargs,
    )
    return coordinator, notifier, statuses


@pytest.mark.asyncio
async def test_rapid_saves_collapse_into_one_call_with_latest_payload():
    saver = RecordingSaver()
    coordinator, notifier, statuses = make_coordinator(saver)

    for payload in ("A", "B", "C"):
        coordinator.save({"title": payload})
        await asyncio.sleep(DELAY / 5)
    assert coordinator.has_pending_save

    await asyncio.sleep(DELAY * 3)
    assert saver.calls == [{"title": "C"}]
    assert notifier.successes == [AUTOSAVE_SUCCESS_MESSAGE]
    assert coordinator.last_saved is not None
    assert statuses[:2] == [AutoSaveStatus.SAVING, AutoSaveStatus.SAVED]


@pytest.mark.asyncio
async def test_saved_status_returns_to_idle():
    saver = RecordingSaver()
    coordinator, _, statuses = make_coordinator(saver)

    coordinator.save({"title": "A"})
    await asyncio.sleep(DELAY + RESET * 3)
    assert coordinator.status is AutoSaveStatus.IDLE
    assert statuses == [AutoSaveStatus.SAVING, AutoSaveStatus.SAVED, AutoSaveStatus.IDLE]


@pytest.mark.asyncio
async def test_teardown_cancels_pending_save():
    saver = RecordingSaver()
    coordinator, notifier, statuses = make_coordinator(saver)

    coordinator.save({"title": "A"})
    coordinator.teardown()
    await asyncio.sleep(DELAY * 3)

    assert saver.calls == []
    assert statuses == []
    assert notifier.successes == []
    assert coordinator.is_alive is False

    # Further saves are ignored
    coordinator.save({"title": "B"})
    assert coordinator.has_pending_save is False
    assert await coordinator.manual_save({"title": "C"}) is None
    assert saver.calls == []


@pytest.mark.asyncio
async def test_teardown_during_save_suppresses_status_and_notifications():
    saver = RecordingSaver(pause=DELAY)
    coordinator, notifier, statuses = make_coordinator(saver)

    task = asyncio.create_task(coordinator.manual_save({"title": "A"}))
    await asyncio.sleep(DELAY / 5)
    coordinator.teardown()
    assert await task is True

    assert statuses == [AutoSaveStatus.SAVING]
    assert notifier.successes == []


@pytest.mark.asyncio
async def test_manual_save_cancels_pending_timer():
    saver = RecordingSaver()
    coordinator, _, _ = make_coordinator(saver)

    coordinator.save({"title": "debounced"})
    assert await coordinator.manual_save({"title": "manual"}) is True
    await asyncio.sleep(DELAY * 3)

    assert saver.calls == [{"title": "manual"}]


@pytest.mark.asyncio
async def test_failure_sets_error_then_idle_without_retry():
    saver = RecordingSaver(fail=True)
    coordinator, notifier, statuses = make_coordinator(saver)

    assert await coordinator.manual_save({"title": "A"}) is False
    assert coordinator.status is AutoSaveStatus.ERROR
    assert notifier.errors == [AUTOSAVE_FAILURE_MESSAGE]
    assert coordinator.last_saved is None

    await asyncio.sleep(RESET * 3)
    assert coordinator.status is AutoSaveStatus.IDLE
    assert statuses == [AutoSaveStatus.SAVING, AutoSaveStatus.ERROR, AutoSaveStatus.IDLE]


@pytest.mark.asyncio
async def test_overlapping_saves_never_run_concurrently_and_newest_wins():
    saver = RecordingSaver(pause=DELAY)
    coordinator, _, _ = make_coordinator(saver)

    first = asyncio.create_task(coordinator.manual_save({"title": "first"}))
    await asyncio.sleep(0)
    second = asyncio.create_task(coordinator.manual_save({"title": "second"}))
    await asyncio.sleep(0)
    third = asyncio.create_task(coordinator.manual_save({"title": "third"}))

    results = await asyncio.gather(first, second, third)

    assert saver.max_active == 1
    assert results == [True, None, True]
    assert saver.calls == [{"title": "first"}, {"title": "third"}]


@pytest.mark.asyncio
async def test_exclusive_blocks_autosave_and_drops_pending_payload():
    saver = RecordingSaver()
    coordinator, _, _ = make_coordinator(saver)

    coordinator.save({"title": "queued"})
    async with coordinator.exclusive():
        assert coordinator.has_pending_save is False
        await asyncio.sleep(DELAY * 2)
    await asyncio.sleep(DELAY * 2)

    assert saver.calls == []


@pytest.mark.asyncio
async def test_disabled_coordinator_does_nothing():
    saver = RecordingSaver()
    coordinator, _, statuses = make_coordinator(saver, enabled=False)

    coordinator.save({"title": "A"})
    assert await coordinator.manual_save({"title": "B"}) is None
    await asyncio.sleep(DELAY * 2)

    assert saver.calls == []
    assert statuses == []
