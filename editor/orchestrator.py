"""
MODULE_DESCRIPTION: Session Editor Orchestrator - Form State + Auto-Save + Lifecycle

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

SessionEditor drives one editing session of a wellness session record. It owns
a FormStateController bound to SESSION_SCHEMA and an AutoSaveCoordinator, and
wires them to three injected persistence collaborators:

    on_auto_save(session_id, snapshot)    lenient background save
    on_save(session_id, payload)          explicit "Save Draft" (status=draft)
    on_publish(session_id, payload)       explicit "Publish" (status=published)
    load_session(session_id)              fetch an existing record for hydration

session_id is None for a brand new draft. Auto-save is only enabled once a
record exists; a new draft starts auto-saving after its first explicit save
returns the created record.

===================================================================================
EVENT HANDLING
===================================================================================

handle_input_change / handle_tags_change
    - forward to the form controller (store the raw text, touch, debounced check)
    - hand the full snapshot to the auto-save coordinator

Values are kept exactly as typed so an input bound to them never loses a
space mid-word; only the payloads sent to the collaborators are sanitized.

save_draft / publish
    - mark all fields touched, run the synchronous validation pass
    - invalid form: notify and return False, no network call
    - valid form: call the collaborator inside the coordinator's exclusive slot
    - collaborator exceptions propagate to the caller

handle_visibility_change("hidden") / handle_before_unload
    - force an immediate manual_save of the current snapshot
    - before-unload returns a leave warning while a save is in progress

teardown
    - tears down the coordinator and disposes the form controller
"""

from typing import Any, Awaitable, Callable, Dict, Optional

from api.utils.debug import print__autosave_debug
from editor.autosave import (
    DEFAULT_AUTOSAVE_DELAY,
    AutoSaveCoordinator,
    AutoSaveStatus,
    Notifier,
)
from editor.form_state import SESSION_FORM_DEBOUNCE, FormStateController
from editor.result import unwrap
from editor.validation import SESSION_SCHEMA, parse_tags, sanitize_form_data

LEAVE_WARNING = "Your changes are being saved. Are you sure you want to leave?"
SESSION_FIELDS = ("title", "tags", "json_file_url")

PersistCallback = Callable[[Optional[str], Dict[str, Any]], Awaitable[Any]]
LoadCallback = Callable[[str], Awaitable[Dict[str, Any]]]


def _empty_draft() -> Dict[str, Any]:
    return {"title": "", "tags": [], "json_file_url": ""}


class SessionEditor:
    """Orchestrates validation, auto-save and explicit save/publish for one draft."""

    def __init__(
        self,
        session_id: Optional[str] = None,
        initial_data: Optional[Dict[str, Any]] = None,
        on_save: Optional[PersistCallback] = None,
        on_publish: Optional[PersistCallback] = None,
        on_auto_save: Optional[PersistCallback] = None,
        load_session: Optional[LoadCallback] = None,
        notifier: Optional[Notifier] = None,
        autosave_delay: float = DEFAULT_AUTOSAVE_DELAY,
        validation_debounce: float = SESSION_FORM_DEBOUNCE,
        on_status_change=None,
    ):
        self.session_id = session_id
        self.initial_data = initial_data
        self.on_save = on_save
        self.on_publish = on_publish
        self.on_auto_save = on_auto_save
        self.load_session = load_session
        self.notifier = notifier or Notifier()

        self.tags_input = ""
        self.is_loading = False
        self.is_saving = False
        self.is_publishing = False

        self.form = FormStateController(
            SESSION_SCHEMA,
            initial_data=_empty_draft(),
            debounce=validation_debounce,
            sanitize_on_change=False,
        )
        self.autosave = AutoSaveCoordinator(
            self._persist_auto_save,
            delay=autosave_delay,
            enabled=session_id is not None,
            notifier=self.notifier,
            on_status_change=on_status_change,
        )

        if initial_data:
            self.hydrate(initial_data)

    @classmethod
    def for_client(cls, client, session_id: Optional[str] = None, **kwargs) -> "SessionEditor":
        """Build an editor whose collaborators call a SessionsApiClient."""

        async def auto_save(sid, snapshot):
            return unwrap(await client.auto_save(sid, snapshot))

        async def persist(sid, payload):
            if sid:
                data = unwrap(await client.update_session(sid, payload))
            else:
                data = unwrap(await client.create_session(payload))
            return data.get("session")

        async def load(sid):
            return unwrap(await client.get_my_session(sid))["session"]

        return cls(
            session_id=session_id,
            on_save=persist,
            on_publish=persist,
            on_auto_save=auto_save,
            load_session=load,
            **kwargs,
        )

    # ==========================================================================
    # STATE
    # ==========================================================================

    @property
    def values(self) -> Dict[str, Any]:
        return self.form.values

    @property
    def errors(self) -> Dict[str, str]:
        return self.form.visible_errors()

    @property
    def autosave_status(self) -> AutoSaveStatus:
        return self.autosave.status

    @property
    def last_saved(self):
        return self.autosave.last_saved

    def snapshot(self) -> Dict[str, Any]:
        values = self.form.values
        return {
            "title": values.get("title") or "",
            "tags": list(values.get("tags") or []),
            "json_file_url": values.get("json_file_url") or "",
        }

    # ==========================================================================
    # LOADING
    # ==========================================================================

    def hydrate(self, record: Dict[str, Any]) -> None:
        tags = list(record.get("tags") or [])
        self.form.set_form_data(
            {
                "title": record.get("title") or "",
                "tags": tags,
                "json_file_url": record.get("json_file_url") or "",
            }
        )
        self.tags_input = ", ".join(tags)

    async def load(self) -> bool:
        """Fetch and hydrate an existing session unless initial data was given."""
        if not self.session_id or self.initial_data or self.load_session is None:
            return False

        self.is_loading = True
        try:
            record = await self.load_session(self.session_id)
        except Exception as e:  # pylint: disable=broad-except
            print__autosave_debug(f"❌ Error fetching session {self.session_id}: {e}")
            self.notifier.error("Failed to load session data")
            return False
        finally:
            self.is_loading = False

        self.hydrate(record)
        return True

    # ==========================================================================
    # INPUT EVENTS
    # ==========================================================================

    def handle_input_change(self, field_name: str, value: Any) -> None:
        self.form.handle_field_change(field_name, value)
        self.autosave.save(self.snapshot())

    def handle_tags_change(self, text: str) -> None:
        self.tags_input = text
        self.form.handle_field_change("tags", parse_tags(text))
        self.autosave.save(self.snapshot())

    def handle_field_blur(self, field_name: str) -> None:
        self.form.handle_field_blur(field_name)

    async def _persist_auto_save(self, snapshot: Dict[str, Any]) -> None:
        if not self.session_id or self.on_auto_save is None:
            return
        await self.on_auto_save(self.session_id, sanitize_form_data(snapshot))

    # ==========================================================================
    # EXPLICIT ACTIONS
    # ==========================================================================

    async def save_draft(self) -> bool:
        return await self._submit("draft")

    async def publish(self) -> bool:
        return await self._submit("published")

    async def _submit(self, status: str) -> bool:
        publishing = status == "published"
        action = "publishing" if publishing else "saving"
        callback = self.on_publish if publishing else self.on_save
        if callback is None:
            raise RuntimeError(f"No handler configured for {action}")

        self.form.mark_all_touched()
        if not self.form.validate_form():
            self.notifier.error(f"Please fix the errors before {action}")
            return False

        existing = self.session_id is not None
        payload = {**sanitize_form_data(self.snapshot()), "status": status}

        flag = "is_publishing" if publishing else "is_saving"
        setattr(self, flag, True)
        try:
            async with self.autosave.exclusive():
                record = await callback(self.session_id, payload)
        finally:
            setattr(self, flag, False)

        # Torn down while the request was in flight
        if not self.autosave.is_alive:
            return True

        if not existing and isinstance(record, dict) and record.get("id"):
            self.session_id = str(record["id"])
            self.autosave.enabled = True
            print__autosave_debug(f"🆕 Adopted session id {self.session_id}")

        if publishing:
            message = "Session updated and published" if existing else "Session published successfully"
        else:
            message = "Draft updated successfully" if existing else "Draft saved successfully"
        self.notifier.success(message)
        return True

    # ==========================================================================
    # PAGE LIFECYCLE
    # ==========================================================================

    async def handle_visibility_change(self, visibility_state: str) -> Optional[bool]:
        if visibility_state != "hidden" or not self.session_id:
            return None
        return await self.autosave.manual_save(self.snapshot())

    async def handle_before_unload(self) -> Optional[str]:
        """Flush the draft; returns a leave warning if a save was in progress."""
        if not self.session_id:
            return None
        warning = LEAVE_WARNING if self.autosave.status == AutoSaveStatus.SAVING else None
        await self.autosave.manual_save(self.snapshot())
        return warning

    def teardown(self) -> None:
        self.autosave.teardown()
        self.form.dispose()
