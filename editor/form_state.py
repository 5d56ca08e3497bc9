"""
MODULE_DESCRIPTION: Form-State Controller - Values, Errors and Touched Tracking

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

FormStateController owns the editable state of one form: current values, the
field -> message error map, the set of touched fields and an is_validating flag.
It applies the shared validation schema in two modes:

    - real-time: debounced, only for fields the user has already touched
    - synchronous: validate_field / validate_form, used on blur and before submit

===================================================================================
CHANGE FLOW
===================================================================================

handle_field_change(field, value)
    1. set_field_value
        - sanitize the value (sanitize_on_change)
        - store it and optimistically drop the field's previous error
        - if the field is already touched, (re)arm the debounced validation
    2. mark the field touched

The touch happens after the value is stored, so the very first edit of a fresh
field never schedules validation. Feedback starts with the second edit or with
the first blur.

handle_field_blur(field)
    - mark touched, then validate that single field right away (validate_on_blur)

Callers must run validate_form() before submitting; is_valid only reflects the
errors currently in the map, which may lag behind a pending debounce.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Set, Union

from api.utils.debug import print__validation_debug
from editor.timers import Debouncer
from editor.validation import (
    ValidationSchema,
    sanitize_form_data,
    sanitize_value,
    validate_field_real_time,
)
from editor.validation import validate_form as run_schema

DEFAULT_DEBOUNCE = 0.3
SESSION_FORM_DEBOUNCE = float(os.environ.get("VALIDATION_DEBOUNCE_SECONDS", "0.5"))


@dataclass
class FormState:
    """Snapshot of a form at one point in time."""

    values: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    touched: Set[str] = field(default_factory=set)
    is_validating: bool = False

    @property
    def is_valid(self) -> bool:
        return not self.errors


class FormStateController:
    """Controller for one form instance bound to a validation schema."""

    def __init__(
        self,
        schema: ValidationSchema,
        initial_data: Optional[Mapping[str, Any]] = None,
        validate_on_change: bool = True,
        validate_on_blur: bool = True,
        debounce: float = DEFAULT_DEBOUNCE,
        sanitize_on_change: bool = True,
    ):
        self.schema = schema
        self.initial_data: Dict[str, Any] = dict(initial_data or {})
        self.validate_on_change = validate_on_change
        self.validate_on_blur = validate_on_blur
        self.sanitize_on_change = sanitize_on_change

        self.values: Dict[str, Any] = dict(self.initial_data)
        self.errors: Dict[str, str] = {}
        self.touched: Set[str] = set()
        self.is_validating = False

        self._debouncer = Debouncer(debounce)
        self._disposed = False

    # ==========================================================================
    # STATE ACCESS
    # ==========================================================================

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def state(self) -> FormState:
        return FormState(
            values=dict(self.values),
            errors=dict(self.errors),
            touched=set(self.touched),
            is_validating=self.is_validating,
        )

    def visible_errors(self) -> Dict[str, str]:
        """Errors of touched fields only, the ones a form would display."""
        return {name: msg for name, msg in self.errors.items() if name in self.touched}

    # ==========================================================================
    # VALUE UPDATES
    # ==========================================================================

    def set_form_data(
        self,
        data: Union[Mapping[str, Any], Callable[[Dict[str, Any]], Mapping[str, Any]]],
    ) -> None:
        """Replace all values; ``data`` may be a mapping or a function of the old values."""
        new_data = data(dict(self.values)) if callable(data) else data
        new_data = dict(new_data)
        self.values = sanitize_form_data(new_data) if self.sanitize_on_change else new_data

    def set_field_value(self, field_name: str, value: Any) -> None:
        if self.sanitize_on_change:
            value = sanitize_value(value)
        self.values[field_name] = value

        # Clear the stale error while the user is still editing
        self.errors.pop(field_name, None)

        if self.validate_on_change and field_name in self.touched and not self._disposed:
            self.is_validating = True
            self._debouncer.schedule(self._run_debounced_validation)

    def handle_field_change(self, field_name: str, value: Any) -> None:
        self.set_field_value(field_name, value)
        self.touched.add(field_name)

    def handle_field_blur(self, field_name: str) -> None:
        self.touched.add(field_name)
        if self.validate_on_blur:
            self.validate_field(field_name)

    # ==========================================================================
    # ERRORS
    # ==========================================================================

    def set_field_error(self, field_name: str, error: Optional[str]) -> None:
        if error:
            self.errors[field_name] = error
        else:
            self.errors.pop(field_name, None)

    def set_errors(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)

    def clear_errors(self) -> None:
        self.errors = {}

    def clear_field_error(self, field_name: str) -> None:
        self.errors.pop(field_name, None)

    # ==========================================================================
    # VALIDATION
    # ==========================================================================

    def validate_field(self, field_name: str) -> Optional[str]:
        error = validate_field_real_time(
            field_name, self.values.get(field_name), self.schema, self.values
        )
        self.set_field_error(field_name, error)
        return error

    def validate_form(self) -> bool:
        """Synchronous full pass; replaces the error map."""
        self._debouncer.cancel()
        self.is_validating = False
        result = run_schema(self.values, self.schema)
        self.errors = result.errors
        return result.is_valid

    def _run_debounced_validation(self) -> None:
        if self._disposed:
            return
        for field_name in self.schema:
            if field_name in self.touched:
                self.validate_field(field_name)
        self.is_validating = False
        print__validation_debug(f"🔍 Debounced validation finished: {self.errors}")

    # ==========================================================================
    # TOUCH TRACKING & RESET
    # ==========================================================================

    def mark_field_touched(self, field_name: str) -> None:
        self.touched.add(field_name)

    def mark_all_touched(self) -> None:
        self.touched = set(self.schema)

    def reset_form(self, new_data: Optional[Mapping[str, Any]] = None) -> None:
        self._debouncer.cancel()
        self.values = {**self.initial_data, **dict(new_data or {})}
        self.errors = {}
        self.touched = set()
        self.is_validating = False

    def dispose(self) -> None:
        """Cancel the pending debounce; later edits no longer schedule validation."""
        self._disposed = True
        self._debouncer.cancel()
        self.is_validating = False
