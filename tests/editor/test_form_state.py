"""
Tests for FormStateController: sanitizing updates, touched tracking and
debounced validation.
"""

import asyncio

import pytest

from editor.form_state import FormStateController
from editor.validation import REGISTER_SCHEMA, SESSION_SCHEMA

DEBOUNCE = 0.05


def make_controller(**kwargs):
    return FormStateController(
        SESSION_SCHEMA,
        initial_data={"title": "", "tags": [], "json_file_url": ""},
        debounce=DEBOUNCE,
        **kwargs,
    )


def test_blur_validates_immediately():
    form = make_controller()
    form.set_field_value("title", "ab")
    assert form.errors == {}

    form.handle_field_blur("title")
    assert form.errors == {"title": "Title must be at least 3 characters long"}
    assert form.visible_errors() == form.errors


def test_change_sanitizes_and_clears_stale_error():
    form = make_controller()
    form.set_field_error("title", "Title is required")

    form.handle_field_change("title", "  <b>Calm</b>   flow ")
    assert form.values["title"] == "bCalm/b flow"
    assert "title" not in form.errors
    assert "title" in form.touched


def test_sanitize_can_be_disabled():
    form = make_controller(sanitize_on_change=False)
    form.set_field_value("title", "  raw  ")
    assert form.values["title"] == "  raw  "


@pytest.mark.asyncio
async def test_debounced_validation_runs_for_touched_fields():
    form = make_controller()
    form.handle_field_change("title", "a")  # first change marks the field touched
    form.handle_field_change("title", "ab")
    assert form.is_validating is True
    assert form.errors == {}

    await asyncio.sleep(DEBOUNCE * 3)
    assert form.errors == {"title": "Title must be at least 3 characters long"}
    assert form.is_validating is False


@pytest.mark.asyncio
async def test_debounce_restarts_and_uses_latest_value():
    form = make_controller()
    form.mark_field_touched("title")
    form.handle_field_change("title", "ab")
    await asyncio.sleep(DEBOUNCE / 2)
    form.handle_field_change("title", "Evening Calm")

    await asyncio.sleep(DEBOUNCE * 3)
    assert form.errors == {}


@pytest.mark.asyncio
async def test_untouched_fields_are_not_validated_by_debounce():
    form = make_controller()
    form.mark_field_touched("json_file_url")
    form.set_field_value("json_file_url", "not a url")

    await asyncio.sleep(DEBOUNCE * 3)
    assert "title" not in form.errors
    assert form.errors == {"json_file_url": "Please provide a valid URL"}


@pytest.mark.asyncio
async def test_validate_form_cancels_pending_debounce():
    form = make_controller()
    form.mark_field_touched("title")
    form.handle_field_change("title", "Evening Calm")
    form.set_field_error("json_file_url", "stale")

    assert form.validate_form() is True
    assert form.errors == {}
    assert form.is_validating is False

    await asyncio.sleep(DEBOUNCE * 3)
    assert form.errors == {}


def test_validate_form_reports_every_invalid_field():
    form = make_controller()
    form.set_form_data({"title": "", "tags": ["ok", "bad!"], "json_file_url": "ftp://x.org"})
    assert form.validate_form() is False
    assert set(form.errors) == {"title", "tags", "json_file_url"}

    # Errors exist but only touched ones are shown
    assert form.visible_errors() == {}
    form.mark_all_touched()
    assert set(form.visible_errors()) == {"title", "tags", "json_file_url"}


def test_confirm_password_compares_with_current_form_values():
    form = FormStateController(REGISTER_SCHEMA, debounce=DEBOUNCE)
    form.set_field_value("password", "Secret123")
    form.set_field_value("confirm_password", "Secret124")
    assert form.validate_field("confirm_password") == "Passwords do not match"

    form.set_field_value("confirm_password", "Secret123")
    assert form.validate_field("confirm_password") is None


def test_set_form_data_accepts_updater_function():
    form = make_controller()
    form.set_form_data(lambda old: {**old, "title": " Deep  Rest "})
    assert form.values["title"] == "Deep Rest"
    assert form.values["tags"] == []


def test_reset_form_restores_initial_data():
    form = make_controller()
    form.handle_field_change("title", "Evening Calm")
    form.set_errors({"title": "x"})

    form.reset_form({"json_file_url": "https://example.com/a.json"})
    assert form.values == {
        "title": "",
        "tags": [],
        "json_file_url": "https://example.com/a.json",
    }
    assert form.errors == {}
    assert form.touched == set()


@pytest.mark.asyncio
async def test_dispose_stops_pending_and_future_validation():
    form = make_controller()
    form.mark_field_touched("title")
    form.handle_field_change("title", "ab")
    form.dispose()

    form.handle_field_change("title", "a")
    await asyncio.sleep(DEBOUNCE * 3)
    assert form.errors == {}
    assert form.is_validating is False


def test_state_snapshot_is_a_copy():
    form = make_controller()
    form.handle_field_change("title", "Evening Calm")
    state = form.state
    state.values["title"] = "changed"
    state.touched.add("tags")

    assert form.values["title"] == "Evening Calm"
    assert form.touched == {"title"}
    assert state.is_valid is True
