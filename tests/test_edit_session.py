# tests/test_edit_session.py

from __future__ import annotations

from datetime import date

from taskflow.tasks.edit_session import EditMode, EditSession
from taskflow.tasks.task_models import Priority, TaskForm

from .fakes import make_task


def test_starts_in_create_mode_with_default_form() -> None:
    session = EditSession()
    assert session.mode == EditMode.CREATE
    assert session.form == TaskForm()
    assert session.describe() == "idle-create"


def test_start_prefills_every_field() -> None:
    task = make_task(5, "Pay rent", description="landlord", due_date=date(2024, 3, 1), priority=Priority.HIGH)
    session = EditSession()

    session.start(task)

    assert session.mode == EditMode.EDITING
    assert session.editing_id == 5
    assert session.describe() == "editing(5)"
    assert session.form == TaskForm(
        title="Pay rent", description="landlord", due_date="2024-03-01", priority=Priority.HIGH
    )


def test_second_start_silently_replaces_target() -> None:
    session = EditSession()
    session.start(make_task(1, "first"))
    session.form.title = "unsaved change"

    session.start(make_task(2, "second"))

    assert session.editing_id == 2
    assert session.form.title == "second"


def test_cancel_resets_form_and_mode() -> None:
    session = EditSession()
    session.start(make_task(1, "x", description="y", priority=Priority.LOW))

    session.cancel()

    assert session.mode == EditMode.CREATE
    assert session.form.is_blank()


def test_finish_in_create_mode_stays_in_create_mode() -> None:
    session = EditSession()
    session.form.title = "draft"

    session.finish()

    assert session.mode == EditMode.CREATE
    assert session.form.title == ""
