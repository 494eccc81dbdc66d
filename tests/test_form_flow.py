# tests/test_form_flow.py
from __future__ import annotations

import pytest

from dataco_admin.models.entities import Subtask
from dataco_admin.ui.subtask_editor_dialog import type_options
from dataco_admin.ui.window_mode import run_form


def _typed(**kw) -> Subtask:
    base = dict(id=None, task_id="t1", title="Typed by hand", dataco_number="77", amount_needed=2)
    base.update(kw)
    return Subtask(**base)


@pytest.mark.asyncio
async def test_rejected_submission_reopens_form_with_what_was_typed(task_vm, fake_api, seeded):
    await task_vm.open("t1")
    task_vm.guard.open_create()
    fake_api.fail("POST", "/api/subtasks", status=400, body={"success": False, "error": "DATACO exists"})
    typed = _typed()
    drafts, guard_held = [], []

    def open_form(draft):
        drafts.append(draft)
        guard_held.append(task_vm.guard.create_open)
        if draft is not None:
            fake_api.failures.clear()
        return draft or typed

    result = await run_form(open_form, task_vm.create_subtask, release=task_vm.guard.close_create)

    assert result.ok
    assert drafts == [None, typed]
    assert guard_held == [True, True]
    assert [s.title for s in task_vm.subtasks] == ["Typed by hand"]
    assert task_vm.is_user_interacting() is False


@pytest.mark.asyncio
async def test_invalid_submission_reopens_then_cancel_releases_guard(task_vm, fake_api, seeded):
    await task_vm.open("t1")
    task_vm.guard.open_create()
    blank = _typed(title="")
    drafts = []

    def open_form(draft):
        drafts.append(draft)
        return None if draft is not None else blank

    result = await run_form(open_form, task_vm.create_subtask, release=task_vm.guard.close_create)

    assert result is None
    assert drafts == [None, blank]
    assert fake_api.calls("POST", "/api/subtasks") == []
    assert task_vm.guard.create_open is False


@pytest.mark.asyncio
async def test_auth_failure_closes_form(task_vm, fake_api, seeded, session):
    await task_vm.open("t1")
    session.clear()
    opened = []

    def open_form(draft):
        opened.append(draft)
        return _typed()

    result = await run_form(open_form, task_vm.create_subtask)

    assert result.code == "auth_required"
    assert len(opened) == 1


def test_type_options_keep_stored_type():
    assert type_options(("events", "hours"), "loops") == ["events", "hours", "loops"]
    assert type_options(("events", "hours"), "hours") == ["events", "hours"]
    assert type_options(("events", "hours", "loops"), "") == ["events", "hours", "loops"]
