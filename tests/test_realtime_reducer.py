# tests/test_realtime_reducer.py
from __future__ import annotations

import pytest

from dataco_admin.models.entities import Subtask, Task
from dataco_admin.models.events import RealtimeEvent, parse_event
from dataco_admin.viewmodels.realtime_reducer import apply_event


def _sub(sid: str, title: str = "S", task_id: str = "t1") -> Subtask:
    return Subtask(id=sid, task_id=task_id, title=title, dataco_number="1")


@pytest.fixture()
def rows():
    return [_sub("a"), _sub("b"), _sub("c")]


def test_insert_appends_new_record(rows):
    out = apply_event(rows, RealtimeEvent("insert", record=_sub("d")))
    assert [s.id for s in out] == ["a", "b", "c", "d"]


def test_insert_is_idempotent(rows):
    ev = RealtimeEvent("insert", record=_sub("d"))
    once = apply_event(rows, ev)
    twice = apply_event(once, ev)
    assert twice == once
    assert [s.id for s in twice].count("d") == 1


def test_insert_existing_id_keeps_original(rows):
    out = apply_event(rows, RealtimeEvent("insert", record=_sub("b", title="dup")))
    assert out == rows


def test_update_replaces_in_place(rows):
    out = apply_event(rows, RealtimeEvent("update", record=_sub("b", title="renamed")))
    assert [s.id for s in out] == ["a", "b", "c"]
    assert out[1].title == "renamed"


@pytest.mark.parametrize(
    "event",
    [
        RealtimeEvent("update", record=_sub("zz", title="ghost")),
        RealtimeEvent("delete", old=_sub("zz")),
    ],
)
def test_absent_update_or_delete_is_noop(rows, event):
    assert apply_event(rows, event) == rows


def test_delete_removes_matching_old_record(rows):
    out = apply_event(rows, RealtimeEvent("delete", old=_sub("a")))
    assert [s.id for s in out] == ["b", "c"]


def test_input_collection_is_not_mutated(rows):
    before = list(rows)
    apply_event(rows, RealtimeEvent("insert", record=_sub("d")))
    apply_event(rows, RealtimeEvent("delete", old=_sub("a")))
    assert rows == before


def test_scope_ignores_foreign_insert_and_drops_moved_update():
    tasks = [Task(id="t1", title="A", dataco_number="1", project_id="p1")]
    in_p1 = lambda t: t.project_id == "p1"  # noqa: E731

    foreign = Task(id="t2", title="B", dataco_number="2", project_id="p2")
    assert apply_event(tasks, RealtimeEvent("insert", record=foreign), in_scope=in_p1) == tasks

    moved = Task(id="t1", title="A", dataco_number="1", project_id="p2")
    assert apply_event(tasks, RealtimeEvent("update", record=moved), in_scope=in_p1) == []


# --- parse_event at the subscription boundary -------------------------------

def test_parse_event_accepts_supabase_shape():
    ev = parse_event({"eventType": "INSERT", "new": {"id": "s9", "taskId": "t1", "title": "x"}, "old": {}},
                     Subtask.from_wire)
    assert ev.kind == "insert"
    assert ev.record.id == "s9"
    assert ev.old is None


@pytest.mark.parametrize(
    "payload",
    [
        None,
        "INSERT",
        {"eventType": "TRUNCATE"},
        {"eventType": "INSERT", "new": None},
        {"eventType": "UPDATE", "new": {"title": "no id"}},
        {"eventType": "DELETE", "new": {"_id": "s1"}},
    ],
)
def test_parse_event_rejects_malformed(payload):
    with pytest.raises(ValueError):
        parse_event(payload, Subtask.from_wire)
