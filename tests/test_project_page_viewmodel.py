# tests/test_project_page_viewmodel.py
from __future__ import annotations

import json

import pytest

from dataco_admin.models.entities import Task
from dataco_admin.viewmodels.projects_viewmodel import ProjectsViewModel


@pytest.mark.asyncio
async def test_open_loads_project_and_its_tasks(project_vm, fake_api, seeded):
    fake_api.add_task("p2", _id="t9")
    assert await project_vm.open("p1") is True
    assert project_vm.project.name == "Highway campaign"
    assert [t.id for t in project_vm.tasks] == ["t1"]
    (listing,) = fake_api.calls("GET", "/api/tasks")
    assert listing.url.params["projectId"] == "p1"


@pytest.mark.asyncio
async def test_tasks_failure_keeps_project(project_vm, fake_api, seeded):
    fake_api.fail("GET", "/api/tasks")
    await project_vm.open("p1")
    assert project_vm.project is not None
    assert project_vm.tasks == []
    assert project_vm.error == "Failed to load tasks"


@pytest.mark.asyncio
async def test_task_events_are_scoped_to_the_project(project_vm, fake_api, seeded):
    await project_vm.open("p1")

    foreign = {"eventType": "INSERT", "new": {"id": "t5", "projectId": "p2", "title": "Elsewhere"}}
    assert project_vm.handle_task_event(foreign) is False

    local = {"eventType": "INSERT", "new": {"id": "t6", "projectId": "p1", "title": "Here"}}
    assert project_vm.handle_task_event(local) is True

    moved = {"eventType": "UPDATE", "new": {"id": "t1", "projectId": "p2", "title": "Night merges"}}
    assert project_vm.handle_task_event(moved) is True
    assert [t.id for t in project_vm.tasks] == ["t6"]


@pytest.mark.asyncio
async def test_project_delete_event_is_reported(project_vm, fake_api, seeded):
    gone = []
    project_vm.projectDeleted.connect(gone.append)
    await project_vm.open("p1")
    assert project_vm.handle_project_event({"eventType": "DELETE", "old": {"id": "p1"}}) is True
    assert gone == ["p1"]


@pytest.mark.asyncio
async def test_create_task_targets_open_project(project_vm, fake_api, seeded):
    await project_vm.open("p1")
    project_vm.guard.open_create()
    draft = Task(id=None, title="Tunnel exits", dataco_number="DATACO-77", project_id="")

    result = await project_vm.create_task(draft)

    assert result.ok
    body = json.loads(fake_api.calls("POST", "/api/tasks")[0].content)
    assert (body["projectId"], body["datacoNumber"]) == ("p1", "77")
    assert sorted(t.title for t in project_vm.tasks) == ["Night merges", "Tunnel exits"]
    assert project_vm.guard.create_open is False


@pytest.mark.asyncio
async def test_toggle_task_visibility(project_vm, fake_api, seeded):
    await project_vm.open("p1")
    assert (await project_vm.toggle_task_visibility("t1")).ok
    assert fake_api.tasks["t1"]["isVisible"] is False
    assert project_vm.find_task("t1").is_visible is False


@pytest.mark.asyncio
async def test_delete_pending_task(project_vm, fake_api, seeded):
    fake_api.add_subtask("t1", _id="s1")
    await project_vm.open("p1")
    project_vm.guard.request_delete("t1")

    result = await project_vm.delete_task()

    assert result.ok
    assert project_vm.tasks == []
    assert fake_api.subtasks == {}
    assert project_vm.guard.delete_pending is None


@pytest.mark.asyncio
async def test_projects_list_is_sorted_by_name(repos, fake_api):
    fake_api.add_project(_id="p1", name="zebra crossings")
    fake_api.add_project(_id="p2", name="Airport loop")
    vm = ProjectsViewModel(repos[0])
    assert await vm.reload() is True
    assert [p.id for p in vm.projects] == ["p2", "p1"]


@pytest.mark.asyncio
async def test_projects_list_without_session_asks_for_login(repos, session):
    session.clear()
    vm = ProjectsViewModel(repos[0])
    asked = []
    vm.authRequired.connect(lambda: asked.append(True))
    assert await vm.reload() is False
    assert asked == [True]


@pytest.mark.asyncio
async def test_malformed_task_row_sets_page_error(project_vm, fake_api, seeded):
    del fake_api.tasks["t1"]["_id"]
    await project_vm.open("p1")
    assert project_vm.project is not None
    assert project_vm.tasks == []
    assert project_vm.error == "Failed to load tasks"
