# Rev 0.2.0

"""Pytest fixtures for dataco-admin (Rev 0.2.0)
HTTP goes through httpx.MockTransport backed by FakeApi, an in-memory
stand-in for the admin REST API.
"""
from __future__ import annotations
import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
from PySide6.QtCore import QCoreApplication

from dataco_admin.api.client import ApiClient
from dataco_admin.repositories.http_project_repository import HttpProjectRepository
from dataco_admin.repositories.http_subtask_repository import HttpSubtaskRepository
from dataco_admin.repositories.http_task_repository import HttpTaskRepository
from dataco_admin.services.auth_session import AuthSession
from dataco_admin.viewmodels.page_config import PageConfig
from dataco_admin.viewmodels.project_page_viewmodel import ProjectPageViewModel
from dataco_admin.viewmodels.task_page_viewmodel import TaskPageViewModel

TOKEN = "test-token"
ADMIN_USER = {"id": "u1", "username": "admin", "role": "admin"}


class FakeApi:
    """
    Minimal server: projects/tasks/subtasks held in dicts.
    Task reads answer {data: {task}}, everything else answers bare {key} so both
    response shapes get exercised.
    """

    def __init__(self):
        self.projects: Dict[str, Dict[str, Any]] = {}
        self.tasks: Dict[str, Dict[str, Any]] = {}
        self.subtasks: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []
        self.failures: Dict[Tuple[str, str], Tuple[int, Dict[str, Any]]] = {}
        self.raise_on: Optional[Tuple[str, str]] = None
        self._seq = 0

    # ---- seeding ----
    def _next_id(self, prefix: str) -> str:
        self._seq += 1
        return f"{prefix}{self._seq}"

    def add_project(self, **fields) -> Dict[str, Any]:
        rec = {"_id": fields.pop("_id", None) or self._next_id("p"), "name": "Project", **fields}
        self.projects[rec["_id"]] = rec
        return rec

    def add_task(self, project_id: str, **fields) -> Dict[str, Any]:
        rec = {
            "_id": fields.pop("_id", None) or self._next_id("t"),
            "title": "Task",
            "datacoNumber": "100",
            "description": {"main": "", "howToExecute": ""},
            "projectId": project_id,
            "type": ["events"],
            "locations": [],
            "amountNeeded": 0,
            "targetCar": ["car-1", "car-2"],
            "lidar": False,
            "dayTime": ["day"],
            "priority": 0,
            "isVisible": True,
            **fields,
        }
        self.tasks[rec["_id"]] = rec
        return rec

    def add_subtask(self, task_id: str, **fields) -> Dict[str, Any]:
        rec = {
            "_id": fields.pop("_id", None) or self._next_id("s"),
            "taskId": task_id,
            "title": "Subtask",
            "datacoNumber": "200",
            "type": "events",
            "amountNeeded": 0,
            "labels": [],
            "targetCar": list(self.tasks.get(task_id, {}).get("targetCar", [])),
            "weather": "Clear",
            "scene": "Urban",
            "dayTime": [],
            **fields,
        }
        self.subtasks[rec["_id"]] = rec
        return rec

    # ---- failure injection ----
    def fail(self, method: str, path: str, status: int = 500, body: Optional[Dict[str, Any]] = None) -> None:
        self.failures[(method, path)] = (status, body if body is not None else {"success": False, "error": "boom"})

    def calls(self, method: Optional[str] = None, path_prefix: str = "") -> List[httpx.Request]:
        return [
            r for r in self.requests
            if (method is None or r.method == method) and r.url.path.startswith(path_prefix)
        ]

    # ---- transport ----
    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path
        if self.raise_on == (method, path):
            raise httpx.ConnectError("connection refused", request=request)
        if (method, path) in self.failures:
            status, body = self.failures[(method, path)]
            return httpx.Response(status, json=body)
        if request.headers.get("Authorization") != f"Bearer {TOKEN}" and path != "/api/auth/login":
            return httpx.Response(401, json={"success": False, "error": "Unauthorized access"})
        body = json.loads(request.content) if request.content else None
        return self._route(method, path, request.url.params, body)

    def _route(self, method: str, path: str, params, body) -> httpx.Response:
        ok = lambda **kw: httpx.Response(200, json={"success": True, **kw})  # noqa: E731
        missing = httpx.Response(404, json={"success": False, "error": "Not found"})

        if path == "/api/auth/login" and method == "POST":
            if body and body.get("password") == "secret":
                return ok(token=TOKEN, user=ADMIN_USER)
            return httpx.Response(401, json={"success": False, "error": "Invalid credentials"})

        if path == "/api/projects" and method == "GET":
            return ok(projects=list(self.projects.values()))
        if m := re.fullmatch(r"/api/projects/([^/]+)", path):
            rec = self.projects.get(m.group(1))
            return ok(project=rec) if rec else missing

        if path == "/api/tasks":
            if method == "GET":
                pid = params.get("projectId")
                return ok(tasks=[t for t in self.tasks.values() if t["projectId"] == pid])
            if method == "POST":
                rec = self.add_task(body["projectId"], **{k: v for k, v in body.items() if k != "projectId"})
                return ok(task=rec)
        if m := re.fullmatch(r"/api/tasks/([^/]+)/subtasks", path):
            tid = m.group(1)
            return ok(subtasks=[s for s in self.subtasks.values() if s["taskId"] == tid])
        if m := re.fullmatch(r"/api/tasks/([^/]+)/visibility", path):
            if m.group(1) not in self.tasks:
                return missing
            self.tasks[m.group(1)]["isVisible"] = body["isVisible"]
            return ok()
        if m := re.fullmatch(r"/api/tasks/([^/]+)/calculate-amount", path):
            tid = m.group(1)
            if tid not in self.tasks:
                return missing
            total = sum(s.get("amountNeeded", 0) for s in self.subtasks.values() if s["taskId"] == tid)
            self.tasks[tid]["amountNeeded"] = total
            return ok(message="Task amount recalculated successfully")
        if m := re.fullmatch(r"/api/tasks/([^/]+)", path):
            tid = m.group(1)
            if tid not in self.tasks:
                return missing
            if method == "GET":
                return httpx.Response(200, json={"success": True, "data": {"task": self.tasks[tid]}})
            if method == "PUT":
                self.tasks[tid].update(body)
                return ok()
            if method == "DELETE":
                del self.tasks[tid]
                for sid in [s for s, rec in self.subtasks.items() if rec["taskId"] == tid]:
                    del self.subtasks[sid]
                return ok()

        if path == "/api/subtasks" and method == "POST":
            rec = self.add_subtask(body["taskId"], **{k: v for k, v in body.items() if k != "taskId"})
            return ok(subtask=rec)
        if m := re.fullmatch(r"/api/subtasks/([^/]+)/visibility", path):
            if m.group(1) not in self.subtasks:
                return missing
            self.subtasks[m.group(1)]["isVisible"] = body["isVisible"]
            return ok()
        if m := re.fullmatch(r"/api/subtasks/([^/]+)", path):
            sid = m.group(1)
            if sid not in self.subtasks:
                return missing
            if method == "GET":
                return ok(subtask=self.subtasks[sid])
            if method == "PUT":
                self.subtasks[sid].update(body)
                return ok()
            if method == "DELETE":
                del self.subtasks[sid]
                return httpx.Response(204)

        return missing


@pytest.fixture(scope="session", autouse=True)
def qt_core_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture()
def session(tmp_path: Path) -> AuthSession:
    s = AuthSession(tmp_path / "session.json")
    s.store(TOKEN, ADMIN_USER)
    return s


@pytest.fixture()
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture()
def client(fake_api: FakeApi, session: AuthSession) -> ApiClient:
    return ApiClient(
        "http://api.test",
        session,
        transport=httpx.MockTransport(fake_api.handler),
        clock=lambda: 1_700_000_000.123,
    )


@pytest.fixture()
def repos(client: ApiClient):
    return (
        HttpProjectRepository(client),
        HttpTaskRepository(client),
        HttpSubtaskRepository(client),
    )


@pytest.fixture()
def seeded(fake_api: FakeApi):
    project = fake_api.add_project(_id="p1", name="Highway campaign")
    task = fake_api.add_task("p1", _id="t1", title="Night merges", amountNeeded=0)
    return project, task


@pytest.fixture()
def task_vm(repos) -> TaskPageViewModel:
    projects, tasks, subtasks = repos
    return TaskPageViewModel(tasks, subtasks, projects, PageConfig(recalculate_amount=True))


@pytest.fixture()
def project_vm(repos) -> ProjectPageViewModel:
    projects, tasks, _ = repos
    return ProjectPageViewModel(projects, tasks, PageConfig())
