# Rev 0.2.0
from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any, List, Optional, Tuple

from PySide6.QtCore import Signal

from ..api.errors import ApiError
from ..models.entities import Project, Task
from ..models.events import parse_event
from ..repositories.http_project_repository import HttpProjectRepository
from ..repositories.http_task_repository import HttpTaskRepository
from ..services.field_rules import sanitize_dataco, validate_required
from .interaction_guard import InteractionGuard
from .page_config import PageConfig
from .page_viewmodel import MutationResult, PageViewModel, Snapshot
from .realtime_reducer import apply_event

log = logging.getLogger(__name__)


class ProjectPageViewModel(PageViewModel):
    """
    VM for one Project and its Tasks.
    Emits:
      - projectLoaded(project: Project)
      - tasksReloaded(rows: list[Task])
      - projectDeleted(project_id: str)
    """

    projectLoaded = Signal(object)
    tasksReloaded = Signal(object)
    projectDeleted = Signal(str)

    def __init__(
        self,
        projects_repo: HttpProjectRepository,
        tasks_repo: HttpTaskRepository,
        config: Optional[PageConfig] = None,
    ):
        super().__init__(config)
        self._projects = projects_repo
        self._tasks = tasks_repo
        self.project_id: Optional[str] = None
        self.project: Optional[Project] = None
        self.tasks: List[Task] = []

    async def open(self, project_id: str) -> bool:
        self.project_id = project_id
        self.project, self.tasks = None, []
        self.guard = InteractionGuard()
        return await self.force_refresh()

    # ---- fetch ----
    async def _read(self) -> Tuple[Snapshot, List[str]]:
        snapshot: Snapshot = {}
        errors: List[str] = []
        if self.project_id is None:
            return snapshot, errors

        project_res, tasks_res = await asyncio.gather(
            self._projects.get_project(self.project_id),
            self._tasks.list_tasks_for_project(self.project_id),
            return_exceptions=True,
        )
        for key, res in (("project", project_res), ("tasks", tasks_res)):
            if isinstance(res, ApiError):
                self._read_failed(key, res, errors)
            elif isinstance(res, BaseException):
                raise res
            else:
                snapshot[key] = res
        return snapshot, errors

    def _apply(self, snapshot: Snapshot) -> None:
        if "project" in snapshot:
            self.project = snapshot["project"]
            self.projectLoaded.emit(self.project)
        if "tasks" in snapshot:
            self.tasks = list(snapshot["tasks"])
            self.tasksReloaded.emit(self.tasks)

    # ---- realtime ----
    def handle_task_event(self, payload: Any) -> bool:
        try:
            event = parse_event(payload, Task.from_wire)
        except ValueError as exc:
            log.warning("Dropping malformed task event: %s", exc)
            return False
        if self.is_user_interacting():
            log.debug("Dropping task %s event, user is interacting", event.kind)
            return False

        nxt = apply_event(self.tasks, event, in_scope=lambda t: t.project_id == self.project_id)
        if nxt == self.tasks:
            return False
        self.tasks = nxt
        self.tasksReloaded.emit(self.tasks)
        return True

    def handle_project_event(self, payload: Any) -> bool:
        try:
            event = parse_event(payload, Project.from_wire)
        except ValueError as exc:
            log.warning("Dropping malformed project event: %s", exc)
            return False
        if self.is_user_interacting():
            log.debug("Dropping project %s event, user is interacting", event.kind)
            return False

        if event.kind == "update" and event.record and event.record.id == self.project_id:
            self.project = event.record
            self.projectLoaded.emit(self.project)
            return True
        if event.kind == "delete" and event.old and event.old.id == self.project_id:
            self.projectDeleted.emit(self.project_id)
            return True
        return False

    # ---- forms ----
    def new_task_template(self) -> Task:
        return Task(id=None, title="", dataco_number="", project_id=self.project_id or "")

    def find_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    # ---- commands ----
    async def create_task(self, task: Task) -> MutationResult:
        if self.project_id is None:
            return self._invalid(["No project selected"])
        problems = validate_required(task.title, task.dataco_number)
        if problems:
            return self._invalid(problems)
        new_task = dataclasses.replace(
            task, project_id=self.project_id, dataco_number=sanitize_dataco(task.dataco_number)
        )
        return await self._run_mutation(
            lambda: self._tasks.create_task(new_task),
            failure_message="Failed to create task",
            success_message="Task created",
            on_success=self.guard.close_create,
        )

    async def delete_task(self, task_id: Optional[str] = None) -> MutationResult:
        task_id = task_id or self.guard.delete_pending
        if not task_id:
            return self._invalid(["No task selected"])
        return await self._run_mutation(
            lambda: self._tasks.delete_task(task_id),
            failure_message="Failed to delete task",
            success_message="Task deleted",
            on_success=self.guard.cancel_delete,
        )

    async def toggle_task_visibility(self, task_id: str) -> MutationResult:
        task = self.find_task(task_id)
        visible = not (task.is_visible if task else True)
        return await self._run_mutation(
            lambda: self._tasks.set_task_visibility(task_id, visible),
            failure_message="Failed to update task visibility",
            success_message="Task visibility updated",
        )
