# Rev 0.3.1 — one VM for every task-management page variant
from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any, List, Optional, Tuple

from PySide6.QtCore import Signal

from ..api.errors import ApiError
from ..models.entities import Project, Subtask, Task
from ..models.events import parse_event
from ..repositories.http_project_repository import HttpProjectRepository
from ..repositories.http_subtask_repository import HttpSubtaskRepository
from ..repositories.http_task_repository import HttpTaskRepository
from ..services.field_rules import sanitize_dataco, validate_required
from .interaction_guard import InteractionGuard
from .page_config import PageConfig
from .page_viewmodel import MutationResult, PageViewModel, Snapshot
from .realtime_reducer import apply_event

log = logging.getLogger(__name__)


class TaskPageViewModel(PageViewModel):
    """
    VM for a single Task, its Project and its Subtasks.
    Emits:
      - taskLoaded(task: Task)
      - projectLoaded(project: Project | None)
      - subtasksReloaded(rows: list[Subtask])
      - taskDeleted(project_id: str)   task is gone; navigate back to its project
    """

    taskLoaded = Signal(object)
    projectLoaded = Signal(object)
    subtasksReloaded = Signal(object)
    taskDeleted = Signal(str)

    def __init__(
        self,
        tasks_repo: HttpTaskRepository,
        subtasks_repo: HttpSubtaskRepository,
        projects_repo: HttpProjectRepository,
        config: Optional[PageConfig] = None,
    ):
        super().__init__(config)
        self._tasks = tasks_repo
        self._subs = subtasks_repo
        self._projects = projects_repo
        self.task_id: Optional[str] = None
        self.task: Optional[Task] = None
        self.project: Optional[Project] = None
        self.subtasks: List[Subtask] = []

    # ---- lifecycle ----
    async def open(self, task_id: str) -> bool:
        self.task_id = task_id
        self.task, self.project, self.subtasks = None, None, []
        self.guard = InteractionGuard()
        return await self.force_refresh()

    # ---- fetch ----
    async def _read(self) -> Tuple[Snapshot, List[str]]:
        snapshot: Snapshot = {}
        errors: List[str] = []
        if self.task_id is None:
            return snapshot, errors

        try:
            task = await self._tasks.get_task(self.task_id)
        except ApiError as exc:
            self._read_failed("task", exc, errors)
            return snapshot, errors
        snapshot["task"] = task

        async def no_project() -> None:
            return None

        project_res, subs_res = await asyncio.gather(
            self._projects.get_project(task.project_id) if task.project_id else no_project(),
            self._subs.list_subtasks_for_task(self.task_id),
            return_exceptions=True,
        )
        for key, res in (("project", project_res), ("subtasks", subs_res)):
            if isinstance(res, ApiError):
                self._read_failed(key, res, errors)
            elif isinstance(res, BaseException):
                raise res
            else:
                snapshot[key] = res
        return snapshot, errors

    def _apply(self, snapshot: Snapshot) -> None:
        if "task" in snapshot:
            self.task = snapshot["task"]
            self.taskLoaded.emit(self.task)
        if "project" in snapshot:
            self.project = snapshot["project"]
            self.projectLoaded.emit(self.project)
        if "subtasks" in snapshot:
            self.subtasks = list(snapshot["subtasks"])
            self.subtasksReloaded.emit(self.subtasks)

    # ---- realtime ----
    def handle_subtask_event(self, payload: Any) -> bool:
        """Apply a realtime subtask change. Returns True if the collection was updated."""
        try:
            event = parse_event(payload, Subtask.from_wire)
        except ValueError as exc:
            log.warning("Dropping malformed subtask event: %s", exc)
            return False
        if self.is_user_interacting():
            log.debug("Dropping subtask %s event, user is interacting", event.kind)
            return False

        nxt = apply_event(self.subtasks, event, in_scope=lambda s: s.task_id == self.task_id)
        if nxt == self.subtasks:
            return False
        self.subtasks = nxt
        self.subtasksReloaded.emit(self.subtasks)
        return True

    def handle_task_event(self, payload: Any) -> bool:
        try:
            event = parse_event(payload, Task.from_wire)
        except ValueError as exc:
            log.warning("Dropping malformed task event: %s", exc)
            return False
        if self.is_user_interacting():
            log.debug("Dropping task %s event, user is interacting", event.kind)
            return False

        if event.kind == "update" and event.record and event.record.id == self.task_id:
            self.task = event.record
            self.taskLoaded.emit(self.task)
            return True
        if event.kind == "delete" and event.old and event.old.id == self.task_id:
            self.taskDeleted.emit(self.task.project_id if self.task else "")
            return True
        return False

    # ---- forms ----
    def new_subtask_template(self) -> Subtask:
        """Blank subtask for the create form; target_car comes from the parent task."""
        task = self.task
        return Subtask(
            id=None,
            task_id=self.task_id or "",
            title="",
            dataco_number="",
            target_car=list(task.target_car) if task else [],
            day_time=list(task.day_time) if task else [],
        )

    def find_subtask(self, subtask_id: str) -> Optional[Subtask]:
        return next((s for s in self.subtasks if s.id == subtask_id), None)

    # ---- subtask commands ----
    async def create_subtask(self, subtask: Subtask) -> MutationResult:
        if self.task is None:
            return self._invalid(["Task is not loaded"])
        problems = self._check_subtask(subtask)
        if problems:
            return self._invalid(problems)

        new_sub = dataclasses.replace(
            subtask,
            task_id=self.task.id,
            dataco_number=sanitize_dataco(subtask.dataco_number),
            target_car=list(self.task.target_car),
        )
        task_id = self.task.id

        async def action():
            await self._subs.create_subtask(new_sub)
            await self._recalculate(task_id)

        return await self._run_mutation(
            action,
            failure_message="Failed to create subtask",
            success_message="Subtask created",
            on_success=self.guard.close_create,
        )

    async def update_subtask(self, subtask: Subtask) -> MutationResult:
        current = self.find_subtask(subtask.id) if subtask.id else None
        problems = self._check_subtask(subtask, stored_type=current.type if current else None)
        if problems:
            return self._invalid(problems)
        updated = dataclasses.replace(
            subtask,
            dataco_number=sanitize_dataco(subtask.dataco_number),
            target_car=list(current.target_car) if current else list(subtask.target_car),
        )
        task_id = self.task_id

        async def action():
            await self._subs.update_subtask(updated)
            await self._recalculate(task_id)

        return await self._run_mutation(
            action,
            failure_message="Failed to update subtask",
            success_message="Subtask updated",
            on_success=self.guard.end_edit,
        )

    async def delete_subtask(self, subtask_id: Optional[str] = None) -> MutationResult:
        subtask_id = subtask_id or self.guard.delete_pending
        if not subtask_id:
            return self._invalid(["No subtask selected"])
        task_id = self.task_id

        async def action():
            await self._subs.delete_subtask(subtask_id)
            await self._recalculate(task_id)

        return await self._run_mutation(
            action,
            failure_message="Failed to delete subtask",
            success_message="Subtask deleted",
            on_success=self.guard.cancel_delete,
        )

    async def toggle_subtask_visibility(self, subtask_id: str) -> MutationResult:
        sub = self.find_subtask(subtask_id)
        visible = not (sub.is_visible if sub and sub.is_visible is not None else True)
        return await self._run_mutation(
            lambda: self._subs.set_subtask_visibility(subtask_id, visible),
            failure_message="Failed to update subtask visibility",
            success_message="Subtask visibility updated",
        )

    # ---- task commands ----
    async def update_task(self, task: Task) -> MutationResult:
        problems = validate_required(task.title, task.dataco_number)
        if problems:
            return self._invalid(problems)
        updated = dataclasses.replace(task, dataco_number=sanitize_dataco(task.dataco_number))
        return await self._run_mutation(
            lambda: self._tasks.update_task(updated),
            failure_message="Failed to update task",
            success_message="Task updated",
            on_success=self.guard.end_edit,
        )

    async def delete_task(self) -> MutationResult:
        if self.task_id is None:
            return self._invalid(["No task loaded"])
        project_id = self.task.project_id if self.task else ""

        def gone():
            self.guard.cancel_delete()
            self.taskDeleted.emit(project_id)

        return await self._run_mutation(
            lambda: self._tasks.delete_task(self.task_id),
            failure_message="Failed to delete task",
            success_message="Task deleted",
            on_success=gone,
            refresh=False,
        )

    async def toggle_task_visibility(self) -> MutationResult:
        if self.task is None:
            return self._invalid(["Task is not loaded"])
        task_id, visible = self.task.id, not self.task.is_visible
        return await self._run_mutation(
            lambda: self._tasks.set_task_visibility(task_id, visible),
            failure_message="Failed to update task visibility",
            success_message="Task visibility updated",
        )

    # ---- internals ----
    def _check_subtask(self, subtask: Subtask, stored_type: Optional[str] = None) -> List[str]:
        # an existing record may keep a type this page no longer offers
        problems = validate_required(subtask.title, subtask.dataco_number)
        if subtask.type not in self.config.subtask_types and subtask.type != stored_type:
            problems.append(f"Unsupported subtask type {subtask.type!r}")
        return problems

    async def _recalculate(self, task_id: Optional[str]) -> None:
        # task_id is captured before the request; open() may have moved the page on
        if self.config.recalculate_amount and task_id:
            await self._tasks.recalculate_amount(task_id)
