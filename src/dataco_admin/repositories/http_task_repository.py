# Rev 0.1.3
from __future__ import annotations
import logging
from typing import List, Optional

from ..api.client import ApiClient, parse_record, parse_records, unwrap
from ..api.errors import ApiError, ServerRejectedError
from ..models.entities import Task

log = logging.getLogger(__name__)


class HttpTaskRepository:
    """
    Task CRUD over /api/tasks.
    Deleting a task removes its subtasks server-side.
    """

    def __init__(self, client: ApiClient):
        self._client = client

    # --------------- reads ---------------
    async def get_task(self, task_id: str) -> Task:
        body = await self._client.get(f"/api/tasks/{task_id}")
        raw = unwrap(body, "task")
        if not raw:
            raise ServerRejectedError(f"Task {task_id} not found")
        return parse_record(raw, Task.from_wire, "task")

    async def list_tasks_for_project(self, project_id: str) -> List[Task]:
        body = await self._client.get("/api/tasks", params={"projectId": project_id})
        return parse_records(unwrap(body, "tasks"), Task.from_wire, "task")

    # --------------- writes ---------------
    async def create_task(self, task: Task) -> Optional[str]:
        body = await self._client.post("/api/tasks", task.to_wire())
        created = unwrap(body, "task")
        if isinstance(created, dict):
            return str(created.get("_id", created.get("id")))
        tid = unwrap(body, "taskId")
        return str(tid) if tid is not None else None

    async def update_task(self, task: Task) -> None:
        await self._client.put(f"/api/tasks/{task.id}", task.to_wire())

    async def delete_task(self, task_id: str) -> None:
        await self._client.delete(f"/api/tasks/{task_id}")

    async def set_task_visibility(self, task_id: str, visible: bool) -> None:
        await self._client.put(f"/api/tasks/{task_id}/visibility", {"isVisible": visible})

    async def recalculate_amount(self, task_id: str) -> bool:
        """Best effort: the server sums subtask amounts into the task. Never raises ApiError."""
        try:
            await self._client.post(f"/api/tasks/{task_id}/calculate-amount")
            return True
        except ApiError as exc:
            log.warning("Amount recalculation for task %s failed: %s", task_id, exc.message)
            return False
