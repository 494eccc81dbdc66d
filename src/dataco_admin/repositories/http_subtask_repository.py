# Rev 0.1.2
from __future__ import annotations
from typing import List, Optional

from ..api.client import ApiClient, parse_records, unwrap
from ..models.entities import Subtask


class HttpSubtaskRepository:
    """
    Subtask CRUD over /api/subtasks.
    target_car is inherited from the parent task on create and never sent on update.
    """

    def __init__(self, client: ApiClient):
        self._client = client

    async def list_subtasks_for_task(self, task_id: str) -> List[Subtask]:
        body = await self._client.get(f"/api/tasks/{task_id}/subtasks")
        return parse_records(unwrap(body, "subtasks"), Subtask.from_wire, "subtask")

    async def create_subtask(self, subtask: Subtask) -> Optional[str]:
        body = await self._client.post("/api/subtasks", subtask.to_wire())
        created = unwrap(body, "subtask")
        if isinstance(created, dict):
            return str(created.get("_id", created.get("id")))
        sid = unwrap(body, "subtaskId")
        return str(sid) if sid is not None else None

    async def update_subtask(self, subtask: Subtask) -> None:
        await self._client.put(f"/api/subtasks/{subtask.id}", subtask.to_wire(include_target_car=False))

    async def delete_subtask(self, subtask_id: str) -> None:
        await self._client.delete(f"/api/subtasks/{subtask_id}")

    async def set_subtask_visibility(self, subtask_id: str, visible: bool) -> None:
        await self._client.put(f"/api/subtasks/{subtask_id}/visibility", {"isVisible": visible})
