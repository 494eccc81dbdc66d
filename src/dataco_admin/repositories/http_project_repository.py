# Rev 0.1.1
from __future__ import annotations
from typing import List

from ..api.client import ApiClient, parse_record, parse_records, unwrap
from ..api.errors import ServerRejectedError
from ..models.entities import Project


class HttpProjectRepository:
    """Projects are created out-of-band; this client only reads them."""

    def __init__(self, client: ApiClient):
        self._client = client

    async def list_projects(self) -> List[Project]:
        body = await self._client.get("/api/projects")
        return parse_records(unwrap(body, "projects"), Project.from_wire, "project")

    async def get_project(self, project_id: str) -> Project:
        body = await self._client.get(f"/api/projects/{project_id}")
        raw = unwrap(body, "project")
        if not raw:
            raise ServerRejectedError(f"Project {project_id} not found")
        return parse_record(raw, Project.from_wire, "project")
