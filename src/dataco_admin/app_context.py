# dataco-admin application context
# Rev 0.1.1

from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from .api.client import ApiClient
from .repositories.http_auth_repository import HttpAuthRepository
from .repositories.http_project_repository import HttpProjectRepository
from .repositories.http_subtask_repository import HttpSubtaskRepository
from .repositories.http_task_repository import HttpTaskRepository
from .services.auth_session import AuthSession
from .viewmodels.page_config import PageConfig

log = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Central container for shared app resources, built once at startup."""
    settings: Dict[str, Any]
    session: AuthSession
    client: ApiClient
    auth: HttpAuthRepository
    projects: HttpProjectRepository
    tasks: HttpTaskRepository
    subtasks: HttpSubtaskRepository
    page_config: PageConfig

    @classmethod
    def create(
        cls,
        settings: Dict[str, Any],
        *,
        session_path: Optional[Path] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "AppContext":
        session = AuthSession(session_path)
        api = settings["api"]
        client = ApiClient(api["base_url"], session, timeout=float(api.get("timeout", 15.0)), transport=transport)
        log.info("AppContext initialized with API=%s", api["base_url"])
        return cls(
            settings=settings,
            session=session,
            client=client,
            auth=HttpAuthRepository(client),
            projects=HttpProjectRepository(client),
            tasks=HttpTaskRepository(client),
            subtasks=HttpSubtaskRepository(client),
            page_config=PageConfig.from_settings(settings),
        )

    async def aclose(self) -> None:
        await self.client.aclose()
