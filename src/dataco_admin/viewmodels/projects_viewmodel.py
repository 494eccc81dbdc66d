# Rev 0.1.2
# src/dataco_admin/viewmodels/projects_viewmodel.py
from __future__ import annotations

import logging
from typing import List

from PySide6.QtCore import QObject, Signal

from ..api.errors import ApiError, AuthRequiredError
from ..models.entities import Project
from ..repositories.http_project_repository import HttpProjectRepository

log = logging.getLogger(__name__)


class ProjectsViewModel(QObject):
    projectsReloaded = Signal(object)
    errorChanged = Signal(str)
    authRequired = Signal()

    def __init__(self, projects_repo: HttpProjectRepository):
        super().__init__()
        self._repo = projects_repo
        self.projects: List[Project] = []

    async def reload(self) -> bool:
        try:
            projects = await self._repo.list_projects()
        except AuthRequiredError:
            self.authRequired.emit()
            return False
        except ApiError as exc:
            log.warning("Failed to load projects: %s", exc.message)
            self.errorChanged.emit("Failed to load projects")
            return False
        self.projects = sorted(projects, key=lambda p: p.name.lower())
        self.errorChanged.emit("")
        self.projectsReloaded.emit(self.projects)
        return True
