# Rev 0.2.3
# dataco-admin — Main Window: projects list on the left, project/task pages on the right

from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog, QHBoxLayout, QListWidget, QListWidgetItem, QMainWindow, QMessageBox,
    QPushButton, QSplitter, QStackedWidget, QVBoxLayout, QWidget,
)

from ..api.errors import ApiError
from ..app_context import AppContext
from ..models.entities import Project
from ..services.realtime_poller import RealtimePoller
from ..utils.config import save_section
from ..viewmodels.page_viewmodel import PageViewModel
from ..viewmodels.project_page_viewmodel import ProjectPageViewModel
from ..viewmodels.projects_viewmodel import ProjectsViewModel
from ..viewmodels.task_page_viewmodel import TaskPageViewModel
from .dialogs.login_dialog import LoginDialog
from .project_page import ProjectPage
from .task_page import TaskPage
from .window_mode import schedule

log = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, ctx: AppContext, *, logfile: Optional[Path] = None, parent=None):
        super().__init__(parent)
        self._ctx = ctx
        self._logfile = logfile
        self._logging_in = False

        self._projects_vm = ProjectsViewModel(ctx.projects)
        self._project_vm = ProjectPageViewModel(ctx.projects, ctx.tasks, ctx.page_config)
        self._task_vm = TaskPageViewModel(ctx.tasks, ctx.subtasks, ctx.projects, ctx.page_config)

        self.setWindowTitle("DATACO Admin")
        win = ctx.settings.get("main_window", {})
        self.resize(int(win.get("width", 1200)), int(win.get("height", 720)))
        if win.get("is_maximized"):
            self.setWindowState(Qt.WindowMaximized)

        # ---- left: projects ----
        self._list = QListWidget()
        self._list.itemSelectionChanged.connect(self._on_project_selected)
        self._btn_reload = QPushButton("Reload projects")
        self._btn_reload.clicked.connect(lambda: schedule(self._projects_vm.reload()))
        self._btn_logout = QPushButton("Log out")
        self._btn_logout.clicked.connect(self._on_logout)

        left = QWidget()
        lv = QVBoxLayout(left)
        lv.setContentsMargins(0, 0, 0, 0)
        lv.addWidget(self._list, 1)
        row = QHBoxLayout()
        row.addWidget(self._btn_reload)
        row.addWidget(self._btn_logout)
        lv.addLayout(row)

        # ---- right: pages ----
        self._project_page = ProjectPage(self._project_vm)
        self._task_page = TaskPage(self._task_vm)
        self._stack = QStackedWidget()
        self._stack.addWidget(self._project_page)
        self._stack.addWidget(self._task_page)

        split = QSplitter(Qt.Horizontal, self)
        split.addWidget(left)
        split.addWidget(self._stack)
        split.setStretchFactor(0, 1)
        split.setStretchFactor(1, 4)
        self.setCentralWidget(split)

        # ---- wiring ----
        self._projects_vm.projectsReloaded.connect(self._render_projects)
        self._projects_vm.errorChanged.connect(lambda m: m and self.statusBar().showMessage(m, 5000))
        self._project_page.taskOpened.connect(lambda tid: schedule(self._open_task(tid)))
        self._task_page.backRequested.connect(lambda pid: schedule(self._open_project(pid)))
        self._task_vm.taskDeleted.connect(lambda pid: schedule(self._open_project(pid)))
        self._project_vm.projectDeleted.connect(lambda _pid: schedule(self._projects_vm.reload()))
        for vm in (self._projects_vm, self._project_vm, self._task_vm):
            vm.authRequired.connect(self._on_auth_required)
        for vm in (self._project_vm, self._task_vm):
            vm.notice.connect(self._on_notice)

        cfg = ctx.page_config
        self._poller = RealtimePoller(self._background_refresh, interval=cfg.poll_interval,
                                      immediate=cfg.poll_immediate)

    # -------------------- startup / shutdown --------------------
    async def start(self) -> None:
        if self._logfile is not None:
            self.statusBar().showMessage(f"Logging to {self._logfile}", 4000)
        if not self._ctx.session.is_authenticated():
            if not await self._login():
                self.close()
                return
        await self._projects_vm.reload()
        self._poller.start()

    def closeEvent(self, ev):
        self._poller.stop()
        self._save_geometry()
        schedule(self._ctx.aclose())
        super().closeEvent(ev)

    def _save_geometry(self):
        geo = dict(self._ctx.settings.get("main_window", {}))
        geo["is_maximized"] = self.isMaximized()
        if not self.isMaximized():
            geo["width"], geo["height"] = self.width(), self.height()
        self._ctx.settings["main_window"] = geo
        try:
            save_section("main_window", geo)
        except OSError as exc:
            log.warning("Could not save window geometry: %s", exc)

    # -------------------- refresh triggers --------------------
    def _active_vm(self) -> PageViewModel:
        return self._task_vm if self._stack.currentWidget() is self._task_page else self._project_vm

    async def _background_refresh(self) -> None:
        vm = self._active_vm()
        if isinstance(vm, TaskPageViewModel) and vm.task_id is None:
            return
        if isinstance(vm, ProjectPageViewModel) and vm.project_id is None:
            return
        await vm.safe_refresh()

    # -------------------- navigation --------------------
    def _render_projects(self, projects: List[Project]):
        current = self._project_vm.project_id
        self._list.blockSignals(True)
        self._list.clear()
        for p in projects:
            item = QListWidgetItem(p.name)
            item.setData(Qt.UserRole, p.id)
            self._list.addItem(item)
            if p.id == current:
                item.setSelected(True)
        self._list.blockSignals(False)

    def _on_project_selected(self):
        items = self._list.selectedItems()
        if items:
            schedule(self._open_project(items[0].data(Qt.UserRole)))

    async def _open_project(self, project_id: str):
        self._stack.setCurrentWidget(self._project_page)
        if project_id:
            await self._project_vm.open(project_id)

    async def _open_task(self, task_id: str):
        self._stack.setCurrentWidget(self._task_page)
        await self._task_vm.open(task_id)

    # -------------------- notices / auth --------------------
    def _on_notice(self, level: str, message: str):
        if level == "error":
            QMessageBox.warning(self, "DATACO Admin", message)
        else:
            self.statusBar().showMessage(message, 4000)

    def _on_auth_required(self):
        if self._logging_in:
            return
        self._ctx.session.clear()
        schedule(self._relogin())

    async def _relogin(self):
        if await self._login("Your session has expired, please log in again."):
            await self._projects_vm.reload()

    async def _login(self, message: str = "") -> bool:
        self._logging_in = True
        try:
            while True:
                dlg = LoginDialog(self, message=message)
                if dlg.exec() != int(QDialog.DialogCode.Accepted):
                    return False
                username, password = dlg.values()
                try:
                    user = await self._ctx.auth.login(username, password)
                except ApiError as exc:
                    log.warning("Login failed for %s: %s", username, exc.message)
                    message = exc.message or "Login failed"
                    continue
                self.statusBar().showMessage(f"Logged in as {user.username}", 4000)
                return True
        finally:
            self._logging_in = False

    def _on_logout(self):
        self._poller.stop()
        self._ctx.auth.logout()
        schedule(self.start())
