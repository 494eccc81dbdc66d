# Rev 0.3.2 — Task page: info pills + subtasks table
from __future__ import annotations
from typing import Callable, List, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QDialog, QFormLayout, QHBoxLayout, QHeaderView, QLabel, QMessageBox,
    QPushButton, QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget,
)

from ..models.entities import Project, Subtask, Task
from ..services.field_rules import format_dataco, priority_label
from ..viewmodels.task_page_viewmodel import TaskPageViewModel
from .subtask_editor_dialog import SubtaskEditorDialog
from .task_editor_dialog import TaskEditorDialog
from .window_mode import run_form, schedule


class TaskPage(QWidget):
    backRequested = Signal(str)   # project_id

    def __init__(self, vm: TaskPageViewModel, parent=None):
        super().__init__(parent)
        self._vm = vm

        # --- header
        self._btn_back = QPushButton("← Project")
        self._btn_refresh = QPushButton("Refresh")
        self._btn_edit_task = QPushButton("Edit task")
        self._btn_visibility = QPushButton("Hide task")
        self._btn_delete_task = QPushButton("Delete task")
        self._btn_back.clicked.connect(self._on_back)
        self._btn_refresh.clicked.connect(lambda: schedule(self._vm.force_refresh()))
        self._btn_edit_task.clicked.connect(self._on_edit_task)
        self._btn_visibility.clicked.connect(lambda: schedule(self._vm.toggle_task_visibility()))
        self._btn_delete_task.clicked.connect(self._on_delete_task)

        bar = QHBoxLayout()
        for b in (self._btn_back, self._btn_refresh):
            bar.addWidget(b)
        bar.addStretch(1)
        for b in (self._btn_edit_task, self._btn_visibility, self._btn_delete_task):
            bar.addWidget(b)

        # --- task info
        self._lbl_title = QLabel()
        self._lbl_title.setStyleSheet("font-size: 16pt; font-weight: bold")
        self._lbl_project = QLabel()
        self._lbl_dataco = QLabel()
        self._lbl_amount = QLabel()
        self._lbl_priority = QLabel()
        self._lbl_cars = QLabel()
        self._lbl_daytime = QLabel()
        self._lbl_error = QLabel()
        self._lbl_error.setStyleSheet("color: #b00020")
        self._lbl_error.setVisible(False)

        info = QFormLayout()
        info.addRow("Project:", self._lbl_project)
        info.addRow("DATACO:", self._lbl_dataco)
        info.addRow("Amount needed:", self._lbl_amount)
        info.addRow("Priority:", self._lbl_priority)
        info.addRow("Target cars:", self._lbl_cars)
        info.addRow("Day time:", self._lbl_daytime)

        # --- subtasks
        self._btn_new = QPushButton("New Subtask")
        self._btn_edit = QPushButton("Edit")
        self._btn_toggle = QPushButton("Toggle visibility")
        self._btn_delete = QPushButton("Delete")
        for b in (self._btn_edit, self._btn_toggle, self._btn_delete):
            b.setEnabled(False)
        self._btn_new.clicked.connect(self._on_new)
        self._btn_edit.clicked.connect(self._on_edit)
        self._btn_toggle.clicked.connect(self._on_toggle)
        self._btn_delete.clicked.connect(self._on_delete)

        sub_bar = QHBoxLayout()
        sub_bar.addWidget(QLabel("Subtasks"))
        sub_bar.addStretch(1)
        for b in (self._btn_new, self._btn_edit, self._btn_toggle, self._btn_delete):
            sub_bar.addWidget(b)

        # Title | DATACO | Type | Amount | Weather | Scene | Visible
        self._table = QTableWidget(0, 7)
        self._table.setHorizontalHeaderLabels(["Title", "DATACO", "Type", "Amount", "Weather", "Scene", "Visible"])
        self._table.setSelectionBehavior(QTableWidget.SelectRows)
        self._table.setSelectionMode(QTableWidget.SingleSelection)
        self._table.setEditTriggers(QTableWidget.NoEditTriggers)
        self._table.setAlternatingRowColors(True)
        self._table.verticalHeader().setVisible(False)
        self._table.horizontalHeader().setSectionResizeMode(0, QHeaderView.Stretch)
        self._table.itemSelectionChanged.connect(self._on_selection_changed)
        self._table.doubleClicked.connect(lambda _ix: self._on_edit())

        root = QVBoxLayout(self)
        root.addLayout(bar)
        root.addWidget(self._lbl_title)
        root.addWidget(self._lbl_error)
        root.addLayout(info)
        root.addLayout(sub_bar)
        root.addWidget(self._table, 1)

        # --- VM wiring
        vm.taskLoaded.connect(self._render_task)
        vm.projectLoaded.connect(self._render_project)
        vm.subtasksReloaded.connect(self._render_subtasks)
        vm.errorChanged.connect(self._render_error)
        vm.loadingChanged.connect(lambda busy: self._btn_refresh.setEnabled(not busy))

    # ---------- render ----------
    def _render_task(self, task: Task):
        self._lbl_title.setText(task.title + (f" — {task.subtitle}" if task.subtitle else ""))
        self._lbl_dataco.setText(format_dataco(task.dataco_number) or "N/A")
        self._lbl_amount.setText(str(task.amount_needed))
        self._lbl_priority.setText(f"{priority_label(task.priority)} ({task.priority})" if task.priority else "none")
        self._lbl_cars.setText(", ".join(task.target_car) or "—")
        self._lbl_daytime.setText(", ".join(task.day_time) or "—")
        self._btn_visibility.setText("Hide task" if task.is_visible else "Show task")

    def _render_project(self, project: Optional[Project]):
        self._lbl_project.setText(project.name if project else "—")

    def _render_error(self, message: str):
        self._lbl_error.setText(message)
        self._lbl_error.setVisible(bool(message))

    def _render_subtasks(self, rows: List[Subtask]):
        selected = self._selected_subtask_id()
        self._table.setRowCount(len(rows))
        for r, sub in enumerate(rows):
            cells = (
                sub.title,
                format_dataco(sub.dataco_number) or "N/A",
                sub.type,
                str(sub.amount_needed),
                sub.weather,
                sub.scene,
                "yes" if sub.is_visible in (None, True) else "no",
            )
            for c, text in enumerate(cells):
                item = QTableWidgetItem(text)
                item.setData(Qt.UserRole, sub.id)
                self._table.setItem(r, c, item)
            if sub.id == selected:
                self._table.selectRow(r)
        self._on_selection_changed()

    # ---------- selection ----------
    def _selected_subtask_id(self) -> Optional[str]:
        items = self._table.selectedItems()
        return items[0].data(Qt.UserRole) if items else None

    def _on_selection_changed(self):
        has_sel = self._selected_subtask_id() is not None
        for b in (self._btn_edit, self._btn_toggle, self._btn_delete):
            b.setEnabled(has_sel)

    # ---------- commands ----------
    async def _submit(self, coro, release: Callable[[], None]):
        try:
            await coro
        finally:
            release()

    @staticmethod
    def _exec(dlg) -> Optional[object]:
        return dlg.value() if dlg.exec() == int(QDialog.DialogCode.Accepted) else None

    def _on_back(self):
        task = self._vm.task
        self.backRequested.emit(task.project_id if task else "")

    def _on_new(self):
        guard = self._vm.guard
        guard.open_create()
        template = self._vm.new_subtask_template()
        types = self._vm.config.subtask_types

        def open_form(draft: Optional[Subtask]):
            return self._exec(SubtaskEditorDialog(self, subtask=draft or template, types=types, title="New Subtask"))

        schedule(run_form(open_form, self._vm.create_subtask, release=guard.close_create))

    def _on_edit(self):
        sid = self._selected_subtask_id()
        sub = self._vm.find_subtask(sid) if sid else None
        if sub is None:
            return
        guard = self._vm.guard
        guard.begin_edit(sid)
        types = self._vm.config.subtask_types

        def open_form(draft: Optional[Subtask]):
            return self._exec(SubtaskEditorDialog(self, subtask=draft or sub, types=types, title="Edit Subtask"))

        schedule(run_form(open_form, self._vm.update_subtask, release=guard.end_edit))

    def _on_toggle(self):
        sid = self._selected_subtask_id()
        if sid:
            schedule(self._vm.toggle_subtask_visibility(sid))

    def _on_delete(self):
        sid = self._selected_subtask_id()
        if sid is None:
            return
        guard = self._vm.guard
        guard.request_delete(sid)
        if QMessageBox.question(self, "Delete Subtask", "Delete this subtask? This cannot be undone.",
                                QMessageBox.Yes | QMessageBox.No) != QMessageBox.Yes:
            guard.cancel_delete()
            return
        schedule(self._submit(self._vm.delete_subtask(sid), guard.cancel_delete))

    def _on_edit_task(self):
        task = self._vm.task
        if task is None:
            return
        guard = self._vm.guard
        guard.begin_edit(task.id)

        def open_form(draft: Optional[Task]):
            return self._exec(TaskEditorDialog(self, task=draft or task, title="Edit Task"))

        schedule(run_form(open_form, self._vm.update_task, release=guard.end_edit))

    def _on_delete_task(self):
        task = self._vm.task
        if task is None:
            return
        guard = self._vm.guard
        guard.request_delete(task.id)
        if QMessageBox.question(self, "Delete Task",
                                "Delete this task? All of its subtasks are deleted too and this cannot be undone.",
                                QMessageBox.Yes | QMessageBox.No) != QMessageBox.Yes:
            guard.cancel_delete()
            return
        schedule(self._submit(self._vm.delete_task(), guard.cancel_delete))
