# Rev 0.2.1 — Project page: tasks table
from __future__ import annotations
from typing import List, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QDialog, QHBoxLayout, QHeaderView, QLabel, QMessageBox, QPushButton,
    QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget,
)

from ..models.entities import Project, Task
from ..services.field_rules import format_dataco, priority_label
from ..viewmodels.project_page_viewmodel import ProjectPageViewModel
from .task_editor_dialog import TaskEditorDialog
from .window_mode import run_form, schedule


class ProjectPage(QWidget):
    taskOpened = Signal(str)   # task_id

    def __init__(self, vm: ProjectPageViewModel, parent=None):
        super().__init__(parent)
        self._vm = vm

        self._lbl_name = QLabel()
        self._lbl_name.setStyleSheet("font-size: 16pt; font-weight: bold")
        self._lbl_desc = QLabel()
        self._lbl_desc.setWordWrap(True)
        self._lbl_error = QLabel()
        self._lbl_error.setStyleSheet("color: #b00020")
        self._lbl_error.setVisible(False)

        self._btn_refresh = QPushButton("Refresh")
        self._btn_new = QPushButton("New Task")
        self._btn_open = QPushButton("Open")
        self._btn_toggle = QPushButton("Toggle visibility")
        self._btn_delete = QPushButton("Delete")
        for b in (self._btn_open, self._btn_toggle, self._btn_delete):
            b.setEnabled(False)
        self._btn_refresh.clicked.connect(lambda: schedule(self._vm.force_refresh()))
        self._btn_new.clicked.connect(self._on_new)
        self._btn_open.clicked.connect(self._on_open)
        self._btn_toggle.clicked.connect(self._on_toggle)
        self._btn_delete.clicked.connect(self._on_delete)

        bar = QHBoxLayout()
        bar.addWidget(self._btn_refresh)
        bar.addStretch(1)
        for b in (self._btn_new, self._btn_open, self._btn_toggle, self._btn_delete):
            bar.addWidget(b)

        # Priority | Title | DATACO | Amount | Type | Visible
        self._table = QTableWidget(0, 6)
        self._table.setHorizontalHeaderLabels(["Priority", "Title", "DATACO", "Amount", "Type", "Visible"])
        self._table.setSelectionBehavior(QTableWidget.SelectRows)
        self._table.setSelectionMode(QTableWidget.SingleSelection)
        self._table.setEditTriggers(QTableWidget.NoEditTriggers)
        self._table.setAlternatingRowColors(True)
        self._table.verticalHeader().setVisible(False)
        self._table.horizontalHeader().setSectionResizeMode(1, QHeaderView.Stretch)
        self._table.itemSelectionChanged.connect(self._on_selection_changed)
        self._table.doubleClicked.connect(lambda _ix: self._on_open())

        root = QVBoxLayout(self)
        root.addWidget(self._lbl_name)
        root.addWidget(self._lbl_desc)
        root.addWidget(self._lbl_error)
        root.addLayout(bar)
        root.addWidget(self._table, 1)

        vm.projectLoaded.connect(self._render_project)
        vm.tasksReloaded.connect(self._render_tasks)
        vm.errorChanged.connect(self._render_error)
        vm.loadingChanged.connect(lambda busy: self._btn_refresh.setEnabled(not busy))

    # ---------- render ----------
    def _render_project(self, project: Project):
        self._lbl_name.setText(project.name)
        self._lbl_desc.setText(project.description or "")

    def _render_error(self, message: str):
        self._lbl_error.setText(message)
        self._lbl_error.setVisible(bool(message))

    def _render_tasks(self, rows: List[Task]):
        # lower numeral = higher priority; 0 (none) sorts last
        rows = sorted(rows, key=lambda t: (t.priority == 0, t.priority))
        self._table.setRowCount(len(rows))
        for r, task in enumerate(rows):
            cells = (
                priority_label(task.priority),
                task.title,
                format_dataco(task.dataco_number) or "N/A",
                str(task.amount_needed),
                ", ".join(task.type),
                "yes" if task.is_visible else "no",
            )
            for c, text in enumerate(cells):
                item = QTableWidgetItem(text)
                item.setData(Qt.UserRole, task.id)
                self._table.setItem(r, c, item)
        self._on_selection_changed()

    # ---------- selection ----------
    def _selected_task_id(self) -> Optional[str]:
        items = self._table.selectedItems()
        return items[0].data(Qt.UserRole) if items else None

    def _on_selection_changed(self):
        has_sel = self._selected_task_id() is not None
        for b in (self._btn_open, self._btn_toggle, self._btn_delete):
            b.setEnabled(has_sel)

    # ---------- commands ----------
    async def _submit(self, coro, release):
        try:
            await coro
        finally:
            release()

    def _on_open(self):
        tid = self._selected_task_id()
        if tid:
            self.taskOpened.emit(tid)

    def _on_new(self):
        if self._vm.project_id is None:
            return
        guard = self._vm.guard
        guard.open_create()
        template = self._vm.new_task_template()

        def open_form(draft: Optional[Task]):
            dlg = TaskEditorDialog(self, task=draft or template, title="New Task")
            return dlg.value() if dlg.exec() == int(QDialog.DialogCode.Accepted) else None

        schedule(run_form(open_form, self._vm.create_task, release=guard.close_create))

    def _on_toggle(self):
        tid = self._selected_task_id()
        if tid:
            schedule(self._vm.toggle_task_visibility(tid))

    def _on_delete(self):
        tid = self._selected_task_id()
        if tid is None:
            return
        guard = self._vm.guard
        guard.request_delete(tid)
        if QMessageBox.question(self, "Delete Task",
                                "Delete this task? All of its subtasks are deleted too and this cannot be undone.",
                                QMessageBox.Yes | QMessageBox.No) != QMessageBox.Yes:
            guard.cancel_delete()
            return
        schedule(self._submit(self._vm.delete_task(tid), guard.cancel_delete))
