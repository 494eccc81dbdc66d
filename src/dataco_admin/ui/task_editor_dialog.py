# Rev 0.2.0 — Task editor
from __future__ import annotations
import dataclasses

from PySide6.QtWidgets import (
    QCheckBox, QDialog, QDialogButtonBox, QFormLayout, QHBoxLayout, QLabel,
    QLineEdit, QSpinBox, QTextEdit, QVBoxLayout, QWidget,
)

from ..models.entities import Task, TaskDescription
from ..models.types import DAY_TIMES, TASK_TYPES
from .dataco_field import DatacoField
from .subtask_editor_dialog import _csv, _split
from .window_mode import lock_dialog_fixed


def _checks(options, selected) -> tuple[QWidget, dict]:
    holder = QWidget()
    lay = QHBoxLayout(holder)
    lay.setContentsMargins(0, 0, 0, 0)
    boxes = {}
    for opt in options:
        cb = QCheckBox(opt)
        cb.setChecked(opt in selected)
        boxes[opt] = cb
        lay.addWidget(cb)
    return holder, boxes


class TaskEditorDialog(QDialog):
    """Create/edit form for a Task; `value()` returns the edited copy."""

    def __init__(self, parent=None, *, task: Task, title: str = "Task"):
        super().__init__(parent)
        self.setWindowTitle(title)
        self._task = task

        self._title = QLineEdit(task.title)
        self._subtitle = QLineEdit(task.subtitle or "")
        self._dataco = DatacoField(task.dataco_number)

        self._main = QTextEdit()
        self._main.setAcceptRichText(False)
        self._main.setPlainText(task.description.main)
        self._how = QTextEdit()
        self._how.setAcceptRichText(False)
        self._how.setPlainText(task.description.how_to_execute)

        type_row, self._types = _checks(TASK_TYPES, task.type)
        day_row, self._day_time = _checks(DAY_TIMES, task.day_time)

        self._locations = QLineEdit(_csv(task.locations))
        self._target_car = QLineEdit(_csv(task.target_car))
        for w in (self._locations, self._target_car):
            w.setPlaceholderText("comma separated")

        self._amount = QSpinBox()
        self._amount.setRange(0, 1_000_000)
        self._amount.setValue(task.amount_needed)

        # 0 = no priority, 1 highest .. 10 lowest
        self._priority = QSpinBox()
        self._priority.setRange(0, 10)
        self._priority.setSpecialValueText("none")
        self._priority.setValue(task.priority)

        self._lidar = QCheckBox("LiDAR required")
        self._lidar.setChecked(task.lidar)
        self._visible = QCheckBox("Visible to users")
        self._visible.setChecked(task.is_visible)

        form = QFormLayout()
        form.addRow("Title:", self._title)
        form.addRow("Subtitle:", self._subtitle)
        form.addRow("DATACO:", self._dataco)
        form.addRow("Description:", self._main)
        form.addRow("How to execute:", self._how)
        form.addRow(QLabel("<hr/>"))
        form.addRow("Type:", type_row)
        form.addRow("Locations:", self._locations)
        form.addRow("Target cars:", self._target_car)
        form.addRow("Day time:", day_row)
        form.addRow("Amount needed:", self._amount)
        form.addRow("Priority:", self._priority)
        form.addRow("", self._lidar)
        form.addRow("", self._visible)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(btns)
        lock_dialog_fixed(self, width_ratio=0.45, height_ratio=0.8)

    def value(self) -> Task:
        return dataclasses.replace(
            self._task,
            title=self._title.text().strip(),
            subtitle=self._subtitle.text().strip() or None,
            dataco_number=self._dataco.value(),
            description=TaskDescription(
                main=self._main.toPlainText().strip(),
                how_to_execute=self._how.toPlainText().strip(),
            ),
            type=[t for t, cb in self._types.items() if cb.isChecked()],
            locations=_split(self._locations.text()),
            target_car=_split(self._target_car.text()),
            day_time=[d for d, cb in self._day_time.items() if cb.isChecked()],
            amount_needed=self._amount.value(),
            priority=self._priority.value(),
            lidar=self._lidar.isChecked(),
            is_visible=self._visible.isChecked(),
        )
