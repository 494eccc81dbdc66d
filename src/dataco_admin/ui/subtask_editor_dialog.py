# Rev 0.2.2 — Subtask editor: DATACO, type, amount, labels, weather, scene
from __future__ import annotations
import dataclasses
from typing import Sequence

from PySide6.QtWidgets import (
    QCheckBox, QComboBox, QDialog, QDialogButtonBox, QFormLayout, QHBoxLayout,
    QLabel, QLineEdit, QSpinBox, QVBoxLayout, QWidget,
)

from ..models.entities import Subtask
from ..models.types import DAY_TIMES, SCENES, WEATHERS
from .dataco_field import DatacoField
from .window_mode import lock_dialog_fixed


def _csv(values: Sequence[str]) -> str:
    return ", ".join(values)


def _split(text: str) -> list[str]:
    return [p.strip() for p in text.split(",") if p.strip()]


def type_options(allowed: Sequence[str], current: str) -> list[str]:
    """Allowed types, plus the record's own type when this page would not offer it."""
    options = list(allowed)
    if current and current not in options:
        options.append(current)
    return options


class SubtaskEditorDialog(QDialog):
    """
    Create/edit form for a Subtask. `value()` returns a copy of the input
    subtask with the form fields applied. Target cars are inherited from the
    parent task and shown read-only.
    """

    def __init__(self, parent=None, *, subtask: Subtask, types: Sequence[str], title: str = "Subtask"):
        super().__init__(parent)
        self.setWindowTitle(title)
        self._subtask = subtask

        self._title = QLineEdit(subtask.title)
        self._subtitle = QLineEdit(subtask.subtitle or "")
        self._dataco = DatacoField(subtask.dataco_number)

        self._type = QComboBox()
        for t in type_options(types, subtask.type):
            self._type.addItem(t, t)
        i = self._type.findData(subtask.type)
        if i >= 0:
            self._type.setCurrentIndex(i)

        self._amount = QSpinBox()
        self._amount.setRange(0, 1_000_000)
        self._amount.setValue(subtask.amount_needed)

        self._labels = QLineEdit(_csv(subtask.labels))
        self._labels.setPlaceholderText("comma separated")

        self._target_car = QLineEdit(_csv(subtask.target_car))
        self._target_car.setReadOnly(True)

        self._weather = QComboBox()
        self._weather.addItems(list(WEATHERS))
        self._weather.setCurrentText(subtask.weather)

        self._scene = QComboBox()
        self._scene.addItems(list(SCENES))
        self._scene.setCurrentText(subtask.scene)

        self._day_time: dict[str, QCheckBox] = {}
        day_row = QWidget()
        day_lay = QHBoxLayout(day_row)
        day_lay.setContentsMargins(0, 0, 0, 0)
        for dt in DAY_TIMES:
            cb = QCheckBox(dt)
            cb.setChecked(dt in subtask.day_time)
            self._day_time[dt] = cb
            day_lay.addWidget(cb)

        form = QFormLayout()
        form.addRow("Title:", self._title)
        form.addRow("Subtitle:", self._subtitle)
        form.addRow("DATACO:", self._dataco)
        form.addRow("Type:", self._type)
        form.addRow("Amount needed:", self._amount)
        form.addRow("Labels:", self._labels)
        form.addRow(QLabel("<hr/>"))
        form.addRow("Target cars:", self._target_car)
        form.addRow("Weather:", self._weather)
        form.addRow("Scene:", self._scene)
        form.addRow("Day time:", day_row)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(btns)
        lock_dialog_fixed(self, width_ratio=0.4, height_ratio=0.6)

    def value(self) -> Subtask:
        return dataclasses.replace(
            self._subtask,
            title=self._title.text().strip(),
            subtitle=self._subtitle.text().strip() or None,
            dataco_number=self._dataco.value(),
            type=self._type.currentData(),
            amount_needed=self._amount.value(),
            labels=_split(self._labels.text()),
            weather=self._weather.currentText(),
            scene=self._scene.currentText(),
            day_time=[dt for dt, cb in self._day_time.items() if cb.isChecked()],
        )
