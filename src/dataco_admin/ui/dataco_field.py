# Rev 0.1.0
from __future__ import annotations

from PySide6.QtWidgets import QHBoxLayout, QLabel, QLineEdit, QWidget

from ..services.field_rules import DATACO_PREFIX, sanitize_dataco


class DatacoField(QWidget):
    """Fixed DATACO- prefix plus a digits-only line edit."""

    def __init__(self, value: str = "", parent=None):
        super().__init__(parent)
        self._edit = QLineEdit(sanitize_dataco(value))
        self._edit.setPlaceholderText("digits only")
        self._edit.textEdited.connect(self._on_edited)

        lay = QHBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(QLabel(DATACO_PREFIX))
        lay.addWidget(self._edit, 1)

    def _on_edited(self, text: str) -> None:
        clean = sanitize_dataco(text)
        if clean != text:
            pos = self._edit.cursorPosition() - (len(text) - len(clean))
            self._edit.setText(clean)
            self._edit.setCursorPosition(max(0, pos))

    def value(self) -> str:
        return sanitize_dataco(self._edit.text())
