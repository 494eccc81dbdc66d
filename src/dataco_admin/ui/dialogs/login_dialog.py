# Rev 0.1.0

# src/dataco_admin/ui/dialogs/login_dialog.py  (Rev 0.1.0)
from PySide6.QtWidgets import QDialog, QDialogButtonBox, QFormLayout, QLabel, QLineEdit, QVBoxLayout


class LoginDialog(QDialog):
    def __init__(self, parent=None, *, message: str = ""):
        super().__init__(parent)
        self.setWindowTitle("Admin login")
        self.username = QLineEdit(self)
        self.password = QLineEdit(self);  self.password.setEchoMode(QLineEdit.Password)
        self.error = QLabel(message, self);  self.error.setStyleSheet("color: #b00020")
        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel, self)
        btns.accepted.connect(self.accept); btns.rejected.connect(self.reject)

        form = QFormLayout()
        form.addRow("Username:", self.username)
        form.addRow("Password:", self.password)
        lay = QVBoxLayout(self)
        lay.addLayout(form); lay.addWidget(self.error); lay.addWidget(btns)

    def values(self) -> tuple[str, str]:
        return self.username.text().strip(), self.password.text()
