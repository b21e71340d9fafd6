"""Modal askpass dialog that renders a PromptSession."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent, QKeyEvent
from PySide6.QtWidgets import (
    QCheckBox,
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from qaskpass.models import FocusedControl, PromptVariant
from qaskpass.session import REPLACE_PROMPT, PromptSession

DEFAULT_MESSAGES: dict[PromptVariant, str] = {
    PromptVariant.CONFIRMATION: "Allow this operation?",
    PromptVariant.INFORMATION: "",
    PromptVariant.PASSWORD: "Enter password:",
    PromptVariant.PASSPHRASE: "Enter passphrase:",
    PromptVariant.BAD_PASSPHRASE: "Bad passphrase, try again:",
    PromptVariant.INPUT_CONFIRMATION: "Type your answer:",
}

# Keys that move focus between Cancel and OK on confirmation prompts
FOCUS_SWITCH_KEYS = (Qt.Key.Key_Tab, Qt.Key.Key_Backtab, Qt.Key.Key_Left, Qt.Key.Key_Right)


class PromptDialog(QDialog):
    """Translates widget events into session intents and mirrors session state."""

    def __init__(self, session: PromptSession, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._session = session
        self.setWindowTitle("SSH Authentication")
        self.setMinimumWidth(420)
        self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, True)

        self._setup_ui()
        self._connect_session()
        self._render()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)

        message = self._session.request.message or DEFAULT_MESSAGES[self._session.variant]
        self._info_label = QLabel(message)
        self._info_label.setWordWrap(True)
        self._info_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(self._info_label)

        self._secret_edit = QLineEdit()
        self._secret_edit.setEchoMode(QLineEdit.EchoMode.Password)
        self._secret_edit.textChanged.connect(self._session.update_secret)
        layout.addWidget(self._secret_edit)

        self._remember = QCheckBox("Remember in keychain")
        self._remember.setChecked(self._session.remember_in_store)
        self._remember.toggled.connect(self._session.toggle_remember)
        layout.addWidget(self._remember)

        buttons = QHBoxLayout()
        buttons.addStretch()
        self._cancel_btn = QPushButton(self._session.cancel_label)
        self._cancel_btn.clicked.connect(self._session.cancel)
        buttons.addWidget(self._cancel_btn)

        self._ok_btn = QPushButton("OK")
        self._ok_btn.clicked.connect(self._on_ok)
        buttons.addWidget(self._ok_btn)
        layout.addLayout(buttons)

    def _connect_session(self) -> None:
        self._session.cancel_label_changed.connect(self._cancel_btn.setText)
        self._session.focus_changed.connect(self._apply_focus)
        self._session.replace_requested.connect(self._ask_replace)
        self._session.store_error.connect(self._show_error)
        self._session.finished.connect(lambda *_: self.done(QDialog.DialogCode.Accepted))

    def _render(self) -> None:
        self._secret_edit.setVisible(self._session.secret_field_visible)
        self._remember.setVisible(self._session.remember_visible)
        self._remember.setEnabled(self._session.remember_enabled)
        self._ok_btn.setVisible(self._session.ok_visible)
        self._cancel_btn.setText(self._session.cancel_label)
        self._apply_focus(self._session.focused_control)

    def _apply_focus(self, focused: FocusedControl) -> None:
        default = self._session.default_control
        self._ok_btn.setDefault(default is FocusedControl.OK)
        self._cancel_btn.setDefault(default is FocusedControl.CANCEL)
        self._ok_btn.setAutoDefault(False)
        self._cancel_btn.setAutoDefault(False)

        if self._session.secret_field_visible:
            self._secret_edit.setFocus()
        elif focused is FocusedControl.OK:
            self._ok_btn.setFocus()
        else:
            self._cancel_btn.setFocus()

    def _on_ok(self) -> None:
        self._session.accept(self._secret_edit.text())

    def _ask_replace(self, account: str) -> None:
        box = QMessageBox(self)
        box.setIcon(QMessageBox.Icon.Warning)
        box.setWindowTitle("Warning")
        box.setText("Warning")
        box.setInformativeText(REPLACE_PROMPT.format(account=account))
        replace_btn = box.addButton("Replace", QMessageBox.ButtonRole.AcceptRole)
        box.addButton(QMessageBox.StandardButton.Cancel)
        box.setDefaultButton(replace_btn)
        box.exec()
        self._session.resolve_duplicate(box.clickedButton() is replace_btn)

    def _show_error(self, title: str, message: str) -> None:
        QMessageBox.warning(self, title, message)

    # --- Qt event overrides ---

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        key = event.key()
        if self._session.variant is PromptVariant.CONFIRMATION and key in FOCUS_SWITCH_KEYS:
            self._session.advance_focus()
            return
        if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            if self._session.default_control is FocusedControl.OK:
                self._on_ok()
            else:
                self._session.cancel()
            return
        if key == Qt.Key.Key_Escape:
            self._session.cancel()
            return
        super().keyPressEvent(event)

    def focusNextPrevChild(self, next: bool) -> bool:  # noqa: N802, A002
        # Tab is handled as a focus switch on confirmation prompts
        if self._session.variant is PromptVariant.CONFIRMATION:
            self._session.advance_focus()
            return True
        return super().focusNextPrevChild(next)

    def reject(self) -> None:
        self._session.cancel()

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        self._session.cancel()
        super().closeEvent(event)
