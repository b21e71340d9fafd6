"""Application setup: one prompt per process."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping, Sequence
from typing import TextIO

from PySide6.QtWidgets import QApplication

from qaskpass.config import ConfigManager
from qaskpass.keychain import CredentialStore, KeyringCredentialStore
from qaskpass.prompt_parser import build_request
from qaskpass.session import EXIT_ACCEPTED, PromptSession
from qaskpass.widgets.prompt_dialog import PromptDialog

logger = logging.getLogger(__name__)


def write_result(exit_code: int, secret: str | None, stream: TextIO) -> None:
    """Write the caller-visible payload: the secret as the only stdout line."""
    if exit_code == EXIT_ACCEPTED:
        stream.write((secret or "") + "\n")
        stream.flush()


class AskpassApp:
    """Top-level coordinator for a single askpass prompt."""

    def __init__(
        self,
        argv: Sequence[str] | None = None,
        environ: Mapping[str, str] | None = None,
        store: CredentialStore | None = None,
        config_manager: ConfigManager | None = None,
    ) -> None:
        argv = list(sys.argv if argv is None else argv)
        environ = os.environ if environ is None else environ

        self.qt_app = QApplication.instance() or QApplication(argv)
        self.qt_app.setApplicationName("qaskpass")
        # The session decides the exit code; closing the dialog must not quit first
        self.qt_app.setQuitOnLastWindowClosed(False)

        self.config_manager = config_manager or ConfigManager()
        self.store = store or KeyringCredentialStore()
        self.request = build_request(argv[1:], environ)

        self.session = PromptSession(
            request=self.request,
            store=self.store,
            preferences=self.config_manager,
        )
        self.session.finished.connect(self._on_finished)
        self.dialog = PromptDialog(self.session)

    def _on_finished(self, exit_code: int, secret: object) -> None:
        write_result(exit_code, secret if isinstance(secret, str) else None, sys.stdout)
        self.qt_app.exit(exit_code)

    def run(self) -> int:
        self.dialog.show()
        self.dialog.raise_()
        self.dialog.activateWindow()
        self.session.start()
        return self.qt_app.exec()
