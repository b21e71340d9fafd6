"""Prompt session state machine.

A session lives for exactly one prompt. User intents (accept, cancel,
advance_focus, toggle_remember) and countdown ticks all arrive on the Qt
main thread, so state is never mutated concurrently. The session ends by
emitting ``finished(exit_code, secret)`` exactly once; every intent after
that is ignored.
"""

from __future__ import annotations

import logging
from typing import Protocol

from PySide6.QtCore import QObject, Signal

from qaskpass.countdown import CountdownTimer
from qaskpass.keychain import CredentialStore
from qaskpass.models import (
    FocusedControl,
    PromptRequest,
    PromptVariant,
    StoreOutcome,
    StoreStatus,
)

logger = logging.getLogger(__name__)

EXIT_ACCEPTED = 0
EXIT_CANCELED = 1

CANCEL_LABEL = "Cancel"
CLOSE_LABEL = "Close"
KEYCHAIN_ERROR_TITLE = "Keychain Error"
REPLACE_PROMPT = (
    'A passphrase for "{account}" already exists in the keychain.\n'
    "Do you want to replace it?"
)


class PreferenceStore(Protocol):
    def get_use_keychain(self) -> bool | None: ...

    def set_use_keychain(self, value: bool) -> None: ...


class PromptSession(QObject):
    """Core of the askpass dialog, independent of any widget."""

    countdown_changed = Signal(int)  # remaining seconds
    cancel_label_changed = Signal(str)
    focus_changed = Signal(FocusedControl)
    replace_requested = Signal(str)  # account
    store_error = Signal(str, str)  # title, message
    finished = Signal(int, object)  # exit_code, secret or None

    def __init__(
        self,
        request: PromptRequest,
        store: CredentialStore,
        preferences: PreferenceStore,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.request = request
        self._store = store
        self._preferences = preferences

        self.remaining_seconds = request.timeout_seconds
        self.secret_value = ""
        self.remember_in_store = self._initial_remember()
        self.focused_control = (
            FocusedControl.CANCEL
            if request.variant in (PromptVariant.CONFIRMATION, PromptVariant.INFORMATION)
            else FocusedControl.OK
        )

        self.countdown = CountdownTimer(self)
        self.countdown.tick.connect(self._on_tick)

        self._started = False
        self._pending_secret: str | None = None
        self._exit_code: int | None = None
        self._emitted_secret: str | None = None

    # --- Derived state for the presentation layer ---

    @property
    def variant(self) -> PromptVariant:
        return self.request.variant

    @property
    def secret_field_visible(self) -> bool:
        return self.variant.has_secret_field

    @property
    def remember_visible(self) -> bool:
        return self.variant.stores_secret

    @property
    def remember_enabled(self) -> bool:
        return self.request.keychain_eligible

    @property
    def ok_visible(self) -> bool:
        return self.variant is not PromptVariant.INFORMATION

    @property
    def counting_down(self) -> bool:
        return self.countdown.active

    @property
    def cancel_label(self) -> str:
        if self.variant is PromptVariant.INFORMATION:
            return CLOSE_LABEL
        if self.counting_down:
            return f"{CANCEL_LABEL} (in {self.remaining_seconds}s)"
        return CANCEL_LABEL

    @property
    def default_control(self) -> FocusedControl:
        """The control the Return key triggers."""
        if self.variant is PromptVariant.INFORMATION:
            return FocusedControl.CANCEL
        return self.focused_control

    @property
    def terminated(self) -> bool:
        return self._exit_code is not None

    @property
    def exit_code(self) -> int | None:
        return self._exit_code

    @property
    def emitted_secret(self) -> str | None:
        return self._emitted_secret

    @property
    def awaiting_replace_decision(self) -> bool:
        return self._pending_secret is not None

    # --- Lifecycle ---

    def start(self) -> None:
        """Run entry behaviour. Arms the countdown for timed confirmations."""
        if self._started or self.terminated:
            return
        self._started = True
        logger.info("Prompt started (variant=%s)", self.variant.value)

        if self.request.countdown_armed:
            self.countdown.start()
            self.countdown_changed.emit(self.remaining_seconds)
            self.cancel_label_changed.emit(self.cancel_label)

    # --- Intents ---

    def update_secret(self, value: str) -> None:
        if self.terminated:
            return
        self.secret_value = value

    def advance_focus(self) -> None:
        """Swap focus between Cancel and OK on confirmation prompts.

        Any focus change stops a running countdown.
        """
        if self.terminated or self.variant is not PromptVariant.CONFIRMATION:
            return

        if self.countdown.active:
            self.countdown.cancel()
            logger.info("Countdown stopped by focus change")
            self.cancel_label_changed.emit(self.cancel_label)

        if self.focused_control is FocusedControl.CANCEL:
            self.focused_control = FocusedControl.OK
        else:
            self.focused_control = FocusedControl.CANCEL
        self.focus_changed.emit(self.focused_control)

    def toggle_remember(self, value: bool) -> None:
        if self.terminated:
            return
        self.remember_in_store = value
        self._preferences.set_use_keychain(value)

    def cancel(self) -> None:
        if self.terminated:
            return
        logger.info("Prompt canceled")
        self._finish(EXIT_CANCELED, None)

    def accept(self, secret: str | None = None) -> None:
        """Finish with exit code 0, storing the secret first when asked to.

        A duplicate keychain entry raises ``replace_requested`` and leaves the
        session active until ``resolve_duplicate`` is called. Any other store
        failure raises ``store_error`` and leaves the session active.
        """
        if self.terminated or self.awaiting_replace_decision:
            return
        if secret is not None:
            self.secret_value = secret
        entered = self.secret_value if self.secret_field_visible else ""

        if self.remember_in_store and self.request.keychain_eligible:
            outcome = self._store.add(self.request.account, entered)
            if outcome.status is StoreStatus.DUPLICATE_ENTRY:
                self._pending_secret = entered
                self.replace_requested.emit(self.request.account)
                return
            if not outcome.ok:
                self._report_store_error(outcome)
                return

        self._finish(EXIT_ACCEPTED, entered)

    def resolve_duplicate(self, replace: bool) -> None:
        """Answer the replace-existing-entry question."""
        if self.terminated or self._pending_secret is None:
            return
        secret = self._pending_secret
        self._pending_secret = None

        if not replace:
            logger.info("Replacement of keychain entry declined")
            return

        outcome = self._store.delete(self.request.account)
        if not outcome.ok:
            self._report_store_error(outcome)
            return

        logger.info("Replacing keychain entry for %s", self.request.account)
        self.accept(secret)

    # --- Internals ---

    def _initial_remember(self) -> bool:
        if not self.request.keychain_eligible:
            return False
        preference = self._preferences.get_use_keychain()
        if preference is not None:
            return preference
        return self._store.query(self.request.account)

    def _on_tick(self) -> None:
        if self.terminated:
            return
        self.remaining_seconds -= 1
        logger.debug("Countdown: %ds remaining", self.remaining_seconds)
        if self.remaining_seconds <= 0:
            self.countdown.cancel()
            self.cancel()
            return
        self.countdown_changed.emit(self.remaining_seconds)
        self.cancel_label_changed.emit(self.cancel_label)

    def _report_store_error(self, outcome: StoreOutcome) -> None:
        message = outcome.message or f"Keychain operation failed (code {outcome.code})"
        self.store_error.emit(KEYCHAIN_ERROR_TITLE, message)

    def _finish(self, exit_code: int, secret: str | None) -> None:
        self.countdown.cancel()
        self._exit_code = exit_code
        self._emitted_secret = secret
        self.finished.emit(exit_code, secret)
