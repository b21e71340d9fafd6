"""Shared test fixtures."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from unittest.mock import MagicMock, patch

import pytest
from PySide6.QtWidgets import QApplication

from qaskpass.models import PromptRequest, PromptVariant, StoreOutcome
from qaskpass.session import PromptSession


@pytest.fixture(scope="session")
def qapp() -> QApplication:
    """Provide a QApplication instance for tests needing Qt objects or widgets."""
    app = QApplication.instance()
    if app is None:
        # Widgets need a platform plugin; tests never open a real window
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
        app = QApplication(sys.argv)
    return app  # type: ignore[return-value]


@pytest.fixture()
def patched_qtimer() -> Iterator[dict[str, MagicMock]]:
    """Patch QTimer so countdowns never touch a real event loop."""
    with patch("qaskpass.countdown.QTimer", autospec=True) as mock_qtimer_cls:
        mock_timer = MagicMock()
        mock_qtimer_cls.return_value = mock_timer
        yield {"timer_cls": mock_qtimer_cls, "timer": mock_timer}


class FakeStore:
    """In-memory CredentialStore with scriptable failures."""

    def __init__(self) -> None:
        self.entries: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []
        self.add_outcomes: list[StoreOutcome] = []
        self.delete_outcomes: list[StoreOutcome] = []

    def add(self, account: str, secret: str) -> StoreOutcome:
        self.calls.append(("add", account))
        if self.add_outcomes:
            outcome = self.add_outcomes.pop(0)
            if outcome.ok:
                self.entries[account] = secret
            return outcome
        if account in self.entries:
            return StoreOutcome.duplicate()
        self.entries[account] = secret
        return StoreOutcome.success()

    def delete(self, account: str) -> StoreOutcome:
        self.calls.append(("delete", account))
        if self.delete_outcomes:
            outcome = self.delete_outcomes.pop(0)
            if outcome.ok:
                self.entries.pop(account, None)
            return outcome
        if account not in self.entries:
            return StoreOutcome.error(-25300, "The specified item could not be found.")
        del self.entries[account]
        return StoreOutcome.success()

    def query(self, account: str) -> bool:
        self.calls.append(("query", account))
        return account in self.entries

    @property
    def mutating_calls(self) -> list[tuple[str, str]]:
        return [c for c in self.calls if c[0] in ("add", "delete")]


class FakePreferences:
    """Preference store that remembers every write."""

    def __init__(self) -> None:
        self.use_keychain: bool | None = None
        self.writes: list[bool] = []

    def get_use_keychain(self) -> bool | None:
        return self.use_keychain

    def set_use_keychain(self, value: bool) -> None:
        self.use_keychain = value
        self.writes.append(value)


@pytest.fixture()
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture()
def preferences() -> FakePreferences:
    return FakePreferences()


@pytest.fixture()
def make_session(
    qapp: QApplication, store: FakeStore, preferences: FakePreferences
) -> Callable[..., PromptSession]:
    """Build a PromptSession over the ``store`` and ``preferences`` fixtures.

    Seed the fakes before calling: the remember flag is read at construction.
    """

    def _make(variant: PromptVariant, account: str = "", timeout: int = 0) -> PromptSession:
        request = PromptRequest(
            variant=variant, message="", account=account, timeout_seconds=timeout
        )
        return PromptSession(request=request, store=store, preferences=preferences)

    return _make
