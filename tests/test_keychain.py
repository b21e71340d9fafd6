"""Tests for the keyring-backed credential store."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest
from keyring.errors import KeyringError, PasswordDeleteError

from qaskpass.keychain import UNKNOWN_ERROR_CODE, KeyringCredentialStore
from qaskpass.models import StoreStatus


@pytest.fixture()
def mock_keyring() -> Iterator[MagicMock]:
    with patch("qaskpass.keychain.keyring") as mock:
        mock.get_password.return_value = None
        yield mock


def test_add_new_entry(mock_keyring: MagicMock) -> None:
    store = KeyringCredentialStore()
    outcome = store.add("/k", "secret")
    assert outcome.ok
    mock_keyring.set_password.assert_called_once_with("SSH", "/k", "secret")


def test_add_existing_entry_is_duplicate(mock_keyring: MagicMock) -> None:
    mock_keyring.get_password.return_value = "old"
    store = KeyringCredentialStore()
    outcome = store.add("/k", "secret")
    assert outcome.status is StoreStatus.DUPLICATE_ENTRY
    mock_keyring.set_password.assert_not_called()


def test_add_backend_error(mock_keyring: MagicMock) -> None:
    mock_keyring.set_password.side_effect = KeyringError("Keychain is locked")
    store = KeyringCredentialStore()
    outcome = store.add("/k", "secret")
    assert outcome.status is StoreStatus.ERROR
    assert outcome.message == "Keychain is locked"
    assert outcome.code == UNKNOWN_ERROR_CODE


def test_add_os_error_keeps_errno(mock_keyring: MagicMock) -> None:
    mock_keyring.get_password.side_effect = PermissionError(13, "Permission denied")
    outcome = KeyringCredentialStore().add("/k", "secret")
    assert outcome.status is StoreStatus.ERROR
    assert outcome.code == 13


def test_delete_success(mock_keyring: MagicMock) -> None:
    store = KeyringCredentialStore(service="custom")
    assert store.delete("/k").ok
    mock_keyring.delete_password.assert_called_once_with("custom", "/k")


def test_delete_missing_entry_is_error(mock_keyring: MagicMock) -> None:
    mock_keyring.delete_password.side_effect = PasswordDeleteError("Password not found")
    outcome = KeyringCredentialStore().delete("/k")
    assert outcome.status is StoreStatus.ERROR
    assert outcome.message == "Password not found"


def test_error_without_text_uses_exception_name(mock_keyring: MagicMock) -> None:
    mock_keyring.delete_password.side_effect = KeyringError()
    outcome = KeyringCredentialStore().delete("/k")
    assert outcome.message == "KeyringError"


def test_query(mock_keyring: MagicMock) -> None:
    store = KeyringCredentialStore()
    assert store.query("/k") is False
    mock_keyring.get_password.return_value = "x"
    assert store.query("/k") is True


def test_query_backend_error_is_false(mock_keyring: MagicMock) -> None:
    mock_keyring.get_password.side_effect = KeyringError("no backend")
    assert KeyringCredentialStore().query("/k") is False


class BackendError(Exception):
    """Error type of a third-party backend outside the keyring hierarchy."""


class TestForeignBackendErrors:
    def test_query_swallows_foreign_error(self, mock_keyring: MagicMock) -> None:
        mock_keyring.get_password.side_effect = BackendError("dbus went away")
        assert KeyringCredentialStore().query("/k") is False

    def test_add_converts_foreign_error(self, mock_keyring: MagicMock) -> None:
        mock_keyring.get_password.side_effect = BackendError("dbus went away")
        outcome = KeyringCredentialStore().add("/k", "secret")
        assert outcome.status is StoreStatus.ERROR
        assert outcome.message == "dbus went away"
        assert outcome.code == UNKNOWN_ERROR_CODE

    def test_delete_converts_foreign_error(self, mock_keyring: MagicMock) -> None:
        mock_keyring.delete_password.side_effect = BackendError("locked")
        outcome = KeyringCredentialStore().delete("/k")
        assert outcome.status is StoreStatus.ERROR
        assert outcome.message == "locked"
