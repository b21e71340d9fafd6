"""Credential store backed by the system keychain.

Supports:
- macOS: Keychain
- Windows: Credential Locker
- Linux: Secret Service (GNOME Keyring / KWallet)
"""

from __future__ import annotations

import logging
from typing import Protocol

import keyring
from keyring.errors import KeyringError

from qaskpass.models import StoreOutcome

logger = logging.getLogger(__name__)

DEFAULT_SERVICE = "SSH"

# Generic failure code for backends that do not report one
UNKNOWN_ERROR_CODE = -1


class CredentialStore(Protocol):
    """Capability interface over a secure credential vault."""

    def add(self, account: str, secret: str) -> StoreOutcome: ...

    def delete(self, account: str) -> StoreOutcome: ...

    def query(self, account: str) -> bool: ...


def _error_outcome(exc: Exception) -> StoreOutcome:
    code = getattr(exc, "errno", None)
    message = str(exc) or type(exc).__name__
    return StoreOutcome.error(code if isinstance(code, int) else UNKNOWN_ERROR_CODE, message)


class KeyringCredentialStore:
    """CredentialStore over the ``keyring`` package.

    Entries are keyed by (service, account). ``add`` never overwrites an
    existing entry; callers must ``delete`` first.
    """

    def __init__(self, service: str = DEFAULT_SERVICE) -> None:
        self.service = service

    def add(self, account: str, secret: str) -> StoreOutcome:
        try:
            if keyring.get_password(self.service, account) is not None:
                logger.info("Keychain entry for %s already exists", account)
                return StoreOutcome.duplicate()
            keyring.set_password(self.service, account, secret)
        except (KeyringError, OSError) as e:
            logger.warning("Failed to store keychain entry for %s: %s", account, e)
            return _error_outcome(e)
        except Exception as e:
            # Third-party backends may raise outside the keyring hierarchy
            logger.warning("Keyring backend error storing %s: %s", account, e)
            return _error_outcome(e)

        logger.info("Stored keychain entry for %s", account)
        return StoreOutcome.success()

    def delete(self, account: str) -> StoreOutcome:
        try:
            keyring.delete_password(self.service, account)
        except (KeyringError, OSError) as e:
            logger.warning("Failed to delete keychain entry for %s: %s", account, e)
            return _error_outcome(e)
        except Exception as e:
            logger.warning("Keyring backend error deleting %s: %s", account, e)
            return _error_outcome(e)

        logger.info("Deleted keychain entry for %s", account)
        return StoreOutcome.success()

    def query(self, account: str) -> bool:
        try:
            return keyring.get_password(self.service, account) is not None
        except (KeyringError, OSError) as e:
            logger.debug("Keychain lookup for %s failed: %s", account, e)
            return False
        except Exception as e:
            logger.debug("Keyring backend error looking up %s: %s", account, e)
            return False
