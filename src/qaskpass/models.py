"""Data models for prompt requests, store results and preferences."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class PromptVariant(Enum):
    CONFIRMATION = "confirmation"
    INFORMATION = "information"
    PASSWORD = "password"
    PASSPHRASE = "passphrase"
    BAD_PASSPHRASE = "badPassphrase"
    INPUT_CONFIRMATION = "inputConfirmation"

    @property
    def stores_secret(self) -> bool:
        """Whether an entered secret may be remembered in the keychain."""
        return self in (
            PromptVariant.PASSWORD,
            PromptVariant.PASSPHRASE,
            PromptVariant.BAD_PASSPHRASE,
        )

    @property
    def has_secret_field(self) -> bool:
        return self not in (PromptVariant.CONFIRMATION, PromptVariant.INFORMATION)


class FocusedControl(Enum):
    CANCEL = auto()
    OK = auto()


class StoreStatus(Enum):
    SUCCESS = auto()
    DUPLICATE_ENTRY = auto()
    ERROR = auto()


@dataclass(frozen=True)
class StoreOutcome:
    """Result of a single credential store call."""

    status: StoreStatus
    code: int = 0
    message: str = ""

    @classmethod
    def success(cls) -> StoreOutcome:
        return cls(StoreStatus.SUCCESS)

    @classmethod
    def duplicate(cls) -> StoreOutcome:
        return cls(StoreStatus.DUPLICATE_ENTRY)

    @classmethod
    def error(cls, code: int, message: str) -> StoreOutcome:
        return cls(StoreStatus.ERROR, code=code, message=message)

    @property
    def ok(self) -> bool:
        return self.status is StoreStatus.SUCCESS


@dataclass(frozen=True)
class PromptRequest:
    """What to ask the user. Built once by the host, never mutated."""

    variant: PromptVariant
    message: str = ""
    account: str = ""
    timeout_seconds: int = 0

    def __post_init__(self) -> None:
        if self.timeout_seconds < 0:
            raise ValueError(f"timeout_seconds must be >= 0, got {self.timeout_seconds}")

    @property
    def keychain_eligible(self) -> bool:
        """True when a remembered secret would actually be stored."""
        return self.variant.stores_secret and bool(self.account)

    @property
    def countdown_armed(self) -> bool:
        return self.variant is PromptVariant.CONFIRMATION and self.timeout_seconds > 0


@dataclass
class AskpassConfig:
    """Persisted user preferences."""

    use_keychain: bool | None = None

    def to_dict(self) -> dict[str, object]:
        return {"use_keychain": self.use_keychain}

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> AskpassConfig:
        value = data.get("use_keychain")
        return cls(use_keychain=None if value is None else bool(value))
