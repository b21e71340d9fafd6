"""Preference persistence for qaskpass."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from qaskpass.models import AskpassConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "qaskpass"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"

CONFIG_PATH_ENV = "QASKPASS_CONFIG"


def default_config_path() -> Path:
    """Return the config path, honouring the QASKPASS_CONFIG override."""
    override = os.environ.get(CONFIG_PATH_ENV)
    return Path(override).expanduser() if override else DEFAULT_CONFIG_FILE


class ConfigManager:
    """Loads and saves AskpassConfig to a JSON file."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path or default_config_path()

    def load(self) -> AskpassConfig:
        """Load config from disk. Returns default config if file doesn't exist."""
        if not self.config_path.exists():
            logger.info("No config file found at %s, using defaults", self.config_path)
            return AskpassConfig()

        try:
            data = json.loads(self.config_path.read_text(encoding="utf-8"))
            return AskpassConfig.from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error("Failed to parse config at %s: %s", self.config_path, e)
            raise

    def save(self, config: AskpassConfig) -> None:
        """Save config to disk, creating parent directories as needed."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(config.to_dict(), indent=2)
        self.config_path.write_text(data + "\n", encoding="utf-8")
        logger.info("Config saved to %s", self.config_path)

    def load_or_default(self) -> AskpassConfig:
        """Like load(), but a broken file yields defaults instead of raising."""
        try:
            return self.load()
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Ignoring unreadable config at %s", self.config_path)
            return AskpassConfig()

    # --- "remember in keychain" preference ---

    def get_use_keychain(self) -> bool | None:
        return self.load_or_default().use_keychain

    def set_use_keychain(self, value: bool) -> None:
        config = self.load_or_default()
        config.use_keychain = value
        self.save(config)
