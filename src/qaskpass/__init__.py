"""Qt SSH_ASKPASS helper with keychain support."""

__version__ = "0.1.0"
