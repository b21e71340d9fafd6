"""Build a PromptRequest from what ssh hands an askpass program."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence

from qaskpass.models import PromptRequest, PromptVariant

logger = logging.getLogger(__name__)

PROMPT_ENV = "SSH_ASKPASS_PROMPT"
TIMEOUT_ENV = "SSH_ASKPASS_TIMEOUT"

# SSH_ASKPASS_PROMPT values that force a variant
PROMPT_HINTS: dict[str, PromptVariant] = {
    "confirm": PromptVariant.CONFIRMATION,
    "none": PromptVariant.INFORMATION,
}

# Known ssh prompts, first match wins. Group "account" names the keychain entry.
PROMPT_PATTERNS: list[tuple[re.Pattern[str], PromptVariant]] = [
    (
        re.compile(r"^Enter passphrase for key '(?P<account>.+)':\s*$"),
        PromptVariant.PASSPHRASE,
    ),
    (
        re.compile(
            r"^Bad passphrase, try again for (?P<account>.+?)"
            r"(?: \(will confirm each use\))?:\s*$"
        ),
        PromptVariant.BAD_PASSPHRASE,
    ),
    (
        re.compile(
            r"^Enter passphrase for (?P<account>.+?)(?: \(will confirm each use\))?:\s*$"
        ),
        PromptVariant.PASSPHRASE,
    ),
    (re.compile(r"^(?P<account>\S+)'s password:\s*$"), PromptVariant.PASSWORD),
    (re.compile(r"^Allow use of key .+\?", re.DOTALL), PromptVariant.CONFIRMATION),
    (re.compile(r"\(yes/no[^)]*\)\?\s*$", re.DOTALL), PromptVariant.INPUT_CONFIRMATION),
]


def parse_timeout(value: str | None) -> int:
    """Parse SSH_ASKPASS_TIMEOUT. Missing, malformed or negative means no countdown."""
    if not value:
        return 0
    try:
        seconds = int(value.strip())
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", TIMEOUT_ENV, value)
        return 0
    if seconds < 0:
        logger.warning("Ignoring negative %s=%d", TIMEOUT_ENV, seconds)
        return 0
    return seconds


def classify_message(message: str) -> tuple[PromptVariant, str]:
    """Return the variant and account for an ssh prompt message."""
    text = message.strip()
    for pattern, variant in PROMPT_PATTERNS:
        match = pattern.search(text)
        if match:
            account = match.groupdict().get("account") or ""
            return variant, account
    return PromptVariant.PASSPHRASE, ""


def build_request(argv: Sequence[str], environ: Mapping[str, str]) -> PromptRequest:
    """Build the request from askpass arguments (without argv[0]) and environment."""
    message = " ".join(argv).strip()
    variant, account = classify_message(message)

    hint = environ.get(PROMPT_ENV, "").strip().lower()
    if hint in PROMPT_HINTS:
        variant = PROMPT_HINTS[hint]
        account = ""

    timeout = parse_timeout(environ.get(TIMEOUT_ENV))
    logger.debug("Classified prompt as %s (account=%r)", variant.value, account)
    return PromptRequest(
        variant=variant,
        message=message,
        account=account,
        timeout_seconds=timeout,
    )
