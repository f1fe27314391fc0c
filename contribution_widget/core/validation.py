import re
from enum import StrEnum


USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38}$")
DISALLOWED_USERNAME_CHARS = re.compile(r"[^A-Za-z0-9-]")
MAX_USERNAME_LENGTH = 39


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"


def sanitize_username(raw: object) -> str:
    """Strip every character that cannot appear in a GitHub username."""

    if not isinstance(raw, str) or not raw:
        return ""
    return DISALLOWED_USERNAME_CHARS.sub("", raw)


def is_valid_username(value: str) -> bool:
    """Check a username against GitHub's login rules.

    1-39 characters, alphanumerics or single hyphens, never starting or
    ending with a hyphen.
    """

    if not value or len(value) > MAX_USERNAME_LENGTH:
        return False
    return USERNAME_PATTERN.fullmatch(value) is not None


def process_username(raw: object) -> str | None:
    """Sanitize then validate an untrusted username.

    Returns the sanitized username, or None when the input is malformed.
    Disallowed characters are removed rather than rejected, so "<script>"
    resolves to "script".
    """

    sanitized = sanitize_username(raw)
    if not is_valid_username(sanitized):
        return None
    return sanitized


def validate_theme(raw: str | None) -> Theme:
    """Return the requested theme, falling back to dark."""

    if raw == Theme.LIGHT:
        return Theme.LIGHT
    return Theme.DARK
