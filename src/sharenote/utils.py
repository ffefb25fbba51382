import re
from datetime import UTC, datetime

ALIAS_RE = re.compile(r"^[a-z0-9_-]{2,50}$")
_ALIAS_DISALLOWED_RE = re.compile(r"[^a-z0-9-]")


def is_valid_alias(value: str) -> bool:
    return bool(ALIAS_RE.fullmatch(value))


def normalize_alias(value: str | None) -> str:
    """Lower-case an alias and replace every character outside [a-z0-9-] with '-'."""
    if not value:
        return ""
    return _ALIAS_DISALLOWED_RE.sub("-", value.strip().lower())


def now() -> datetime:
    return datetime.now(UTC)
