"""Entity ids and ISO-8601 timestamps."""
from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
SUFFIX_LENGTH = 9
DEFAULT_PREFIX = "entity"

_KIND_PREFIXES = {
    "internship": "internship",
    "application": "application",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def epoch_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_id(prefix: str | None, now: Optional[datetime] = None) -> str:
    """Build `<prefix>-<ms epoch>-<base36 suffix>`; uniqueness is probabilistic only."""
    moment = now or utcnow()
    return f"{prefix or DEFAULT_PREFIX}-{epoch_millis(moment)}-{random_suffix()}"


def prefix_for(kind: str | None, record: Mapping[str, Any] | None = None) -> str:
    """Users are prefixed with their userType, other kinds with the kind name."""
    if kind == "user":
        user_type = (record or {}).get("userType")
        return str(user_type) if user_type else DEFAULT_PREFIX
    return _KIND_PREFIXES.get(kind or "", DEFAULT_PREFIX)


def to_iso(moment: datetime) -> str:
    """Render like JavaScript's toISOString: UTC, milliseconds, trailing Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str | None) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def timestamp_pair(now: Optional[datetime] = None) -> tuple[str, str]:
    """(createdAt, updatedAt) for a brand new record: the same instant twice."""
    stamp = to_iso(now or utcnow())
    return stamp, stamp
