from datetime import UTC, datetime
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands DateTime columns back naive; they are stored as UTC"""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)
