from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# SQLite hands datetimes back without tzinfo; everything stored is UTC
def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def rfc3339(value: Optional[datetime] = None) -> str:
    value = as_utc(value) if value is not None else utcnow()
    return value.replace(microsecond=0).isoformat().replace("+00:00", "Z")
