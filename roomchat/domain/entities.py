# roomchat/domain/entities.py
from datetime import UTC, datetime
from enum import StrEnum


class Role(StrEnum):
    ADMIN = "admin"
    USER = "user"
    MEMBER = "member"


class RoomType(StrEnum):
    FREE = "free"
    PREMIUM = "premium"


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from backends that drop the offset."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_admin(user) -> bool:
    return getattr(user, "role", None) == Role.ADMIN
