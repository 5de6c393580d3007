"""Persisted registry records."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .messages import User


@dataclass
class UserProfile:
    """Last-known profile of a user."""

    id: int
    first_name: str
    last_name: str | None = None
    username: str | None = None
    is_bot: bool | None = None
    last_seen: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_user(cls, user: User, seen_at: datetime | None = None) -> "UserProfile":
        return cls(
            id=user.id,
            first_name=user.first_name or "Неизвестно",
            last_name=user.last_name,
            username=user.username,
            is_bot=user.is_bot,
            last_seen=seen_at or datetime.now(timezone.utc),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "username": self.username,
            "is_bot": self.is_bot,
            "last_seen": self.last_seen.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        last_seen = data.get("last_seen")
        return cls(
            id=int(data["id"]),
            first_name=data.get("first_name") or "Неизвестно",
            last_name=data.get("last_name"),
            username=data.get("username"),
            is_bot=data.get("is_bot"),
            last_seen=(
                datetime.fromisoformat(last_seen)
                if last_seen
                else datetime.now(timezone.utc)
            ),
        )
