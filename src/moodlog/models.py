from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .config import RATING_MAX, RATING_MIN
from .errors import InvalidLogError


def date_key(day: date | str) -> str:
    """Canonical store key for a day: ``YYYY-MM-DD``."""
    if isinstance(day, date):
        return day.isoformat()
    try:
        return date.fromisoformat(str(day).strip()).isoformat()
    except ValueError as e:
        raise InvalidLogError(f"not a YYYY-MM-DD date: {day!r}") from e


def is_valid_rating(value: Any) -> bool:
    # bool is an int subclass; True must not count as a rating of 1
    return isinstance(value, int) and not isinstance(value, bool) and RATING_MIN <= value <= RATING_MAX


@dataclass(frozen=True)
class Tag:
    # identity is the id; title/emoji are locale-dependent display data
    id: str
    title: str = field(default="", compare=False)
    emoji: str | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "title": self.title}
        if self.emoji:
            out["emoji"] = self.emoji
        return out

    @classmethod
    def from_dict(cls, raw: Any) -> Tag:
        if not isinstance(raw, dict) or not str(raw.get("id", "")).strip():
            raise InvalidLogError(f"bad tag record: {raw!r}")
        emoji = raw.get("emoji")
        return cls(
            id=str(raw["id"]).strip(),
            title=str(raw.get("title", "")),
            emoji=str(emoji) if emoji else None,
        )


@dataclass(frozen=True)
class LogEntry:
    date: date
    rating: int | None = None
    message: str = ""
    tags: tuple[Tag, ...] = ()

    @property
    def key(self) -> str:
        return self.date.isoformat()

    @property
    def is_rated(self) -> bool:
        return is_valid_rating(self.rating)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.key,
            "rating": self.rating,
            "message": self.message,
            "tags": [t.to_dict() for t in self.tags],
        }

    @classmethod
    def from_dict(cls, raw: Any) -> LogEntry:
        """
        Build an entry from its persisted record.
        Raises InvalidLogError for anything that could not have been committed:
        missing/bad date, no rating, rating outside the scale, non-list tags.
        """
        if not isinstance(raw, dict):
            raise InvalidLogError(f"bad log record: {raw!r}")

        day = date.fromisoformat(date_key(raw.get("date", "")))

        rating = raw.get("rating")
        if rating is None:
            raise InvalidLogError(f"log record for {day.isoformat()} has no rating")
        if not is_valid_rating(rating):
            raise InvalidLogError(f"rating out of range for {day.isoformat()}: {rating!r}")

        tags = raw.get("tags") or []
        if not isinstance(tags, list):
            raise InvalidLogError(f"tags must be a list for {day.isoformat()}")

        return cls(
            date=day,
            rating=rating,
            message=str(raw.get("message") or ""),
            tags=tuple(Tag.from_dict(t) for t in tags),
        )


@dataclass
class Settings:
    # None until the user has answered the reminder prompt
    reminder_enabled: bool | None = None
    analytics_enabled: bool = True
    locale: str = "en"

    def to_dict(self) -> dict[str, Any]:
        return {
            "reminder_enabled": self.reminder_enabled,
            "analytics_enabled": self.analytics_enabled,
            "locale": self.locale,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> Settings:
        if not isinstance(raw, dict):
            return cls()
        reminder = raw.get("reminder_enabled")
        return cls(
            reminder_enabled=reminder if isinstance(reminder, bool) else None,
            analytics_enabled=bool(raw.get("analytics_enabled", True)),
            locale=str(raw.get("locale") or "en"),
        )
