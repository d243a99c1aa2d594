from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

from .analytics import Analytics, NullAnalytics, tag_ids
from .errors import InvalidLogError, SessionClosedError
from .models import LogEntry, Settings, Tag, is_valid_rating
from .store import LogStore


class Step(enum.Enum):
    RATING = "rating"
    TAGS = "tags"
    NOTE = "note"
    COMMITTED = "committed"
    CANCELLED = "cancelled"
    DELETED = "deleted"


EDIT_STEPS = (Step.RATING, Step.TAGS, Step.NOTE)


@dataclass(frozen=True)
class CommitResult:
    entry: LogEntry
    created: bool
    # second-ever entry and no reminder preference yet
    prompt_reminder: bool


class LogSession:
    """
    Draft of one day's entry, built over the rating -> tags -> note steps.

    Moving between steps never clears draft fields. Nothing reaches the store
    until commit() or delete(); discard() leaves it untouched.
    """

    def __init__(
        self,
        store: LogStore,
        day: date,
        settings: Settings | None = None,
        analytics: Analytics | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or Settings()
        self.analytics = analytics or NullAnalytics()

        existing = store.get(day)
        self.existed = existing is not None

        seed = existing or LogEntry(date=day)
        self.date: date = seed.date
        self.rating: int | None = seed.rating
        self.message: str = seed.message
        self.tags: list[Tag] = list(seed.tags)

        self.step = Step.RATING

    @classmethod
    def open(
        cls,
        store: LogStore,
        day: date,
        settings: Settings | None = None,
        analytics: Analytics | None = None,
    ) -> LogSession:
        return cls(store, day, settings=settings, analytics=analytics)

    @property
    def is_open(self) -> bool:
        return self.step in EDIT_STEPS

    def _require_open(self) -> None:
        if not self.is_open:
            raise SessionClosedError(f"session for {self.date.isoformat()} is {self.step.value}")

    # ---- steps ----

    def go_to(self, step: Step) -> None:
        self._require_open()
        if step not in EDIT_STEPS:
            raise ValueError(f"cannot jump to {step.value}; use commit/delete/discard")
        self.step = step

    def next(self) -> Step:
        self._require_open()
        i = EDIT_STEPS.index(self.step)
        self.step = EDIT_STEPS[min(i + 1, len(EDIT_STEPS) - 1)]
        return self.step

    def back(self) -> Step:
        self._require_open()
        i = EDIT_STEPS.index(self.step)
        self.step = EDIT_STEPS[max(i - 1, 0)]
        return self.step

    # ---- draft edits ----

    def set_rating(self, value: int) -> None:
        self._require_open()
        if not is_valid_rating(value):
            raise InvalidLogError(f"rating out of range: {value!r}")
        self.analytics.track("log_rating_changed", {"label": value})
        self.rating = value

    def set_message(self, text: str) -> None:
        self._require_open()
        self.message = text or ""

    def add_tag(self, tag: Tag) -> None:
        self._require_open()
        if tag not in self.tags:
            self.tags.append(tag)

    def remove_tag(self, tag: Tag) -> None:
        self._require_open()
        self.tags = [t for t in self.tags if t != tag]

    def draft(self) -> LogEntry:
        return LogEntry(date=self.date, rating=self.rating, message=self.message, tags=tuple(self.tags))

    def _event_properties(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "messageLength": len(self.message),
            "rating": self.rating,
            "tags": tag_ids(self.tags),
        }

    # ---- terminal transitions ----

    def commit(self) -> CommitResult:
        self._require_open()
        if self.rating is None:
            raise InvalidLogError(f"pick a rating before saving {self.date.isoformat()}")

        entry = self.draft()
        props = self._event_properties()
        self.analytics.track("log_saved", props)
        self.analytics.track("log_changed" if self.existed else "log_created", props)

        if self.existed:
            self.store.edit(entry)
        else:
            self.store.add(entry)
        self.step = Step.COMMITTED

        prompt = not self.existed and len(self.store) == 2 and self.settings.reminder_enabled is None
        if prompt:
            self.analytics.track("reminder_modal_open")
        return CommitResult(entry=entry, created=not self.existed, prompt_reminder=prompt)

    def delete(self, confirm: Callable[[LogEntry], bool] | None = None) -> bool:
        """
        Remove the day's entry. When the draft carries a note and `confirm` is
        given, a falsy answer keeps the session open and returns False.
        Only an entry that existed when the session opened can be deleted.
        """
        self._require_open()
        if not self.existed:
            raise InvalidLogError(f"no saved entry for {self.date.isoformat()} to delete")
        entry = self.draft()
        if self.message and confirm is not None and not confirm(entry):
            return False

        self.analytics.track("log_deleted")
        self.store.delete(entry)
        self.step = Step.DELETED
        return True

    def discard(self) -> None:
        self._require_open()
        self.analytics.track("log_cancelled")
        self.step = Step.CANCELLED
