from __future__ import annotations

import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator, Mapping, Protocol, Union

from .errors import InvalidLogError, LogNotFoundError
from .models import LogEntry, date_key, is_valid_rating

logger = logging.getLogger(__name__)


class Persistence(Protocol):
    def load(self) -> list[LogEntry]: ...

    def save(self, entries: Iterable[LogEntry]) -> bool: ...


# -------------------------
# Actions + reducer
# -------------------------

@dataclass(frozen=True)
class Add:
    entry: LogEntry


@dataclass(frozen=True)
class Edit:
    entry: LogEntry


@dataclass(frozen=True)
class Delete:
    entry: LogEntry


Action = Union[Add, Edit, Delete]


def _require_rated(entry: LogEntry) -> None:
    if entry.rating is None:
        raise InvalidLogError(f"log entry for {entry.key} has no rating")
    if not is_valid_rating(entry.rating):
        raise InvalidLogError(f"rating out of range for {entry.key}: {entry.rating!r}")


def reduce(state: Mapping[str, LogEntry], action: Action) -> Mapping[str, LogEntry]:
    """
    Apply one action to a date-keyed state and return the new state.

    The input is never modified. An invalid action raises before anything is
    built. A delete of a missing key returns `state` itself, so callers can
    detect "nothing changed" with an identity check.
    """
    if not isinstance(action, (Add, Edit, Delete)):
        raise TypeError(f"unknown log action: {action!r}")
    key = action.entry.key

    if isinstance(action, Add):
        _require_rated(action.entry)
        # add on an existing key converges to an edit
        return {**state, key: action.entry}

    if isinstance(action, Edit):
        _require_rated(action.entry)
        if key not in state:
            raise LogNotFoundError(key)
        return {**state, key: action.entry}

    # Delete
    if key not in state:
        return state
    return {k: v for k, v in state.items() if k != key}


# -------------------------
# Store
# -------------------------

class LogStore:
    """
    Date-keyed collection of log entries; the one source of truth for readers.

    Mutations go through dispatch(). Each one that changes state hands the new
    snapshot to persistence: inline, or on `executor` when given (fire and
    forget, in dispatch order for a single-worker executor). A failed save is
    logged and the in-memory state stays as it is.
    """

    def __init__(
        self,
        entries: Iterable[LogEntry] = (),
        persistence: Persistence | None = None,
        executor: Executor | None = None,
    ) -> None:
        items: dict[str, LogEntry] = {}
        for e in entries:
            _require_rated(e)
            items[e.key] = e
        self._items: Mapping[str, LogEntry] = items
        self._persistence = persistence
        self._executor = executor

    @classmethod
    def load(cls, persistence: Persistence, executor: Executor | None = None) -> LogStore:
        return cls(persistence.load(), persistence=persistence, executor=executor)

    # ---- mutations ----

    def dispatch(self, action: Action) -> None:
        new_state = reduce(self._items, action)
        if new_state is self._items:
            return
        self._items = new_state
        self._schedule_save()

    def add(self, entry: LogEntry) -> None:
        self.dispatch(Add(entry))

    def edit(self, entry: LogEntry) -> None:
        self.dispatch(Edit(entry))

    def delete(self, entry: LogEntry) -> None:
        self.dispatch(Delete(entry))

    # ---- reads ----

    def snapshot(self) -> tuple[LogEntry, ...]:
        return tuple(self._items[k] for k in sorted(self._items))

    def get(self, day: date | str) -> LogEntry | None:
        return self._items.get(date_key(day))

    def __contains__(self, day: object) -> bool:
        if not isinstance(day, (date, str)):
            return False
        try:
            return self.get(day) is not None
        except InvalidLogError:
            return False

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.snapshot())

    # ---- persistence ----

    def _schedule_save(self) -> None:
        if self._persistence is None:
            return
        snapshot = self.snapshot()
        if self._executor is not None:
            self._executor.submit(self._save, snapshot)
        else:
            self._save(snapshot)

    def _save(self, snapshot: tuple[LogEntry, ...]) -> None:
        assert self._persistence is not None
        try:
            ok = self._persistence.save(snapshot)
        except Exception:
            logger.exception("Persisting %d log entries failed", len(snapshot))
            return
        if not ok:
            logger.error("Persisting %d log entries failed", len(snapshot))
