"""Exceptions raised by the log store and editing sessions."""

from __future__ import annotations


class MoodlogError(Exception):
    pass


class InvalidLogError(MoodlogError, ValueError):
    """A log entry (or draft) breaks the entry contract, e.g. no rating."""


class LogNotFoundError(MoodlogError, KeyError):
    """An edit targeted a date that has no entry."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"no log entry for {self.key}"


class SessionClosedError(MoodlogError):
    """The editing session was already committed, deleted or discarded."""
