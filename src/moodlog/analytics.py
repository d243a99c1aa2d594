from __future__ import annotations

import logging
from typing import Any, Iterable

from .models import Tag

event_logger = logging.getLogger(__name__)


def tag_ids(tags: Iterable[Tag]) -> list[str]:
    # titles are user text, only ids leave the device
    return [t.id for t in tags]


class Analytics:
    """Fire-and-forget event sink. Nothing in moodlog reads events back."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def track(self, event: str, properties: dict[str, Any] | None = None) -> None:
        if not self.enabled:
            return
        self._send(event, dict(properties or {}))

    def _send(self, event: str, properties: dict[str, Any]) -> None:
        pass


class NullAnalytics(Analytics):
    def __init__(self) -> None:
        super().__init__(enabled=False)


class LoggingAnalytics(Analytics):
    """Writes events to the `moodlog.analytics` logger."""

    def _send(self, event: str, properties: dict[str, Any]) -> None:
        event_logger.info("event %s %s", event, properties)


class RecordingAnalytics(Analytics):
    """Keeps events in memory; handy for tests and debugging."""

    def __init__(self, enabled: bool = True) -> None:
        super().__init__(enabled)
        self.events: list[tuple[str, dict[str, Any]]] = []

    def _send(self, event: str, properties: dict[str, Any]) -> None:
        self.events.append((event, properties))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]
