from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import time
from pathlib import Path
from typing import Any, Iterable

from .errors import InvalidLogError
from .models import LogEntry, Settings

logger = logging.getLogger(__name__)


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def read_document(path: Path) -> dict[str, Any]:
    """
    Read the journal document.
    - missing/empty file -> {}
    - corrupt file -> raw text backed up next to it, then {}
    - non-object JSON -> {}
    Never creates the file; the first save does.
    """
    path = Path(path)
    if not path.exists():
        return {}

    txt = path.read_text(encoding="utf-8").strip()
    if not txt:
        return {}

    try:
        data = json.loads(txt)
    except json.JSONDecodeError:
        backup = path.with_suffix(f".corrupt-{int(time.time())}.json")
        backup.write_text(txt, encoding="utf-8")
        logger.warning("Corrupt journal file %s, backed up to %s", path, backup)
        return {}

    if not isinstance(data, dict):
        logger.warning("Journal file %s does not hold a JSON object, ignoring it", path)
        return {}
    return data

def write_document(path: Path, data: dict[str, Any]) -> None:
    """
    Atomic write: uniquely named temp file in the same directory, fsync,
    os.replace. Permissions are set to 0600 when the platform allows it.
    """
    path = Path(path)
    _ensure_parent(path)
    payload = json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"

    # one temp file per write; concurrent writers must never share a name
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=path.parent, prefix=path.name + ".", suffix=".tmp", delete=False
    ) as f:
        tmp = Path(f.name)
        f.write(payload)
        f.flush()
        os.fsync(f.fileno())

    try:
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise

    try:
        os.chmod(path, 0o600)
    except OSError:
        pass


class JsonLogFile:
    """
    Persistence for the log store and settings, backed by one JSON document:

        {"logs": {"2024-03-01": {...}, ...}, "settings": {...}}

    Logs and settings share the document, so every write is a read-modify-write
    held under one lock per instance; a background log save and a settings
    save from the caller's thread cannot drop each other's section.

    save()/save_settings() report failure by returning False (and logging)
    instead of raising, so a failed write never undoes an in-memory change.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> list[LogEntry]:
        with self._lock:
            logs = read_document(self.path).get("logs", {})
        if not isinstance(logs, dict):
            logger.warning("Ignoring malformed 'logs' section in %s", self.path)
            return []

        entries: list[LogEntry] = []
        for key, raw in logs.items():
            try:
                entry = LogEntry.from_dict(raw)
            except InvalidLogError as e:
                logger.warning("Skipping log record %s in %s: %s", key, self.path, e)
                continue
            if entry.key != key:
                logger.warning("Log record under %s is dated %s, keeping its own date", key, entry.key)
            entries.append(entry)
        return entries

    def _update(self, section: str, value: Any) -> None:
        with self._lock:
            data = read_document(self.path)
            data[section] = value
            write_document(self.path, data)

    def save(self, entries: Iterable[LogEntry]) -> bool:
        logs = {e.key: e.to_dict() for e in entries}
        try:
            self._update("logs", logs)
        except OSError:
            logger.exception("Could not save journal to %s", self.path)
            return False
        logger.debug("Saved %d log entries to %s", len(logs), self.path)
        return True

    def load_settings(self) -> Settings:
        with self._lock:
            return Settings.from_dict(read_document(self.path).get("settings"))

    def save_settings(self, settings: Settings) -> bool:
        try:
            self._update("settings", settings.to_dict())
        except OSError:
            logger.exception("Could not save settings to %s", self.path)
            return False
        return True
