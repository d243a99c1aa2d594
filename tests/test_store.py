"""Tests for the log store reducer and LogStore."""

from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest

from moodlog.errors import InvalidLogError, LogNotFoundError
from moodlog.models import LogEntry, Tag
from moodlog.store import Add, Delete, Edit, LogStore, reduce


def _entry(day: str, rating: int | None = 3, message: str = "", tags=()) -> LogEntry:
    return LogEntry(date=date.fromisoformat(day), rating=rating, message=message, tags=tuple(tags))


class FakePersistence:
    def __init__(self, entries=(), ok: bool = True, boom: bool = False) -> None:
        self.entries = list(entries)
        self.ok = ok
        self.boom = boom
        self.saves: list[tuple[LogEntry, ...]] = []

    def load(self):
        return list(self.entries)

    def save(self, entries):
        if self.boom:
            raise OSError("disk full")
        self.saves.append(tuple(entries))
        return self.ok


# ---- reduce ----


def test_reduce_add_inserts():
    state = reduce({}, Add(_entry("2024-03-01")))
    assert list(state) == ["2024-03-01"]


def test_reduce_does_not_modify_input():
    before = {"2024-03-01": _entry("2024-03-01")}
    reduce(before, Delete(_entry("2024-03-01")))
    reduce(before, Add(_entry("2024-03-02")))
    assert list(before) == ["2024-03-01"]


def test_reduce_add_existing_acts_as_edit():
    state = reduce({}, Add(_entry("2024-03-01", 4, "ok")))
    twice = reduce(state, Add(_entry("2024-03-01", 2, "better")))
    edited = reduce(state, Edit(_entry("2024-03-01", 2, "better")))
    assert twice == edited
    assert len(twice) == 1


def test_reduce_edit_missing_raises():
    with pytest.raises(LogNotFoundError):
        reduce({}, Edit(_entry("2024-03-01")))


def test_reduce_delete_missing_returns_same_state():
    state = {"2024-03-01": _entry("2024-03-01")}
    assert reduce(state, Delete(_entry("2024-04-01"))) is state


def test_reduce_rejects_unrated():
    with pytest.raises(InvalidLogError):
        reduce({}, Add(_entry("2024-03-01", rating=None)))


def test_reduce_rejects_out_of_range_rating():
    with pytest.raises(InvalidLogError):
        reduce({}, Add(_entry("2024-03-01", rating=9)))


def test_reduce_unknown_action():
    with pytest.raises(TypeError):
        reduce({}, "add")


# ---- LogStore ----


def test_add_then_edit_scenario():
    store = LogStore()
    store.add(_entry("2024-03-01", 4, "ok"))
    snap = store.snapshot()
    assert len(snap) == 1
    assert snap[0].key == "2024-03-01"
    assert snap[0].rating == 4

    store.edit(_entry("2024-03-01", 2, "better"))
    snap = store.snapshot()
    assert len(store) == 1
    assert snap[0].rating == 2
    assert snap[0].message == "better"


def test_edit_replaces_tags_wholesale():
    store = LogStore([_entry("2024-03-01", tags=[Tag("work", "Work"), Tag("gym", "Gym")])])
    store.edit(_entry("2024-03-01", tags=[Tag("sleep", "Sleep")]))
    assert store.get("2024-03-01").tags == (Tag("sleep"),)


def test_edit_missing_leaves_store_unchanged():
    store = LogStore([_entry("2024-03-01")])
    with pytest.raises(LogNotFoundError):
        store.edit(_entry("2024-03-02"))
    assert [e.key for e in store.snapshot()] == ["2024-03-01"]


def test_delete_missing_is_noop():
    store = LogStore([_entry("2024-03-01")])
    before = store.snapshot()
    store.delete(_entry("2030-01-01"))
    assert store.snapshot() == before


def test_delete_removes():
    store = LogStore([_entry("2024-03-01"), _entry("2024-03-02")])
    store.delete(_entry("2024-03-01", rating=None))
    assert len(store) == 1
    assert "2024-03-01" not in store
    assert date(2024, 3, 2) in store


def test_snapshot_sorted_by_date():
    store = LogStore()
    for day in ["2024-05-01", "2023-12-31", "2024-01-15"]:
        store.add(_entry(day))
    assert [e.key for e in store.snapshot()] == ["2023-12-31", "2024-01-15", "2024-05-01"]


def test_snapshot_is_not_live():
    store = LogStore([_entry("2024-03-01")])
    snap = store.snapshot()
    store.add(_entry("2024-03-02"))
    assert len(snap) == 1
    assert isinstance(snap, tuple)


def test_get_accepts_date_or_key():
    store = LogStore([_entry("2024-03-01", 5)])
    assert store.get(date(2024, 3, 1)).rating == 5
    assert store.get("2024-03-01").rating == 5
    assert store.get("2024-03-02") is None


def test_random_dispatch_sequence_matches_model():
    rng = random.Random(7)
    days = [f"2024-01-{d:02d}" for d in range(1, 6)]
    store = LogStore()
    model: dict[str, LogEntry] = {}

    for _ in range(300):
        day = rng.choice(days)
        entry = _entry(day, rng.randint(1, 5), rng.choice(["", "a", "b"]))
        op = rng.choice(["add", "edit", "delete"])
        if op == "add":
            store.add(entry)
            model[day] = entry
        elif op == "edit":
            if day in model:
                store.edit(entry)
                model[day] = entry
            else:
                with pytest.raises(LogNotFoundError):
                    store.edit(entry)
        else:
            store.delete(entry)
            model.pop(day, None)

        assert len(store) == len(model)

    assert {e.key: e for e in store.snapshot()} == model


# ---- persistence ----


def test_constructor_rejects_unrated_entry():
    with pytest.raises(InvalidLogError):
        LogStore([_entry("2024-03-01"), _entry("2024-03-02", rating=None)])


def test_load_from_persistence():
    p = FakePersistence([_entry("2024-03-01"), _entry("2024-03-02")])
    store = LogStore.load(p)
    assert len(store) == 2


def test_every_mutation_saves_full_snapshot():
    p = FakePersistence()
    store = LogStore(persistence=p)
    store.add(_entry("2024-03-01"))
    store.add(_entry("2024-03-02"))
    store.delete(_entry("2024-03-01"))
    assert [len(s) for s in p.saves] == [1, 2, 1]
    assert p.saves[-1][0].key == "2024-03-02"


def test_noop_delete_does_not_save():
    p = FakePersistence()
    store = LogStore(persistence=p)
    store.delete(_entry("2024-03-01"))
    assert p.saves == []


def test_rejected_mutation_does_not_save():
    p = FakePersistence()
    store = LogStore(persistence=p)
    with pytest.raises(InvalidLogError):
        store.add(_entry("2024-03-01", rating=None))
    assert p.saves == []


def test_save_failure_keeps_memory_state(caplog):
    store = LogStore(persistence=FakePersistence(boom=True))
    store.add(_entry("2024-03-01"))
    assert len(store) == 1
    assert "Persisting 1 log entries failed" in caplog.text


def test_save_returning_false_is_logged(caplog):
    store = LogStore(persistence=FakePersistence(ok=False))
    store.add(_entry("2024-03-01"))
    assert len(store) == 1
    assert "failed" in caplog.text


def test_executor_saves_in_dispatch_order():
    p = FakePersistence()
    with ThreadPoolExecutor(max_workers=1) as pool:
        store = LogStore(persistence=p, executor=pool)
        for d in range(1, 6):
            store.add(_entry(f"2024-02-{d:02d}"))
    assert [len(s) for s in p.saves] == [1, 2, 3, 4, 5]
