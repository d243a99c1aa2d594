"""
Rating statistics over log entries.

Everything here is pure: the same entries (and seed) give the same buckets.
Month labels come from an injected `label(index) -> str`, so nothing in this
module depends on the locale.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from .config import MIN_ITEMS, RATING_MAX, RATING_MIN, STATISTIC_MIN_LOGS
from .i18n import month_label
from .models import LogEntry, Tag

MonthLabel = Callable[[int], str]


@dataclass(frozen=True)
class Bucket:
    month: int
    key: str
    count: int
    value: float | None


@dataclass(frozen=True)
class Sufficiency:
    sufficient: bool
    available: int
    deficit: int


@dataclass(frozen=True)
class YearChart:
    buckets: tuple[Bucket, ...]
    real: bool
    sufficiency: Sufficiency


def average_rating(entries: Iterable[LogEntry]) -> float | None:
    ratings = [e.rating for e in entries if e.is_rated]
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


def rating_distribution_for_year(
    entries: Iterable[LogEntry],
    year: int,
    label: MonthLabel = month_label,
) -> list[Bucket]:
    """
    Twelve buckets, January first. Only rated entries dated in `year` count;
    a month without any has count 0 and value None.
    """
    by_month: list[list[int]] = [[] for _ in range(12)]
    for e in entries:
        if e.date.year != year or not e.is_rated:
            continue
        by_month[e.date.month - 1].append(e.rating)

    buckets: list[Bucket] = []
    for month, ratings in enumerate(by_month):
        value = sum(ratings) / len(ratings) if ratings else None
        buckets.append(Bucket(month=month, key=label(month), count=len(ratings), value=value))
    return buckets


def check_sufficiency(buckets: Sequence[Bucket], min_items: int = MIN_ITEMS) -> Sufficiency:
    available = sum(1 for b in buckets if b.value is not None)
    deficit = max(0, min_items - available)
    return Sufficiency(sufficient=deficit == 0, available=available, deficit=deficit)


def placeholder_distribution(label: MonthLabel = month_label, seed: int = 0) -> list[Bucket]:
    """Made-up distribution drawn behind the "not enough data" notice."""
    rng = random.Random(seed)
    out: list[Bucket] = []
    for month in range(12):
        out.append(
            Bucket(
                month=month,
                key=label(month),
                count=rng.randint(3, 6),
                value=float(rng.randint(RATING_MIN, RATING_MAX)),
            )
        )
    return out


def year_chart(
    entries: Iterable[LogEntry],
    year: int,
    min_items: int = MIN_ITEMS,
    label: MonthLabel = month_label,
    seed: int = 0,
) -> YearChart:
    buckets = rating_distribution_for_year(entries, year, label)
    sufficiency = check_sufficiency(buckets, min_items)
    if sufficiency.sufficient:
        return YearChart(tuple(buckets), real=True, sufficiency=sufficiency)
    return YearChart(tuple(placeholder_distribution(label, seed)), real=False, sufficiency=sufficiency)


def statistics_unlocked(size: int, threshold: int = STATISTIC_MIN_LOGS) -> bool:
    return size >= threshold


def tag_distribution(entries: Iterable[LogEntry], year: int | None = None) -> list[tuple[Tag, int]]:
    """How many entries carry each tag; a tag repeated within one entry counts once."""
    counts: dict[Tag, int] = {}
    for e in entries:
        if year is not None and e.date.year != year:
            continue
        for tag in set(e.tags):
            counts[tag] = counts.get(tag, 0) + 1
    return sorted(counts.items(), key=lambda x: (-x[1], x[0].title.lower(), x[0].id))
