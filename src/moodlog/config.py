from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

RATING_MIN = 1
RATING_MAX = 5

DEFAULT_STATISTIC_MIN_LOGS = 7
DEFAULT_MIN_ITEMS = 5


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer), using %d", name, raw, default)
        return default
    if value < 0:
        logger.warning("Ignoring %s=%r (negative), using %d", name, raw, default)
        return default
    return value


# store size needed before statistics are unlocked at all
STATISTIC_MIN_LOGS = _int_from_env("MOODLOG_STATISTIC_MIN_LOGS", DEFAULT_STATISTIC_MIN_LOGS)

# months with a rated entry needed before a year chart shows real data
MIN_ITEMS = _int_from_env("MOODLOG_MIN_ITEMS", DEFAULT_MIN_ITEMS)
