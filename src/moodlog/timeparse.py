from __future__ import annotations

import re
from datetime import date, datetime, timedelta


def today_local() -> date:
    return datetime.now().astimezone().date()


def parse_day(value: str | None, today: date | None = None) -> date:
    """
    Parse a user-supplied day into a calendar date.
    Accepts:
      - None / blank -> today
      - ISO "2024-03-01" (a full ISO timestamp is cut to its date)
      - "2024/03/01", "01.03.2024"
      - keywords: "today", "yesterday", "tomorrow"
      - relative: "1 day ago", "3 days ago", "2 weeks ago"
    """
    base = today or today_local()
    if not value or not value.strip():
        return base

    raw = value.strip()
    s = raw.lower()

    # --- 1) ISO date or timestamp ---
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        pass

    # --- 2) Keywords ---
    if s == "today":
        return base
    if s == "yesterday":
        return base - timedelta(days=1)
    if s == "tomorrow":
        return base + timedelta(days=1)

    # --- 3) Relative like "3 days ago", "2 weeks ago" ---
    m = re.fullmatch(r"(\d+)\s*(day|days|week|weeks)\s*ago", s)
    if m:
        n = int(m.group(1))
        days = n * 7 if "week" in m.group(2) else n
        return base - timedelta(days=days)

    # --- 4) Other date formats ---
    for fmt in ("%Y/%m/%d", "%d.%m.%Y"):
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue

    raise SystemExit(
        f"Could not parse date {value!r}. Try '2024-03-01', 'today', 'yesterday' or '3 days ago'."
    )
