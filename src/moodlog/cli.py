from __future__ import annotations

import argparse
import logging

from .analytics import LoggingAnalytics
from .config import MIN_ITEMS, RATING_MAX, RATING_MIN, STATISTIC_MIN_LOGS
from .errors import InvalidLogError, LogNotFoundError
from .i18n import month_label, month_name, t
from .models import LogEntry, Tag
from .paths import resolve_data_path
from .session import LogSession
from .statistics import (
    average_rating,
    rating_distribution_for_year,
    statistics_unlocked,
    tag_distribution,
    year_chart,
)
from .storage import JsonLogFile
from .store import LogStore
from .timeparse import parse_day, today_local

logger = logging.getLogger(__name__)


# -------------------------
# Parsing + formatting helpers
# -------------------------

def _parse_tags(raw: str | None) -> list[Tag]:
    """
    "work, sleep 🏃run" -> tags in input order, deduplicated case-insensitively.
    The lowercased title is the tag id.
    """
    if not raw:
        return []
    out: list[Tag] = []
    seen: set[str] = set()
    for chunk in raw.replace(",", " ").split():
        title = chunk.strip()
        if not title:
            continue
        key = title.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(Tag(id=key, title=title))
    return out


def _sparkline(values: list[float | None], vmin: float = float(RATING_MIN), vmax: float = float(RATING_MAX)) -> str:
    blocks = "▁▂▃▄▅▆▇█"
    span = max(1e-9, vmax - vmin)
    out = []
    for v in values:
        if v is None:
            out.append(" ")
            continue
        x = (v - vmin) / span
        idx = int(round(x * (len(blocks) - 1)))
        idx = max(0, min(len(blocks) - 1, idx))
        out.append(blocks[idx])
    return "".join(out)


def _fmt_tags(tags: tuple[Tag, ...] | list[Tag]) -> str:
    return ", ".join(f"{tag.emoji} {tag.title}" if tag.emoji else tag.title for tag in tags)


def _print_log_line(entry: LogEntry) -> None:
    line = f"{entry.key} — {entry.rating}/{RATING_MAX}"
    if entry.tags:
        line += f" [{_fmt_tags(entry.tags)}]"
    if entry.message:
        line += f" ({entry.message})"
    print(line)


def _print_log_block(entry: LogEntry) -> None:
    print("```")
    print("📒 Mood Log")
    print(f"- 📅 Date: {entry.key}")
    print(f"- 🙂 Mood ({RATING_MIN}–{RATING_MAX}): {entry.rating}")
    if entry.tags:
        print(f"- 🏷️ Tags: {_fmt_tags(entry.tags)}")
    if entry.message:
        print(f"- 📝 Notes: {entry.message}")
    print("```")


def _print_entry(entry: LogEntry, fmt: str) -> None:
    if fmt == "block":
        _print_log_block(entry)
    else:
        _print_log_line(entry)


def _open_store(args: argparse.Namespace) -> LogStore:
    return LogStore.load(args.storage)


def _onoff(value: str) -> bool:
    return value == "on"


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


# -------------------------
# Log commands
# -------------------------

def cmd_log(args: argparse.Namespace) -> None:
    day = parse_day(args.date)
    store = _open_store(args)
    analytics = LoggingAnalytics(enabled=args.settings.analytics_enabled)
    session = LogSession.open(store, day, settings=args.settings, analytics=analytics)

    # walk the steps in order; fields not given keep their seeded values
    if args.rating is not None:
        try:
            session.set_rating(args.rating)
        except InvalidLogError as e:
            session.discard()
            raise SystemExit(f"--rating must be between {RATING_MIN} and {RATING_MAX}") from e
    session.next()

    if args.tags is not None:
        for tag in list(session.tags):
            session.remove_tag(tag)
        for tag in _parse_tags(args.tags):
            session.add_tag(tag)
    session.next()

    if args.message is not None:
        session.set_message(args.message)

    if session.rating is None:
        session.discard()
        raise SystemExit("--rating is required for a new entry")

    try:
        result = session.commit()
    except LogNotFoundError as e:
        raise SystemExit(str(e)) from e

    print("🙂 " + t("log_saved", args.locale, rating=result.entry.rating, max=RATING_MAX, date=result.entry.key))
    if args.format == "block":
        _print_log_block(result.entry)
    if result.prompt_reminder:
        print("⏰ " + t("reminder_prompt", args.locale))


def cmd_show(args: argparse.Namespace) -> None:
    day = parse_day(args.date)
    entry = _open_store(args).get(day)
    if entry is None:
        print(t("log_missing", args.locale, date=day.isoformat()))
        return
    _print_entry(entry, args.format)


def cmd_list(args: argparse.Namespace) -> None:
    entries = list(_open_store(args).snapshot())
    if args.year is not None:
        entries = [e for e in entries if e.date.year == args.year]

    if not entries:
        print(t("no_logs", args.locale))
        return

    newest_first = list(reversed(entries))
    if args.format == "line":
        print("=== Mood Log (newest first) ===")
    for e in newest_first[: args.limit]:
        _print_entry(e, args.format)


def cmd_delete(args: argparse.Namespace) -> None:
    day = parse_day(args.date)
    store = _open_store(args)
    if day not in store:
        print(t("log_missing", args.locale, date=day.isoformat()))
        return

    analytics = LoggingAnalytics(enabled=args.settings.analytics_enabled)
    session = LogSession.open(store, day, settings=args.settings, analytics=analytics)
    if not session.delete(confirm=lambda _entry: args.yes):
        raise SystemExit(t("delete_confirm", args.locale, date=day.isoformat()))
    print("🧹 " + t("log_deleted", args.locale, date=day.isoformat()))


# -------------------------
# Statistics
# -------------------------

def cmd_stats(args: argparse.Namespace) -> None:
    store = _open_store(args)
    entries = store.snapshot()

    if not statistics_unlocked(len(store), args.min_logs):
        print("🔒 " + t("statistics_locked", args.locale, limit=args.min_logs, count=len(store)))
        return

    year = args.year or today_local().year

    def label(i: int) -> str:
        return month_label(i, args.locale)

    real = rating_distribution_for_year(entries, year, label)
    chart = year_chart(entries, year, min_items=args.min_items, label=label)

    print(f"=== {t('statistics_mood_chart', args.locale)} ({year}) ===")
    print(t("statistics_mood_chart_description", args.locale, date=year))
    avg = average_rating(e for e in entries if e.date.year == year)
    if avg is not None:
        print(f"- average: {avg:.2f}/{RATING_MAX}")

    print()
    for b in real:
        name = month_name(b.month, args.locale)[:3]
        value = f"{b.value:.2f}" if b.value is not None else "—"
        print(f"{name:<4} {b.count:>3}  {value}")

    keys = "".join(b.key for b in chart.buckets)
    spark = _sparkline([b.value for b in chart.buckets])
    print()
    if not chart.real:
        print("⚠️ " + t("not_enough_data", args.locale, limit=chart.sufficiency.deficit))
    print(f"  {spark}")
    print(f"  {keys}")

    tags = tag_distribution(entries, year)[:10]
    if tags:
        print(f"\n[{t('statistics_top_tags', args.locale)}]")
        for tag, c in tags:
            print(f"- {_fmt_tags([tag])}: {c}")


# -------------------------
# Settings + core commands
# -------------------------

def _save_settings(args: argparse.Namespace) -> None:
    if not args.storage.save_settings(args.settings):
        raise SystemExit(f"Could not write settings to {args.data_path}")


def cmd_reminder(args: argparse.Namespace) -> None:
    args.settings.reminder_enabled = _onoff(args.state)
    _save_settings(args)
    print("⏰ " + t("reminder_set", args.locale, state=t(args.state, args.locale)))


def cmd_analytics(args: argparse.Namespace) -> None:
    enabled = _onoff(args.state)
    LoggingAnalytics(enabled=True).track("data_behavioral_toggle", {"enabled": enabled})
    args.settings.analytics_enabled = enabled
    _save_settings(args)
    print("📊 " + t("analytics_set", args.locale, state=t(args.state, args.locale)))


def cmd_init(args: argparse.Namespace) -> None:
    _save_settings(args)
    store = _open_store(args)
    if not args.storage.save(store.snapshot()):
        raise SystemExit(f"Could not write {args.data_path}")
    print(f"✅ Initialized data file: {args.data_path}")


def cmd_where(args: argparse.Namespace) -> None:
    print(args.data_path)
    print(f"↳ using {args.data_reason}")


def main(argv=None) -> None:
    p = argparse.ArgumentParser(prog="moodlog", description="One mood entry per day, plus yearly stats")
    p.add_argument("--data", default=None, help="Path to data JSON (overrides env/default)")
    p.add_argument("--profile", default=None, help="Profile name (e.g. dev/test)")
    p.add_argument("--lang", default=None, help="Output language (en, de)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = p.add_subparsers(dest="cmd", required=True)
    sub.add_parser("init", help="Create the data file").set_defaults(func=cmd_init)
    sub.add_parser("where", help="Show which data file is active and why").set_defaults(func=cmd_where)

    log = sub.add_parser("log", help="Create or edit the entry for a day")
    log.add_argument("--date", default=None, help="YYYY-MM-DD, today, yesterday, 3 days ago (default today)")
    log.add_argument("--rating", type=int, default=None, help=f"Mood rating {RATING_MIN}–{RATING_MAX}")
    log.add_argument("--message", default=None, help="Free-text note")
    log.add_argument("--tags", default=None, help="Comma or space-separated tags; empty string clears them")
    log.add_argument("--format", choices=["line", "block"], default="line")
    log.set_defaults(func=cmd_log)

    show = sub.add_parser("show", help="Show the entry for a day")
    show.add_argument("--date", default=None)
    show.add_argument("--format", choices=["line", "block"], default="block")
    show.set_defaults(func=cmd_show)

    lst = sub.add_parser("list", help="List entries, newest first")
    lst.add_argument("--year", type=int, default=None)
    lst.add_argument("--limit", type=_positive_int, default=50)
    lst.add_argument("--format", choices=["line", "block"], default="line")
    lst.set_defaults(func=cmd_list)

    delete = sub.add_parser("delete", help="Delete the entry for a day")
    delete.add_argument("--date", default=None)
    delete.add_argument("--yes", action="store_true", help="Confirm deleting an entry that has a note")
    delete.set_defaults(func=cmd_delete)

    stats = sub.add_parser("stats", help="Rating distribution per month for a year")
    stats.add_argument("--year", type=int, default=None, help="Default: current year")
    stats.add_argument("--min-items", type=int, default=MIN_ITEMS,
                       help=f"Months with entries needed for a real chart (default {MIN_ITEMS})")
    stats.add_argument("--min-logs", type=int, default=STATISTIC_MIN_LOGS,
                       help=f"Entries needed to unlock statistics (default {STATISTIC_MIN_LOGS})")
    stats.set_defaults(func=cmd_stats)

    reminder = sub.add_parser("reminder", help="Daily reminder preference")
    reminder.add_argument("state", choices=["on", "off"])
    reminder.set_defaults(func=cmd_reminder)

    analytics = sub.add_parser("analytics", help="Share behavioral data")
    analytics.add_argument("state", choices=["on", "off"])
    analytics.set_defaults(func=cmd_analytics)

    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    args.data_path, args.data_reason = resolve_data_path(args.data, args.profile)
    args.storage = JsonLogFile(args.data_path)
    args.settings = args.storage.load_settings()
    args.locale = args.lang or args.settings.locale
    logger.debug("data file %s, locale %s", args.data_path, args.locale)

    args.func(args)


if __name__ == "__main__":
    main()
