"""Tiny translation catalog for the command line output."""

from __future__ import annotations

MONTHS: dict[str, list[str]] = {
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
    "de": [
        "Januar", "Februar", "März", "April", "Mai", "Juni",
        "Juli", "August", "September", "Oktober", "November", "Dezember",
    ],
}

CATALOG: dict[str, dict[str, str]] = {
    "en": {
        "today": "Today",
        "log_saved": "Saved {rating}/{max} for {date}",
        "log_deleted": "Deleted entry for {date}",
        "log_missing": "No entry for {date}",
        "no_logs": "No entries yet.",
        "delete_confirm": "Entry for {date} has a note; pass --yes to delete it.",
        "reminder_prompt": "Want a daily reminder? Run `moodlog reminder on` (or `off` to stop asking).",
        "reminder_set": "Daily reminder: {state}",
        "analytics_set": "Behavioral data: {state}",
        "statistics_locked": "Statistics unlock after {limit} entries ({count} so far).",
        "statistics_mood_chart": "Mood chart",
        "statistics_mood_chart_description": "Average rating per month in {date}",
        "not_enough_data": "Not enough data: {limit} more month(s) with entries needed. Showing an example.",
        "statistics_top_tags": "Top tags",
        "on": "on",
        "off": "off",
    },
    "de": {
        "today": "Heute",
        "log_saved": "{rating}/{max} für {date} gespeichert",
        "log_deleted": "Eintrag für {date} gelöscht",
        "log_missing": "Kein Eintrag für {date}",
        "no_logs": "Noch keine Einträge.",
        "delete_confirm": "Der Eintrag für {date} hat eine Notiz; zum Löschen --yes angeben.",
        "reminder_prompt": "Tägliche Erinnerung? `moodlog reminder on` (oder `off`).",
        "reminder_set": "Tägliche Erinnerung: {state}",
        "analytics_set": "Nutzungsdaten: {state}",
        "statistics_locked": "Statistiken ab {limit} Einträgen ({count} bisher).",
        "statistics_mood_chart": "Stimmungsverlauf",
        "statistics_mood_chart_description": "Durchschnitt pro Monat in {date}",
        "not_enough_data": "Zu wenig Daten: noch {limit} Monat(e) mit Einträgen nötig. Beispielansicht.",
        "statistics_top_tags": "Häufigste Tags",
        "on": "an",
        "off": "aus",
    },
}

DEFAULT_LOCALE = "en"


def _language(locale: str | None) -> str:
    lang = (locale or DEFAULT_LOCALE).replace("_", "-").split("-")[0].lower()
    return lang if lang in CATALOG else DEFAULT_LOCALE


def month_name(index: int, locale: str | None = DEFAULT_LOCALE) -> str:
    if not 0 <= index <= 11:
        raise ValueError(f"month index must be 0-11, got {index}")
    return MONTHS[_language(locale)][index]


def month_label(index: int, locale: str | None = DEFAULT_LOCALE) -> str:
    """Single-letter month label used on chart axes."""
    return month_name(index, locale)[0]


def t(key: str, locale: str | None = DEFAULT_LOCALE, **params: object) -> str:
    text = CATALOG[_language(locale)].get(key) or CATALOG[DEFAULT_LOCALE].get(key) or key
    return text.format(**params) if params else text
