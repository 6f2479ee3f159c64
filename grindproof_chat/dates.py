# grindproof_chat/dates.py
import re
from datetime import date, timedelta
from typing import Optional

from grindproof_chat.constants import WEEKDAYS

_ISO_DATE = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")
_AMPM_TIME = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*(am|pm)$")
_24H_TIME = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


def normalize_time(value: Optional[str]) -> Optional[str]:
    """
    Normalize a time-of-day to 24h HH:MM.

    Accepts "6am", "2:30pm", "14:30", "9:05:00". Returns None for anything
    else so that a bad model answer never reaches the task service.
    """
    if value is None:
        return None
    cleaned = str(value).strip().lower().replace(".", "")
    if not cleaned:
        return None

    m = _AMPM_TIME.match(cleaned)
    if m:
        hours = int(m.group(1))
        minutes = int(m.group(2) or 0)
        if not (1 <= hours <= 12 and minutes < 60):
            return None
        if m.group(3) == "pm" and hours != 12:
            hours += 12
        if m.group(3) == "am" and hours == 12:
            hours = 0
        return f"{hours:02d}:{minutes:02d}"

    m = _24H_TIME.match(cleaned)
    if m:
        hours, minutes = int(m.group(1)), int(m.group(2))
        if hours < 24 and minutes < 60:
            return f"{hours:02d}:{minutes:02d}"
    return None


def parse_iso_date(value) -> Optional[date]:
    """Parse YYYY-MM-DD (a datetime suffix is ignored); None when invalid."""
    if value is None:
        return None
    if isinstance(value, date):
        return value
    m = _ISO_DATE.search(str(value))
    if not m:
        return None
    try:
        return date.fromisoformat(m.group(1))
    except ValueError:
        return None


def next_weekday(today: date, weekday: int) -> date:
    """Next occurrence of weekday (0=Monday) strictly after today."""
    days_ahead = (weekday - today.weekday()) % 7 or 7
    return today + timedelta(days=days_ahead)


def resolve_relative_date(text: str, today: date) -> Optional[date]:
    """
    Resolve the first date expression found in free text.

    Handles ISO dates, "today", "tonight", "tomorrow", "next week" and
    weekday names (next occurrence).
    """
    lowered = (text or "").lower()

    iso = parse_iso_date(lowered)
    if iso:
        return iso
    if re.search(r"\btomorrow\b", lowered):
        return today + timedelta(days=1)
    if re.search(r"\b(?:today|tonight)\b", lowered):
        return today
    if "next week" in lowered:
        return today + timedelta(days=7)
    for index, name in enumerate(WEEKDAYS):
        if re.search(rf"\b{name}\b", lowered):
            return next_weekday(today, index)
    return None
