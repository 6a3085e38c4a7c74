from __future__ import annotations

from datetime import date, datetime, time

from ..core.exceptions import ValidationError

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_iso_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid datetime (ISO 8601): {value!r}")


def parse_hhmm(value: str) -> time:
    return datetime.strptime(value.strip(), "%H:%M").time()


def parse_weekday(value: str | int) -> int:
    """Weekday name ("sunday") or number (Monday=0) to date.weekday() number."""
    if isinstance(value, int):
        if not 0 <= value <= 6:
            raise ValueError(f"Weekday out of range: {value}")
        return value

    v = str(value).strip().lower()
    if v.isdigit():
        return parse_weekday(int(v))
    if v not in WEEKDAYS:
        raise ValueError(f"Unknown weekday: {value!r}")
    return WEEKDAYS.index(v)


def day_key(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def format_elapsed(start: datetime, now: datetime) -> str:
    """Running timer label for an active session: MM:SS, or HH:MM:SS past an hour."""
    seconds = max(0, int((now - start).total_seconds()))
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    if h > 0:
        return f"{h:02d}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
