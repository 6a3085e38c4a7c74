"""Consecutive-attendance streaks over a six-day workweek.

Pure functions: no I/O, safe to call from any thread. History entries are
``(day, status)`` pairs in any order; ``day`` may be a date or a datetime and
``status`` an AttendanceStatus or its stored string value.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import AbstractSet, Iterable, Optional, Set, Tuple, Union

from ..core.constants import DEFAULT_OFF_DAY
from ..core.enums import LEARNING_STREAK_STATUSES, STREAK_STATUSES, AttendanceStatus

HistoryEntry = Tuple[Union[date, datetime], Union[AttendanceStatus, str]]


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def _counts(status: Union[AttendanceStatus, str], statuses: AbstractSet[AttendanceStatus]) -> bool:
    try:
        return AttendanceStatus(status) in statuses
    except ValueError:
        return False


def qualifying_days(
    history: Iterable[HistoryEntry],
    *,
    today: date,
    off_day: int = DEFAULT_OFF_DAY,
    since: Optional[date] = None,
    statuses: AbstractSet[AttendanceStatus] = STREAK_STATUSES,
) -> list[date]:
    """Distinct attended workdays up to ``today``, most recent first."""
    days: Set[date] = set()
    for raw_day, status in history:
        day = _as_date(raw_day)
        if day > today or day.weekday() == off_day:
            continue
        if since is not None and day < since:
            continue
        if _counts(status, statuses):
            days.add(day)
    return sorted(days, reverse=True)


def compute_streak(
    history: Iterable[HistoryEntry],
    today: date,
    *,
    off_day: int = DEFAULT_OFF_DAY,
    since: Optional[date] = None,
) -> int:
    """Length of the attendance streak ending today or on the previous workday.

    The off-day never breaks a streak: on the day after it a two-day gap to
    the last attended day is tolerated, and a two-day step inside the history
    is accepted when the later day of the pair is the day after the off-day.
    """
    today = _as_date(today)
    days = qualifying_days(history, today=today, off_day=off_day, since=since)
    if not days:
        return 0

    day_after_off = (off_day + 1) % 7
    most_recent = days[0]
    tolerance = 2 if today.weekday() == day_after_off else 1
    if (today - most_recent).days > tolerance:
        return 0

    streak = 1
    prev = most_recent
    for current in days[1:]:
        step = (prev - current).days
        if step == 1 or (step == 2 and prev.weekday() == day_after_off):
            streak += 1
            prev = current
        else:
            break
    return streak


def compute_learning_streak(
    history: Iterable[HistoryEntry],
    conducted_days: Iterable[Union[date, datetime]],
    today: date,
    *,
    off_day: int = DEFAULT_OFF_DAY,
    since: Optional[date] = None,
) -> int:
    """Learning-hour streak: only sessions that actually took place can break it.

    Learning hours are not held every workday, so calendar gaps are ignored;
    the streak breaks when a conducted session falls between two attended
    ones, and is 0 when the latest conducted session was not attended.
    Any mark other than Missed counts as attending.
    """
    today = _as_date(today)
    days = qualifying_days(history, today=today, off_day=off_day, since=since, statuses=LEARNING_STREAK_STATUSES)
    if not days:
        return 0

    conducted = sorted({_as_date(d) for d in conducted_days if _as_date(d) <= today}, reverse=True)
    if conducted and days[0] < conducted[0]:
        return 0

    streak = 1
    prev = days[0]
    for current in days[1:]:
        if any(current < held < prev for held in conducted):
            break
        streak += 1
        prev = current
    return streak
