"""Leave-day accounting.

A day is split into a morning and an afternoon session at 13:00. Weekends
(Saturday, Sunday) never consume leave.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta

from ..core.constants import AFTERNOON_START_HOUR, MORNING_END_HOUR
from .datetime_utils import to_local_naive


def is_work_day(day: date) -> bool:
    """Monday to Friday are work days."""
    return day.weekday() < 5


def is_weekend(day: date) -> bool:
    return not is_work_day(day)


def is_half_day_boundary(moment: time | datetime) -> bool:
    """True for a start at/after 13:00 or an end at/before 12:00."""
    if isinstance(moment, datetime):
        moment = to_local_naive(moment)
    minutes = moment.hour * 60 + moment.minute
    return minutes >= AFTERNOON_START_HOUR * 60 or minutes <= MORNING_END_HOUR * 60


def _is_morning(moment: datetime) -> bool:
    return moment.hour < AFTERNOON_START_HOUR


def calculate_leave_days(start: datetime, end: datetime) -> float:
    """Number of leave days consumed by the range ``start`` .. ``end``.

    Sessions and weekends are judged on server-local wall-clock time.
    """
    start, end = to_local_naive(start), to_local_naive(end)
    if end < start:
        raise ValueError("end must not be before start")

    if start.date() == end.date():
        if is_weekend(start.date()):
            return 0
        if _is_morning(start) == _is_morning(end):
            return 0.5
        return 1

    days = 0.0

    if is_work_day(start.date()):
        days += 1 if _is_morning(start) else 0.5

    current = start.date() + timedelta(days=1)
    while current < end.date():
        if is_work_day(current):
            days += 1
        current += timedelta(days=1)

    if is_work_day(end.date()):
        days += 0.5 if _is_morning(end) else 1

    return days
