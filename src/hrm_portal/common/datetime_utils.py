from __future__ import annotations

from datetime import date, datetime, time, timedelta

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: str | None, field_name: str) -> date | None:
    v = (value or "").strip()
    if not v:
        return None
    try:
        return parse_iso_date(v[:10])
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def parse_hhmm(value: str) -> time:
    return datetime.strptime(value.strip(), "%H:%M").time()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last instant of a calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1) - timedelta(microseconds=1)


def hours_between(start: datetime | None, end: datetime | None) -> float:
    if not start or not end:
        return 0.0
    return round((end - start).total_seconds() / 3600, 2)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_local_naive(value: datetime) -> datetime:
    """Express ``value`` as naive server-local wall-clock time.

    Clients send ISO timestamps in UTC (``...Z``); storage and the leave rules
    work on naive local time. Naive values are taken as local already.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
