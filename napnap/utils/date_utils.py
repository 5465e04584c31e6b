"""
Date and time helpers shared by the prediction modules.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

TimestampLike = Union[str, datetime]
DateLike = Union[str, date, datetime]


def parse_timestamp(value: Optional[TimestampLike]) -> Optional[datetime]:
    """Parse an ISO timestamp string (or pass a datetime through)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return isoparse(value)


def parse_date_of_birth(value: Optional[DateLike]) -> Optional[date]:
    """
    Parse a date of birth.

    Args:
        value: ISO date string, date or datetime. Empty values mean unknown.

    Returns:
        date or None when no date of birth is available
    """
    return parse_date(value)


def parse_date(value: Optional[DateLike]) -> Optional[date]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return isoparse(value).date()


def resolve_now(now: Optional[datetime] = None, reference: Optional[datetime] = None) -> datetime:
    """Return `now`, or the current time in the timezone of `reference`."""
    if now is not None:
        return now
    tz = reference.tzinfo if reference is not None else None
    return datetime.now(tz)


def minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60


def calculate_duration(start_time: TimestampLike, end_time: Optional[TimestampLike],
                       now: Optional[datetime] = None) -> int:
    """Whole minutes between start and end; an open event runs until `now`."""
    start = parse_timestamp(start_time)
    end = parse_timestamp(end_time)
    if end is None:
        end = resolve_now(now, start)
    return int(minutes_between(start, end))


def format_duration(minutes: Union[int, float]) -> str:
    """Format minutes as "45m" or "1h 5m"."""
    minutes = int(round(minutes))
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}m"
    return f"{hours}h {mins}m"


def calculate_age(date_of_birth: DateLike, now: Optional[datetime] = None) -> str:
    """Human readable age, e.g. "6 months, 3 days" or "1 year, 2 months"."""
    dob = parse_date_of_birth(date_of_birth)
    today = resolve_now(now).date()
    diff = relativedelta(today, dob)

    if diff.years >= 1:
        label = f"{diff.years} year{'s' if diff.years != 1 else ''}"
        if diff.months:
            label += f", {diff.months} month{'s' if diff.months != 1 else ''}"
        return label

    if diff.months >= 1:
        label = f"{diff.months} month{'s' if diff.months != 1 else ''}"
        if diff.days:
            label += f", {diff.days} day{'s' if diff.days != 1 else ''}"
        return label

    days = max(0, (today - dob).days)
    return f"{days} day{'s' if days != 1 else ''}"


def calculate_age_in_months(date_of_birth: DateLike, now: Optional[datetime] = None) -> int:
    """Completed months of age; 0 when the date of birth is unknown or in the future."""
    dob = parse_date_of_birth(date_of_birth)
    if dob is None:
        return 0
    diff = relativedelta(resolve_now(now).date(), dob)
    return max(0, diff.years * 12 + diff.months)


def at_time_of_day(day: date, time_of_day: time, tzinfo=None) -> datetime:
    """Combine a calendar day with a time of day, keeping the caller's timezone."""
    return datetime.combine(day, time_of_day).replace(tzinfo=tzinfo)


def add_minutes(value: datetime, minutes: Union[int, float]) -> datetime:
    return value + timedelta(minutes=minutes)
