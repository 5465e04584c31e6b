from datetime import date, datetime, timedelta

import pytest

from napnap.core.models.data_models import SleepEvent, SleepKind

TODAY = date(2026, 10, 19)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def at():
    """Build a naive datetime on TODAY (or `day_offset` days from it)."""
    def _at(hour, minute=0, day_offset=0):
        day = TODAY + timedelta(days=day_offset)
        return datetime(day.year, day.month, day.day, hour, minute)
    return _at


@pytest.fixture
def dob_6_months():
    return TODAY - timedelta(days=183)


@pytest.fixture
def dob_9_months():
    return TODAY - timedelta(days=270)


@pytest.fixture
def night_event(at):
    """Last night: 19:30 yesterday until 07:00 today."""
    return SleepEvent(start_time=at(19, 30, day_offset=-1), end_time=at(7, 0), kind=SleepKind.NIGHT)


@pytest.fixture
def nap(at):
    def _nap(start, end=None):
        return SleepEvent(start_time=at(*start), end_time=at(*end) if end else None, kind=SleepKind.NAP)
    return _nap
