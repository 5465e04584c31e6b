from datetime import datetime, timedelta, timezone

import pytest

from napnap.core.prediction.bedtime_calculator import (
    calculate_bedtime_nudge,
    calculate_dynamic_bedtime,
    get_bedtime_window,
)
from napnap.core.schedule.age_schedule import get_recommended_schedule


@pytest.fixture
def schedule(dob_6_months, at):
    return get_recommended_schedule(dob_6_months, now=at(12, 0))


@pytest.mark.parametrize('accumulated, nudge', [
    (150, 0),
    (90, -30),
    (0, -60),
    (200, 25),
    (600, 60),
])
def test_nudge(schedule, accumulated, nudge):
    assert calculate_bedtime_nudge(schedule, accumulated) == nudge


def test_typical_day_uses_final_wake_window(dob_6_months, at):
    assert calculate_dynamic_bedtime(dob_6_months, at(16, 45), 150, now=at(12, 0)) == at(19, 45)


def test_sleep_debt_brings_bedtime_earlier(dob_6_months, at):
    assert calculate_dynamic_bedtime(dob_6_months, at(16, 45), 90, now=at(12, 0)) == at(19, 15)


def test_extra_sleep_pushes_bedtime_later_within_window(dob_6_months, at):
    typical = calculate_dynamic_bedtime(dob_6_months, at(16, 45), 150, now=at(12, 0))
    rested = calculate_dynamic_bedtime(dob_6_months, at(16, 45), 1000, now=at(12, 0))

    assert rested > typical
    assert rested == at(20, 0)


def test_always_inside_window(dob_6_months, schedule, at):
    earliest, latest = get_bedtime_window(schedule, at(12, 0))
    for anchor_hour in (8, 10, 13, 16, 18, 19):
        for accumulated in range(0, 1441, 60):
            bedtime = calculate_dynamic_bedtime(dob_6_months, at(anchor_hour, 30), accumulated, now=at(8, 0))
            assert earliest <= bedtime <= latest


def test_monotone_in_daytime_sleep(dob_6_months, at):
    bedtimes = [
        calculate_dynamic_bedtime(dob_6_months, at(16, 30), accumulated, now=at(12, 0))
        for accumulated in range(0, 400, 10)
    ]
    assert bedtimes == sorted(bedtimes)


def test_never_before_now(dob_6_months, at):
    assert calculate_dynamic_bedtime(dob_6_months, at(15, 0), 150, now=at(19, 10)) == at(19, 10)


def test_past_window_returns_latest(dob_6_months, at):
    assert calculate_dynamic_bedtime(dob_6_months, at(15, 0), 150, now=at(21, 0)) == at(20, 0)


def test_missing_inputs(dob_6_months, at):
    assert calculate_dynamic_bedtime(None, at(16, 0), 150, now=at(12, 0)) is None
    assert calculate_dynamic_bedtime(dob_6_months, None, 150, now=at(12, 0)) is None


def test_window_follows_reference_day(schedule, at):
    earliest, latest = get_bedtime_window(schedule, at(9, 0, day_offset=1))
    assert earliest == at(18, 30, day_offset=1)
    assert latest == at(20, 0, day_offset=1)


def test_anchor_in_another_offset_uses_callers_calendar(dob_6_months):
    cet, cest = timezone(timedelta(hours=1)), timezone(timedelta(hours=2))
    # 16:45 at UTC+2 is 15:45 at UTC+1
    bedtime = calculate_dynamic_bedtime(dob_6_months, datetime(2026, 10, 25, 16, 45, tzinfo=cest), 150,
                                        now=datetime(2026, 10, 25, 12, 0, tzinfo=cet))
    assert bedtime == datetime(2026, 10, 25, 18, 45, tzinfo=cet)
    assert bedtime.utcoffset() == timedelta(hours=1)
