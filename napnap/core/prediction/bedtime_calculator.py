"""
Dynamic bedtime: final wake window after the last nap, nudged by the day's
total daytime sleep and kept inside the age band's bedtime window.
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from napnap.config.config_manager import DEFAULT_CONFIG, PredictionConfig
from napnap.core.models.data_models import ScheduleRow
from napnap.core.schedule.age_schedule import get_recommended_schedule
from napnap.utils.date_utils import (
    DateLike, TimestampLike, add_minutes, at_time_of_day, parse_timestamp, resolve_now
)

logger = logging.getLogger(__name__)


def get_bedtime_window(schedule: ScheduleRow, day_reference: datetime) -> Tuple[datetime, datetime]:
    """Bedtime window bounds on the calendar day of `day_reference`."""
    day = day_reference.date()
    tz = day_reference.tzinfo
    return (at_time_of_day(day, schedule.bedtime_window.earliest, tz),
            at_time_of_day(day, schedule.bedtime_window.latest, tz))


def calculate_bedtime_nudge(schedule: ScheduleRow, accumulated_daytime_sleep_minutes: float,
                            config: Optional[PredictionConfig] = None) -> float:
    """
    Minutes to shift bedtime: positive (later) when the baby slept more than
    typical during the day, negative (earlier) to offset sleep debt.
    """
    config = config or DEFAULT_CONFIG
    deviation = accumulated_daytime_sleep_minutes - schedule.typical_daytime_sleep_minutes
    nudge = deviation * config.bedtime_nudge_ratio
    return max(-config.max_bedtime_nudge_minutes, min(config.max_bedtime_nudge_minutes, nudge))


def calculate_dynamic_bedtime(date_of_birth: DateLike, anchor_end_time: TimestampLike,
                              accumulated_daytime_sleep_minutes: float,
                              now: Optional[datetime] = None,
                              config: Optional[PredictionConfig] = None) -> Optional[datetime]:
    """
    Calculate tonight's bedtime.

    Args:
        date_of_birth: Baby's date of birth
        anchor_end_time: End of the day's last nap (real or projected)
        accumulated_daytime_sleep_minutes: Completed plus projected nap minutes
        now: Current time; bedtime never falls before it while the window is still open
        config: Prediction configuration

    Returns:
        datetime inside the bedtime window, or None without a date of birth
    """
    config = config or DEFAULT_CONFIG
    anchor = parse_timestamp(anchor_end_time)
    schedule = get_recommended_schedule(date_of_birth, now, config)
    if schedule is None or anchor is None:
        return None
    now = resolve_now(now, anchor)
    if anchor.tzinfo is not None and now.tzinfo is not None:
        anchor = anchor.astimezone(now.tzinfo)

    naive_bedtime = add_minutes(anchor, schedule.final_wake_window_minutes)
    nudge = calculate_bedtime_nudge(schedule, accumulated_daytime_sleep_minutes, config)
    bedtime = add_minutes(naive_bedtime, nudge)

    if now > bedtime:
        bedtime = now

    earliest, latest = get_bedtime_window(schedule, anchor)
    bedtime = min(max(bedtime, earliest), latest)

    logger.debug(f"Bedtime: naive {naive_bedtime:%H:%M}, nudge {nudge:+.0f}m "
                 f"({accumulated_daytime_sleep_minutes:.0f}m daytime sleep) -> {bedtime:%H:%M}")
    return bedtime
