"""
Age schedule lookup: maps a baby's current age to its schedule row.
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from napnap.config.config_manager import DEFAULT_CONFIG, PredictionConfig
from napnap.core.models.data_models import AgeBand, NapIndex, ScheduleRow
from napnap.utils.date_utils import DateLike, parse_date_of_birth, resolve_now

logger = logging.getLogger(__name__)


def get_age_in_days(date_of_birth: DateLike, now: Optional[datetime] = None) -> Optional[int]:
    """
    Age in whole days at `now`. A date of birth in the future counts as day 0.

    Returns:
        int or None when the date of birth is unknown
    """
    dob = parse_date_of_birth(date_of_birth)
    if dob is None:
        return None
    return max(0, (resolve_now(now).date() - dob).days)


def find_age_band(age_in_days: int, config: Optional[PredictionConfig] = None) -> AgeBand:
    """Return the band containing `age_in_days`; ages past the last breakpoint use the open band."""
    config = config or DEFAULT_CONFIG
    for band in config.age_bands:
        if band.max_age_days is None or age_in_days < band.max_age_days:
            return band
    return config.age_bands[-1]


def get_recommended_schedule(date_of_birth: DateLike, now: Optional[datetime] = None,
                             config: Optional[PredictionConfig] = None) -> Optional[ScheduleRow]:
    """
    Get the schedule row for the baby's age today.

    Args:
        date_of_birth: ISO date string or date; None when not yet entered
        now: Current time (defaults to the wall clock)
        config: Prediction configuration holding the age table

    Returns:
        ScheduleRow or None when no date of birth is available
    """
    age_in_days = get_age_in_days(date_of_birth, now)
    if age_in_days is None:
        return None

    schedule = find_age_band(age_in_days, config).schedule
    logger.debug(f"Age {age_in_days} days -> band '{schedule.label}' ({schedule.number_of_naps} naps)")
    return schedule


def get_wake_window_for_age(date_of_birth: DateLike, now: Optional[datetime] = None,
                            config: Optional[PredictionConfig] = None) -> Optional[Tuple[int, int]]:
    """Recommended (min, max) wake window in minutes for the baby's age."""
    schedule = get_recommended_schedule(date_of_birth, now, config)
    if schedule is None:
        return None
    return schedule.min_wake_window_minutes, schedule.max_wake_window_minutes


def get_nap_index_type(position: int) -> NapIndex:
    return NapIndex.from_position(position)
