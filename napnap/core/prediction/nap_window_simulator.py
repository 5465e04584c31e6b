"""
Projects the remaining nap slots of the day.
"""

import logging
from datetime import datetime
from typing import List, Optional

from napnap.config.config_manager import PredictionConfig
from napnap.core.models.output_models import ProjectedWindow
from napnap.core.schedule.age_schedule import get_recommended_schedule
from napnap.utils.date_utils import DateLike

logger = logging.getLogger(__name__)


def calculate_all_nap_windows(date_of_birth: DateLike, completed_naps_today,
                              now: Optional[datetime] = None,
                              config: Optional[PredictionConfig] = None) -> List[ProjectedWindow]:
    """
    Project the naps still to come today.

    An in-progress nap should be passed as an extra completed entry (with its
    expected end) so it reduces the remaining count.

    Args:
        date_of_birth: Baby's date of birth
        completed_naps_today: Naps already taken today (any sequence; only its length is used)
        now: Current time, used only to derive the age in days
        config: Prediction configuration

    Returns:
        list: One ProjectedWindow per remaining slot; empty without a date of birth
    """
    schedule = get_recommended_schedule(date_of_birth, now, config)
    if schedule is None:
        return []

    completed_count = len(completed_naps_today or [])
    remaining = max(0, schedule.number_of_naps - completed_count)

    windows = []
    for offset in range(remaining):
        nap_index = completed_count + offset
        # The last slot of a multi-nap day is a short catnap bridging to bedtime
        is_catnap = (
            schedule.catnap_minutes is not None
            and nap_index == schedule.number_of_naps - 1
        )
        duration = schedule.catnap_minutes if is_catnap else schedule.average_nap_minutes
        windows.append(ProjectedWindow(
            is_catnap=is_catnap,
            expected_duration_minutes=duration,
            nap_index=nap_index,
        ))

    logger.debug(f"{completed_count} naps done, {remaining} projected for '{schedule.label}'")
    return windows
