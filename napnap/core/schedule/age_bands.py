"""
Default age-band table.

Wake windows, nap counts and bedtime windows follow common pediatric
guidance. Bands are contiguous; `max_age_days` is an exclusive upper bound
and the last band is open-ended.
"""

from datetime import time

from napnap.core.models.data_models import AgeBand, BedtimeWindow, ScheduleRow


def _band(max_age_days, label, naps, wake_windows, wake_range, bedtime, wake_time,
          nap_minutes, catnap_minutes, final_wake_window, daytime_sleep):
    return AgeBand(
        max_age_days=max_age_days,
        schedule=ScheduleRow(
            label=label,
            number_of_naps=naps,
            wake_window_minutes_by_nap_index=wake_windows,
            min_wake_window_minutes=wake_range[0],
            max_wake_window_minutes=wake_range[1],
            bedtime_window=BedtimeWindow(earliest=bedtime[0], latest=bedtime[1]),
            wake_time=wake_time,
            average_nap_minutes=nap_minutes,
            catnap_minutes=catnap_minutes,
            final_wake_window_minutes=final_wake_window,
            typical_daytime_sleep_minutes=daytime_sleep,
        ),
    )


DEFAULT_AGE_BANDS = [
    # 0-4 weeks
    _band(28, 'newborn', 5, [45, 50, 55], (35, 60),
          (time(19, 30), time(21, 30)), time(7, 0), 45, 30, 60, 210),
    # 4-12 weeks
    _band(84, '1-2 months', 4, [60, 75, 80], (60, 90),
          (time(19, 30), time(21, 0)), time(7, 0), 45, 30, 90, 165),
    # 3-4 months
    _band(150, '3-4 months', 4, [75, 90, 105], (75, 120),
          (time(19, 0), time(20, 30)), time(7, 0), 45, 30, 105, 165),
    # 5-7 months
    _band(240, '5-7 months', 3, [120, 150, 165], (120, 180),
          (time(18, 30), time(20, 0)), time(7, 0), 60, 30, 180, 150),
    # 8-10 months
    _band(330, '8-10 months', 2, [150, 180, 195], (150, 210),
          (time(18, 30), time(19, 30)), time(6, 30), 90, None, 210, 180),
    # 11-14 months
    _band(450, '11-14 months', 2, [180, 210, 240], (180, 240),
          (time(18, 30), time(19, 30)), time(6, 30), 90, None, 240, 180),
    # 15 months and older
    _band(None, '15 months+', 1, [300, 300, 300], (240, 360),
          (time(19, 0), time(20, 0)), time(7, 0), 120, None, 300, 120),
]
