"""
Module for summarising logged sleep over a date range for the sleep report.
"""

import logging
from datetime import datetime
from typing import Optional

import pandas as pd

from napnap.config.config_manager import DEFAULT_CONFIG, PredictionConfig
from napnap.core.analysis.wake_windows import events_to_frame, extract_wake_windows_from_entries
from napnap.core.models.data_models import SleepKind, to_sleep_events
from napnap.core.models.output_models import (
    NapCountRange, ReportAverages, ReportFlags, SleepReport, TimeOfDaySpread
)
from napnap.utils import constants
from napnap.utils.date_utils import DateLike, calculate_age, calculate_age_in_months, parse_date, resolve_now

logger = logging.getLogger(__name__)


def get_report_data(events, start_date: DateLike, end_date: DateLike,
                    date_of_birth: Optional[DateLike] = None,
                    now: Optional[datetime] = None,
                    config: Optional[PredictionConfig] = None) -> SleepReport:
    """
    Summarise logged sleep between `start_date` and `end_date` (inclusive).

    Only completed days (before today) are analysed, and days without any
    logged sleep are left out of the averages.

    Args:
        events: SleepEvent instances or dicts, in any order
        start_date: First day of the report
        end_date: Last day of the report
        date_of_birth: Baby's date of birth; age-based checks are skipped without it
        now: Current time
        config: Prediction configuration used for wake-window extraction

    Returns:
        SleepReport: averages, time-of-day spreads, week-over-week totals and flags
    """
    config = config or DEFAULT_CONFIG
    start, end = parse_date(start_date), parse_date(end_date)
    if start is None or end is None or start > end:
        raise ValueError(f"Invalid report range: {start_date} to {end_date}")

    events = to_sleep_events(events)
    now = resolve_now(now, events[0].start_time if events else None)
    range_days = list(pd.date_range(start, end).date)
    days = [day for day in range_days if day < now.date()]

    data = _prepare_frame(events, now)
    daily = _daily_totals(data, days)
    logged = daily[daily['total'] > 0]

    bedtime_minutes = _first_of_day(data[data['kind'] == SleepKind.NIGHT.value], 'start', days)
    ended_nights = data[(data['kind'] == SleepKind.NIGHT.value) & data['end_time'].notna()]
    wake_up_minutes = _first_of_day(ended_nights, 'end', days)

    bedtime_spread = _spread(bedtime_minutes) if len(bedtime_minutes) >= 2 else None
    wake_up_spread = _spread(wake_up_minutes) if wake_up_minutes else None

    this_week_total, last_week_total = _week_totals(daily, range_days)

    history = extract_wake_windows_from_entries(
        events, constants.REPORT_WAKE_WINDOW_LOOKBACK_DAYS, now, config
    )
    avg_wake_window = int(round(sum(history.wake_windows) / len(history.wake_windows))) \
        if history.wake_windows else None

    nap_counts = [int(count) for count in logged['nap_count'] if count > 0]
    nap_count_range = NapCountRange(min_count=min(nap_counts), max_count=max(nap_counts)) if nap_counts else None

    has_age = parse_date(date_of_birth) is not None
    age_months = calculate_age_in_months(date_of_birth, now)
    youngest, oldest = constants.NAP_COUNT_CHECK_AGE_MONTHS

    flags = ReportFlags(
        has_enough_data=len(logged) >= constants.MIN_DAYS_FOR_ENOUGH_DATA,
        bedtime_very_variable=(bedtime_spread is not None
                               and bedtime_spread.spread_minutes > constants.BEDTIME_VERY_VARIABLE_MINUTES),
        bedtime_stable=(bedtime_spread is not None
                        and bedtime_spread.spread_minutes <= constants.BEDTIME_STABLE_MINUTES),
        wake_up_often_missing=(len(bedtime_minutes) >= 2
                               and len(wake_up_minutes) < len(bedtime_minutes) * constants.WAKE_UP_LOGGED_RATIO),
        sleep_increased_this_week=(last_week_total > 0
                                   and this_week_total > last_week_total * constants.SLEEP_INCREASE_RATIO),
        sleep_decreased_this_week=(last_week_total > 0
                                   and this_week_total < last_week_total * constants.SLEEP_DECREASE_RATIO),
        overtiredness_risk=(has_age and avg_wake_window is not None
                            and age_months <= constants.OVERTIREDNESS_MAX_AGE_MONTHS
                            and avg_wake_window > get_max_wake_window_for_age(age_months)
                            * constants.OVERTIREDNESS_FACTOR),
        nap_count_inconsistent=(has_age and nap_count_range is not None
                                and nap_count_range.max_count - nap_count_range.min_count
                                >= constants.NAP_COUNT_SPREAD
                                and youngest <= age_months <= oldest),
    )

    logger.info(f"Sleep report {start} to {end}: {len(logged)} of {len(days)} completed days logged")

    return SleepReport(
        start_date=start,
        end_date=end,
        age_label=calculate_age(date_of_birth, now) if has_age else '',
        age_months=age_months,
        averages=_averages(logged),
        bedtime_spread=bedtime_spread,
        wake_up_spread=wake_up_spread,
        avg_wake_window_minutes=avg_wake_window,
        this_week_total_minutes=this_week_total,
        last_week_total_minutes=last_week_total,
        nap_count_range=nap_count_range,
        flags=flags,
    )


def get_max_wake_window_for_age(age_months: int) -> int:
    """Longest average wake window (minutes) before overtiredness becomes likely."""
    for max_months, minutes in constants.MAX_WAKE_WINDOW_BY_AGE_MONTHS:
        if age_months <= max_months:
            return minutes
    return constants.MAX_WAKE_WINDOW_OLDER


def _prepare_frame(events, now):
    """Event table with durations (open events run until now) and local days."""
    data = events_to_frame(events, now.tzinfo)
    end_or_now = data['end_time'].fillna(pd.Timestamp(now))
    data['minutes'] = ((end_or_now - data['start_time']).dt.total_seconds() / 60).round()

    data['start_day'] = data['start_time'].dt.date
    data['start_minute'] = data['start_time'].dt.hour * 60 + data['start_time'].dt.minute
    data['end_day'] = data['end_time'].dt.date
    data['end_minute'] = data['end_time'].dt.hour * 60 + data['end_time'].dt.minute
    return data


def _daily_totals(data, days):
    """Nap minutes, night minutes and nap count per day, keyed by start day."""
    in_range = data[data['start_day'].isin(days)]
    naps = in_range[in_range['kind'] == SleepKind.NAP.value]
    nights = in_range[in_range['kind'] == SleepKind.NIGHT.value]

    daily = pd.DataFrame({
        'nap': naps.groupby('start_day')['minutes'].sum(),
        'night': nights.groupby('start_day')['minutes'].sum(),
        'nap_count': naps.groupby('start_day').size(),
    }).reindex(days).fillna(0)
    daily['total'] = daily['nap'] + daily['night']
    return daily


def _first_of_day(rows, boundary, days):
    """Minutes since midnight of the earliest start (or end) on each of `days`."""
    day_column, minute_column = f'{boundary}_day', f'{boundary}_minute'
    first = rows.sort_values(f'{boundary}_time').drop_duplicates(day_column)
    return [int(minute) for minute in first.loc[first[day_column].isin(days), minute_column]]


def _spread(minutes):
    return TimeOfDaySpread(min_minutes=min(minutes), max_minutes=max(minutes))


def _week_totals(daily, range_days):
    """Total minutes in the later half of the range and in the equally long half before it."""
    half = len(range_days) // 2
    this_week = range_days[len(range_days) - half:]
    last_week = range_days[len(range_days) - 2 * half:len(range_days) - half]
    return (int(daily.loc[daily.index.isin(this_week), 'total'].sum()),
            int(daily.loc[daily.index.isin(last_week), 'total'].sum()))


def _averages(logged):
    if logged.empty:
        return ReportAverages()

    nap_count = logged['nap_count'].sum()
    return ReportAverages(
        avg_total_minutes=int(round(float(logged['total'].mean()))),
        avg_night_minutes=int(round(float(logged['night'].mean()))),
        avg_nap_duration_minutes=int(round(float(logged['nap'].sum() / nap_count))) if nap_count > 0 else 0,
        avg_nap_count=round(float(logged['nap_count'].mean()), 2),
    )
