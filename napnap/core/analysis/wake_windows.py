"""
Module for extracting historical wake windows from logged sleep events.
"""

import logging
from datetime import datetime, time, timedelta
from typing import Optional

import pandas as pd

from napnap.config.config_manager import DEFAULT_CONFIG, PredictionConfig
from napnap.core.models.data_models import (
    SleepKind, WakeWindowHistory, WakeWindowSample, to_sleep_events
)
from napnap.utils.date_utils import at_time_of_day, resolve_now

logger = logging.getLogger(__name__)


def extract_wake_windows_from_entries(events, lookback_days: Optional[int] = None,
                                      now: Optional[datetime] = None,
                                      config: Optional[PredictionConfig] = None) -> WakeWindowHistory:
    """
    Derive wake-window samples from the trailing `lookback_days` of sleep events.

    Each event's end is paired with the next event's start. Pairs with an
    open boundary (active sleep), overlapping events, or a gap longer than
    the configured maximum (a logging gap, not a wake window) are dropped.

    Args:
        events: SleepEvent instances or dicts, in any order
        lookback_days: Number of full days before today to scan (config default 7)
        now: Current time
        config: Prediction configuration

    Returns:
        WakeWindowHistory: chronological samples, today's completed nap count
        and the number of completed events in the window
    """
    config = config or DEFAULT_CONFIG
    if lookback_days is None:
        lookback_days = config.lookback_days
    if lookback_days < 0:
        raise ValueError(f"lookback_days must be non-negative, got {lookback_days}")

    events = to_sleep_events(events)
    if not events:
        return WakeWindowHistory()

    now = resolve_now(now, events[0].start_time)
    cutoff = at_time_of_day(now.date() - timedelta(days=lookback_days), time(0, 0), now.tzinfo)

    data = events_to_frame(events, now.tzinfo)
    data = data[(data['start_time'] >= cutoff) & (data['start_time'] <= now)]
    if data.empty:
        return WakeWindowHistory()

    data = data.sort_values('start_time').reset_index(drop=True)
    data['day'] = data['start_time'].dt.date

    # Position of each nap within its day (0 = first nap)
    is_nap = data['kind'] == SleepKind.NAP.value
    data['nap_index'] = data[is_nap].groupby('day').cumcount()

    data['next_start'] = data['start_time'].shift(-1)
    data['next_kind'] = data['kind'].shift(-1)
    data['next_nap_index'] = data['nap_index'].shift(-1)
    data['gap_minutes'] = (data['next_start'] - data['end_time']).dt.total_seconds() / 60

    valid = (
        data['end_time'].notna()
        & data['next_start'].notna()
        & (data['gap_minutes'] > 0)
        & (data['gap_minutes'] <= config.max_wake_window_gap_minutes)
    )

    samples = []
    for row in data[valid].itertuples(index=False):
        nap_index = int(row.next_nap_index) if row.next_kind == SleepKind.NAP.value else None
        ended_at = row.end_time.to_pydatetime()
        samples.append(WakeWindowSample(
            minutes=float(row.gap_minutes),
            nap_index=nap_index,
            days_ago=max(0, (now.date() - ended_at.date()).days),
            ended_at=ended_at,
        ))

    todays_count = int((is_nap & data['end_time'].notna() & (data['day'] == now.date())).sum())
    total_entries = int(data['end_time'].notna().sum())

    dropped = len(data) - 1 - len(samples)
    logger.debug(f"Extracted {len(samples)} wake windows from {len(data)} events "
                 f"({dropped} pairs dropped, {todays_count} naps today)")

    return WakeWindowHistory(samples=samples, todays_count=todays_count, total_entries=total_entries)


def events_to_frame(events, tzinfo=None):
    """
    Tabulate events; open events get NaT as end time.

    With a `tzinfo`, timestamps are parsed as UTC and converted to that zone,
    so events logged under different offsets (e.g. across a DST change) share
    one calendar. Without one, timestamps are kept naive.
    """
    data = pd.DataFrame({
        'start_time': pd.Series([e.start_time for e in events], dtype=object),
        'end_time': pd.Series([e.end_time for e in events], dtype=object),
        'kind': [e.kind.value for e in events],
    })
    for column in ('start_time', 'end_time'):
        if tzinfo is not None:
            data[column] = pd.to_datetime(data[column], utc=True).dt.tz_convert(tzinfo)
        else:
            data[column] = pd.to_datetime(data[column])
    return data
