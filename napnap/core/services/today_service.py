# napnap/core/services/today_service.py
import logging
from datetime import datetime
from typing import List, Optional

from napnap.config.config_manager import DEFAULT_CONFIG, PredictionConfig
from napnap.core.analysis.algorithm_status import get_algorithm_status_tier
from napnap.core.analysis.wake_windows import extract_wake_windows_from_entries
from napnap.core.models.data_models import NapIndex, SleepEvent, SleepKind, to_sleep_events
from napnap.core.models.output_models import NextEvent, PredictedNap, TodaySchedule
from napnap.core.prediction.bedtime_calculator import calculate_dynamic_bedtime, get_bedtime_window
from napnap.core.prediction.nap_time_predictor import NapTimePredictor
from napnap.core.prediction.nap_window_simulator import calculate_all_nap_windows
from napnap.core.schedule.age_schedule import get_recommended_schedule
from napnap.utils.date_utils import DateLike, add_minutes, minutes_between, resolve_now

logger = logging.getLogger(__name__)


class TodayScheduleService:
    """
    Builds the remaining-day schedule (naps and bedtime) from the raw event list.

    Holds no state between calls: callers re-run `build` whenever the events
    change or the clock ticks.
    """

    def __init__(self, config: Optional[PredictionConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.predictor = NapTimePredictor(self.config)

    def build(self, events, date_of_birth: DateLike, now: Optional[datetime] = None) -> TodaySchedule:
        """
        Compute today's schedule.

        Args:
            events: SleepEvent instances or dicts for one baby
            date_of_birth: Baby's date of birth (None when not entered yet)
            now: Current time

        Returns:
            TodaySchedule
        """
        events = to_sleep_events(events)
        now = resolve_now(now, events[0].start_time if events else None)
        # One calendar for every event, even when offsets changed mid-week
        events = [event.in_timezone(now.tzinfo) for event in events]

        morning_wake_up = self._get_morning_wake_up(events, now)
        completed_naps = self._get_today_naps(events, now)
        active_sleep = self._get_active_sleep(events, now)
        completed_minutes = sum(nap.duration_minutes() for nap in completed_naps)

        history = extract_wake_windows_from_entries(events, self.config.lookback_days, now, self.config)

        result = TodaySchedule(
            generated_at=now,
            morning_wake_up=morning_wake_up,
            completed_naps=completed_naps,
            active_sleep=active_sleep,
            total_daytime_sleep_minutes=int(completed_minutes),
            algorithm_status=get_algorithm_status_tier(history.total_entries, self.config),
        )

        schedule = get_recommended_schedule(date_of_birth, now, self.config)
        if schedule is None:
            logger.info("No date of birth available, skipping predictions")
            return result

        active_nap = active_sleep if active_sleep is not None and active_sleep.is_nap else None
        if active_nap is not None:
            result.active_nap_expected_end = add_minutes(active_nap.start_time, schedule.average_nap_minutes)

        if morning_wake_up is not None:
            result.predicted_naps = self._predict_naps(
                date_of_birth, schedule, morning_wake_up, completed_naps,
                active_nap, result.active_nap_expected_end, history, now
            )
        else:
            logger.debug("No morning wake-up logged today, no nap predictions")

        result.expected_bedtime = self._get_expected_bedtime(
            date_of_birth, schedule, completed_naps, completed_minutes,
            active_nap, result.active_nap_expected_end, result.predicted_naps, now
        )
        result.next_event = self._get_next_event(result, now)
        return result

    def _get_morning_wake_up(self, events: List[SleepEvent], now: datetime) -> Optional[datetime]:
        """End of the latest night sleep that ended today."""
        wake_ups = [
            e.end_time for e in events
            if e.kind == SleepKind.NIGHT and e.end_time is not None
            and e.end_time.date() == now.date() and e.end_time <= now
        ]
        return max(wake_ups) if wake_ups else None

    def _get_today_naps(self, events: List[SleepEvent], now: datetime) -> List[SleepEvent]:
        naps = [
            e for e in events
            if e.is_nap and e.end_time is not None
            and e.start_time.date() == now.date() and e.end_time <= now
        ]
        return sorted(naps, key=lambda e: e.start_time)

    def _get_active_sleep(self, events: List[SleepEvent], now: datetime) -> Optional[SleepEvent]:
        active = [e for e in events if e.is_active and e.start_time <= now]
        return max(active, key=lambda e: e.start_time) if active else None

    def _predict_naps(self, date_of_birth, schedule, morning_wake_up, completed_naps,
                      active_nap, active_expected_end, history, now) -> List[PredictedNap]:
        """Chain predictions: each nap's start plus expected duration anchors the next."""
        simulation = [
            {'end_time': nap.end_time, 'duration_minutes': nap.duration_minutes()}
            for nap in completed_naps
        ]

        if active_nap is not None:
            # An overrunning nap cannot end before now
            anchor = max(active_expected_end, now)
            last_duration = minutes_between(active_nap.start_time, anchor)
            simulation.append({'end_time': anchor, 'duration_minutes': last_duration})
        elif completed_naps:
            anchor = completed_naps[-1].end_time
            last_duration = completed_naps[-1].duration_minutes()
        else:
            anchor = morning_wake_up
            last_duration = None

        windows = calculate_all_nap_windows(date_of_birth, simulation, now, self.config)
        _, latest_bedtime = get_bedtime_window(schedule, now)
        cutoff = add_minutes(latest_bedtime, -self.config.bedtime_buffer_minutes)

        predictions = []
        for window in windows:
            prediction = self.predictor.predict(
                date_of_birth, anchor, last_duration,
                NapIndex.from_position(window.nap_index),
                wake_window_history=history,
                todays_count=window.nap_index,
                total_historical_entries=history.total_entries,
                now=now,
            )
            raw_time = prediction.predicted_time

            # Only the first prediction can be overdue: it is shown as due now and
            # the chain continues from now, so later naps are advanced with it
            is_due_now = raw_time <= now
            start = now if is_due_now else raw_time

            if start > cutoff:
                logger.debug(f"Nap {window.nap_index + 1} at {start:%H:%M} too close to bedtime, stopping")
                break

            predictions.append(PredictedNap(
                time=start,
                raw_predicted_time=raw_time,
                is_catnap=window.is_catnap,
                expected_duration_minutes=window.expected_duration_minutes,
                is_due_now=is_due_now,
                nap_index=window.nap_index,
                prediction=prediction,
            ))
            anchor = add_minutes(start, window.expected_duration_minutes)
            last_duration = window.expected_duration_minutes

        logger.debug(f"Predicted {len(predictions)} of {len(windows)} remaining naps")
        return predictions

    def _get_expected_bedtime(self, date_of_birth, schedule, completed_naps, completed_minutes,
                              active_nap, active_expected_end, predicted_naps, now) -> Optional[datetime]:
        """Bedtime anchored on the day's last nap: predicted, then active, then completed."""
        accumulated = completed_minutes + sum(nap.expected_duration_minutes for nap in predicted_naps)

        active_end = None
        if active_nap is not None:
            active_end = max(active_expected_end, now)
            accumulated += minutes_between(active_nap.start_time, active_end)

        if predicted_naps:
            anchor = predicted_naps[-1].expected_end
        elif active_end is not None:
            anchor = active_end
        elif completed_naps:
            anchor = completed_naps[-1].end_time
        else:
            _, latest = get_bedtime_window(schedule, now)
            return latest

        return calculate_dynamic_bedtime(date_of_birth, anchor, accumulated, now, self.config)

    def _get_next_event(self, result: TodaySchedule, now: datetime) -> Optional[NextEvent]:
        """Countdown to the next nap or bedtime; none while the baby sleeps."""
        if result.active_sleep is not None:
            return None

        if result.predicted_naps:
            first = result.predicted_naps[0]
            minutes = int(minutes_between(now, first.time))
            return NextEvent(type='nap', is_now=first.is_due_now or minutes <= 0, minutes_until=max(0, minutes))

        if result.expected_bedtime is not None:
            minutes = int(minutes_between(now, result.expected_bedtime))
            return NextEvent(type='bedtime', is_now=minutes <= 0, minutes_until=max(0, minutes))
        return None


def build_today_schedule(events, date_of_birth: DateLike, now: Optional[datetime] = None,
                         config: Optional[PredictionConfig] = None) -> TodaySchedule:
    """Pure-function form of TodayScheduleService.build."""
    return TodayScheduleService(config).build(events, date_of_birth, now)
