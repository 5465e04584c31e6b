# napnap/data_generation/sleep_history_generator.py

import logging
from datetime import date, datetime, time, timedelta

from napnap.config.config_manager import DEFAULT_CONFIG
from napnap.core.models.data_models import SleepEvent, SleepKind
from napnap.core.schedule.age_schedule import get_recommended_schedule
from napnap.data_generation.base_generator import BaseDataGenerator
from napnap.utils.date_utils import add_minutes, at_time_of_day

logger = logging.getLogger(__name__)


class SleepHistoryGenerator(BaseDataGenerator):
    """Generates realistic multi-day nap and night logs following the age schedule"""

    def __init__(self, date_of_birth, config_path=None, seed=None, prediction_config=None, tzinfo=None):
        super().__init__(config_path, seed)
        self.config = dict(self.config.get('data_generation', self.config))
        self.date_of_birth = date_of_birth
        self.prediction_config = prediction_config or DEFAULT_CONFIG
        self.tzinfo = tzinfo

        self.config.setdefault('wake_window_variance_pct', 0.1)
        self.config.setdefault('nap_duration_variance_pct', 0.15)
        self.config.setdefault('wake_time_jitter_minutes', 20)
        self.config.setdefault('min_event_minutes', 10)

    def generate(self, days, end_date=None):
        """
        Generate `days` complete days ending the day before `end_date`.

        The last night ends on the morning of `end_date`, so that day has a
        logged wake-up but no naps yet.

        Args:
            days: Number of complete days to generate
            end_date: First day not generated (defaults to today)

        Returns:
            list: SleepEvent objects in chronological order
        """
        if days < 0:
            raise ValueError(f"days must be non-negative, got {days}")
        end_date = end_date or date.today()
        if isinstance(end_date, datetime):
            end_date = end_date.date()

        events = []
        first_day = end_date - timedelta(days=days)
        wake_up = self._morning_wake_up(first_day)

        for dates in self.create_date_range(first_day, end_date - timedelta(days=1)):
            day = dates.date()
            day_events, bedtime = self._generate_day(day, wake_up)
            events.extend(day_events)

            wake_up = self._morning_wake_up(day + timedelta(days=1))
            events.append(SleepEvent(start_time=bedtime, end_time=wake_up, kind=SleepKind.NIGHT))

        logger.info(f"Generated {len(events)} sleep events over {days} days")
        return events

    def _morning_wake_up(self, day):
        schedule = get_recommended_schedule(self.date_of_birth, self._noon(day), self.prediction_config)
        jitter = self.rng.normal(0, self.config['wake_time_jitter_minutes'])
        return add_minutes(at_time_of_day(day, schedule.wake_time, self.tzinfo), round(jitter))

    def _generate_day(self, day, wake_up):
        """Naps for one day, returning them with the evening bedtime."""
        schedule = get_recommended_schedule(self.date_of_birth, self._noon(day), self.prediction_config)
        min_minutes = self.config['min_event_minutes']

        naps = []
        cursor = wake_up
        for nap_index in range(schedule.number_of_naps):
            wake_window = schedule.wake_window_minutes_by_nap_index[min(nap_index, 2)]
            is_catnap = schedule.catnap_minutes is not None and nap_index == schedule.number_of_naps - 1
            duration = schedule.catnap_minutes if is_catnap else schedule.average_nap_minutes

            start = add_minutes(cursor, max(min_minutes, round(self.generate_time_based_noise(
                wake_window, self.config['wake_window_variance_pct']))))
            end = add_minutes(start, max(min_minutes, round(self.generate_time_based_noise(
                duration, self.config['nap_duration_variance_pct']))))
            naps.append(SleepEvent(start_time=start, end_time=end, kind=SleepKind.NAP))
            cursor = end

        bedtime = add_minutes(cursor, max(min_minutes, round(self.generate_time_based_noise(
            schedule.final_wake_window_minutes, self.config['wake_window_variance_pct']))))
        return naps, bedtime

    def _noon(self, day):
        return at_time_of_day(day, time(12, 0), self.tzinfo)
