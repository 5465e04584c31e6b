"""
Next-nap prediction: age-based wake windows blended with the baby's own recent history.
"""

import logging
import math
from datetime import datetime
from typing import Optional, Sequence, Union

import numpy as np

from napnap.config.config_manager import DEFAULT_CONFIG, PredictionConfig
from napnap.core.models.data_models import NAP_INDEX_POSITIONS, NapIndex, WakeWindowHistory, WakeWindowSample
from napnap.core.models.output_models import CalibrationReason, NapPrediction
from napnap.core.schedule.age_schedule import get_recommended_schedule
from napnap.utils.date_utils import DateLike, TimestampLike, add_minutes, parse_timestamp, resolve_now

logger = logging.getLogger(__name__)

HistoryLike = Union[WakeWindowHistory, Sequence[float], None]


class NapTimePredictor:
    """
    Predicts the next nap by blending age-based wake windows with the
    baby's own recent wake windows.

    The blend weight and the confidence both grow with the number of
    matching samples and shrink with their coefficient of variation.
    """

    def __init__(self, config: Optional[PredictionConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def predict(self, date_of_birth: DateLike, last_sleep_end_time: TimestampLike,
                last_nap_duration_minutes: Optional[float] = None,
                nap_index_type: Optional[Union[NapIndex, str]] = None,
                wake_window_history: HistoryLike = None,
                todays_count: Optional[int] = None,
                total_historical_entries: Optional[int] = None,
                now: Optional[datetime] = None) -> Optional[NapPrediction]:
        """
        Predict the start of the next nap.

        Args:
            date_of_birth: Baby's date of birth
            last_sleep_end_time: End of the previous sleep (night or nap)
            last_nap_duration_minutes: Length of the previous nap, None after night sleep
            nap_index_type: first / second / third_plus; derived from todays_count when None
            wake_window_history: WakeWindowHistory, or plain wake-window minutes
            todays_count: Naps completed today
            total_historical_entries: Completed entries available for calibration
            now: Current time

        Returns:
            NapPrediction or None when no date of birth or anchor is available
        """
        last_end = parse_timestamp(last_sleep_end_time)
        schedule = get_recommended_schedule(date_of_birth, now, self.config)
        if schedule is None or last_end is None:
            return None
        now = resolve_now(now, last_end)

        history = wake_window_history if isinstance(wake_window_history, WakeWindowHistory) else None
        if todays_count is None:
            todays_count = history.todays_count if history is not None else 0
        if nap_index_type is None:
            nap_index_type = NapIndex.from_position(todays_count)
        nap_index_type = NapIndex(nap_index_type)

        samples = self._matching_samples(wake_window_history, nap_index_type)
        if total_historical_entries is None:
            total_historical_entries = history.total_entries if history is not None else len(samples)

        default_minutes = schedule.wake_window_for(nap_index_type)
        calibration = self._calibrate(samples, nap_index_type, total_historical_entries)

        wake_window = default_minutes
        if calibration['empirical'] is not None and calibration['weight'] > 0:
            weight = calibration['weight']
            wake_window = (1 - weight) * default_minutes + weight * calibration['empirical']
        wake_window = min(max(wake_window, schedule.min_wake_window_minutes), schedule.max_wake_window_minutes)

        if (last_nap_duration_minutes is not None
                and last_nap_duration_minutes < self.config.short_nap_threshold_minutes):
            wake_window *= self.config.short_nap_wake_window_factor

        wake_window = int(round(wake_window))
        predicted_time = add_minutes(last_end, wake_window)
        reason = calibration['reason']

        logger.debug(f"{nap_index_type.value} nap: default {default_minutes}m, "
                     f"empirical {calibration['empirical']}, used {wake_window}m "
                     f"({reason.value}, confidence {calibration['confidence']:.2f})")

        return NapPrediction(
            predicted_time=predicted_time,
            confidence_score=calibration['confidence'],
            is_calibrating=reason != CalibrationReason.NONE,
            calibration_reason=reason,
            nap_index_type=nap_index_type,
            wake_window_minutes=wake_window,
            default_wake_window_minutes=default_minutes,
            empirical_wake_window_minutes=calibration['empirical'],
            sample_count=len(samples),
            is_overdue=predicted_time <= now,
        )

    def _matching_samples(self, wake_window_history, nap_index_type):
        """Samples for this nap index; bare minute values count for every index."""
        if wake_window_history is None:
            return []
        if isinstance(wake_window_history, WakeWindowHistory):
            return wake_window_history.samples_for(nap_index_type)
        position = NAP_INDEX_POSITIONS[nap_index_type]
        return [WakeWindowSample(minutes=minutes, nap_index=position) for minutes in wake_window_history]

    def _calibrate(self, samples, nap_index_type, total_entries):
        """Decide the calibration state, blend weight and confidence."""
        config = self.config
        n = len(samples)
        minutes = np.array([s.minutes for s in samples], dtype=float)

        empirical = None
        cv = 0.0
        if n > 0:
            # More weight to the most recent days
            weights = np.power(config.recency_decay, [s.days_ago for s in samples])
            empirical = round(float(np.average(minutes, weights=weights)), 1)
            if n >= 2 and minutes.mean() > 0:
                cv = float(minutes.std() / minutes.mean())

        if total_entries < config.min_calibration_entries or n < config.min_samples_per_index:
            data_fraction = min(total_entries / config.min_calibration_entries, 1.0) \
                if config.min_calibration_entries else 1.0
            sample_fraction = min(n / config.min_samples_per_index, 1.0)
            confidence = config.insufficient_data_confidence_cap * data_fraction * sample_fraction
            return {
                'reason': CalibrationReason.INSUFFICIENT_DATA,
                'weight': 0.0,
                'empirical': empirical,
                'confidence': round(confidence, 3),
            }

        sample_factor = 1 - math.exp(-n / config.confidence_sample_scale)
        variability_factor = 1 / (1 + (cv / config.high_variability_cv) ** 2)
        confidence = sample_factor * variability_factor
        weight = config.max_empirical_weight * sample_factor

        if cv > config.high_variability_cv:
            reason = CalibrationReason.HIGH_VARIABILITY
            weight *= config.high_variability_weight_factor
            confidence = min(confidence, config.high_variability_confidence_cap)
        elif nap_index_type == NapIndex.FIRST:
            reason = CalibrationReason.FIRST_NAP_OF_DAY
            confidence *= config.first_nap_confidence_factor
        else:
            reason = CalibrationReason.NONE

        return {
            'reason': reason,
            'weight': weight,
            'empirical': empirical,
            'confidence': round(min(max(confidence, 0.0), 1.0), 3),
        }


def calculate_suggested_nap_time_with_metadata(date_of_birth: DateLike, last_sleep_end_time: TimestampLike,
                                               last_nap_duration_minutes: Optional[float] = None,
                                               nap_index_type: Optional[Union[NapIndex, str]] = None,
                                               wake_window_history: HistoryLike = None,
                                               todays_count: Optional[int] = None,
                                               total_historical_entries: Optional[int] = None,
                                               now: Optional[datetime] = None,
                                               config: Optional[PredictionConfig] = None) -> Optional[NapPrediction]:
    """Next nap time with confidence and calibration metadata."""
    return NapTimePredictor(config).predict(
        date_of_birth, last_sleep_end_time, last_nap_duration_minutes, nap_index_type,
        wake_window_history, todays_count, total_historical_entries, now
    )


def calculate_suggested_nap_time(date_of_birth: DateLike, last_sleep_end_time: TimestampLike,
                                 last_nap_duration_minutes: Optional[float] = None,
                                 nap_index_type: Union[NapIndex, str] = NapIndex.FIRST,
                                 now: Optional[datetime] = None,
                                 config: Optional[PredictionConfig] = None) -> Optional[datetime]:
    """Next nap time from age-based defaults only."""
    prediction = calculate_suggested_nap_time_with_metadata(
        date_of_birth, last_sleep_end_time, last_nap_duration_minutes, nap_index_type,
        now=now, config=config
    )
    return prediction.predicted_time if prediction is not None else None
