from datetime import datetime, timedelta

import pytest

from napnap.core.models.data_models import NapIndex, WakeWindowHistory, WakeWindowSample
from napnap.core.models.output_models import CalibrationReason
from napnap.core.prediction.nap_time_predictor import (
    NapTimePredictor,
    calculate_suggested_nap_time,
    calculate_suggested_nap_time_with_metadata,
)

NOW = datetime(2026, 10, 19, 7, 30)


def history_of(values, nap_index=1, total_entries=None, days_ago=None):
    samples = [
        WakeWindowSample(minutes=minutes, nap_index=nap_index,
                         days_ago=days_ago(i) if days_ago else 0)
        for i, minutes in enumerate(values)
    ]
    return WakeWindowHistory(samples=samples, total_entries=total_entries or max(len(values), 100))


def test_first_nap_from_age_default(dob_6_months, at):
    predicted = calculate_suggested_nap_time(dob_6_months, at(7, 0), None, 'first', now=NOW)
    assert predicted == at(9, 0)


def test_second_nap_after_full_nap(dob_6_months, at):
    predicted = calculate_suggested_nap_time(dob_6_months, at(10, 0), 60, NapIndex.SECOND, now=at(10, 30))
    assert predicted == at(12, 30)


def test_short_nap_shrinks_wake_window(dob_6_months, at):
    predicted = calculate_suggested_nap_time(dob_6_months, at(10, 0), 30, NapIndex.SECOND, now=at(10, 30))
    assert predicted == at(12, 0)


def test_accepts_iso_strings(dob_6_months, at):
    predicted = calculate_suggested_nap_time(dob_6_months.isoformat(), '2026-10-19T07:00:00', now=NOW)
    assert predicted == at(9, 0)


def test_missing_inputs_give_none(dob_6_months, at):
    assert calculate_suggested_nap_time(None, at(7, 0), now=NOW) is None
    assert calculate_suggested_nap_time(dob_6_months, None, now=NOW) is None


def test_no_history_is_insufficient_data(dob_6_months, at):
    prediction = calculate_suggested_nap_time_with_metadata(
        dob_6_months, at(7, 0), nap_index_type='first', now=NOW
    )

    assert prediction.predicted_time == at(9, 0)
    assert prediction.confidence_score == 0.0
    assert prediction.is_calibrating
    assert prediction.calibration_reason == CalibrationReason.INSUFFICIENT_DATA
    assert prediction.sample_count == 0
    assert prediction.empirical_wake_window_minutes is None


def test_few_logged_entries_cap_confidence(dob_6_months, at):
    history = history_of([150] * 20, total_entries=5)
    prediction = calculate_suggested_nap_time_with_metadata(
        dob_6_months, at(10, 0), 60, 'second', history, now=at(10, 30)
    )

    assert prediction.calibration_reason == CalibrationReason.INSUFFICIENT_DATA
    assert 0 < prediction.confidence_score <= 0.3
    # Age default is used unchanged until calibration starts
    assert prediction.wake_window_minutes == 150


def test_too_few_samples_for_index(dob_6_months, at):
    history = history_of([170, 170], total_entries=50)
    prediction = calculate_suggested_nap_time_with_metadata(
        dob_6_months, at(10, 0), 60, 'second', history, now=at(10, 30)
    )

    assert prediction.calibration_reason == CalibrationReason.INSUFFICIENT_DATA
    assert prediction.predicted_time == at(12, 30)


def test_stable_history_saturates_confidence(dob_6_months, at):
    history = history_of([145, 155] * 50, days_ago=lambda i: 6 - i // 15)
    prediction = calculate_suggested_nap_time_with_metadata(
        dob_6_months, at(10, 0), 60, 'second', history, now=at(10, 30)
    )

    assert prediction.calibration_reason == CalibrationReason.NONE
    assert not prediction.is_calibrating
    assert prediction.confidence_score >= 0.8
    assert prediction.sample_count == 100
    assert 149 <= prediction.wake_window_minutes <= 151


def test_empirical_wake_window_shifts_prediction(dob_6_months, at):
    history = history_of([170] * 30)
    prediction = calculate_suggested_nap_time_with_metadata(
        dob_6_months, at(10, 0), 60, 'second', history, now=at(10, 30)
    )

    assert prediction.empirical_wake_window_minutes == 170.0
    assert prediction.wake_window_minutes == 166
    assert prediction.predicted_time == at(12, 46)


def test_bare_minute_list_is_accepted(dob_6_months, at):
    prediction = calculate_suggested_nap_time_with_metadata(
        dob_6_months, at(10, 0), 60, 'second', [170] * 30, total_historical_entries=30, now=at(10, 30)
    )
    assert prediction.wake_window_minutes == 166


def test_blend_is_clamped_to_age_range(dob_6_months, at):
    history = history_of([400] * 50)
    prediction = calculate_suggested_nap_time_with_metadata(
        dob_6_months, at(10, 0), 60, 'second', history, now=at(10, 30)
    )
    assert prediction.wake_window_minutes == 180


def test_high_variability(dob_6_months, at):
    history = history_of([80, 220] * 10)
    prediction = calculate_suggested_nap_time_with_metadata(
        dob_6_months, at(10, 0), 60, 'second', history, now=at(10, 30)
    )

    assert prediction.calibration_reason == CalibrationReason.HIGH_VARIABILITY
    assert prediction.is_calibrating
    assert prediction.confidence_score <= 0.6


def test_first_nap_of_day_is_flagged(dob_6_months, at):
    history = history_of([120] * 20, nap_index=0)
    prediction = calculate_suggested_nap_time_with_metadata(
        dob_6_months, at(7, 0), None, 'first', history, now=NOW
    )

    assert prediction.calibration_reason == CalibrationReason.FIRST_NAP_OF_DAY
    assert prediction.is_calibrating
    assert prediction.confidence_score == pytest.approx(0.778, abs=0.001)


def test_confidence_grows_with_samples(dob_6_months, at):
    predictor = NapTimePredictor()
    scores = [
        predictor.predict(dob_6_months, at(10, 0), 60, 'second', history_of([150] * n, total_entries=200),
                          now=at(10, 30)).confidence_score
        for n in (3, 5, 10, 20, 50, 100)
    ]
    assert scores == sorted(scores)
    assert scores[0] < scores[-1]


def test_confidence_falls_with_variability(dob_6_months, at):
    predictor = NapTimePredictor()
    scores = [
        predictor.predict(dob_6_months, at(10, 0), 60, 'second',
                          history_of([150 - spread, 150 + spread] * 15), now=at(10, 30)).confidence_score
        for spread in (0, 10, 30, 60)
    ]
    assert scores == sorted(scores, reverse=True)
    assert scores[0] > scores[-1]


def test_nap_index_derived_from_todays_count(dob_6_months, at):
    prediction = calculate_suggested_nap_time_with_metadata(
        dob_6_months, at(10, 0), 60, wake_window_history=WakeWindowHistory(todays_count=1), now=at(10, 30)
    )

    assert prediction.nap_index_type == NapIndex.SECOND
    assert prediction.predicted_time == at(12, 30)


def test_overdue_prediction(dob_6_months, at):
    prediction = calculate_suggested_nap_time_with_metadata(
        dob_6_months, at(10, 0), 60, 'second', now=at(13, 0)
    )
    assert prediction.is_overdue


def test_chained_predictions_increase(dob_6_months, at):
    predictor = NapTimePredictor()
    anchor, duration = at(7, 0), None
    times = []
    for nap_index_type, nap_minutes in (('first', 60), ('second', 60), ('third_plus', 30)):
        predicted = predictor.predict(dob_6_months, anchor, duration, nap_index_type, now=NOW).predicted_time
        times.append(predicted)
        anchor, duration = predicted + timedelta(minutes=nap_minutes), nap_minutes

    assert times == [at(9, 0), at(12, 30), at(16, 15)]


def test_deterministic(dob_6_months, at):
    history = history_of([150, 160, 140] * 5)
    first = calculate_suggested_nap_time_with_metadata(dob_6_months, at(10, 0), 60, 'second', history,
                                                       now=at(10, 30))
    second = calculate_suggested_nap_time_with_metadata(dob_6_months, at(10, 0), 60, 'second', history,
                                                        now=at(10, 30))
    assert first == second
