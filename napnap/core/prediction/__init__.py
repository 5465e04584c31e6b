"""
Prediction module for naps and bedtime.
"""

from napnap.core.prediction.nap_window_simulator import calculate_all_nap_windows
from napnap.core.prediction.nap_time_predictor import (
    NapTimePredictor,
    calculate_suggested_nap_time,
    calculate_suggested_nap_time_with_metadata,
)
from napnap.core.prediction.bedtime_calculator import calculate_dynamic_bedtime

__all__ = [
    'calculate_all_nap_windows',
    'NapTimePredictor',
    'calculate_suggested_nap_time',
    'calculate_suggested_nap_time_with_metadata',
    'calculate_dynamic_bedtime',
]
