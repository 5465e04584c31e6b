"""
Analysis module for logged sleep history.

This module contains functions for deriving wake windows from past sleep,
reporting how far calibration has progressed and summarising a date range
for the sleep report.
"""

from napnap.core.analysis.wake_windows import extract_wake_windows_from_entries
from napnap.core.analysis.algorithm_status import get_algorithm_status_tier, describe_algorithm_status
from napnap.core.analysis.sleep_report import get_report_data, get_max_wake_window_for_age

__all__ = [
    'extract_wake_windows_from_entries',
    'get_algorithm_status_tier',
    'describe_algorithm_status',
    'get_report_data',
    'get_max_wake_window_for_age',
]
