"""
Synthetic sleep history generation for demos and tests.
"""

from napnap.data_generation.sleep_history_generator import SleepHistoryGenerator

__all__ = ['SleepHistoryGenerator']
