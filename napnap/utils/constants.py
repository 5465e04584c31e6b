"""
Constants used throughout the nap prediction engine.
This includes calibration defaults, algorithm tiers and other shared values.
"""

# Calibration thresholds (defaults for PredictionConfig)
MIN_CALIBRATION_ENTRIES = 14
OPTIMIZED_ENTRIES = 42
MIN_SAMPLES_PER_INDEX = 3
HIGH_VARIABILITY_CV = 0.35
DEFAULT_LOOKBACK_DAYS = 7
MAX_WAKE_WINDOW_GAP_MINUTES = 24 * 60

# Blending of age defaults with observed wake windows
RECENCY_DECAY = 0.8
MAX_EMPIRICAL_WEIGHT = 0.85
HIGH_VARIABILITY_WEIGHT_FACTOR = 0.5
CONFIDENCE_SAMPLE_SCALE = 10.0
INSUFFICIENT_DATA_CONFIDENCE_CAP = 0.3
HIGH_VARIABILITY_CONFIDENCE_CAP = 0.6
FIRST_NAP_CONFIDENCE_FACTOR = 0.9

# A short nap leaves more sleep pressure, so the next wake window shrinks
SHORT_NAP_THRESHOLD_MINUTES = 45
SHORT_NAP_WAKE_WINDOW_FACTOR = 0.8

# Bedtime
BEDTIME_NUDGE_RATIO = 0.5
MAX_BEDTIME_NUDGE_MINUTES = 60
BEDTIME_BUFFER_MINUTES = 120

# Algorithm status tiers shown to parents
ALGORITHM_STATUS_TIERS = ['learning', 'calibrating', 'optimized']

algorithm_status_descriptions = {
    'learning': "We're starting to understand your baby's basic sleep patterns.",
    'calibrating': 'Fine-tuning wake windows based on recency and individual patterns.',
    'optimized': 'The algorithm is fully calibrated and learns from every daily change.'
}

# Sleep report thresholds
MIN_DAYS_FOR_ENOUGH_DATA = 3
REPORT_WAKE_WINDOW_LOOKBACK_DAYS = 14
BEDTIME_VERY_VARIABLE_MINUTES = 60
BEDTIME_STABLE_MINUTES = 45
WAKE_UP_LOGGED_RATIO = 0.6
SLEEP_INCREASE_RATIO = 1.05
SLEEP_DECREASE_RATIO = 0.9
OVERTIREDNESS_FACTOR = 1.15
OVERTIREDNESS_MAX_AGE_MONTHS = 12
NAP_COUNT_SPREAD = 2
NAP_COUNT_CHECK_AGE_MONTHS = (6, 15)

# Longest acceptable average wake window (minutes) by age in months
MAX_WAKE_WINDOW_BY_AGE_MONTHS = [
    (1, 90),
    (4, 180),
    (7, 270),
    (10, 360),
]
MAX_WAKE_WINDOW_OLDER = 420
