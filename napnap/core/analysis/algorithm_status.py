"""
Calibration progress shown to parents, derived from the number of logged entries.
"""

from typing import Optional

from napnap.config.config_manager import DEFAULT_CONFIG, PredictionConfig
from napnap.utils.constants import ALGORITHM_STATUS_TIERS, algorithm_status_descriptions


def get_algorithm_status_tier(total_entries: int, config: Optional[PredictionConfig] = None) -> str:
    """Map the number of logged entries to 'learning', 'calibrating' or 'optimized'."""
    config = config or DEFAULT_CONFIG
    learning, calibrating, optimized = ALGORITHM_STATUS_TIERS
    if total_entries < config.min_calibration_entries:
        return learning
    if total_entries < config.optimized_entries:
        return calibrating
    return optimized


def describe_algorithm_status(tier: str) -> str:
    if tier not in algorithm_status_descriptions:
        raise ValueError(f"Unknown algorithm status tier: {tier}")
    return algorithm_status_descriptions[tier]
