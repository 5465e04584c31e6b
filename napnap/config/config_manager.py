# napnap/config/config_manager.py
import logging
from typing import List

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from napnap.core.models.data_models import AgeBand
from napnap.core.schedule.age_bands import DEFAULT_AGE_BANDS
from napnap.utils import constants

logger = logging.getLogger(__name__)


class PredictionConfig(BaseModel):
    """Age table and calibration thresholds, passed explicitly to every operation"""
    model_config = ConfigDict(frozen=True)

    age_bands: List[AgeBand] = Field(default_factory=lambda: list(DEFAULT_AGE_BANDS), min_length=1)

    # Calibration
    min_calibration_entries: int = Field(constants.MIN_CALIBRATION_ENTRIES, ge=0)
    optimized_entries: int = Field(constants.OPTIMIZED_ENTRIES, ge=0)
    min_samples_per_index: int = Field(constants.MIN_SAMPLES_PER_INDEX, ge=1)
    high_variability_cv: float = Field(constants.HIGH_VARIABILITY_CV, gt=0.0)
    lookback_days: int = Field(constants.DEFAULT_LOOKBACK_DAYS, ge=1)
    max_wake_window_gap_minutes: float = Field(constants.MAX_WAKE_WINDOW_GAP_MINUTES, gt=0.0)

    # Blending
    recency_decay: float = Field(constants.RECENCY_DECAY, gt=0.0, le=1.0)
    max_empirical_weight: float = Field(constants.MAX_EMPIRICAL_WEIGHT, ge=0.0, le=1.0)
    high_variability_weight_factor: float = Field(constants.HIGH_VARIABILITY_WEIGHT_FACTOR, ge=0.0, le=1.0)
    confidence_sample_scale: float = Field(constants.CONFIDENCE_SAMPLE_SCALE, gt=0.0)
    insufficient_data_confidence_cap: float = Field(constants.INSUFFICIENT_DATA_CONFIDENCE_CAP, ge=0.0, le=1.0)
    high_variability_confidence_cap: float = Field(constants.HIGH_VARIABILITY_CONFIDENCE_CAP, ge=0.0, le=1.0)
    first_nap_confidence_factor: float = Field(constants.FIRST_NAP_CONFIDENCE_FACTOR, ge=0.0, le=1.0)

    # Short naps
    short_nap_threshold_minutes: float = Field(constants.SHORT_NAP_THRESHOLD_MINUTES, ge=0.0)
    short_nap_wake_window_factor: float = Field(constants.SHORT_NAP_WAKE_WINDOW_FACTOR, gt=0.0, le=1.0)

    # Bedtime
    bedtime_nudge_ratio: float = Field(constants.BEDTIME_NUDGE_RATIO, ge=0.0)
    max_bedtime_nudge_minutes: float = Field(constants.MAX_BEDTIME_NUDGE_MINUTES, ge=0.0)
    bedtime_buffer_minutes: float = Field(constants.BEDTIME_BUFFER_MINUTES, ge=0.0)

    @model_validator(mode='after')
    def validate_age_bands(self):
        bounds = [band.max_age_days for band in self.age_bands]
        if bounds[-1] is not None:
            raise ValueError('The last age band must be open-ended (max_age_days: null)')
        closed = bounds[:-1]
        if any(bound is None for bound in closed):
            raise ValueError('Only the last age band may be open-ended')
        if any(later <= earlier for earlier, later in zip(closed, closed[1:])):
            raise ValueError('Age bands must be sorted by increasing max_age_days')
        if self.optimized_entries < self.min_calibration_entries:
            raise ValueError('optimized_entries must be at least min_calibration_entries')
        return self


DEFAULT_CONFIG = PredictionConfig()


class ConfigManager:
    """Central configuration manager"""

    def __init__(self, config_path=None):
        self.config_path = config_path or 'config/prediction_config.yaml'
        self.config = self._load_config()

    def _load_config(self):
        """Load configuration from file"""
        with open(self.config_path, 'r') as file:
            return yaml.safe_load(file) or {}

    def get(self, key, default=None):
        """Get configuration value"""
        # Support nested keys with dot notation
        keys = key.split('.')
        value = self.config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_prediction_config(self) -> PredictionConfig:
        """Build a PredictionConfig from the `prediction` section, defaults elsewhere"""
        section = self.get('prediction', {}) or {}
        settings = {}
        # Group headings in the file are for readability only
        for key, value in section.items():
            if isinstance(value, dict):
                settings.update(value)
            else:
                settings[key] = value

        config = PredictionConfig(**settings)
        logger.info(f"Loaded prediction config from {self.config_path} "
                    f"({len(settings)} overrides, {len(config.age_bands)} age bands)")
        return config
