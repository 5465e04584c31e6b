# napnap/data_generation/base_generator.py

import yaml
import numpy as np
import pandas as pd
from datetime import datetime


class BaseDataGenerator:
    """Base class for all data generators with common functionality"""

    def __init__(self, config_path=None, seed=None):
        """Initialize the base generator with configuration and a seeded random generator"""
        self.config = self._load_config(config_path) if config_path else {}
        self.rng = np.random.default_rng(seed)

    def _load_config(self, config_path):
        """Load configuration from YAML file"""
        with open(config_path, 'r') as file:
            return yaml.safe_load(file) or {}

    def generate_time_based_noise(self, base_value, variance_pct=0.1):
        """Generate noisy values with specified variance percentage"""
        noise = self.rng.normal(0, base_value * variance_pct)
        return base_value + noise

    def create_date_range(self, start_date, end_date):
        """Create a range of dates between start and end"""
        if isinstance(start_date, str):
            start_date = datetime.strptime(start_date, '%Y-%m-%d')
        if isinstance(end_date, str):
            end_date = datetime.strptime(end_date, '%Y-%m-%d')

        return pd.date_range(start=start_date, end=end_date)
