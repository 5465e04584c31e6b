"""
Configuration for the prediction engine.
"""

from napnap.config.config_manager import ConfigManager, PredictionConfig, DEFAULT_CONFIG

__all__ = ['ConfigManager', 'PredictionConfig', 'DEFAULT_CONFIG']
