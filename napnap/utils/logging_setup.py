"""
Logging configuration for applications embedding the engine.
"""

import logging
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level=logging.INFO, log_file=None):
    """
    Configure logging for applications embedding the prediction engine.

    The library itself only creates module loggers; call this from the
    application entry point.

    Args:
        level: Logging level for the root logger
        log_file: Optional path of a log file to write alongside the console

    Returns:
        logging.Logger: the configured root logger
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    return logging.getLogger()
