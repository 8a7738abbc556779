# debug_utils.py
"""
Logging setup shared by the engine, the bots and the session runner.

Every module logs through ``logging.getLogger(__name__)``; only the entry
point calls :func:`setup_logger` to attach handlers.
"""

import logging
import os
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(
    name: str = 'holdem',
    level=logging.INFO,
    log_file: Optional[str] = None,
    format_str: str = DEFAULT_FORMAT
) -> logging.Logger:
    """
    Set up a logger with a console handler and an optional file handler.

    Args:
        name: Logger name ('holdem', 'bots', or '' for the root logger)
        level: Logging level, as an int or a level name such as "DEBUG"
        log_file: Path to log file (None for no file logging)
        format_str: Log message format

    Returns:
        Configured logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Calling setup twice must not duplicate every line
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    formatter = logging.Formatter(format_str)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
