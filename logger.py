"""
logger.py
Logging setup shared by the evaluator and command-line tools.
"""

import logging
import sys
from typing import Optional, Union

import config


def setup_logger(
    name: str,
    log_file: Optional[str] = None,
    level: Union[int, str, None] = None
) -> logging.Logger:
    """
    Configure a logger with a console handler and an optional file handler.

    Calling it again for the same name does not add duplicate handlers.

    Args:
        name: Logger name (child loggers such as "encoding.move" propagate to it)
        log_file: Also write records to this file if given
        level: Level name or number (default: config.LOG_LEVEL)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else config.LOG_LEVEL)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(config.LOG_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
