"""
Logging utilities for the fuel analysis pipeline.
Provides consistent logging across all stages with file and console handlers.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
import colorlog

ROOT_LOGGER_NAME = "fuel_analysis"


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    log_file: Optional[str] = None,
    level: str = "INFO",
    colorize: bool = True
) -> logging.Logger:
    """
    Set up a logger with both file and console handlers.

    Stage modules log through children of the ``fuel_analysis`` logger,
    so configuring that one logger configures the whole pipeline.

    Args:
        name: Logger name (defaults to the package root logger)
        log_file: Path to log file (optional)
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        colorize: Whether to colorize console output

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(log_file="logs/pipeline.log")
        >>> logger.info("Loading FuelConsumption.csv")
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if colorize:
        console_formatter = colorlog.ColoredFormatter(
            '%(log_color)s%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
            log_colors={
                'DEBUG': 'cyan',
                'INFO': 'green',
                'WARNING': 'yellow',
                'ERROR': 'red',
                'CRITICAL': 'red,bg_white',
            }
        )
    else:
        console_formatter = file_formatter

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the ``fuel_analysis`` hierarchy.

    The package root logger is given default handlers the first time any
    module asks for a logger; the returned logger propagates to it.

    Args:
        name: Logger name (typically ``__name__``)

    Returns:
        Logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.warning("Column has zero variance")
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        setup_logger(ROOT_LOGGER_NAME)

    return logging.getLogger(name)
