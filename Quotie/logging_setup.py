"""Logging configuration for Quotie entry points."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path


# Package loggers: the app side and the widget side
LOGGER_NAMES = ("Quotie", "Widget")
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logging(log_path: Path, verbose: bool = False) -> logging.Logger:
    """Setup logging with file and console handlers."""
    level = logging.DEBUG if verbose else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    handlers = []

    # File handler with rotation
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)
    except OSError as e:
        logging.getLogger(LOGGER_NAMES[0]).warning(f"File logging disabled ({log_path}): {e}")

    # Console handler only shows warnings unless verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level if verbose else logging.WARNING)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for old in list(logger.handlers):
            logger.removeHandler(old)
        for handler in handlers:
            logger.addHandler(handler)

    return logging.getLogger(LOGGER_NAMES[0])
