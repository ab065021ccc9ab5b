"""Logging configuration for imgcatalog."""

import logging
import sys


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Set up console logging for imgcatalog.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger
    """
    logger = logging.getLogger("imgcatalog")
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(handler)

    return logger


def get_logger(name: str = "imgcatalog") -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
