"""Logging setup shared by the API and the command line entry point."""

import logging
import sys


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(log_level: str = "INFO") -> None:
    """Configure the package logger with the given level and a stdout handler."""
    package_logger = logging.getLogger("newsletter")
    package_logger.setLevel(log_level.upper())

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
