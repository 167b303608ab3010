"""
Logging configuration for the Life Notes API.
"""

import logging
import sys

ROOT_LOGGER_NAME = "life_notes"

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure application logging.

    :param level: Log level name, e.g. ``INFO`` or ``DEBUG``
    :type level: str
    :return: Root logger for the application
    :rtype: logging.Logger
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(
        level=resolved,
        format=_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(resolved)
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    :param name: The module name for the logger
    :type name: str
    :return: Logger instance for the specified module
    :rtype: logging.Logger
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
