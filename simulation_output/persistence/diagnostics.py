"""
Diagnostic Log

Everything the persistence layer reports (rejected frequencies, failed
statements, lifecycle messages) goes through the ``simulation_output``
logger. This module attaches a plain-text file handler to that logger so
the messages land next to the output database.
"""

import logging
from pathlib import Path

PACKAGE_LOGGER = "simulation_output"

DIAGNOSTIC_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_package_logger() -> logging.Logger:
    return logging.getLogger(PACKAGE_LOGGER)


def attach_diagnostic_log(path: str | Path, level: int = logging.INFO) -> logging.FileHandler:
    """Append package log records to a diagnostic file.

    Args:
        path: Diagnostic log file (created if missing, appended otherwise)
        level: Minimum level written to the file

    Returns:
        The attached handler; pass it to :func:`detach_diagnostic_log`

    Examples:
        >>> handler = attach_diagnostic_log("simulation_output.err")
        >>> detach_diagnostic_log(handler)
    """
    handler = logging.FileHandler(Path(path), mode="a", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DIAGNOSTIC_FORMAT))

    package_logger = get_package_logger()
    package_logger.addHandler(handler)
    if package_logger.level == logging.NOTSET or package_logger.level > level:
        package_logger.setLevel(level)
    return handler


def detach_diagnostic_log(handler: logging.Handler) -> None:
    """Remove and close a handler returned by :func:`attach_diagnostic_log`."""
    get_package_logger().removeHandler(handler)
    handler.close()
