"""Logging setup for the portal API."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once at application start-up.

    Args:
        level: Level name from settings (DEBUG, INFO, WARNING, ...)
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger("ielts_portal").setLevel(numeric_level)

    # passlib logs a noisy warning about optional backends
    logging.getLogger("passlib").setLevel(logging.ERROR)
