"""Mapping from ``logging`` levels to Cloud Logging severities."""

import logging
from typing import Literal

SEVERITY = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


def severity_of(level: int) -> SEVERITY:
    """
    Map a numeric log level onto one of the four Cloud Logging severities.

    Levels between the named thresholds fall into the lower tier, so
    ``logging.INFO + 1`` is still ``"INFO"``. Anything at or above
    ``logging.ERROR`` (including ``CRITICAL``) is ``"ERROR"``.
    """
    if level >= logging.ERROR:
        return "ERROR"
    if level >= logging.WARNING:
        return "WARNING"
    if level >= logging.INFO:
        return "INFO"
    return "DEBUG"


def level_from_severity_number(severity_number: int) -> int:
    """Map an OpenTelemetry severity number (1-24) onto the ``logging`` scale."""
    if severity_number >= 17:
        return logging.ERROR
    if severity_number >= 13:
        return logging.WARNING
    if severity_number >= 9:
        return logging.INFO
    return logging.DEBUG
