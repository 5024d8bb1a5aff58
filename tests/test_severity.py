import logging

import pytest

from cloudlog.severity import level_from_severity_number, severity_of


@pytest.mark.parametrize(
    "level, expected",
    [
        (logging.DEBUG, "DEBUG"),
        (logging.DEBUG - 4, "DEBUG"),
        (logging.INFO - 1, "DEBUG"),
        (logging.INFO, "INFO"),
        (logging.INFO + 1, "INFO"),
        (logging.WARNING - 1, "INFO"),
        (logging.WARNING, "WARNING"),
        (logging.WARNING + 5, "WARNING"),
        (logging.ERROR - 1, "WARNING"),
        (logging.ERROR, "ERROR"),
        (logging.CRITICAL, "ERROR"),
        (1000, "ERROR"),
        (-100, "DEBUG"),
    ],
)
def test_severity_of(level, expected):
    assert severity_of(level) == expected


def test_severity_is_monotonic():
    order = ["DEBUG", "INFO", "WARNING", "ERROR"]
    ranks = [order.index(severity_of(level)) for level in range(-10, 80)]
    assert ranks == sorted(ranks)


@pytest.mark.parametrize(
    "number, expected",
    [
        (1, logging.DEBUG),
        (5, logging.DEBUG),
        (9, logging.INFO),
        (12, logging.INFO),
        (13, logging.WARNING),
        (17, logging.ERROR),
        (21, logging.ERROR),
    ],
)
def test_level_from_severity_number(number, expected):
    assert level_from_severity_number(number) == expected
