from __future__ import annotations

from typing import List

MONTH_LENGTHS: List[int] = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]
"""Number of days in each month (January through December)."""

MONTH_NAMES: List[str] = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

AVERAGE_MONTH_DAYS = 30.4


def _check_month(month: int) -> None:
    if not (1 <= month <= 12):
        raise ValueError("month must be between 1 and 12")


def days_in_month(month: int) -> int:
    """Return the number of days in a 1-based month of a non-leap year."""
    _check_month(month)
    return MONTH_LENGTHS[month - 1]


def month_name(month: int) -> str:
    _check_month(month)
    return MONTH_NAMES[month - 1]


def mid_month_day_of_year(month: int) -> float:
    """
    Approximate day-of-year for the middle of a 1-based month.

    Uses an average month length of 30.4 days, so January maps to day 15.4
    and December to day 349.8.
    """
    _check_month(month)
    return month * AVERAGE_MONTH_DAYS - 15.0
