"""
Calendar arithmetic helpers.
"""

from datetime import datetime


def years_before(moment: datetime, years: int) -> datetime:
    """
    Return ``moment`` shifted back by whole calendar years.

    February 29th maps to February 28th in non-leap target years.
    """
    target_year = moment.year - years
    try:
        return moment.replace(year=target_year)
    except ValueError:
        return moment.replace(year=target_year, day=28)


def months_between(earlier: datetime, later: datetime) -> int:
    """
    Calendar-month distance between two instants.

    Day of month and time of day are ignored: 31 Jan -> 1 Feb is one month.
    """
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)
