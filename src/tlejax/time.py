"""Time helpers for TLE epochs.

TLE epochs are written as a two-digit year plus a fractional day of year and
are carried internally as a split Julian date. These helpers run in plain
Python floats at parse and initialization time; none of them are traced by
JAX.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from math import floor

from .constants import DEG2RAD, JD2000, JD_1950, TWOPI


def days_to_mdhms(year: int, days: float) -> tuple[int, int, int, int, float]:
    """Convert a fractional day of year to month, day, hour, minute, and second.

    Day 1.0 is January 1 at 00:00. Leap years follow the simple divisible-by-4
    rule, which is exact for every year a two-digit TLE epoch can express
    (1957-2056).

    Args:
        year (int): Four-digit year.
        days (float): Day of year with fractional day.

    Returns:
        tuple[int, int, int, int, float]: (month, day, hour, minute, second).

    References:

        1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, 2013, Algorithm ``days2mdhms``.
    """
    month_lengths = (31, 29 if year % 4 == 0 else 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

    dayofyr = int(floor(days))
    month = 1
    elapsed = 0
    while dayofyr > elapsed + month_lengths[month - 1] and month < 12:
        elapsed += month_lengths[month - 1]
        month += 1
    day = dayofyr - elapsed

    temp = (days - dayofyr) * 24.0
    hour = int(floor(temp))
    temp = (temp - hour) * 60.0
    minute = int(floor(temp))
    second = (temp - minute) * 60.0

    return month, day, hour, minute, second


def epoch_to_datetime(year: int, days: float) -> datetime:
    """Convert a TLE epoch (year, fractional day of year) to a UTC datetime.

    Args:
        year (int): Four-digit year.
        days (float): Day of year with fractional day.

    Returns:
        datetime: Timezone-aware datetime in UTC, rounded to the microsecond.
            Day values below 1.0 fall in the last day of the previous year.
    """
    return datetime(year, 1, 1, tzinfo=timezone.utc) + timedelta(days=days - 1.0)


def gstime(jdut1: float) -> float:
    """Compute Greenwich mean sidereal time with the IAU-82 model.

    Args:
        jdut1 (float): Julian date (UT1).

    Returns:
        float: Greenwich sidereal time in ``[0, 2pi)`` [rad].

    References:

        1. D. Vallado, P. Crawford, R. Hujsak, and T.S. Kelso, *Revisiting Spacetrack Report #3*, AIAA 2006-6753, 2006.
    """
    tut1 = (jdut1 - JD2000) / 36525.0
    temp = (
        -6.2e-6 * tut1 * tut1 * tut1
        + 0.093104 * tut1 * tut1
        + (876600.0 * 3600 + 8640184.812866) * tut1
        + 67310.54841
    )
    temp = (temp * DEG2RAD / 240.0) % TWOPI
    if temp < 0.0:
        temp += TWOPI
    return temp


def gstime_afspc(epoch: float) -> float:
    """Compute Greenwich sidereal time with the AFSPC 1970-referenced formula.

    This is the sidereal time used by operational AFSPC software and is
    selected by ``opsmode="a"``.

    Args:
        epoch (float): Days since 1949-12-31 00:00 UT.

    Returns:
        float: Greenwich sidereal time in ``[0, 2pi)`` [rad].
    """
    ts70 = epoch - 7305.0
    ds70 = floor(ts70 + 1.0e-8)
    tfrac = ts70 - ds70
    c1 = 1.72027916940703639e-2
    thgr70 = 1.7321343856509374
    fk5r = 5.07551419432269442e-15
    c1p2p = c1 + TWOPI
    gsto = (thgr70 + c1 * ds70 + c1p2p * tfrac + ts70 * ts70 * fk5r) % TWOPI
    if gsto < 0.0:
        gsto += TWOPI
    return gsto


def sidereal_time_at_epoch(epoch: float, opsmode: str) -> float:
    """Greenwich sidereal time at a TLE epoch for the requested opsmode.

    Args:
        epoch (float): Days since 1949-12-31 00:00 UT.
        opsmode (str): ``"a"`` for the AFSPC formula, ``"i"`` for IAU-82.

    Returns:
        float: Greenwich sidereal time [rad].
    """
    if opsmode == "a":
        return gstime_afspc(epoch)
    return gstime(epoch + JD_1950)
