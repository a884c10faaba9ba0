"""Instant handling and sidereal time.

orbitview represents instants as :class:`datetime.datetime` values in UTC.
This module converts them to the split Julian date the propagator expects
(whole part ending in .5 plus a fraction of a day) and computes Greenwich
Mean Sidereal Time, the single time-dependent angle the Earth-fixed frame
transform needs.

Everything here is scalar host-side math in double precision; it runs once
per frame, not once per record.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

from .constants import JD2000, SECONDS_PER_DAY

_TWO_PI = 2.0 * math.pi


def ensure_utc(instant: datetime) -> datetime:
    """Return *instant* as a timezone-aware UTC datetime.

    Naive datetimes are interpreted as UTC.

    Args:
        instant (datetime): Instant to normalize.

    Returns:
        datetime: UTC-aware datetime.
    """
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def caldate_to_jd(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
) -> tuple[float, float]:
    """Convert a Gregorian calendar date to a split Julian Date.

    Args:
        year (int): Year of the calendar date.
        month (int): Month of the calendar date.
        day (int): Day of the calendar date.
        hour (int): Hour of the calendar date. Default: ``0``
        minute (int): Minute of the calendar date. Default: ``0``
        second (float): Second of the calendar date. Default: ``0.0``

    Returns:
        tuple[float, float]: Julian Date at the preceding midnight and the
            fraction of the day elapsed since.

    References:

        1. Montenbruck, O., & Gill, E. (2012). *Satellite Orbits: Models, Methods and Applications*. Springer Science & Business Media.
    """
    if month <= 2:
        year -= 1
        month += 12

    b = year // 400 - year // 100 + year // 4
    mjd = 365 * year - 679004 + b + math.floor(30.6001 * (month + 1)) + day

    fraction = (hour + (minute + second / 60.0) / 60.0) / 24.0
    return mjd + 2400000.5, fraction


def datetime_to_jd(instant: datetime) -> tuple[float, float]:
    """Convert a datetime to a split Julian Date.

    Args:
        instant (datetime): Instant to convert (naive values are UTC).

    Returns:
        tuple[float, float]: ``(jd, fraction)`` with ``jd`` at midnight.
    """
    instant = ensure_utc(instant)
    return caldate_to_jd(
        instant.year,
        instant.month,
        instant.day,
        instant.hour,
        instant.minute,
        instant.second + instant.microsecond * 1e-6,
    )


def jd_to_datetime(jd: float, fraction: float = 0.0) -> datetime:
    """Convert a (split) Julian Date to a UTC datetime.

    Args:
        jd (float): Julian Date (whole or full).
        fraction (float): Additional fraction of a day. Default: ``0.0``

    Returns:
        datetime: UTC-aware datetime, rounded to the microsecond.
    """
    whole = math.floor(jd - 0.5) + 0.5
    days = (jd - whole) + fraction
    base = datetime(2000, 1, 1, 12, tzinfo=timezone.utc) + timedelta(days=whole - JD2000)
    return base + timedelta(microseconds=round(days * SECONDS_PER_DAY * 1e6))


def gmst(jd: float, fraction: float = 0.0, use_degrees: bool = False) -> float:
    """Compute Greenwich Mean Sidereal Time using the IAU 1982 model.

    Uses the Vallado GMST82 polynomial and assumes UTC approximates UT1,
    which introduces at most ~1 second of error.

    Args:
        jd (float): Julian Date (whole part, or full date if *fraction* is 0).
        fraction (float): Fraction of a day added to *jd*. Default: ``0.0``
        use_degrees (bool): If True, return in degrees. Default: False
            (radians).

    Returns:
        float: Greenwich Mean Sidereal Time in ``[0, 2pi)``. Units: rad (or
            deg if use_degrees=True)

    References:

        1. D. Vallado, *Fundamentals of Astrodynamics and Applications
           (4th Ed.)*, 2010.
    """
    t_ut1 = ((jd - JD2000) + fraction) / 36525.0

    gmst_sec = (67310.54841
                + (876600.0 * 3600.0 + 8640184.812866) * t_ut1
                + 0.093104 * t_ut1 * t_ut1
                - 6.2e-6 * t_ut1 * t_ut1 * t_ut1)

    # 1 second of time = 1/240 degree
    angle = math.radians(gmst_sec / 240.0) % _TWO_PI

    return math.degrees(angle) if use_degrees else angle


def gmst_at(instant: datetime, use_degrees: bool = False) -> float:
    """GMST for a datetime. See :func:`gmst`."""
    jd, fraction = datetime_to_jd(instant)
    return gmst(jd, fraction, use_degrees)
