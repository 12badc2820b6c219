"""
Calendar <-> Julian Date conversions.

Datetimes are normalized to UTC with pytz and converted with astropy's Time
on a uniform scale (TIME_SCALE), so historical dates such as the 1761 and
1769 transits convert without leap-second lookups.
"""

import logging
from datetime import datetime
from typing import Union

import pytz
from astropy.time import Time

from ..config import J2000_JD, DAYS_PER_JULIAN_CENTURY, TIME_SCALE, DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)


def ensure_utc(when: datetime, timezone: Union[str, pytz.BaseTzInfo] = DEFAULT_TIMEZONE) -> datetime:
    """
    Returns a timezone-aware UTC datetime.

    Naive datetimes are interpreted in ``timezone`` (UTC by default).
    """
    if not isinstance(when, datetime):
        raise TypeError(f"Expected a datetime, got {type(when).__name__}")

    if when.tzinfo is None:
        local_tz = pytz.timezone(timezone) if isinstance(timezone, str) else timezone
        when = local_tz.localize(when)
    return when.astimezone(pytz.utc)


def julian_date(when: datetime) -> float:
    """Julian Date of a datetime (naive values are taken as UTC)."""
    utc = ensure_utc(when).replace(tzinfo=None)
    return float(Time(utc, format='datetime', scale=TIME_SCALE).jd)


def julian_date_to_datetime(jd: float) -> datetime:
    """Timezone-aware UTC datetime for a Julian Date."""
    naive = Time(jd, format='jd', scale=TIME_SCALE).to_datetime()
    return pytz.utc.localize(naive)


def julian_centuries(jd: float) -> float:
    """Julian centuries elapsed since J2000.0."""
    return (jd - J2000_JD) / DAYS_PER_JULIAN_CENTURY
