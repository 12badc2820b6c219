# tests/test_utils_timescales.py
from datetime import datetime

import pytest
import pytz

from venusparallax.config import J2000_JD
from venusparallax.utils.timescales import (
    ensure_utc,
    julian_date,
    julian_date_to_datetime,
    julian_centuries
)


def test_j2000_epoch():
    assert julian_date(datetime(2000, 1, 1, 12, 0)) == pytest.approx(J2000_JD, abs=1e-9)


def test_aware_datetime_converted_to_utc():
    eastern = pytz.timezone('US/Eastern').localize(datetime(2000, 1, 1, 7, 0))
    assert julian_date(eastern) == pytest.approx(J2000_JD, abs=1e-9)


def test_historical_date():
    """1761-06-06 05:30 UTC (proleptic Gregorian)."""
    assert julian_date(datetime(1761, 6, 6, 5, 30, tzinfo=pytz.utc)) == pytest.approx(2364408.729167, abs=1e-6)


def test_julian_centuries():
    assert julian_centuries(J2000_JD) == 0.0
    assert julian_centuries(J2000_JD + 36525.0) == pytest.approx(1.0)
    assert julian_centuries(J2000_JD - 36525.0 / 2) == pytest.approx(-0.5)


def test_julian_date_to_datetime():
    when = julian_date_to_datetime(J2000_JD)
    assert when.tzinfo is not None
    assert abs((when - datetime(2000, 1, 1, 12, tzinfo=pytz.utc)).total_seconds()) < 1e-3


class TestEnsureUtc:

    def test_naive_is_utc(self):
        result = ensure_utc(datetime(1769, 6, 3, 5, 30))
        assert result == datetime(1769, 6, 3, 5, 30, tzinfo=pytz.utc)
        assert result.utcoffset().total_seconds() == 0

    def test_naive_in_named_timezone(self):
        result = ensure_utc(datetime(2020, 7, 1, 12, 0), timezone='Europe/Stockholm')
        assert result.hour == 10

    def test_rejects_non_datetime(self):
        with pytest.raises(TypeError, match="Expected a datetime"):
            ensure_utc("2000-01-01")
