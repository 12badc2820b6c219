# tests/test_analyzer_precision.py
import pytest

from venusparallax.analyzer.precision import PrecisionMode, PrecisionPolicy
from venusparallax.exceptions import ConfigurationError


@pytest.mark.parametrize("mode,tolerance", [
    ('standard', 0.10),
    ('high', 0.05),
    ('ultra', 0.01),
])
def test_tolerances(mode, tolerance):
    assert PrecisionPolicy(mode).tolerance() == tolerance


def test_default_mode_is_high():
    assert PrecisionPolicy().mode is PrecisionMode.HIGH


def test_is_within_tolerance():
    policy = PrecisionPolicy('high')
    assert policy.is_within_tolerance(0.03)
    assert policy.is_within_tolerance(-0.03)
    assert policy.is_within_tolerance(0.05)
    assert not policy.is_within_tolerance(0.06)
    assert not policy.is_within_tolerance(0.03, mode='ultra')


def test_set_mode():
    policy = PrecisionPolicy()
    policy.set_mode(PrecisionMode.ULTRA)
    assert policy.tolerance() == 0.01
    assert not policy.is_within_tolerance(0.02)


def test_parse_is_case_insensitive():
    assert PrecisionMode.parse(' Ultra ') is PrecisionMode.ULTRA
    assert PrecisionMode.parse(PrecisionMode.STANDARD) is PrecisionMode.STANDARD


def test_unknown_mode():
    with pytest.raises(ConfigurationError, match="Unknown precision mode 'extreme'"):
        PrecisionPolicy('extreme')


def test_levels():
    policy = PrecisionPolicy()
    ultra = policy.level('ultra')
    assert ultra.angular_arcsec == 0.001
    assert ultra.temporal_seconds == 1.0
    assert ultra.tolerance == 0.01

    high = policy.level()
    assert high.mode is PrecisionMode.HIGH
    assert high.angular_arcsec == 0.01
    assert high.temporal_seconds == 60.0
