# tests/test_analyzer_engine.py
import math
from datetime import datetime
from unittest.mock import MagicMock

import numpy as np
import pytest
import pytz

from venusparallax.analyzer.engine import (
    ParallaxEngine,
    ParallaxResult,
    au_from_parallax,
    parallax_from_au,
    default_uncertainty,
    summarize,
    build_engine
)
from venusparallax.analyzer.history import CalculationHistory
from venusparallax.analyzer.precision import PrecisionLevel
from venusparallax.config import AU_KM
from venusparallax.data.historical import ObservationSite, historical_sites, transit_event
from venusparallax.exceptions import (
    InsufficientObservationsError,
    InputValidationError,
    UnknownTransitYearError
)
from venusparallax.physics.geodesy import GeodeticLocation
from venusparallax.physics.positions import PositionCalculator, RotationModel

REFERENCE_1761 = datetime(1761, 6, 6, 5, 30, tzinfo=pytz.utc)


@pytest.fixture
def engine():
    return build_engine()


@pytest.fixture
def sites_1761():
    return {site.id: site for site in historical_sites(1761)}


class TestAuParallaxConversions:

    @pytest.mark.parametrize("baseline_km", [1.0, 1546.0, 12742.0])
    def test_inverse_consistency(self, baseline_km):
        angle = parallax_from_au(baseline_km, AU_KM)
        assert np.isclose(au_from_parallax(baseline_km, angle), AU_KM, rtol=1e-12)

    @pytest.mark.parametrize("angle", [1e-6, 4.26e-5, 0.3])
    def test_angle_round_trip(self, angle):
        au_km = au_from_parallax(2000.0, angle)
        assert np.isclose(parallax_from_au(2000.0, au_km), angle, rtol=1e-12)

    def test_small_angle(self):
        angle = parallax_from_au(12742.0)
        assert np.isclose(angle, 12742.0 / AU_KM, rtol=1e-9)

    @pytest.mark.parametrize("baseline_km,angle", [
        (0.0, 1e-5),
        (-5.0, 1e-5),
        (100.0, 0.0),
        (100.0, math.pi / 2),
    ])
    def test_invalid_inputs(self, baseline_km, angle):
        with pytest.raises(InputValidationError):
            au_from_parallax(baseline_km, angle)

    def test_invalid_distance(self):
        with pytest.raises(InputValidationError, match="Distance must be positive"):
            parallax_from_au(100.0, 0.0)


def test_default_uncertainty():
    uncertainty = default_uncertainty()
    assert uncertainty.time_sec == 120.0
    assert uncertainty.angular_arcsec == 0.5
    assert uncertainty.distance_m == 1000.0
    assert np.isclose(uncertainty.combined, 1.000555, atol=1e-5)


class TestComputeParallax:

    def test_stockholm_paris(self, engine, sites_1761):
        result = engine.compute_parallax(sites_1761['stockholm_1761'], sites_1761['paris_1761'], REFERENCE_1761)

        assert isinstance(result, ParallaxResult)
        assert result.baseline_km == pytest.approx(1546.0, abs=20.0)
        assert result.reference_au_km == AU_KM
        assert np.isclose(result.parallax_angle_rad, result.baseline_km / result.earth_sun_distance_km)
        assert np.isclose(result.parallax_angle_arcsec, math.degrees(result.parallax_angle_rad) * 3600.0)
        assert 0.0 < result.parallax_angle_rad < math.pi / 2
        assert 0.0 < result.error_percent < 2.0
        assert math.isfinite(result.calculated_au_km) and result.calculated_au_km > 0
        assert result.precision_mode == 'high'
        assert result.julian_date == pytest.approx(2364408.729167, abs=1e-6)
        assert len(engine.history) == 1
        assert engine.history.latest() is result

    def test_error_matches_definition(self, engine, sites_1761):
        result = engine.compute_parallax(sites_1761['paris_1761'], sites_1761['cape_town_1761'], REFERENCE_1761)
        expected = abs(result.calculated_au_km - AU_KM) / AU_KM * 100.0
        assert result.error_percent == pytest.approx(expected)

    def test_naive_datetime_taken_as_utc(self, engine, sites_1761):
        result = engine.compute_parallax(sites_1761['stockholm_1761'], sites_1761['paris_1761'],
                                         datetime(1761, 6, 6, 5, 30))
        assert result.when == REFERENCE_1761

    def test_precision_mode_override(self, engine, sites_1761):
        result = engine.compute_parallax(sites_1761['stockholm_1761'], sites_1761['paris_1761'],
                                         REFERENCE_1761, precision_mode='ultra')
        assert result.precision_mode == 'ultra'
        assert engine.policy.mode.value == 'high'

    def test_missing_site(self, engine, sites_1761):
        with pytest.raises(InsufficientObservationsError, match="Two observation sites"):
            engine.compute_parallax(sites_1761['paris_1761'], None, REFERENCE_1761)
        assert len(engine.history) == 0

    def test_same_site(self, engine, sites_1761):
        paris = sites_1761['paris_1761']
        with pytest.raises(InsufficientObservationsError, match="distinct"):
            engine.compute_parallax(paris, paris, REFERENCE_1761)

    def test_zero_baseline(self, engine, sites_1761):
        paris = sites_1761['paris_1761']
        twin = ObservationSite(id='paris_twin', name='Paris twin', location=paris.location)
        with pytest.raises(InsufficientObservationsError, match="baseline is zero"):
            engine.compute_parallax(paris, twin, REFERENCE_1761)

    def test_observer_notified(self, engine, sites_1761):
        observer = MagicMock()
        engine.history.subscribe(observer)
        result = engine.compute_parallax(sites_1761['stockholm_1761'], sites_1761['paris_1761'], REFERENCE_1761)
        observer.on_parallax_computed.assert_called_once_with(result)

    def test_failing_observer_does_not_break_calculation(self, engine, sites_1761):
        observer = MagicMock()
        observer.on_parallax_computed.side_effect = RuntimeError("display gone")
        engine.history.subscribe(observer)

        result = engine.compute_parallax(sites_1761['stockholm_1761'], sites_1761['paris_1761'], REFERENCE_1761)
        assert engine.history.latest() is result

        report = engine.historical_parallax(1761)
        assert len(report.results) == 3
        assert len(engine.history) == 4

    @pytest.mark.parametrize("bad_site", [{'id': 'paris'}, GeodeticLocation(48.8566, 2.3522), 'paris_1761'])
    def test_invalid_site_type(self, engine, sites_1761, bad_site):
        with pytest.raises(InsufficientObservationsError, match="ObservationSite"):
            engine.compute_parallax(sites_1761['stockholm_1761'], bad_site, REFERENCE_1761)
        with pytest.raises(InsufficientObservationsError, match="ObservationSite"):
            engine.compute_parallax(bad_site, sites_1761['stockholm_1761'], REFERENCE_1761)
        assert len(engine.history) == 0

    def test_as_dict(self, engine, sites_1761):
        result = engine.compute_parallax(sites_1761['stockholm_1761'], sites_1761['paris_1761'], REFERENCE_1761)
        row = result.as_dict()
        assert row['site_a'] == 'stockholm_1761'
        assert row['site_b'] == 'paris_1761'
        assert row['error_percent'] == result.error_percent
        assert row['combined_uncertainty'] == result.uncertainty.combined


class TestHistoricalParallax:

    def test_1761(self, engine):
        report = engine.historical_parallax(1761)

        assert report.year == 1761
        assert len(report.results) == 3
        assert report.best_result.error_percent == min(r.error_percent for r in report.results)
        assert report.summary.sample_count == 3
        assert len(engine.history) == 3

        au_values = [r.calculated_au_km for r in report.results]
        assert report.summary.mean_au_km == pytest.approx(np.mean(au_values))
        assert report.summary.std_au_km == pytest.approx(np.std(au_values))
        assert all(r.when == transit_event(1761).reference_time for r in report.results)

    def test_1769(self, engine):
        report = engine.historical_parallax(1769)
        pairs = {frozenset((r.site_a.id, r.site_b.id)) for r in report.results}
        assert pairs == {
            frozenset(('tahiti_1769', 'hudson_bay_1769')),
            frozenset(('tahiti_1769', 'vienna_1769')),
            frozenset(('hudson_bay_1769', 'vienna_1769')),
        }
        assert report.summary.max_error_percent < 2.0

    def test_unknown_year(self, engine):
        with pytest.raises(UnknownTransitYearError):
            engine.historical_parallax(1874)


def test_summarize_empty():
    with pytest.raises(InsufficientObservationsError):
        summarize([])


class TestSiteSelection:

    def test_find_best_pair(self, engine):
        site_a, site_b = engine.find_best_pair(historical_sites(1761))
        assert {site_a.id, site_b.id} == {'stockholm_1761', 'cape_town_1761'}

    def test_find_best_pair_needs_two_sites(self, engine, sites_1761):
        with pytest.raises(InsufficientObservationsError):
            engine.find_best_pair([sites_1761['paris_1761']])
        with pytest.raises(InsufficientObservationsError):
            engine.find_best_pair([sites_1761['paris_1761'], sites_1761['paris_1761'], None])

    def test_active_sites_during_transit(self, engine):
        active = engine.active_sites(datetime(1761, 6, 6, 5, 0, tzinfo=pytz.utc))
        assert [site.id for site in active] == ['stockholm_1761', 'paris_1761', 'cape_town_1761']

    def test_active_sites_outside_transit(self, engine):
        assert engine.active_sites(datetime(1761, 6, 6, 10, 0, tzinfo=pytz.utc)) == []
        assert engine.active_sites(datetime(1769, 6, 3, 5, 0), year=1761) == []

    def test_update_for_time(self, engine):
        result = engine.update_for_time(datetime(1769, 6, 3, 4, 0, tzinfo=pytz.utc))
        assert result is not None
        assert {result.site_a.id, result.site_b.id} == set(
            s.id for s in engine.find_best_pair(historical_sites(1769)))
        assert len(engine.history) == 1

    def test_update_for_time_without_transit(self, engine):
        assert engine.update_for_time(datetime(2000, 1, 1, tzinfo=pytz.utc)) is None
        assert len(engine.history) == 0


class TestEngineState:

    def test_validate_measurement(self, engine):
        assert engine.validate_measurement(0.03)
        engine.set_precision_mode('ultra')
        assert not engine.validate_measurement(0.03)
        assert engine.validate_measurement(0.03, precision_mode='standard')

    def test_status(self, engine):
        status = engine.status()
        assert status['precision_mode'] == 'high'
        assert status['rotation_model'] == 'inclination_only'
        assert status['calculation_count'] == 0
        assert status['last_result'] is None
        assert isinstance(status['precision_level'], PrecisionLevel)

        engine.historical_parallax(1761)
        status = engine.status()
        assert status['calculation_count'] == 3
        assert status['last_result'] is engine.history.latest()

    def test_injected_collaborators(self):
        history = CalculationHistory()
        engine = ParallaxEngine(PositionCalculator(rotation_model=RotationModel.FULL), history)
        engine.historical_parallax(1769)
        assert len(history) == 3
        assert engine.status()['rotation_model'] == 'full'


def test_transit_events(engine):
    events = engine.transit_events(1761)
    assert [e.contact for e in events] == ['first', 'second', 'third', 'fourth']
    assert all(0.0 <= e.angular_separation_rad <= math.pi for e in events)
    assert all(0.2 < e.earth_venus_distance_au < 1.8 for e in events)
    assert events[0].julian_date < events[-1].julian_date
    assert len(engine.history) == 0
