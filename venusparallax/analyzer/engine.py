"""
Parallax Engine for Transit-of-Venus Triangulation.

This module derives the astronomical unit from pairs of observation sites:
the geodesic baseline between the sites and the Earth-Sun distance at the
observation time give a parallax angle, which is inverted back into an AU
estimate and compared with the accepted value. It is completely independent
of CLI concerns.
"""

import itertools
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pytz

from ..config import (
    AU_KM,
    ARCSEC_PER_DEGREE,
    SECONDS_PER_HOUR,
    METERS_PER_KM,
    EARTH_BODY_NAME,
    SUN_BODY_NAME,
    PARALLAX_CALCULATION_METHOD,
    TIMING_UNCERTAINTY_SECONDS,
    ANGULAR_UNCERTAINTY_ARCSEC,
    BASELINE_UNCERTAINTY_METERS,
    DEFAULT_PRECISION_MODE,
    DEFAULT_ROTATION_MODEL
)
from ..data.historical import (
    ObservationSite,
    TransitEvent,
    available_years,
    historical_sites,
    transit_event
)
from ..exceptions import InsufficientObservationsError, InputValidationError
from ..physics.elements import OrbitalElementsTable
from ..physics.geodesy import distance
from ..physics.positions import PositionCalculator, RotationModel
from ..utils.timescales import ensure_utc, julian_date
from ..utils.validation import ensure_finite
from .history import CalculationHistory
from .precision import PrecisionMode, PrecisionPolicy, PrecisionLevel

log = logging.getLogger(__name__)

ARCSEC_PER_RADIAN = math.degrees(1.0) * ARCSEC_PER_DEGREE


@dataclass(frozen=True)
class Uncertainty:
    """Assumed measurement uncertainties (informational only)."""
    time_sec: float
    angular_arcsec: float
    distance_m: float
    combined: float


@dataclass(frozen=True)
class ParallaxResult:
    """One triangulation of the AU from a pair of sites."""
    site_a: ObservationSite
    site_b: ObservationSite
    when: datetime
    julian_date: float
    baseline_km: float
    earth_sun_distance_km: float
    parallax_angle_rad: float
    parallax_angle_arcsec: float
    calculated_au_km: float
    reference_au_km: float
    error_percent: float
    uncertainty: Uncertainty
    precision_mode: str
    calculation_method: str
    computed_at: datetime

    def as_dict(self) -> Dict[str, Any]:
        """Flat mapping used for tabular reporting."""
        return {
            'site_a': self.site_a.id,
            'site_b': self.site_b.id,
            'when': self.when,
            'julian_date': self.julian_date,
            'baseline_km': self.baseline_km,
            'earth_sun_distance_km': self.earth_sun_distance_km,
            'parallax_angle_arcsec': self.parallax_angle_arcsec,
            'calculated_au_km': self.calculated_au_km,
            'reference_au_km': self.reference_au_km,
            'error_percent': self.error_percent,
            'combined_uncertainty': self.uncertainty.combined,
            'precision_mode': self.precision_mode,
            'calculation_method': self.calculation_method,
        }


@dataclass(frozen=True)
class ParallaxSummary:
    mean_au_km: float
    std_au_km: float
    min_error_percent: float
    max_error_percent: float
    sample_count: int


@dataclass(frozen=True)
class HistoricalParallax:
    """Every pairwise triangulation of a historical transit."""
    year: int
    event: TransitEvent
    results: List[ParallaxResult] = field(default_factory=list)
    summary: Optional[ParallaxSummary] = None
    best_result: Optional[ParallaxResult] = None


@dataclass(frozen=True)
class ContactGeometry:
    """Earth-Venus-Sun geometry at one of the four contacts."""
    contact: str
    when: datetime
    julian_date: float
    earth_venus_distance_au: float
    angular_separation_rad: float
    is_transiting: bool


def au_from_parallax(baseline_km: float, parallax_angle_rad: float) -> float:
    """
    Distance (km) subtended by ``baseline_km`` at ``parallax_angle_rad``.

    Raises:
        InputValidationError: If the baseline is not positive or the angle is
            outside (0, pi/2).
    """
    if not baseline_km > 0:
        raise InputValidationError(f"Baseline must be positive, got {baseline_km} km")
    if not 0.0 < parallax_angle_rad < math.pi / 2:
        raise InputValidationError(f"Parallax angle {parallax_angle_rad} rad outside (0, pi/2)")
    return baseline_km / math.tan(parallax_angle_rad)


def parallax_from_au(baseline_km: float, au_km: float = AU_KM) -> float:
    """Parallax angle (radians) of a baseline seen from ``au_km``. Inverse of au_from_parallax."""
    if not baseline_km > 0:
        raise InputValidationError(f"Baseline must be positive, got {baseline_km} km")
    if not au_km > 0:
        raise InputValidationError(f"Distance must be positive, got {au_km} km")
    return math.atan(baseline_km / au_km)


def default_uncertainty() -> Uncertainty:
    """
    Root-sum-square of the timing (hours), angular (degrees) and baseline
    (km) uncertainties.
    """
    combined = math.sqrt(
        (TIMING_UNCERTAINTY_SECONDS / SECONDS_PER_HOUR) ** 2 +
        (ANGULAR_UNCERTAINTY_ARCSEC / ARCSEC_PER_DEGREE) ** 2 +
        (BASELINE_UNCERTAINTY_METERS / METERS_PER_KM) ** 2
    )
    return Uncertainty(
        time_sec=TIMING_UNCERTAINTY_SECONDS,
        angular_arcsec=ANGULAR_UNCERTAINTY_ARCSEC,
        distance_m=BASELINE_UNCERTAINTY_METERS,
        combined=combined
    )


def summarize(results: Sequence[ParallaxResult]) -> ParallaxSummary:
    """Mean and population standard deviation of the AU estimates."""
    if not results:
        raise InsufficientObservationsError("Cannot summarize an empty set of results")
    au_values = np.array([r.calculated_au_km for r in results])
    errors = np.array([r.error_percent for r in results])
    return ParallaxSummary(
        mean_au_km=float(np.mean(au_values)),
        std_au_km=float(np.std(au_values)),
        min_error_percent=float(np.min(errors)),
        max_error_percent=float(np.max(errors)),
        sample_count=len(results)
    )


class ParallaxEngine:
    """
    Triangulates the AU from observation-site pairs.

    Collaborators are injected: the position calculator supplies Earth and Sun
    positions, the history records every result and the precision policy
    judges them.
    """

    def __init__(self,
                 calculator: PositionCalculator,
                 history: Optional[CalculationHistory] = None,
                 policy: Optional[PrecisionPolicy] = None):
        self.calculator = calculator
        self.history = history if history is not None else CalculationHistory()
        self.policy = policy if policy is not None else PrecisionPolicy()

    @staticmethod
    def _check_pair(site_a: Optional[ObservationSite], site_b: Optional[ObservationSite]) -> float:
        if site_a is None or site_b is None:
            raise InsufficientObservationsError("Two observation sites are required")
        for site in (site_a, site_b):
            if not isinstance(site, ObservationSite):
                raise InsufficientObservationsError(
                    f"Expected an ObservationSite, got {type(site).__name__}"
                )
        if site_a.id == site_b.id:
            raise InsufficientObservationsError(f"Sites must be distinct, got '{site_a.id}' twice")

        baseline_km = distance(site_a.location, site_b.location)
        if baseline_km <= 0.0:
            raise InsufficientObservationsError(
                f"Sites '{site_a.id}' and '{site_b.id}' share a location; baseline is zero"
            )
        return baseline_km

    def compute_parallax(self,
                         site_a: Optional[ObservationSite],
                         site_b: Optional[ObservationSite],
                         when: datetime,
                         precision_mode: Union[PrecisionMode, str, None] = None) -> ParallaxResult:
        """
        Triangulates the AU from two sites at one instant and records the result.

        Args:
            site_a: First observation site.
            site_b: Second observation site (distinct id, different location).
            when: Observation time; naive datetimes are taken as UTC.
            precision_mode: Mode recorded with the result (engine mode if None).

        Returns:
            ParallaxResult appended to the engine's history.

        Raises:
            InsufficientObservationsError: If a site is missing, both sites share
                an id, or the baseline is zero.
            NumericalInstabilityError: If any derived value is not finite.
        """
        baseline_km = self._check_pair(site_a, site_b)
        mode = self.policy.mode if precision_mode is None else PrecisionMode.parse(precision_mode)

        when_utc = ensure_utc(when)
        jd = julian_date(when_utc)

        earth = self.calculator.position(EARTH_BODY_NAME, jd)
        sun = self.calculator.position(SUN_BODY_NAME, jd)
        earth_sun_km = ensure_finite('earth-sun distance', earth.distance_to(sun) * AU_KM)

        # Small-angle parallax of the baseline at the Earth-Sun distance
        angle_rad = ensure_finite('parallax angle', baseline_km / earth_sun_km)
        calculated_au_km = ensure_finite('calculated AU', au_from_parallax(baseline_km, angle_rad))
        error_percent = abs(calculated_au_km - AU_KM) / AU_KM * 100.0

        result = ParallaxResult(
            site_a=site_a,
            site_b=site_b,
            when=when_utc,
            julian_date=jd,
            baseline_km=baseline_km,
            earth_sun_distance_km=earth_sun_km,
            parallax_angle_rad=angle_rad,
            parallax_angle_arcsec=angle_rad * ARCSEC_PER_RADIAN,
            calculated_au_km=calculated_au_km,
            reference_au_km=AU_KM,
            error_percent=error_percent,
            uncertainty=default_uncertainty(),
            precision_mode=mode.value,
            calculation_method=PARALLAX_CALCULATION_METHOD,
            computed_at=datetime.now(pytz.utc)
        )

        log.debug(f"{site_a.id} <-> {site_b.id} at JD {jd:.5f}: baseline={baseline_km:.1f} km, "
                  f"parallax={result.parallax_angle_arcsec:.4f}\", AU={calculated_au_km:.1f} km "
                  f"({error_percent:.3f}% error)")

        self.history.append(result)
        return result

    def historical_parallax(self, year: int) -> HistoricalParallax:
        """
        Every pairwise triangulation across a transit year's roster, taken at
        the transit's reference time.

        Raises:
            UnknownTransitYearError: If no roster exists for ``year``.
        """
        event = transit_event(year)
        sites = historical_sites(year)

        results = [self.compute_parallax(a, b, event.reference_time)
                   for a, b in itertools.combinations(sites, 2)]
        summary = summarize(results)
        best = min(results, key=lambda r: r.error_percent)

        log.info(f"{year} transit: {summary.sample_count} pair(s), mean AU {summary.mean_au_km:.1f} km "
                 f"(std {summary.std_au_km:.1f} km), best {best.site_a.id}/{best.site_b.id} "
                 f"at {best.error_percent:.3f}%")
        return HistoricalParallax(year=year, event=event, results=results, summary=summary, best_result=best)

    def find_best_pair(self, sites: Sequence[ObservationSite]) -> Tuple[ObservationSite, ObservationSite]:
        """
        The pair of sites with the longest baseline.

        Raises:
            InsufficientObservationsError: If fewer than two distinct sites are given.
        """
        best_pair = None
        best_baseline = 0.0
        for site_a, site_b in itertools.combinations([s for s in sites if s is not None], 2):
            if site_a.id == site_b.id:
                continue
            baseline_km = distance(site_a.location, site_b.location)
            if baseline_km > best_baseline:
                best_pair, best_baseline = (site_a, site_b), baseline_km

        if best_pair is None:
            raise InsufficientObservationsError("At least two distinct, separated sites are required")
        return best_pair

    def active_sites(self, when: datetime, year: Optional[int] = None) -> List[ObservationSite]:
        """Roster sites whose contact window (first to fourth contact) contains ``when``."""
        when_utc = ensure_utc(when)
        years = [year] if year is not None else available_years()
        return [site
                for y in years
                for site in historical_sites(y)
                if site.contact_times is not None and site.contact_times.contains(when_utc)]

    def update_for_time(self, when: datetime) -> Optional[ParallaxResult]:
        """
        Recomputes the parallax for the current simulation time.

        Returns:
            The longest-baseline result among the active sites, or None when
            fewer than two sites are observing.
        """
        active = self.active_sites(when)
        if len(active) < 2:
            log.debug(f"{len(active)} active site(s) at {when}; no parallax computed")
            return None
        site_a, site_b = self.find_best_pair(active)
        return self.compute_parallax(site_a, site_b, when)

    def validate_measurement(self, error_fraction: float,
                             precision_mode: Union[PrecisionMode, str, None] = None) -> bool:
        return self.policy.is_within_tolerance(error_fraction, precision_mode)

    def set_precision_mode(self, mode: Union[PrecisionMode, str]) -> None:
        self.policy.set_mode(mode)

    def precision_level(self) -> PrecisionLevel:
        return self.policy.level()

    def status(self) -> Dict[str, Any]:
        """Snapshot of the engine state."""
        return {
            'precision_mode': self.policy.mode.value,
            'rotation_model': self.calculator.rotation_model.value,
            'calculation_count': len(self.history),
            'last_result': self.history.latest(),
            'precision_level': self.policy.level(),
        }

    def transit_events(self, year: int) -> List[ContactGeometry]:
        """
        Earth-Venus geometry at each of the four contacts of a transit.

        Raises:
            UnknownTransitYearError: If no roster exists for ``year``.
        """
        event = transit_event(year)
        geometries = []
        for label, when in zip(('first', 'second', 'third', 'fourth'), event.contacts.as_tuple()):
            geometry = self.calculator.transit_geometry(julian_date(when))
            geometries.append(ContactGeometry(
                contact=label,
                when=when,
                julian_date=geometry.julian_date,
                earth_venus_distance_au=geometry.earth_venus_distance_au,
                angular_separation_rad=geometry.angular_separation_rad,
                is_transiting=geometry.is_transiting
            ))
        return geometries


def build_engine(rotation_model: Union[RotationModel, str] = DEFAULT_ROTATION_MODEL,
                 precision_mode: Union[PrecisionMode, str] = DEFAULT_PRECISION_MODE,
                 table: Optional[OrbitalElementsTable] = None) -> ParallaxEngine:
    """Wires table -> calculator -> engine -> history once."""
    calculator = PositionCalculator(table, rotation_model=rotation_model)
    engine = ParallaxEngine(calculator, CalculationHistory(), PrecisionPolicy(precision_mode))
    log.info(f"Parallax engine ready (rotation={calculator.rotation_model.value}, "
             f"precision={engine.policy.mode.value})")
    return engine
