"""
Heliocentric planetary positions from mean orbital elements.

This module combines the orbital elements table and the Kepler solver to
produce Cartesian positions (AU) in the heliocentric ecliptic frame.

Classes:
    RotationModel: Orbital-plane to ecliptic conversion variants
    CelestialPosition: Immutable position of a body at a Julian Date
    TransitGeometry: Venus-Sun geometry as seen from Earth
    PositionCalculator: Stateless position service

Dependencies:
    numpy: Rotation matrices and vector algebra
    logging: Convergence warnings
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Union

import numpy as np

from .elements import OrbitalElementsTable, OrbitalElements
from .kepler import solve_kepler, normalize_angle
from ..config import (
    SUN_BODY_NAME,
    EARTH_BODY_NAME,
    VENUS_BODY_NAME,
    DEFAULT_KEPLER_TOLERANCE,
    DEFAULT_KEPLER_MAX_ITERATIONS,
    DEFAULT_ROTATION_MODEL,
    AU_KM,
    SOLAR_RADIUS_KM
)
from ..exceptions import UnknownBodyError, InputValidationError
from ..utils.timescales import julian_centuries
from ..utils.validation import ensure_finite

logger = logging.getLogger(__name__)


class RotationModel(Enum):
    """How orbital-plane coordinates are rotated into the ecliptic frame.

    INCLINATION_ONLY tilts the orbital plane about its x axis by i and leaves
    the x axis pointing at perihelion. FULL applies the complete
    Rz(Omega) Rx(i) Rz(omega) rotation.
    """
    INCLINATION_ONLY = "inclination_only"
    FULL = "full"


@dataclass(frozen=True)
class CelestialPosition:
    """Heliocentric ecliptic position of a body, in AU."""
    body: str
    julian_date: float
    x: float
    y: float
    z: float

    @property
    def vector(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])

    @property
    def distance_au(self) -> float:
        """Heliocentric distance."""
        return float(np.linalg.norm(self.vector))

    def distance_to(self, other: "CelestialPosition") -> float:
        """Distance to another position, in AU."""
        return float(np.linalg.norm(self.vector - other.vector))


@dataclass(frozen=True)
class TransitGeometry:
    """Venus relative to the solar disk, seen from the Earth's centre."""
    julian_date: float
    angular_separation_rad: float
    solar_angular_radius_rad: float
    earth_venus_distance_au: float
    is_transiting: bool
    transit_depth: float


def _rotation_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1.0, 0.0, 0.0],
                     [0.0, c, -s],
                     [0.0, s, c]])


def _rotation_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0],
                     [s, c, 0.0],
                     [0.0, 0.0, 1.0]])


def orbital_to_ecliptic(x_orb: float, y_orb: float, elements: OrbitalElements,
                        model: RotationModel = RotationModel.INCLINATION_ONLY) -> np.ndarray:
    """
    Rotates orbital-plane coordinates into the heliocentric ecliptic frame.

    Args:
        x_orb: Coordinate along the perihelion direction (AU).
        y_orb: In-plane coordinate 90 degrees ahead of perihelion (AU).
        elements: Elements supplying i, Omega and omega.
        model: Rotation model to apply.

    Returns:
        Array [X, Y, Z] in AU.
    """
    r_orb = np.array([x_orb, y_orb, 0.0])
    if model is RotationModel.FULL:
        rotation = (_rotation_z(elements.longitude_of_ascending_node_rad)
                    @ _rotation_x(elements.inclination_rad)
                    @ _rotation_z(elements.argument_of_perihelion_rad))
    else:
        rotation = _rotation_x(elements.inclination_rad)
    return rotation @ r_orb


class PositionCalculator:
    """
    Computes heliocentric Cartesian positions of the tabulated planets.

    The calculator holds no mutable state: identical inputs always give
    identical outputs and nothing is cached between calls.
    """

    def __init__(self,
                 table: Optional[OrbitalElementsTable] = None,
                 rotation_model: Union[RotationModel, str] = DEFAULT_ROTATION_MODEL,
                 kepler_tolerance: float = DEFAULT_KEPLER_TOLERANCE,
                 kepler_max_iterations: int = DEFAULT_KEPLER_MAX_ITERATIONS):
        """
        Args:
            table: Orbital elements table (the default table if None).
            rotation_model: RotationModel or its string value.
            kepler_tolerance: Tolerance passed to the Kepler solver.
            kepler_max_iterations: Iteration cap passed to the Kepler solver.
        """
        self.table = table if table is not None else OrbitalElementsTable()
        self.rotation_model = RotationModel(rotation_model)
        self.kepler_tolerance = kepler_tolerance
        self.kepler_max_iterations = kepler_max_iterations

    @staticmethod
    def _normalize_body(body: str) -> str:
        if not isinstance(body, str) or not body.strip():
            raise UnknownBodyError(f"Invalid body identifier: {body!r}")
        return body.strip().lower()

    def position(self, body: str, julian_date: float) -> CelestialPosition:
        """
        Heliocentric ecliptic position of ``body`` at ``julian_date``.

        Steps: evaluate the elements at T, wrap M = L - varpi into [0, 2*pi),
        solve Kepler's equation, form the orbital-plane coordinates and rotate
        them into the ecliptic frame. The Sun is the origin.

        Raises:
            UnknownBodyError: If the body is not tabulated.
            InvalidOrbitalElementsError: If the evaluated elements are not elliptical.
            NumericalInstabilityError: If the arithmetic yields NaN or infinity.
        """
        return self._position(self._normalize_body(body), julian_date, self.rotation_model)

    def _position(self, name: str, julian_date: float, model: RotationModel) -> CelestialPosition:
        ensure_finite('julian_date', julian_date)

        if name == SUN_BODY_NAME:
            return CelestialPosition(SUN_BODY_NAME, float(julian_date), 0.0, 0.0, 0.0)

        entry = self.table.get(name)
        elements = entry.elements_at(julian_centuries(julian_date))

        a = elements.semi_major_axis_au
        e = elements.eccentricity
        M = normalize_angle(elements.mean_anomaly_rad)

        solution = solve_kepler(M, e, tol=self.kepler_tolerance, max_iter=self.kepler_max_iterations)
        if not solution.converged:
            logger.warning(f"Using non-converged eccentric anomaly for {name} at JD {julian_date:.5f}")
        E = solution.eccentric_anomaly

        x_orb = a * (math.cos(E) - e)
        y_orb = a * math.sqrt(1.0 - e * e) * math.sin(E)

        X, Y, Z = ensure_finite(f"{name} position", orbital_to_ecliptic(x_orb, y_orb, elements, model))

        logger.debug(f"{name} at JD {julian_date:.5f}: M={M:.6f} E={E:.6f} "
                     f"({solution.iterations} iterations) -> ({X:.8f}, {Y:.8f}, {Z:.8f}) AU")
        return CelestialPosition(name, float(julian_date), float(X), float(Y), float(Z))

    def positions(self, bodies: Iterable[str], julian_date: float) -> Dict[str, CelestialPosition]:
        """Positions of several bodies at the same instant, keyed by lower-case name."""
        return {self._normalize_body(body): self.position(body, julian_date) for body in bodies}

    def ecliptic_longitude(self, body: str, julian_date: float) -> float:
        """
        Heliocentric ecliptic longitude (radians, [0, 2*pi)) of a body.

        In the inclination-only frame the x axis points at perihelion, so the
        longitude of perihelion is added back to the in-plane angle.

        Raises:
            InputValidationError: For the Sun, whose longitude is undefined.
        """
        name = self._normalize_body(body)
        if name == SUN_BODY_NAME:
            raise InputValidationError("Heliocentric longitude of the Sun is undefined")

        pos = self.position(name, julian_date)
        longitude = math.atan2(pos.y, pos.x)
        if self.rotation_model is RotationModel.INCLINATION_ONLY:
            elements = self.table.get(name).elements_at(julian_centuries(julian_date))
            longitude += elements.longitude_of_perihelion_rad
        return normalize_angle(longitude)

    def transit_geometry(self, julian_date: float) -> TransitGeometry:
        """
        Angular separation between Venus and the Sun's centre seen from Earth.

        The cosine ratio is clamped into [-1, 1] before acos. The solar angular
        radius is computed from the instantaneous Earth-Sun distance.

        Positions are always taken in the FULL frame: inclination-only
        coordinates of different planets do not share an x axis, so vectors
        between them are meaningless in that model.
        """
        earth = self._position(EARTH_BODY_NAME, julian_date, RotationModel.FULL)
        venus = self._position(VENUS_BODY_NAME, julian_date, RotationModel.FULL)
        sun = self._position(SUN_BODY_NAME, julian_date, RotationModel.FULL)

        to_venus = venus.vector - earth.vector
        to_sun = sun.vector - earth.vector
        cos_sep = np.dot(to_venus, to_sun) / (np.linalg.norm(to_venus) * np.linalg.norm(to_sun))
        cos_sep = float(np.clip(cos_sep, -1.0, 1.0))
        separation = math.acos(cos_sep)

        solar_radius = math.atan(SOLAR_RADIUS_KM / (earth.distance_to(sun) * AU_KM))
        is_transiting = separation < solar_radius
        depth = 1.0 - separation / solar_radius if is_transiting else 0.0

        return TransitGeometry(
            julian_date=float(julian_date),
            angular_separation_rad=ensure_finite('angular separation', separation),
            solar_angular_radius_rad=solar_radius,
            earth_venus_distance_au=earth.distance_to(venus),
            is_transiting=is_transiting,
            transit_depth=depth
        )
