"""
Static orbital elements table for the planets used by the parallax engine.

Elements are mean J2000.0 values with polynomial secular rates, evaluated as
element(T) = element0 + c0 + c1*T + c2*T^2 with T in Julian centuries.
The table is read-only once built.
"""

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, List, Any

from ..config import (
    ORBITAL_ELEMENTS,
    ANGULAR_ELEMENTS,
    MIN_ECCENTRICITY,
    MAX_ECCENTRICITY_EXCLUSIVE
)
from ..exceptions import UnknownBodyError, InvalidOrbitalElementsError

logger = logging.getLogger(__name__)

ELEMENT_NAMES = (
    'semi_major_axis',
    'eccentricity',
    'inclination',
    'mean_longitude',
    'longitude_of_perihelion',
    'longitude_of_ascending_node',
)

Coefficients = Tuple[float, float, float]


@dataclass(frozen=True)
class OrbitalElements:
    """Keplerian elements of a heliocentric orbit (angles in radians)."""
    semi_major_axis_au: float
    eccentricity: float
    inclination_rad: float
    mean_longitude_rad: float
    longitude_of_perihelion_rad: float
    longitude_of_ascending_node_rad: float

    @property
    def mean_anomaly_rad(self) -> float:
        """Mean anomaly M = L - varpi (not wrapped)."""
        return self.mean_longitude_rad - self.longitude_of_perihelion_rad

    @property
    def argument_of_perihelion_rad(self) -> float:
        """Argument of perihelion omega = varpi - Omega."""
        return self.longitude_of_perihelion_rad - self.longitude_of_ascending_node_rad


@dataclass(frozen=True)
class SecularRates:
    """Polynomial rate coefficients (c0, c1, c2) for each element, in element units."""
    semi_major_axis: Coefficients = (0.0, 0.0, 0.0)
    eccentricity: Coefficients = (0.0, 0.0, 0.0)
    inclination: Coefficients = (0.0, 0.0, 0.0)
    mean_longitude: Coefficients = (0.0, 0.0, 0.0)
    longitude_of_perihelion: Coefficients = (0.0, 0.0, 0.0)
    longitude_of_ascending_node: Coefficients = (0.0, 0.0, 0.0)


def _evaluate(value: float, coefficients: Coefficients, T: float) -> float:
    c0, c1, c2 = coefficients
    return value + c0 + c1 * T + c2 * T * T


@dataclass(frozen=True)
class BodyElements:
    """Epoch elements and secular rates for a single body."""
    body: str
    elements: OrbitalElements
    rates: SecularRates

    def elements_at(self, T: float) -> OrbitalElements:
        """
        Evaluates every element as a quadratic polynomial in T.

        Args:
            T: Julian centuries since J2000.0.

        Returns:
            OrbitalElements valid at T.

        Raises:
            InvalidOrbitalElementsError: If the evaluated eccentricity leaves [0, 1)
                or the semi-major axis is not positive.
        """
        el = self.elements
        rates = self.rates
        evaluated = OrbitalElements(
            semi_major_axis_au=_evaluate(el.semi_major_axis_au, rates.semi_major_axis, T),
            eccentricity=_evaluate(el.eccentricity, rates.eccentricity, T),
            inclination_rad=_evaluate(el.inclination_rad, rates.inclination, T),
            mean_longitude_rad=_evaluate(el.mean_longitude_rad, rates.mean_longitude, T),
            longitude_of_perihelion_rad=_evaluate(el.longitude_of_perihelion_rad,
                                                  rates.longitude_of_perihelion, T),
            longitude_of_ascending_node_rad=_evaluate(el.longitude_of_ascending_node_rad,
                                                      rates.longitude_of_ascending_node, T),
        )
        _validate_elements(self.body, evaluated)
        return evaluated


def _validate_elements(body: str, elements: OrbitalElements) -> None:
    e = elements.eccentricity
    if not (MIN_ECCENTRICITY <= e < MAX_ECCENTRICITY_EXCLUSIVE):
        raise InvalidOrbitalElementsError(
            f"Eccentricity {e:.8f} for '{body}' outside elliptical range "
            f"[{MIN_ECCENTRICITY}, {MAX_ECCENTRICITY_EXCLUSIVE})"
        )
    if not elements.semi_major_axis_au > 0:
        raise InvalidOrbitalElementsError(
            f"Semi-major axis {elements.semi_major_axis_au} AU for '{body}' must be positive"
        )


def _body_from_config(body: str, entry: Mapping[str, Any]) -> BodyElements:
    try:
        raw_elements = entry['elements']
        raw_rates = entry.get('rates', {})
        values = {name: float(raw_elements[name]) for name in ELEMENT_NAMES}
    except KeyError as exc:
        raise InvalidOrbitalElementsError(f"Missing orbital element for '{body}': {exc}") from exc

    rates: Dict[str, Coefficients] = {}
    for name in ELEMENT_NAMES:
        coefficients = tuple(float(c) for c in raw_rates.get(name, (0.0, 0.0, 0.0)))
        if len(coefficients) != 3:
            raise InvalidOrbitalElementsError(
                f"Rate for '{name}' of '{body}' needs 3 coefficients, got {len(coefficients)}"
            )
        if name in ANGULAR_ELEMENTS:
            values[name] = math.radians(values[name])
            coefficients = tuple(math.radians(c) for c in coefficients)
        rates[name] = coefficients

    elements = OrbitalElements(
        semi_major_axis_au=values['semi_major_axis'],
        eccentricity=values['eccentricity'],
        inclination_rad=values['inclination'],
        mean_longitude_rad=values['mean_longitude'],
        longitude_of_perihelion_rad=values['longitude_of_perihelion'],
        longitude_of_ascending_node_rad=values['longitude_of_ascending_node'],
    )
    _validate_elements(body, elements)
    return BodyElements(body=body, elements=elements, rates=SecularRates(**rates))


class OrbitalElementsTable:
    """
    Read-only store mapping body name to its epoch elements and secular rates.

    Body names are case-insensitive. Angular values in the source mapping are
    in degrees and are converted to radians once, at construction.
    """

    def __init__(self, source: Optional[Mapping[str, Mapping[str, Any]]] = None):
        source = ORBITAL_ELEMENTS if source is None else source
        bodies = {name.lower(): _body_from_config(name.lower(), entry) for name, entry in source.items()}
        self._bodies: Mapping[str, BodyElements] = MappingProxyType(bodies)
        logger.debug(f"Orbital elements table loaded for: {', '.join(sorted(bodies))}")

    def get(self, body: str) -> BodyElements:
        """
        Returns the elements entry for a body.

        Raises:
            UnknownBodyError: If the body is not in the table.
        """
        try:
            return self._bodies[body.lower()]
        except (KeyError, AttributeError):
            raise UnknownBodyError(
                f"Unknown body '{body}'. Supported bodies: {', '.join(self.bodies())}"
            ) from None

    def bodies(self) -> List[str]:
        return sorted(self._bodies)

    def __contains__(self, body: object) -> bool:
        return isinstance(body, str) and body.lower() in self._bodies

    def __len__(self) -> int:
        return len(self._bodies)
