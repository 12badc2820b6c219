"""
Great-circle geometry on a spherical Earth.

Functions:
    distance: Haversine great-circle distance between two sites (km)
    observer_vector: Earth-centred Cartesian position of a site (km)
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from ..config import (
    EARTH_MEAN_RADIUS_KM,
    MIN_LATITUDE_DEG,
    MAX_LATITUDE_DEG,
    MIN_LONGITUDE_DEG,
    MAX_LONGITUDE_DEG
)
from ..exceptions import InputValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeodeticLocation:
    """
    A point on the Earth's surface.

    Args:
        latitude_deg: Latitude in decimal degrees (+N, -S), within [-90, 90].
        longitude_deg: Longitude in decimal degrees (+E, -W), within [-180, 180].
        elevation_m: Height above sea level in meters (informational only).

    Raises:
        InputValidationError: If latitude or longitude is outside its range.
    """
    latitude_deg: float
    longitude_deg: float
    elevation_m: float = 0.0

    def __post_init__(self):
        if not (MIN_LATITUDE_DEG <= self.latitude_deg <= MAX_LATITUDE_DEG):
            raise InputValidationError(
                f"Latitude {self.latitude_deg}° outside valid range [{MIN_LATITUDE_DEG}°, {MAX_LATITUDE_DEG}°]"
            )
        if not (MIN_LONGITUDE_DEG <= self.longitude_deg <= MAX_LONGITUDE_DEG):
            raise InputValidationError(
                f"Longitude {self.longitude_deg}° outside valid range [{MIN_LONGITUDE_DEG}°, {MAX_LONGITUDE_DEG}°]"
            )
        if not math.isfinite(self.elevation_m):
            raise InputValidationError(f"Elevation {self.elevation_m} m is not finite")


def distance(loc_a: GeodeticLocation, loc_b: GeodeticLocation,
             radius_km: float = EARTH_MEAN_RADIUS_KM) -> float:
    """
    Great-circle distance between two locations using the haversine formula.

    Args:
        loc_a: First location.
        loc_b: Second location.
        radius_km: Sphere radius (defaults to the IUGG mean Earth radius).

    Returns:
        Surface distance in km. Symmetric in its arguments, 0.0 for identical points.

    Notes:
        The haversine term is clamped into [0, 1] before the square roots so
        that rounding near antipodal points cannot produce NaN.
    """
    phi_1 = math.radians(loc_a.latitude_deg)
    phi_2 = math.radians(loc_b.latitude_deg)
    delta_phi = math.radians(loc_b.latitude_deg - loc_a.latitude_deg)
    delta_lambda = math.radians(loc_b.longitude_deg - loc_a.longitude_deg)

    h = (math.sin(delta_phi / 2) ** 2 +
         math.cos(phi_1) * math.cos(phi_2) * math.sin(delta_lambda / 2) ** 2)
    h = min(max(h, 0.0), 1.0)

    central_angle = 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))
    return radius_km * central_angle


def observer_vector(location: GeodeticLocation, radius_km: float = EARTH_MEAN_RADIUS_KM) -> np.ndarray:
    """Earth-centred, Earth-fixed Cartesian position of a site on the sphere (km)."""
    phi = math.radians(location.latitude_deg)
    lam = math.radians(location.longitude_deg)
    return np.array([
        radius_km * math.cos(phi) * math.cos(lam),
        radius_km * math.cos(phi) * math.sin(lam),
        radius_km * math.sin(phi),
    ])
