"""
Keplerian orbital mechanics calculations for heliocentric planetary orbits.

This module implements the numerical solution of Kepler's equation together
with the small set of closed-form relations needed around it.

Functions:
    solve_kepler: Solves Kepler's equation using the Newton-Raphson method
    normalize_angle: Wraps an angle into [0, 2*pi)
    true_anomaly: Converts eccentric anomaly to true anomaly
    orbital_period_days: Kepler's third law for a heliocentric orbit
    synodic_period_days: Synodic period of two orbits

Dependencies:
    numpy: Vectorized numerical operations
    logging: Convergence information and warnings
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Union, Optional

from ..config import (
    DEFAULT_KEPLER_TOLERANCE,
    DEFAULT_KEPLER_MAX_ITERATIONS,
    KEPLER_MIN_DERIVATIVE,
    KEPLER_LOGGING_PRECISION,
    MIN_ECCENTRICITY,
    MAX_ECCENTRICITY_EXCLUSIVE,
    GRAVITATIONAL_CONSTANT,
    SOLAR_MASS_KG,
    AU_KM,
    METERS_PER_KM,
    SECONDS_PER_DAY
)
from ..exceptions import InvalidOrbitalElementsError

# Configure scientific logging
logger = logging.getLogger(__name__)

TWO_PI = 2.0 * np.pi


@dataclass(frozen=True)
class KeplerSolution:
    """Result of a Kepler's equation solve.

    ``eccentric_anomaly`` is a float for scalar input and an ndarray otherwise.
    ``converged`` is True only when every element met the tolerance.
    """
    eccentric_anomaly: Union[float, np.ndarray]
    converged: bool
    iterations: int


def normalize_angle(angle_rad: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """Wraps an angle (radians) into the half-open interval [0, 2*pi)."""
    wrapped = np.mod(angle_rad, TWO_PI)
    if np.isscalar(angle_rad):
        wrapped = float(wrapped)
        # np.mod can round up to exactly 2*pi for tiny negative inputs
        return 0.0 if wrapped >= TWO_PI else wrapped
    return np.where(wrapped >= TWO_PI, 0.0, wrapped)


def _validate_eccentricity(e: float) -> None:
    if not (MIN_ECCENTRICITY <= e < MAX_ECCENTRICITY_EXCLUSIVE) or not np.isfinite(e):
        raise InvalidOrbitalElementsError(
            f"Eccentricity {e} outside elliptical range [{MIN_ECCENTRICITY}, {MAX_ECCENTRICITY_EXCLUSIVE})"
        )


def solve_kepler(M_rad: Union[float, np.ndarray],
                 e: float,
                 tol: Optional[float] = None,
                 max_iter: Optional[int] = None) -> KeplerSolution:
    """
    Solves Kepler's equation (M = E - e*sin(E)) for the Eccentric Anomaly (E)
    using the Newton-Raphson method started from E0 = M.

    Operates on scalars or numpy arrays. Non-convergence is not an error: the
    best estimate is returned with ``converged=False`` and a warning is logged,
    leaving the caller to decide how to treat it.

    Args:
        M_rad: Mean anomaly in radians. Can be a scalar or numpy array.
        e: Eccentricity of the orbit (0 <= e < 1).
        tol: Convergence threshold on the Newton step |delta E|.
             Uses DEFAULT_KEPLER_TOLERANCE if None.
        max_iter: Maximum number of iterations. Uses DEFAULT_KEPLER_MAX_ITERATIONS if None.

    Returns:
        KeplerSolution with the eccentric anomaly (same shape as M_rad),
        the convergence flag and the number of iterations performed.

    Raises:
        InvalidOrbitalElementsError: If eccentricity is outside [0, 1).

    Notes:
        - The derivative 1 - e*cos(E) is bounded below by 1 - e > 0 for
          elliptical orbits; it is still clamped to KEPLER_MIN_DERIVATIVE so
          that a pathological input cannot divide by zero.
        - Convergence additionally requires the final residual
          |E - e*sin(E) - M| to be below the tolerance.
    """
    tol = tol if tol is not None else DEFAULT_KEPLER_TOLERANCE
    max_iter = max_iter if max_iter is not None else DEFAULT_KEPLER_MAX_ITERATIONS

    _validate_eccentricity(e)

    input_is_scalar = np.isscalar(M_rad)

    M = np.asarray(M_rad, dtype=float)
    original_shape = M.shape
    M = M.flatten()

    E = M.copy()
    converged = np.zeros(E.shape, dtype=bool)
    iterations = 0

    for iteration in range(1, max_iter + 1):
        mask = ~converged

        if not np.any(mask):
            break

        f_E = E[mask] - e * np.sin(E[mask]) - M[mask]
        f_prime_E = 1.0 - e * np.cos(E[mask])

        # Keep the sign, floor the magnitude
        f_prime_E = np.where(np.abs(f_prime_E) < KEPLER_MIN_DERIVATIVE,
                             np.copysign(KEPLER_MIN_DERIVATIVE, f_prime_E),
                             f_prime_E)

        delta = f_E / f_prime_E
        E[mask] -= delta

        converged[mask] = np.abs(delta) < tol
        iterations = iteration

    residual = np.abs(E - e * np.sin(E) - M)
    converged &= residual < tol
    all_converged = bool(np.all(converged))

    if not all_converged:
        n_failed = int(np.sum(~converged))
        logger.warning(f"Kepler solver did not converge for {n_failed} of {len(converged)} value(s) "
                       f"after {iterations} iterations (e={e:.{KEPLER_LOGGING_PRECISION}f}, tol={tol:g})")

    result = E.reshape(original_shape)

    if input_is_scalar:
        return KeplerSolution(float(result.item()), all_converged, iterations)
    return KeplerSolution(result, all_converged, iterations)


def true_anomaly(E_rad: Union[float, np.ndarray], e: float) -> Union[float, np.ndarray]:
    """
    Converts eccentric anomaly to true anomaly using the atan2 formulation,
    which is stable over the whole orbit.

    Args:
        E_rad: Eccentric anomaly in radians (scalar or array).
        e: Eccentricity (0 <= e < 1).

    Returns:
        True anomaly in radians, in (-pi, pi].
    """
    _validate_eccentricity(e)
    denominator = 1.0 - e * np.cos(E_rad)
    cos_nu = (np.cos(E_rad) - e) / denominator
    sin_nu = np.sqrt(1.0 - e**2) * np.sin(E_rad) / denominator
    nu = np.arctan2(sin_nu, cos_nu)
    return float(nu) if np.isscalar(E_rad) else nu


def orbital_period_days(semi_major_axis_au: float, central_mass_solar: float = 1.0) -> float:
    """
    Orbital period from Kepler's third law, T^2 = 4 pi^2 a^3 / (G M).

    Args:
        semi_major_axis_au: Semi-major axis in AU.
        central_mass_solar: Central mass in solar masses.

    Returns:
        Period in days.
    """
    if semi_major_axis_au <= 0:
        raise InvalidOrbitalElementsError(f"Semi-major axis {semi_major_axis_au} AU must be positive")
    if central_mass_solar <= 0:
        raise InvalidOrbitalElementsError(f"Central mass {central_mass_solar} must be positive")

    a_m = semi_major_axis_au * AU_KM * METERS_PER_KM
    mu = GRAVITATIONAL_CONSTANT * central_mass_solar * SOLAR_MASS_KG
    period_s = TWO_PI * np.sqrt(a_m**3 / mu)
    return float(period_s / SECONDS_PER_DAY)


def synodic_period_days(period_1_days: float, period_2_days: float) -> float:
    """Synodic period of two bodies with the given sidereal periods (days)."""
    if period_1_days <= 0 or period_2_days <= 0:
        raise InvalidOrbitalElementsError("Orbital periods must be positive")
    if period_1_days == period_2_days:
        raise InvalidOrbitalElementsError("Equal periods have no synodic period")
    return abs(1.0 / (1.0 / period_1_days - 1.0 / period_2_days))
