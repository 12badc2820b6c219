# tests/test_physics_kepler.py
import pytest
import logging
import numpy as np
from venusparallax.physics.kepler import (
    solve_kepler,
    normalize_angle,
    true_anomaly,
    orbital_period_days,
    synodic_period_days
)
from venusparallax.exceptions import InvalidOrbitalElementsError


def test_solve_kepler_circular_orbit():
    """Verifies that for a circular orbit (e=0), E equals M."""
    mean_anomaly_rad = np.radians(45.0)
    solution = solve_kepler(mean_anomaly_rad, 0.0)
    assert solution.converged
    assert np.isclose(solution.eccentric_anomaly, mean_anomaly_rad, atol=1e-12)


def test_solve_kepler_known_case():
    """Verifies the solution for a standard case (M=0.5 rad, e=0.2)."""
    expected_E_rad = 0.6154681694899653
    solution = solve_kepler(0.5, 0.2, tol=1e-12)
    assert np.isclose(solution.eccentric_anomaly, expected_E_rad, atol=1e-9)


def test_solve_kepler_scalar_returns_float():
    solution = solve_kepler(1.0, 0.1)
    assert isinstance(solution.eccentric_anomaly, float)
    assert solution.iterations >= 1


def test_solve_kepler_vectorized_consistency():
    """Vectorized and scalar calls give consistent results."""
    M_values = np.array([0.1, 0.5, 1.0, 2.0, 3.0])
    e = 0.3

    E_vector = solve_kepler(M_values, e).eccentric_anomaly
    E_scalars = np.array([solve_kepler(float(M), e).eccentric_anomaly for M in M_values])

    assert E_vector.shape == M_values.shape
    assert np.allclose(E_vector, E_scalars, atol=1e-12)


def test_solve_kepler_random_anomalies_converge():
    """Random M over [0, 2pi) and e in [0, 0.9) converge within the iteration cap."""
    rng = np.random.default_rng(42)
    for e in rng.uniform(0.0, 0.9, size=20):
        M = rng.uniform(0.0, 2 * np.pi, size=50)
        solution = solve_kepler(M, float(e), tol=1e-10, max_iter=100)
        assert solution.converged
        assert solution.iterations <= 100
        residual = solution.eccentric_anomaly - e * np.sin(solution.eccentric_anomaly) - M
        assert np.all(np.abs(residual) < 1e-10)


def test_solve_kepler_high_eccentricity():
    """Solver stability for high eccentricity orbits."""
    M = 1.0
    e_high = 0.95
    E = solve_kepler(M, e_high).eccentric_anomaly
    assert abs(E - e_high * np.sin(E) - M) < 1e-10


def test_solve_kepler_non_convergence_is_flagged(caplog):
    """Exhausting the iterations returns the estimate with converged=False."""
    with caplog.at_level(logging.WARNING, logger='venusparallax.physics.kepler'):
        solution = solve_kepler(1.0, 0.9, max_iter=1)

    assert not solution.converged
    assert solution.iterations == 1
    assert np.isfinite(solution.eccentric_anomaly)
    assert "did not converge" in caplog.text


@pytest.mark.parametrize("e", [1.0, 1.5, -0.1, float('nan')])
def test_solve_kepler_invalid_eccentricity(e):
    with pytest.raises(InvalidOrbitalElementsError, match="outside elliptical range"):
        solve_kepler(1.0, e)


def test_normalize_angle():
    assert np.isclose(normalize_angle(-0.1), 2 * np.pi - 0.1)
    assert normalize_angle(2 * np.pi) == 0.0
    assert np.isclose(normalize_angle(7 * np.pi), np.pi)

    wrapped = normalize_angle(np.array([-np.pi / 2, 0.0, 5 * np.pi / 2]))
    assert np.allclose(wrapped, [3 * np.pi / 2, 0.0, np.pi / 2])
    assert np.all((wrapped >= 0) & (wrapped < 2 * np.pi))


def test_true_anomaly_circular_equals_eccentric():
    assert np.isclose(true_anomaly(1.0, 0.0), 1.0)


def test_true_anomaly_leads_eccentric_anomaly():
    """Between perihelion and aphelion the true anomaly runs ahead of E."""
    E = np.radians(90.0)
    nu = true_anomaly(E, 0.2)
    assert nu > E
    assert np.isclose(np.cos(nu), (np.cos(E) - 0.2) / (1 - 0.2 * np.cos(E)))


def test_orbital_period_earth():
    assert np.isclose(orbital_period_days(1.0), 365.25, rtol=1e-3)


def test_orbital_period_invalid():
    with pytest.raises(InvalidOrbitalElementsError, match="must be positive"):
        orbital_period_days(0.0)


def test_synodic_period_venus_earth():
    assert np.isclose(synodic_period_days(224.701, 365.256), 583.92, rtol=1e-3)
    assert np.isclose(synodic_period_days(365.256, 224.701), synodic_period_days(224.701, 365.256))


def test_synodic_period_equal_periods():
    with pytest.raises(InvalidOrbitalElementsError, match="no synodic period"):
        synodic_period_days(365.0, 365.0)
