"""
Numerical sanity checks shared by the physics and analyzer packages.
"""

import numpy as np

from ..exceptions import NumericalInstabilityError


def ensure_finite(name: str, value):
    """
    Returns ``value`` unchanged if every component is finite.

    Raises:
        NumericalInstabilityError: If the value contains NaN or infinity.
    """
    if not np.all(np.isfinite(value)):
        raise NumericalInstabilityError(f"Non-finite value computed for {name}: {value}")
    return value
