"""
Precision modes and the measurement validation policy.

The policy only judges results; it never changes how they are computed.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..config import (
    DEFAULT_PRECISION_MODE,
    PRECISION_TOLERANCES,
    PRECISION_ANGULAR_ARCSEC,
    PRECISION_TEMPORAL_SECONDS
)
from ..exceptions import ConfigurationError

log = logging.getLogger(__name__)


class PrecisionMode(Enum):
    STANDARD = "standard"
    HIGH = "high"
    ULTRA = "ultra"

    @classmethod
    def parse(cls, value: Union["PrecisionMode", str]) -> "PrecisionMode":
        """Accepts a PrecisionMode or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ', '.join(mode.value for mode in cls)
            raise ConfigurationError(f"Unknown precision mode '{value}'. Valid modes: {valid}") from None


@dataclass(frozen=True)
class PrecisionLevel:
    """Resolution figures associated with a precision mode."""
    mode: PrecisionMode
    angular_arcsec: float
    temporal_seconds: float
    tolerance: float


class PrecisionPolicy:
    """Maps a precision mode to a relative-error tolerance."""

    def __init__(self, mode: Union[PrecisionMode, str] = DEFAULT_PRECISION_MODE):
        self.mode = PrecisionMode.parse(mode)

    def set_mode(self, mode: Union[PrecisionMode, str]) -> None:
        self.mode = PrecisionMode.parse(mode)
        log.info(f"Precision mode set to {self.mode.value}")

    def tolerance(self, mode: Union[PrecisionMode, str, None] = None) -> float:
        """Maximum accepted relative error (fraction) for a mode."""
        mode = self.mode if mode is None else PrecisionMode.parse(mode)
        return PRECISION_TOLERANCES[mode.value]

    def is_within_tolerance(self, error_fraction: float,
                            mode: Union[PrecisionMode, str, None] = None) -> bool:
        """True if ``|error_fraction|`` does not exceed the mode's tolerance."""
        return abs(error_fraction) <= self.tolerance(mode)

    def level(self, mode: Union[PrecisionMode, str, None] = None) -> PrecisionLevel:
        mode = self.mode if mode is None else PrecisionMode.parse(mode)
        return PrecisionLevel(
            mode=mode,
            angular_arcsec=PRECISION_ANGULAR_ARCSEC[mode.value],
            temporal_seconds=PRECISION_TEMPORAL_SECONDS[mode.value],
            tolerance=PRECISION_TOLERANCES[mode.value]
        )
