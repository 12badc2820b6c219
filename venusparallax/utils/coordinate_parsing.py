"""
Coordinate parsing utilities for command line arguments.

This module provides parsing and validation functions for command line
arguments that require special handling beyond argparse's built-in capabilities.
"""

import logging
from datetime import datetime

from ..exceptions import ConfigurationError, InputValidationError
from ..physics.geodesy import GeodeticLocation
from .timescales import ensure_utc

log = logging.getLogger(__name__)


def parse_location(location_str: str, label: str = "site") -> GeodeticLocation:
    """
    Parse and validate a geodetic location string.

    Args:
        location_str: Comma-separated "latitude,longitude" in decimal degrees
                      (e.g., "59.3293,18.0686")
        label: Argument name used in error messages

    Returns:
        GeodeticLocation for the parsed coordinates

    Raises:
        ConfigurationError: If format is invalid or values are out of bounds

    Examples:
        >>> parse_location("48.8566,2.3522")
        GeodeticLocation(latitude_deg=48.8566, longitude_deg=2.3522, elevation_m=0.0)
    """
    if not location_str or not location_str.strip():
        raise ConfigurationError(f"Empty {label} location provided")

    clean_str = location_str.strip()
    if ',' not in clean_str:
        raise ConfigurationError(
            f"Invalid {label} location format. "
            f"Expected 'lat,lon' (e.g., '59.3293,18.0686'), got '{location_str}'"
        )

    parts = clean_str.split(',')
    if len(parts) != 2:
        raise ConfigurationError(
            f"Invalid {label} location format. "
            f"Expected exactly two values separated by comma, got {len(parts)} values"
        )

    try:
        latitude = float(parts[0].strip())
        longitude = float(parts[1].strip())
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid numeric values in {label} location '{location_str}'. "
            f"Both values must be valid numbers"
        ) from e

    try:
        return GeodeticLocation(latitude, longitude)
    except InputValidationError as e:
        raise ConfigurationError(f"Invalid {label} location: {e}") from e


def parse_datetime(datetime_str: str) -> datetime:
    """
    Parse an ISO 8601 date/time string into an aware UTC datetime.

    Strings without an offset are taken as UTC. A trailing 'Z' is accepted.

    Raises:
        ConfigurationError: If the string is not a valid ISO 8601 timestamp
    """
    if not datetime_str or not datetime_str.strip():
        raise ConfigurationError("Empty datetime provided")

    clean_str = datetime_str.strip()
    if clean_str.endswith(('Z', 'z')):
        clean_str = clean_str[:-1] + '+00:00'

    try:
        parsed = datetime.fromisoformat(clean_str)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid datetime '{datetime_str}'. Expected ISO 8601 (e.g., '1761-06-06T05:30:00Z')"
        ) from e

    if parsed.tzinfo is None:
        log.debug(f"No offset in '{datetime_str}', interpreting as UTC")
    return ensure_utc(parsed)
