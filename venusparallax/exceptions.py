"""
Custom exceptions for VenusParallax.

This module defines domain-specific exceptions used throughout the application
to provide clear error context and enable precise error handling.
"""


class VenusParallaxError(Exception):
    """Base exception for all VenusParallax-specific errors."""
    pass


class UnknownBodyError(VenusParallaxError):
    """Raised when a body identifier is not in the orbital elements table."""
    pass


class UnknownTransitYearError(VenusParallaxError):
    """Raised when no historical roster exists for the requested transit year."""
    pass


class InsufficientObservationsError(VenusParallaxError):
    """Raised when fewer than two distinct, valid observation sites are supplied."""
    pass


class InputValidationError(VenusParallaxError):
    """Raised when geodetic coordinates or other inputs are outside valid ranges."""
    pass


class InvalidOrbitalElementsError(VenusParallaxError):
    """Raised when orbital elements are outside valid ranges."""
    pass


class NumericalInstabilityError(VenusParallaxError):
    """Raised when a computation produces NaN or infinite values."""
    pass


class ConfigurationError(VenusParallaxError):
    """Raised when command line or runtime configuration is invalid."""
    pass


__all__ = [
    'VenusParallaxError',
    'UnknownBodyError',
    'UnknownTransitYearError',
    'InsufficientObservationsError',
    'InputValidationError',
    'InvalidOrbitalElementsError',
    'NumericalInstabilityError',
    'ConfigurationError'
]
