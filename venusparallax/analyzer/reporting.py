"""
Reporting and Display Functions for Parallax Results.

This module handles the presentation layer: console tables for pairwise
triangulations, historical summaries, positions and baselines. It is
completely independent of the calculation logic.
"""

import logging
import math
from typing import List, Optional

from ..config import (
    ARCSEC_PER_DEGREE,
    CLI_DISPLAY_LINE_WIDTH,
    CLI_HEADER_CHAR,
    CLI_SUBHEADER_CHAR,
    CLI_SITE_COLUMN_WIDTH,
    CLI_VALUE_NOT_AVAILABLE,
    CLI_COLUMN_SEPARATOR,
    CLI_DISTANCE_PRECISION,
    CLI_ANGLE_PRECISION,
    CLI_ERROR_PRECISION,
    CLI_POSITION_PRECISION
)
from ..physics.positions import CelestialPosition
from .engine import ContactGeometry, HistoricalParallax, ParallaxResult

log = logging.getLogger(__name__)


def format_value(value: Optional[float], precision: int, unit: str = "") -> str:
    """Formats a number for the console, or CLI_VALUE_NOT_AVAILABLE for None."""
    if value is None:
        return CLI_VALUE_NOT_AVAILABLE
    return f"{value:,.{precision}f}{unit}"


def print_header(title: str) -> None:
    print("\n" + CLI_HEADER_CHAR * CLI_DISPLAY_LINE_WIDTH)
    print(title)
    print(CLI_HEADER_CHAR * CLI_DISPLAY_LINE_WIDTH)


def format_result_row(result: ParallaxResult) -> str:
    pair = f"{result.site_a.id} / {result.site_b.id}"
    return CLI_COLUMN_SEPARATOR.join([
        f"{pair:<{2 * CLI_SITE_COLUMN_WIDTH}}",
        f"baseline {format_value(result.baseline_km, CLI_DISTANCE_PRECISION, ' km')}",
        f"p {format_value(result.parallax_angle_arcsec, CLI_ANGLE_PRECISION, ' arcsec')}",
        f"AU {format_value(result.calculated_au_km, CLI_DISTANCE_PRECISION, ' km')}",
        f"err {format_value(result.error_percent, CLI_ERROR_PRECISION, '%')}",
    ])


def print_parallax_result(result: ParallaxResult, within_tolerance: Optional[bool] = None) -> None:
    """Prints a single triangulation in detail."""
    print_header(f"PARALLAX: {result.site_a.name} <-> {result.site_b.name}")
    print(f"Observation time:     {result.when.isoformat()} (JD {result.julian_date:.5f})")
    print(f"Baseline:             {format_value(result.baseline_km, CLI_DISTANCE_PRECISION, ' km')}")
    print(f"Earth-Sun distance:   {format_value(result.earth_sun_distance_km, CLI_DISTANCE_PRECISION, ' km')}")
    print(f"Parallax angle:       {format_value(result.parallax_angle_arcsec, CLI_ANGLE_PRECISION, ' arcsec')}")
    print(f"Calculated AU:        {format_value(result.calculated_au_km, CLI_DISTANCE_PRECISION, ' km')}")
    print(f"Reference AU:         {format_value(result.reference_au_km, CLI_DISTANCE_PRECISION, ' km')}")
    print(f"Error:                {format_value(result.error_percent, CLI_ERROR_PRECISION, '%')}")
    print(f"Combined uncertainty: {result.uncertainty.combined:.5f}")
    print(f"Precision mode:       {result.precision_mode}")
    if within_tolerance is not None:
        print(f"Within tolerance:     {'yes' if within_tolerance else 'no'}")
    print(CLI_SUBHEADER_CHAR * CLI_DISPLAY_LINE_WIDTH)


def print_historical_report(report: HistoricalParallax, contacts: Optional[List[ContactGeometry]] = None) -> None:
    """Prints every pairwise result of a transit year followed by the summary."""
    event = report.event
    print_header(f"TRANSIT OF VENUS {report.year} - HISTORICAL PARALLAX "
                 f"(claimed accuracy {event.historical_accuracy})")
    print(f"Reference time: {event.reference_time.isoformat()}   "
          f"Duration: {event.duration_hours:.2f} h")
    print(CLI_SUBHEADER_CHAR * CLI_DISPLAY_LINE_WIDTH)

    for i, result in enumerate(report.results, 1):
        print(f"{i:2d}. {format_result_row(result)}")

    print(CLI_SUBHEADER_CHAR * CLI_DISPLAY_LINE_WIDTH)
    summary = report.summary
    if summary is not None:
        print(f"Mean AU:  {format_value(summary.mean_au_km, CLI_DISTANCE_PRECISION, ' km')} "
              f"(std {format_value(summary.std_au_km, CLI_DISTANCE_PRECISION, ' km')}, "
              f"n={summary.sample_count})")
        print(f"Error range: {format_value(summary.min_error_percent, CLI_ERROR_PRECISION, '%')} - "
              f"{format_value(summary.max_error_percent, CLI_ERROR_PRECISION, '%')}")
    if report.best_result is not None:
        best = report.best_result
        print(f"Best pair: {best.site_a.name} / {best.site_b.name} "
              f"({format_value(best.error_percent, CLI_ERROR_PRECISION, '%')})")

    if contacts:
        print(CLI_SUBHEADER_CHAR * CLI_DISPLAY_LINE_WIDTH)
        for contact in contacts:
            separation_arcsec = math.degrees(contact.angular_separation_rad) * ARCSEC_PER_DEGREE
            print(f"{contact.contact:<8} {contact.when.strftime('%Y-%m-%d %H:%M')}Z  "
                  f"Earth-Venus {contact.earth_venus_distance_au:.5f} AU  "
                  f"separation {separation_arcsec:,.1f} arcsec")


def print_position(position: CelestialPosition, longitude_rad: Optional[float] = None) -> None:
    p = CLI_POSITION_PRECISION
    print_header(f"HELIOCENTRIC POSITION: {position.body.upper()} (JD {position.julian_date:.5f})")
    print(f"X = {position.x:.{p}f} AU")
    print(f"Y = {position.y:.{p}f} AU")
    print(f"Z = {position.z:.{p}f} AU")
    print(f"r = {position.distance_au:.{p}f} AU")
    if longitude_rad is not None:
        print(f"Ecliptic longitude = {math.degrees(longitude_rad):.{CLI_ANGLE_PRECISION}f}°")


def print_baseline(baseline_km: float) -> None:
    print(f"Geodesic baseline: {format_value(baseline_km, CLI_DISTANCE_PRECISION, ' km')}")
