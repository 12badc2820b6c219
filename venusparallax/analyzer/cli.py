import argparse
import logging
import sys
import time
from typing import List, Optional

from ..config import (
    CLI_TRANSIT_YEARS,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PRECISION_MODE,
    PRECISION_MODES,
    SUN_BODY_NAME
)
from ..data.historical import ObservationSite
from ..exceptions import ConfigurationError, VenusParallaxError
from ..physics.geodesy import distance
from ..physics.positions import RotationModel
from ..utils.coordinate_parsing import parse_datetime, parse_location
from ..utils.timescales import julian_date
from .engine import ParallaxEngine, build_engine
from .reporting import (
    print_baseline,
    print_historical_report,
    print_parallax_result,
    print_position
)

log = logging.getLogger(__name__)


def _rotation_model(args: argparse.Namespace) -> RotationModel:
    return RotationModel.FULL if getattr(args, 'full_rotation', False) else RotationModel.INCLINATION_ONLY


def _create_engine(args: argparse.Namespace) -> ParallaxEngine:
    """
    Factory function to build the parallax engine from CLI arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        Configured ParallaxEngine
    """
    return build_engine(
        rotation_model=_rotation_model(args),
        precision_mode=getattr(args, 'precision', DEFAULT_PRECISION_MODE)
    )


def _add_precision_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--precision', '-p',
                        choices=PRECISION_MODES,
                        default=DEFAULT_PRECISION_MODE,
                        help=f'Precision mode used to validate results (default: {DEFAULT_PRECISION_MODE})')


def _add_rotation_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--full-rotation',
                        action='store_true',
                        help='Rotate orbital-plane coordinates by node, argument of perihelion '
                             'and inclination instead of inclination only.')


def _add_site_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--site-a', required=True,
                        help='First site as "lat,lon" in decimal degrees (e.g., "59.3293,18.0686").')
    parser.add_argument('--site-b', required=True,
                        help='Second site as "lat,lon" in decimal degrees (e.g., "48.8566,2.3522").')


def create_argument_parser():
    """Create command line argument parser with proper defaults from config."""
    parser = argparse.ArgumentParser(
        description='VenusParallax Transit-of-Venus Parallax Calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s historical --year 1761
  %(prog)s historical --year 1769 --precision ultra --full-rotation
  %(prog)s pair --site-a 59.3293,18.0686 --site-b=-33.9249,18.4241 --datetime 1761-06-06T05:30:00Z
  %(prog)s position --body venus --jd 2451545.0
  %(prog)s baseline --site-a 59.3293,18.0686 --site-b 48.8566,2.3522
        """
    )

    parser.add_argument('--debug',
                        action='store_true',
                        help='Enable debug logging.')

    subparsers = parser.add_subparsers(dest='command', metavar='command')
    subparsers.required = True

    historical = subparsers.add_parser('historical', help='Triangulate the AU from a historical transit roster')
    historical.add_argument('--year', '-y',
                            type=int,
                            choices=CLI_TRANSIT_YEARS,
                            required=True,
                            help='Transit year')
    _add_precision_argument(historical)
    _add_rotation_argument(historical)

    pair = subparsers.add_parser('pair', help='Triangulate the AU from two arbitrary sites')
    _add_site_arguments(pair)
    pair.add_argument('--datetime', '-t', required=True,
                      help='Observation time in ISO 8601 (e.g., "1769-06-03T05:30:00Z").')
    _add_precision_argument(pair)
    _add_rotation_argument(pair)

    position = subparsers.add_parser('position', help='Heliocentric position of a body')
    position.add_argument('--body', '-b', required=True,
                          help='Body name (sun, earth, venus)')
    when_group = position.add_mutually_exclusive_group(required=True)
    when_group.add_argument('--jd', type=float, help='Julian Date')
    when_group.add_argument('--datetime', '-t', help='Time in ISO 8601')
    _add_rotation_argument(position)

    baseline = subparsers.add_parser('baseline', help='Geodesic distance between two sites')
    _add_site_arguments(baseline)

    return parser


def _site_from_argument(value: str, site_id: str) -> ObservationSite:
    location = parse_location(value, label=site_id.replace('_', '-'))
    return ObservationSite(id=site_id, name=f"{site_id.replace('_', ' ').title()} ({value})", location=location)


def run_historical(args: argparse.Namespace) -> None:
    engine = _create_engine(args)
    report = engine.historical_parallax(args.year)
    print_historical_report(report, engine.transit_events(args.year))


def run_pair(args: argparse.Namespace) -> None:
    site_a = _site_from_argument(args.site_a, 'site_a')
    site_b = _site_from_argument(args.site_b, 'site_b')
    when = parse_datetime(args.datetime)

    engine = _create_engine(args)
    result = engine.compute_parallax(site_a, site_b, when)
    print_parallax_result(result, engine.validate_measurement(result.error_percent / 100.0))


def run_position(args: argparse.Namespace) -> None:
    engine = _create_engine(args)
    jd = args.jd if args.jd is not None else julian_date(parse_datetime(args.datetime))

    position = engine.calculator.position(args.body, jd)
    longitude = None
    if position.body != SUN_BODY_NAME:
        longitude = engine.calculator.ecliptic_longitude(args.body, jd)
    print_position(position, longitude)


def run_baseline(args: argparse.Namespace) -> None:
    loc_a = parse_location(args.site_a, label='site-a')
    loc_b = parse_location(args.site_b, label='site-b')
    print_baseline(distance(loc_a, loc_b))


COMMANDS = {
    'historical': run_historical,
    'pair': run_pair,
    'position': run_position,
    'baseline': run_baseline,
}


def main(args_list: Optional[List[str]] = None):
    """Main entry point for the parallax CLI.

    Args:
        args_list: Optional list of command line arguments.
                  If None, will parse from sys.argv
    """
    parser = create_argument_parser()
    args = parser.parse_args(args_list)

    level = logging.DEBUG if args.debug else getattr(logging, DEFAULT_LOG_LEVEL)
    logging.basicConfig(level=level, format=DEFAULT_LOG_FORMAT)

    start_time = time.time()
    try:
        COMMANDS[args.command](args)
    except ConfigurationError as e:
        log.error(f"Invalid arguments: {e}")
        sys.exit(1)
    except VenusParallaxError as e:
        log.error(f"Calculation failed: {e}")
        sys.exit(1)

    end_time = time.time()
    print(f"\nTotal execution time: {end_time - start_time:.2f} seconds")


if __name__ == "__main__":
    main()
