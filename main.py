#!/usr/bin/env python
"""
VenusParallax - Transit of Venus Parallax Calculator

Entry point dispatching to the suite's command line tools. Everything after
the tool name is handed to that tool's own parser.
"""

import sys
import argparse

__version__ = "1.0.0"

TOOLS = {
    'parallax': 'Triangulate the astronomical unit from transit observations',
}


def _run_parallax(tool_args):
    from venusparallax.analyzer.cli import main as parallax_main
    parallax_main(tool_args)


def main():
    parser = argparse.ArgumentParser(
        description=f'VenusParallax v{__version__} - Transit of Venus Parallax Calculator',
        epilog='\n'.join(f'  {name:<10} {summary}' for name, summary in TOOLS.items()),
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('tool', choices=sorted(TOOLS), help='Tool to run')
    parser.add_argument('--version', action='version', version=f'VenusParallax {__version__}')

    args, tool_args = parser.parse_known_args()

    try:
        if args.tool == 'parallax':
            _run_parallax(tool_args)
    except ImportError as e:
        print(f"ERROR: Failed to import required module: {e}", file=sys.stderr)
        print("Install the package and its dependencies with: pip install -e .", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nCalculation interrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
