#!/usr/bin/env python
"""
multistar - Celestia catalogs of multiple star systems

This is the main entry point for the multistar tools. It dispatches to the
catalog builder, which turns a table of stellar pairs into a hierarchical
.stc catalog.
"""

import sys
import argparse

__version__ = "1.0.0"


def main():
    """Main entry point for multistar."""
    parser = argparse.ArgumentParser(
        description=f'multistar v{__version__} - Celestia catalogs of multiple star systems',
        epilog='Use "build" to convert a pair table into an .stc catalog.',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument('tool',
                        choices=['build'],
                        help='Tool to run')
    parser.add_argument('--version', action='version',
                        version=f'multistar {__version__}')

    args, remaining_args = parser.parse_known_args()

    try:
        if args.tool == 'build':
            from multistar.builder.cli import main as build_main
            build_main(remaining_args)
    except ImportError as e:
        print(f"ERROR: Failed to import required module: {e}", file=sys.stderr)
        print("Ensure all dependencies are installed: pip install -e .", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)  # Standard exit code for SIGINT


if __name__ == "__main__":
    main()
