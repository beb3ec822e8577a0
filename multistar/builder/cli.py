import argparse
import logging
import sys
import time
from typing import List, Optional

from ..config import (
    DEFAULT_CATALOG_FILE,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_FORMAT,
)
from ..data.registry import BarycenterRegistry
from ..exceptions import MultistarError
from .pipeline import CatalogPipeline, STATS_KEYS

log = logging.getLogger(__name__)


def create_argument_parser():
    """Create command line argument parser with proper defaults from config."""
    parser = argparse.ArgumentParser(
        description='multistar catalog builder: stellar pair table to Celestia .stc',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s catalog.txt
  %(prog)s catalog.txt --output binarycatalog.stc --existing visualbins.stc
  %(prog)s catalog.txt -o multiples.stc --verbose
        """
    )

    parser.add_argument('catalog', nargs='?', default=DEFAULT_CATALOG_FILE,
                        help=f'Tab-delimited table of stellar pairs (default: {DEFAULT_CATALOG_FILE})')
    parser.add_argument('--output', '-o', default=DEFAULT_OUTPUT_FILE,
                        help=f'Output .stc file (default: {DEFAULT_OUTPUT_FILE})')
    parser.add_argument('--existing', '-e', default=None,
                        help='Reference .stc file whose barycenters are replaced rather than added')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')

    return parser


def run_build(args: argparse.Namespace) -> int:
    """
    Run one conversion from parsed arguments.

    Returns:
        Process exit status
    """
    level = logging.DEBUG if args.verbose else getattr(logging, DEFAULT_LOG_LEVEL)
    logging.basicConfig(level=level, format=DEFAULT_LOG_FORMAT)

    try:
        registry = BarycenterRegistry.from_stc_file(args.existing)
        pipeline = CatalogPipeline(registry=registry)
        stats = pipeline.run(args.catalog, args.output)
    except MultistarError as e:
        log.error(f"{e}")
        return 1

    print(f"{stats[STATS_KEYS['STARS']]} stars in {stats[STATS_KEYS['SYSTEMS']]} systems newly added.")
    return 0


def main(args_list: Optional[List[str]] = None):
    """Main entry point for the catalog builder CLI.

    Args:
        args_list: Optional list of command line arguments.
                  If None, will parse from sys.argv
    """
    parser = create_argument_parser()
    args = parser.parse_args(args_list)

    start_time = time.time()
    status = run_build(args)
    if status:
        sys.exit(status)

    end_time = time.time()
    log.info(f"Total execution time: {end_time - start_time:.2f} seconds")


if __name__ == "__main__":
    main()
