"""
Command-line interface for event marker synchronization.

Usage:
    synchro-pose SYNCHRO IMAGES TRAJECTORY [--output OUTPUT] [--config CONFIG]
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import Config, TRAJECTORY_FORMATS, TRAJECTORY_TIMES
from .synchronizer import synchronize_files
from .writer import write_records, write_records_csv


def setup_logging(verbose: bool = False) -> None:
    """Configure logging. Logs go to stderr, stdout may carry the CSV output."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='synchro-pose',
        description='Interpolate the trajectory pose of every image at its event marker time',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
    # Print synchronized poses as CSV
    synchro-pose synchro.xpf images.txt trajectory.csv

    # Write to a file, event markers in UTC
    synchro-pose synchro.xpf images.txt trajectory.sbet -o poses.csv --leap-seconds 18

    # Verbose output with a configuration file
    synchro-pose synchro.xpf images.txt trajectory.csv -c config.yaml -v
'''
    )

    parser.add_argument('synchro', type=str, help='Path to the synchro (event marker) file')
    parser.add_argument('images', type=str, help='Path to the image list')
    parser.add_argument('trajectory', type=str, help='Path to the trajectory file')

    parser.add_argument(
        '--output', '-o',
        type=str,
        default=None,
        help='Output CSV file (default: stdout)'
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        default=None,
        help='Path to YAML configuration file'
    )

    parser.add_argument(
        '--leap-seconds',
        type=float,
        default=None,
        help='GPS minus event marker time scale, in seconds (overrides config)'
    )

    parser.add_argument(
        '--trajectory-format',
        choices=TRAJECTORY_FORMATS,
        default=None,
        help='Trajectory file format (overrides config)'
    )

    parser.add_argument(
        '--trajectory-time',
        choices=TRAJECTORY_TIMES,
        default=None,
        help='Trajectory time column unit (overrides config)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = Config.from_yaml(args.config) if args.config else Config()

        if args.leap_seconds is not None:
            config.time.leap_seconds = args.leap_seconds
        if args.trajectory_format is not None:
            config.trajectory.format = args.trajectory_format
        if args.trajectory_time is not None:
            config.time.trajectory_time = args.trajectory_time

        records = synchronize_files(args.synchro, args.images, args.trajectory, config)

        precision = config.output.float_precision
        if args.output:
            write_records_csv(records, args.output, precision)
        else:
            write_records(records, sys.stdout, precision)

        return 0

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Synchronization failed: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
