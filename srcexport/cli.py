"""
Command-line entry point for the speedrun.com leaderboard exporter.

Usage:
    srcexport -g sms -o exports/ --breakout-variables
    OR
    python -m srcexport.cli -g sms -o exports/ -f json
"""

import argparse
import logging
import sys

from srcexport.config import DEFAULT_OUTPUT_FORMAT, ExportOptions
from srcexport.ingestion.client import ExportError, NotFoundError
from srcexport.pipeline import run_export
from srcexport.utils import set_log_level, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    # -h selects run history, so help lives on --help only
    parser = argparse.ArgumentParser(
        prog="srcexport",
        description="Export speedrun.com leaderboards for one game to CSV or JSON.",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="Show this help message and exit.")
    parser.add_argument(
        "-g", "--game",
        required=True,
        help="speedrun.com abbreviation of the game to export.",
    )
    parser.add_argument(
        "-o", "--output-dir",
        required=True,
        help="Directory in which to place output files.",
    )
    parser.add_argument(
        "-v", "--breakout-variables",
        action="store_true",
        help="Subdivide leaderboards into each allowed combination of category variables.",
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Print verbose debug messages while running.",
    )
    parser.add_argument(
        "-a", "--include-unverified-runs",
        action="store_true",
        help="Include runs of any status (by default only verified runs are exported).",
    )
    parser.add_argument(
        "-h", "--include-run-history",
        action="store_true",
        help="Include every obsolete run in the export.",
    )
    parser.add_argument(
        "-f", "--output-format",
        default=DEFAULT_OUTPUT_FORMAT,
        help='Output format: "csv" or "json" (default: csv).',
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    if args.debug:
        set_log_level(logging.DEBUG)

    try:
        options = ExportOptions(
            game=args.game,
            output_dir=args.output_dir,
            breakout_variables=args.breakout_variables,
            include_unverified_runs=args.include_unverified_runs,
            include_run_history=args.include_run_history,
            output_format=args.output_format,
            debug=args.debug,
        )
        run_export(options)
    except ValueError as e:
        logger.error(f"Invalid options: {e}")
        return 1
    except NotFoundError as e:
        logger.error(f"{e}")
        return 1
    except ExportError as e:
        logger.error(f"Export failed: {e}")
        return 1

    print("OK")
    return 0


if __name__ == "__main__":
    sys.exit(main())
