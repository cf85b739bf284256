"""
Traffic Census Command Line
===========================

Entry point for a complete aggregation run.

Usage:
    traffic-census traffic.log
    traffic-census --workers 8 --backend thread traffic.log
    traffic-census --format json --top-n 5 traffic.log

Exit Status:
    0 - report emitted, or no input file given (usage printed)
    1 - fatal error: bad configuration, unreadable input, worker failure
"""

import argparse
import logging
import os
import sys
from typing import List, NoReturn, Optional

from pydantic import ValidationError

from traffic_census.config import ConfigurationError, Settings, load_config, setup_logging
from traffic_census.ingest.reader import InputFileError
from traffic_census.observability.formatter import render
from traffic_census.runtime.coordinator import Coordinator, WorkerFailure, WorkerTimeout


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="traffic-census",
        description="Report the most congested traffic lights per hour",
    )
    parser.add_argument(
        "input_file",
        nargs="?",
        help="Traffic log: one '[date] time light_id car_count' record per line",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to config.yaml")
    parser.add_argument("--workers", type=int, default=None, help="Number of worker units")
    parser.add_argument(
        "--backend",
        choices=["process", "thread"],
        default=None,
        help="Worker execution backend",
    )
    parser.add_argument("--top-n", type=int, default=None, help="Lights reported per hour")
    parser.add_argument(
        "--schema",
        choices=["auto", "hourly", "daily"],
        default=None,
        help="Record layout of the input",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default=None,
        help="Report output format",
    )
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Layer command line flags over loaded settings and re-validate."""
    data = settings.model_dump(by_alias=True)
    if args.workers is not None:
        data["pipeline"]["workers"] = args.workers
    if args.backend is not None:
        data["pipeline"]["backend"] = args.backend
    if args.schema is not None:
        data["pipeline"]["schema"] = args.schema
    if args.top_n is not None:
        data["report"]["top_n"] = args.top_n
    if args.format is not None:
        data["report"]["format"] = args.format

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid command line option: {e}") from e


def _exit_now(status: int) -> NoReturn:
    """Exit without joining worker threads still stuck past the barrier."""
    sys.stdout.flush()
    sys.stderr.flush()
    logging.shutdown()
    os._exit(status)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.input_file is None:
        parser.print_usage(sys.stdout)
        return 0

    try:
        settings = apply_cli_overrides(load_config(args.config), args)
        setup_logging(settings)

        coordinator = Coordinator.from_settings(settings)
        result = coordinator.run_file(args.input_file)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1
    except InputFileError as e:
        logger.error(f"Input error: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1
    except WorkerTimeout as e:
        logger.error(f"Run aborted: {e}")
        print(f"error: run aborted: {e}", file=sys.stderr)
        _exit_now(1)
    except WorkerFailure as e:
        logger.error(f"Run aborted: {e}")
        print(f"error: run aborted: {e}", file=sys.stderr)
        return 1

    if result.failures:
        logger.warning(
            f"{len(result.failures)} of {result.summary.records_total} records "
            f"could not be parsed and were skipped"
        )

    print(render(result, settings.report.format))
    return 0


if __name__ == "__main__":
    sys.exit(main())
