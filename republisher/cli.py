"""
Command-line entry point: `republisher scan|publish|schedule [layers]`.

Exit codes: 0 run completed, 1 configuration error or unreadable
snapshot, 2 partial failure (scan finished with errors, or a publish
group aborted).
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

from republisher.categories import PROCESSING_HIERARCHY, parse_requested_categories
from republisher.outcomes import (
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_PARTIAL_FAILURE,
    publish_exit_code,
)
from republisher.publisher import run_publish
from republisher.scanner import run_scan
from republisher.scheduler import run_scheduler
from republisher.snapshot import SnapshotError, format_table
from shared.config import AppConfig, ConfigError, get_config
from shared.logging import configure_logging, get_logger, level_from_name

LAYERS_HELP = (
    "optional comma-separated list of module layers to process "
    "(case-insensitive); all layers when omitted"
)

EXAMPLES = f"""
examples:
  republisher {{command}}                  process all layers
  republisher {{command}} OS               process only OS modules
  republisher {{command}} OS,UI            process OS and UI modules
  republisher {{command}} BL,SBL,OS        process BL, SBL and OS modules

available layers: {", ".join(PROCESSING_HIERARCHY)}
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="republisher",
        description="Find Service Center modules with warnings and republish them.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    commands = (
        ("scan", "scan the module list and write the snapshot", _scan_command),
        ("publish", "republish the snapshot modules on every target", _publish_command),
        ("schedule", "run scan then publish now and on a recurring schedule", _schedule_command),
    )
    for name, help_text, handler in commands:
        sub = subparsers.add_parser(
            name,
            help=help_text,
            description=help_text,
            epilog=EXAMPLES.format(command=name),
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        sub.add_argument("layers", nargs="?", default=None, help=LAYERS_HELP)
        sub.set_defaults(handler=handler)

    return parser


def _scan_command(args: argparse.Namespace, config: AppConfig) -> int:
    logger = get_logger(__name__)
    categories = parse_requested_categories(args.layers)
    result = asyncio.run(run_scan(config, categories))

    if result.records:
        print(format_table(result.records))
    if not result.completed:
        logger.warning(
            "scan.finished_with_errors",
            error=result.error,
            saved=len(result.records),
        )
        return EXIT_PARTIAL_FAILURE

    logger.info(
        "scan.summary",
        total=len(result.records),
        categories=list(categories) if categories else "all",
    )
    return EXIT_OK


def _publish_command(args: argparse.Namespace, config: AppConfig) -> int:
    logger = get_logger(__name__)
    categories = parse_requested_categories(args.layers)
    try:
        results = asyncio.run(run_publish(config, categories))
    except SnapshotError as e:
        logger.error("publish.snapshot_unreadable", error=str(e))
        return EXIT_CONFIG_ERROR

    logger.info(
        "publish.process_complete",
        categories=list(categories) if categories else "all",
    )
    return publish_exit_code(results)


def _schedule_command(args: argparse.Namespace, config: AppConfig) -> int:
    logger = get_logger(__name__)
    try:
        asyncio.run(run_scheduler(config, args.layers))
    except ValueError as e:
        logger.error("schedule.invalid_cron", cron=config.schedule_cron, error=str(e))
        return EXIT_CONFIG_ERROR
    except KeyboardInterrupt:
        logger.info("schedule.interrupted")
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv()
    try:
        config = get_config()
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging(
        level=level_from_name(config.log_level),
        log_file=config.log_file,
        log_stdout=config.log_stdout,
    )
    return args.handler(args, config)
