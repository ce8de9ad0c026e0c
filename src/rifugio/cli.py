"""Command line entry point: print bed availability for a range of days.

Exit codes:
  0 = success (one line per day on stdout)
  1 = page failed to load, results table missing, or browser error (stderr)
  2 = invalid configuration (stderr)
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from src.rifugio.checker import AvailabilityChecker
from src.rifugio.config import CheckerConfig
from src.rifugio.errors import ScrapingError
from src.rifugio.logging import get_logger, setup_logging
from src.rifugio.models import CheckRun
from src.rifugio.report import format_report, report_as_json
from src.rifugio.session import BrowserSession

log = get_logger(__name__)


def _error(msg: str) -> None:
    """Diagnostics go to stderr so stdout stays clean for the report."""
    print(msg, file=sys.stderr)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Check free beds per day on the rifugio availability page.",
    )
    parser.add_argument("--start-day", type=int, help="First day to report (inclusive).")
    parser.add_argument("--end-day", type=int, help="Last day to report (inclusive).")
    parser.add_argument(
        "--min-beds",
        type=int,
        help="Minimum free beds for a day to be reported as available.",
    )
    parser.add_argument("--url", type=str, help="Availability page URL.")
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Launch browser in headed mode (visible window).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON instead of one line per day.",
    )
    parser.add_argument(
        "--dump-clickables",
        type=str,
        default=None,
        metavar="PATH",
        help="Write the clickable elements found in every table cell to a JSON file.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every step (DEBUG) to stderr.",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> CheckerConfig:
    """Environment/.env settings with command line values taking precedence."""
    overrides: dict = {}
    if args.start_day is not None:
        overrides["start_day"] = args.start_day
    if args.end_day is not None:
        overrides["end_day"] = args.end_day
    if args.min_beds is not None:
        overrides["min_beds"] = args.min_beds
    if args.url:
        overrides["rifugio_url"] = args.url
    if args.headed:
        overrides["headless"] = False
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return CheckerConfig(**overrides)


async def run_check(config: CheckerConfig, *, collect_clickables: bool = False) -> CheckRun:
    """Open a browser session and run one availability check in it."""
    async with BrowserSession(config) as driver:
        checker = AvailabilityChecker(driver, config)
        return await checker.run(collect_clickables=collect_clickables)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        config = build_config(args)
    except ValidationError as e:
        _error(f"ERROR: invalid configuration: {e}")
        return 2

    setup_logging(json_output=config.log_json, log_level=config.log_level)

    try:
        run = asyncio.run(
            run_check(config, collect_clickables=args.dump_clickables is not None)
        )
    except ScrapingError as e:
        _error(f"ERROR: {e}")
        return 1
    except Exception as e:
        # Browser launch or Playwright failures outside the per-cell handling
        log.debug("check_crashed", error=str(e), type=type(e).__name__)
        _error(f"ERROR: {e}")
        return 1

    if args.dump_clickables is not None and run.clickables is not None:
        output_file = Path(args.dump_clickables)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(
            json.dumps(
                [c.model_dump(mode="json") for c in run.clickables],
                indent=2,
                ensure_ascii=False,
            ),
            encoding="utf-8",
        )
        log.info("clickables_written", path=str(output_file))

    if args.json:
        print(report_as_json(run.report))
    else:
        for line in format_report(run.report):
            print(line)
    return 0


def cli() -> None:
    """Console script entrypoint."""
    sys.exit(main())
