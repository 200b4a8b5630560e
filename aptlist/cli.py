"""Command-line interface: scan the apt source lists and print a report."""

import argparse
import logging
from asyncio import run, to_thread
from time import time
from typing import List, Optional

from .constants import LIST_SUFFIX, SOURCES_LIST, SOURCES_PARTS
from .errors import SourceError
from .redundancy import find_duplicate_targets, generate_redundancy_report
from .reporting import generate_report
from .sources import SourcesList
from .status import StatusSpinner

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for ``python -m aptlist``."""
    parser = argparse.ArgumentParser(
        prog="aptlist", description="Parse apt source lists and derive their URLs."
    )
    parser.add_argument("--root", default=SOURCES_LIST, help="Main sources.list path.")
    parser.add_argument(
        "--parts", default=SOURCES_PARTS, help="Directory holding list fragments."
    )
    parser.add_argument(
        "--suffix", default=LIST_SUFFIX, help="File name suffix of list fragments."
    )
    parser.add_argument(
        "--skip-unreadable",
        action="store_true",
        help="Skip fragments that cannot be read instead of failing.",
    )
    parser.add_argument(
        "--urls",
        action="store_true",
        help="Print the pool and dist-index URLs of every entry.",
    )
    parser.add_argument(
        "--upgrade",
        nargs=2,
        metavar=("FROM", "TO"),
        help="Point HTTP entries of suite FROM at suite TO and write the lists "
        "back, keeping .save backups.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Run a scan and print the report; return the process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level)

    start_time = time()
    spinner = StatusSpinner()
    try:
        sources = await spinner.show_progress(
            "Source lists: Scanning...",
            to_thread(
                SourcesList.scan,
                root=args.root,
                parts_dir=args.parts,
                suffix=args.suffix,
                skip_unreadable=args.skip_unreadable,
                progress_callback=spinner.update_progress,
            ),
        )
    except SourceError as e:
        spinner.update_status("❌ Source lists: Failed")
        logger.error("An error occurred while scanning: %s", e)
        return 1

    spinner.update_status(f"✅ Source lists: Complete - {len(sources)} lists")

    if args.upgrade:
        from_suite, to_suite = args.upgrade
        try:
            upgraded = sources.dist_upgrade(from_suite, to_suite)
        except SourceError as e:
            spinner.update_status("❌ Upgrade: Failed, backups restored")
            logger.error("An error occurred while writing: %s", e)
            return 1
        changed = len(upgraded.modified_files(sources))
        spinner.update_status(
            f"✅ Upgrade: {from_suite} -> {to_suite} - {changed} lists rewritten"
        )
        sources = upgraded

    redundancy = generate_redundancy_report(find_duplicate_targets(sources))
    generate_report(sources, redundancy, start_time, show_urls=args.urls)
    return 0


def console_main() -> int:
    """Synchronous wrapper used by the ``aptlist`` console script."""
    return run(main())
