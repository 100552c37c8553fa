"""
Command-line interface for helm-list-charts.

Usage:
    helm-list-charts --source https://charts.example.com
    helm-list-charts --source https://charts.example.com --chart nginx
    helm-list-charts --source https://charts.example.com --type library --no-pager
"""

from __future__ import annotations

import argparse
import sys
from typing import Mapping, Sequence

from . import __version__
from .common import ListChartsError
from .config import DEFAULT_TIMEOUT_SECONDS, ConfigError, RunConfig
from .fetcher import fetch_index
from .filters import FilterCriteria, filter_entries
from .grouping import group_and_sort
from .index import parse_index
from .logging_config import get_logger, setup_logging
from .pager import Destination, emit
from .render import render_table


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="helm-list-charts",
        description="List the charts published in a Helm chart repository",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "environment:\n"
            "  NO_PAGER, HELM_LIST_CHARTS_NO_PAGER  disable the pager\n"
            "  PAGER                               pager command (default: less)"
        ),
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--source",
        required=True,
        help="Chart repository URL (e.g. https://bitnami-labs.github.io/sealed-secrets)",
    )
    parser.add_argument(
        "--chart",
        help="Only list this chart (case insensitive exact match)",
    )
    parser.add_argument(
        "--type",
        dest="chart_type",
        help='Only list charts of this type (case insensitive, e.g. "application" or "library")',
    )
    parser.add_argument(
        "--no-pager",
        action="store_true",
        help="Disable the pager (used by default for outputs longer than 25 lines)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on index entries with an invalid semantic version instead of skipping them",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_SECONDS,
        help=f"Network timeout in seconds (default: {DEFAULT_TIMEOUT_SECONDS:g})",
    )
    parser.add_argument(
        "--description-width",
        type=int,
        metavar="N",
        help="Shorten descriptions longer than N characters",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only report errors on stderr",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Write a debug log of the run to PATH",
    )
    return parser


def run(
    config: RunConfig,
    stdout: Destination | None = None,
    pager: Destination | None = None,
) -> int:
    """
    Fetch, filter and print a repository's chart listing.

    Args:
        config: Resolved run configuration
        stdout: Override for the direct output destination
        pager: Override for the pager destination

    Returns:
        Process exit code

    Raises:
        ListChartsError: If the index cannot be fetched, parsed or rendered
    """
    logger = get_logger()

    raw = fetch_index(config.source, timeout=config.timeout)
    document = parse_index(raw, strict=config.strict)

    criteria = FilterCriteria(chart_name=config.chart, chart_type=config.chart_type)
    groups = group_and_sort(filter_entries(document, criteria))

    if not groups:
        if config.chart:
            logger.warning(f"No charts found for chart name: {config.chart}")
        else:
            logger.warning("No charts found.")

    table = render_table(groups, description_width=config.description_width)
    emit(table, config.pager, stdout=stdout, pager=pager)
    return 0


def main(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Main entry point for helm-list-charts."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = RunConfig.from_args(args, environ)
    except ConfigError as e:
        parser.error(str(e))

    try:
        logger = setup_logging(
            verbose=config.verbose,
            quiet=config.quiet,
            log_file=config.log_file,
        )
    except OSError as e:
        parser.error(f"cannot open log file {config.log_file}: {e}")

    try:
        return run(config)
    except ListChartsError as e:
        logger.error(str(e))
        logger.debug("Details:", exc_info=True)
        return 1


def entry_point() -> None:
    """Console script wrapper with clean Ctrl-C handling."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)
