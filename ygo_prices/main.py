"""
YGO Price Extractor — Command-line Entrypoint

Configures structlog and dispatches the CLI commands:

    ygo-prices search "Dark Magician"
    ygo-prices search "Blue-Eyes White Dragon, Dark Magician" --output-dir reports
    ygo-prices batch cards.csv --yes
    ygo-prices sets

A search containing a comma is treated as a batch of names; otherwise matching
cards are printed with their marketplace prices. Batch runs end with a JSON
price report written to the output directory.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from typing import Callable, Sequence

import structlog

from ygo_prices import __version__
from ygo_prices.config import NotificationCategory, settings
from ygo_prices.errors import PriceExtractorError
from ygo_prices.notifications import (
    ConsoleNotificationSink,
    FanoutNotificationSink,
    LogNotificationSink,
    Notification,
    NotificationSink,
)
from ygo_prices.pipeline.batch import BatchProcessor, needs_confirmation
from ygo_prices.pipeline.export import ReportExporter
from ygo_prices.pipeline.name_sources import (
    is_batch_query,
    parse_free_text,
    read_name_file,
    validate_query,
)
from ygo_prices.pipeline.ygoprodeck import YGOProDeckClient
from ygo_prices.utils.display import format_card_summary

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_CANCELLED = 130

InputFn = Callable[[str], str]


# ---------------------------------------------------------------------------
# Structlog Configuration
# ---------------------------------------------------------------------------


def _configure_logging(log_level: str = "INFO") -> None:
    """
    Set up structured logging with JSON output on stderr.

    stdout is reserved for command output (card summaries, report paths).

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
    """
    # Configure stdlib logging first (for third-party libraries such as httpx)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Argument Parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ygo-prices",
        description="Look up Yu-Gi-Oh! card prices via the YGOPRODeck API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ygo-prices search "Dark Magician"
  ygo-prices search "Blue-Eyes White Dragon, Dark Magician, Kuriboh"
  ygo-prices batch cards.csv --output-dir reports --yes
  ygo-prices sets
""",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        help=f"Logging level for stderr JSON logs (default: {settings.LOG_LEVEL}).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    batch_options = argparse.ArgumentParser(add_help=False)
    batch_options.add_argument(
        "--output-dir",
        default=settings.EXPORT_DIR,
        help=f"Directory for the JSON price report (default: {settings.EXPORT_DIR}).",
    )
    batch_options.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help=f"Skip the confirmation asked for more than "
        f"{settings.BATCH_CONFIRM_THRESHOLD} cards.",
    )

    search = subparsers.add_parser(
        "search",
        parents=[batch_options],
        help="Search one card, or several comma-separated names as a batch.",
    )
    search.add_argument("query", help="Card name, or comma-separated card names.")

    batch = subparsers.add_parser(
        "batch",
        parents=[batch_options],
        help="Price every card listed in a CSV file (one name per row).",
    )
    batch.add_argument("file", help="Path to a .csv file with one card name per row.")

    subparsers.add_parser("sets", help="List all card sets.")
    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _confirm_large_batch(count: int, assume_yes: bool, input_fn: InputFn) -> bool:
    if assume_yes or not needs_confirmation(count):
        return True
    answer = input_fn(
        f"You're about to process {count} cards. This might take some time "
        f"and could result in API rate limits. Continue? [y/N] "
    )
    return answer.strip().lower() in {"y", "yes"}


def _install_cancel_handler(cancel_event: asyncio.Event) -> bool:
    """Route SIGINT to the batch cancel event. Returns False where unsupported."""
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel_event.set)
    except (NotImplementedError, RuntimeError):
        # Windows event loops and non-main threads
        return False
    return True


def _remove_cancel_handler() -> None:
    loop = asyncio.get_running_loop()
    try:
        loop.remove_signal_handler(signal.SIGINT)
    except (NotImplementedError, RuntimeError):
        pass


async def run_batch(
    names: Sequence[str],
    sink: NotificationSink,
    output_dir: str,
    assume_yes: bool = False,
    input_fn: InputFn = input,
) -> int:
    """Confirm, process and export a batch of names."""
    logger = structlog.get_logger(__name__)

    if names and not _confirm_large_batch(len(names), assume_yes, input_fn):
        logger.info("batch_declined_by_user", names_count=len(names))
        return EXIT_REJECTED

    cancel_event = asyncio.Event()
    handler_installed = _install_cancel_handler(cancel_event)
    try:
        async with YGOProDeckClient(sink=sink) as client:
            report = await BatchProcessor(client, sink).run(names, cancel_event=cancel_event)
    finally:
        if handler_installed:
            _remove_cancel_handler()

    if not report.entries:
        return EXIT_CANCELLED if report.cancelled else EXIT_REJECTED

    path = ReportExporter(sink).export(report, output_dir=output_dir)
    print(path)
    return EXIT_CANCELLED if report.cancelled else EXIT_OK


async def run_search(query: str, sink: NotificationSink) -> int:
    """Single-card search: print every match with its prices."""
    async with YGOProDeckClient(sink=sink) as client:
        cards = await client.lookup(query)

    if not cards:
        sink.notify(
            Notification(
                category=NotificationCategory.UPSTREAM_MISS,
                title="No results found",
                description=f'No cards matching "{query}" were found.',
            )
        )
        return EXIT_OK

    print(f"Found {len(cards)} card{'s' if len(cards) != 1 else ''}")
    for card in cards:
        print()
        print(format_card_summary(card))
    return EXIT_OK


async def run_sets(sink: NotificationSink) -> int:
    async with YGOProDeckClient(sink=sink) as client:
        card_sets = await client.fetch_card_sets()

    for card_set in card_sets:
        released = card_set.tcg_date or "unreleased"
        print(f"{card_set.set_code:<8} {card_set.set_name} ({card_set.num_of_cards} cards, {released})")
    return EXIT_OK


async def main(
    argv: Sequence[str] | None = None,
    sink: NotificationSink | None = None,
    input_fn: InputFn = input,
) -> int:
    """
    Parse arguments and run the selected command.

    Validation and file-format rejections are reported to the sink and end
    with exit code 1; nothing is looked up in that case.
    """
    args = build_parser().parse_args(argv)

    _configure_logging(log_level=args.log_level)
    logger = structlog.get_logger(__name__)

    if sink is None:
        sink = FanoutNotificationSink(ConsoleNotificationSink(), LogNotificationSink())

    logger.info("ygo_prices_command_start", command=args.command, version=__version__)

    try:
        if args.command == "search":
            query = validate_query(args.query)
            if is_batch_query(query):
                return await run_batch(
                    parse_free_text(query), sink, args.output_dir, args.yes, input_fn
                )
            return await run_search(query, sink)

        if args.command == "batch":
            names = read_name_file(args.file)
            return await run_batch(names, sink, args.output_dir, args.yes, input_fn)

        return await run_sets(sink)

    except PriceExtractorError as e:
        logger.warning(
            "ygo_prices_input_rejected",
            command=args.command,
            error=str(e),
            error_type=type(e).__name__,
        )
        sink.notify(
            Notification(
                category=NotificationCategory.VALIDATION_ERROR,
                title="Invalid input",
                description=str(e),
                destructive=True,
            )
        )
        return EXIT_REJECTED


# ---------------------------------------------------------------------------
# CLI Entry
# ---------------------------------------------------------------------------


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
