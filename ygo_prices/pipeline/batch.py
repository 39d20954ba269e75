"""
YGO Price Extractor — Batch Processor

Drives the lookup client across a list of candidate names and accumulates
one ResultEntry per name, in input order.

Rules:
- Strictly sequential: one lookup in flight at a time, followed by a fixed
  pacing delay (rate limiting against the public API).
- Per-name failures never abort the run. A miss becomes "Not found", a
  raised lookup (or timeout) becomes "Error".
- Progress is derived from completed/total, stays below 100 while the loop
  runs and is set to exactly 100 once the last name is done.
- Each run owns its entries and ProgressTracker; nothing is shared between
  runs.
"""

from __future__ import annotations

import asyncio
from typing import Protocol, Sequence

import structlog
from pydantic import BaseModel, ConfigDict

from ygo_prices.config import (
    ERROR_PRICE,
    NOT_FOUND_PRICE,
    BatchOutcome,
    NotificationCategory,
    PriceSource,
    settings,
)
from ygo_prices.notifications import Notification, NotificationSink
from ygo_prices.pipeline.ygoprodeck import CardData

logger = structlog.get_logger(__name__)


class CardLookup(Protocol):
    """Anything that resolves a name to card records (YGOProDeckClient, stubs)."""

    async def lookup(self, card_name: str) -> list[CardData]:
        ...


# ---------------------------------------------------------------------------
# Report Models
# ---------------------------------------------------------------------------


class ResultEntry(BaseModel):
    """One line of the price report. Field order is the export order."""

    model_config = ConfigDict(frozen=True)

    card_name: str
    price: str

    @property
    def is_not_found(self) -> bool:
        return self.price == NOT_FOUND_PRICE

    @property
    def is_error(self) -> bool:
        return self.price == ERROR_PRICE


class BatchReport(BaseModel):
    """Ordered, immutable result of a batch run."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[ResultEntry, ...] = ()
    cancelled: bool = False

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def not_found_count(self) -> int:
        return sum(1 for e in self.entries if e.is_not_found)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self.entries if e.is_error)

    @property
    def success_count(self) -> int:
        return len(self.entries) - self.not_found_count - self.error_count

    @property
    def outcome(self) -> BatchOutcome:
        if self.cancelled:
            return BatchOutcome.CANCELLED
        if self.not_found_count + self.error_count > 0:
            return BatchOutcome.PARTIAL
        return BatchOutcome.SUCCESS


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


class ProgressTracker:
    """
    Monotonic progress percentage for one batch run.

    advance() reports completed/total capped at the ceiling; only complete()
    reaches 100.
    """

    def __init__(self, total: int, sink: NotificationSink, ceiling: float | None = None):
        self.total = total
        self._sink = sink
        self._ceiling = ceiling if ceiling is not None else settings.PROGRESS_CEILING
        self.percent = 0.0

    def _publish(self, percent: float) -> None:
        if percent < self.percent:
            return
        self.percent = percent
        self._sink.progress(percent)

    def advance(self, completed: int) -> None:
        if self.total <= 0:
            return
        self._publish(min(100.0 * completed / self.total, self._ceiling))

    def complete(self) -> None:
        self._publish(100.0)


def needs_confirmation(count: int, threshold: int | None = None) -> bool:
    """Whether a batch of this size must be confirmed by the user first."""
    limit = threshold if threshold is not None else settings.BATCH_CONFIRM_THRESHOLD
    return count > limit


# ---------------------------------------------------------------------------
# Processor
# ---------------------------------------------------------------------------


class BatchProcessor:
    """
    Sequential, paced batch lookup.

    Usage:
        async with YGOProDeckClient(sink=sink) as client:
            processor = BatchProcessor(client, sink)
            report = await processor.run(["Kuriboh", "Dark Magician"])
    """

    def __init__(
        self,
        lookup: CardLookup,
        sink: NotificationSink,
        pacing_seconds: float | None = None,
        status_every: int | None = None,
        lookup_timeout: float | None = None,
        price_source: PriceSource | None = None,
    ):
        self._lookup = lookup
        self._sink = sink
        self._pacing_seconds = (
            pacing_seconds if pacing_seconds is not None else settings.BATCH_PACING_SECONDS
        )
        self._status_every = max(
            1, status_every if status_every is not None else settings.BATCH_STATUS_EVERY
        )
        self._lookup_timeout = (
            lookup_timeout if lookup_timeout is not None else settings.LOOKUP_TIMEOUT_SECONDS
        )
        self._price_source = price_source or settings.PRIMARY_PRICE_SOURCE

    def _notify(
        self,
        category: NotificationCategory,
        title: str,
        description: str,
        destructive: bool = False,
    ) -> None:
        self._sink.notify(
            Notification(
                category=category,
                title=title,
                description=description,
                destructive=destructive,
            )
        )

    async def _resolve(self, name: str) -> ResultEntry:
        """Look up one name and turn the outcome into a report entry."""
        try:
            if self._lookup_timeout:
                cards = await asyncio.wait_for(
                    self._lookup.lookup(name), timeout=self._lookup_timeout
                )
            else:
                cards = await self._lookup.lookup(name)
        except Exception as e:
            logger.error(
                "batch_lookup_failed",
                card_name=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return ResultEntry(card_name=name, price=ERROR_PRICE)

        if not cards:
            logger.info("batch_lookup_not_found", card_name=name)
            return ResultEntry(card_name=name, price=NOT_FOUND_PRICE)

        first = cards[0]
        price = first.price_for(self._price_source) or settings.MISSING_PRICE_FALLBACK
        return ResultEntry(card_name=first.name, price=price)

    def _summarize(self, report: BatchReport) -> None:
        failed = report.not_found_count + report.error_count
        if failed > 0:
            self._notify(
                NotificationCategory.BATCH_COMPLETE_PARTIAL,
                "Processing complete",
                f"Found {report.success_count} cards, {failed} not found or errors",
                destructive=True,
            )
        else:
            self._notify(
                NotificationCategory.BATCH_COMPLETE_SUCCESS,
                "Processing complete",
                f"Successfully processed all {report.success_count} cards",
            )

    async def run(
        self,
        names: Sequence[str],
        cancel_event: asyncio.Event | None = None,
    ) -> BatchReport:
        """
        Process every name in order and return the report.

        Blank names are dropped up front. With no names left, a validation
        notification is emitted and an empty report returned without any
        lookup. Setting cancel_event stops the run before the next name and
        returns the partial report with cancelled=True.
        """
        candidates = [name.strip() for name in names if name.strip()]
        if not candidates:
            logger.warning("batch_no_valid_names", raw_count=len(names))
            self._notify(
                NotificationCategory.VALIDATION_ERROR,
                "No valid names",
                "The input doesn't contain any card names",
                destructive=True,
            )
            return BatchReport()

        total = len(candidates)
        entries: list[ResultEntry] = []
        tracker = ProgressTracker(total, self._sink)

        logger.info(
            "batch_run_start",
            total=total,
            pacing_seconds=self._pacing_seconds,
            price_source=self._price_source.value,
        )

        for index, name in enumerate(candidates):
            if cancel_event is not None and cancel_event.is_set():
                report = BatchReport(entries=tuple(entries), cancelled=True)
                logger.info("batch_run_cancelled", processed=len(entries), total=total)
                self._notify(
                    NotificationCategory.BATCH_CANCELLED,
                    "Processing cancelled",
                    f"Stopped after {len(entries)} of {total} cards",
                    destructive=True,
                )
                return report

            entries.append(await self._resolve(name))
            tracker.advance(index + 1)

            is_last = index == total - 1
            if index % self._status_every == 0 or is_last:
                self._notify(
                    NotificationCategory.PROGRESS_TICK,
                    "Processing cards",
                    f"Processed {index + 1} of {total} cards",
                )

            if not is_last and self._pacing_seconds > 0:
                await asyncio.sleep(self._pacing_seconds)

        tracker.complete()
        report = BatchReport(entries=tuple(entries))

        logger.info(
            "batch_run_complete",
            total=total,
            success=report.success_count,
            not_found=report.not_found_count,
            errors=report.error_count,
            outcome=report.outcome.value,
        )
        self._summarize(report)
        return report
