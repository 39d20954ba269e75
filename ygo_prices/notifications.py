"""
YGO Price Extractor — Progress & Notification Delivery

The pipeline never talks to a presentation layer directly. Components receive
a NotificationSink and report user-facing messages (validation errors,
upstream misses, progress ticks, batch summaries) through it.

Sinks shipped here:
- LogNotificationSink: structured structlog events
- ConsoleNotificationSink: human-readable lines for the CLI
- FanoutNotificationSink: forwards to several sinks at once
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from typing import Protocol, TextIO, runtime_checkable

import structlog
from pydantic import BaseModel, ConfigDict, Field

from ygo_prices.config import NotificationCategory

logger = structlog.get_logger(__name__)


class Notification(BaseModel):
    """A single user-facing message."""

    model_config = ConfigDict(frozen=True)

    category: NotificationCategory
    title: str
    description: str = ""
    destructive: bool = Field(default=False, description="Render as an error/warning")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


@runtime_checkable
class NotificationSink(Protocol):
    """Receives notifications and progress percentages from the pipeline."""

    def notify(self, notification: Notification) -> None:
        ...

    def progress(self, percent: float) -> None:
        ...


class LogNotificationSink:
    """Emits every notification as a structlog event."""

    def notify(self, notification: Notification) -> None:
        log = logger.warning if notification.destructive else logger.info
        log(
            "notification",
            category=notification.category.value,
            title=notification.title,
            description=notification.description,
            timestamp=notification.created_at.isoformat(),
        )

    def progress(self, percent: float) -> None:
        logger.debug("batch_progress", percent=round(percent, 1))


class ConsoleNotificationSink:
    """
    Writes notifications as plain text lines.

    Progress is rendered on a single, rewritten line; the next notification
    starts on a fresh line.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stderr
        self._progress_open = False

    def _end_progress_line(self) -> None:
        if self._progress_open:
            self._stream.write("\n")
            self._progress_open = False

    def notify(self, notification: Notification) -> None:
        self._end_progress_line()
        marker = "!" if notification.destructive else "*"
        line = f"[{marker}] {notification.title}"
        if notification.description:
            line += f": {notification.description}"
        self._stream.write(line + "\n")
        self._stream.flush()

    def progress(self, percent: float) -> None:
        self._stream.write(f"\rProcessing cards... {round(percent)}%")
        self._stream.flush()
        self._progress_open = True
        if percent >= 100:
            self._end_progress_line()


class FanoutNotificationSink:
    """Forwards each call to every wrapped sink, in order."""

    def __init__(self, *sinks: NotificationSink) -> None:
        self._sinks = sinks

    def notify(self, notification: Notification) -> None:
        for sink in self._sinks:
            sink.notify(notification)

    def progress(self, percent: float) -> None:
        for sink in self._sinks:
            sink.progress(percent)
