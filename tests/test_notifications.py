"""Tests for the notification sinks (ygo_prices/notifications.py)."""

from __future__ import annotations

import io
from unittest.mock import MagicMock, patch

import ygo_prices.notifications as notifications_module
from ygo_prices.config import NotificationCategory
from ygo_prices.notifications import (
    ConsoleNotificationSink,
    FanoutNotificationSink,
    LogNotificationSink,
    Notification,
    NotificationSink,
)


def _note(destructive: bool = False, description: str = "Processed 1 of 3 cards") -> Notification:
    return Notification(
        category=NotificationCategory.PROGRESS_TICK,
        title="Processing cards",
        description=description,
        destructive=destructive,
    )


def test_sinks_satisfy_protocol(sink) -> None:
    assert isinstance(LogNotificationSink(), NotificationSink)
    assert isinstance(ConsoleNotificationSink(io.StringIO()), NotificationSink)
    assert isinstance(FanoutNotificationSink(), NotificationSink)
    assert isinstance(sink, NotificationSink)


class TestLogSink:

    def test_info_for_regular_notifications(self) -> None:
        with patch.object(notifications_module, "logger", MagicMock()) as mock_logger:
            LogNotificationSink().notify(_note())

        mock_logger.info.assert_called_once()
        args, kwargs = mock_logger.info.call_args
        assert args == ("notification",)
        assert kwargs["category"] == "progress_tick"
        assert kwargs["description"] == "Processed 1 of 3 cards"

    def test_warning_for_destructive_notifications(self) -> None:
        with patch.object(notifications_module, "logger", MagicMock()) as mock_logger:
            LogNotificationSink().notify(_note(destructive=True))

        mock_logger.warning.assert_called_once()
        mock_logger.info.assert_not_called()

    def test_progress_logged_at_debug(self) -> None:
        with patch.object(notifications_module, "logger", MagicMock()) as mock_logger:
            LogNotificationSink().progress(33.333)

        mock_logger.debug.assert_called_once_with("batch_progress", percent=33.3)


class TestConsoleSink:

    def test_notification_line(self) -> None:
        stream = io.StringIO()
        ConsoleNotificationSink(stream).notify(_note())

        assert stream.getvalue() == "[*] Processing cards: Processed 1 of 3 cards\n"

    def test_destructive_marker_and_no_description(self) -> None:
        stream = io.StringIO()
        ConsoleNotificationSink(stream).notify(_note(destructive=True, description=""))

        assert stream.getvalue() == "[!] Processing cards\n"

    def test_progress_rewrites_line_and_closes_before_notification(self) -> None:
        stream = io.StringIO()
        console = ConsoleNotificationSink(stream)

        console.progress(33.4)
        console.progress(66.6)
        console.notify(_note())

        assert stream.getvalue() == (
            "\rProcessing cards... 33%"
            "\rProcessing cards... 67%"
            "\n[*] Processing cards: Processed 1 of 3 cards\n"
        )

    def test_progress_complete_ends_line(self) -> None:
        stream = io.StringIO()
        console = ConsoleNotificationSink(stream)

        console.progress(100.0)
        console.notify(_note())

        assert stream.getvalue() == (
            "\rProcessing cards... 100%\n[*] Processing cards: Processed 1 of 3 cards\n"
        )


def test_fanout_forwards_to_every_sink(sink) -> None:
    other = MagicMock()
    fanout = FanoutNotificationSink(sink, other)
    note = _note()

    fanout.notify(note)
    fanout.progress(50.0)

    assert sink.notifications == [note]
    assert sink.progress_values == [50.0]
    other.notify.assert_called_once_with(note)
    other.progress.assert_called_once_with(50.0)
