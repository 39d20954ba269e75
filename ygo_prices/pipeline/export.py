"""
YGO Price Extractor — Report Exporter

Serializes a BatchReport into a pretty-printed JSON array of
{card_name, price} objects named yugioh-prices-YYYY-MM-DD.json.

build_artifact() produces the named byte buffer; export() is the local
delivery adapter that writes it to a directory.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, TypeAdapter

from ygo_prices.config import NotificationCategory, settings
from ygo_prices.notifications import Notification, NotificationSink
from ygo_prices.pipeline.batch import BatchReport, ResultEntry

logger = structlog.get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"

_ENTRIES_ADAPTER = TypeAdapter(list[ResultEntry])


class ExportArtifact(BaseModel):
    """A downloadable file: name, content type and raw bytes."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content_type: str = JSON_CONTENT_TYPE
    content: bytes


def export_filename(today: date | None = None) -> str:
    day = today or datetime.now(timezone.utc).date()
    return f"{settings.EXPORT_FILENAME_PREFIX}-{day.isoformat()}.json"


class ReportExporter:
    """
    Turns batch reports into JSON artifacts.

    Usage:
        exporter = ReportExporter(sink)
        path = exporter.export(report, output_dir="reports")
    """

    def __init__(self, sink: NotificationSink | None = None):
        self._sink = sink

    def build_artifact(self, report: BatchReport, today: date | None = None) -> ExportArtifact:
        rows = [entry.model_dump() for entry in report.entries]
        body = json.dumps(rows, indent=2, ensure_ascii=False)
        return ExportArtifact(
            filename=export_filename(today),
            content=body.encode("utf-8"),
        )

    def export(
        self,
        report: BatchReport,
        output_dir: str | Path | None = None,
        today: date | None = None,
    ) -> Path:
        """
        Write the report artifact into output_dir and confirm via the sink.

        Existing files with the same date-stamped name are overwritten.
        """
        artifact = self.build_artifact(report, today)
        directory = Path(output_dir if output_dir is not None else settings.EXPORT_DIR)
        directory.mkdir(parents=True, exist_ok=True)

        path = directory / artifact.filename
        path.write_bytes(artifact.content)

        logger.info(
            "report_exported",
            path=str(path),
            entries=len(report),
            size_bytes=len(artifact.content),
        )

        if self._sink is not None:
            self._sink.notify(
                Notification(
                    category=NotificationCategory.EXPORT_COMPLETE,
                    title="JSON file generated",
                    description=f"Your price data has been saved to {path}",
                )
            )
        return path


def load_report(path: str | Path) -> list[ResultEntry]:
    """Parse an exported report back into its ordered entries."""
    return _ENTRIES_ADAPTER.validate_json(Path(path).read_bytes())
