"""
YGO Price Extractor — Name Source Adapters

Turn raw user input into an ordered list of candidate card names:
- free text: comma-separated ("Kuriboh, Dark Magician")
- file content: one name per line (CSV upload)

Both trim every piece, drop empty ones, keep the original order and never
deduplicate. A repeated name yields a repeated report entry.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path

import structlog

from ygo_prices.errors import FileFormatError, InputValidationError

logger = structlog.get_logger(__name__)

_CSV_EXTENSION = ".csv"


def parse_free_text(raw: str) -> list[str]:
    """Split comma-separated input into trimmed, non-empty names."""
    return [piece.strip() for piece in raw.split(",") if piece.strip()]


def is_batch_query(raw: str) -> bool:
    """A search containing a comma goes down the batch path; otherwise it is a single query."""
    return "," in raw


def parse_lines(content: str) -> list[str]:
    """Split file content into trimmed, non-empty lines."""
    return [line.strip() for line in content.split("\n") if line.strip()]


def validate_query(raw: str) -> str:
    """Return the trimmed search term, or raise if nothing was entered."""
    query = raw.strip()
    if not query:
        raise InputValidationError("Please enter a card name to search.")
    return query


def validate_upload(filename: str, content_type: str | None = None) -> None:
    """
    Accept only CSV-like uploads.

    The file passes when its name ends in .csv or its content type mentions
    csv. Without an explicit content type, one is guessed from the filename.

    Raises:
        FileFormatError: neither check passes.
    """
    if content_type is None:
        content_type, _ = mimetypes.guess_type(filename)

    if filename.lower().endswith(_CSV_EXTENSION) or "csv" in (content_type or "").lower():
        return

    logger.warning(
        "name_source_rejected_upload",
        filename=filename,
        content_type=content_type,
    )
    raise FileFormatError(f"Please upload a CSV file (got '{Path(filename).name}')")


def read_name_file(path: str | Path, content_type: str | None = None) -> list[str]:
    """
    Validate and read a name-per-line file.

    Raises:
        FileFormatError: the file is not CSV-like or not UTF-8 text.
        InputValidationError: the file cannot be read.
    """
    path = Path(path)
    validate_upload(path.name, content_type)

    try:
        # utf-8-sig drops the BOM spreadsheet exports like to prepend
        content = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise FileFormatError(f"'{path.name}' is not a UTF-8 text file") from e
    except OSError as e:
        raise InputValidationError(f"Cannot read '{path}': {e.strerror or e}") from e

    names = parse_lines(content)

    logger.info("name_source_file_read", path=str(path), names_count=len(names))
    return names
