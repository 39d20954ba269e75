"""
YGO Price Extractor — Exception hierarchy.

Pre-loop failures (blank input, rejected uploads) surface to the caller.
Per-name lookup failures are caught inside the batch loop and recorded as
report entries instead.
"""

from __future__ import annotations


class PriceExtractorError(Exception):
    """Base exception for all price extractor errors."""


class InputValidationError(PriceExtractorError):
    """Empty or blank input, rejected before any network activity."""


class FileFormatError(PriceExtractorError):
    """Uploaded file is not CSV-like (wrong extension and content type)."""


class CardLookupError(PriceExtractorError):
    """A single card lookup against YGOPRODeck failed."""

    def __init__(self, message: str, card_name: str = "") -> None:
        super().__init__(message)
        self.card_name = card_name


class CardNotFoundError(CardLookupError):
    """The API answered, but no card matches the query."""


class TransientLookupError(CardLookupError):
    """Transport failure, unexpected status, or malformed response body."""

    def __init__(
        self,
        message: str,
        card_name: str = "",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, card_name=card_name)
        self.status_code = status_code
