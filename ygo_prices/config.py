"""
YGO Price Extractor — Configuration & Constants

Every endpoint, pacing interval and threshold used by the pipeline lives here.
No hardcoded values in business logic.

Usage:
    from ygo_prices.config import settings
"""

from __future__ import annotations

from enum import Enum

from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PriceSource(str, Enum):
    """Marketplace price fields reported by YGOPRODeck in card_prices[]."""
    TCGPLAYER = "tcgplayer_price"
    CARDMARKET = "cardmarket_price"
    EBAY = "ebay_price"
    AMAZON = "amazon_price"
    COOLSTUFFINC = "coolstuffinc_price"


class NotificationCategory(str, Enum):
    """User-facing message categories emitted through a NotificationSink."""
    VALIDATION_ERROR = "validation_error"
    UPSTREAM_MISS = "upstream_miss"
    GENERIC_ERROR = "generic_error"
    PROGRESS_TICK = "progress_tick"
    BATCH_COMPLETE_SUCCESS = "batch_complete_success"
    BATCH_COMPLETE_PARTIAL = "batch_complete_partial"
    BATCH_CANCELLED = "batch_cancelled"
    EXPORT_COMPLETE = "export_complete"


class BatchOutcome(str, Enum):
    """Classification of a finished batch run."""
    SUCCESS = "success"
    PARTIAL = "partial"      # at least one "Not found" or "Error" entry
    CANCELLED = "cancelled"


# Sentinel prices written into a ResultEntry when no price could be resolved.
NOT_FOUND_PRICE = "Not found"
ERROR_PRICE = "Error"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """
    Central configuration for the price extractor.

    Loads from environment variables (or a local .env) with fallback defaults.
    """

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # -----------------------------------------------------------------------
    # YGOPRODeck API
    # -----------------------------------------------------------------------
    YGOPRODECK_BASE_URL: str = "https://db.ygoprodeck.com/api/v7"
    USER_AGENT: str = "ygo-prices/0.1"
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Upper bound for a single lookup as seen by the batch loop. None disables.
    LOOKUP_TIMEOUT_SECONDS: float | None = 30.0

    # -----------------------------------------------------------------------
    # Batch processing
    # -----------------------------------------------------------------------
    BATCH_PACING_SECONDS: float = 0.1        # fixed pause between lookups
    BATCH_STATUS_EVERY: int = 5              # "Processed N of M" cadence
    BATCH_CONFIRM_THRESHOLD: int = 20        # ask before running more names
    PROGRESS_CEILING: float = 99.0           # in-loop progress never reaches 100

    # -----------------------------------------------------------------------
    # Reporting
    # -----------------------------------------------------------------------
    PRIMARY_PRICE_SOURCE: PriceSource = PriceSource.TCGPLAYER
    MISSING_PRICE_FALLBACK: str = "0.00"
    EXPORT_FILENAME_PREFIX: str = "yugioh-prices"
    EXPORT_DIR: str = "."

    # -----------------------------------------------------------------------
    # Logging
    # -----------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"


# Singleton instance
settings = Settings()
