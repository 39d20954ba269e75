"""Tests for settings defaults and environment overrides."""

from __future__ import annotations

import pytest

from ygo_prices.config import PriceSource, Settings


def test_defaults() -> None:
    s = Settings(_env_file=None)

    assert s.YGOPRODECK_BASE_URL == "https://db.ygoprodeck.com/api/v7"
    assert s.BATCH_PACING_SECONDS == 0.1
    assert s.BATCH_CONFIRM_THRESHOLD == 20
    assert s.BATCH_STATUS_EVERY == 5
    assert s.PRIMARY_PRICE_SOURCE is PriceSource.TCGPLAYER
    assert s.MISSING_PRICE_FALLBACK == "0.00"
    assert s.EXPORT_FILENAME_PREFIX == "yugioh-prices"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BATCH_PACING_SECONDS", "0")
    monkeypatch.setenv("PRIMARY_PRICE_SOURCE", "cardmarket_price")
    monkeypatch.setenv("BATCH_CONFIRM_THRESHOLD", "50")

    s = Settings(_env_file=None)

    assert s.BATCH_PACING_SECONDS == 0.0
    assert s.PRIMARY_PRICE_SOURCE is PriceSource.CARDMARKET
    assert s.BATCH_CONFIRM_THRESHOLD == 50
