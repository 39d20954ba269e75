"""
YGO Price Extractor — Shared pytest Fixtures

Provides common fixtures for all test modules:
- Recording notification sink
- Canned YGOPRODeck card payloads
- Stub lookups for driving the batch processor without HTTP
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from ygo_prices.config import NotificationCategory
from ygo_prices.notifications import Notification
from ygo_prices.pipeline.ygoprodeck import CardData


# ---------------------------------------------------------------------------
# Notification capture
# ---------------------------------------------------------------------------


class RecordingSink:
    """NotificationSink that keeps everything it receives."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []
        self.progress_values: list[float] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def progress(self, percent: float) -> None:
        self.progress_values.append(percent)

    def categories(self) -> list[NotificationCategory]:
        return [n.category for n in self.notifications]

    def of(self, category: NotificationCategory) -> list[Notification]:
        return [n for n in self.notifications if n.category == category]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


# ---------------------------------------------------------------------------
# Card payloads
# ---------------------------------------------------------------------------


def card_payload(
    name: str,
    card_id: int = 89631139,
    tcgplayer_price: str | None = "0.08",
    **overrides: Any,
) -> dict[str, Any]:
    """A /cardinfo.php card object shaped like the live API."""
    prices: dict[str, Any] = {
        "cardmarket_price": "0.02",
        "ebay_price": "1.25",
        "amazon_price": "0.75",
        "coolstuffinc_price": "0.99",
    }
    if tcgplayer_price is not None:
        prices["tcgplayer_price"] = tcgplayer_price

    payload: dict[str, Any] = {
        "id": card_id,
        "name": name,
        "type": "Normal Monster",
        "frameType": "normal",
        "desc": "This legendary dragon is a powerful engine of destruction.",
        "atk": 3000,
        "def": 2500,
        "level": 8,
        "race": "Dragon",
        "attribute": "LIGHT",
        "card_sets": [
            {
                "set_name": "Legend of Blue Eyes White Dragon",
                "set_code": "LOB-001",
                "set_rarity": "Ultra Rare",
                "set_rarity_code": "(UR)",
                "set_price": "41.39",
            }
        ],
        "card_images": [
            {
                "id": card_id,
                "image_url": f"https://images.ygoprodeck.com/images/cards/{card_id}.jpg",
                "image_url_small": f"https://images.ygoprodeck.com/images/cards_small/{card_id}.jpg",
            }
        ],
        "card_prices": [prices],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_card() -> Callable[..., CardData]:
    def _make(name: str, **kwargs: Any) -> CardData:
        return CardData.model_validate(card_payload(name, **kwargs))

    return _make


# ---------------------------------------------------------------------------
# Stub lookups
# ---------------------------------------------------------------------------


class StubLookup:
    """
    In-memory lookup keyed by name.

    Values are a list of CardData (returned) or an exception (raised).
    Unknown names resolve to no cards.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[str] = []

    async def lookup(self, card_name: str) -> list[CardData]:
        self.calls.append(card_name)
        result = self.responses.get(card_name, [])
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def stub_lookup_factory() -> Callable[..., StubLookup]:
    return StubLookup


@pytest.fixture
def make_payload() -> Callable[..., dict[str, Any]]:
    return card_payload
