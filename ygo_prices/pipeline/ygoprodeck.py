"""
YGO Price Extractor — YGOPRODeck API Client (Lookup Client)

Looks up Yu-Gi-Oh! cards by (fuzzy) name via the public YGOPRODeck v7 API.
Each card record carries a list of marketplace price quotes (TCGPlayer,
Cardmarket, eBay, Amazon, CoolStuffInc).

Base URL: https://db.ygoprodeck.com/api/v7
Endpoints: /cardinfo.php?fname=<name>, /cardsets.php

One request per lookup, no retry. lookup() never raises: failures are
reported to the NotificationSink and converted to an empty result.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ygo_prices.config import NotificationCategory, PriceSource, settings
from ygo_prices.errors import CardNotFoundError, TransientLookupError
from ygo_prices.notifications import Notification, NotificationSink

logger = structlog.get_logger(__name__)

CARDINFO_PATH = "/cardinfo.php"
CARDSETS_PATH = "/cardsets.php"

# YGOPRODeck answers an unmatched fname query with HTTP 400 and this message.
_NO_MATCH_MARKER = "no card matching"

# ---------------------------------------------------------------------------
# Pydantic Response Models
# ---------------------------------------------------------------------------


class CardPrice(BaseModel):
    """Marketplace price quotes for a card, as decimal strings."""

    cardmarket_price: str | None = None
    tcgplayer_price: str | None = None
    ebay_price: str | None = None
    amazon_price: str | None = None
    coolstuffinc_price: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def stringify_price(cls, v: Any) -> str | None:
        """Keep prices as strings; numbers are converted, blanks become None."""
        if v is None or v == "":
            return None
        return str(v)


class CardSet(BaseModel):
    """One printing of a card."""

    set_name: str = ""
    set_code: str = ""
    set_rarity: str = ""
    set_rarity_code: str | None = None
    set_price: str | None = None


class CardImage(BaseModel):
    id: int
    image_url: str = ""
    image_url_small: str | None = None
    image_url_cropped: str | None = None


class CardData(BaseModel):
    """A card record from /cardinfo.php."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Card passcode")
    name: str = Field(..., description="Display name")
    type: str = ""
    desc: str = ""
    atk: int | None = None
    defense: int | None = Field(default=None, alias="def")
    level: int | None = None
    race: str = ""
    attribute: str | None = None
    archetype: str | None = None
    card_sets: list[CardSet] = Field(default_factory=list)
    card_images: list[CardImage] = Field(default_factory=list)
    card_prices: list[CardPrice] = Field(default_factory=list)

    def price_for(self, source: PriceSource) -> str | None:
        """Price from the first quote block for the given marketplace, if any."""
        if not self.card_prices:
            return None
        return getattr(self.card_prices[0], source.value)

    @property
    def image_url(self) -> str | None:
        if self.card_images:
            return self.card_images[0].image_url or None
        return None


class CardInfoResponse(BaseModel):
    """Top-level response of /cardinfo.php. A missing data array means no cards."""

    data: list[CardData] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def null_data_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class CardSetInfo(BaseModel):
    """An entry of /cardsets.php."""

    set_name: str
    set_code: str = ""
    num_of_cards: int = 0
    tcg_date: str | None = None
    set_image: str | None = None


# ---------------------------------------------------------------------------
# API Client
# ---------------------------------------------------------------------------


class YGOProDeckClient:
    """
    Async client for the YGOPRODeck v7 API.

    Usage:
        async with YGOProDeckClient(sink=sink) as client:
            cards = await client.lookup("Dark Magician")
    """

    def __init__(
        self,
        sink: NotificationSink | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        self._sink = sink
        self._base_url = base_url or settings.YGOPRODECK_BASE_URL
        self._timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> YGOProDeckClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": settings.USER_AGENT, "Accept": "application/json"},
            timeout=self._timeout,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _notify(self, category: NotificationCategory, title: str, description: str) -> None:
        if self._sink is not None:
            self._sink.notify(
                Notification(
                    category=category,
                    title=title,
                    description=description,
                    destructive=True,
                )
            )

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        assert self._client is not None, "Client not initialized. Use 'async with'."

        try:
            return await self._client.get(path, params=params)
        except httpx.RequestError as e:
            logger.error(
                "ygoprodeck_request_error",
                error=str(e),
                error_type=type(e).__name__,
                path=path,
            )
            raise TransientLookupError(f"Request failed: {e}") from e

    @staticmethod
    def _is_no_match(response: httpx.Response) -> bool:
        if response.status_code == 404:
            return True
        if response.status_code != 400:
            return False
        try:
            body = response.json()
        except ValueError:
            return False
        error = body.get("error", "") if isinstance(body, dict) else ""
        return _NO_MATCH_MARKER in str(error).lower()

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    async def fetch_cards(self, card_name: str) -> list[CardData]:
        """
        Query /cardinfo.php for cards whose name contains card_name.

        Raises:
            CardNotFoundError: the API reports no matching card.
            TransientLookupError: transport failure, other error status,
                or a body that is not a valid card response.
        """
        logger.info("ygoprodeck_fetch_cards", card_name=card_name)

        try:
            response = await self._get(CARDINFO_PATH, params={"fname": card_name})
        except TransientLookupError as e:
            e.card_name = card_name
            raise

        if self._is_no_match(response):
            logger.info(
                "ygoprodeck_card_not_found",
                card_name=card_name,
                status_code=response.status_code,
            )
            raise CardNotFoundError(
                f"API Error: {response.status_code}", card_name=card_name
            )

        if response.is_error:
            logger.error(
                "ygoprodeck_http_error",
                card_name=card_name,
                status_code=response.status_code,
            )
            raise TransientLookupError(
                f"API Error: {response.status_code}",
                card_name=card_name,
                status_code=response.status_code,
            )

        try:
            parsed = CardInfoResponse.model_validate(response.json())
        except ValueError as e:
            # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
            logger.error(
                "ygoprodeck_malformed_response",
                card_name=card_name,
                error=str(e),
            )
            raise TransientLookupError(
                "Malformed response from card API", card_name=card_name
            ) from e

        logger.info(
            "ygoprodeck_fetch_cards_complete",
            card_name=card_name,
            results_count=len(parsed.data),
        )
        return parsed.data

    async def lookup(self, card_name: str) -> list[CardData]:
        """
        Look up cards by name, never raising.

        Blank names short-circuit to [] without a request. A miss or failure
        is reported to the sink and yields [].
        """
        name = card_name.strip()
        if not name:
            return []

        try:
            return await self.fetch_cards(name)
        except CardNotFoundError:
            self._notify(
                NotificationCategory.UPSTREAM_MISS,
                "Card not found",
                "No cards match your search criteria.",
            )
            return []
        except TransientLookupError as e:
            self._notify(
                NotificationCategory.GENERIC_ERROR,
                "Error fetching card data",
                str(e),
            )
            return []

    async def fetch_card_sets(self) -> list[CardSetInfo]:
        """List every card set. Failures are reported to the sink and yield []."""
        logger.info("ygoprodeck_fetch_card_sets")

        try:
            response = await self._get(CARDSETS_PATH)
            if response.is_error:
                raise TransientLookupError(
                    f"API Error: {response.status_code}",
                    status_code=response.status_code,
                )
            payload = response.json()
            if not isinstance(payload, list):
                raise TransientLookupError("Malformed response from card sets API")
            sets = [CardSetInfo.model_validate(item) for item in payload]
        except (TransientLookupError, ValueError) as e:
            logger.error("ygoprodeck_fetch_card_sets_failed", error=str(e))
            self._notify(
                NotificationCategory.GENERIC_ERROR,
                "Error fetching card sets",
                str(e),
            )
            return []

        logger.info("ygoprodeck_fetch_card_sets_complete", total_sets=len(sets))
        return sets
