"""
YGO Price Extractor — Text rendering for search results

Formats marketplace prices as USD and renders a card record as a short,
multi-line summary for the CLI.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from ygo_prices.config import PriceSource
from ygo_prices.pipeline.ygoprodeck import CardData

_TWO_DP = Decimal("0.01")

# Marketplaces shown in a card summary, in display order.
_DISPLAY_SOURCES: tuple[tuple[str, PriceSource], ...] = (
    ("TCGPlayer", PriceSource.TCGPLAYER),
    ("Cardmarket", PriceSource.CARDMARKET),
    ("eBay", PriceSource.EBAY),
    ("Amazon", PriceSource.AMAZON),
)

_MAX_SETS_SHOWN = 3


def format_price(price: str | int | float | Decimal | None) -> str:
    """
    Format a price as US dollars with two decimals.

    Returns "N/A" for missing or non-numeric values.

    Examples:
        >>> format_price("1234.5")
        '$1,234.50'
        >>> format_price(None)
        'N/A'
    """
    if price is None:
        return "N/A"
    try:
        value = Decimal(str(price).strip())
    except InvalidOperation:
        return "N/A"
    if not value.is_finite():
        return "N/A"

    value = value.quantize(_TWO_DP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_card_summary(card: CardData) -> str:
    """Render one card: name, type line, image, prices and up to three printings."""
    lines = [card.name]

    type_line = card.type
    details = [part for part in (card.race, card.attribute) if part]
    if details:
        type_line = f"{type_line} ({' / '.join(details)})" if type_line else " / ".join(details)
    if type_line:
        lines.append(f"  {type_line}")

    if card.archetype:
        lines.append(f"  Archetype: {card.archetype}")

    if card.image_url:
        lines.append(f"  Image: {card.image_url}")

    for label, source in _DISPLAY_SOURCES:
        lines.append(f"  {label + ':':<12}{format_price(card.price_for(source))}")

    if card.card_sets:
        lines.append("  Sets:")
        for card_set in card.card_sets[:_MAX_SETS_SHOWN]:
            lines.append(
                f"    {card_set.set_code} {card_set.set_name} "
                f"[{card_set.set_rarity}] {format_price(card_set.set_price)}"
            )
        remaining = len(card.card_sets) - _MAX_SETS_SHOWN
        if remaining > 0:
            lines.append(f"    +{remaining} more sets")

    return "\n".join(lines)
