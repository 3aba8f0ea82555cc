"""
Mana curve and color identity calculations.

Pure aggregations over deck entries. Basic lands are identified by
name against the five basic land names; snow-covered and other
"basic" type-line cards are not treated as basics.
"""

from collections.abc import Iterable
from enum import Enum

from decksmith.models.analysis import ManaCurvePoint
from decksmith.models.card import BASIC_LAND_NAMES, Card
from decksmith.models.deck import DeckCard

COLOR_ORDER: tuple[str, ...] = ("W", "U", "B", "R", "G", "C")


class CardCategory(str, Enum):
    """Display grouping for deck lists, in display order."""

    BASIC_LAND = "Basic Land"
    NONBASIC_LAND = "Nonbasic Land"
    CREATURE = "Creature"
    PLANESWALKER = "Planeswalker"
    ARTIFACT = "Artifact"
    ENCHANTMENT = "Enchantment"
    INSTANT = "Instant"
    SORCERY = "Sorcery"
    OTHER = "Other"


_CATEGORY_ORDER = {category: index for index, category in enumerate(CardCategory)}


def is_basic_land(card: Card | str) -> bool:
    """True for the five basic land names."""
    name = card if isinstance(card, str) else card.name
    return name in BASIC_LAND_NAMES


def get_total_count(cards: Iterable[DeckCard]) -> int:
    """Sum of quantities."""
    return sum(entry.quantity for entry in cards)


def get_land_count(cards: Iterable[DeckCard]) -> int:
    """Copies of cards whose type line contains "land"."""
    return sum(entry.quantity for entry in cards if entry.card.is_land)


def calculate_mana_curve(cards: Iterable[DeckCard]) -> list[ManaCurvePoint]:
    """
    Mana value -> card count, ascending by mana value.

    Fractional mana values (un-set cards) are floored.
    """
    curve: dict[int, int] = {}
    for entry in cards:
        cmc = int(entry.card.cmc or 0)
        curve[cmc] = curve.get(cmc, 0) + entry.quantity
    return [ManaCurvePoint(cmc=cmc, count=count) for cmc, count in sorted(curve.items())]


def average_mana_value(curve: list[ManaCurvePoint]) -> float:
    """Quantity-weighted average mana value. 0.0 for an empty curve."""
    total = sum(point.count for point in curve)
    if total == 0:
        return 0.0
    return sum(point.cmc * point.count for point in curve) / total


def count_at_or_below(curve: list[ManaCurvePoint], cmc: int) -> int:
    return sum(point.count for point in curve if point.cmc <= cmc)


def count_at_or_above(curve: list[ManaCurvePoint], cmc: int) -> int:
    return sum(point.count for point in curve if point.cmc >= cmc)


def get_color_distribution(cards: Iterable[DeckCard]) -> dict[str, int]:
    """
    Quantity-weighted color identity counts.

    The "C" key is always present for display but colorless cards
    don't add to it. A multicolor card counts once for each color.
    """
    distribution = dict.fromkeys(COLOR_ORDER, 0)
    for entry in cards:
        for color in entry.card.color_identity:
            distribution[color] = distribution.get(color, 0) + entry.quantity
    return distribution


def get_color_identity(cards: Iterable[DeckCard]) -> set[str]:
    """Union of the color identities of the given cards."""
    colors: set[str] = set()
    for entry in cards:
        colors.update(entry.card.color_identity)
    return colors


def get_card_category(card: Card) -> CardCategory:
    """Categorize a card for display, checking basic lands first."""
    if is_basic_land(card):
        return CardCategory.BASIC_LAND

    type_line = card.types
    if "land" in type_line:
        return CardCategory.NONBASIC_LAND
    if "creature" in type_line:
        return CardCategory.CREATURE
    if "planeswalker" in type_line:
        return CardCategory.PLANESWALKER
    if "instant" in type_line:
        return CardCategory.INSTANT
    if "sorcery" in type_line:
        return CardCategory.SORCERY
    if "enchantment" in type_line:
        return CardCategory.ENCHANTMENT
    if "artifact" in type_line:
        return CardCategory.ARTIFACT
    return CardCategory.OTHER


def group_by_category(cards: Iterable[DeckCard]) -> dict[CardCategory, list[DeckCard]]:
    """Group entries by category, categories in display order, cards sorted by name."""
    groups: dict[CardCategory, list[DeckCard]] = {}
    for entry in cards:
        groups.setdefault(get_card_category(entry.card), []).append(entry)

    return {
        category: sorted(groups[category], key=lambda e: e.card.name)
        for category in sorted(groups, key=_CATEGORY_ORDER.__getitem__)
    }
