"""
Deck strategy classification.

Counts archetype keyword hits across the deck, picks an archetype with
a fixed decision cascade over curve shape and the leading mechanic, and
writes a short narrative with strengths and weaknesses.

The thresholds are calibrated against real decklists rather than
derived; changing them changes which label existing decks receive.
"""

import logging
from collections.abc import Iterable

from decksmith.analysis.curve import (
    COLOR_ORDER,
    average_mana_value,
    calculate_mana_curve,
    count_at_or_above,
    count_at_or_below,
    get_color_distribution,
    get_land_count,
    get_total_count,
)
from decksmith.models.analysis import ManaCurvePoint, StrategyAnalysis
from decksmith.models.card import Card
from decksmith.models.deck import Deck

logger = logging.getLogger(__name__)

# Archetype bucket -> keywords tested against rules text and type line
ARCHETYPE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Aggro": ("haste", "trample", "menace", "damage", "attack"),
    "Control": ("counter", "destroy", "exile", "draw", "removal"),
    "Combo": ("whenever", "when", "trigger", "synergy", "combo"),
    "Midrange": ("creature", "value", "card advantage", "threat"),
    "Ramp": ("mana", "land", "add", "ritual", "dork"),
    "Burn": ("damage", "lightning", "shock", "bolt", "direct damage"),
    "Tribal": ("zombie", "elf", "goblin", "human", "wizard", "warrior", "dragon"),
    "Reanimator": ("graveyard", "reanimate", "return", "discard"),
    "Tokens": ("token", "create", "generate", "populate"),
    "Lifegain": ("life", "gain", "lifelink", "heal"),
}

MAX_KEY_MECHANICS = 5

AGGRO_MAX_AVG_CMC = 2.5
AGGRO_LOW_COST_SHARE = 0.4
CONTROL_MIN_AVG_CMC = 3.5
CONTROL_HIGH_COST_SHARE = 0.2
RAMP_HIGH_COST_SHARE = 0.15
LOW_COST_CMC = 2
HIGH_COST_CMC = 5

REMOVAL_STRENGTH_THRESHOLD = 6
DRAW_STRENGTH_THRESHOLD = 4
MIN_LAND_RATIO = 0.35
MAX_LAND_RATIO = 0.45
MAX_COLORS = 3


def is_removal(card: Card) -> bool:
    return "destroy" in card.text or "exile" in card.text


def mentions_draw(card: Card) -> bool:
    return "draw" in card.text


def identify_key_mechanics(cards: Iterable[Card]) -> list[str]:
    """
    Top archetype buckets by keyword hits.

    Each card adds one hit per matched keyword in a bucket. Ties keep
    bucket declaration order.
    """
    hits: dict[str, int] = {}
    for card in cards:
        text = card.text
        types = card.types
        for bucket, keywords in ARCHETYPE_KEYWORDS.items():
            matches = sum(1 for keyword in keywords if keyword in text or keyword in types)
            if matches:
                hits[bucket] = hits.get(bucket, 0) + matches

    ranked = sorted(hits.items(), key=lambda item: -item[1])
    return [bucket for bucket, _ in ranked[:MAX_KEY_MECHANICS]]


def determine_archetype(curve: list[ManaCurvePoint], key_mechanics: list[str]) -> str:
    """
    Pick an archetype label.

    Evaluated in order: Aggro, Control, Combo, Ramp/Midrange, Burn,
    Tribal/Tokens, then Midrange as the default. A bucket "leads" when
    it is the top key mechanic.
    """
    total = sum(point.count for point in curve)
    leader = key_mechanics[0] if key_mechanics else None
    avg_cmc = average_mana_value(curve)
    low_cost = count_at_or_below(curve, LOW_COST_CMC)
    high_cost = count_at_or_above(curve, HIGH_COST_CMC)

    if leader == "Aggro" or (
        total and avg_cmc < AGGRO_MAX_AVG_CMC and low_cost >= total * AGGRO_LOW_COST_SHARE
    ):
        return "Aggro"
    if leader == "Control" or (
        total and avg_cmc > CONTROL_MIN_AVG_CMC and high_cost >= total * CONTROL_HIGH_COST_SHARE
    ):
        return "Control"
    if leader == "Combo":
        return "Combo"
    if leader == "Ramp" or (total and high_cost >= total * RAMP_HIGH_COST_SHARE):
        return "Ramp/Midrange"
    if leader == "Burn":
        return "Burn"
    if leader in ("Tribal", "Tokens"):
        return leader
    return "Midrange"


def _color_string(color_distribution: dict[str, int]) -> str:
    return "".join(color for color in COLOR_ORDER if color_distribution.get(color, 0) > 0)


def _join(mechanics: list[str], count: int, sep: str) -> str:
    return sep.join(mechanics[:count]) if mechanics else "varied"


def generate_strategy_text(
    archetype: str,
    curve: list[ManaCurvePoint],
    color_distribution: dict[str, int],
    key_mechanics: list[str],
) -> str:
    """Narrative paragraph for an archetype."""
    colors = _color_string(color_distribution) or "Colorless"
    avg_cmc = average_mana_value(curve)
    opening = f"This {colors} {archetype} deck "

    if archetype == "Aggro":
        return opening + (
            "focuses on applying early pressure with low-cost creatures and burn spells. "
            f"With an average mana value of {avg_cmc:.1f}, the deck aims to win quickly "
            "before opponents can stabilize. "
            f"Key mechanics include {_join(key_mechanics, 3, ', ')}."
        )
    if archetype == "Control":
        return opening + (
            "aims to control the game through removal, counterspells, and card advantage. "
            f"The higher average mana value ({avg_cmc:.1f}) allows for powerful late-game "
            f"finishers. The deck focuses on {_join(key_mechanics, 2, ' and ')} to maintain "
            "board control."
        )
    if archetype == "Combo":
        return opening + (
            "seeks to assemble specific card combinations for game-winning plays. "
            f"The deck includes {_join(key_mechanics, 2, ' and ')} mechanics to enable "
            "combo execution."
        )
    if archetype == "Ramp/Midrange":
        return opening + (
            "uses mana acceleration to deploy powerful threats ahead of curve. "
            f"With access to {_join(key_mechanics, 2, ' and ')}, the deck can outvalue "
            "opponents in longer games."
        )
    if archetype == "Burn":
        return opening + (
            "focuses on dealing direct damage to quickly reduce opponent life totals. "
            "The deck prioritizes efficiency and speed over card advantage."
        )
    if archetype == "Tribal":
        return opening + (
            "leans on shared creature types so each threat makes the others stronger. "
            f"Its average mana value of {avg_cmc:.1f} supports "
            f"{_join(key_mechanics, 2, ' and ')} plans."
        )
    if archetype == "Tokens":
        return opening + (
            "goes wide with token makers and rewards a crowded board. "
            f"The deck leans on {_join(key_mechanics, 2, ' and ')} to overwhelm blockers."
        )
    return opening + (
        f"employs a balanced approach with {_join(key_mechanics, 2, ' and ')} elements. "
        "The deck can adapt to different game states with its flexible curve."
    )


def identify_strengths(
    archetype: str,
    cards: list[Card],
    curve: list[ManaCurvePoint],
    key_mechanics: list[str],
) -> list[str]:
    """Strengths from curve fit, mechanic breadth, removal and card draw."""
    strengths: list[str] = []
    avg_cmc = average_mana_value(curve)

    if archetype == "Aggro" and avg_cmc < AGGRO_MAX_AVG_CMC:
        strengths.append("Fast, aggressive curve allows for early pressure")
    if archetype == "Control" and avg_cmc > CONTROL_MIN_AVG_CMC:
        strengths.append("Powerful late-game threats and answers")
    if len(key_mechanics) >= 3:
        strengths.append(f"Multiple synergistic mechanics: {', '.join(key_mechanics[:3])}")

    if sum(1 for card in cards if is_removal(card)) >= REMOVAL_STRENGTH_THRESHOLD:
        strengths.append("Good removal suite for handling threats")
    if sum(1 for card in cards if mentions_draw(card)) >= DRAW_STRENGTH_THRESHOLD:
        strengths.append("Card draw ensures consistent resources")

    return strengths or ["Balanced deck composition"]


def identify_weaknesses(
    archetype: str,
    deck: Deck,
    curve: list[ManaCurvePoint],
    color_distribution: dict[str, int],
) -> list[str]:
    """Weaknesses from curve mismatch, land ratio and color count."""
    weaknesses: list[str] = []
    avg_cmc = average_mana_value(curve)

    if archetype == "Aggro" and avg_cmc > 3.0:
        weaknesses.append("Curve may be too high for aggressive strategy")
    if archetype == "Control" and avg_cmc < 2.5:
        weaknesses.append("May lack late-game power for control strategy")

    total = get_total_count(deck.cards)
    if total:
        land_ratio = get_land_count(deck.cards) / total
        if land_ratio < MIN_LAND_RATIO:
            weaknesses.append("Low land count may cause mana issues")
        elif land_ratio > MAX_LAND_RATIO:
            weaknesses.append("High land count may reduce threat density")

    if sum(1 for count in color_distribution.values() if count > 0) > MAX_COLORS:
        weaknesses.append("Multiple colors may cause mana consistency issues")

    return weaknesses or ["No major weaknesses identified"]


def analyze_strategy(deck: Deck) -> StrategyAnalysis:
    """
    Classify a deck's archetype and describe its game plan.

    Curve and colors come from the main deck; mechanics from main deck
    and sideboard.
    """
    cards = deck.all_cards()
    curve = calculate_mana_curve(deck.cards)
    color_distribution = get_color_distribution(deck.cards)
    key_mechanics = identify_key_mechanics(cards)
    archetype = determine_archetype(curve, key_mechanics)

    logger.debug("Deck %r classified as %s (mechanics: %s)", deck.name, archetype, key_mechanics)

    return StrategyAnalysis(
        archetype=archetype,
        strategy=generate_strategy_text(archetype, curve, color_distribution, key_mechanics),
        strengths=identify_strengths(archetype, cards, curve, key_mechanics),
        weaknesses=identify_weaknesses(archetype, deck, curve, color_distribution),
        mana_curve=curve,
        color_distribution=color_distribution,
        key_mechanics=key_mechanics,
    )
