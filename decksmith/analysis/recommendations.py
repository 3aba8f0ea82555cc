"""
Card recommendations.

Two outputs:

- Purchase recommendations: high-strength synergy partners missing from
  the deck, archetype staples, and staples that fill removal or card
  draw gaps.
- Collection improvements: cards the player already owns whose colors
  fit the deck and whose text matches something the deck is doing.

Candidates are merged by name keeping the highest priority seen, then
stably sorted by priority and truncated.

Card records are obtained through a CardLookup callable supplied by the
caller (usually a resolver's cache). Names the lookup can't resolve are
skipped rather than failing the whole recommendation pass.
"""

import logging
import re
from collections.abc import Callable, Iterable

from decksmith.analysis.strategy import is_removal
from decksmith.models.analysis import (
    CardSynergy,
    CollectionImprovement,
    Priority,
    PurchaseRecommendation,
    StrategyAnalysis,
    SynergyStrength,
)
from decksmith.models.card import Card
from decksmith.models.collection import Collection
from decksmith.models.deck import Deck

logger = logging.getLogger(__name__)

CardLookup = Callable[[str], Card | None]

MAX_PURCHASE_RECOMMENDATIONS = 15
MAX_COLLECTION_IMPROVEMENTS = 10

REMOVAL_GAP_THRESHOLD = 6
DRAW_GAP_THRESHOLD = 4

ARCHETYPE_STAPLES: dict[str, tuple[str, ...]] = {
    "Aggro": ("Lightning Bolt", "Monastery Swiftspear", "Goblin Guide", "Bonecrusher Giant"),
    "Control": ("Counterspell", "Force of Negation", "Teferi, Hero of Dominaria", "Supreme Will"),
    "Combo": ("Demonic Tutor", "Mystical Tutor", "Enlightened Tutor", "Grim Tutor"),
    "Ramp/Midrange": ("Cultivate", "Kodama's Reach", "Rampant Growth", "Sakura-Tribe Elder"),
    "Burn": ("Lightning Bolt", "Lava Spike", "Rift Bolt", "Skullcrack"),
}

REMOVAL_STAPLES: tuple[str, ...] = ("Path to Exile", "Fatal Push", "Abrupt Decay", "Terminate")
DRAW_STAPLES: tuple[str, ...] = ("Opt", "Serum Visions", "Brainstorm", "Ponder")

TRIBAL_PATTERN = re.compile(
    r"\b(zombie|elf|goblin|human|wizard|warrior|dragon|angel|demon)\w*\b", re.IGNORECASE
)


def draws_a_card(card: Card) -> bool:
    return "draw a card" in card.text


def merge_by_priority(
    recommendations: Iterable[PurchaseRecommendation],
) -> list[PurchaseRecommendation]:
    """
    One recommendation per card name, keeping the highest priority.

    The first recommendation seen wins ties. Output keeps first-seen
    order, stably sorted by priority.
    """
    merged: dict[str, PurchaseRecommendation] = {}
    for rec in recommendations:
        key = rec.card_name.lower()
        existing = merged.get(key)
        if existing is None or rec.priority.rank > existing.priority.rank:
            merged[key] = rec
    return sorted(merged.values(), key=lambda rec: -rec.priority.rank)


def _synergy_candidates(
    synergies: Iterable[CardSynergy], deck_names: set[str]
) -> list[tuple[str, str, Priority]]:
    candidates: list[tuple[str, str, Priority]] = []
    for synergy in synergies:
        for edge in synergy.edges:
            if edge.strength is SynergyStrength.HIGH and edge.target.lower() not in deck_names:
                candidates.append((edge.target, edge.reason, Priority.HIGH))
    return candidates


def _archetype_candidates(archetype: str, deck_names: set[str]) -> list[tuple[str, str, Priority]]:
    return [
        (name, f"Common staple for {archetype} decks", Priority.MEDIUM)
        for name in ARCHETYPE_STAPLES.get(archetype, ())
        if name.lower() not in deck_names
    ]


def _first_available(
    staples: tuple[str, ...], deck_names: set[str], lookup: CardLookup | None
) -> str | None:
    for name in staples:
        if name.lower() in deck_names:
            continue
        if lookup is not None and lookup(name) is None:
            continue
        return name
    return None


def _gap_candidates(
    deck: Deck, deck_names: set[str], lookup: CardLookup | None
) -> list[tuple[str, str, Priority]]:
    cards = deck.all_cards()
    candidates: list[tuple[str, str, Priority]] = []

    if sum(1 for card in cards if is_removal(card)) < REMOVAL_GAP_THRESHOLD:
        name = _first_available(REMOVAL_STAPLES, deck_names, lookup)
        if name:
            candidates.append((name, "Adds needed removal to deck", Priority.MEDIUM))

    if sum(1 for card in cards if draws_a_card(card)) < DRAW_GAP_THRESHOLD:
        name = _first_available(DRAW_STAPLES, deck_names, lookup)
        if name:
            candidates.append((name, "Adds card draw for consistency", Priority.MEDIUM))

    return candidates


def generate_purchase_recommendations(
    deck: Deck,
    strategy: StrategyAnalysis,
    synergies: Iterable[CardSynergy],
    lookup: CardLookup | None = None,
    max_results: int = MAX_PURCHASE_RECOMMENDATIONS,
) -> list[PurchaseRecommendation]:
    """
    Cards worth buying for a deck.

    Args:
        deck: Analyzed deck
        strategy: Strategy analysis for the deck
        synergies: Synergy analysis for the deck
        lookup: Optional card lookup. When given, names it can't resolve
            are dropped and resolved cards supply a price estimate.
        max_results: Maximum recommendations to return

    Returns:
        Recommendations, high priority first
    """
    deck_names = deck.card_names()
    candidates = (
        _synergy_candidates(synergies, deck_names)
        + _archetype_candidates(strategy.archetype, deck_names)
        + _gap_candidates(deck, deck_names, lookup)
    )

    recommendations: list[PurchaseRecommendation] = []
    for name, reason, priority in candidates:
        card: Card | None = None
        if lookup is not None:
            card = lookup(name)
            if card is None:
                logger.debug("Skipping unresolved recommendation %r", name)
                continue
        recommendations.append(
            PurchaseRecommendation(
                card_name=card.name if card else name,
                reason=reason,
                priority=priority,
                estimated_price=card.price_usd if card else None,
                card=card,
            )
        )

    return merge_by_priority(recommendations)[:max_results]


def colors_compatible(card: Card, deck_colors: set[str]) -> bool:
    """
    True if the card's color identity fits the deck.

    Colorless cards fit every deck; colored cards need at least one
    color in common with the deck.
    """
    card_colors = set(card.color_identity)
    if not card_colors:
        return True
    return bool(card_colors & deck_colors)


def analyze_card_fit(card: Card, deck_cards: list[Card]) -> str | None:
    """Why a card would improve the deck, or None if it doesn't fit."""
    deck_colors: set[str] = set()
    for deck_card in deck_cards:
        deck_colors.update(deck_card.color_identity)

    if not colors_compatible(card, deck_colors):
        return None

    text = card.text
    deck_text = " ".join(deck_card.text for deck_card in deck_cards)

    if "draw" in text and "whenever you draw" in deck_text:
        return "Synergizes with card draw triggers in deck"
    if "token" in text and "token" in deck_text:
        return "Enhances token strategy"
    if "counter" in text and "counter" in deck_text:
        return "Adds to counter spell suite"
    if is_removal(card):
        return "Provides additional removal"
    if draws_a_card(card):
        return "Adds card advantage"

    card_types = {match.lower() for match in TRIBAL_PATTERN.findall(text)}
    if card_types:
        deck_types = {match.lower() for match in TRIBAL_PATTERN.findall(deck_text)}
        if card_types & deck_types:
            return "Tribal synergy with existing creatures"

    return None


def improvement_priority(reason: str) -> Priority:
    if "Synergizes" in reason or "Tribal" in reason:
        return Priority.HIGH
    if "removal" in reason or "card advantage" in reason:
        return Priority.MEDIUM
    return Priority.LOW


def find_collection_improvements(
    deck: Deck,
    collection: Collection,
    lookup: CardLookup,
    max_results: int = MAX_COLLECTION_IMPROVEMENTS,
) -> list[CollectionImprovement]:
    """
    Owned cards that could improve the deck.

    Args:
        deck: Analyzed deck
        collection: Player's collection snapshot (not modified)
        lookup: Resolves collection card names to card records
        max_results: Maximum improvements to return

    Returns:
        Improvements, high priority first
    """
    deck_cards = deck.all_cards()
    deck_names = deck.card_names()
    best: dict[str, CollectionImprovement] = {}

    for name in collection.unique_names():
        card = lookup(name)
        if card is None:
            logger.debug("Collection card %r could not be resolved", name)
            continue
        if card.name.lower() in deck_names:
            continue

        reason = analyze_card_fit(card, deck_cards)
        if reason is None:
            continue

        improvement = CollectionImprovement(
            card=card, reason=reason, priority=improvement_priority(reason)
        )
        key = card.name.lower()
        existing = best.get(key)
        if existing is None or improvement.priority.rank > existing.priority.rank:
            best[key] = improvement

    ranked = sorted(best.values(), key=lambda improvement: -improvement.priority.rank)
    return ranked[:max_results]
