"""
Whole-deck analysis.

Runs validation, synergy, strategy, win-condition and recommendation
analysis over one deck. Every stage works on already-resolved card
records; resolving names is the caller's job.
"""

import logging

from decksmith.analysis.recommendations import (
    CardLookup,
    find_collection_improvements,
    generate_purchase_recommendations,
)
from decksmith.analysis.strategy import analyze_strategy
from decksmith.analysis.synergy import analyze_deck_synergies
from decksmith.analysis.validator import validate_deck
from decksmith.analysis.win_conditions import detect_win_conditions
from decksmith.models.analysis import CollectionImprovement, DeckAnalysisResult
from decksmith.models.collection import Collection
from decksmith.models.deck import Deck
from decksmith.models.format_rules import normalize_format_name

logger = logging.getLogger(__name__)


def analyze_deck(
    deck: Deck,
    format_name: str = "standard",
    collection: Collection | None = None,
    lookup: CardLookup | None = None,
    *,
    purchase_lookup: CardLookup | None = None,
) -> DeckAnalysisResult:
    """
    Analyze a deck for a format.

    Args:
        deck: Deck with resolved cards (not modified)
        format_name: Target format; unknown names use standard rules
        collection: Optional collection snapshot for improvement suggestions
        lookup: Resolves collection card names; improvements need it
        purchase_lookup: Resolves purchase recommendation names. Without
            it recommendations are name-only and unpriced.

    Returns:
        A complete DeckAnalysisResult, even for an empty deck.
    """
    fmt = normalize_format_name(format_name)

    legality = validate_deck(deck, fmt)
    synergies = analyze_deck_synergies(deck)
    strategy = analyze_strategy(deck)
    win_conditions = detect_win_conditions(deck)

    improvements: list[CollectionImprovement] = []
    if collection is not None:
        if lookup is None:
            logger.warning("Collection supplied without a card lookup; skipping improvements")
        else:
            improvements = find_collection_improvements(deck, collection, lookup)

    purchases = generate_purchase_recommendations(deck, strategy, synergies, purchase_lookup)

    logger.info(
        "Analyzed deck %r for %s: valid=%s archetype=%s win_conditions=%d",
        deck.name,
        fmt,
        legality.is_valid,
        strategy.archetype,
        len(win_conditions),
    )

    return DeckAnalysisResult(
        format=fmt,
        legality=legality,
        synergies=synergies,
        strategy=strategy,
        win_conditions=win_conditions,
        collection_improvements=improvements,
        purchase_recommendations=purchases,
    )
