from decksmith.services.card_resolver import (
    CardRequest,
    CardResolutionError,
    ScryfallCardResolver,
    get_resolver,
    resolve_deck,
    resolve_recommendations,
    suggest_related_combos,
)

__all__ = [
    "CardRequest",
    "CardResolutionError",
    "ScryfallCardResolver",
    "get_resolver",
    "resolve_deck",
    "resolve_recommendations",
    "suggest_related_combos",
]
