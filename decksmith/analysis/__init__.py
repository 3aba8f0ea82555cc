from decksmith.analysis.curve import (
    calculate_mana_curve,
    get_color_distribution,
    get_color_identity,
    is_basic_land,
)
from decksmith.analysis.deck_analysis import analyze_deck
from decksmith.analysis.deck_generator import generate_commander_decks, generate_theme_deck
from decksmith.analysis.recommendations import (
    find_collection_improvements,
    generate_purchase_recommendations,
)
from decksmith.analysis.strategy import analyze_strategy
from decksmith.analysis.synergy import (
    analyze_deck_synergies,
    find_synergies,
    get_known_combos_for,
)
from decksmith.analysis.validator import validate_deck
from decksmith.analysis.win_conditions import detect_win_conditions

__all__ = [
    "analyze_deck",
    "analyze_deck_synergies",
    "analyze_strategy",
    "calculate_mana_curve",
    "detect_win_conditions",
    "find_collection_improvements",
    "find_synergies",
    "generate_commander_decks",
    "generate_purchase_recommendations",
    "generate_theme_deck",
    "get_color_distribution",
    "get_color_identity",
    "get_known_combos_for",
    "is_basic_land",
    "validate_deck",
]
