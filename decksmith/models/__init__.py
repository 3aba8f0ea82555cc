from decksmith.models.analysis import (
    CardSynergy,
    CollectionImprovement,
    Confidence,
    DeckAnalysisResult,
    ManaCurvePoint,
    Priority,
    PurchaseRecommendation,
    StrategyAnalysis,
    SynergyEdge,
    SynergyStrength,
    ValidationResult,
    WinCondition,
    WinConditionType,
)
from decksmith.models.card import BASIC_LAND_NAMES, Card
from decksmith.models.collection import Collection, CollectionEntry, MissingCard
from decksmith.models.deck import Deck, DeckCard
from decksmith.models.format_rules import (
    FORMAT_RULES,
    SUPPORTED_FORMATS,
    FormatRules,
    get_format_rules,
)

__all__ = [
    "BASIC_LAND_NAMES",
    "Card",
    "CardSynergy",
    "Collection",
    "CollectionEntry",
    "CollectionImprovement",
    "Confidence",
    "Deck",
    "DeckAnalysisResult",
    "DeckCard",
    "FORMAT_RULES",
    "FormatRules",
    "ManaCurvePoint",
    "MissingCard",
    "Priority",
    "PurchaseRecommendation",
    "SUPPORTED_FORMATS",
    "StrategyAnalysis",
    "SynergyEdge",
    "SynergyStrength",
    "ValidationResult",
    "WinCondition",
    "WinConditionType",
    "get_format_rules",
]
