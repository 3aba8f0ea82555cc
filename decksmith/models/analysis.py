"""
Analysis result types.

Plain value objects produced by the analysis engine. Each call builds
fresh instances; nothing here is cached or shared between analyses.
Enum values are the literal strings existing consumers display.
"""

from dataclasses import dataclass, field
from enum import Enum

from decksmith.models.card import Card


class _Ranked(str, Enum):
    """Three-level ordinal enum shared by strengths, confidences and priorities."""

    @property
    def rank(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


class SynergyStrength(_Ranked):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Confidence(_Ranked):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Priority(_Ranked):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class WinConditionType(str, Enum):
    """Win-condition categories; UNKNOWN marks the general fallback."""

    ALTERNATIVE = "alternative"
    BURN = "burn"
    COMBAT = "combat"
    MILL = "mill"
    COMBO = "combo"
    CONTROL = "control"
    TOKENS = "tokens"
    DRAIN = "drain"
    POISON = "poison"
    UNKNOWN = "unknown"


@dataclass
class ValidationResult:
    """
    Legality verdict for a deck.

    Only errors make a deck invalid. Warnings and suggestions are advice.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True, slots=True)
class ManaCurvePoint:
    """Number of cards at a mana value."""

    cmc: int
    count: int


@dataclass(frozen=True, slots=True)
class SynergyEdge:
    """A reasoned, directed relationship between two cards."""

    source: str
    target: str
    reason: str
    strength: SynergyStrength


@dataclass
class CardSynergy:
    """All synergy edges from one deck card, with an overall rating."""

    card: Card
    edges: list[SynergyEdge] = field(default_factory=list)
    overall: SynergyStrength = SynergyStrength.LOW


@dataclass
class StrategyAnalysis:
    """Archetype classification and narrative for a deck."""

    archetype: str
    strategy: str
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    mana_curve: list[ManaCurvePoint] = field(default_factory=list)
    color_distribution: dict[str, int] = field(default_factory=dict)
    key_mechanics: list[str] = field(default_factory=list)


@dataclass
class WinCondition:
    """A hypothesis about how the deck wins games."""

    type: WinConditionType
    name: str
    description: str
    cards: list[Card] = field(default_factory=list)
    confidence: Confidence = Confidence.LOW
    gameplan: list[str] = field(default_factory=list)
    key_cards: list[Card] = field(default_factory=list)


@dataclass
class CollectionImprovement:
    """A card the player already owns that could improve the deck."""

    card: Card
    reason: str
    priority: Priority
    current_card: Card | None = None


@dataclass
class PurchaseRecommendation:
    """
    A card worth acquiring.

    card is set when the recommendation was resolved against the card
    database; estimated_price is advisory only.
    """

    card_name: str
    reason: str
    priority: Priority
    estimated_price: str | None = None
    card: Card | None = None


@dataclass
class DeckAnalysisResult:
    """Everything the engine knows about a deck for one format."""

    format: str
    legality: ValidationResult
    synergies: list[CardSynergy] = field(default_factory=list)
    strategy: StrategyAnalysis | None = None
    win_conditions: list[WinCondition] = field(default_factory=list)
    collection_improvements: list[CollectionImprovement] = field(default_factory=list)
    purchase_recommendations: list[PurchaseRecommendation] = field(default_factory=list)
