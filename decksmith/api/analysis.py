"""
Deck analysis API endpoints.

Decks arrive as card names; names are resolved against Scryfall before
analysis. Names that can't be resolved are reported in `unresolved` and
left out of the analysis.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from decksmith.analysis.deck_analysis import analyze_deck
from decksmith.analysis.deck_generator import (
    GeneratedDeck,
    generate_commander_decks,
    generate_theme_deck,
    get_theme,
)
from decksmith.analysis.synergy import find_synergies, overall_synergy
from decksmith.analysis.validator import validate_deck
from decksmith.config import settings
from decksmith.models.analysis import (
    CardSynergy,
    CollectionImprovement,
    PurchaseRecommendation,
    StrategyAnalysis,
    SynergyEdge,
    ValidationResult,
    WinCondition,
)
from decksmith.models.card import Card
from decksmith.models.collection import Collection, CollectionEntry
from decksmith.models.deck import Deck
from decksmith.models.format_rules import normalize_format_name
from decksmith.services.card_resolver import (
    CardRequest,
    ScryfallCardResolver,
    get_resolver,
    resolve_deck,
    resolve_recommendations,
    suggest_related_combos,
)

router = APIRouter(prefix="/analysis", tags=["analysis"])


class DeckCardRequest(BaseModel):
    """A deck line: card name and copies."""

    name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    set_code: str | None = None


class CollectionEntryRequest(BaseModel):
    """A collection line."""

    name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=0)
    set_code: str | None = None


class DeckRequest(BaseModel):
    """Request body for deck validation and analysis."""

    name: str = ""
    format: str = Field(default_factory=lambda: settings.default_format)
    cards: list[DeckCardRequest] = Field(default_factory=list)
    sideboard: list[DeckCardRequest] = Field(default_factory=list)
    collection: list[CollectionEntryRequest] | None = None


class GenerateRequest(BaseModel):
    """Request body for building a themed deck from a collection."""

    theme: str
    format: str = Field(default_factory=lambda: settings.default_format)
    collection: list[CollectionEntryRequest] = Field(default_factory=list)


class CommanderGenerateRequest(BaseModel):
    """Request body for building commander decks from a collection."""

    commander: str = Field(min_length=1)
    format: str = "commander"
    collection: list[CollectionEntryRequest] = Field(default_factory=list)


class SynergyRequest(BaseModel):
    """Request body for single-card synergy lookup."""

    card_name: str
    cards: list[DeckCardRequest] = Field(default_factory=list)
    sideboard: list[DeckCardRequest] = Field(default_factory=list)
    max_results: int = Field(default=10, ge=1, le=50)


class ValidationResponse(BaseModel):
    """Legality verdict for a deck."""

    format: str
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    unresolved: list[str] = Field(default_factory=list)


class SynergyEdgeResponse(BaseModel):
    """A synergy between two cards."""

    source: str
    target: str
    reason: str
    strength: str


class CardSynergyResponse(BaseModel):
    """Synergies for one deck card."""

    card: str
    overall: str
    edges: list[SynergyEdgeResponse] = Field(default_factory=list)


class ManaCurvePointResponse(BaseModel):
    """Card count at one mana value."""

    cmc: int
    count: int


class StrategyResponse(BaseModel):
    """Archetype and gameplan summary."""

    archetype: str
    strategy: str
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    mana_curve: list[ManaCurvePointResponse] = Field(default_factory=list)
    color_distribution: dict[str, int] = Field(default_factory=dict)
    key_mechanics: list[str] = Field(default_factory=list)


class WinConditionResponse(BaseModel):
    """One way the deck wins."""

    type: str
    name: str
    description: str
    confidence: str
    cards: list[str] = Field(default_factory=list)
    key_cards: list[str] = Field(default_factory=list)
    gameplan: list[str] = Field(default_factory=list)


class CollectionImprovementResponse(BaseModel):
    """An owned card that could improve the deck."""

    card: str
    reason: str
    priority: str
    current_card: str | None = None


class PurchaseRecommendationResponse(BaseModel):
    """A card worth acquiring."""

    card_name: str
    reason: str
    priority: str
    estimated_price: str | None = None


class DeckAnalysisResponse(BaseModel):
    """Response model for full deck analysis."""

    deck_name: str
    format: str
    legality: ValidationResponse
    synergies: list[CardSynergyResponse] = Field(default_factory=list)
    strategy: StrategyResponse | None = None
    win_conditions: list[WinConditionResponse] = Field(default_factory=list)
    collection_improvements: list[CollectionImprovementResponse] = Field(default_factory=list)
    purchase_recommendations: list[PurchaseRecommendationResponse] = Field(
        default_factory=list
    )
    unresolved: list[str] = Field(default_factory=list)


class DeckCardResponse(BaseModel):
    """A deck line."""

    name: str
    quantity: int


class GeneratedDeckResponse(BaseModel):
    """A deck built from the player's collection."""

    name: str
    theme: str
    description: str
    format: str
    commander: str | None = None
    cards: list[DeckCardResponse] = Field(default_factory=list)
    color_identity: list[str] = Field(default_factory=list)
    synergy_score: int
    legality: ValidationResponse
    suggestions: list[PurchaseRecommendationResponse] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class CommanderDecksResponse(BaseModel):
    """Deck options for a commander."""

    commander: str
    decks: list[GeneratedDeckResponse] = Field(default_factory=list)


class SynergyResponse(BaseModel):
    """Response model for single-card synergy lookup."""

    card: str
    overall: str
    edges: list[SynergyEdgeResponse] = Field(default_factory=list)
    suggestions: list[SynergyEdgeResponse] = Field(default_factory=list)
    unresolved: list[str] = Field(default_factory=list)


def _names(cards: list[Card]) -> list[str]:
    return [card.name for card in cards]


def validation_to_response(
    result: ValidationResult, format_name: str, unresolved: list[str]
) -> ValidationResponse:
    return ValidationResponse(
        format=format_name,
        is_valid=result.is_valid,
        errors=result.errors,
        warnings=result.warnings,
        suggestions=result.suggestions,
        unresolved=unresolved,
    )


def edge_to_response(edge: SynergyEdge) -> SynergyEdgeResponse:
    return SynergyEdgeResponse(
        source=edge.source,
        target=edge.target,
        reason=edge.reason,
        strength=edge.strength.value,
    )


def synergy_to_response(synergy: CardSynergy) -> CardSynergyResponse:
    return CardSynergyResponse(
        card=synergy.card.name,
        overall=synergy.overall.value,
        edges=[edge_to_response(edge) for edge in synergy.edges],
    )


def strategy_to_response(strategy: StrategyAnalysis) -> StrategyResponse:
    return StrategyResponse(
        archetype=strategy.archetype,
        strategy=strategy.strategy,
        strengths=strategy.strengths,
        weaknesses=strategy.weaknesses,
        mana_curve=[
            ManaCurvePointResponse(cmc=point.cmc, count=point.count)
            for point in strategy.mana_curve
        ],
        color_distribution=strategy.color_distribution,
        key_mechanics=strategy.key_mechanics,
    )


def win_condition_to_response(condition: WinCondition) -> WinConditionResponse:
    return WinConditionResponse(
        type=condition.type.value,
        name=condition.name,
        description=condition.description,
        confidence=condition.confidence.value,
        cards=_names(condition.cards),
        key_cards=_names(condition.key_cards),
        gameplan=condition.gameplan,
    )


def improvement_to_response(improvement: CollectionImprovement) -> CollectionImprovementResponse:
    return CollectionImprovementResponse(
        card=improvement.card.name,
        reason=improvement.reason,
        priority=improvement.priority.value,
        current_card=improvement.current_card.name if improvement.current_card else None,
    )


def purchase_to_response(rec: PurchaseRecommendation) -> PurchaseRecommendationResponse:
    return PurchaseRecommendationResponse(
        card_name=rec.card_name,
        reason=rec.reason,
        priority=rec.priority.value,
        estimated_price=rec.estimated_price,
    )


def generated_to_response(generated: GeneratedDeck) -> GeneratedDeckResponse:
    return GeneratedDeckResponse(
        name=generated.name,
        theme=generated.theme,
        description=generated.description,
        format=generated.format,
        commander=generated.commander.name if generated.commander else None,
        cards=[
            DeckCardResponse(name=entry.card.name, quantity=entry.quantity)
            for entry in generated.deck.cards
        ],
        color_identity=generated.color_identity,
        synergy_score=generated.synergy_score,
        legality=validation_to_response(generated.validation, generated.format, []),
        suggestions=[purchase_to_response(rec) for rec in generated.suggestions],
        warnings=generated.warnings,
    )


def _requests(lines: list[DeckCardRequest]) -> list[CardRequest]:
    return [CardRequest(line.name, line.set_code, line.quantity) for line in lines]


async def load_collection(
    lines: list[CollectionEntryRequest], resolver: ScryfallCardResolver
) -> Collection:
    """Build a Collection and resolve its cards into the resolver cache."""
    collection = Collection(
        entries=[
            CollectionEntry(name=line.name, quantity=line.quantity, set_code=line.set_code)
            for line in lines
        ]
    )
    await resolver.resolve_many(collection.unique_names())
    return collection


async def build_deck(
    name: str,
    cards: list[DeckCardRequest],
    sideboard: list[DeckCardRequest],
    resolver: ScryfallCardResolver,
) -> tuple[Deck, list[str]]:
    """Resolve request deck lines into a Deck plus the unresolved names."""
    return await resolve_deck(name, _requests(cards), _requests(sideboard), resolver)


@router.post("/validate", response_model=ValidationResponse)
async def validate(
    request: DeckRequest,
    resolver: Annotated[ScryfallCardResolver, Depends(get_resolver)],
) -> ValidationResponse:
    """
    Check a deck against a format's construction rules.

    Unknown formats are checked as standard.
    """
    deck, unresolved = await build_deck(request.name, request.cards, request.sideboard, resolver)
    format_name = normalize_format_name(request.format)
    result = validate_deck(deck, format_name)
    return validation_to_response(result, format_name, unresolved)


@router.post("/deck", response_model=DeckAnalysisResponse)
async def analyze(
    request: DeckRequest,
    resolver: Annotated[ScryfallCardResolver, Depends(get_resolver)],
) -> DeckAnalysisResponse:
    """
    Full deck analysis: legality, synergies, strategy, win conditions
    and recommendations.

    When a collection is supplied, owned cards that would improve the
    deck are suggested as well.
    """
    deck, unresolved = await build_deck(request.name, request.cards, request.sideboard, resolver)

    collection: Collection | None = None
    if request.collection is not None:
        # Populate the resolver cache so the analysis can look owned cards up
        collection = await load_collection(request.collection, resolver)

    result = analyze_deck(deck, request.format, collection, resolver.cache_lookup)
    purchases = await resolve_recommendations(result.purchase_recommendations, resolver)

    return DeckAnalysisResponse(
        deck_name=deck.name,
        format=result.format,
        legality=validation_to_response(result.legality, result.format, unresolved),
        synergies=[synergy_to_response(synergy) for synergy in result.synergies],
        strategy=strategy_to_response(result.strategy) if result.strategy else None,
        win_conditions=[win_condition_to_response(wc) for wc in result.win_conditions],
        collection_improvements=[
            improvement_to_response(improvement)
            for improvement in result.collection_improvements
        ],
        purchase_recommendations=[purchase_to_response(rec) for rec in purchases],
        unresolved=unresolved,
    )


@router.post("/synergies", response_model=SynergyResponse)
async def synergies(
    request: SynergyRequest,
    resolver: Annotated[ScryfallCardResolver, Depends(get_resolver)],
) -> SynergyResponse:
    """
    Synergies between one card and a deck.

    The card doesn't have to be in the deck. When none of its synergies
    point at a deck card, related cards from a Scryfall search are
    returned as suggestions instead.
    """
    card_name = request.card_name.strip()
    if not card_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="card_name must not be blank",
        )

    deck, unresolved = await build_deck("", request.cards, request.sideboard, resolver)

    key = card_name.lower()
    focal = next((card for card in deck.all_cards() if card.name.lower() == key), None)
    if focal is None:
        focal = await resolver.resolve_card(card_name)
    if focal is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card '{card_name}' not found",
        )

    edges = find_synergies(focal, deck.all_cards(), request.max_results)
    deck_names = deck.card_names()

    suggestions: list[SynergyEdge] = []
    if not any(edge.target.lower() in deck_names for edge in edges):
        suggestions = await suggest_related_combos(focal, resolver)

    return SynergyResponse(
        card=focal.name,
        overall=overall_synergy(edges).value,
        edges=[edge_to_response(edge) for edge in edges],
        suggestions=[edge_to_response(edge) for edge in suggestions],
        unresolved=unresolved,
    )


@router.post("/generate", response_model=GeneratedDeckResponse)
async def generate(
    request: GenerateRequest,
    resolver: Annotated[ScryfallCardResolver, Depends(get_resolver)],
) -> GeneratedDeckResponse:
    """
    Build a 60-card deck around a mechanic theme from owned cards.

    Collection names that can't be resolved are ignored.
    """
    try:
        theme = get_theme(request.theme)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    collection = await load_collection(request.collection, resolver)
    generated = generate_theme_deck(theme.id, collection, resolver.cache_lookup, request.format)
    if generated is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Not enough {theme.name} cards in the collection to build a deck",
        )
    return generated_to_response(generated)


@router.post("/generate/commander", response_model=CommanderDecksResponse)
async def generate_commander(
    request: CommanderGenerateRequest,
    resolver: Annotated[ScryfallCardResolver, Depends(get_resolver)],
) -> CommanderDecksResponse:
    """
    Build up to three decks around a legendary commander from owned cards.

    An empty list means the collection couldn't support any strategy.
    """
    commander = await resolver.resolve_card(request.commander)
    if commander is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card '{request.commander}' not found",
        )

    collection = await load_collection(request.collection, resolver)
    try:
        decks = generate_commander_decks(
            commander, collection, resolver.cache_lookup, request.format
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return CommanderDecksResponse(
        commander=commander.name,
        decks=[generated_to_response(generated) for generated in decks],
    )
