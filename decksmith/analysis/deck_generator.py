"""
Deck generation from a player's collection.

Builds decks out of owned cards in two ways:

- Around one of ten mechanic themes (sacrifice, tokens, burn, ...)
- Around a legendary commander, one deck per strategy its text suggests

Owned cards are scored against the theme's keywords, preferred colors
and type bonuses. Spells are picked by score plus synergy with the other
candidates; lands come from the collection, basics for the deck's colors
first. Every generated deck is validated against its format and carries
known-combo partners the deck is missing as suggestions.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from decksmith.analysis.curve import COLOR_ORDER, get_color_identity, is_basic_land
from decksmith.analysis.known_combos import get_all_combos_for_card
from decksmith.analysis.recommendations import CardLookup, merge_by_priority
from decksmith.analysis.synergy import find_synergies
from decksmith.analysis.validator import validate_deck
from decksmith.models.analysis import (
    Priority,
    PurchaseRecommendation,
    SynergyStrength,
    ValidationResult,
)
from decksmith.models.card import Card
from decksmith.models.collection import Collection
from decksmith.models.deck import Deck
from decksmith.models.format_rules import FormatRules, get_format_rules

logger = logging.getLogger(__name__)

COLOR_TO_BASIC_LAND = {
    "W": "Plains",
    "U": "Island",
    "B": "Swamp",
    "R": "Mountain",
    "G": "Forest",
}

# Themed decks: 36 spells + 24 lands
MIN_THEME_CARDS = 10
NONLAND_TARGET = 36
LAND_TARGET = 24
MAX_BASICS_PER_COLOR = 8

KEYWORD_SCORE = 3
COLOR_PREFERENCE_SCORE = 2
SYNERGY_EDGE_SCORE = 2

# Commander decks: 99 cards besides the commander, 36 of them lands
COMMANDER_LAND_TARGET = 36
MAX_COMMANDER_STRATEGIES = 3
MIN_COMMANDER_DECK_CARDS = 20
COMMANDER_KEYWORD_SCORE = 5
COMMANDER_MENTION_SCORE = 5

MAX_SUGGESTIONS = 10
MAX_SYNERGY_SCORE = 100

# Terms compared between a commander and its deck for the synergy score
SHARED_TERMS: tuple[str, ...] = (
    "token",
    "sacrifice",
    "draw",
    "graveyard",
    "counter",
    "destroy",
    "exile",
    "create",
    "whenever",
    "when",
    "enters",
    "dies",
)


@dataclass(frozen=True, slots=True)
class Theme:
    """
    A mechanic a deck can be built around.

    Attributes:
        id: Identifier callers pass in (e.g., "card-draw")
        name: Display name
        description: One-line summary of the plan
        keywords: Substrings looked for in rules text and card names
        color_preferences: Colors that suit the theme, empty for any
    """

    id: str
    name: str
    description: str
    keywords: tuple[str, ...]
    color_preferences: tuple[str, ...] = ()


THEMES: MappingProxyType[str, Theme] = MappingProxyType(
    {
        theme.id: theme
        for theme in (
            Theme(
                "sacrifice",
                "Sacrifice",
                "Sacrifice creatures and permanents for value, death triggers, and recursion",
                (
                    "sacrifice",
                    "when dies",
                    "death trigger",
                    "whenever a creature dies",
                    "blood",
                    "flesh",
                ),
                ("B", "R"),
            ),
            Theme(
                "lifegain",
                "Life Gain",
                "Gain life and benefit from life gain triggers",
                ("gain life", "lifelink", "whenever you gain life", "life total", "heal"),
                ("W", "G"),
            ),
            Theme(
                "tokens",
                "Token Generation",
                "Create and synergize with tokens",
                ("create", "token", "generate", "populate", "whenever a token"),
                ("W", "G"),
            ),
            Theme(
                "card-draw",
                "Card Draw",
                "Draw cards and benefit from draw triggers",
                ("draw a card", "draw cards", "whenever you draw", "card advantage"),
                ("U", "B"),
            ),
            Theme(
                "graveyard",
                "Graveyard",
                "Use the graveyard as a resource with recursion and reanimation",
                ("graveyard", "reanimate", "flashback", "dredge", "unearth", "from graveyard"),
                ("B", "G"),
            ),
            Theme(
                "burn",
                "Burn",
                "Direct damage spells and aggressive red strategies",
                ("damage", "deal damage", "lightning", "shock", "bolt", "fire"),
                ("R",),
            ),
            Theme(
                "control",
                "Control",
                "Counter spells, removal, and board control",
                ("counter target", "destroy target", "exile target", "bounce", "removal"),
                ("U", "B", "W"),
            ),
            Theme(
                "ramp",
                "Mana Ramp",
                "Accelerate mana and play big spells early",
                ("add mana", "mana dork", "land ramp", "ritual", "mana source"),
                ("G", "R"),
            ),
            Theme(
                "aggro",
                "Aggro",
                "Fast, aggressive creatures and low-cost threats",
                ("haste", "trample", "menace", "low cost", "early game"),
                ("R", "W"),
            ),
            Theme(
                "combo",
                "Combo",
                "Find and execute powerful card combinations",
                ("whenever", "trigger", "synergy", "infinite", "engine"),
            ),
        )
    }
)


@dataclass(frozen=True, slots=True)
class CommanderStrategy:
    """A plan suggested by a commander's rules text."""

    name: str
    description: str
    keywords: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class OwnedCard:
    """A resolved collection card with the copies owned."""

    card: Card
    quantity: int


@dataclass
class GeneratedDeck:
    """
    A deck built from a collection.

    For commander decks, the commander is kept out of deck.cards (the
    99) and reported separately.
    """

    name: str
    theme: str
    description: str
    format: str
    deck: Deck
    color_identity: list[str]
    synergy_score: int
    validation: ValidationResult
    commander: Card | None = None
    suggestions: list[PurchaseRecommendation] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def get_theme(theme_id: str) -> Theme:
    """
    Look up a theme by id or display name.

    Raises:
        ValueError: If no theme matches
    """
    key = theme_id.strip().lower()
    for theme in THEMES.values():
        if key in (theme.id, theme.name.lower()):
            return theme
    raise ValueError(f"Unknown theme '{theme_id}'. Choose one of: {', '.join(THEMES)}")


def _sorted_colors(colors: Iterable[str]) -> list[str]:
    present = set(colors)
    return [color for color in COLOR_ORDER if color in present]


def is_playable(card: Card, rules: FormatRules) -> bool:
    """False for cards banned (or, in sanctioned formats, not legal) in the format."""
    status = card.legality(rules.name)
    if status == "banned":
        return False
    return not (status == "not_legal" and not rules.allows_not_legal)


def copy_limit(card: Card, rules: FormatRules) -> int | None:
    """Copies a deck may run, None for basic lands."""
    if is_basic_land(card):
        return None
    if card.legality(rules.name) == "restricted":
        return 1
    return rules.max_copies


def load_owned_cards(
    collection: Collection, lookup: CardLookup, rules: FormatRules
) -> list[OwnedCard]:
    """
    Resolve a collection into cards, in collection order.

    Names the lookup can't resolve and cards the format doesn't allow
    are skipped.
    """
    owned: list[OwnedCard] = []
    for name in collection.unique_names():
        quantity = collection.get_quantity(name)
        if quantity <= 0:
            continue
        card = lookup(name)
        if card is None:
            logger.debug("Skipping unresolved collection card %r", name)
            continue
        if not is_playable(card, rules):
            logger.debug("Skipping %s, not playable in %s", card.name, rules.name)
            continue
        owned.append(OwnedCard(card=card, quantity=quantity))
    return owned


def score_card(card: Card, theme: Theme) -> int:
    """How well a card fits a theme; 0 means it doesn't."""
    text = card.text
    name = card.name.lower()
    types = card.types

    score = sum(
        KEYWORD_SCORE for keyword in theme.keywords if keyword in text or keyword in name
    )

    if theme.color_preferences:
        card_colors = card.color_identity or card.colors
        if any(color in card_colors for color in theme.color_preferences):
            score += COLOR_PREFERENCE_SCORE

    if theme.id == "tokens" and "token" in types:
        score += 5
    if theme.id == "aggro" and card.is_creature and card.cmc <= 3:
        score += 2
    if theme.id == "ramp" and (card.is_land or "add mana" in text):
        score += 4
    if theme.id == "control" and ("instant" in types or "sorcery" in types):
        score += 1

    return score


def _pool_synergy(cards: Sequence[Card]) -> dict[str, list[SynergyStrength]]:
    """Card id -> strengths of its synergy edges to other cards of the pool."""
    names = {card.name.lower() for card in cards}
    strengths: dict[str, list[SynergyStrength]] = {}
    for card in cards:
        strengths[card.id] = [
            edge.strength
            for edge in find_synergies(card, cards)
            if edge.target.lower() in names
        ]
    return strengths


def _add_spells(
    deck: Deck, candidates: Iterable[OwnedCard], target: int, rules: FormatRules
) -> int:
    """Add nonland candidates in order until the target count. Returns cards added."""
    added = 0
    for item in candidates:
        if added >= target:
            break
        if item.card.is_land:
            continue
        limit = copy_limit(item.card, rules)
        quantity = min(item.quantity, limit or item.quantity, target - added)
        deck.add_card(item.card, quantity)
        added += quantity
    return added


def _add_lands(
    deck: Deck, candidates: Iterable[OwnedCard], target: int, rules: FormatRules
) -> int:
    """Add nonbasic land candidates in order until the target count."""
    added = 0
    for item in candidates:
        if added >= target:
            break
        if not item.card.is_land or is_basic_land(item.card):
            continue
        limit = copy_limit(item.card, rules)
        quantity = min(item.quantity, limit or item.quantity, target - added)
        deck.add_card(item.card, quantity)
        added += quantity
    return added


def _add_basics(
    deck: Deck,
    owned: Sequence[OwnedCard],
    colors: Sequence[str],
    slots: int,
    per_color: int | None = None,
) -> int:
    """
    Spread owned basic lands across the deck's colors.

    One land per color in turn, so two colors split the slots evenly
    when enough basics are owned.
    """
    basics = {item.card.name: item for item in owned if is_basic_land(item.card)}
    stock: dict[str, int] = {}
    for color in colors:
        item = basics.get(COLOR_TO_BASIC_LAND.get(color, ""))
        if item is not None:
            stock[color] = item.quantity if per_color is None else min(item.quantity, per_color)

    counts = dict.fromkeys(stock, 0)
    added = 0
    while added < slots and any(counts[color] < stock[color] for color in stock):
        for color in stock:
            if added >= slots:
                break
            if counts[color] < stock[color]:
                counts[color] += 1
                added += 1

    for color, count in counts.items():
        if count:
            deck.add_card(basics[COLOR_TO_BASIC_LAND[color]].card, count)
    return added


def suggest_combo_partners(cards: Iterable[Card]) -> list[PurchaseRecommendation]:
    """
    Known-combo partners of the given cards that aren't among them.

    High-strength combos give high priority suggestions, the rest
    medium.
    """
    cards = list(cards)
    skip = {card.name.lower() for card in cards}

    suggestions: list[PurchaseRecommendation] = []
    for card in cards:
        for combo, role in get_all_combos_for_card(card.name):
            partners = combo.combo_with if role == "primary" else (combo.card_name,)
            priority = Priority.HIGH if combo.synergy is SynergyStrength.HIGH else Priority.MEDIUM
            for partner in partners:
                if partner.lower() in skip:
                    continue
                suggestions.append(
                    PurchaseRecommendation(
                        card_name=partner,
                        reason=f"Combos with {card.name}: {combo.description}",
                        priority=priority,
                    )
                )

    return merge_by_priority(suggestions)[:MAX_SUGGESTIONS]


def _fits_colors(items: Iterable[OwnedCard], colors: Sequence[str]) -> list[OwnedCard]:
    allowed = set(colors)
    return [item for item in items if set(item.card.color_identity) <= allowed]


def _size_warnings(spells: int, spell_target: int, lands: int, land_target: int) -> list[str]:
    warnings: list[str] = []
    if spells < spell_target:
        warnings.append(f"Could only find {spells} nonland cards (target: {spell_target})")
    if lands < land_target:
        warnings.append(f"Could only find {lands} appropriate lands (target: {land_target})")
    return warnings


def generate_theme_deck(
    theme_id: str,
    collection: Collection,
    lookup: CardLookup,
    format_name: str = "standard",
) -> GeneratedDeck | None:
    """
    Build a 60-card deck around a mechanic theme from owned cards.

    Args:
        theme_id: Theme id or name (see THEMES)
        collection: Cards the player owns
        lookup: Resolves collection names to cards
        format_name: Format the deck is built and validated for

    Returns:
        The deck, or None if fewer than ten owned cards fit the theme

    Raises:
        ValueError: If the theme is unknown
    """
    theme = get_theme(theme_id)
    rules = get_format_rules(format_name)
    owned = load_owned_cards(collection, lookup, rules)

    scored = [(item, score_card(item.card, theme)) for item in owned]
    matching = [(item, score) for item, score in scored if score > 0]
    if len(matching) < MIN_THEME_CARDS:
        logger.info(
            "Only %d owned cards fit the %s theme, need %d",
            len(matching),
            theme.name,
            MIN_THEME_CARDS,
        )
        return None

    synergy = _pool_synergy([item.card for item, _ in matching])
    ranked = [
        item
        for item, _ in sorted(
            matching,
            key=lambda pair: -(pair[1] + SYNERGY_EDGE_SCORE * len(synergy[pair[0].card.id])),
        )
    ]

    deck = Deck(name=f"{theme.name} Deck")
    spells = _add_spells(deck, ranked, NONLAND_TARGET, rules)
    colors = _sorted_colors(get_color_identity(deck.cards))

    lands = _add_basics(deck, owned, colors, LAND_TARGET, MAX_BASICS_PER_COLOR)
    land_pool = ranked + [item for item, score in scored if score == 0]
    lands += _add_lands(deck, _fits_colors(land_pool, colors), LAND_TARGET - lands, rules)

    total = sum(
        strength.rank
        for entry in deck.cards
        for strength in synergy.get(entry.card.id, [])
    )
    synergy_score = (
        min(MAX_SYNERGY_SCORE, round(total / len(deck.cards) * 10)) if deck.cards else 0
    )

    logger.info(
        "Generated %s deck: %d spells, %d lands, synergy %d",
        theme.name,
        spells,
        lands,
        synergy_score,
    )
    return GeneratedDeck(
        name=deck.name,
        theme=theme.name,
        description=theme.description,
        format=rules.name,
        deck=deck,
        color_identity=colors,
        synergy_score=synergy_score,
        validation=validate_deck(deck, rules.name),
        suggestions=suggest_combo_partners(entry.card for entry in deck.cards),
        warnings=_size_warnings(spells, NONLAND_TARGET, lands, LAND_TARGET),
    )


_TOKEN_SWARM = CommanderStrategy(
    "Token Swarm",
    "Generate tokens and overwhelm opponents",
    ("token", "create", "whenever", "generate"),
)
_SACRIFICE_VALUE = CommanderStrategy(
    "Sacrifice Value",
    "Sacrifice creatures for value and recursion",
    ("sacrifice", "when dies", "death trigger", "whenever a creature dies"),
)
_CARD_ADVANTAGE = CommanderStrategy(
    "Card Advantage",
    "Draw cards and maintain card advantage",
    ("draw", "card", "whenever you draw", "library"),
)
_GRAVEYARD_RECURSION = CommanderStrategy(
    "Graveyard Recursion",
    "Use graveyard as a resource with recursion",
    ("graveyard", "reanimate", "flashback", "from graveyard", "return"),
)
_COUNTERS_MATTER = CommanderStrategy(
    "Counters Matter",
    "Build around +1/+1 counters and proliferate",
    ("+1/+1", "counter", "proliferate", "whenever a counter"),
)
_ARTIFACTS = CommanderStrategy(
    "Artifacts & Equipment",
    "Build around artifacts and equipment",
    ("artifact", "equipment", "equip", "whenever an artifact"),
)
_ENCHANTMENTS = CommanderStrategy(
    "Enchantments",
    "Build around enchantments and auras",
    ("enchantment", "aura", "whenever an enchantment"),
)
_AGGRESSIVE = CommanderStrategy(
    "Aggressive",
    "Fast, aggressive strategy with early pressure",
    ("haste", "trample", "combat", "attack", "damage"),
)
_CONTROL = CommanderStrategy(
    "Control",
    "Control the board and win with value",
    ("counter", "destroy", "exile", "removal", "control"),
)
_GOODSTUFF = CommanderStrategy(
    "General Goodstuff",
    "Build a well-rounded deck around the commander",
    (),
)


def commander_strategies(commander: Card) -> list[CommanderStrategy]:
    """Up to three strategies suggested by a commander, in a fixed order."""
    text = commander.text
    types = commander.types
    strategies: list[CommanderStrategy] = []

    if ("create" in text and "token" in text) or (
        "token" in text and ("whenever" in text or "each" in text)
    ):
        strategies.append(_TOKEN_SWARM)
    if "sacrifice" in text or "when dies" in text or "death trigger" in text:
        strategies.append(_SACRIFICE_VALUE)
    if "draw" in text or "card advantage" in text:
        strategies.append(_CARD_ADVANTAGE)
    if any(term in text for term in ("graveyard", "reanimate", "flashback")):
        strategies.append(_GRAVEYARD_RECURSION)
    if "+1/+1" in text or ("counter" in text and "creature" in types):
        strategies.append(_COUNTERS_MATTER)
    if "artifact" in types or "equip" in text:
        strategies.append(_ARTIFACTS)
    if "enchantment" in types or "enchantment" in text:
        strategies.append(_ENCHANTMENTS)
    if commander.cmc <= 3 and any(term in text for term in ("haste", "trample", "combat")):
        strategies.append(_AGGRESSIVE)
    if commander.cmc >= 5 or "counter" in text or "destroy" in text:
        strategies.append(_CONTROL)

    return strategies[:MAX_COMMANDER_STRATEGIES] or [_GOODSTUFF]


def score_for_commander(card: Card, commander: Card, strategy: CommanderStrategy) -> int:
    """How well a card fits a commander strategy; 0 or less means it doesn't."""
    text = card.text
    name = card.name.lower()
    types = card.types

    score = sum(
        COMMANDER_KEYWORD_SCORE
        for keyword in strategy.keywords
        if keyword in text or keyword in name
    )

    if any(color in commander.color_identity for color in card.color_identity):
        score += 2

    if strategy is _TOKEN_SWARM and ("token" in text or "token" in types):
        score += 4
    if strategy is _ARTIFACTS and "artifact" in types:
        score += 4
    if strategy is _ENCHANTMENTS and "enchantment" in types:
        score += 4

    if card.cmc <= 3:
        score += 1
    if card.cmc >= 7:
        score -= 1

    return score


def _shared_terms(text: str) -> set[str]:
    return {term for term in SHARED_TERMS if term in text}


def commander_synergy_score(commander: Card, cards: Sequence[Card]) -> int:
    """0-100 score from cards naming the commander and sharing its terms."""
    if not cards:
        return 0

    commander_name = commander.name.lower()
    commander_terms = _shared_terms(commander.text)
    score = 0
    for card in cards:
        text = card.text
        if not text:
            continue
        if commander_name in text:
            score += COMMANDER_MENTION_SCORE
        score += len(commander_terms & _shared_terms(text))

    return min(MAX_SYNERGY_SCORE, round(score / len(cards) * 10))


def _in_identity(card: Card, identity: set[str]) -> bool:
    return set(card.color_identity) <= identity


def _build_commander_deck(
    commander: Card,
    strategy: CommanderStrategy,
    owned: Sequence[OwnedCard],
    rules: FormatRules,
) -> GeneratedDeck | None:
    commander_key = commander.name.lower()
    candidates: list[tuple[OwnedCard, int]] = []
    for item in owned:
        card = item.card
        if card.name.lower() == commander_key:
            continue
        # Other legendary creatures are left for their own decks
        if "legendary" in card.types and card.is_creature:
            continue
        score = score_for_commander(card, commander, strategy)
        if score > 0:
            candidates.append((item, score))
    candidates.sort(key=lambda pair: -pair[1])
    ranked = [item for item, _ in candidates]

    spell_target = rules.min_main - COMMANDER_LAND_TARGET
    deck = Deck(name=f"{commander.name} - {strategy.name}")
    spells = _add_spells(deck, ranked, spell_target, rules)
    lands = _add_lands(deck, ranked, COMMANDER_LAND_TARGET, rules)
    colors = _sorted_colors(commander.color_identity)
    lands += _add_basics(deck, owned, colors, COMMANDER_LAND_TARGET - lands)

    # The commander counts toward the minimum
    if deck.main_count() + 1 < MIN_COMMANDER_DECK_CARDS:
        logger.debug("Skipping %s: only %d cards", deck.name, deck.main_count())
        return None

    cards = [entry.card for entry in deck.cards]
    return GeneratedDeck(
        name=deck.name,
        theme=strategy.name,
        description=strategy.description,
        format=rules.name,
        deck=deck,
        color_identity=colors,
        synergy_score=commander_synergy_score(commander, cards),
        validation=validate_deck(deck, rules.name),
        commander=commander,
        suggestions=suggest_combo_partners([commander, *cards]),
        warnings=_size_warnings(spells, spell_target, lands, COMMANDER_LAND_TARGET),
    )


def generate_commander_decks(
    commander: Card,
    collection: Collection,
    lookup: CardLookup,
    format_name: str = "commander",
) -> list[GeneratedDeck]:
    """
    Build up to three decks around a commander from owned cards.

    Only cards inside the commander's color identity are used
    (colorless cards always fit). Decks with fewer than twenty cards,
    commander included, are dropped.

    Raises:
        ValueError: If the commander isn't a legendary card
    """
    if "legendary" not in commander.types:
        raise ValueError(f"{commander.name} is not legendary and can't be a commander")

    rules = get_format_rules(format_name)
    identity = set(commander.color_identity)
    owned = [
        item
        for item in load_owned_cards(collection, lookup, rules)
        if _in_identity(item.card, identity)
    ]

    decks: list[GeneratedDeck] = []
    for strategy in commander_strategies(commander):
        generated = _build_commander_deck(commander, strategy, owned, rules)
        if generated is not None:
            decks.append(generated)

    logger.info("Generated %d deck options for %s", len(decks), commander.name)
    return decks
