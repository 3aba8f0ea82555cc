"""
Card synergy analysis.

Builds synergy edges from a focal card to the other cards of a pool.
Edges come from three sources:

1. The curated known-combo table (both directions)
2. Mechanic keywords in rules text, with hand-written co-occurrence rules
3. Structural heuristics: lands, creature types, curve, shared colors

At most one edge is kept per target card (first source wins), then
edges are ranked high > medium > low, keeping input order on ties.
"""

import re
from collections.abc import Callable, Iterable, Sequence

from decksmith.analysis.known_combos import KnownCombo, get_all_combos_for_card
from decksmith.models.analysis import CardSynergy, SynergyEdge, SynergyStrength
from decksmith.models.card import Card
from decksmith.models.deck import Deck

MAX_SYNERGIES = 10

# Shared-color edges are low value; only the first few are kept
MAX_COLOR_EDGES = 3

# Mechanic label -> substrings that show the mechanic in rules text
MECHANIC_KEYWORDS: dict[str, tuple[str, ...]] = {
    "draw": ("card draw", "library", "hand"),
    "discard": ("discard", "graveyard", "reanimation"),
    "sacrifice": ("sacrifice", "death trigger", "token"),
    "counter": ("counter spell", "protection", "hexproof"),
    "mana": ("mana ramp", "mana dork", "ritual"),
    "tutor": ("search library", "tutor", "fetch"),
    "removal": ("destroy", "exile", "bounce"),
    "burn": ("damage", "direct damage", "lightning"),
    "mill": ("mill", "graveyard", "library"),
    "tokens": ("token", "create", "generate"),
}

CREATURE_TYPE_PATTERN = re.compile(
    r"\b(zombie|elf|goblin|human|wizard|warrior|dragon|angel|demon|beast|bird|cat|dog|fish"
    r"|knight|rogue|cleric|shaman|druid|merfolk|vampire|werewolf|spirit|elemental|construct"
    r"|artifact|enchantment)\w*\b",
    re.IGNORECASE,
)

_GENERIC_COST = re.compile(r"\{(\d+)\}")
_COST_IN_TEXT = re.compile(r"\bcost\s+\{(\d+)\}")
_UNCOUNTERABLE = re.compile(r"(cannot|can't) be countered")

ENABLER_MAX_CMC = 2
PAYOFF_MIN_CMC = 6

_Rule = Callable[[Card, Card], tuple[str, SynergyStrength] | None]


def _draw_rule(focal: Card, other: Card) -> tuple[str, SynergyStrength] | None:
    if "whenever you draw" in other.text or "draw a card" in other.text:
        return "Triggers on card draw", SynergyStrength.HIGH
    if "discard" in other.text and "draw" in focal.text:
        return "Draw and discard synergy", SynergyStrength.MEDIUM
    return None


def _sacrifice_rule(_focal: Card, other: Card) -> tuple[str, SynergyStrength] | None:
    if "whenever" in other.text and "dies" in other.text:
        return "Sacrifice triggers death effects", SynergyStrength.HIGH
    if "token" in other.text:
        return "Sacrifice tokens for value", SynergyStrength.MEDIUM
    return None


def _mana_rule(_focal: Card, other: Card) -> tuple[str, SynergyStrength] | None:
    if "{X}" in other.mana_cost or "{x}" in other.text:
        return "Mana ramp enables X spells", SynergyStrength.HIGH
    generic = [
        int(match.group(1))
        for match in (_GENERIC_COST.search(other.mana_cost), _COST_IN_TEXT.search(other.text))
        if match
    ]
    if generic and max(generic) >= 5:
        return "Mana ramp for expensive spells", SynergyStrength.MEDIUM
    return None


def _counter_rule(_focal: Card, other: Card) -> tuple[str, SynergyStrength] | None:
    if "counter target" in other.text or _UNCOUNTERABLE.search(other.text):
        return "Counter spell protection", SynergyStrength.MEDIUM
    return None


# Mechanics without a rule never produce edges
MECHANIC_RULES: dict[str, _Rule] = {
    "draw": _draw_rule,
    "sacrifice": _sacrifice_rule,
    "mana": _mana_rule,
    "counter": _counter_rule,
}


def detect_mechanics(card: Card) -> list[str]:
    """Mechanic labels whose keywords appear in the card's rules text."""
    text = card.text
    return [
        mechanic
        for mechanic, keywords in MECHANIC_KEYWORDS.items()
        if any(keyword in text for keyword in keywords)
    ]


def get_known_combos_for(card_name: str) -> list[KnownCombo]:
    """Known combos involving a card in either role, primary entries first."""
    combos: list[KnownCombo] = []
    for combo, _role in get_all_combos_for_card(card_name):
        if combo not in combos:
            combos.append(combo)
    return combos


def _is_same_card(a: Card, b: Card) -> bool:
    return a.id == b.id or a.name.lower() == b.name.lower()


def _known_combo_edges(
    card: Card, pool: Sequence[Card]
) -> tuple[list[SynergyEdge], list[SynergyEdge]]:
    """Known-combo edges split into (targets in the pool, targets outside it)."""
    pool_names = {other.name.lower(): other.name for other in pool}
    in_pool: list[SynergyEdge] = []
    external: list[SynergyEdge] = []

    for combo, role in get_all_combos_for_card(card.name):
        if role == "primary":
            targets = [(partner, combo.description) for partner in combo.combo_with]
        else:
            targets = [
                (
                    combo.card_name,
                    f"{combo.description} ({combo.card_name} combos with this card)",
                )
            ]

        for target, reason in targets:
            name = pool_names.get(target.lower())
            edge = SynergyEdge(
                source=card.name,
                target=name or target,
                reason=reason,
                strength=combo.synergy,
            )
            (in_pool if name else external).append(edge)

    return in_pool, external


def _mechanic_edges(card: Card, pool: Sequence[Card]) -> list[SynergyEdge]:
    edges: list[SynergyEdge] = []
    for mechanic in detect_mechanics(card):
        rule = MECHANIC_RULES.get(mechanic)
        if rule is None:
            continue
        for other in pool:
            match = rule(card, other)
            if match:
                reason, strength = match
                edges.append(SynergyEdge(card.name, other.name, reason, strength))
    return edges


def _structural_edges(card: Card, pool: Sequence[Card]) -> list[SynergyEdge]:
    edges: list[SynergyEdge] = []

    if "land" in card.types or "land" in card.text:
        for other in pool:
            if other.is_land:
                edges.append(
                    SynergyEdge(
                        card.name,
                        other.name,
                        "Works with land-based strategies",
                        SynergyStrength.MEDIUM,
                    )
                )

    creature_types = {match.lower() for match in CREATURE_TYPE_PATTERN.findall(card.text)}
    if creature_types:
        for other in pool:
            if any(creature_type in other.types for creature_type in creature_types):
                edges.append(
                    SynergyEdge(
                        card.name,
                        other.name,
                        "Shares creature type synergy",
                        SynergyStrength.HIGH,
                    )
                )

    if card.cmc <= ENABLER_MAX_CMC:
        for other in pool:
            if other.cmc >= PAYOFF_MIN_CMC:
                edges.append(
                    SynergyEdge(
                        card.name,
                        other.name,
                        "Low cost enabler for high cost payoff",
                        SynergyStrength.MEDIUM,
                    )
                )

    if card.colors:
        colors = set(card.colors)
        same_color = [other for other in pool if colors.intersection(other.colors)]
        for other in same_color[:MAX_COLOR_EDGES]:
            edges.append(SynergyEdge(card.name, other.name, "Color synergy", SynergyStrength.LOW))

    return edges


def deduplicate_edges(edges: Iterable[SynergyEdge]) -> list[SynergyEdge]:
    """Keep the first edge for each target card name."""
    seen: set[str] = set()
    unique: list[SynergyEdge] = []
    for edge in edges:
        key = edge.target.lower()
        if key not in seen:
            seen.add(key)
            unique.append(edge)
    return unique


def rank_edges(edges: Iterable[SynergyEdge]) -> list[SynergyEdge]:
    """Sort by strength, strongest first. Stable on ties."""
    return sorted(edges, key=lambda edge: -edge.strength.rank)


def find_synergies(
    card: Card,
    candidate_pool: Iterable[Card],
    max_results: int = MAX_SYNERGIES,
) -> list[SynergyEdge]:
    """
    Find cards that synergize with a focal card.

    Known-combo partners are always reported, including partners that
    are not in the pool, so callers can suggest them as additions.
    Partners that are in the pool are never cut by max_results.

    Args:
        card: Focal card
        candidate_pool: Cards to test against (the focal card is skipped)
        max_results: Maximum edges to return

    Returns:
        Up to max_results edges, strongest first
    """
    pool = [other for other in candidate_pool if not _is_same_card(card, other)]

    known_in_pool, known_external = _known_combo_edges(card, pool)
    edges = deduplicate_edges(
        known_in_pool
        + _mechanic_edges(card, pool)
        + _structural_edges(card, pool)
        + known_external
    )

    # Known partners already in the pool survive the cut whatever their strength
    pinned_targets = {edge.target.lower() for edge in known_in_pool}
    pinned = rank_edges(edge for edge in edges if edge.target.lower() in pinned_targets)
    others = rank_edges(edge for edge in edges if edge.target.lower() not in pinned_targets)
    kept = pinned[:max_results] + others[: max(max_results - len(pinned), 0)]

    return rank_edges(kept)


def overall_synergy(edges: Sequence[SynergyEdge]) -> SynergyStrength:
    """Summarize a card's edges as a single strength."""
    high = sum(1 for edge in edges if edge.strength is SynergyStrength.HIGH)
    medium = sum(1 for edge in edges if edge.strength is SynergyStrength.MEDIUM)

    if high >= 2 or (high >= 1 and medium >= 2):
        return SynergyStrength.HIGH
    if high >= 1 or medium >= 2:
        return SynergyStrength.MEDIUM
    return SynergyStrength.LOW


def analyze_deck_synergies(deck: Deck) -> list[CardSynergy]:
    """
    Synergy edges for every main deck card against the whole deck.

    The pool includes the sideboard. Results are ordered by overall
    strength, keeping main deck order on ties.
    """
    pool = deck.all_cards()
    synergies: list[CardSynergy] = []

    for entry in deck.cards:
        edges = find_synergies(entry.card, pool)
        synergies.append(
            CardSynergy(card=entry.card, edges=edges, overall=overall_synergy(edges))
        )

    return sorted(synergies, key=lambda synergy: -synergy.overall.rank)
