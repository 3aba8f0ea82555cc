"""
Deck validation against format construction rules.

validate_deck never raises for malformed decks. Every problem is
reported as an error, warning or suggestion on the ValidationResult,
so an empty deck still gets a complete verdict.
"""

import logging

from decksmith.analysis.curve import (
    get_color_identity,
    get_land_count,
    get_total_count,
    is_basic_land,
)
from decksmith.models.analysis import ValidationResult
from decksmith.models.deck import Deck, DeckCard
from decksmith.models.format_rules import FormatRules, get_format_rules

logger = logging.getLogger(__name__)

# Land ratio band considered healthy for 40+ card decks
MIN_LAND_RATIO = 0.35
MAX_LAND_RATIO = 0.45
LAND_RATIO_MIN_DECK_SIZE = 40

# Advisory checks only run for constructed-size decks
ADVISORY_MIN_DECK_SIZE = 60
HIGH_COST_CMC = 6
MAX_HIGH_COST_CARDS = 10
MAX_CONSISTENT_COLORS = 3


def validate_deck(deck: Deck, format_name: str = "standard") -> ValidationResult:
    """
    Check a deck against a format's construction rules.

    Args:
        deck: Deck to validate (not modified)
        format_name: Target format; unknown names use standard rules

    Returns:
        ValidationResult. The deck is valid when there are no errors.
    """
    rules = get_format_rules(format_name)
    result = ValidationResult()

    main_count = get_total_count(deck.cards)
    sideboard_count = get_total_count(deck.sideboard)

    _check_main_size(main_count, rules, result)
    _check_sideboard_size(sideboard_count, rules, result)
    _check_copy_limits(deck.cards, rules, result)
    if rules.commons_only:
        _check_rarity(deck, rules, result)
    _check_legality(deck, rules, result)

    if rules.name != "commander" and main_count >= ADVISORY_MIN_DECK_SIZE:
        _add_advisories(deck.cards, result)

    _add_suggestions(deck.cards, main_count, sideboard_count, rules, result)

    logger.debug(
        "Validated deck %r for %s: %d errors, %d warnings",
        deck.name,
        rules.name,
        len(result.errors),
        len(result.warnings),
    )
    return result


def _check_main_size(main_count: int, rules: FormatRules, result: ValidationResult) -> None:
    if rules.exact_main:
        if main_count != rules.min_main:
            result.errors.append(
                f"Main deck has {main_count} cards. {rules.name.title()} decks "
                f"must have exactly {rules.min_main}."
            )
        return

    if main_count < rules.min_main:
        result.errors.append(f"Main deck has {main_count} cards. Minimum is {rules.min_main}.")
    elif rules.max_main is not None and main_count > rules.max_main:
        result.errors.append(f"Main deck has {main_count} cards. Maximum is {rules.max_main}.")


def _check_sideboard_size(
    sideboard_count: int, rules: FormatRules, result: ValidationResult
) -> None:
    if not rules.allows_sideboard:
        if sideboard_count > 0:
            result.errors.append(
                f"{rules.name.title()} does not allow a sideboard "
                f"({sideboard_count} cards found)."
            )
    elif sideboard_count > rules.max_sideboard:
        result.errors.append(
            f"Sideboard has {sideboard_count} cards. Maximum is {rules.max_sideboard}."
        )


def _check_copy_limits(cards: list[DeckCard], rules: FormatRules, result: ValidationResult) -> None:
    # Keyed by name: two printings of a card share one limit
    counts: dict[str, int] = {}
    for entry in cards:
        counts[entry.card.name] = counts.get(entry.card.name, 0) + entry.quantity

    suffix = " (singleton)" if rules.is_singleton else ""
    for name, count in counts.items():
        if is_basic_land(name):
            continue
        if count > rules.max_copies:
            result.errors.append(
                f"{name} appears {count} times. Maximum is {rules.max_copies}{suffix}."
            )


def _check_rarity(deck: Deck, rules: FormatRules, result: ValidationResult) -> None:
    for zone_name, entries in (("main deck", deck.cards), ("sideboard", deck.sideboard)):
        for entry in entries:
            if entry.card.rarity != "common":
                result.errors.append(
                    f"{entry.card.name} in the {zone_name} is {entry.card.rarity}. "
                    f"{rules.name.title()} allows only commons."
                )


def _check_legality(deck: Deck, rules: FormatRules, result: ValidationResult) -> None:
    # Restricted cards are limited across main deck and sideboard combined
    combined: dict[str, int] = {}
    for entry in deck.cards + deck.sideboard:
        combined[entry.card.name] = combined.get(entry.card.name, 0) + entry.quantity

    reported: set[str] = set()
    for entry in deck.cards + deck.sideboard:
        card = entry.card
        if card.name in reported:
            continue

        status = card.legality(rules.name)
        if status == "banned":
            result.errors.append(f"{card.name} is banned in {rules.name}.")
        elif status == "restricted":
            if combined[card.name] <= 1:
                continue
            result.errors.append(
                f"{card.name} is restricted in {rules.name}. You can only have 1 copy."
            )
        elif status == "not_legal" and not rules.allows_not_legal:
            result.errors.append(f"{card.name} is not legal in {rules.name}.")
        else:
            continue
        reported.add(card.name)


def _add_advisories(cards: list[DeckCard], result: ValidationResult) -> None:
    high_cost = sum(entry.quantity for entry in cards if entry.card.cmc >= HIGH_COST_CMC)
    if high_cost > MAX_HIGH_COST_CARDS:
        result.warnings.append(
            f"Deck has {high_cost} high-cost cards ({HIGH_COST_CMC}+ mana value). "
            "Consider lowering the curve."
        )

    colors = get_color_identity(cards)
    if len(colors) > MAX_CONSISTENT_COLORS:
        result.warnings.append(
            f"Deck uses {len(colors)} colors. "
            "Consider focusing on fewer colors for consistency."
        )


def _add_suggestions(
    cards: list[DeckCard],
    main_count: int,
    sideboard_count: int,
    rules: FormatRules,
    result: ValidationResult,
) -> None:
    if rules.allows_sideboard and sideboard_count < rules.max_sideboard:
        result.suggestions.append(
            f"Consider adding cards to your sideboard (up to {rules.max_sideboard} cards)."
        )

    if main_count < LAND_RATIO_MIN_DECK_SIZE:
        return

    land_count = get_land_count(cards)
    land_ratio = land_count / main_count
    if land_ratio < MIN_LAND_RATIO:
        result.suggestions.append(
            f"You have {land_count} lands ({land_ratio * 100:.1f}%). Consider adding more lands."
        )
    elif land_ratio > MAX_LAND_RATIO:
        result.suggestions.append(
            f"You have {land_count} lands ({land_ratio * 100:.1f}%). Consider reducing lands."
        )
