"""
Analyze a deck list file from the command line.

The deck file is JSON:

    {
        "name": "Mono-Red Aggro",
        "format": "modern",
        "cards": [{"name": "Lightning Bolt", "quantity": 4}],
        "sideboard": [{"name": "Skullcrack", "quantity": 2, "set_code": "rtr"}]
    }

Cards are resolved against Scryfall. A Scryfall bulk data file can be
given with --card-data to resolve most cards offline.
"""

import argparse
import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from decksmith.analysis.deck_analysis import analyze_deck
from decksmith.config import settings
from decksmith.models.analysis import DeckAnalysisResult
from decksmith.parsers.scryfall import load_card_index
from decksmith.services.card_resolver import (
    CardRequest,
    ScryfallCardResolver,
    resolve_deck,
    resolve_recommendations,
)

logger = logging.getLogger(__name__)


@dataclass
class DeckFile:
    """A deck list read from disk, not yet resolved."""

    name: str
    format: str | None = None
    cards: list[CardRequest] = field(default_factory=list)
    sideboard: list[CardRequest] = field(default_factory=list)


def _lines(raw: list[dict[str, Any]]) -> list[CardRequest]:
    return [
        CardRequest(
            name=line["name"],
            set_code=line.get("set_code"),
            quantity=int(line.get("quantity", 1)),
        )
        for line in raw
    ]


def load_deck_file(path: Path) -> DeckFile:
    """
    Read a JSON deck list.

    Raises:
        FileNotFoundError: If the file doesn't exist
        KeyError: If a card line has no name
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    return DeckFile(
        name=data.get("name") or path.stem,
        format=data.get("format"),
        cards=_lines(data.get("cards", [])),
        sideboard=_lines(data.get("sideboard", [])),
    )


async def run_analysis(
    deck_file: DeckFile,
    format_name: str | None = None,
    card_data: Path | None = None,
    resolver: ScryfallCardResolver | None = None,
) -> tuple[DeckAnalysisResult, list[str]]:
    """
    Resolve and analyze a deck file.

    Args:
        deck_file: Deck list to analyze
        format_name: Overrides the format named in the file
        card_data: Optional Scryfall bulk data file used before the API
        resolver: Resolver to use; one is created (and closed) if omitted

    Returns:
        The analysis and the card names that could not be resolved
    """
    owned = resolver is None
    resolver = resolver or ScryfallCardResolver()

    try:
        if card_data is not None:
            count = resolver.preload(load_card_index(card_data).values())
            logger.info("Loaded %d cards from %s", count, card_data)

        deck, unresolved = await resolve_deck(
            deck_file.name, deck_file.cards, deck_file.sideboard, resolver
        )
        for name in unresolved:
            logger.warning("Could not resolve %s; it is left out of the analysis", name)

        result = analyze_deck(deck, format_name or deck_file.format or settings.default_format)
        result.purchase_recommendations = await resolve_recommendations(
            result.purchase_recommendations, resolver
        )
    finally:
        if owned:
            await resolver.aclose()

    return result, unresolved


def format_report(result: DeckAnalysisResult, unresolved: list[str]) -> str:
    """Plain-text summary of an analysis."""
    lines = [f"Format: {result.format}"]
    lines.append(f"Legal: {'yes' if result.legality.is_valid else 'no'}")
    for error in result.legality.errors:
        lines.append(f"  error: {error}")
    for warning in result.legality.warnings:
        lines.append(f"  warning: {warning}")
    for suggestion in result.legality.suggestions:
        lines.append(f"  suggestion: {suggestion}")

    if result.strategy:
        lines.append(f"Archetype: {result.strategy.archetype}")
        lines.append(result.strategy.strategy)

    lines.append("Win conditions:")
    for condition in result.win_conditions:
        lines.append(f"  {condition.name} ({condition.confidence.value})")

    if result.purchase_recommendations:
        lines.append("Consider adding:")
        for rec in result.purchase_recommendations:
            price = f" ${rec.estimated_price}" if rec.estimated_price else ""
            lines.append(f"  {rec.card_name}{price} - {rec.reason}")

    if unresolved:
        lines.append(f"Unresolved cards: {', '.join(unresolved)}")

    return "\n".join(lines)


def main() -> None:
    """CLI entry point for analyzing a deck file."""
    parser = argparse.ArgumentParser(description="Analyze a deck list")
    parser.add_argument("deck", type=Path, help="Path to a JSON deck list")
    parser.add_argument(
        "--format",
        dest="format_name",
        default=None,
        help="Format to check against (default: the deck file's format, else standard)",
    )
    parser.add_argument(
        "--card-data",
        type=Path,
        default=None,
        help="Scryfall bulk data JSON to resolve cards from before using the API",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    deck_file = load_deck_file(args.deck)
    result, unresolved = asyncio.run(run_analysis(deck_file, args.format_name, args.card_data))
    print(format_report(result, unresolved))


if __name__ == "__main__":
    main()
