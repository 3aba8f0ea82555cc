"""
Scryfall card JSON conversion.

Turns Scryfall card objects (from the API or a bulk data file) into
Card records. Missing fields get neutral defaults so a sparse record
still converts.

Card objects: https://scryfall.com/docs/api/cards
"""

import json
from pathlib import Path
from typing import Any

from decksmith.models.card import Card

VALID_RARITIES = frozenset({"common", "uncommon", "rare", "mythic"})


def _normalize_rarity(rarity: str) -> str:
    """Normalize rarity to one of: common, uncommon, rare, mythic."""
    # "special" and "bonus" printings are treated as rare
    return rarity if rarity in VALID_RARITIES else "rare"


def _face_value(data: dict[str, Any], key: str) -> Any:
    """
    Read a field from the card or, for multi-faced cards, its faces.

    Double-faced cards keep oracle text, mana cost and power on each
    face rather than at the top level. Text fields are joined with the
    faces separated by a blank line; other fields come from the front.
    """
    if key in data:
        return data[key]

    faces = data.get("card_faces") or []
    values = [face[key] for face in faces if face.get(key) is not None]
    if not values:
        return None
    if key == "oracle_text":
        return "\n\n".join(values)
    if key == "mana_cost":
        return " // ".join(value for value in values if value)
    return values[0]


def card_from_scryfall(data: dict[str, Any]) -> Card:
    """
    Build a Card from a Scryfall card object.

    Args:
        data: Parsed Scryfall card JSON

    Returns:
        Card record
    """
    prices = data.get("prices") or {}
    return Card(
        id=str(data.get("id") or data.get("oracle_id") or data.get("name", "")),
        name=data.get("name", ""),
        cmc=float(data.get("cmc") or 0),
        type_line=_face_value(data, "type_line") or "",
        oracle_text=_face_value(data, "oracle_text") or "",
        mana_cost=_face_value(data, "mana_cost") or "",
        power=_face_value(data, "power"),
        toughness=_face_value(data, "toughness"),
        colors=tuple(_face_value(data, "colors") or ()),
        color_identity=tuple(data.get("color_identity") or ()),
        rarity=_normalize_rarity(data.get("rarity", "common")),
        legalities=dict(data.get("legalities") or {}),
        price_usd=prices.get("usd"),
        set_code=data.get("set"),
        set_name=data.get("set_name"),
        collector_number=data.get("collector_number"),
        keywords=tuple(data.get("keywords") or ()),
    )


def load_card_index(path: Path) -> dict[str, Card]:
    """
    Load a Scryfall bulk data file into a name index.

    Args:
        path: Path to a Scryfall bulk JSON file (a list of card objects)

    Returns:
        Dict mapping lowercased card names to Cards (first printing wins).

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Card data not found at {path}")

    with open(path, encoding="utf-8") as f:
        cards = json.load(f)

    index: dict[str, Card] = {}
    for data in cards:
        name = data.get("name")
        if name and name.lower() not in index:
            index[name.lower()] = card_from_scryfall(data)

    return index
