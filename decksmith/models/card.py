import re
from collections.abc import Mapping
from dataclasses import dataclass, field

BASIC_LAND_NAMES: frozenset[str] = frozenset({"Plains", "Island", "Swamp", "Mountain", "Forest"})

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


@dataclass(frozen=True, slots=True)
class Card:
    """
    A fully resolved card record.

    Attributes:
        id: Card database identifier (Scryfall id)
        name: Card name
        mana_cost: Mana cost string (e.g., "{1}{R}")
        cmc: Mana value, independent of color
        type_line: Full type line (e.g., "Creature — Goblin Warrior")
        oracle_text: Rules text, empty for vanilla cards
        power: Printed power, if any (may be "*")
        toughness: Printed toughness, if any
        colors: Colors of the card
        color_identity: Colors used for deck construction legality
        rarity: common, uncommon, rare, mythic
        legalities: Format name -> legal / not_legal / banned / restricted
        price_usd: Advisory market price as reported by the card database
    """

    id: str
    name: str
    cmc: float = 0.0
    type_line: str = ""
    oracle_text: str = ""
    mana_cost: str = ""
    power: str | None = None
    toughness: str | None = None
    colors: tuple[str, ...] = ()
    color_identity: tuple[str, ...] = ()
    rarity: str = "common"
    legalities: Mapping[str, str] = field(default_factory=dict)
    price_usd: str | None = None
    set_code: str | None = None
    set_name: str | None = None
    collector_number: str | None = None
    keywords: tuple[str, ...] = ()

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def text(self) -> str:
        """Lowercased oracle text for keyword matching."""
        return self.oracle_text.lower()

    @property
    def types(self) -> str:
        """Lowercased type line for keyword matching."""
        return self.type_line.lower()

    @property
    def is_land(self) -> bool:
        return "land" in self.types

    @property
    def is_creature(self) -> bool:
        return "creature" in self.types

    @property
    def is_basic_land(self) -> bool:
        return self.name in BASIC_LAND_NAMES

    @property
    def power_value(self) -> int:
        """Numeric power: the leading number of "1+*", 0 when absent or "*"."""
        match = _LEADING_DIGITS.match(self.power or "")
        return int(match.group(1)) if match else 0

    def legality(self, format_name: str) -> str | None:
        """Legality status for a format, or None if the card database has no entry."""
        return self.legalities.get(format_name.lower())
