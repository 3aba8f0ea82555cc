"""
Curated table of well-known card interactions.

Entries are read-only and looked up case-insensitively in both
directions: a card may be an entry's primary card or one of its
partners.
"""

from dataclasses import dataclass
from typing import Literal

from decksmith.models.analysis import SynergyStrength

ComboRole = Literal["primary", "partner"]


@dataclass(frozen=True, slots=True)
class KnownCombo:
    """
    A hand-maintained synergy entry.

    Attributes:
        card_name: Primary card
        combo_with: Cards that work well with the primary card
        description: Why they work together
        formats: Formats where the interaction is commonly played
        synergy: Strength of the interaction
    """

    card_name: str
    combo_with: tuple[str, ...]
    description: str
    formats: tuple[str, ...]
    synergy: SynergyStrength


_HIGH = SynergyStrength.HIGH
_MEDIUM = SynergyStrength.MEDIUM

KNOWN_COMBOS: tuple[KnownCombo, ...] = (
    KnownCombo(
        "Lightning Bolt",
        ("Snapcaster Mage", "Young Pyromancer", "Guttersnipe", "Kiln Fiend"),
        "Works great with spell-synergy creatures and flashback effects",
        ("modern", "legacy", "vintage"),
        _HIGH,
    ),
    KnownCombo(
        "Snapcaster Mage",
        ("Lightning Bolt", "Counterspell", "Thoughtseize", "Path to Exile"),
        "Gives flashback to any instant or sorcery in your graveyard",
        ("modern", "legacy", "vintage"),
        _HIGH,
    ),
    KnownCombo(
        "Dark Confidant",
        ("Liliana of the Veil", "Thoughtseize", "Tarmogoyf", "Deathrite Shaman"),
        "Core of Jund/Abzan midrange - card advantage engine",
        ("modern", "legacy"),
        _HIGH,
    ),
    KnownCombo(
        "Tarmogoyf",
        ("Thoughtseize", "Lightning Bolt", "Fatal Push", "Dark Confidant"),
        "Grows with graveyard - pairs with discard and removal",
        ("modern", "legacy"),
        _HIGH,
    ),
    KnownCombo(
        "Jace, the Mind Sculptor",
        ("Snapcaster Mage", "Counterspell", "Brainstorm", "Force of Will"),
        "Control finisher - works with counterspells and card selection",
        ("legacy", "vintage"),
        _HIGH,
    ),
    KnownCombo(
        "Sol Ring",
        ("Mana Crypt", "Mana Vault", "Grim Monolith", "Basalt Monolith"),
        "Mana acceleration - pairs with other fast mana",
        ("commander", "vintage"),
        _HIGH,
    ),
    KnownCombo(
        "Counterspell",
        ("Snapcaster Mage", "Force of Will", "Brainstorm", "Ponder"),
        "Core control piece - pairs with card selection and flashback",
        ("legacy", "vintage", "pauper"),
        _HIGH,
    ),
    KnownCombo(
        "Thoughtseize",
        ("Dark Confidant", "Liliana of the Veil", "Tarmogoyf", "Inquisition of Kozilek"),
        "Hand disruption - core of black midrange strategies",
        ("modern", "legacy"),
        _HIGH,
    ),
    KnownCombo(
        "Young Pyromancer",
        ("Lightning Bolt", "Ponder", "Preordain", "Gitaxian Probe"),
        "Token generator - triggers on instant/sorcery casts",
        ("modern", "legacy", "pauper"),
        _HIGH,
    ),
    KnownCombo(
        "Goblin Guide",
        ("Lightning Bolt", "Lava Spike", "Rift Bolt", "Monastery Swiftspear"),
        "Aggressive red creature - pairs with burn spells",
        ("modern", "legacy"),
        _HIGH,
    ),
    KnownCombo(
        "Path to Exile",
        ("Snapcaster Mage", "Restoration Angel", "Wall of Omens"),
        "Efficient removal - pairs with flash creatures and value",
        ("modern", "legacy"),
        _MEDIUM,
    ),
    KnownCombo(
        "Fatal Push",
        ("Thoughtseize", "Dark Confidant", "Tarmogoyf"),
        "Efficient removal - triggers revolt with fetch lands",
        ("modern", "legacy"),
        _HIGH,
    ),
    KnownCombo(
        "Brainstorm",
        ("Ponder", "Preordain", "Force of Will"),
        "Card selection - best with shuffle effects from fetch lands",
        ("legacy", "vintage"),
        _HIGH,
    ),
    KnownCombo(
        "Ponder",
        ("Brainstorm", "Preordain", "Snapcaster Mage", "Delver of Secrets"),
        "Card selection - pairs with other cantrips and flashback",
        ("legacy", "vintage", "pauper"),
        _HIGH,
    ),
    KnownCombo(
        "Delver of Secrets",
        ("Ponder", "Preordain", "Brainstorm", "Lightning Bolt"),
        "Aggressive threat - needs instant/sorcery density",
        ("legacy", "pauper"),
        _HIGH,
    ),
    KnownCombo(
        "Liliana of the Veil",
        ("Thoughtseize", "Dark Confidant", "Tarmogoyf", "Fatal Push"),
        "Control/grind engine - pairs with discard and removal",
        ("modern", "legacy"),
        _HIGH,
    ),
    KnownCombo(
        "Force of Will",
        ("Brainstorm", "Ponder", "Counterspell", "Jace, the Mind Sculptor"),
        "Free counter - pairs with card selection to maintain card advantage",
        ("legacy", "vintage"),
        _HIGH,
    ),
    KnownCombo(
        "Swords to Plowshares",
        ("Snapcaster Mage", "Restoration Angel", "Counterspell"),
        "Efficient removal - pairs with flash creatures and control",
        ("legacy", "vintage"),
        _MEDIUM,
    ),
    KnownCombo(
        "Birds of Paradise",
        ("Noble Hierarch", "Llanowar Elves", "Elvish Mystic"),
        "Mana acceleration - pairs with other ramp creatures",
        ("modern", "legacy"),
        _MEDIUM,
    ),
    KnownCombo(
        "Noble Hierarch",
        ("Birds of Paradise", "Tarmogoyf", "Knight of the Reliquary"),
        "Mana dork with exalted - pairs with creature strategies",
        ("modern", "legacy"),
        _HIGH,
    ),
    KnownCombo(
        "Stoneforge Mystic",
        ("Batterskull", "Sword of Fire and Ice", "Umezawa's Jitte"),
        "Tutor for equipment - pairs with powerful artifacts",
        ("modern", "legacy"),
        _HIGH,
    ),
    KnownCombo(
        "Ragavan, Nimble Pilferer",
        ("Lightning Bolt", "Dragon's Rage Channeler", "Monastery Swiftspear"),
        "Aggressive threat - pairs with red aggro and prowess",
        ("modern", "legacy"),
        _HIGH,
    ),
)


def get_combos_for_card(card_name: str) -> list[KnownCombo]:
    """Entries where the card is the primary card."""
    key = card_name.lower()
    return [combo for combo in KNOWN_COMBOS if combo.card_name.lower() == key]


def get_cards_that_combo_with(card_name: str) -> list[KnownCombo]:
    """Entries that list the card as a partner."""
    key = card_name.lower()
    return [
        combo
        for combo in KNOWN_COMBOS
        if any(partner.lower() == key for partner in combo.combo_with)
    ]


def get_all_combos_for_card(card_name: str) -> list[tuple[KnownCombo, ComboRole]]:
    """Primary entries first, then entries that name the card as a partner."""
    primary: list[tuple[KnownCombo, ComboRole]] = [
        (combo, "primary") for combo in get_combos_for_card(card_name)
    ]
    partner: list[tuple[KnownCombo, ComboRole]] = [
        (combo, "partner") for combo in get_cards_that_combo_with(card_name)
    ]
    return primary + partner
