from collections.abc import Callable
from typing import Any

import pytest

from decksmith.models.card import Card
from decksmith.models.deck import Deck

CardFactory = Callable[..., Card]
DeckFactory = Callable[..., Deck]


@pytest.fixture
def make_card() -> CardFactory:
    """Build a Card with an id derived from its name."""

    def _make(name: str, **fields: Any) -> Card:
        fields.setdefault("id", name.lower().replace(" ", "-"))
        return Card(name=name, **fields)

    return _make


@pytest.fixture
def mountain(make_card: CardFactory) -> Card:
    return make_card("Mountain", type_line="Basic Land — Mountain")


@pytest.fixture
def forest(make_card: CardFactory) -> Card:
    return make_card("Forest", type_line="Basic Land — Forest")


@pytest.fixture
def lightning_bolt(make_card: CardFactory) -> Card:
    return make_card(
        "Lightning Bolt",
        cmc=1.0,
        mana_cost="{R}",
        type_line="Instant",
        oracle_text="Lightning Bolt deals 3 damage to any target.",
        colors=("R",),
        color_identity=("R",),
    )


@pytest.fixture
def snapcaster_mage(make_card: CardFactory) -> Card:
    return make_card(
        "Snapcaster Mage",
        cmc=2.0,
        mana_cost="{1}{U}",
        type_line="Creature — Human Wizard",
        oracle_text=(
            "Flash\nWhen Snapcaster Mage enters, target instant or sorcery card in your "
            "graveyard gains flashback until end of turn."
        ),
        power="2",
        toughness="1",
        colors=("U",),
        color_identity=("U",),
        rarity="rare",
    )


@pytest.fixture
def make_deck() -> DeckFactory:
    """Build a Deck from (card, quantity) pairs."""

    def _make(
        *cards: tuple[Card, int],
        sideboard: tuple[tuple[Card, int], ...] = (),
        name: str = "Test Deck",
    ) -> Deck:
        deck = Deck(name=name)
        for card, quantity in cards:
            deck.add_card(card, quantity)
        for card, quantity in sideboard:
            deck.add_card(card, quantity, zone="sideboard")
        return deck

    return _make


@pytest.fixture
def scryfall_card() -> Callable[..., dict[str, Any]]:
    """Build a Scryfall API card object."""

    def _make(name: str, **fields: Any) -> dict[str, Any]:
        data: dict[str, Any] = {
            "object": "card",
            "id": f"{name.lower().replace(' ', '-')}-id",
            "name": name,
            "cmc": 1.0,
            "type_line": "Instant",
            "oracle_text": "",
            "mana_cost": "{R}",
            "colors": ["R"],
            "color_identity": ["R"],
            "rarity": "common",
            "legalities": {"standard": "legal", "modern": "legal"},
            "prices": {"usd": "0.25"},
            "set": "m10",
            "set_name": "Magic 2010",
            "collector_number": "146",
        }
        data.update(fields)
        return data

    return _make
