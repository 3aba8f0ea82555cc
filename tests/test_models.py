"""Tests for card, deck and collection models."""

from decksmith.models.card import Card
from decksmith.models.collection import Collection, CollectionEntry
from decksmith.models.deck import Deck, DeckCard


class TestCard:
    def test_power_value_handles_variable_power(self, make_card) -> None:
        """Missing or "*" power counts as zero; "1+*" counts its fixed part."""
        assert make_card("Tarmogoyf", power="*").power_value == 0
        assert make_card("Shock").power_value == 0
        assert make_card("Grizzly Bears", power="2").power_value == 2
        assert make_card("Gaea's Avenger", power="1+*").power_value == 1
        assert make_card("Sliver", power=" 12").power_value == 12

    def test_legality_lookup(self, make_card) -> None:
        card = make_card("Sol Ring", legalities={"commander": "legal", "vintage": "restricted"})

        assert card.legality("Vintage") == "restricted"
        assert card.legality("standard") is None

    def test_cards_are_hashable(self, make_card) -> None:
        """Cards can be used in sets despite the legalities mapping."""
        card = make_card("Opt", legalities={"modern": "legal"})

        assert card in {card}
        assert hash(card) == hash(make_card("Opt"))

    def test_type_helpers(self, mountain: Card, lightning_bolt: Card) -> None:
        assert mountain.is_land
        assert mountain.is_basic_land
        assert not lightning_bolt.is_land
        assert not lightning_bolt.is_creature


class TestDeck:
    def test_add_card_merges_same_card(self, lightning_bolt: Card) -> None:
        """A card appears once per zone; copies add to the quantity."""
        deck = Deck()
        deck.add_card(lightning_bolt, 2)
        deck.add_card(lightning_bolt, 2)

        assert deck.cards == [DeckCard(card=lightning_bolt, quantity=4)]

    def test_zones_are_separate(self, lightning_bolt: Card) -> None:
        deck = Deck()
        deck.add_card(lightning_bolt, 4)
        deck.add_card(lightning_bolt, 1, zone="sideboard")
        deck.add_card(lightning_bolt, 1, zone="wishlist")

        assert deck.main_count() == 4
        assert deck.sideboard_count() == 1
        assert len(deck.wishlist) == 1

    def test_remove_card(self, lightning_bolt: Card, mountain: Card) -> None:
        deck = Deck()
        deck.add_card(lightning_bolt, 4)
        deck.add_card(mountain, 20)

        deck.remove_card(lightning_bolt.id)
        deck.remove_card("not-there")

        assert [entry.card for entry in deck.cards] == [mountain]

    def test_all_cards_and_names(self, lightning_bolt: Card, snapcaster_mage: Card) -> None:
        deck = Deck()
        deck.add_card(lightning_bolt, 4)
        deck.add_card(snapcaster_mage, 2, zone="sideboard")

        assert deck.all_cards() == [lightning_bolt, snapcaster_mage]
        assert deck.card_names() == {"lightning bolt", "snapcaster mage"}


class TestCollection:
    def test_quantities_add_across_printings(self) -> None:
        collection = Collection(
            entries=[
                CollectionEntry("Lightning Bolt", 2, set_code="m10"),
                CollectionEntry("lightning bolt", 3, set_code="2xm"),
            ]
        )

        assert collection.get_quantity("LIGHTNING BOLT") == 5
        assert collection.owns("Lightning Bolt", 4)
        assert not collection.owns("Counterspell")

    def test_unique_names_first_seen(self) -> None:
        collection = Collection(
            entries=[
                CollectionEntry("Opt", 1),
                CollectionEntry("Shock", 1),
                CollectionEntry("opt", 2),
            ]
        )

        assert collection.unique_names() == ["Opt", "Shock"]
        assert collection.total_cards() == 4

    def test_missing_cards(self, lightning_bolt: Card, mountain: Card) -> None:
        collection = Collection(entries=[CollectionEntry("Lightning Bolt", 1)])
        deck = Deck()
        deck.add_card(lightning_bolt, 4)
        deck.add_card(mountain, 20)

        missing = collection.missing_cards(deck.cards)

        assert [(card.name, card.missing) for card in missing] == [
            ("Lightning Bolt", 3),
            ("Mountain", 20),
        ]
