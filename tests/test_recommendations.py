"""Tests for purchase recommendations and collection improvements."""

import pytest

from decksmith.analysis.recommendations import (
    MAX_PURCHASE_RECOMMENDATIONS,
    analyze_card_fit,
    colors_compatible,
    find_collection_improvements,
    generate_purchase_recommendations,
    improvement_priority,
    merge_by_priority,
)
from decksmith.models.analysis import (
    CardSynergy,
    Priority,
    PurchaseRecommendation,
    StrategyAnalysis,
    SynergyEdge,
    SynergyStrength,
)
from decksmith.models.collection import Collection, CollectionEntry


def _strategy(archetype: str = "Midrange") -> StrategyAnalysis:
    return StrategyAnalysis(archetype=archetype, strategy="")


def _lookup(*cards):
    index = {card.name.lower(): card for card in cards}
    return lambda name: index.get(name.lower())


class TestMergeByPriority:
    def test_highest_priority_wins(self) -> None:
        merged = merge_by_priority(
            [
                PurchaseRecommendation("Opt", "cheap draw", Priority.LOW),
                PurchaseRecommendation("Shock", "burn", Priority.MEDIUM),
                PurchaseRecommendation("opt", "synergy", Priority.HIGH),
            ]
        )

        assert [(rec.card_name, rec.priority) for rec in merged] == [
            ("opt", Priority.HIGH),
            ("Shock", Priority.MEDIUM),
        ]

    def test_first_wins_ties(self) -> None:
        merged = merge_by_priority(
            [
                PurchaseRecommendation("Opt", "first", Priority.MEDIUM),
                PurchaseRecommendation("Opt", "second", Priority.MEDIUM),
            ]
        )

        assert [rec.reason for rec in merged] == ["first"]


class TestPurchaseRecommendations:
    def test_synergy_and_gap_merge_to_high(self, make_deck, lightning_bolt) -> None:
        """A card suggested twice appears once, at its highest priority."""
        deck = make_deck((lightning_bolt, 4))
        synergies = [
            CardSynergy(
                card=lightning_bolt,
                edges=[
                    SynergyEdge(
                        "Lightning Bolt",
                        "Path to Exile",
                        "Cheap removal pair",
                        SynergyStrength.HIGH,
                    )
                ],
            )
        ]

        recs = generate_purchase_recommendations(deck, _strategy(), synergies)

        assert [(rec.card_name, rec.priority) for rec in recs] == [
            ("Path to Exile", Priority.HIGH),
            ("Opt", Priority.MEDIUM),
        ]
        assert recs[0].reason == "Cheap removal pair"
        assert recs[0].estimated_price is None

    def test_medium_edges_are_not_recommended(self, make_deck, lightning_bolt) -> None:
        synergies = [
            CardSynergy(
                card=lightning_bolt,
                edges=[SynergyEdge("Lightning Bolt", "Shock", "Burn", SynergyStrength.MEDIUM)],
            )
        ]

        recs = generate_purchase_recommendations(
            make_deck((lightning_bolt, 4)), _strategy(), synergies
        )

        assert "Shock" not in [rec.card_name for rec in recs]

    def test_archetype_staples_skip_deck_cards(self, make_deck, lightning_bolt) -> None:
        recs = generate_purchase_recommendations(
            make_deck((lightning_bolt, 4)), _strategy("Aggro"), []
        )

        names = [rec.card_name for rec in recs]
        assert "Lightning Bolt" not in names
        assert names[:3] == ["Monastery Swiftspear", "Goblin Guide", "Bonecrusher Giant"]
        assert recs[0].reason == "Common staple for Aggro decks"

    def test_lookup_drops_unresolved_and_prices(self, make_deck, make_card, mountain) -> None:
        opt = make_card("Opt", price_usd="0.50")

        recs = generate_purchase_recommendations(
            make_deck((mountain, 20)), _strategy(), [], lookup=_lookup(opt)
        )

        assert len(recs) == 1
        assert recs[0].card_name == "Opt"
        assert recs[0].estimated_price == "0.50"
        assert recs[0].card is opt

    def test_gap_staples_skip_deck_cards(self, make_deck, make_card) -> None:
        path = make_card("Path to Exile", oracle_text="Exile target creature.")

        recs = generate_purchase_recommendations(make_deck((path, 4)), _strategy(), [])

        assert [rec.card_name for rec in recs] == ["Fatal Push", "Opt"]

    def test_no_gaps_no_recommendations(self, make_deck, make_card) -> None:
        removal = [
            (make_card(f"Removal {i}", oracle_text="Destroy target creature."), 1)
            for i in range(6)
        ]
        draw = [(make_card(f"Draw {i}", oracle_text="Draw a card."), 1) for i in range(4)]

        recs = generate_purchase_recommendations(make_deck(*removal, *draw), _strategy(), [])

        assert recs == []

    def test_capped(self, make_deck, lightning_bolt) -> None:
        edges = [
            SynergyEdge("Lightning Bolt", f"Partner {i}", "Pairs well", SynergyStrength.HIGH)
            for i in range(20)
        ]
        synergies = [CardSynergy(card=lightning_bolt, edges=edges)]

        recs = generate_purchase_recommendations(
            make_deck((lightning_bolt, 4)), _strategy(), synergies
        )

        assert len(recs) == MAX_PURCHASE_RECOMMENDATIONS
        assert all(rec.priority is Priority.HIGH for rec in recs)


class TestColorsCompatible:
    @pytest.mark.parametrize(
        ("identity", "deck_colors", "expected"),
        [
            ((), {"R"}, True),
            ((), set(), True),
            (("R",), {"R", "G"}, True),
            (("B", "R"), {"R"}, True),
            (("G",), {"R"}, False),
            (("G",), set(), False),
        ],
    )
    def test_compatibility(self, make_card, identity, deck_colors, expected) -> None:
        card = make_card("Candidate", color_identity=identity)

        assert colors_compatible(card, deck_colors) is expected


class TestCollectionImprovements:
    @pytest.fixture
    def goblin_deck(self, make_deck, make_card):
        chieftain = make_card(
            "Goblin Chieftain",
            type_line="Creature — Goblin",
            oracle_text="Haste. Other Goblin creatures you control get +1/+1 and have haste.",
            color_identity=("R",),
        )
        instigator = make_card(
            "Goblin Instigator",
            type_line="Creature — Goblin Rogue",
            oracle_text="When this creature enters, create a 1/1 red Goblin creature token.",
            color_identity=("R",),
        )
        return make_deck((chieftain, 4), (instigator, 4))

    def test_ranked_by_priority(self, goblin_deck, make_card) -> None:
        krenko = make_card(
            "Krenko",
            oracle_text="Create a 1/1 red Goblin creature token for each Goblin you control.",
            color_identity=("R",),
        )
        terminate = make_card(
            "Terminate", oracle_text="Destroy target creature.", color_identity=("B", "R")
        )
        goblin_king = make_card(
            "Goblin King", oracle_text="Other Goblins get +1/+1.", color_identity=("R",)
        )
        murder = make_card("Murder", oracle_text="Destroy target creature.", color_identity=("B",))
        collection = Collection(
            entries=[
                CollectionEntry("Krenko", 1),
                CollectionEntry("Terminate", 2),
                CollectionEntry("Goblin King", 1),
                CollectionEntry("Murder", 4),
                CollectionEntry("Goblin Chieftain", 4),
                CollectionEntry("Unknown Card", 1),
            ]
        )
        lookup = _lookup(krenko, terminate, goblin_king, murder, *goblin_deck.all_cards())

        improvements = find_collection_improvements(goblin_deck, collection, lookup)

        assert [(i.card.name, i.priority) for i in improvements] == [
            ("Goblin King", Priority.HIGH),
            ("Terminate", Priority.MEDIUM),
            ("Krenko", Priority.LOW),
        ]
        assert improvements[0].reason == "Tribal synergy with existing creatures"
        assert improvements[2].reason == "Enhances token strategy"

    def test_empty_collection(self, goblin_deck) -> None:
        assert find_collection_improvements(goblin_deck, Collection(), _lookup()) == []

    def test_collection_is_not_modified(self, goblin_deck, make_card) -> None:
        collection = Collection(entries=[CollectionEntry("Terminate", 2)])
        terminate = make_card("Terminate", oracle_text="Exile target creature.")

        find_collection_improvements(goblin_deck, collection, _lookup(terminate))

        assert collection.entries == [CollectionEntry("Terminate", 2)]


class TestCardFit:
    def test_draw_triggers(self, make_card) -> None:
        engine = make_card("Engine", oracle_text="Whenever you draw a card, scry 1.")
        candidate = make_card("Divination", oracle_text="Draw two cards.")

        assert analyze_card_fit(candidate, [engine]) == "Synergizes with card draw triggers in deck"

    def test_no_fit(self, make_card) -> None:
        assert analyze_card_fit(make_card("Vanilla"), [make_card("Bear")]) is None

    def test_priorities(self) -> None:
        assert improvement_priority("Tribal synergy with existing creatures") is Priority.HIGH
        assert improvement_priority("Provides additional removal") is Priority.MEDIUM
        assert improvement_priority("Adds card advantage") is Priority.MEDIUM
        assert improvement_priority("Adds to counter spell suite") is Priority.LOW
