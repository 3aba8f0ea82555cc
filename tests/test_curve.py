"""Tests for mana curve and color utilities."""

from decksmith.analysis.curve import (
    CardCategory,
    average_mana_value,
    calculate_mana_curve,
    count_at_or_above,
    count_at_or_below,
    get_card_category,
    get_color_distribution,
    get_color_identity,
    get_land_count,
    group_by_category,
    is_basic_land,
)
from decksmith.models.analysis import ManaCurvePoint
from decksmith.models.deck import DeckCard


class TestManaCurve:
    def test_curve_is_ascending_and_weighted(self, make_card) -> None:
        """Two 3-drops and one 0-drop give [{0, 1}, {3, 2}]."""
        cards = [
            DeckCard(make_card("Three Drop", cmc=3.0), 2),
            DeckCard(make_card("Ornithopter", cmc=0.0), 1),
        ]

        assert calculate_mana_curve(cards) == [ManaCurvePoint(0, 1), ManaCurvePoint(3, 2)]

    def test_fractional_mana_value_is_floored(self, make_card) -> None:
        cards = [DeckCard(make_card("Little Girl", cmc=0.5), 1)]

        assert calculate_mana_curve(cards) == [ManaCurvePoint(0, 1)]

    def test_empty_curve(self) -> None:
        assert calculate_mana_curve([]) == []
        assert average_mana_value([]) == 0.0

    def test_average_and_counts(self) -> None:
        curve = [ManaCurvePoint(1, 4), ManaCurvePoint(2, 4), ManaCurvePoint(5, 2)]

        assert average_mana_value(curve) == 2.2
        assert count_at_or_below(curve, 2) == 8
        assert count_at_or_above(curve, 5) == 2


class TestColors:
    def test_distribution_is_weighted_with_all_keys(self, make_card) -> None:
        cards = [
            DeckCard(make_card("Boros Charm", color_identity=("R", "W")), 4),
            DeckCard(make_card("Shock", color_identity=("R",)), 2),
            DeckCard(make_card("Ornithopter"), 4),
        ]

        assert get_color_distribution(cards) == {
            "W": 4,
            "U": 0,
            "B": 0,
            "R": 6,
            "G": 0,
            "C": 0,
        }

    def test_color_identity_union(self, make_card) -> None:
        cards = [
            DeckCard(make_card("Boros Charm", color_identity=("R", "W")), 1),
            DeckCard(make_card("Opt", color_identity=("U",)), 1),
        ]

        assert get_color_identity(cards) == {"R", "W", "U"}


class TestCategories:
    def test_basic_lands_by_name(self, make_card) -> None:
        """Only the five basic names count, not snow-covered basics."""
        assert is_basic_land("Forest")
        assert not is_basic_land("Snow-Covered Forest")
        assert is_basic_land(make_card("Island"))

    def test_land_count(self, mountain, lightning_bolt, make_card) -> None:
        cards = [
            DeckCard(mountain, 18),
            DeckCard(make_card("Sacred Foundry", type_line="Land — Mountain Plains"), 4),
            DeckCard(lightning_bolt, 4),
        ]

        assert get_land_count(cards) == 22

    def test_category_precedence(self, make_card, mountain) -> None:
        assert get_card_category(mountain) is CardCategory.BASIC_LAND
        assert (
            get_card_category(make_card("Dryad Arbor", type_line="Land Creature — Forest Dryad"))
            is CardCategory.NONBASIC_LAND
        )
        assert (
            get_card_category(make_card("Ornithopter", type_line="Artifact Creature — Thopter"))
            is CardCategory.CREATURE
        )
        assert get_card_category(make_card("Scheme", type_line="Scheme")) is CardCategory.OTHER

    def test_group_by_category_order(self, make_card, mountain, lightning_bolt) -> None:
        shock = make_card("Shock", type_line="Instant")
        cards = [DeckCard(shock, 4), DeckCard(mountain, 20), DeckCard(lightning_bolt, 4)]

        groups = group_by_category(cards)

        assert list(groups) == [CardCategory.BASIC_LAND, CardCategory.INSTANT]
        assert [entry.card.name for entry in groups[CardCategory.INSTANT]] == [
            "Lightning Bolt",
            "Shock",
        ]
