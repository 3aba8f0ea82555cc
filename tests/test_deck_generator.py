"""Tests for deck generation from a collection."""

import pytest

from decksmith.analysis.deck_generator import (
    THEMES,
    commander_strategies,
    commander_synergy_score,
    generate_commander_decks,
    generate_theme_deck,
    get_theme,
    is_playable,
    score_card,
    suggest_combo_partners,
)
from decksmith.models.analysis import Priority
from decksmith.models.collection import Collection, CollectionEntry
from decksmith.models.format_rules import get_format_rules


def _lookup(*cards):
    index = {card.name.lower(): card for card in cards}
    return lambda name: index.get(name.lower())


def _owned(*pairs) -> Collection:
    return Collection(entries=[CollectionEntry(card.name, quantity) for card, quantity in pairs])


def _quantities(generated) -> dict[str, int]:
    return {entry.card.name: entry.quantity for entry in generated.deck.cards}


@pytest.fixture
def burn_spell(make_card):
    """Build a one-mana burn instant of the given color."""

    def _make(index: int, color: str = "R"):
        return make_card(
            f"Burn {index}",
            cmc=1.0,
            type_line="Instant",
            oracle_text=f"Burn {index} deals 2 damage to any target.",
            colors=(color,),
            color_identity=(color,),
        )

    return _make


class TestThemes:
    def test_ten_themes(self) -> None:
        assert list(THEMES) == [
            "sacrifice",
            "lifegain",
            "tokens",
            "card-draw",
            "graveyard",
            "burn",
            "control",
            "ramp",
            "aggro",
            "combo",
        ]

    def test_get_theme_by_id_or_name(self) -> None:
        assert get_theme("Card-Draw") is THEMES["card-draw"]
        assert get_theme(" mana ramp ") is THEMES["ramp"]

    def test_unknown_theme(self) -> None:
        with pytest.raises(ValueError, match="Unknown theme 'storm'"):
            get_theme("storm")


class TestScoreCard:
    def test_keywords_and_color(self, lightning_bolt) -> None:
        """damage, lightning and bolt match; red is a preferred burn color."""
        assert score_card(lightning_bolt, THEMES["burn"]) == 3 * 3 + 2

    def test_token_type_bonus(self, make_card) -> None:
        soldier = make_card(
            "Soldier", type_line="Token Creature — Soldier", color_identity=("W",)
        )

        assert score_card(soldier, THEMES["tokens"]) == 2 + 5

    def test_control_spell_bonus(self, make_card) -> None:
        cancel = make_card(
            "Cancel",
            type_line="Instant",
            oracle_text="Counter target spell.",
            color_identity=("U",),
        )

        assert score_card(cancel, THEMES["control"]) == 3 + 2 + 1

    def test_off_theme_card(self, make_card) -> None:
        bear = make_card("Bear", type_line="Creature — Bear", color_identity=("G",))

        assert score_card(bear, THEMES["burn"]) == 0


class TestIsPlayable:
    @pytest.mark.parametrize(
        ("legalities", "format_name", "expected"),
        [
            ({"standard": "legal"}, "standard", True),
            ({"standard": "banned"}, "standard", False),
            ({"standard": "not_legal"}, "standard", False),
            ({"commander": "not_legal"}, "commander", True),
            ({}, "standard", True),
        ],
    )
    def test_playable(self, make_card, legalities, format_name, expected) -> None:
        card = make_card("Card", legalities=legalities)

        assert is_playable(card, get_format_rules(format_name)) is expected


class TestGenerateThemeDeck:
    def test_builds_spells_and_lands(self, burn_spell, mountain, make_card) -> None:
        burn = [burn_spell(i) for i in range(12)]
        red_land = make_card("Red Land", type_line="Land")
        green_land = make_card("Green Land", type_line="Land", color_identity=("G",))
        collection = _owned(
            *((card, 4) for card in burn), (mountain, 30), (red_land, 4), (green_land, 4)
        )

        generated = generate_theme_deck(
            "burn", collection, _lookup(*burn, mountain, red_land, green_land)
        )

        quantities = _quantities(generated)
        assert generated.name == "Burn Deck"
        assert generated.theme == "Burn"
        assert generated.format == "standard"
        assert [name for name in quantities if name.startswith("Burn")] == [
            f"Burn {i}" for i in range(9)
        ]
        assert quantities["Mountain"] == 8
        assert quantities["Red Land"] == 4
        assert "Green Land" not in quantities
        assert generated.color_identity == ["R"]
        assert generated.warnings == ["Could only find 12 appropriate lands (target: 24)"]
        assert generated.validation.is_valid is False
        assert "Main deck has 48 cards. Minimum is 60." in generated.validation.errors

    def test_synergy_score(self, burn_spell, mountain) -> None:
        """Each burn spell has three low color edges; ten entries share the total."""
        burn = [burn_spell(i) for i in range(12)]
        collection = _owned(*((card, 4) for card in burn), (mountain, 30))

        generated = generate_theme_deck("burn", collection, _lookup(*burn, mountain))

        assert len(generated.deck.cards) == 10
        assert generated.synergy_score == round(9 * 3 / 10 * 10)

    def test_too_few_theme_cards(self, burn_spell, mountain) -> None:
        burn = [burn_spell(i) for i in range(9)]
        collection = _owned(*((card, 4) for card in burn), (mountain, 30))

        assert generate_theme_deck("burn", collection, _lookup(*burn, mountain)) is None

    def test_spells_stop_at_target(self, burn_spell) -> None:
        burn = [burn_spell(i) for i in range(10)]
        collection = _owned((burn[0], 2), *((card, 4) for card in burn[1:]))

        generated = generate_theme_deck("burn", collection, _lookup(*burn))

        quantities = _quantities(generated)
        assert sum(quantities.values()) == 36
        assert quantities["Burn 0"] == 2
        assert quantities["Burn 9"] == 2

    def test_copies_capped_by_format(self, burn_spell) -> None:
        burn = [burn_spell(i) for i in range(10)]
        collection = _owned((burn[0], 10), *((card, 1) for card in burn[1:]))

        standard = generate_theme_deck("burn", collection, _lookup(*burn))
        commander = generate_theme_deck("burn", collection, _lookup(*burn), "commander")

        assert _quantities(standard)["Burn 0"] == 4
        assert _quantities(commander)["Burn 0"] == 1

    def test_skips_banned_and_unresolved(self, burn_spell, make_card) -> None:
        burn = [burn_spell(i) for i in range(10)]
        banned = make_card(
            "Banned Burn",
            oracle_text="Deals 5 damage to any target.",
            color_identity=("R",),
            legalities={"standard": "banned"},
        )
        collection = _owned(*((card, 1) for card in burn), (banned, 1))
        collection.entries.append(CollectionEntry("Unknown Card", 4))

        generated = generate_theme_deck("burn", collection, _lookup(*burn, banned))

        assert "Banned Burn" not in _quantities(generated)
        assert "Unknown Card" not in _quantities(generated)

    def test_basics_split_across_colors(self, burn_spell, mountain, forest) -> None:
        """Basics are dealt one color at a time, up to eight and the copies owned."""
        burn = [burn_spell(i, "R" if i % 2 else "G") for i in range(10)]
        collection = _owned(*((card, 1) for card in burn), (mountain, 20), (forest, 3))

        generated = generate_theme_deck("burn", collection, _lookup(*burn, mountain, forest))

        quantities = _quantities(generated)
        assert generated.color_identity == ["R", "G"]
        assert quantities["Mountain"] == 8
        assert quantities["Forest"] == 3

    def test_known_combo_partners_suggested(self, burn_spell, lightning_bolt) -> None:
        burn = [burn_spell(i) for i in range(10)]
        collection = _owned((lightning_bolt, 4), *((card, 1) for card in burn))

        generated = generate_theme_deck("burn", collection, _lookup(lightning_bolt, *burn))

        assert _quantities(generated)["Lightning Bolt"] == 4
        snapcaster = next(s for s in generated.suggestions if s.card_name == "Snapcaster Mage")
        assert snapcaster.priority is Priority.HIGH
        assert snapcaster.reason.startswith("Combos with Lightning Bolt: ")

    def test_unknown_theme_raises(self) -> None:
        with pytest.raises(ValueError):
            generate_theme_deck("storm", Collection(), _lookup())


class TestSuggestComboPartners:
    def test_partners_already_present_are_skipped(self, lightning_bolt, snapcaster_mage) -> None:
        names = [s.card_name for s in suggest_combo_partners([lightning_bolt, snapcaster_mage])]

        assert "Snapcaster Mage" not in names
        assert "Lightning Bolt" not in names
        assert "Young Pyromancer" in names
        assert len(names) == len(set(names))

    def test_no_combos(self, make_card) -> None:
        assert suggest_combo_partners([make_card("Vanilla")]) == []


class TestCommanderStrategies:
    def test_token_commander(self, make_card) -> None:
        commander = make_card(
            "Token Lord",
            cmc=3.0,
            type_line="Legendary Creature — Human",
            oracle_text="Whenever you cast a spell, create a 1/1 token.",
        )

        assert [s.name for s in commander_strategies(commander)] == ["Token Swarm"]

    def test_capped_at_three(self, make_card) -> None:
        commander = make_card(
            "Grim Lord",
            cmc=4.0,
            type_line="Legendary Creature — Zombie",
            oracle_text=(
                "Sacrifice a creature: Draw a card. Return target creature card from your "
                "graveyard to your hand. Destroy target artifact."
            ),
        )

        assert [s.name for s in commander_strategies(commander)] == [
            "Sacrifice Value",
            "Card Advantage",
            "Graveyard Recursion",
        ]

    def test_fallback(self, make_card) -> None:
        commander = make_card("Plain Lord", cmc=2.0, type_line="Legendary Creature — Elf")

        assert [s.name for s in commander_strategies(commander)] == ["General Goodstuff"]


class TestGenerateCommanderDecks:
    @pytest.fixture
    def commander(self, make_card):
        return make_card(
            "Krenko",
            cmc=3.0,
            type_line="Legendary Creature — Goblin Warrior",
            oracle_text="Whenever Krenko attacks, create tokens.",
            colors=("R",),
            color_identity=("R",),
        )

    @pytest.fixture
    def token_makers(self, make_card):
        return [
            make_card(
                f"Token Maker {i}",
                cmc=2.0,
                type_line="Sorcery",
                oracle_text="Create a 1/1 red Goblin creature token.",
                color_identity=("R",),
            )
            for i in range(25)
        ]

    def test_builds_singleton_deck(self, commander, token_makers, make_card, mountain) -> None:
        blue = make_card("Blue Tokens", oracle_text="Create a token.", color_identity=("U",))
        legend = make_card(
            "Other Legend",
            type_line="Legendary Creature — Goblin",
            oracle_text="Create a token.",
            color_identity=("R",),
        )
        sol_ring = make_card("Sol Ring", cmc=1.0, type_line="Artifact")
        cards = [*token_makers, blue, legend, sol_ring, mountain]
        collection = _owned(
            *((card, 2) for card in token_makers),
            (blue, 1),
            (legend, 1),
            (sol_ring, 1),
            (mountain, 40),
        )

        decks = generate_commander_decks(commander, collection, _lookup(*cards))

        assert len(decks) == 1
        generated = decks[0]
        quantities = _quantities(generated)
        assert generated.name == "Krenko - Token Swarm"
        assert generated.commander is commander
        assert generated.format == "commander"
        assert generated.color_identity == ["R"]
        assert "Krenko" not in quantities
        assert "Blue Tokens" not in quantities
        assert "Other Legend" not in quantities
        assert quantities["Sol Ring"] == 1
        assert all(quantities[card.name] == 1 for card in token_makers)
        assert quantities["Mountain"] == 36
        assert "Could only find 26 nonland cards (target: 63)" in generated.warnings

    def test_synergy_score(self, commander, token_makers, mountain) -> None:
        """Each token maker shares "create" and "token" with the commander."""
        collection = _owned(*((card, 1) for card in token_makers), (mountain, 40))

        generated = generate_commander_decks(
            commander, collection, _lookup(*token_makers, mountain)
        )[0]

        assert generated.synergy_score == round(25 * 2 / 26 * 10)

    def test_too_few_cards(self, commander, token_makers, mountain) -> None:
        collection = _owned(*((card, 1) for card in token_makers[:5]), (mountain, 10))

        decks = generate_commander_decks(commander, collection, _lookup(*token_makers, mountain))

        assert decks == []

    def test_requires_legendary(self, snapcaster_mage) -> None:
        with pytest.raises(ValueError, match="not legendary"):
            generate_commander_decks(snapcaster_mage, Collection(), _lookup())

    def test_commander_synergy_score_empty(self, commander) -> None:
        assert commander_synergy_score(commander, []) == 0
