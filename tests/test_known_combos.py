"""Tests for the known combo table."""

from decksmith.analysis.known_combos import (
    KNOWN_COMBOS,
    get_all_combos_for_card,
    get_cards_that_combo_with,
    get_combos_for_card,
)
from decksmith.models.analysis import SynergyStrength


class TestKnownCombos:
    def test_primary_lookup_is_case_insensitive(self) -> None:
        combos = get_combos_for_card("lightning bolt")

        assert len(combos) == 1
        assert "Snapcaster Mage" in combos[0].combo_with

    def test_partner_lookup(self) -> None:
        """Entries that list a card as a partner are found by reverse lookup."""
        primaries = {combo.card_name for combo in get_cards_that_combo_with("Lightning Bolt")}

        assert {"Snapcaster Mage", "Tarmogoyf", "Goblin Guide"} <= primaries

    def test_all_combos_lists_primary_first(self) -> None:
        combos = get_all_combos_for_card("Lightning Bolt")

        assert combos[0][1] == "primary"
        assert all(role == "partner" for _, role in combos[1:])

    def test_unknown_card(self) -> None:
        assert get_all_combos_for_card("Grizzly Bears") == []

    def test_removal_entries_are_medium(self) -> None:
        medium = {
            combo.card_name
            for combo in KNOWN_COMBOS
            if combo.synergy is SynergyStrength.MEDIUM
        }

        assert medium == {"Path to Exile", "Swords to Plowshares", "Birds of Paradise"}

    def test_partners_are_card_names(self) -> None:
        """Partners name concrete cards, not card categories."""
        partners = {partner for combo in KNOWN_COMBOS for partner in combo.combo_with}

        assert "Fetch lands" not in partners
        assert "Mana dorks" not in partners
