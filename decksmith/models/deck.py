from dataclasses import dataclass, field
from typing import Literal

from decksmith.models.card import Card

Zone = Literal["main", "sideboard", "wishlist"]


@dataclass
class DeckCard:
    """A card with the number of copies in a zone."""

    card: Card
    quantity: int = 1


@dataclass
class Deck:
    """
    A deck split into main deck, sideboard and wishlist.

    A card id appears at most once within a zone; copies are
    expressed through DeckCard.quantity.

    Attributes:
        name: Deck name
        cards: Main deck
        sideboard: Sideboard
        wishlist: Cards the player wants but hasn't added
    """

    name: str = ""
    cards: list[DeckCard] = field(default_factory=list)
    sideboard: list[DeckCard] = field(default_factory=list)
    wishlist: list[DeckCard] = field(default_factory=list)

    def zone(self, zone: Zone) -> list[DeckCard]:
        if zone == "sideboard":
            return self.sideboard
        if zone == "wishlist":
            return self.wishlist
        return self.cards

    def add_card(self, card: Card, quantity: int = 1, zone: Zone = "main") -> None:
        """Add copies of a card, merging with an existing entry in the zone."""
        entries = self.zone(zone)
        for entry in entries:
            if entry.card.id == card.id:
                entry.quantity += quantity
                return
        entries.append(DeckCard(card=card, quantity=quantity))

    def remove_card(self, card_id: str, zone: Zone = "main") -> None:
        """Remove a card entry from a zone. Missing ids are ignored."""
        entries = self.zone(zone)
        entries[:] = [entry for entry in entries if entry.card.id != card_id]

    def main_count(self) -> int:
        """Total cards in the main deck."""
        return sum(entry.quantity for entry in self.cards)

    def sideboard_count(self) -> int:
        """Total cards in the sideboard."""
        return sum(entry.quantity for entry in self.sideboard)

    def all_cards(self) -> list[Card]:
        """Main deck followed by sideboard cards, one element per entry."""
        return [entry.card for entry in self.cards] + [entry.card for entry in self.sideboard]

    def card_names(self) -> set[str]:
        """Lowercased names of every main deck and sideboard card."""
        return {card.name.lower() for card in self.all_cards()}
