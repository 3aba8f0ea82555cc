from collections.abc import Iterable
from dataclasses import dataclass, field

from decksmith.models.deck import DeckCard


@dataclass(frozen=True, slots=True)
class CollectionEntry:
    """
    One line of a collection snapshot.

    Attributes:
        name: Card name
        quantity: Copies owned
        set_code: Set the copies belong to, if known
        collector_number: Collector number within the set, if known
    """

    name: str
    quantity: int
    set_code: str | None = None
    collector_number: str | None = None


@dataclass(frozen=True, slots=True)
class MissingCard:
    """A deck card the collection can't fully cover."""

    name: str
    needed: int
    have: int

    @property
    def missing(self) -> int:
        return max(0, self.needed - self.have)


@dataclass
class Collection:
    """
    A read-only snapshot of a player's collection.

    Card names are matched case-insensitively. The same card may
    appear on several lines (different printings); quantities add up.
    """

    entries: list[CollectionEntry] = field(default_factory=list)

    def get_quantity(self, card_name: str) -> int:
        """Copies owned of a card across all printings."""
        key = card_name.lower()
        return sum(entry.quantity for entry in self.entries if entry.name.lower() == key)

    def owns(self, card_name: str, quantity: int = 1) -> bool:
        """Check if collection contains at least `quantity` of a card."""
        return self.get_quantity(card_name) >= quantity

    def unique_names(self) -> list[str]:
        """Distinct card names in first-seen order."""
        seen: dict[str, str] = {}
        for entry in self.entries:
            seen.setdefault(entry.name.lower(), entry.name)
        return list(seen.values())

    def total_cards(self) -> int:
        """Total number of cards in collection."""
        return sum(entry.quantity for entry in self.entries)

    def missing_cards(self, deck_cards: Iterable[DeckCard]) -> list[MissingCard]:
        """Deck cards the collection doesn't have enough copies of."""
        missing: list[MissingCard] = []
        for entry in deck_cards:
            have = self.get_quantity(entry.card.name)
            if have < entry.quantity:
                missing.append(MissingCard(name=entry.card.name, needed=entry.quantity, have=have))
        return missing
