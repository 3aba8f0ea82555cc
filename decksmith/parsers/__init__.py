from decksmith.parsers.scryfall import card_from_scryfall, load_card_index

__all__ = ["card_from_scryfall", "load_card_index"]
