"""
Scryfall card resolution.

Resolves card names (optionally pinned to a set), Scryfall ids and
set/collector numbers to Card records over the Scryfall REST API.
Resolved cards are cached in memory for the lifetime of the resolver.

Lookups never raise on network or API failures: the failure is logged
and the lookup yields None. Callers that cannot proceed without a card
use require_card, which raises CardResolutionError instead.

Scryfall asks clients to stay under ~10 requests per second, so bulk
resolution runs in small concurrent batches with a pause between them.
"""

import asyncio
import logging
import re
from collections.abc import AsyncGenerator, Iterable, Sequence
from dataclasses import dataclass
from types import TracebackType
from typing import Any

import httpx

from decksmith.config import settings
from decksmith.models.analysis import PurchaseRecommendation, SynergyEdge, SynergyStrength
from decksmith.models.card import Card
from decksmith.models.deck import Deck, Zone
from decksmith.parsers.scryfall import card_from_scryfall

logger = logging.getLogger(__name__)

MAX_RELATED_CARDS = 5
MAX_RELATED_TERMS = 3

RELATED_TERMS_PATTERN = re.compile(
    r"\b(draw|discard|sacrifice|destroy|exile|counter|return|tap|untap|creature|artifact"
    r"|enchantment|land|planeswalker|instant|sorcery)\w*\b"
)


class CardResolutionError(Exception):
    """Raised when a card that is required cannot be resolved."""

    pass


@dataclass(frozen=True, slots=True)
class CardRequest:
    """
    A card to resolve by name, optionally from a specific set.

    quantity is carried along for deck lines; resolution ignores it.
    """

    name: str
    set_code: str | None = None
    quantity: int = 1


def _cache_key(name: str, set_code: str | None = None) -> str:
    key = name.lower()
    if set_code:
        key = f"{key}:{set_code.lower()}"
    return key


def extract_related_terms(oracle_text: str) -> list[str]:
    """
    Pull search terms out of rules text for a related-card search.

    Returns up to three distinct terms in order of first appearance.
    """
    terms: list[str] = []
    for match in RELATED_TERMS_PATTERN.finditer(oracle_text.lower()):
        term = match.group(0)
        if term not in terms:
            terms.append(term)
    return terms[:MAX_RELATED_TERMS]


class ScryfallCardResolver:
    """
    Async card lookups against the Scryfall API with an in-memory cache.

    Can be used as an async context manager. A client passed in by the
    caller is not closed by the resolver.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        base_url: str | None = None,
        batch_size: int | None = None,
        batch_delay: float | None = None,
    ) -> None:
        self._base_url = (base_url or settings.scryfall_api_url).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=settings.http_timeout,
            headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        )
        self.batch_size = batch_size or settings.resolver_batch_size
        self.batch_delay = settings.resolver_batch_delay if batch_delay is None else batch_delay

        # name[:set] and id keys share one cache
        self._cache: dict[str, Card] = {}
        self._by_name: dict[str, Card] = {}

    async def __aenter__(self) -> "ScryfallCardResolver":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if the resolver created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _get_json(
        self, path: str, params: dict[str, str] | None = None
    ) -> dict[str, Any] | None:
        """GET a Scryfall endpoint, returning None on any HTTP failure."""
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("Scryfall request %s failed: HTTP %d", url, e.response.status_code)
            return None
        except httpx.RequestError as e:
            logger.warning("Scryfall request %s failed: %s", url, e)
            return None
        return response.json()

    def preload(self, cards: Iterable[Card]) -> int:
        """
        Seed the cache with already-known cards, e.g. from a bulk data file.

        Returns:
            Number of cards added
        """
        count = 0
        for card in cards:
            self._remember(card, _cache_key(card.name))
            count += 1
        logger.debug("Preloaded %d cards", count)
        return count

    def _remember(self, card: Card, *keys: str) -> Card:
        for key in keys:
            self._cache[key] = card
        self._cache[card.id] = card
        self._by_name.setdefault(card.name.lower(), card)
        return card

    async def resolve_card(self, name: str, set_code: str | None = None) -> Card | None:
        """
        Resolve a card by exact name.

        Args:
            name: Exact card name
            set_code: Optional set code to pick a specific printing

        Returns:
            Card, or None if Scryfall has no such card or is unreachable
        """
        key = _cache_key(name, set_code)
        if key in self._cache:
            return self._cache[key]

        params = {"exact": name}
        if set_code:
            params["set"] = set_code.lower()

        data = await self._get_json("/cards/named", params)
        if data is None:
            return None
        return self._remember(card_from_scryfall(data), key)

    async def resolve_card_by_id(self, card_id: str) -> Card | None:
        """Resolve a card by its Scryfall id."""
        if card_id in self._cache:
            return self._cache[card_id]

        data = await self._get_json(f"/cards/{card_id}")
        if data is None:
            return None
        return self._remember(card_from_scryfall(data))

    async def resolve_by_set_number(self, set_code: str, collector_number: str) -> Card | None:
        """Resolve a specific printing by set code and collector number."""
        data = await self._get_json(f"/cards/{set_code.lower()}/{collector_number}")
        if data is None:
            return None
        card = card_from_scryfall(data)
        return self._remember(card, _cache_key(card.name, set_code))

    async def require_card(self, name: str, set_code: str | None = None) -> Card:
        """
        Resolve a card that the caller cannot do without.

        Raises:
            CardResolutionError: If the card cannot be resolved
        """
        card = await self.resolve_card(name, set_code)
        if card is None:
            where = f" in set {set_code}" if set_code else ""
            raise CardResolutionError(f"Could not resolve card {name!r}{where}")
        return card

    async def resolve_many(self, requests: Sequence[CardRequest | str]) -> list[Card | None]:
        """
        Resolve many cards, a batch at a time.

        Each batch runs concurrently; the resolver pauses between batches
        to respect Scryfall's rate limit. A failed lookup yields None in
        its slot and does not affect the rest of the batch.

        Args:
            requests: Card names or CardRequests

        Returns:
            Cards (or None) in the same order as the requests
        """
        normalized = [
            request if isinstance(request, CardRequest) else CardRequest(request)
            for request in requests
        ]
        # Repeated names are looked up once
        unique: dict[str, CardRequest] = {}
        for request in normalized:
            unique.setdefault(_cache_key(request.name, request.set_code), request)

        keys = list(unique)
        found: dict[str, Card | None] = {}
        for start in range(0, len(keys), self.batch_size):
            if start:
                await asyncio.sleep(self.batch_delay)
            batch = keys[start : start + self.batch_size]
            cards = await asyncio.gather(
                *(self.resolve_card(unique[key].name, unique[key].set_code) for key in batch)
            )
            found.update(zip(batch, cards))

        results = [found[_cache_key(request.name, request.set_code)] for request in normalized]
        resolved = sum(1 for card in results if card is not None)
        logger.info("Resolved %d of %d cards", resolved, len(normalized))
        return results

    def cache_lookup(self, name: str) -> Card | None:
        """
        Look up an already-resolved card by name without network access.

        Suitable as the synchronous card lookup the analysis engine takes.
        """
        return self._by_name.get(name.lower())

    async def get_related_cards(self, card_name: str, oracle_text: str | None) -> list[Card]:
        """
        Search for cards that share mechanics with a card's rules text.

        Args:
            card_name: The card itself, excluded from the results
            oracle_text: Rules text to pull search terms from

        Returns:
            Up to five related cards, newest first; empty if the text has
            no searchable terms or the search fails
        """
        if not oracle_text:
            return []

        terms = extract_related_terms(oracle_text)
        if not terms:
            return []

        data = await self._get_json(
            "/cards/search",
            {"q": " OR ".join(terms), "unique": "cards", "order": "released"},
        )
        if data is None:
            return []

        related: list[Card] = []
        for item in data.get("data", []):
            if item.get("name") == card_name:
                continue
            related.append(self._remember(card_from_scryfall(item)))
            if len(related) == MAX_RELATED_CARDS:
                break
        return related


async def suggest_related_combos(card: Card, resolver: ScryfallCardResolver) -> list[SynergyEdge]:
    """
    Suggested partners for a card with no in-deck synergy.

    Lower precision than the synergy analyzer: every related card is
    reported as a medium-strength edge.
    """
    related = await resolver.get_related_cards(card.name, card.oracle_text)
    logger.debug("Found %d related cards for %s", len(related), card.name)
    return [
        SynergyEdge(card.name, other.name, "Commonly played together", SynergyStrength.MEDIUM)
        for other in related
    ]


async def resolve_deck(
    name: str,
    cards: Sequence[CardRequest],
    sideboard: Sequence[CardRequest],
    resolver: ScryfallCardResolver,
) -> tuple[Deck, list[str]]:
    """
    Resolve deck lines into a Deck.

    Lines whose card can't be resolved are left out of the deck.

    Returns:
        The deck and the unresolved card names (first-seen order)
    """
    lines: list[tuple[Zone, CardRequest]] = [("main", line) for line in cards]
    lines += [("sideboard", line) for line in sideboard]

    resolved = await resolver.resolve_many([line for _, line in lines])

    deck = Deck(name=name)
    unresolved: list[str] = []
    for (zone, line), card in zip(lines, resolved):
        if card is None:
            if line.name not in unresolved:
                unresolved.append(line.name)
            continue
        deck.add_card(card, line.quantity, zone)

    return deck, unresolved


async def resolve_recommendations(
    recommendations: Sequence[PurchaseRecommendation], resolver: ScryfallCardResolver
) -> list[PurchaseRecommendation]:
    """
    Attach card records and prices to purchase recommendations.

    Recommendations whose card can't be resolved are dropped. Order is
    preserved.
    """
    cards = await resolver.resolve_many([rec.card_name for rec in recommendations])
    resolved: list[PurchaseRecommendation] = []
    for rec, card in zip(recommendations, cards):
        if card is None:
            logger.debug("Dropping unresolved recommendation %r", rec.card_name)
            continue
        resolved.append(
            PurchaseRecommendation(
                card_name=card.name,
                reason=rec.reason,
                priority=rec.priority,
                estimated_price=card.price_usd,
                card=card,
            )
        )
    return resolved


async def get_resolver() -> AsyncGenerator[ScryfallCardResolver, None]:
    """
    Dependency that provides a card resolver for one request.

    Usage in FastAPI:
        @app.post("/cards")
        async def cards(resolver: ScryfallCardResolver = Depends(get_resolver)):
            ...
    """
    async with ScryfallCardResolver() as resolver:
        yield resolver
