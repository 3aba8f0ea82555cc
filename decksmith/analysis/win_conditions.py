"""
Win-condition detection.

Nine independent detectors look at the rules text of every main deck
and sideboard card. Each card entry is counted once regardless of
quantity. A deck can match several detectors at once; all matches are
returned, strongest confidence first. When nothing matches, a single
low-confidence "General Strategy" hypothesis is returned instead, so
the result is never empty.
"""

import logging
import re
from collections.abc import Callable, Sequence

from decksmith.models.analysis import Confidence, WinCondition, WinConditionType
from decksmith.models.card import Card
from decksmith.models.deck import Deck

logger = logging.getLogger(__name__)

MAX_KEY_CARDS = 5

# Damage assumed for burn spells whose text has no explicit amount
DEFAULT_BURN_DAMAGE = 3

_DAMAGE_AMOUNT = re.compile(r"(\d+)\s+damage")

EVASIVE_KEYWORDS = ("haste", "trample", "menace")

_Detector = Callable[[Sequence[Card]], WinCondition | None]


def _has(text: str, *terms: str) -> bool:
    return all(term in text for term in terms)


def is_alternative_win(card: Card) -> bool:
    return "you win the game" in card.text


def is_burn(card: Card) -> bool:
    text = card.text
    name = card.name.lower()
    return (
        (_has(text, "deals", "damage") and "combat" not in text)
        or "direct damage" in text
        or "bolt" in name
        or "shock" in name
        or "lightning" in name
        or ("damage" in text and ("instant" in card.types or "sorcery" in card.types))
    )


def estimate_damage(card: Card) -> int:
    """First "N damage" amount in the text, or a default estimate."""
    match = _DAMAGE_AMOUNT.search(card.text)
    return int(match.group(1)) if match else DEFAULT_BURN_DAMAGE


def is_aggressive_creature(card: Card) -> bool:
    if not card.is_creature:
        return False
    power = card.power_value
    cmc = card.cmc
    return (
        (power >= 3 and cmc <= 3)
        or any(keyword in card.text for keyword in EVASIVE_KEYWORDS)
        or (power >= 5 and cmc <= 5)
    )


def is_mill(card: Card) -> bool:
    text = card.text
    return (
        "mill" in text
        or _has(text, "put", "graveyard", "library")
        or _has(text, "target player puts", "graveyard")
    )


def is_combo_indicator(card: Card) -> bool:
    text = card.text
    return (
        "infinite" in text
        or _has(text, "untap", "target")
        or _has(text, "copy", "spell")
        or _has(text, "whenever", "you may")
        or _has(text, "draw", "card", "whenever")
    )


def is_infinite_mana_piece(card: Card) -> bool:
    return _has(card.text, "add", "mana", "untap")


def is_tutor(card: Card) -> bool:
    return _has(card.text, "search", "library")


def is_control_finisher(card: Card) -> bool:
    types = card.types
    cmc = card.cmc
    return (
        ("planeswalker" in types and cmc >= 4)
        or ("creature" in types and cmc >= 6)
        or ("creature" in types and "hexproof" in card.text and cmc >= 4)
        or is_alternative_win(card)
        or "emblem" in card.text
    )


def is_control_card(card: Card) -> bool:
    text = card.text
    return "counter" in text or "destroy" in text or "exile" in text


def is_token_generator(card: Card) -> bool:
    text = card.text
    return (
        _has(text, "create", "token")
        or _has(text, "put", "token")
        or ("token" in text and ("creature" in text or "each" in text))
    )


def is_drain(card: Card) -> bool:
    text = card.text
    return _has(text, "lose", "life") or "drain" in text or _has(text, "damage", "gain", "life")


def is_poison(card: Card) -> bool:
    return "poison" in card.text or "infect" in card.text or "infect" in card.name.lower()


def _detect_alternative(cards: Sequence[Card]) -> WinCondition | None:
    alt_win = [card for card in cards if is_alternative_win(card)]
    if not alt_win:
        return None

    gameplan: list[str] = []
    for card in alt_win:
        text = card.text
        if "poison" in text:
            gameplan.append(
                f"Get opponent to 10 poison counters using {card.name} and poison/infect creatures"
            )
        elif "mill" in text or "library" in text:
            gameplan.append(f"Mill opponent's entire library using {card.name}")
        elif "life" in text and "40" in text:
            gameplan.append(f"Reach 40+ life to trigger {card.name}'s win condition")
        else:
            gameplan.append(f"Meet {card.name}'s specific win condition requirements")

    names = ", ".join(card.name for card in alt_win)
    return WinCondition(
        type=WinConditionType.ALTERNATIVE,
        name="Alternative Win Condition",
        description=(
            f"Deck contains {len(alt_win)} card(s) with alternative win conditions: {names}"
        ),
        cards=alt_win,
        confidence=Confidence.HIGH if len(alt_win) >= 2 else Confidence.MEDIUM,
        gameplan=gameplan,
        key_cards=alt_win,
    )


def _detect_burn(cards: Sequence[Card]) -> WinCondition | None:
    burn = [card for card in cards if is_burn(card)]
    potential = sum(estimate_damage(card) for card in burn)
    if len(burn) < 8 and potential < 20:
        return None

    if len(burn) >= 12:
        confidence = Confidence.HIGH
    elif len(burn) >= 8:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW

    return WinCondition(
        type=WinConditionType.BURN,
        name="Burn/Direct Damage",
        description=f"Deck has {len(burn)} burn spells capable of dealing ~{potential} damage",
        cards=burn,
        confidence=confidence,
        gameplan=[
            "Use burn spells to control early threats",
            "Save burn for direct damage to opponent when possible",
            "Aim to deal 20 damage through burn spells",
            "Use burn to finish opponent after establishing board presence",
        ],
        key_cards=burn[:MAX_KEY_CARDS],
    )


def _detect_combat(cards: Sequence[Card]) -> WinCondition | None:
    creatures = [card for card in cards if is_aggressive_creature(card)]
    if len(creatures) < 12:
        return None

    if len(creatures) >= 20:
        confidence = Confidence.HIGH
    elif len(creatures) >= 15:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW

    total_power = sum(card.power_value for card in creatures)
    return WinCondition(
        type=WinConditionType.COMBAT,
        name="Combat Damage",
        description=(
            f"Deck has {len(creatures)} aggressive creatures with total power ~{total_power}"
        ),
        cards=creatures,
        confidence=confidence,
        gameplan=[
            "Play efficient creatures early to establish board presence",
            "Use removal to clear the way for attacks",
            "Apply pressure each turn to reduce opponent life total",
            "Use combat tricks and pump spells to push through damage",
            "Finish with large threats or evasive creatures",
        ],
        key_cards=sorted(creatures, key=lambda card: -card.power_value)[:MAX_KEY_CARDS],
    )


def _detect_mill(cards: Sequence[Card]) -> WinCondition | None:
    mill = [card for card in cards if is_mill(card)]
    if len(mill) < 4:
        return None

    if len(mill) >= 8:
        confidence = Confidence.HIGH
    elif len(mill) >= 6:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW

    return WinCondition(
        type=WinConditionType.MILL,
        name="Mill",
        description=f"Deck has {len(mill)} mill effects to deck the opponent",
        cards=mill,
        confidence=confidence,
        gameplan=[
            "Use mill effects consistently each turn",
            "Protect yourself while milling opponent",
            "Use graveyard hate if opponent tries to use their graveyard",
            "Aim to mill opponent's entire library (typically 53-60 cards)",
            "Combine multiple mill effects for faster wins",
        ],
        key_cards=mill,
    )


def _detect_combo(cards: Sequence[Card]) -> WinCondition | None:
    indicators = [card for card in cards if is_combo_indicator(card)]
    mana_and_tutor = any(is_infinite_mana_piece(card) for card in cards) and any(
        is_tutor(card) for card in cards
    )
    if len(indicators) < 3 and not mana_and_tutor:
        return None

    if mana_and_tutor:
        confidence = Confidence.HIGH
    elif len(indicators) >= 5:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW

    return WinCondition(
        type=WinConditionType.COMBO,
        name="Combo",
        description=f"Deck contains combo pieces: {len(indicators)} potential combo cards",
        cards=indicators,
        confidence=confidence,
        gameplan=[
            "Assemble combo pieces in hand",
            "Use tutors to find missing pieces",
            "Protect combo with counterspells or protection",
            "Execute combo when safe to do so",
            "Have backup plan if combo is disrupted",
        ],
        key_cards=indicators,
    )


def _detect_control(cards: Sequence[Card]) -> WinCondition | None:
    finishers = [card for card in cards if is_control_finisher(card)]
    control_cards = sum(1 for card in cards if is_control_card(card))
    if len(finishers) < 2 or control_cards < 8:
        return None

    return WinCondition(
        type=WinConditionType.CONTROL,
        name="Control Finisher",
        description=f"Deck uses {len(finishers)} finishers after establishing control",
        cards=finishers,
        confidence=Confidence.HIGH if len(finishers) >= 3 else Confidence.MEDIUM,
        gameplan=[
            "Use removal and counterspells to control the board",
            "Draw cards to maintain card advantage",
            "Survive until you can deploy finishers safely",
            "Protect finishers with counterspells and removal",
            "Win through repeated attacks or planeswalker ultimates",
        ],
        key_cards=finishers,
    )


def _detect_tokens(cards: Sequence[Card]) -> WinCondition | None:
    generators = [card for card in cards if is_token_generator(card)]
    if len(generators) < 4:
        return None

    return WinCondition(
        type=WinConditionType.TOKENS,
        name="Token Swarm",
        description=f"Deck generates tokens through {len(generators)} token-producing cards",
        cards=generators,
        confidence=Confidence.HIGH if len(generators) >= 6 else Confidence.MEDIUM,
        gameplan=[
            "Generate tokens consistently each turn",
            "Use anthems and pump effects to make tokens threatening",
            "Protect token generators from removal",
            "Overwhelm opponent with large numbers of tokens",
            "Use tokens for both offense and defense",
        ],
        key_cards=generators,
    )


def _detect_drain(cards: Sequence[Card]) -> WinCondition | None:
    drain = [card for card in cards if is_drain(card)]
    if len(drain) < 3:
        return None

    return WinCondition(
        type=WinConditionType.DRAIN,
        name="Life Drain",
        description=(
            f"Deck uses {len(drain)} drain effects to reduce opponent life while gaining life"
        ),
        cards=drain,
        confidence=Confidence.HIGH if len(drain) >= 5 else Confidence.MEDIUM,
        gameplan=[
            "Use drain effects to chip away at opponent life",
            "Gain life to stay ahead in the race",
            "Combine multiple drain effects for larger life swings",
            "Protect yourself while draining",
            "Finish with a large drain effect or repeated small drains",
        ],
        key_cards=drain,
    )


def _detect_poison(cards: Sequence[Card]) -> WinCondition | None:
    poison = [card for card in cards if is_poison(card)]
    if len(poison) < 4:
        return None

    return WinCondition(
        type=WinConditionType.POISON,
        name="Poison/Infect",
        description=(
            "Deck wins by giving opponent 10 poison counters through "
            f"{len(poison)} poison/infect cards"
        ),
        cards=poison,
        confidence=Confidence.HIGH if len(poison) >= 8 else Confidence.MEDIUM,
        gameplan=[
            "Deploy infect creatures early",
            "Use pump spells to make infect creatures lethal quickly",
            "Protect infect creatures from removal",
            "Aim to deal 10 poison damage (not 20 regular damage)",
            "Use evasion to get poison damage through",
        ],
        key_cards=poison,
    )


DETECTORS: tuple[_Detector, ...] = (
    _detect_alternative,
    _detect_burn,
    _detect_combat,
    _detect_mill,
    _detect_combo,
    _detect_control,
    _detect_tokens,
    _detect_drain,
    _detect_poison,
)


def general_strategy(cards: Sequence[Card]) -> WinCondition:
    """Fallback hypothesis for decks with no recognizable win condition."""
    return WinCondition(
        type=WinConditionType.UNKNOWN,
        name="General Strategy",
        description=(
            "Deck appears to use a general strategy without a clearly defined win condition"
        ),
        cards=list(cards[:10]),
        confidence=Confidence.LOW,
        gameplan=[
            "Establish board presence with creatures",
            "Use removal to control opponent threats",
            "Apply pressure through combat",
            "Win through incremental advantage",
        ],
        key_cards=[card for card in cards if card.is_creature][:MAX_KEY_CARDS],
    )


def detect_win_conditions(deck: Deck) -> list[WinCondition]:
    """
    Every win condition the deck's cards point to.

    Returns:
        Matches sorted by confidence (high first, detector order on ties).
        Never empty.
    """
    cards = deck.all_cards()
    found: list[WinCondition] = []
    for detector in DETECTORS:
        condition = detector(cards)
        if condition is not None:
            found.append(condition)

    if not found:
        return [general_strategy(cards)]

    logger.debug(
        "Deck %r win conditions: %s",
        deck.name,
        ", ".join(condition.type.value for condition in found),
    )
    return sorted(found, key=lambda condition: -condition.confidence.rank)
