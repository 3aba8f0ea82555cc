"""
Format rule registry.

Construction constraints for every supported format. This table is the
only place format-specific numbers live; validators and advisors look
rules up here instead of hardcoding them.

Unknown format names resolve to standard rules. Free-text format names
come from users and older saved decks, so an unrecognised name is
treated permissively rather than rejected.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "standard"

# Formats where cards marked not_legal are still allowed
UNRESTRICTED_FORMATS = frozenset({"casual", "commander"})


@dataclass(frozen=True, slots=True)
class FormatRules:
    """
    Deck construction rules for a format.

    Attributes:
        name: Format name (lowercase)
        min_main: Minimum main deck size
        max_main: Maximum main deck size, None if unbounded
        max_sideboard: Maximum sideboard size, 0 if sideboards are not allowed
        max_copies: Copies allowed per non-basic-land card (1 = singleton)
        commons_only: Every card must be common rarity
        exact_main: Main deck must be exactly min_main cards
            (commander-style, the commander is counted separately)
    """

    name: str
    min_main: int
    max_main: int | None = None
    max_sideboard: int = 15
    max_copies: int = 4
    commons_only: bool = False
    exact_main: bool = False

    @property
    def is_singleton(self) -> bool:
        return self.max_copies == 1

    @property
    def allows_sideboard(self) -> bool:
        return self.max_sideboard > 0

    @property
    def allows_not_legal(self) -> bool:
        return self.name in UNRESTRICTED_FORMATS


FORMAT_RULES: MappingProxyType[str, FormatRules] = MappingProxyType(
    {
        "standard": FormatRules(name="standard", min_main=60),
        "modern": FormatRules(name="modern", min_main=60),
        "pioneer": FormatRules(name="pioneer", min_main=60),
        "legacy": FormatRules(name="legacy", min_main=60),
        "vintage": FormatRules(name="vintage", min_main=60),
        "pauper": FormatRules(name="pauper", min_main=60, commons_only=True),
        "commander": FormatRules(
            name="commander",
            min_main=99,
            max_main=99,
            max_sideboard=0,
            max_copies=1,
            exact_main=True,
        ),
        "casual": FormatRules(name="casual", min_main=40),
    }
)

SUPPORTED_FORMATS: tuple[str, ...] = tuple(FORMAT_RULES)


def normalize_format_name(format_name: str | None) -> str:
    """Lowercase and strip a format name, falling back to standard when unknown."""
    name = (format_name or "").strip().lower()
    if name not in FORMAT_RULES:
        logger.debug("Unknown format %r, using %s rules", format_name, DEFAULT_FORMAT)
        return DEFAULT_FORMAT
    return name


def get_format_rules(format_name: str | None) -> FormatRules:
    """
    Look up construction rules for a format.

    Args:
        format_name: Free-text format name (case-insensitive)

    Returns:
        Rules for the format, or standard rules if the name is unknown.
    """
    return FORMAT_RULES[normalize_format_name(format_name)]
