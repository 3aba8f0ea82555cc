"""
Format API endpoint.

Lists the supported formats and their deck construction rules.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from decksmith.config import settings
from decksmith.models.format_rules import FORMAT_RULES, FormatRules, normalize_format_name

router = APIRouter(prefix="/formats", tags=["formats"])


class FormatResponse(BaseModel):
    """Construction rules for one format."""

    name: str
    min_main: int
    max_main: int | None
    max_sideboard: int
    max_copies: int
    commons_only: bool
    singleton: bool


class FormatListResponse(BaseModel):
    """Response model for the format list."""

    formats: list[FormatResponse]
    default: str


def format_to_response(rules: FormatRules) -> FormatResponse:
    return FormatResponse(
        name=rules.name,
        min_main=rules.min_main,
        max_main=rules.max_main,
        max_sideboard=rules.max_sideboard,
        max_copies=rules.max_copies,
        commons_only=rules.commons_only,
        singleton=rules.is_singleton,
    )


@router.get("", response_model=FormatListResponse)
async def list_formats() -> FormatListResponse:
    """List every supported format with its rules."""
    return FormatListResponse(
        formats=[format_to_response(rules) for rules in FORMAT_RULES.values()],
        default=normalize_format_name(settings.default_format),
    )
