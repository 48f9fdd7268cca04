"""Interest model, identity rule and display helpers."""

import re
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

PLACEHOLDER_NAME = "Unnamed Interest"

_LOCATION_RE = re.compile(r"(.*?)\s*\[(.*?)\]")
_BRACKETS_RE = re.compile(r"\[(.*?)\]")
# "Music: Rock", "Programming - Python", "Art | Painting"
_SEPARATOR_RE = re.compile(r"([^:|-]+)[:|-]\s*(.+)")


class Interest(BaseModel):
    """One candidate or selected interest."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = Field(default=None, description="Stable identifier, absent for custom interests")
    name: str = Field(default=PLACEHOLDER_NAME, description="Primary search term")
    secondary_term: str | None = Field(default=None, description="Secondary search term")
    emoji: str | None = None
    popularity: float | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> str:
        if not value:
            return PLACEHOLDER_NAME
        return str(value)


def same_interest(a: Interest, b: Interest) -> bool:
    """
    Identity rule used for deduplication and selection filtering.

    When both interests carry an id, the ids decide on their own, so two
    different catalog entries sharing a display name stay distinct. Otherwise
    the names are compared exactly (no normalization).
    """
    if a.id is not None and b.id is not None:
        return a.id == b.id
    return a.name == b.name


def contains_interest(items: Iterable[Interest], interest: Interest) -> bool:
    """Check whether any item is the same interest."""
    return any(same_interest(item, interest) for item in items)


def exclude_selected(
    candidates: Iterable[Interest],
    selected: Iterable[Interest],
) -> list[Interest]:
    """Drop candidates the user has already selected, keeping order."""
    selected = list(selected)
    if not selected:
        return list(candidates)
    return [c for c in candidates if not contains_interest(selected, c)]


def parse_custom_interest(text: str) -> Interest:
    """
    Build a user-created interest from free text.

    A ``:``, ``|`` or ``-`` separator splits the text into a primary and a
    secondary term. Bracketed locations are kept as typed.

    Args:
        text: Raw input text.

    Returns:
        Interest without an id.
    """
    if not text or not text.strip():
        raise ValueError("text is required")

    name = text.strip()
    secondary_term = None

    match = _SEPARATOR_RE.search(text)
    if match:
        name = match.group(1).strip()
        secondary_term = match.group(2).strip()

    return Interest(name=name, secondary_term=secondary_term)


def format_interest_name(text: str) -> str:
    """Replace bracketed parts with a plain space-separated suffix."""
    return _BRACKETS_RE.sub(r" \1", text).strip()


def split_name_and_location(text: str) -> tuple[str, str | None]:
    """Split ``"Tango [Berlin]"`` into ``("Tango", "Berlin")``."""
    match = _LOCATION_RE.match(text)
    if match:
        return match.group(1).strip(), match.group(2).strip()
    return text.strip(), None


def highlight_span(text: str, query: str) -> tuple[int, int] | None:
    """
    Locate the first case-insensitive occurrence of the query in text.

    Returns:
        (start, end) indices into text, or None when there is nothing to highlight.
    """
    needle = query.strip().lower()
    if not needle or not text:
        return None
    start = text.lower().find(needle)
    if start < 0:
        return None
    return start, start + len(needle)
