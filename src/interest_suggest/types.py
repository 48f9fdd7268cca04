"""Type definitions for interest suggestions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TypedDict

from interest_suggest.interests import Interest


class Phase(str, Enum):
    """Lifecycle of the latest resolution intent."""

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    RESOLVED_LOCAL = "resolved_local"
    FETCHING = "fetching"
    RESOLVED_REMOTE = "resolved_remote"
    FAILED = "failed"


@dataclass
class ResolutionState:
    """Per-session resolution state, mutated only by the controller."""

    last_valid_query: str = ""
    last_valid_results: list[Interest] = field(default_factory=list)
    current_results: list[Interest] = field(default_factory=list)
    selected: list[Interest] = field(default_factory=list)
    query: str = ""
    loading: bool = False
    error: str | None = None
    phase: Phase = Phase.IDLE


class SuggestionView(TypedDict):
    """What the presentation layer renders."""

    query: str
    suggestions: list[Interest]
    loading: bool
    error: str | None
    placeholder: str
    selected: list[Interest]
