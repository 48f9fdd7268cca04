"""Query normalization and the match predicate."""

from interest_suggest.interests import Interest


def normalize(raw: str) -> str:
    """Canonical cache key for a raw query: trimmed and lowercased."""
    return raw.strip().lower()


def is_extension(query: str, base: str, strict: bool = False) -> bool:
    """
    Check whether a normalized query continues a non-empty base query.

    Args:
        query: Normalized query.
        base: Normalized base query.
        strict: Require the query to be longer than the base.
    """
    if not base or not query.startswith(base):
        return False
    return len(query) > len(base) if strict else True


def prefix_match(interest: Interest, query: str) -> bool:
    """True when either term starts with the normalized query."""
    if interest.name.lower().startswith(query):
        return True
    return bool(interest.secondary_term) and interest.secondary_term.lower().startswith(query)


def matches(interest: Interest, query: str) -> bool:
    """
    Match predicate used by every local filter.

    Substring match on the primary or the secondary term. Prefix matches are
    a subset; use prefix_match to tell them apart.
    """
    if query in interest.name.lower():
        return True
    return bool(interest.secondary_term) and query in interest.secondary_term.lower()


def filter_matching(results: list[Interest], query: str) -> list[Interest]:
    """Keep results matching the normalized query, preserving order."""
    return [r for r in results if matches(r, query)]
