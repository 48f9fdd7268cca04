"""Unit tests for query normalization and matching."""

from interest_suggest.interests import Interest
from interest_suggest.query import filter_matching, is_extension, matches, normalize, prefix_match


class TestNormalize:
    """Test query normalization."""

    def test_trims_and_lowercases(self):
        assert normalize("  MuSiC ") == "music"

    def test_empty_and_whitespace(self):
        assert normalize("") == ""
        assert normalize("   ") == ""

    def test_inner_whitespace_kept(self):
        assert normalize(" Rock  Music ") == "rock  music"


class TestIsExtension:
    """Test prefix-extension checks."""

    def test_extension(self):
        assert is_extension("mus", "mu") is True
        assert is_extension("mu", "mu") is True

    def test_strict_extension(self):
        assert is_extension("mus", "mu", strict=True) is True
        assert is_extension("mu", "mu", strict=True) is False

    def test_empty_base_is_never_extended(self):
        assert is_extension("mu", "") is False

    def test_unrelated(self):
        assert is_extension("ski", "mu") is False


class TestMatches:
    """Test the match predicate."""

    def test_primary_substring(self):
        interest = Interest(name="Rock Music")
        assert matches(interest, "music") is True
        assert prefix_match(interest, "music") is False

    def test_primary_prefix(self):
        interest = Interest(name="Music")
        assert matches(interest, "mu") is True
        assert prefix_match(interest, "mu") is True

    def test_secondary_term(self):
        interest = Interest(name="Music", secondary_term="Rock")
        assert matches(interest, "roc") is True
        assert prefix_match(interest, "roc") is True

    def test_no_match(self):
        interest = Interest(name="Music", secondary_term="Rock")
        assert matches(interest, "jazz") is False

    def test_missing_secondary_term(self):
        assert matches(Interest(name="Movies"), "rock") is False

    def test_filter_keeps_order(self):
        results = [Interest(name="Music"), Interest(name="Movies"), Interest(name="Museums")]
        assert [r.name for r in filter_matching(results, "mu")] == ["Music", "Museums"]
