"""Tests for query normalization."""

from __future__ import annotations

import pytest

from doclookup.utils.text import QueryTerms, STOPWORDS, normalize_word, split_query, split_words


class TestNormalizeWord:
    """Test normalize_word function."""

    @pytest.mark.parametrize(
        ("word", "expected"),
        [
            ("Stacks", "stack"),
            ("church", "church"),
            ("numerals", "numer"),
            ("Welcome", "welcom"),
            ("note", "note"),
        ],
    )
    def test_stems_like_the_index(self, word: str, expected: str) -> None:
        """Should lowercase and Porter-stem words."""
        assert normalize_word(word) == expected

    def test_stopword_dropped(self) -> None:
        """Should return None for English stopwords."""
        assert normalize_word("The") is None
        assert normalize_word("with") is None

    def test_empty_word(self) -> None:
        """Should return None for empty input."""
        assert normalize_word("") is None
        assert normalize_word("   ") is None

    def test_numbers_kept(self) -> None:
        """Should keep numeric tokens unchanged."""
        assert normalize_word("1930") == "1930"

    def test_short_word_kept(self) -> None:
        """Should keep words shorter than three characters."""
        assert normalize_word("k") == "k"


class TestSplitWords:
    """Test split_words function."""

    def test_splits_on_punctuation(self) -> None:
        """Should split on runs of non-word characters."""
        assert split_words("lambda-calculus, church!") == ["lambda", "calculus", "church"]

    def test_unicode_words(self) -> None:
        """Should keep non-ASCII letters inside words."""
        assert split_words("β-reduction") == ["β", "reduction"]


class TestSplitQuery:
    """Test split_query function."""

    def test_required_terms(self) -> None:
        """Should normalize every word of the query."""
        assert split_query("Church numerals") == QueryTerms(("church", "numer"), ())

    def test_excluded_terms(self) -> None:
        """Should mark words prefixed with '-' as excluded."""
        terms = split_query("lambda -church")

        assert terms.required == ("lambda",)
        assert terms.excluded == ("church",)

    def test_deduplicates(self) -> None:
        """Should keep each term once, in first-seen order."""
        assert split_query("stacks stack Stack").required == ("stack",)

    def test_empty_query(self) -> None:
        """Should produce no terms for empty input."""
        assert split_query("") == QueryTerms((), ())
        assert split_query("   ") == QueryTerms((), ())

    def test_only_stopwords(self) -> None:
        """Should produce no terms for stopwords and punctuation."""
        assert split_query("the and ... !!") == QueryTerms((), ())

    def test_stopword_list(self) -> None:
        """Should use lowercase stopwords."""
        assert "the" in STOPWORDS
        assert all(word == word.lower() for word in STOPWORDS)
