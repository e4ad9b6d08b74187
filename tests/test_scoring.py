"""
Tests for Scoring.
==================

Tests for:
- Distance: Levenshtein distance and similarity
- Abbreviations: Query expansion
- RelevanceScorer: Every scoring tier
"""

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Distance Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestDistance:
    """Tests for edit distance and similarity."""

    def test_known_distance(self):
        """Test the classic kitten/sitting pair."""
        from labcompass.search.distance import distance

        assert distance("kitten", "sitting") == 3

    def test_distance_to_empty(self):
        """Test distance against an empty string is the other length."""
        from labcompass.search.distance import distance

        assert distance("", "abc") == 3
        assert distance("abc", "") == 3
        assert distance("", "") == 0

    @pytest.mark.parametrize("a,b", [
        ("statistics", "statistcs"),
        ("lab", "labs"),
        ("machine", "learning"),
    ])
    def test_distance_is_symmetric(self, a, b):
        """Test distance(a, b) == distance(b, a)."""
        from labcompass.search.distance import distance

        assert distance(a, b) == distance(b, a)

    def test_similarity_identity(self):
        """Test a string is fully similar to itself."""
        from labcompass.search.distance import similarity

        assert similarity("bayes lab", "bayes lab") == 1.0
        assert similarity("", "") == 1.0

    def test_similarity_value(self):
        """Test similarity is 1 - distance / longest length."""
        from labcompass.search.distance import similarity

        assert similarity("stats", "stat") == pytest.approx(0.8)
        assert similarity("abc", "xyz") == 0.0


# ─────────────────────────────────────────────────────────────────────────────
# Abbreviation Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestAbbreviations:
    """Tests for abbreviation expansion."""

    def test_single_word_expansion(self):
        """Test a known abbreviation expands to its full form."""
        from labcompass.search.abbreviations import expand

        assert expand("cs") == {"cs", "computer science"}

    def test_original_always_included(self):
        """Test the normalized original is always one of the forms."""
        from labcompass.search.abbreviations import expand

        assert expand("  Bayesian  ") == {"bayesian"}

    def test_multi_word_cross_product(self):
        """Test every combination of original and expanded words."""
        from labcompass.search.abbreviations import expand

        assert expand("cs ml") == {
            "cs ml",
            "computer science ml",
            "cs machine learning",
            "computer science machine learning",
        }

    def test_mixed_words(self):
        """Test only abbreviated words are expanded."""
        from labcompass.search.abbreviations import expand

        assert expand("ml lab") == {"ml lab", "machine learning lab"}


# ─────────────────────────────────────────────────────────────────────────────
# Scorer Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestRelevanceScorer:
    """Tests for tiered relevance scoring."""

    @pytest.fixture
    def scorer(self):
        from labcompass.search.scoring import RelevanceScorer
        return RelevanceScorer()

    def test_empty_inputs(self, scorer):
        """Test empty query or target scores zero."""
        assert scorer.score("", "statistics") == 0.0
        assert scorer.score("statistics", "") == 0.0
        assert scorer.score("   ", "statistics") == 0.0

    @pytest.mark.parametrize("text", ["statistics", "Smith Lab", "ada lee", "x"])
    def test_exact_match(self, scorer, text):
        """Test a query scores 1.0 against itself."""
        assert scorer.score(text, text) == 1.0

    def test_exact_match_ignores_case(self, scorer):
        """Test exact matching is case-insensitive."""
        assert scorer.score("Statistics", "STATISTICS ") == 1.0

    def test_prefix(self, scorer):
        """Test target-starts-with-query tier."""
        value = scorer.score("stat", "statistics", use_abbreviations=False)
        assert value == pytest.approx(0.9 + 4 / 10 * 0.1)

    def test_abbreviation_full_credit(self, scorer):
        """Test an abbreviation matches its department name."""
        assert scorer.score("cs", "computer science") >= 0.9

    def test_abbreviation_boost_is_capped(self, scorer):
        """Test the expansion boost never exceeds 1.0."""
        assert scorer.score("ml", "machine learning theory") == 1.0

    def test_abbreviations_can_be_disabled(self, scorer):
        """Test disabling expansion scores only the literal query."""
        with_abbrev = scorer.score("ml", "machine learning theory")
        without = scorer.score("ml", "machine learning theory", use_abbreviations=False)
        assert with_abbrev > without

    def test_phrase_contained(self, scorer):
        """Test a multi-word phrase inside the target."""
        value = scorer.score("applied stat", "new applied statistics methods",
                             use_abbreviations=False)
        assert value == pytest.approx(0.95)

    def test_in_order_alignment(self, scorer):
        """Test in-order words with a gap."""
        value = scorer.score("applied methods", "applied statistics methods")
        assert value == pytest.approx(0.75 + 1.0 * 0.15)

    def test_in_order_partial_words(self, scorer):
        """Test in-order alignment by prefix only earns the base score."""
        value = scorer.score("appl meth", "applied statistics methods")
        assert value == pytest.approx(0.75)

    def test_unordered_words(self, scorer):
        """Test all words present but out of order."""
        value = scorer.score("methods applied", "applied statistics methods")
        assert value == pytest.approx(0.5 + 1.0 * 0.2)

    def test_ordered_beats_unordered(self, scorer):
        """Test word order matters for multi-word queries."""
        ordered = scorer.score("applied stat", "applied statistics")
        unordered = scorer.score("stat applied", "applied statistics")
        assert ordered >= 0.75
        assert ordered > unordered

    @pytest.mark.parametrize("query,expected", [
        ("learning", 0.8),
        ("learn", 0.75),
        ("earn", 0.6),
    ])
    def test_single_word_tiers(self, scorer, query, expected):
        """Test a single word against the words of the target."""
        value = scorer.score(query, "machine learning", use_abbreviations=False)
        assert value == pytest.approx(expected)

    def test_substring_caught_by_word_tiers(self, scorer):
        """Test a plain substring always lands in an earlier tier.

        A one-word query found in the target sits inside a single target
        word (0.6), and a multi-word query found in it is a phrase (0.95),
        so the positional substring score is never the deciding tier.
        """
        assert scorer.score("tist", "applied statistics",
                            use_abbreviations=False) == pytest.approx(0.6)
        assert scorer.score("ed stat", "applied statistics",
                            use_abbreviations=False) == pytest.approx(0.95)

    def test_query_contains_target(self, scorer):
        """Test the query-contains-target tier."""
        assert scorer.score("statistics dept", "statistics") == pytest.approx(0.4)

    def test_whole_string_fuzzy(self, scorer):
        """Test a typo still scores through the fuzzy tier."""
        value = scorer.score("statistcs", "statistics", use_abbreviations=False)
        assert value == pytest.approx(0.3 + (0.9 - 0.7) * 0.67)

    def test_word_fuzzy(self, scorer):
        """Test typos in several words score through the word-level fuzzy tier."""
        value = scorer.score("statistcs methds", "applied statistics",
                             use_abbreviations=False)
        best = 1 - 1 / len("statistics")
        assert value == pytest.approx(0.2 + (best - 0.6) * 0.25)

    def test_unrelated_scores_zero(self, scorer):
        """Test unrelated strings score nothing."""
        assert scorer.score("zzz", "statistics") == 0.0

    def test_scores_stay_in_range(self, scorer):
        """Test every score is within [0, 1]."""
        pairs = [
            ("cs", "computer science"),
            ("ml", "machine learning"),
            ("stats", "statistics"),
            ("bio", "computational biology"),
            ("ai lab", "AI Lab"),
        ]
        for query, target in pairs:
            assert 0.0 <= scorer.score(query, target) <= 1.0

    def test_module_level_score(self):
        """Test the convenience function uses the shared scorer."""
        from labcompass.search.scoring import get_scorer, score

        assert score("stats", "statistics") == 1.0
        assert get_scorer() is get_scorer()
