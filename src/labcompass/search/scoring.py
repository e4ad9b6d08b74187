"""
Scoring Module - Tiered relevance scoring of a query against one field.
=======================================================================

Scores are evaluated by strict precedence; the first tier that applies
wins. Cheap structural tiers come first so that exact department names
and name prefixes never reach the edit-distance tiers.

Tier table (values in ``ScoreTiers``):

    ====  ===============================  =================================
    Tier  Condition                        Score
    ====  ===============================  =================================
    1     abbreviation expansions          max over expansions, x1.05 boost
                                           when a full form scores >= 0.9
    2     exact match                      1.0
    3     target starts with query         0.9 + len(q)/len(t) * 0.1
    4     single word prefixes first word  0.85
    5a    multi-word contiguous phrase     0.95
    5b    multi-word in-order alignment    0.75 + exact/len(qw) * 0.15
    5c    multi-word unordered             0.5 + sum(best)/len(qw) * 0.2
    6     single word vs target words      0.8 equal / 0.75 prefix / 0.6 in
    7     substring                        0.5 + (1 - pos/len(t)) * 0.2;
                                           query contains target: 0.4
    8     whole-string fuzzy (sim >= 0.7)  0.3 + (sim - 0.7) * 0.67
    9     word fuzzy (best sim >= 0.6)     0.2 + (best - 0.6) * 0.25
    10    otherwise                        0.0
    ====  ===============================  =================================

The breakpoints are tuned values; they are kept exactly as shipped.
"""

from dataclasses import dataclass
from typing import Optional

from labcompass.search.abbreviations import expand
from labcompass.search.distance import similarity
from labcompass.shared.utils import normalize_query, split_words


@dataclass(frozen=True)
class ScoreTiers:
    """Numeric constants for every scoring tier."""

    abbreviation_boost: float = 1.05
    abbreviation_boost_min: float = 0.9

    exact: float = 1.0

    prefix_base: float = 0.9
    prefix_span: float = 0.1

    first_word_prefix: float = 0.85

    phrase: float = 0.95
    in_order_base: float = 0.75
    in_order_span: float = 0.15
    unordered_base: float = 0.5
    unordered_span: float = 0.2
    word_equal_weight: float = 1.0
    word_prefix_weight: float = 0.8
    word_contains_weight: float = 0.6

    single_word_equal: float = 0.8
    single_word_prefix: float = 0.75
    single_word_contains: float = 0.6

    substring_base: float = 0.5
    substring_span: float = 0.2
    contains_target: float = 0.4

    fuzzy_threshold: float = 0.7
    fuzzy_base: float = 0.3
    fuzzy_slope: float = 0.67

    word_fuzzy_threshold: float = 0.6
    word_fuzzy_base: float = 0.2
    word_fuzzy_slope: float = 0.25


DEFAULT_TIERS = ScoreTiers()


class RelevanceScorer:
    """
    Scores how well a query matches a single target string.

    Example:
        >>> scorer = RelevanceScorer()
        >>> scorer.score("cs", "computer science")
        1.0
    """

    def __init__(self, tiers: Optional[ScoreTiers] = None):
        self.tiers = tiers or DEFAULT_TIERS

    def score(self, query: str, target: str, use_abbreviations: bool = True) -> float:
        """
        Relevance of ``target`` for ``query`` in [0, 1].

        Args:
            query: Free-text query
            target: Field value (department, name, lab, title, research area)
            use_abbreviations: Also score every abbreviation expansion

        Returns:
            Score in [0, 1]; 0.0 for an empty query or target
        """
        q = normalize_query(query)
        t = normalize_query(target)
        if not q or not t:
            return 0.0

        if use_abbreviations:
            return self._score_expansions(q, t)

        return min(max(self._score_plain(q, t), 0.0), 1.0)

    def _score_expansions(self, q: str, t: str) -> float:
        tiers = self.tiers
        identity = " ".join(split_words(q))
        expansions = expand(q)

        best = 0.0
        full_form_hit = False
        for candidate in expansions:
            value = self.score(candidate, t, use_abbreviations=False)
            best = max(best, value)
            if candidate not in (q, identity) and value >= tiers.abbreviation_boost_min:
                full_form_hit = True

        if len(expansions) > 1 and full_form_hit:
            best = min(best * tiers.abbreviation_boost, 1.0)
        return best

    def _score_plain(self, q: str, t: str) -> float:
        tiers = self.tiers

        if q == t:
            return tiers.exact

        if t.startswith(q):
            return tiers.prefix_base + (len(q) / len(t)) * tiers.prefix_span

        q_words = split_words(q)
        t_words = split_words(t)

        if len(q_words) == 1 and t_words and t_words[0].startswith(q):
            return tiers.first_word_prefix

        if len(q_words) > 1:
            multi = self._score_multi_word(q, t, q_words, t_words)
            if multi is not None:
                return multi
        elif len(q_words) == 1:
            for word in t_words:
                if word == q:
                    return tiers.single_word_equal
                if word.startswith(q):
                    return tiers.single_word_prefix
                if q in word:
                    return tiers.single_word_contains

        position = t.find(q)
        if position >= 0:
            return tiers.substring_base + (1 - position / len(t)) * tiers.substring_span
        if t in q:
            return tiers.contains_target

        whole = similarity(q, t)
        if whole >= tiers.fuzzy_threshold:
            return tiers.fuzzy_base + (whole - tiers.fuzzy_threshold) * tiers.fuzzy_slope

        best_word = max(
            (similarity(qw, tw) for qw in q_words for tw in t_words),
            default=0.0,
        )
        if best_word >= tiers.word_fuzzy_threshold:
            return (
                tiers.word_fuzzy_base
                + (best_word - tiers.word_fuzzy_threshold) * tiers.word_fuzzy_slope
            )

        return 0.0

    def _score_multi_word(
        self,
        q: str,
        t: str,
        q_words: list[str],
        t_words: list[str],
    ) -> Optional[float]:
        """Phrase, in-order and unordered tiers; None when none applies."""
        tiers = self.tiers

        if q in t:
            return tiers.phrase

        # In-order alignment, gaps allowed
        pointer = 0
        exact_matches = 0
        for word in t_words:
            if pointer >= len(q_words):
                break
            current = q_words[pointer]
            if word == current:
                exact_matches += 1
                pointer += 1
            elif word.startswith(current) or current in word:
                pointer += 1

        if pointer == len(q_words):
            return tiers.in_order_base + (exact_matches / len(q_words)) * tiers.in_order_span

        # Unordered: every query word must match some target word
        total = 0.0
        for current in q_words:
            best = 0.0
            for word in t_words:
                if word == current:
                    best = max(best, tiers.word_equal_weight)
                elif word.startswith(current):
                    best = max(best, tiers.word_prefix_weight)
                elif current in word:
                    best = max(best, tiers.word_contains_weight)
            if best == 0.0:
                return None
            total += best

        return tiers.unordered_base + (total / len(q_words)) * tiers.unordered_span


# ─────────────────────────────────────────────────────────────────────────────
# Convenience Functions
# ─────────────────────────────────────────────────────────────────────────────


_scorer: Optional[RelevanceScorer] = None


def get_scorer() -> RelevanceScorer:
    """Get the global scorer instance."""
    global _scorer
    if _scorer is None:
        _scorer = RelevanceScorer()
    return _scorer


def score(query: str, target: str, use_abbreviations: bool = True) -> float:
    """Score ``target`` against ``query`` with the default tier table."""
    return get_scorer().score(query, target, use_abbreviations=use_abbreviations)
