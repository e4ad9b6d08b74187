"""
Orchestrator Module - Multi-field search over a department catalog.
===================================================================

Applies the relevance scorer to department names, then to each entity's
name, lab and title, then to its research area. Results are keyed by
``(name, department)``; a later field only replaces an earlier score when
it is strictly higher. The sorted list is then pruned with a cutoff
derived from the top score (see ``THRESHOLD_LADDERS``).
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from labcompass.search.scoring import RelevanceScorer, get_scorer
from labcompass.shared.logging import get_logger
from labcompass.shared.schemas import Entity, MatchType, SearchResult
from labcompass.shared.utils import normalize_query, split_words

logger = get_logger(__name__)

# Minimum relevance for a field match to be collected at all
MIN_RELEVANCE = 0.3


@dataclass(frozen=True)
class LadderRung:
    """When the top score is >= ``top_at_least``, keep scores >= cutoff."""

    top_at_least: float
    floor: float
    # None means a fixed cutoff equal to ``floor``
    drop_from_top: Optional[float] = None

    def cutoff(self, top: float) -> float:
        if self.drop_from_top is None:
            return self.floor
        return max(self.floor, top - self.drop_from_top)


# Checked in order; below the last rung nothing is filtered
THRESHOLD_LADDERS: dict[str, tuple[LadderRung, ...]] = {
    "multi_word": (
        LadderRung(0.85, 0.7),
        LadderRung(0.70, 0.5, 0.2),
        LadderRung(0.50, 0.4, 0.15),
    ),
    "single_word": (
        LadderRung(0.80, 0.6, 0.3),
        LadderRung(0.60, 0.4, 0.25),
        LadderRung(0.40, 0.3, 0.2),
    ),
}

_FIELD_MATCHES = (
    ("name", MatchType.NAME),
    ("lab", MatchType.LAB),
    ("title", MatchType.TITLE),
)


def relevance_cutoff(top_relevance: float, word_count: int) -> Optional[float]:
    """
    Minimum relevance kept for a given top score.

    Returns:
        The cutoff, or None when the top score is below every rung
        (no good matches: show everything)
    """
    ladder = THRESHOLD_LADDERS["multi_word" if word_count >= 2 else "single_word"]
    for rung in ladder:
        if top_relevance >= rung.top_at_least:
            return rung.cutoff(top_relevance)
    return None


def adaptive_filter(results: Sequence[SearchResult], query: str) -> list[SearchResult]:
    """
    Drop results below the cutoff implied by the best result.

    ``results`` must already be sorted by descending relevance.
    """
    if not results:
        return []

    word_count = len(split_words(normalize_query(query)))
    top = results[0].relevance
    cutoff = relevance_cutoff(top, word_count)
    if cutoff is None:
        logger.debug(f"Top relevance {top:.3f} below every rung; returning unfiltered")
        return list(results)

    kept = [r for r in results if r.relevance >= cutoff]
    logger.debug(
        f"Adaptive filter: top={top:.3f} cutoff={cutoff:.3f} "
        f"kept {len(kept)}/{len(results)}"
    )
    return kept


class SearchOrchestrator:
    """
    Runs one query against every field of every entity in a catalog.

    Example:
        >>> orchestrator = SearchOrchestrator()
        >>> for result in orchestrator.search("ml", catalog):
        ...     print(result.name, result.match_type.value, f"{result.relevance:.2f}")
    """

    def __init__(
        self,
        scorer: Optional[RelevanceScorer] = None,
        min_relevance: float = MIN_RELEVANCE,
    ):
        self.scorer = scorer or get_scorer()
        self.min_relevance = min_relevance

    def search(
        self,
        query: str,
        catalog: Mapping[str, Sequence[Entity]],
    ) -> list[SearchResult]:
        """
        Ranked, adaptively filtered results for ``query``.

        Args:
            query: Free-text query
            catalog: Department name -> entities

        Returns:
            Results sorted by descending relevance; empty for an empty query
        """
        normalized = normalize_query(query)
        if not normalized:
            return []

        collected = self.collect(normalized, catalog)
        ranked = sorted(collected, key=lambda r: r.relevance, reverse=True)
        return adaptive_filter(ranked, normalized)

    def collect(
        self,
        query: str,
        catalog: Mapping[str, Sequence[Entity]],
    ) -> list[SearchResult]:
        """Unsorted, unfiltered results in insertion order."""
        found: dict[tuple[str, str], SearchResult] = {}

        for department, entities in catalog.items():
            dept_score = self.scorer.score(query, department)
            if dept_score < self.min_relevance:
                continue
            for entity in entities:
                key = (entity.name, department)
                if key not in found:
                    found[key] = SearchResult.from_entity(
                        entity, department, dept_score, MatchType.DEPARTMENT
                    )

        for department, entities in catalog.items():
            for entity in entities:
                best_score = 0.0
                best_type = MatchType.NAME
                for field_name, match_type in _FIELD_MATCHES:
                    value = self.scorer.score(query, getattr(entity, field_name))
                    if value > best_score:
                        best_score, best_type = value, match_type
                self._upsert(found, entity, department, best_score, best_type)

        for department, entities in catalog.items():
            for entity in entities:
                if not entity.research_area:
                    continue
                value = self.scorer.score(query, entity.research_area)
                self._upsert(found, entity, department, value, MatchType.RESEARCH_AREA)

        logger.debug(f"Collected {len(found)} candidate results for '{query}'")
        return list(found.values())

    def _upsert(
        self,
        found: dict[tuple[str, str], SearchResult],
        entity: Entity,
        department: str,
        relevance: float,
        match_type: MatchType,
    ) -> None:
        if relevance < self.min_relevance:
            return

        key = (entity.name, department)
        existing = found.get(key)
        if existing is None:
            found[key] = SearchResult.from_entity(entity, department, relevance, match_type)
        elif relevance > existing.relevance:
            existing.relevance = min(relevance, 1.0)
            existing.match_type = match_type


# ─────────────────────────────────────────────────────────────────────────────
# Convenience Functions
# ─────────────────────────────────────────────────────────────────────────────


def search(query: str, catalog: Mapping[str, Sequence[Entity]]) -> list[SearchResult]:
    """Search a catalog with the default scorer and thresholds."""
    return SearchOrchestrator().search(query, catalog)
