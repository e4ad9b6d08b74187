"""
Engine Module - Caller-facing search pipeline.
==============================================

Runs one query end to end:

    fetch catalog -> orchestrate -> merge duplicates -> trending split

A cancellation token is checked between phases; a superseded query raises
``SearchCancelled`` and leaves nothing behind, since the engine owns no
mutable state (caches belong to the data source).

Data-source failures never surface as errors: they yield an empty
catalog or an empty trending list.
"""

import time
from dataclasses import dataclass, field
from typing import Optional

from labcompass.data.base import CatalogSource
from labcompass.search.cancellation import CancellationToken
from labcompass.search.departments import resolve_department
from labcompass.search.grouping import group_by_research_area
from labcompass.search.merger import merge
from labcompass.search.orchestrator import SearchOrchestrator
from labcompass.search.scoring import RelevanceScorer
from labcompass.search.trending import split_trending
from labcompass.shared.config import get_settings
from labcompass.shared.errors import SearchCancelled
from labcompass.shared.logging import get_logger
from labcompass.shared.schemas import SearchResult
from labcompass.shared.utils import DepartmentCatalog, normalize_query

logger = get_logger(__name__)


@dataclass
class SearchOutcome:
    """Everything a renderer needs for one query."""

    query: str
    results: list[SearchResult] = field(default_factory=list)
    trending: list[SearchResult] = field(default_factory=list)
    regular: list[SearchResult] = field(default_factory=list)
    department: Optional[str] = None
    min_trending_relevance: float = 0.0
    elapsed_ms: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.results

    @property
    def regular_by_area(self) -> dict[str, list[SearchResult]]:
        """Regular results grouped by research area (empty if none have one)."""
        return group_by_research_area(self.regular)


class SearchEngine:
    """
    Searches a directory data source.

    Example:
        >>> from labcompass.data import LocalDirectory
        >>> engine = SearchEngine(LocalDirectory.from_file(Path("catalog.json")))
        >>> outcome = engine.search("stats")
        >>> [r.name for r in outcome.trending]
    """

    def __init__(
        self,
        source: CatalogSource,
        scorer: Optional[RelevanceScorer] = None,
        min_relevance: Optional[float] = None,
        max_results: Optional[int] = None,
    ):
        """
        Initialize the engine.

        Args:
            source: Where department data and trending lists come from
            scorer: Relevance scorer (default tier table if None)
            min_relevance: Inclusion cutoff for field matches
            max_results: Cap on displayed results, 0 for no cap
        """
        settings = get_settings()

        self.source = source
        self.orchestrator = SearchOrchestrator(
            scorer=scorer,
            min_relevance=(
                min_relevance if min_relevance is not None else settings.search.min_relevance
            ),
        )
        self.max_results = max_results if max_results is not None else settings.search.max_results

    def search(self, query: str, token: Optional[CancellationToken] = None) -> SearchOutcome:
        """
        Run a query through every phase.

        Args:
            query: Free-text query; empty returns an empty outcome without fetching
            token: Cancellation token checked between phases

        Returns:
            SearchOutcome with merged results and the trending split

        Raises:
            SearchCancelled: If the token was cancelled before the query finished
        """
        token = token or CancellationToken()
        normalized = normalize_query(query)
        if not normalized:
            return SearchOutcome(query=query)

        start = time.perf_counter()

        token.raise_if_cancelled("catalog fetch")
        catalog = self._fetch_catalog()
        token.raise_if_cancelled("catalog fetch")

        results = self.orchestrator.search(normalized, catalog)
        token.raise_if_cancelled("orchestration")

        merged = merge(results)
        if self.max_results > 0:
            merged = merged[: self.max_results]
        token.raise_if_cancelled("merge")

        department = resolve_department(normalized, catalog.keys(), merged)
        trending_names = self._fetch_trending(department) if merged and department else []
        partition = split_trending(merged, trending_names, normalized)
        token.raise_if_cancelled("trending split")

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Search '{normalized}': {len(merged)} results "
            f"({len(partition.trending)} trending) in {elapsed_ms:.1f}ms"
        )

        return SearchOutcome(
            query=query,
            results=merged,
            trending=partition.trending,
            regular=partition.regular,
            department=department,
            min_trending_relevance=partition.min_relevance,
            elapsed_ms=elapsed_ms,
        )

    def _fetch_catalog(self) -> DepartmentCatalog:
        try:
            return self.source.fetch_department_catalog()
        except SearchCancelled:
            raise
        except Exception as e:
            logger.error(f"Catalog fetch failed, returning no results: {e}")
            return {}

    def _fetch_trending(self, department: str) -> list[str]:
        try:
            return self.source.fetch_trending_names(department)
        except SearchCancelled:
            raise
        except Exception as e:
            logger.warning(f"Trending fetch failed for '{department}': {e}")
            return []


# ─────────────────────────────────────────────────────────────────────────────
# Convenience Functions
# ─────────────────────────────────────────────────────────────────────────────


def run_search(
    query: str,
    source: CatalogSource,
    token: Optional[CancellationToken] = None,
) -> Optional[SearchOutcome]:
    """
    Search and swallow cancellation.

    Returns:
        The outcome, or None if the query was superseded
    """
    try:
        return SearchEngine(source).search(query, token=token)
    except SearchCancelled as e:
        logger.debug(f"Search '{query}' cancelled: {e.reason}")
        return None
