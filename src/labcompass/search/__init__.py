"""
Search Module - Fuzzy relevance ranking over the department directory.
======================================================================

- distance: Edit distance and normalized similarity
- abbreviations: Expansion of domain abbreviations ("cs", "ml", "stats")
- scoring: Tiered relevance of a query against one field
- orchestrator: Multi-field search with adaptive filtering
- merger: Duplicate-entity merging by exact name
- trending: Trending/regular split with relevance cutoffs
- grouping: Research-area sections for display
- departments: Department resolution for a query
- cancellation: Cooperative cancellation tokens
- engine: The end-to-end pipeline

Search Flow:
    Catalog → Orchestrator → Ranked Results → Merger → Trending Split
"""

from labcompass.search.abbreviations import ABBREVIATIONS, expand
from labcompass.search.cancellation import CancellationToken, QueryScheduler
from labcompass.search.departments import DEPARTMENT_ALIASES, resolve_department
from labcompass.search.distance import distance, similarity
from labcompass.search.engine import SearchEngine, SearchOutcome, run_search
from labcompass.search.grouping import group_by_research_area
from labcompass.search.merger import merge, merge_research_areas
from labcompass.search.orchestrator import (
    THRESHOLD_LADDERS,
    SearchOrchestrator,
    adaptive_filter,
    relevance_cutoff,
    search,
)
from labcompass.search.scoring import RelevanceScorer, ScoreTiers, score
from labcompass.search.trending import TrendingPartition, min_trending_relevance, split_trending

__all__ = [
    # Distance
    "distance",
    "similarity",
    # Abbreviations
    "ABBREVIATIONS",
    "expand",
    # Scoring
    "RelevanceScorer",
    "ScoreTiers",
    "score",
    # Orchestrator
    "SearchOrchestrator",
    "THRESHOLD_LADDERS",
    "adaptive_filter",
    "relevance_cutoff",
    "search",
    # Merger
    "merge",
    "merge_research_areas",
    # Trending
    "TrendingPartition",
    "min_trending_relevance",
    "split_trending",
    # Grouping / departments
    "group_by_research_area",
    "DEPARTMENT_ALIASES",
    "resolve_department",
    # Engine
    "CancellationToken",
    "QueryScheduler",
    "SearchEngine",
    "SearchOutcome",
    "run_search",
]
