"""
Trending Module - Split final results into trending and regular.
================================================================

The trending names come from click analytics (the backend or a local
catalog computes them). A result is shown as trending only when its lab
or name is in that list AND its final relevance clears a cutoff, so a
popular lab does not jump to the top of an unrelated query.

Must run after filtering and merging: the cutoff is checked against the
relevance that will actually be displayed.
"""

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from labcompass.shared.logging import get_logger
from labcompass.shared.schemas import SearchResult
from labcompass.shared.utils import normalize_query, split_words

logger = get_logger(__name__)

# (top relevance at least, minimum trending relevance); the last entry is the fallback
TRENDING_LADDERS: dict[str, tuple[tuple[float, float], ...]] = {
    "multi_word": ((0.8, 0.7), (0.6, 0.5), (0.0, 0.4)),
    "single_word": ((0.8, 0.6), (0.6, 0.4), (0.0, 0.3)),
}


@dataclass
class TrendingPartition:
    """Results split for display."""

    trending: list[SearchResult] = field(default_factory=list)
    regular: list[SearchResult] = field(default_factory=list)
    min_relevance: float = 0.0

    @property
    def total(self) -> int:
        return len(self.trending) + len(self.regular)


def min_trending_relevance(word_count: int, top_relevance: float) -> float:
    """
    Relevance a trending candidate needs, stricter for multi-word queries.

    Example:
        >>> min_trending_relevance(1, 0.9)
        0.6
    """
    ladder = TRENDING_LADDERS["multi_word" if word_count >= 2 else "single_word"]
    for top_at_least, cutoff in ladder:
        if top_relevance >= top_at_least:
            return cutoff
    return ladder[-1][1]


def is_trending(result: SearchResult, trending_names: Iterable[str]) -> bool:
    """Whether the result's lab or name is in the trending list."""
    names = trending_names if isinstance(trending_names, (set, frozenset)) else set(trending_names)
    return (bool(result.lab) and result.lab in names) or (
        bool(result.name) and result.name in names
    )


def split_trending(
    results: Sequence[SearchResult],
    trending_names: Iterable[str],
    query: str,
) -> TrendingPartition:
    """
    Partition results into trending and regular.

    Args:
        results: Final (filtered, merged) results, best first
        trending_names: Lab or professor names currently trending
        query: The query the results answer, used for its word count

    Returns:
        TrendingPartition preserving the input order within each side
    """
    names = {name for name in trending_names if name}
    word_count = len(split_words(normalize_query(query)))
    top = max((r.relevance for r in results), default=0.0)
    cutoff = min_trending_relevance(word_count, top)

    partition = TrendingPartition(min_relevance=cutoff)
    if not names:
        partition.regular = list(results)
        return partition

    for result in results:
        if is_trending(result, names) and result.relevance >= cutoff:
            partition.trending.append(result)
        else:
            partition.regular.append(result)

    logger.debug(
        f"Trending split: {len(partition.trending)} trending, "
        f"{len(partition.regular)} regular (cutoff={cutoff})"
    )
    return partition
