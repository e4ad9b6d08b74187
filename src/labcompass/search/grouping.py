"""
Group results by research area for sectioned display.
"""

from typing import Sequence

from labcompass.shared.schemas import SearchResult

OTHER_AREA = "Other"


def group_by_research_area(results: Sequence[SearchResult]) -> dict[str, list[SearchResult]]:
    """
    Map research area -> results, areas in alphabetical order.

    Results without a research area land under ``"Other"``. When no result
    has an area at all the mapping is empty and callers show a flat list.
    """
    if not any(r.research_area for r in results):
        return {}

    grouped: dict[str, list[SearchResult]] = {}
    for result in results:
        grouped.setdefault(result.research_area or OTHER_AREA, []).append(result)

    return {area: grouped[area] for area in sorted(grouped)}
