"""
Merger Module - Collapse duplicate entity records by exact name.
================================================================

The same professor can appear in several department lists (joint
appointments, cross-listed labs). Records are merged on exact ``name``
equality; "Tian Li" and "Tian LI" stay separate.

Reconciliation rules:
- numeric stats: maximum, absent counts as 0
- relevance: maximum
- department: comma-joined union in first-seen order
- text fields: first non-empty value wins
- research areas that differ: union of sub-areas with subsumed ones removed
- match type: highest priority (name > lab > title > researchArea > department)
"""

from typing import Iterable, Optional

from labcompass.shared.logging import get_logger
from labcompass.shared.schemas import STAT_FIELDS, MatchType, SearchResult
from labcompass.shared.utils import dedupe_preserving_order

logger = get_logger(__name__)

MATCH_TYPE_PRIORITY: dict[MatchType, int] = {
    MatchType.NAME: 5,
    MatchType.LAB: 4,
    MatchType.TITLE: 3,
    MatchType.RESEARCH_AREA: 2,
    MatchType.DEPARTMENT: 1,
}

# First non-empty value wins; research_area is special-cased below
FIRST_NON_EMPTY_FIELDS = ("title", "lab", "lab_website", "personal_website", "email")

DEPARTMENT_SEPARATOR = ", "
AREA_SEPARATOR = ", "


def split_departments(department: str) -> list[str]:
    """Split a possibly comma-joined department string."""
    return [d.strip() for d in department.split(",") if d.strip()]


def merge_departments(existing: str, incoming: str) -> str:
    """
    Union of two department strings, first-seen order, no repeats.

    Example:
        >>> merge_departments("data science", "statistics")
        'data science, statistics'
    """
    if not existing:
        return incoming
    if not incoming or existing == incoming:
        return existing
    parts = dedupe_preserving_order(split_departments(existing) + split_departments(incoming))
    return DEPARTMENT_SEPARATOR.join(parts)


def merge_research_areas(existing: str, incoming: str) -> str:
    """
    Combine two comma-separated research-area strings.

    Sub-areas contained (case-insensitively) in a longer retained sub-area
    are dropped, then the rest is deduplicated case-insensitively.

    Example:
        >>> merge_research_areas("Machine Learning", "Learning, Statistics")
        'Machine Learning, Statistics'
    """
    if not existing:
        return incoming
    if not incoming or existing == incoming:
        return existing

    candidates = [
        area.strip()
        for area in existing.split(",") + incoming.split(",")
        if area.strip()
    ]

    survivors: list[str] = []
    seen_lower: set[str] = set()
    for area in candidates:
        lowered = area.lower()
        subsumed = any(
            len(other) > len(area) and lowered in other.lower()
            for other in candidates
        )
        if subsumed or lowered in seen_lower:
            continue
        seen_lower.add(lowered)
        survivors.append(area)

    if not survivors:
        return existing if len(existing) >= len(incoming) else incoming
    return AREA_SEPARATOR.join(survivors)


def higher_priority(a: MatchType, b: MatchType) -> MatchType:
    """The match type that should be reported for a merged record."""
    return b if MATCH_TYPE_PRIORITY[b] > MATCH_TYPE_PRIORITY[a] else a


def merge_pair(existing: SearchResult, incoming: SearchResult) -> SearchResult:
    """Merge ``incoming`` into a copy of ``existing``."""
    updates: dict = {}

    for field_name in STAT_FIELDS:
        if getattr(existing, field_name) is None and getattr(incoming, field_name) is None:
            continue
        updates[field_name] = max(existing.stat(field_name), incoming.stat(field_name))

    updates["relevance"] = max(existing.relevance, incoming.relevance)
    updates["department"] = merge_departments(existing.department, incoming.department)

    for field_name in FIRST_NON_EMPTY_FIELDS:
        updates[field_name] = getattr(existing, field_name) or getattr(incoming, field_name)

    updates["research_area"] = merge_research_areas(
        existing.research_area, incoming.research_area
    )
    updates["is_recruiting"] = existing.is_recruiting or incoming.is_recruiting
    updates["is_translucent"] = existing.is_translucent or incoming.is_translucent
    updates["match_type"] = higher_priority(existing.match_type, incoming.match_type)

    return existing.model_copy(update=updates)


def merge(results: Iterable[SearchResult]) -> list[SearchResult]:
    """
    Collapse records that share a name.

    Args:
        results: Search results, typically ranked

    Returns:
        One record per distinct name, in first-seen order
    """
    merged: dict[str, SearchResult] = {}
    total = 0

    for result in results:
        total += 1
        current: Optional[SearchResult] = merged.get(result.name)
        if current is None:
            merged[result.name] = result.model_copy()
        else:
            merged[result.name] = merge_pair(current, result)

    if total != len(merged):
        logger.debug(f"Merged {total} results into {len(merged)} unique entities")
    return list(merged.values())
