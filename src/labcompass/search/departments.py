"""
Department resolution - which department a query is "about".

Used to pick the trending list shown above the results.
"""

from typing import Iterable, Optional, Sequence

from labcompass.shared.schemas import SearchResult
from labcompass.shared.utils import normalize_query

# Queries that name a department outright
DEPARTMENT_ALIASES: dict[str, str] = {
    "statistics": "statistics",
    "stat": "statistics",
    "stats": "statistics",
    "math": "mathematics",
    "mathematics": "mathematics",
    "cs": "computer science",
    "computer science": "computer science",
    "data science": "data science",
    "ds": "data science",
    "economics": "economics",
    "econ": "economics",
}


def resolve_department(
    query: str,
    departments: Iterable[str],
    results: Sequence[SearchResult] = (),
) -> Optional[str]:
    """
    Best-guess department for a query.

    Order: alias table, exact name, containment either way, then the
    (first) department of the top result.

    Example:
        >>> resolve_department("cs", ["computer science", "statistics"])
        'computer science'
    """
    normalized = normalize_query(query)
    known = [normalize_query(d) for d in departments]
    if not normalized:
        return None

    alias = DEPARTMENT_ALIASES.get(normalized)
    if alias and alias in known:
        return alias

    if normalized in known:
        return normalized

    for department in known:
        if department and (normalized in department or department in normalized):
            return department

    if results and results[0].department:
        return results[0].department.split(",")[0].strip()
    return None
