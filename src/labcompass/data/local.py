"""
Local Directory Module - Catalog and trending data from a JSON file.
====================================================================

Offline stand-in for the backend. The file holds the same department
mapping the API serves, plus optional click counts per department:

    {
      "departments": {"statistics": [{"name": "...", "lab": "..."}]},
      "clicks": {"statistics": {"Smith Lab": 12}}
    }

A bare ``{department: [entity, ...]}`` mapping is accepted too.

Trending names are ranked the way the backend ranks them: a weighted
average of undergraduate researchers (70%) and recent clicks (30%), each
normalized by the department maximum, top 3.
"""

import json
from functools import cmp_to_key
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from labcompass.data.base import CatalogSource
from labcompass.shared.errors import CatalogLoadError
from labcompass.shared.logging import get_logger
from labcompass.shared.schemas import ClickType, Entity
from labcompass.shared.utils import DepartmentCatalog, load_json, normalize_query, parse_catalog

logger = get_logger(__name__)

UNDERGRAD_WEIGHT = 0.7
CLICK_WEIGHT = 0.3
TRENDING_LIMIT = 3
# Scores closer than this are ordered by display name
TIE_EPSILON = 0.0001


def rank_trending(
    entities: Sequence[Entity],
    click_counts: Optional[Mapping[str, int]] = None,
    limit: int = TRENDING_LIMIT,
) -> list[str]:
    """
    Top display names (lab, else professor name) for a department.

    Args:
        entities: Department entities
        click_counts: Clicks keyed by professor name or lab name
        limit: Number of names to return

    Returns:
        Display names, most trending first
    """
    if not entities:
        return []

    click_counts = click_counts or {}

    def clicks_for(entity: Entity) -> int:
        return int(click_counts.get(entity.name, 0) or click_counts.get(entity.lab, 0) or 0)

    max_clicks = max(max(clicks_for(e) for e in entities), 1)
    max_undergrads = max(max(e.stat("num_undergrad_researchers") for e in entities), 1)

    scored = [
        (
            e.stat("num_undergrad_researchers") / max_undergrads * UNDERGRAD_WEIGHT
            + clicks_for(e) / max_clicks * CLICK_WEIGHT,
            e.display_name,
        )
        for e in entities
    ]

    ordered = sorted(scored, key=cmp_to_key(_compare_trending))
    return [name for _, name in ordered[:limit]]


def _compare_trending(a: tuple[float, str], b: tuple[float, str]) -> int:
    """Higher score first; near-ties by display name."""
    if abs(a[0] - b[0]) < TIE_EPSILON:
        return (a[1] > b[1]) - (a[1] < b[1])
    return -1 if a[0] > b[0] else 1


class LocalDirectory(CatalogSource):
    """
    In-memory directory loaded from a dict or JSON file.

    Example:
        >>> directory = LocalDirectory.from_file(Path("data/catalog.json"))
        >>> directory.fetch_trending_names("statistics")
        ['Smith Lab', 'Bayes Lab', 'Tian Li']
    """

    def __init__(
        self,
        catalog: Mapping[str, Sequence[Any]],
        clicks: Optional[Mapping[str, Mapping[str, int]]] = None,
    ):
        self._catalog: DepartmentCatalog = parse_catalog(catalog)
        self._clicks: dict[str, dict[str, int]] = {
            normalize_query(dept): dict(counts) for dept, counts in (clicks or {}).items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LocalDirectory":
        """Build from either the wrapped or the bare catalog layout."""
        if "departments" in data and isinstance(data["departments"], Mapping):
            return cls(data["departments"], data.get("clicks") or {})
        return cls(data)

    @classmethod
    def from_file(cls, path: Path) -> "LocalDirectory":
        """
        Load a catalog file.

        Raises:
            CatalogLoadError: If the file is missing or not a JSON object
        """
        try:
            data = load_json(path)
        except FileNotFoundError as e:
            raise CatalogLoadError(f"Catalog file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise CatalogLoadError(f"Invalid JSON in {path}: {e}") from e

        if not isinstance(data, Mapping):
            raise CatalogLoadError(f"Catalog file must contain a JSON object: {path}")

        directory = cls.from_dict(data)
        logger.info(f"Loaded {len(directory._catalog)} departments from {path}")
        return directory

    def fetch_department_catalog(self) -> DepartmentCatalog:
        return self._catalog

    def fetch_trending_names(self, department: str) -> list[str]:
        key = normalize_query(department)
        return rank_trending(self._catalog.get(key, []), self._clicks.get(key))

    def track_click(self, entity_name: str, department: str, click_type: ClickType | str) -> bool:
        key = normalize_query(department)
        if not any(e.name == entity_name for e in self._catalog.get(key, [])):
            logger.warning(f"Click for unknown entity '{entity_name}' in '{key}'")
            return False

        counts = self._clicks.setdefault(key, {})
        counts[entity_name] = counts.get(entity_name, 0) + 1
        return True
