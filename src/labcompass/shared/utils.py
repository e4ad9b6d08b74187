"""
Utilities Module - Common helper functions.
==========================================

Provides utility functions for:
- Query and text normalization
- Catalog parsing (tolerant of malformed entity records)
- JSON file I/O
"""

import json
from pathlib import Path
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from labcompass.shared.logging import get_logger
from labcompass.shared.schemas import Entity

logger = get_logger(__name__)

DepartmentCatalog = dict[str, list[Entity]]


# ─────────────────────────────────────────────────────────────────────────────
# Text Normalization
# ─────────────────────────────────────────────────────────────────────────────


def normalize_query(text: str | None) -> str:
    """
    Lowercase and trim a query or department name.

    Example:
        >>> normalize_query("  Computer Science ")
        'computer science'
    """
    if not text:
        return ""
    return text.lower().strip()


def split_words(text: str) -> list[str]:
    """Split on runs of whitespace, dropping empties."""
    return text.split()


def dedupe_preserving_order(items: Iterable[str]) -> list[str]:
    """Remove repeats while keeping the first occurrence of each item."""
    seen: set[str] = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def display_department_name(department: str) -> str:
    """
    Title-case a department name for headings.

    Example:
        >>> display_department_name("computer science")
        'Computer Science'
    """
    return " ".join(word.capitalize() for word in department.split())


# ─────────────────────────────────────────────────────────────────────────────
# Catalog Parsing
# ─────────────────────────────────────────────────────────────────────────────


def parse_entities(records: Iterable[Any], department: str = "") -> list[Entity]:
    """
    Validate raw entity dicts, skipping the ones that cannot be read.

    Args:
        records: Raw JSON objects from the backend or a catalog file
        department: Department name, used only for log messages

    Returns:
        Entities in input order
    """
    entities = []
    for record in records or []:
        if isinstance(record, Entity):
            entities.append(record)
            continue
        try:
            entities.append(Entity.model_validate(record))
        except ValidationError as e:
            logger.warning(
                f"Skipping malformed entity in '{department}': "
                f"{e.error_count()} validation error(s)"
            )
    return entities


def parse_catalog(raw: Mapping[str, Any] | None) -> DepartmentCatalog:
    """
    Turn a ``{department: [entity, ...]}`` mapping into a catalog.

    Department keys are normalized to lowercase. Non-list values are ignored.
    """
    catalog: DepartmentCatalog = {}
    if not raw:
        return catalog

    for department, records in raw.items():
        if not isinstance(records, list):
            logger.warning(f"Ignoring department '{department}': expected a list")
            continue
        key = normalize_query(department)
        catalog.setdefault(key, []).extend(parse_entities(records, key))
    return catalog


# ─────────────────────────────────────────────────────────────────────────────
# JSON File I/O
# ─────────────────────────────────────────────────────────────────────────────


def load_json(file_path: Path) -> Any:
    """
    Load data from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
    """
    with open(Path(file_path), "r", encoding="utf-8") as f:
        return json.load(f)
