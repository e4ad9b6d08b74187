"""
Shared Module - Common utilities, configuration, schemas, and logging.
======================================================================

This module provides foundational components used across all other modules:

- config: Configuration loading and management
- logging: Rich logging setup
- schemas: Pydantic data models
- errors: Exception hierarchy
- utils: Normalization, catalog parsing, JSON I/O
"""

from labcompass.shared.config import Settings, get_settings
from labcompass.shared.errors import CatalogLoadError, LabCompassError, SearchCancelled
from labcompass.shared.logging import get_logger, setup_logging
from labcompass.shared.schemas import ClickType, Entity, MatchType, SearchResult
from labcompass.shared.utils import (
    DepartmentCatalog,
    load_json,
    normalize_query,
    parse_catalog,
)

__all__ = [
    # Config
    "get_settings",
    "Settings",
    # Errors
    "LabCompassError",
    "SearchCancelled",
    "CatalogLoadError",
    # Logging
    "get_logger",
    "setup_logging",
    # Schemas
    "ClickType",
    "Entity",
    "MatchType",
    "SearchResult",
    # Utils
    "DepartmentCatalog",
    "load_json",
    "normalize_query",
    "parse_catalog",
]
