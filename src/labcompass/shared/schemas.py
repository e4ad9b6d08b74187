"""
Schemas Module - Pydantic data models for the application.
==========================================================

Defines the data contracts shared by the search engine and the data layer:
- Entity: a professor/lab record as served by the directory backend
- SearchResult: an Entity annotated with department, relevance and match type
- Enums for match types and click analytics

The backend speaks camelCase JSON; models accept both the wire names and
the Python field names, and dump back to the wire names with ``by_alias``.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────


class MatchType(str, Enum):
    """Which field produced a result's best relevance score."""

    DEPARTMENT = "department"
    NAME = "name"
    LAB = "lab"
    TITLE = "title"
    RESEARCH_AREA = "researchArea"


class ClickType(str, Enum):
    """Click kinds reported to the analytics endpoint."""

    CARD = "card"
    EMAIL = "email"
    LAB_WEBSITE = "lab-website"


# ─────────────────────────────────────────────────────────────────────────────
# Entity Models
# ─────────────────────────────────────────────────────────────────────────────


TEXT_FIELDS = (
    "title",
    "lab",
    "lab_website",
    "personal_website",
    "email",
    "research_area",
)

STAT_FIELDS = (
    "num_lab_members",
    "num_undergrad_researchers",
    "num_published_papers",
)

TRUTHY_STRINGS = frozenset({"1", "true", "yes", "y", "on"})


class Entity(BaseModel):
    """
    A professor or lab record.

    Identity is the exact ``name`` string. Missing text fields read as ""
    and missing stats as None so that every read site can rely on the type.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., description="Professor name, case-sensitive identity")
    title: str = Field(default="", description="Academic title")
    lab: str = Field(default="", description="Lab display name or lab URL")
    lab_website: str = Field(default="", alias="labWebsite")
    personal_website: str = Field(default="", alias="personalWebsite")
    email: str = Field(default="")
    research_area: str = Field(
        default="", alias="researchArea", description="Comma-separated sub-areas"
    )

    num_lab_members: Optional[int] = Field(default=None, alias="numLabMembers")
    num_undergrad_researchers: Optional[int] = Field(
        default=None, alias="numUndergradResearchers"
    )
    num_published_papers: Optional[int] = Field(default=None, alias="numPublishedPapers")

    is_recruiting: bool = Field(default=False, alias="isRecruiting")
    is_translucent: bool = Field(default=False, alias="isTranslucent")

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        """The backend sends null for unset columns."""
        if v is None:
            return ""
        return str(v)

    @field_validator(*STAT_FIELDS, mode="before")
    @classmethod
    def clamp_stat(cls, v: Any) -> Optional[int]:
        if v is None or v == "":
            return None
        try:
            value = int(float(v))
        except (TypeError, ValueError, OverflowError):
            return None
        return value if value >= 0 else None

    @field_validator("is_recruiting", "is_translucent", mode="before")
    @classmethod
    def sqlite_bool(cls, v: Any) -> bool:
        # SQLite rows carry 0/1; hand-edited catalogs may carry "true"/"false"
        if v is None:
            return False
        if isinstance(v, str):
            return v.strip().lower() in TRUTHY_STRINGS
        return bool(v)

    @property
    def display_name(self) -> str:
        """Lab name when known, otherwise the professor name."""
        return self.lab or self.name

    def stat(self, field_name: str) -> int:
        """Read a numeric stat treating absent as zero."""
        value = getattr(self, field_name)
        return value if value is not None else 0

    def to_wire(self) -> dict[str, Any]:
        """Dump using the backend's camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class SearchResult(Entity):
    """
    An Entity found by a query.

    Created fresh for every query and never persisted.
    """

    department: str = Field(default="", description="Department(s), comma-joined")
    relevance: float = Field(default=0.0, ge=0.0, le=1.0)
    match_type: MatchType = Field(default=MatchType.DEPARTMENT, alias="matchType")

    @classmethod
    def from_entity(
        cls,
        entity: Entity,
        department: str,
        relevance: float,
        match_type: MatchType,
    ) -> "SearchResult":
        """Annotate an entity with its search context."""
        data = entity.model_dump()
        data.update(
            department=department,
            relevance=min(max(relevance, 0.0), 1.0),
            match_type=match_type,
        )
        return cls(**data)
