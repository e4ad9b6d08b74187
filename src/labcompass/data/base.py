"""
Data Source Base Module - Abstract interface for directory data.
================================================================

The search engine reads its department catalog and trending lists through
this interface, so the HTTP backend and a local JSON file are
interchangeable. Implementations must never raise on data-fetch failure:
they log and return empty data.
"""

from abc import ABC, abstractmethod

from labcompass.shared.schemas import ClickType, Entity
from labcompass.shared.utils import DepartmentCatalog


class CatalogSource(ABC):
    """
    Abstract base class for department/professor data sources.

    Implementations must provide:
    - fetch_department_catalog(): every department with its entities
    - fetch_trending_names(): trending lab/professor names for a department
    """

    @abstractmethod
    def fetch_department_catalog(self) -> DepartmentCatalog:
        """
        Get every department with its entities.

        Returns:
            Lowercase department name -> entities; empty on failure
        """
        pass

    @abstractmethod
    def fetch_trending_names(self, department: str) -> list[str]:
        """
        Get trending lab or professor names for a department.

        Returns:
            Names, best first; empty on failure
        """
        pass

    def fetch_department(self, name: str) -> list[Entity]:
        """
        Get the entities of a single department.

        Default implementation reads the full catalog.
        """
        if not name:
            return []
        return self.fetch_department_catalog().get(name.lower().strip(), [])

    def fetch_department_list(self) -> list[str]:
        """Get all department names."""
        return list(self.fetch_department_catalog().keys())

    def track_click(self, entity_name: str, department: str, click_type: ClickType | str) -> bool:
        """
        Report a click. Fire-and-forget; sources without analytics ignore it.

        Returns:
            True if the click was recorded
        """
        return False

    def track_view(self, entity_name: str, department: str) -> bool:
        """Report a card view. Fire-and-forget."""
        return False

    def close(self) -> None:
        """Release any held resources. No-op by default."""
        pass
