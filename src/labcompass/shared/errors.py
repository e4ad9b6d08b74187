"""
Errors Module - Exception hierarchy.
====================================

Only conditions a caller must react to are exceptions. Data-fetch
failures are not: the data layer logs them and returns empty data.
"""


class LabCompassError(Exception):
    """Base class for all LabCompass errors."""


class SearchCancelled(LabCompassError):
    """
    Raised when an in-flight search was superseded or timed out.

    Callers normally swallow this silently; it is not a failure.
    """

    def __init__(self, reason: str = "cancelled"):
        super().__init__(reason)
        self.reason = reason


class CatalogLoadError(LabCompassError):
    """Raised when a local catalog file cannot be read or parsed."""
