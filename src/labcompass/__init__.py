"""
LabCompass - Fuzzy search over a university research directory
==============================================================

Ranks professors and labs across departments for free-text queries:

- Abbreviation-aware, tiered relevance scoring ("cs", "ml", "stats")
- Multi-field search over department, name, lab, title and research area
- Adaptive filtering of weak matches
- Merging of professors listed in several departments
- Trending labs derived from click analytics

Data comes from the directory backend's REST API or a local JSON catalog.
"""

__version__ = "0.1.0"
__author__ = "LabCompass Team"
__license__ = "MIT"

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Main modules (imported on demand)
    "shared",
    "search",
    "data",
    "cli",
]
