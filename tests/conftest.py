"""
Pytest Configuration and Fixtures.
===================================

Shared fixtures for all test modules:
- Sample catalog data
- Search results built by hand
- Fake clocks
- Temporary directories
"""

import json
import tempfile
from pathlib import Path
from typing import Generator

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Path Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


# ─────────────────────────────────────────────────────────────────────────────
# Sample Data Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_catalog_data() -> dict:
    """Raw department mapping as served by GET /departments."""
    return {
        "statistics": [
            {
                "name": "Ada Lee",
                "title": "Professor",
                "lab": "Smith Lab",
                "email": "ada.lee@example.edu",
                "researchArea": "Bayesian Inference, Causal Inference",
                "numLabMembers": 8,
                "numUndergradResearchers": 5,
                "numPublishedPapers": 40,
                "isRecruiting": 1,
                "isTranslucent": 0,
            },
            {
                "name": "Tian Li",
                "title": "Assistant Professor",
                "lab": None,
                "researchArea": "Machine Learning",
                "numLabMembers": 4,
                "numUndergradResearchers": 2,
                "numPublishedPapers": 12,
                "isRecruiting": 0,
                "isTranslucent": 0,
            },
            {
                "name": "Maria Gomez",
                "title": "Associate Professor",
                "lab": "Bayes Lab",
                "researchArea": "Statistical Genetics",
                "numLabMembers": 6,
                "numUndergradResearchers": 3,
                "numPublishedPapers": 25,
                "isRecruiting": 1,
                "isTranslucent": 0,
            },
        ],
        "computer science": [
            {
                "name": "Tian Li",
                "title": "Assistant Professor",
                "lab": "Optimization Lab",
                "researchArea": "Machine Learning, Optimization",
                "numLabMembers": 10,
                "numUndergradResearchers": 1,
                "numPublishedPapers": 30,
                "isRecruiting": 0,
                "isTranslucent": 1,
            },
            {
                "name": "Raj Patel",
                "title": "Professor",
                "lab": "Vision Lab",
                "researchArea": "Computer Vision",
                "numLabMembers": 12,
                "numUndergradResearchers": 6,
                "numPublishedPapers": 60,
                "isRecruiting": 1,
                "isTranslucent": 0,
            },
        ],
    }


@pytest.fixture
def sample_clicks() -> dict:
    """Click counts per department, keyed by professor name."""
    return {
        "statistics": {"Ada Lee": 12, "Maria Gomez": 3},
        "computer science": {"Raj Patel": 7},
    }


@pytest.fixture
def sample_catalog(sample_catalog_data: dict):
    """Parsed DepartmentCatalog."""
    from labcompass.shared.utils import parse_catalog
    return parse_catalog(sample_catalog_data)


@pytest.fixture
def local_directory(sample_catalog_data: dict, sample_clicks: dict):
    """LocalDirectory over the sample catalog."""
    from labcompass.data.local import LocalDirectory
    return LocalDirectory(sample_catalog_data, sample_clicks)


@pytest.fixture
def catalog_file(temp_dir: Path, sample_catalog_data: dict, sample_clicks: dict) -> Path:
    """Sample catalog written to disk in the wrapped layout."""
    path = temp_dir / "catalog.json"
    path.write_text(
        json.dumps({"departments": sample_catalog_data, "clicks": sample_clicks}),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def make_result():
    """Factory for SearchResult instances."""
    from labcompass.shared.schemas import MatchType, SearchResult

    def _make(
        name: str,
        department: str = "statistics",
        relevance: float = 0.5,
        match_type: MatchType = MatchType.NAME,
        **fields,
    ) -> SearchResult:
        return SearchResult(
            name=name,
            department=department,
            relevance=relevance,
            match_type=match_type,
            **fields,
        )

    return _make


# ─────────────────────────────────────────────────────────────────────────────
# Mock Fixtures
# ─────────────────────────────────────────────────────────────────────────────


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    """Clock that only moves when told to."""
    return FakeClock()


# ─────────────────────────────────────────────────────────────────────────────
# Pytest Configuration
# ─────────────────────────────────────────────────────────────────────────────


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Reset global singletons and environment overrides between tests."""
    import labcompass.search.scoring as scoring_module
    from labcompass.shared.config import get_settings

    for var in ("LABCOMPASS_API_URL", "API_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)

    scoring_module._scorer = None
    get_settings.cache_clear()

    yield

    scoring_module._scorer = None
    get_settings.cache_clear()
