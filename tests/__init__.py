"""
Tests Package - Unit tests for LabCompass.
==========================================

Test modules:
- test_scoring: Distance, abbreviation and scoring-tier tests
- test_search: Orchestrator, filtering, department and grouping tests
- test_merger: Duplicate merging and trending split tests
- test_data: Schemas, cache, HTTP client, local directory, settings
- test_engine: End-to-end pipeline and cancellation tests
- test_cli: Typer command tests

Run tests with:
    pytest tests/
    pytest tests/ -v
"""
