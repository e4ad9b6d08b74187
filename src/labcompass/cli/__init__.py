"""
CLI Module - Command-line interface for LabCompass.
===================================================

Provides CLI commands for:
- Searching professors and labs
- Browsing departments
- Viewing trending labs
- Reporting clicks
- Inspecting relevance scores

Usage:
    labcompass --help
    labcompass search "stats"
    labcompass search "ml lab" --catalog data/catalog.json
    labcompass trending statistics

Components:
- main: Typer CLI application
"""

from labcompass.cli.main import app, cli

__all__ = ["app", "cli"]
