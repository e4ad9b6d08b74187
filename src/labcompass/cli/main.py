"""
CLI Main - Typer command-line interface.
========================================

Commands:
- search: Search professors and labs across departments
- departments: List departments or show one department's entities
- trending: Show trending labs for a department
- click: Report a click to the analytics backend
- score: Score a query against a single piece of text
- info: Show system information
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from labcompass.shared.logging import LogContext, get_logger

logger = get_logger(__name__)

app = typer.Typer(
    name="labcompass",
    help="""🧭 LabCompass - Fuzzy search for a university research directory

Finds professors and labs across departments from free-text queries such as
"stats", "ml lab" or "bayesian inference".

━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

COMMANDS OVERVIEW:

  search       Search all departments
               -c, --catalog   Use a local JSON catalog instead of the API
               -n, --limit     Maximum results to show
               --json          Print results as JSON

  departments  List departments, or the entities of one department
  trending     Show trending labs for a department
  click        Report a click (card, email, lab-website)
  score        Score a query against a piece of text
  info         Show configuration

━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

QUICK START:

  labcompass search "stats"
  labcompass search "machine learning" -c data/catalog.json
  labcompass trending statistics

Use 'labcompass <command> --help' for detailed command options.
""",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

CATALOG_OPTION_HELP = "Local JSON catalog file. Omit to query the directory API."


def _open_source(catalog: Optional[Path]):
    """Build the data source for a command."""
    from labcompass.data.client import DirectoryClient
    from labcompass.data.local import LocalDirectory
    from labcompass.shared.errors import CatalogLoadError

    if catalog is None:
        return DirectoryClient()

    try:
        return LocalDirectory.from_file(catalog)
    except CatalogLoadError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _results_table(results, title: Optional[str] = None) -> Table:
    table = Table(show_header=True, title=title)
    table.add_column("#", style="dim", width=3)
    table.add_column("Name")
    table.add_column("Lab")
    table.add_column("Department")
    table.add_column("Match", style="cyan")
    table.add_column("Relevance", justify="right")

    for i, result in enumerate(results, 1):
        table.add_row(
            str(i),
            result.name,
            result.lab or "-",
            result.department,
            result.match_type.value,
            f"{result.relevance:.3f}",
        )
    return table


# ─────────────────────────────────────────────────────────────────────────────
# Search Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def search(
    query: str = typer.Argument(
        ...,
        help="Free-text query (wrap in quotes).",
    ),
    catalog: Optional[Path] = typer.Option(
        None,
        "--catalog", "-c",
        help=CATALOG_OPTION_HELP,
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit", "-n",
        help="Maximum number of results (default from config, 0 = all).",
    ),
    group: bool = typer.Option(
        True,
        "--group/--no-group",
        help="Group regular results by research area.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print results as JSON instead of tables.",
    ),
):
    """
    🔍 Search professors and labs.

    Matches the query against department names, professor names, lab names,
    titles and research areas. Abbreviations such as "cs" or "ml" are
    expanded. Professors listed in several departments appear once.

    Examples:
        labcompass search "stats"
        labcompass search "bayesian inference" -n 10
        labcompass search "ml lab" -c data/catalog.json --json
    """
    from labcompass.search.engine import SearchEngine

    source = _open_source(catalog)
    try:
        engine = SearchEngine(source, max_results=limit)

        if as_json:
            with LogContext("WARNING", "labcompass"):
                outcome = engine.search(query)
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                progress.add_task("Searching...", total=None)
                outcome = engine.search(query)
    finally:
        source.close()

    if as_json:
        payload = {
            "query": outcome.query,
            "department": outcome.department,
            "minTrendingRelevance": outcome.min_trending_relevance,
            "trending": [r.to_wire() for r in outcome.trending],
            "regular": [r.to_wire() for r in outcome.regular],
        }
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    if outcome.is_empty:
        console.print(f"[yellow]No results for '{query}'.[/yellow]")
        raise typer.Exit(0)

    console.print(
        f"\n[bold]{len(outcome.results)} results[/bold] for '{query}' "
        f"[dim]({outcome.elapsed_ms:.0f}ms)[/dim]\n"
    )

    if outcome.trending:
        console.print(_results_table(outcome.trending, title="🔥 Trending"))

    grouped = outcome.regular_by_area if group else {}
    if grouped:
        for area, results in grouped.items():
            console.print(_results_table(results, title=area))
    elif outcome.regular:
        console.print(_results_table(outcome.regular))


# ─────────────────────────────────────────────────────────────────────────────
# Departments Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def departments(
    name: Optional[str] = typer.Argument(
        None,
        help="Department to show. Omit to list all departments.",
    ),
    catalog: Optional[Path] = typer.Option(
        None,
        "--catalog", "-c",
        help=CATALOG_OPTION_HELP,
    ),
):
    """
    🏛️ List departments or show one department.

    Examples:
        labcompass departments
        labcompass departments statistics
    """
    from labcompass.shared.utils import display_department_name

    source = _open_source(catalog)
    try:
        if name is None:
            names = source.fetch_department_list()
        else:
            entities = source.fetch_department(name)
    finally:
        source.close()

    if name is None:
        if not names:
            console.print("[yellow]No departments available.[/yellow]")
            raise typer.Exit(0)

        table = Table(show_header=True, title="Departments")
        table.add_column("Department")
        for dept in sorted(names):
            table.add_row(display_department_name(dept))
        console.print(table)
        return

    if not entities:
        console.print(f"[yellow]No entities found for '{name}'.[/yellow]")
        raise typer.Exit(0)

    table = Table(show_header=True, title=display_department_name(name))
    table.add_column("Name")
    table.add_column("Title")
    table.add_column("Lab")
    table.add_column("Research Area")
    table.add_column("Recruiting", justify="center")
    for entity in entities:
        table.add_row(
            entity.name,
            entity.title,
            entity.lab or "-",
            entity.research_area or "-",
            "✓" if entity.is_recruiting else "",
        )
    console.print(table)


# ─────────────────────────────────────────────────────────────────────────────
# Trending Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def trending(
    department: str = typer.Argument(
        ...,
        help="Department name or alias (e.g. statistics, cs).",
    ),
    catalog: Optional[Path] = typer.Option(
        None,
        "--catalog", "-c",
        help=CATALOG_OPTION_HELP,
    ),
):
    """
    🔥 Show trending labs for a department.

    Trending is ranked by undergraduate researchers and recent clicks.
    """
    from labcompass.search.departments import resolve_department

    source = _open_source(catalog)
    try:
        resolved = resolve_department(department, source.fetch_department_list()) or department
        names = source.fetch_trending_names(resolved)
    finally:
        source.close()

    if not names:
        console.print(f"[yellow]No trending labs for '{resolved}'.[/yellow]")
        raise typer.Exit(0)

    console.print(f"\n[bold]Trending in {resolved}:[/bold]")
    for i, name in enumerate(names, 1):
        console.print(f"  {i}. {name}")


# ─────────────────────────────────────────────────────────────────────────────
# Click Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def click(
    name: str = typer.Argument(..., help="Professor name as listed in the directory."),
    department: str = typer.Argument(..., help="Department the professor was clicked in."),
    click_type: str = typer.Option(
        "card",
        "--type", "-t",
        help="Click type: card, email, or lab-website.",
    ),
):
    """
    🖱️ Report a click to the analytics backend.

    A recorded click refreshes the cached trending lists.
    """
    from labcompass.data.client import DirectoryClient
    from labcompass.shared.schemas import ClickType

    try:
        kind = ClickType(click_type)
    except ValueError:
        valid = ", ".join(c.value for c in ClickType)
        console.print(f"[red]Unknown click type '{click_type}'. Use one of: {valid}[/red]")
        raise typer.Exit(1)

    with DirectoryClient() as client:
        recorded = client.track_click(name, department, kind)

    if recorded:
        console.print(f"[green]✓ Recorded {kind.value} click for {name}[/green]")
    else:
        console.print("[yellow]Click was not recorded (backend unavailable?).[/yellow]")


# ─────────────────────────────────────────────────────────────────────────────
# Score Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def score(
    query: str = typer.Argument(..., help="Query text."),
    target: str = typer.Argument(..., help="Text to score the query against."),
    abbreviations: bool = typer.Option(
        True,
        "--abbrev/--no-abbrev",
        help="Expand abbreviations before scoring.",
    ),
):
    """
    🧮 Score a query against a single piece of text.

    Useful for checking why a result did or did not show up.

    Examples:
        labcompass score "stats" "Statistics"
        labcompass score "ml" "machine learning" --no-abbrev
    """
    from labcompass.search.abbreviations import expand
    from labcompass.search.scoring import get_scorer

    value = get_scorer().score(query, target, use_abbreviations=abbreviations)

    console.print(Panel(
        f"Query: {query}\n"
        f"Target: {target}\n"
        f"Relevance: [bold]{value:.4f}[/bold]",
        title="🧮 Score",
    ))

    if abbreviations:
        forms = sorted(expand(query))
        if len(forms) > 1:
            console.print(f"[dim]Expansions: {', '.join(forms)}[/dim]")


# ─────────────────────────────────────────────────────────────────────────────
# Info Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def info():
    """
    ℹ️ Show system information and configuration.

    Displays:
      • Version information
      • Directory API settings
      • Cache and search settings
      • Data paths and their existence status
    """
    from labcompass import __version__
    from labcompass.shared.config import get_settings

    settings = get_settings()

    console.print(Panel(
        f"[bold]LabCompass[/bold]\n"
        f"Version: {__version__}\n"
        f"Config: config/settings.yaml",
        title="ℹ️ Info",
    ))

    table = Table(show_header=True)
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("API URL", settings.get_effective_api_url())
    table.add_row("Timeout", f"{settings.get_effective_timeout()}s")
    table.add_row("Retries", str(settings.api.max_retries))
    table.add_row("Catalog TTL", f"{settings.cache.catalog_ttl}s")
    table.add_row("Trending TTL", f"{settings.cache.trending_ttl}s")
    table.add_row("Min relevance", str(settings.search.min_relevance))
    table.add_row("Max results", str(settings.search.max_results or "all"))
    table.add_row("Log level", settings.get_effective_log_level())
    console.print(table)

    console.print("\n[bold]Data Paths:[/bold]")
    resolved_paths = settings.resolved_paths
    path_dict = {
        "data_dir": resolved_paths.data_dir,
        "catalog_file": resolved_paths.catalog_file,
    }
    for name, path in path_dict.items():
        exists = "✓" if path.exists() else "✗"
        console.print(f"  {name}: {path} [{exists}]")


# ─────────────────────────────────────────────────────────────────────────────
# Entry Point
# ─────────────────────────────────────────────────────────────────────────────


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
):
    """Configure logging before any command runs."""
    from labcompass.shared.config import get_settings
    from labcompass.shared.logging import setup_logging

    settings = get_settings()
    setup_logging(
        level="DEBUG" if verbose else settings.get_effective_log_level(),
        use_rich=settings.logging.rich_console,
        log_file=settings.logging.file or None,
        log_format=settings.logging.format,
        force=True,
    )


def cli():
    """CLI entry point."""
    app()


if __name__ == "__main__":
    cli()
