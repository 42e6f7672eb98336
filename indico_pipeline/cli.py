"""CLI for the Indico agenda pipeline."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from indico_pipeline.config import get_settings
from indico_pipeline.exceptions import AgendaError
from indico_pipeline.locators.agenda import (
    build_conference_url,
    build_json_url,
    build_markup_url,
    parse_conference,
)
from indico_pipeline.pipeline import (
    load_category,
    load_meeting,
    load_meeting_file,
    print_category_summary,
    print_meeting_summary,
)

app = typer.Typer(
    name="indico-pipeline",
    help="Fetch and normalize Indico conference agendas",
    add_completion=False,
)
console = Console()


def _fail(error: AgendaError) -> None:
    console.print(f"[red]{error}[/red]")
    raise typer.Exit(1)


@app.command()
def meeting(
    url: str = typer.Argument(..., help="Any Indico conference URL"),
    from_file: Optional[Path] = typer.Option(
        None, "--from-file", "-f",
        help="Normalize a saved XML/JSON payload instead of fetching",
    ),
    limit: int = typer.Option(30, "--limit", "-l", help="Talks to show in the table"),
):
    """Fetch a conference and show its talks."""
    try:
        if from_file is not None:
            location = parse_conference(url)
            result = asyncio.run(load_meeting_file(from_file, location.site))
        else:
            result = asyncio.run(load_meeting(url))
    except AgendaError as e:
        _fail(e)

    print_meeting_summary(result, limit=limit)


@app.command()
def category(
    url: str = typer.Argument(..., help="Indico category URL"),
    days: int = typer.Option(0, "--days", "-d", help="How many days back to list"),
):
    """List the meetings of a category."""
    try:
        events = asyncio.run(load_category(url, days))
    except AgendaError as e:
        _fail(e)

    print_category_summary(events)


@app.command()
def request_url(
    url: str = typer.Argument(..., help="Any Indico conference URL"),
    use_json: bool = typer.Option(False, "--json/--xml", help="JSON export or XML view"),
    modern: bool = typer.Option(True, "--modern/--legacy", help="XML: /event/ path or .py endpoint"),
):
    """Print the (signed) data URL for a conference."""
    settings = get_settings()
    try:
        location = parse_conference(url)
    except AgendaError as e:
        _fail(e)

    keys = dict(
        api_key=settings.api_key,
        secret_key=settings.secret_key,
        use_timestamp=settings.use_timestamp,
    )
    if use_json:
        data_url = build_json_url(location, **keys)
    else:
        data_url = build_markup_url(location, modern, **keys)

    console.print(data_url, soft_wrap=True, markup=False)
    console.print(f"[dim]Agenda page: {build_conference_url(location, modern or use_json)}[/dim]")


if __name__ == "__main__":
    app()
