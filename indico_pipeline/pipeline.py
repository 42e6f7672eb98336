"""Main pipeline orchestration."""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from indico_pipeline.config import Settings, get_settings
from indico_pipeline.extractors.fetch import HttpxFetcher, LocalFileFetcher, UrlFetcher
from indico_pipeline.extractors.negotiation import ConferenceFetcher
from indico_pipeline.extractors.parsers import parse_json_export, parse_markup
from indico_pipeline.extractors.site_registry import SiteRegistry
from indico_pipeline.locators.agenda import parse_category, parse_conference
from indico_pipeline.models.agenda import Meeting
from indico_pipeline.models.location import AgendaEvent
from indico_pipeline.normalizers import MessageCallback, normalize

console = Console()

# What hosts turn out to speak is kept for the life of the process
DEFAULT_REGISTRY = SiteRegistry()


def print_message(category: str, text: str) -> None:
    """Default normalization callback: one dim line per message."""
    console.print(f"[dim yellow]{category}: {text}[/dim yellow]")


def make_fetcher(
    fetcher: UrlFetcher,
    settings: Settings,
    registry: Optional[SiteRegistry] = None,
) -> ConferenceFetcher:
    """ConferenceFetcher sharing DEFAULT_REGISTRY unless given a registry."""
    return ConferenceFetcher(
        fetcher,
        registry=registry if registry is not None else DEFAULT_REGISTRY,
        api_key=settings.api_key,
        secret_key=settings.secret_key,
        use_timestamp=settings.use_timestamp,
    )


async def load_meeting(
    url: str,
    settings: Optional[Settings] = None,
    registry: Optional[SiteRegistry] = None,
    on_message: Optional[MessageCallback] = print_message,
) -> Meeting:
    """Fetch and normalize the conference behind any known Indico URL.

    1. Parse the URL into a location
    2. Negotiate the dialect with the host
    3. Normalize into a Meeting
    """
    settings = settings or get_settings()
    location = parse_conference(url)
    console.print(f"\n[bold cyan]Loading {location}[/bold cyan]\n")

    async with HttpxFetcher(timeout=settings.http_timeout, user_agent=settings.user_agent) as http:
        meeting = await make_fetcher(http, settings, registry).get_meeting(location, on_message)

    console.print(
        f"[green]Loaded '{meeting.title}': {len(meeting.sessions)} sessions, "
        f"{len(meeting.all_talks())} talks[/green]\n"
    )
    return meeting


async def load_meeting_file(
    path: Path | str,
    site: str,
    on_message: Optional[MessageCallback] = print_message,
) -> Meeting:
    """Normalize a saved XML or JSON payload, no network involved."""
    path = Path(path)
    text = await LocalFileFetcher(path).fetch(str(path))
    if text.lstrip().startswith("{"):
        raw = parse_json_export(text, str(path))
    else:
        raw = parse_markup(text, str(path))
    return normalize(raw, site, on_message)


async def load_category(
    url: str,
    days_back: int = 0,
    settings: Optional[Settings] = None,
    registry: Optional[SiteRegistry] = None,
) -> list[AgendaEvent]:
    """Meetings of a category over the last ``days_back`` days (and upcoming)."""
    settings = settings or get_settings()
    location = parse_category(url)

    async with HttpxFetcher(timeout=settings.http_timeout, user_agent=settings.user_agent) as http:
        events = await make_fetcher(http, settings, registry).get_category(location, days_back)

    console.print(f"[dim]Category {location.identifier}: {len(events)} events[/dim]")
    return events


def _when(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value is not None else "?"


def print_meeting_summary(meeting: Meeting, limit: int = 30) -> None:
    """Print a summary table of the talks of a meeting."""
    talks = [(session, talk) for session in meeting.sessions for talk in session.talks]
    table = Table(title=f"{meeting.title} (showing {min(len(talks), limit)} of {len(talks)} talks)")
    table.add_column("Session", style="yellow", max_width=20)
    table.add_column("Start", style="magenta")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Speakers", style="green", max_width=25)
    table.add_column("Material", style="blue")

    for session, talk in talks[:limit]:
        table.add_row(
            session.title[:20],
            _when(talk.start),
            talk.title[:40],
            ", ".join(talk.speakers[:2]) or "-",
            talk.best_material_extension or "-",
        )

    console.print(table)

    extra = len(meeting.meeting_talks) + sum(len(s.session_material) for s in meeting.sessions)
    if extra:
        console.print(f"[dim]Plus {extra} bundles of extra material[/dim]")


def print_category_summary(events: list[AgendaEvent]) -> None:
    """Print a table of the meetings in a category."""
    table = Table(title=f"{len(events)} meetings")
    table.add_column("Id", style="magenta")
    table.add_column("Start", style="yellow")
    table.add_column("Title", style="cyan", max_width=50)
    table.add_column("Site", style="green")

    for event in sorted(events, key=lambda e: _when(e.start)):
        table.add_row(event.location.identifier, _when(event.start), event.title[:50], event.location.site)

    console.print(table)
