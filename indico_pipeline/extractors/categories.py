"""Category iCal feed -> list of AgendaEvent."""

from datetime import date, datetime
from typing import Optional

from icalendar import Calendar
from rich.console import Console

from indico_pipeline.exceptions import LocatorError, MalformedResponse
from indico_pipeline.locators.agenda import parse_conference
from indico_pipeline.models.location import AgendaEvent

console = Console()


def _event_time(component, key: str) -> Optional[datetime]:
    if key not in component:
        return None
    value = component.decoded(key)
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        # All-day events come as plain dates
        return datetime.combine(value, datetime.min.time())
    return None


def parse_category_feed(text: str, url: Optional[str] = None) -> list[AgendaEvent]:
    """Every VEVENT in the feed that links to a conference we can locate.

    Events whose URL isn't a conference URL are skipped with a warning.

    Raises:
        MalformedResponse: the text is not an iCalendar document.
    """
    try:
        calendar = Calendar.from_ical(text)
    except ValueError as e:
        raise MalformedResponse(f"Category feed is not valid iCalendar: {e}", url) from e

    events = []
    for component in calendar.walk("VEVENT"):
        event_url = str(component.get("url", "")).strip()
        title = str(component.get("summary", "")).strip()
        try:
            location = parse_conference(event_url)
        except LocatorError:
            console.print(f"[yellow]Skipping '{title}': no conference URL ({event_url or 'none'})[/yellow]")
            continue

        events.append(
            AgendaEvent(
                location=location,
                title=title,
                url=event_url,
                start=_event_time(component, "dtstart"),
                end=_event_time(component, "dtend"),
            )
        )
    return events
