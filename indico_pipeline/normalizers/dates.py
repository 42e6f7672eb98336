"""Date parsing for both wire formats.

Markup dates are free-ish strings and come out naive (local wall time).
JSON dates are ``{date, time, tz}`` triples and come out timezone-aware.
Missing dates become the epoch-zero sentinels, never None.
"""

from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from indico_pipeline.exceptions import MalformedResponse
from indico_pipeline.models.raw import RawJsonDate
from indico_pipeline.signing.timecodec import EPOCH_ZERO, EPOCH_ZERO_UTC

# Tried after datetime.fromisoformat gives up
MARKUP_DATE_FORMATS = [
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M:%S%z",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%a, %d %b %Y %H:%M:%S %z",
    "%Y-%m-%d",
]


def parse_markup_date(value: Optional[str]) -> datetime:
    """Parse a date from the XML agenda.

    Offsets are honoured and the result is brought to local wall time, so
    everything on the markup path is naive and comparable.
    """
    if value is None or not value.strip():
        return EPOCH_ZERO

    text = value.strip()
    parsed = None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        for fmt in MARKUP_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        raise MalformedResponse(f"Unrecognized agenda date '{text}'")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise MalformedResponse(f"Unknown timezone '{name}'") from e


def parse_json_date(value: Optional[RawJsonDate]) -> datetime:
    """Resolve a JSON ``{date, time, tz}`` against the tz database.

    Raises:
        MalformedResponse: bad date/time text, unknown zone, or a wall time
            that doesn't exist (or exists twice) in that zone.
    """
    if value is None or not value.date:
        return EPOCH_ZERO_UTC

    try:
        day = date.fromisoformat(value.date.strip())
        clock = time.fromisoformat(value.time.strip()) if value.time else time()
    except ValueError as e:
        raise MalformedResponse(f"Bad JSON date {value.date!r} {value.time!r}") from e

    zone = _zone(value.tz or "UTC")
    wall = datetime.combine(day, clock.replace(tzinfo=None))

    first = wall.replace(tzinfo=zone, fold=0)
    second = wall.replace(tzinfo=zone, fold=1)
    if first.utcoffset() != second.utcoffset():
        # DST gap or overlap: no single instant matches this wall time
        raise MalformedResponse(f"Wall time {wall} is ambiguous or skipped in {zone.key}")
    return first
