"""Format negotiation: which URL and wire format does this Indico speak?

Three dialects exist in the wild:

1. LEGACY_MARKUP: ``conferenceOtherViews.py?confId=..&view=xml`` (old sites)
2. MODERN_MARKUP: ``/event/<id>/other-view?view=xml`` (sites that dropped .py URLs)
3. JSON: ``/export/event/<id>.json`` (sites that retired the XML view)

We start from what the registry knows about the host and fall back at most
once per transition:

- legacy XML unparsable, host not known as modern -> retry with /event/ URLs
- XML says it is deprecated -> retry with the JSON export

Whatever works is remembered in the registry for the next call.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from rich.console import Console

from indico_pipeline.exceptions import AgendaError, FormatDeprecated, MalformedResponse
from indico_pipeline.extractors.categories import parse_category_feed
from indico_pipeline.extractors.fetch import UrlFetcher
from indico_pipeline.extractors.parsers import parse_json_export, parse_markup
from indico_pipeline.extractors.site_registry import SiteRegistry
from indico_pipeline.locators.agenda import (
    build_category_url,
    build_conference_url,
    build_json_url,
    build_markup_url,
)
from indico_pipeline.models.agenda import Meeting
from indico_pipeline.models.location import AgendaEvent, AgendaLocation
from indico_pipeline.normalizers import MessageCallback, RawAgenda, normalize

console = Console()


class Dialect(str, Enum):
    LEGACY_MARKUP = "legacy_markup"
    MODERN_MARKUP = "modern_markup"
    JSON = "json"


@dataclass(frozen=True)
class Success:
    """The attempt produced a raw agenda."""
    raw: RawAgenda
    dialect: Dialect


@dataclass(frozen=True)
class RetryWith:
    """Worth trying again in another dialect; ``reason`` is raised if we can't."""
    dialect: Dialect
    reason: AgendaError


@dataclass(frozen=True)
class Fatal:
    """Give up and surface ``error`` as is."""
    error: AgendaError


Attempt = Union[Success, RetryWith, Fatal]


class ConferenceFetcher:
    """Fetches one conference (or category) and returns canonical models.

    Args:
        fetcher: Anything with ``async fetch(url) -> str``
        registry: Learned host capabilities; share one between fetchers to
            pool what they learn. A fresh seeded one is made if omitted.
        api_key: Indico API key, added to every request when set
        secret_key: Signs every request when set
        use_timestamp: Add a timestamp to signed requests
    """

    def __init__(
        self,
        fetcher: UrlFetcher,
        registry: Optional[SiteRegistry] = None,
        api_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        use_timestamp: bool = True,
    ):
        self.fetcher = fetcher
        self.registry = registry if registry is not None else SiteRegistry()
        self.api_key = api_key
        self.secret_key = secret_key
        self.use_timestamp = use_timestamp

    # ===== URLS =====

    def select_dialect(self, site: str) -> Dialect:
        """Best first guess for a host, from what the registry knows."""
        if self.registry.uses_json(site):
            return Dialect.JSON
        if self.registry.uses_modern_format(site):
            return Dialect.MODERN_MARKUP
        return Dialect.LEGACY_MARKUP

    def request_url(
        self,
        location: AgendaLocation,
        dialect: Dialect,
        when: Optional[datetime] = None,
    ) -> str:
        """Signed data URL for a conference in the given dialect."""
        keys = dict(
            api_key=self.api_key,
            secret_key=self.secret_key,
            use_timestamp=self.use_timestamp,
            when=when,
        )
        if dialect is Dialect.JSON:
            return build_json_url(location, **keys)
        return build_markup_url(location, dialect is Dialect.MODERN_MARKUP, **keys)

    def meeting_url(self, location: AgendaLocation) -> str:
        """Link a human can open for this conference."""
        return build_conference_url(location, self.registry.uses_modern_format(location.site))

    # ===== NEGOTIATION =====

    async def _attempt(self, location: AgendaLocation, dialect: Dialect) -> Attempt:
        url = self.request_url(location, dialect)
        console.print(f"[dim]Fetching {location} as {dialect.value}[/dim]")

        try:
            text = await self.fetcher.fetch(url)
        except AgendaError as e:
            return Fatal(e)

        if dialect is Dialect.JSON:
            try:
                raw = parse_json_export(text, url)
            except MalformedResponse as e:
                return Fatal(e)
            self.registry.record_uses_json(location.site)
            return Success(raw, dialect)

        try:
            conference = parse_markup(text, url)
        except MalformedResponse as e:
            if dialect is Dialect.LEGACY_MARKUP and not self.registry.uses_modern_format(location.site):
                return RetryWith(Dialect.MODERN_MARKUP, e)
            return Fatal(e)

        if dialect is Dialect.MODERN_MARKUP:
            self.registry.record_modern_format(location.site)

        if conference.deprecated:
            return RetryWith(
                Dialect.JSON,
                FormatDeprecated(f"{location.site} has retired the XML agenda view"),
            )
        return Success(conference, dialect)

    async def fetch_raw(self, location: AgendaLocation) -> RawAgenda:
        """Raw agenda in whichever dialect the host turns out to speak.

        Raises:
            FetchError: transport failure, never retried here
            MalformedResponse: nothing parsable in any dialect we could try
            FormatDeprecated: markup retired and no JSON fallback left
        """
        dialect = self.select_dialect(location.site)
        tried = {dialect}

        while True:
            result = await self._attempt(location, dialect)

            if isinstance(result, Success):
                return result.raw
            if isinstance(result, Fatal):
                raise result.error
            if result.dialect in tried:
                raise result.reason

            console.print(
                f"[dim]{location.site}: {result.reason} -> retrying as {result.dialect.value}[/dim]"
            )
            tried.add(result.dialect)
            dialect = result.dialect

    async def get_meeting(
        self,
        location: AgendaLocation,
        on_message: Optional[MessageCallback] = None,
    ) -> Meeting:
        """Fetch and normalize a conference."""
        raw = await self.fetch_raw(location)
        return normalize(raw, location.site, on_message)

    async def get_category(self, location: AgendaLocation, days_back: int = 0) -> list[AgendaEvent]:
        """Meetings listed in a category's iCal feed, ``days_back`` days into the past."""
        url = build_category_url(
            location,
            days_back,
            api_key=self.api_key,
            secret_key=self.secret_key,
            use_timestamp=self.use_timestamp,
        )
        text = await self.fetcher.fetch(url)
        return parse_category_feed(text, url)
