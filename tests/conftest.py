"""Shared test fixtures and configuration."""

from pathlib import Path
from typing import Union

import pytest
from indico_pipeline.extractors.site_registry import SiteRegistry
from indico_pipeline.models.location import AgendaLocation

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> str:
    """Text of a file under tests/fixtures."""
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


class FakeFetcher:
    """UrlFetcher stand-in routing on URL fragments.

    ``routes`` maps a substring of the URL to either the body to return or an
    exception to raise. The first matching fragment wins. Every URL asked for
    is recorded in ``requested``.
    """

    def __init__(self, routes: dict[str, Union[str, Exception]]):
        self.routes = routes
        self.requested: list[str] = []

    async def fetch(self, url: str) -> str:
        self.requested.append(url)
        for fragment, response in self.routes.items():
            if fragment in url:
                if isinstance(response, Exception):
                    raise response
                return response
        raise AssertionError(f"Unexpected URL requested: {url}")


@pytest.fixture
def registry() -> SiteRegistry:
    """Registry seeded with the default sites."""
    return SiteRegistry()


@pytest.fixture
def empty_registry() -> SiteRegistry:
    """Registry that knows nothing about any host."""
    return SiteRegistry(modern_sites=frozenset(), json_sites=frozenset())


@pytest.fixture
def example_location() -> AgendaLocation:
    """Conference 1234 on a host absent from the default registry."""
    return AgendaLocation(site="indico.example.org", identifier="1234")


@pytest.fixture
def single_session_xml() -> str:
    return read_fixture("single_session.xml")


@pytest.fixture
def sessions_xml() -> str:
    return read_fixture("sessions_orphans.xml")


@pytest.fixture
def deprecated_xml() -> str:
    return read_fixture("deprecated.xml")


@pytest.fixture
def event_json() -> str:
    return read_fixture("event_export.json")


@pytest.fixture
def category_ics() -> str:
    return read_fixture("category.ics")


@pytest.fixture
def fake_fetcher():
    """Factory: ``fake_fetcher({"fragment": "body"})``."""
    return FakeFetcher
