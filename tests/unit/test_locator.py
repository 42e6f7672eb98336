"""Tests for agenda URL parsing and request URL building."""

from datetime import datetime, timezone

import pytest
from indico_pipeline.exceptions import InvalidParameter, LocatorError
from indico_pipeline.locators.agenda import (
    build_category_url,
    build_conference_url,
    build_json_url,
    build_markup_url,
    is_valid_category,
    parse_category,
    parse_conference,
)
from indico_pipeline.models.location import AgendaLocation

API_KEY = "00000000-0000-0000-0000-000000000000"
SECRET_KEY = "00000000-0000-0000-0000-000000000010"


class TestParseConference:
    """Tests for parse_conference."""

    @pytest.mark.parametrize("url", [
        "http://indico.example.org/conferenceDisplay.py?confId=14475",
        "http://indico.example.org/conferenceOtherViews.py?view=standard&confId=14475",
        "http://indico.example.org/conferenceTimeTable.py?confId=14475#20100622",
        "https://indico.example.org/conferenceDisplay.py?confid=14475",
        "http://indico.example.org/event/14475/",
        "http://indico.example.org/event/14475",
        "https://indico.example.org/event/14475/timetable/#20100622",
        "http://indico.example.org/conferenceDisplay.py?confId=14475\n",
    ])
    def test_all_shapes_same_location(self, url: str):
        """Every known URL shape reduces to the same triple."""
        location = parse_conference(url)
        assert location.site == "indico.example.org"
        assert location.subdirectory == ""
        assert location.identifier == "14475"

    @pytest.mark.parametrize("url,subdir", [
        ("http://www.example.edu/indico/conferenceDisplay.py?confId=3", "indico"),
        ("https://www.example.edu/indico/event/3/", "indico"),
        ("https://www.example.edu/a/b/event/3", "a/b"),
    ])
    def test_subdirectory(self, url: str, subdir: str):
        location = parse_conference(url)
        assert location.site == "www.example.edu"
        assert location.subdirectory == subdir
        assert location.identifier == "3"

    def test_alphanumeric_id(self):
        assert parse_conference("https://indico.cern.ch/event/a12345/").identifier == "a12345"

    @pytest.mark.parametrize("url", [
        "hi there",
        "",
        "ftp://indico.example.org/event/1",
        "https://indico.example.org/category/2636/",
    ])
    def test_unrecognized(self, url: str):
        with pytest.raises(LocatorError):
            parse_conference(url)


class TestParseCategory:
    """Tests for parse_category and is_valid_category."""

    @pytest.mark.parametrize("url", [
        "https://indico.example.org/export/categ/2636.ics",
        "https://indico.example.org/export/categ/2636.ics?from=-7d",
        "https://indico.example.org/category/2636/",
        "https://indico.example.org/category/2636",
        "http://indico.example.org/categoryDisplay.py?categId=2636",
        "http://indico.example.org/categoryDisplay.py?a=b&categId=2636&c=d",
    ])
    def test_all_shapes(self, url: str):
        location = parse_category(url)
        assert location.site == "indico.example.org"
        assert location.subdirectory == ""
        assert location.identifier == "2636"
        assert is_valid_category(url)

    def test_subdirectory(self):
        location = parse_category("https://www.example.edu/indico/category/12/")
        assert location.subdirectory == "indico"
        assert location.identifier == "12"

    @pytest.mark.parametrize("url", ["hi there", "https://indico.example.org/event/1/"])
    def test_unrecognized(self, url: str):
        assert not is_valid_category(url)
        with pytest.raises(LocatorError):
            parse_category(url)


class TestConferenceUrl:
    """Tests for the human-facing conference link."""

    def test_modern(self):
        location = AgendaLocation(site="indico.example.org", identifier="1234")
        assert build_conference_url(location, True) == "https://indico.example.org/event/1234"

    def test_legacy(self):
        location = AgendaLocation(site="indico.example.org", identifier="1234")
        assert build_conference_url(location, False) == (
            "http://indico.example.org/conferenceDisplay.py?confId=1234"
        )

    def test_subdirectory(self):
        location = AgendaLocation(site="www.example.edu", subdirectory="indico", identifier="9")
        assert build_conference_url(location, True) == "https://www.example.edu/indico/event/9"

    def test_round_trip(self):
        """Built links parse back to the same location."""
        location = AgendaLocation(site="www.example.edu", subdirectory="indico", identifier="9")
        for modern in (True, False):
            assert parse_conference(build_conference_url(location, modern)) == location


class TestDataUrls:
    """Tests for markup, JSON and category request URLs."""

    def test_legacy_markup(self):
        location = AgendaLocation(site="indico.example.org", identifier="1234")
        assert build_markup_url(location, False) == (
            "http://indico.example.org/conferenceOtherViews.py?confId=1234"
            "&detailLevel=contribution&fr=no&showDate=all&showSession=all&view=xml"
        )

    def test_modern_markup(self):
        location = AgendaLocation(site="indico.example.org", subdirectory="indico", identifier="1234")
        assert build_markup_url(location, True) == (
            "https://indico.example.org/indico/event/1234/other-view"
            "?detailLevel=contribution&fr=no&showDate=all&showSession=all&view=xml"
        )

    def test_json(self):
        location = AgendaLocation(site="indico.example.org", identifier="1234")
        assert build_json_url(location) == (
            "https://indico.example.org/export/event/1234.json?detail=sessions&nc=yes"
        )

    def test_json_with_api_key(self):
        location = AgendaLocation(site="indico.example.org", identifier="1234")
        assert build_json_url(location, api_key=API_KEY) == (
            f"https://indico.example.org/export/event/1234.json?apikey={API_KEY}&detail=sessions&nc=yes"
        )

    def test_category_no_days(self):
        location = AgendaLocation(site="indico.cern.ch", identifier="2636")
        assert build_category_url(location, 0) == "https://indico.cern.ch/export/categ/2636.ics"

    def test_category_days_back(self):
        location = AgendaLocation(site="indico.cern.ch", identifier="2636")
        assert build_category_url(location, 7) == "https://indico.cern.ch/export/categ/2636.ics?from=-7d"

    def test_category_signed(self):
        location = AgendaLocation(site="indico.cern.ch", identifier="2636")
        url = build_category_url(
            location,
            7,
            api_key=API_KEY,
            secret_key=SECRET_KEY,
            when=datetime.fromtimestamp(1426720253, timezone.utc),
        )
        assert url.startswith(
            f"https://indico.cern.ch/export/categ/2636.ics?apikey={API_KEY}&from=-7d&timestamp=1426720253&signature="
        )

    def test_category_negative_days(self):
        location = AgendaLocation(site="indico.cern.ch", identifier="2636")
        with pytest.raises(InvalidParameter):
            build_category_url(location, -1)

    def test_negative_days_is_value_error(self):
        location = AgendaLocation(site="indico.cern.ch", identifier="2636")
        with pytest.raises(ValueError):
            build_category_url(location, -5)


class TestAgendaLocation:
    """Tests for the location model helpers."""

    def test_from_conference_id(self):
        location = AgendaLocation.from_conference_id(1234)
        assert location.site == "indico.cern.ch"
        assert location.identifier == "1234"
        assert location.subdirectory == ""

    def test_str(self):
        location = AgendaLocation(site="indico.example.org", identifier="1")
        assert str(location) == "Agenda at indico.example.org with id 1"

    def test_frozen(self):
        location = AgendaLocation(site="indico.example.org", identifier="1")
        with pytest.raises(Exception):
            location.identifier = "2"
