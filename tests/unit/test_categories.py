"""Tests for the category iCal feed parser."""

from datetime import datetime, timezone

import pytest
from indico_pipeline.exceptions import MalformedResponse
from indico_pipeline.extractors.categories import parse_category_feed


class TestParseCategoryFeed:
    """Tests for parse_category_feed."""

    def test_events(self, category_ics: str):
        events = parse_category_feed(category_ics)
        assert [e.title for e in events] == ["Weekly Analysis Meeting", "Legacy Workshop"]

    def test_locations(self, category_ics: str):
        modern, legacy = parse_category_feed(category_ics)
        assert modern.location.site == "indico.example.org"
        assert modern.location.identifier == "1234"
        assert legacy.location.identifier == "999"
        assert legacy.url == "http://indico.example.org/conferenceDisplay.py?confId=999"

    def test_times(self, category_ics: str):
        modern, _ = parse_category_feed(category_ics)
        assert modern.start == datetime(2015, 3, 20, 9, 0, tzinfo=timezone.utc)
        assert modern.end == datetime(2015, 3, 20, 10, 0, tzinfo=timezone.utc)

    def test_skips_non_conference_urls(self, category_ics: str, capsys):
        parse_category_feed(category_ics)
        assert "Room booking" in capsys.readouterr().out

    def test_empty_calendar(self):
        text = "BEGIN:VCALENDAR\r\nVERSION:2.0\r\nPRODID:-//test//EN\r\nEND:VCALENDAR\r\n"
        assert parse_category_feed(text) == []

    def test_not_ical(self):
        with pytest.raises(MalformedResponse):
            parse_category_feed("<html><body>Access denied</body></html>", url="https://x/export/categ/1.ics")
