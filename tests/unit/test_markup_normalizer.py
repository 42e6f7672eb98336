"""Tests for legacy XML -> Meeting normalization."""

from datetime import datetime

import pytest
from indico_pipeline.extractors.parsers import parse_markup
from indico_pipeline.models.agenda import Meeting, Talk, TalkKind, same_talk
from indico_pipeline.models.raw import RawConference, RawContribution, RawSpeakerName
from indico_pipeline.normalizers import normalize
from indico_pipeline.normalizers.markup import normalize_markup, speaker_name


@pytest.fixture
def single_meeting(single_session_xml: str) -> Meeting:
    return normalize_markup(parse_markup(single_session_xml), "indico.example.org")


@pytest.fixture
def sessions_meeting(sessions_xml: str) -> Meeting:
    return normalize_markup(parse_markup(sessions_xml), "indico.example.org")


class TestSingleSessionMeeting:
    """A meeting without <session> elements."""

    def test_header(self, single_meeting: Meeting):
        assert single_meeting.id == "1234"
        assert single_meeting.title == "Weekly Analysis Meeting"
        assert single_meeting.site == "indico.example.org"
        assert single_meeting.start == datetime(2015, 3, 18, 9, 0)
        assert single_meeting.end == datetime(2015, 3, 18, 11, 0)

    def test_one_session_mirrors_header(self, single_meeting: Meeting):
        assert len(single_meeting.sessions) == 1
        session = single_meeting.sessions[0]
        assert session.id == "0"
        assert session.title == single_meeting.title
        assert session.start == single_meeting.start
        assert session.end == single_meeting.end
        assert [t.id for t in session.talks] == ["0", "1", "2"]

    def test_best_material(self, single_meeting: Meeting):
        intro = single_meeting.sessions[0].talks[0]
        assert intro.best_material_extension == ".pptx"
        assert intro.best_material_display_name == "intro"
        assert "resId=1" in intro.best_material_url
        assert len(intro.all_material) == 2
        assert {m.extension for m in intro.all_material} == {".pdf", ".pptx"}

    def test_speakers(self, single_meeting: Meeting):
        intro = single_meeting.sessions[0].talks[0]
        assert intro.speakers == ["Gordon T. Watts", "Ada Lovelace"]

    def test_missing_material(self, single_meeting: Meeting):
        status = single_meeting.sessions[0].talks[1]
        assert status.best_material_url is None
        assert status.best_material_display_name == ""
        assert status.best_material_extension == ""
        assert status.all_material == []
        assert status.sub_talks is None

    def test_sanitized_material(self, single_meeting: Meeting):
        round_table = single_meeting.sessions[0].talks[2]
        assert round_table.best_material_url == "http://indico.example.org/files/notesdraft.ps"
        assert round_table.best_material_display_name == "draft"
        assert round_table.best_material_extension == ".ps"

    def test_sub_talks(self, single_meeting: Meeting):
        round_table = single_meeting.sessions[0].talks[2]
        assert len(round_table.sub_talks) == 1
        part = round_table.sub_talks[0]
        assert part.id == "2a"
        assert part.best_material_url == "http://indico.example.org/files/part1.ppt"
        assert part.start == datetime(1970, 1, 1)

    def test_meeting_material(self, single_meeting: Meeting):
        assert len(single_meeting.meeting_talks) == 1
        minutes = single_meeting.meeting_talks[0]
        assert minutes.kind == TalkKind.EXTRA_MATERIAL
        assert minutes.best_material_url is None
        assert [t.best_material_extension for t in minutes.sub_talks] == [".pdf"]
        assert single_meeting.sessions[0].session_material == single_meeting.meeting_talks

    def test_missing_material_reported(self, single_session_xml: str):
        messages = []
        normalize_markup(
            parse_markup(single_session_xml),
            "indico.example.org",
            on_message=lambda category, text: messages.append((category, text)),
        )
        assert messages == [("MissingMaterial", "No usable talk slides or poster found for Status report")]


class TestMeetingWithSessions:
    """A conference with sessions and top-level contributions."""

    def test_session_layout(self, sessions_meeting: Meeting):
        assert [s.id for s in sessions_meeting.sessions] == ["s1", "s2", "-1", "-1", "-1"]

    def test_defined_sessions_keep_talk_order(self, sessions_meeting: Meeting):
        assert [t.id for t in sessions_meeting.sessions[0].talks] == ["t-b", "t-a"]

    def test_orphans(self, sessions_meeting: Meeting):
        ad_hoc = sessions_meeting.sessions[2:]
        assert [[t.id for t in s.talks] for s in ad_hoc] == [["o3", "o1"], ["o2"], ["o4"]]
        assert all(s.title == "<ad-hoc session>" for s in ad_hoc)
        assert ad_hoc[0].start == datetime(2015, 3, 18, 8, 0)
        assert ad_hoc[0].end == datetime(2015, 3, 18, 9, 30)

    def test_session_material(self, sessions_meeting: Meeting):
        poster = sessions_meeting.sessions[0].session_material
        assert len(poster) == 1
        assert poster[0].title == "Poster"
        assert poster[0].sub_talks[0].best_material_url == "http://indico.example.org/files/poster.pdf"

    def test_all_talks(self, sessions_meeting: Meeting):
        assert len(sessions_meeting.all_talks()) == 7


class TestSmallCases:
    """Edge cases built directly from raw models."""

    def test_empty_meeting(self):
        meeting = normalize_markup(RawConference(id="1", title="Empty"), "indico.example.org")
        assert len(meeting.sessions) == 1
        assert meeting.sessions[0].talks == []
        assert meeting.start == datetime(1970, 1, 1)
        assert meeting.meeting_talks == []

    def test_dispatch(self):
        meeting = normalize(RawConference(id="1", title="x"), "indico.example.org")
        assert meeting.id == "1"

    def test_empty_subcontributions_become_none(self):
        raw = RawConference(id="1", contributions=[RawContribution(id="c", title="t", subcontributions=[])])
        assert normalize_markup(raw, "s").sessions[0].talks[0].sub_talks is None

    @pytest.mark.parametrize("name,expected", [
        (RawSpeakerName(first="Gordon", middle="T.", last="Watts"), "Gordon T. Watts"),
        (RawSpeakerName(first="Ada", last="Lovelace"), "Ada Lovelace"),
        (RawSpeakerName(last="Curie"), "Curie"),
        (RawSpeakerName(first="Plato"), "Plato"),
        (RawSpeakerName(), ""),
    ])
    def test_speaker_name(self, name: RawSpeakerName, expected: str):
        assert speaker_name(name) == expected


class TestSameTalk:
    """Tests for the deduplication identity."""

    def test_ignores_title_and_times(self):
        first = Talk(id="1", title="a", start=datetime(2015, 1, 1), end=datetime(2015, 1, 1), best_material_url="u")
        second = Talk(id="1", title="b", start=datetime(2016, 1, 1), end=datetime(2016, 1, 1), best_material_url="u")
        assert same_talk(first, second)

    def test_different_material(self):
        first = Talk(id="1", start=datetime(2015, 1, 1), end=datetime(2015, 1, 1), best_material_url="u")
        second = Talk(id="1", start=datetime(2015, 1, 1), end=datetime(2015, 1, 1), best_material_url="v")
        assert not same_talk(first, second)

    def test_none(self):
        talk = Talk(id="1", start=datetime(2015, 1, 1), end=datetime(2015, 1, 1))
        assert same_talk(None, None)
        assert not same_talk(talk, None)
        assert not same_talk(None, talk)
