"""JSON export -> Meeting."""

from typing import Optional

from indico_pipeline.models.agenda import Meeting, Session, Talk
from indico_pipeline.models.raw import (
    RawJsonContribution,
    RawJsonEvent,
    RawJsonPerson,
    RawJsonSession,
    RawJsonSubContribution,
)
from indico_pipeline.normalizers.dates import parse_json_date
from indico_pipeline.normalizers.materials import (
    MessageCallback,
    best_material_fields,
    json_extra_material,
    json_talk_materials,
)
from indico_pipeline.normalizers.sessions import by_start, group_by_session_name
from indico_pipeline.signing.timecodec import EPOCH_ZERO_UTC

SINGLE_SESSION_ID = "0"


def _speakers(people: list[RawJsonPerson]) -> list[str]:
    return [p.fullName for p in people if p.fullName]


def normalize_sub_contribution(
    sub: RawJsonSubContribution,
    on_message: Optional[MessageCallback] = None,
) -> Talk:
    # The export gives sub-contributions no times of their own
    title = sub.title or ""
    materials = json_talk_materials(sub.folders)
    return Talk(
        id=sub.id,
        title=title,
        start=EPOCH_ZERO_UTC,
        end=EPOCH_ZERO_UTC,
        speakers=_speakers(sub.speakers),
        all_material=materials,
        **best_material_fields(materials, title, on_message),
    )


def normalize_json_contribution(
    contrib: RawJsonContribution,
    on_message: Optional[MessageCallback] = None,
) -> Talk:
    title = contrib.title or ""
    materials = json_talk_materials(contrib.folders)
    sub_talks = [normalize_sub_contribution(s, on_message) for s in contrib.subContributions]
    return Talk(
        id=contrib.id,
        title=title,
        start=parse_json_date(contrib.startDate),
        end=parse_json_date(contrib.endDate),
        speakers=_speakers(contrib.speakers),
        sub_talks=sub_talks or None,
        all_material=materials,
        **best_material_fields(materials, title, on_message),
    )


def normalize_json_session(
    session: RawJsonSession,
    on_message: Optional[MessageCallback] = None,
) -> Session:
    folders = session.session.folders if session.session is not None else []
    return Session(
        id=session.id,
        title=session.title or "",
        start=parse_json_date(session.startDate),
        end=parse_json_date(session.endDate),
        talks=by_start([normalize_json_contribution(c, on_message) for c in session.contributions]),
        session_material=json_extra_material(folders),
    )


def normalize_json(
    raw: RawJsonEvent,
    site: str,
    on_message: Optional[MessageCallback] = None,
) -> Meeting:
    """Build the canonical Meeting from one JSON export result.

    Defined sessions map one to one. Top-level contributions are grouped by
    the session name they carry; if that is the only structure there is
    (no defined sessions, a single group) the meeting gets one session "0"
    mirroring the header, like a plain markup meeting.
    """
    title = raw.title.strip()
    start = parse_json_date(raw.startDate)
    end = parse_json_date(raw.endDate)

    defined = [normalize_json_session(s, on_message) for s in raw.sessions]
    named_talks = [
        (c.session, normalize_json_contribution(c, on_message))
        for c in raw.contributions
    ]

    group_names = {name or "" for name, _ in named_talks}
    if not defined and len(group_names) <= 1:
        sessions = [
            Session(
                id=SINGLE_SESSION_ID,
                title=title,
                start=start,
                end=end,
                talks=by_start([talk for _, talk in named_talks]),
            )
        ]
    else:
        sessions = defined + group_by_session_name(named_talks, EPOCH_ZERO_UTC)

    sessions = [
        s if s.title else s.model_copy(update={"title": title})
        for s in sessions
    ]

    return Meeting(
        id=raw.id,
        title=title,
        site=site,
        start=start,
        end=end,
        sessions=sorted(sessions, key=lambda s: s.start),
        meeting_talks=json_extra_material(raw.folders),
    )
